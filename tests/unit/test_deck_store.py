"""
Unit tests for the JSON deck store.

Uses tmp_path so nothing touches the real data directory.
"""

import json

import pytest

from tether.core.errors import DeckStoreError, MalformedItemState
from tether.core.models import ReminderState, StudyPattern, new_item
from tether.storage.deck_store import DeckStore
from tether.study.sm2 import advance


@pytest.fixture
def store(tmp_path):
    return DeckStore(tmp_path / "decks" / "networking.json")


class TestItems:
    def test_missing_file_is_empty_deck(self, store):
        assert store.load_items() == []

    def test_save_and_load(self, store, now):
        card = new_item("osi", now, front="OSI layers?", back="7")

        store.save_items([card])
        loaded = store.load_items()

        assert len(loaded) == 1
        assert loaded[0].model_dump() == card.model_dump()
        assert loaded[0].content["front"] == "OSI layers?"

    def test_wire_format_is_camel_case(self, store, now):
        store.save_items([advance(new_item("osi", now), 2, now).item])

        record = json.loads(store.path.read_text(encoding="utf-8"))["items"][0]

        assert record["easeFactor"] == 2.5
        assert record["lastQuality"] == 2
        assert "nextReview" in record
        assert "ease_factor" not in record

    def test_bare_list_file(self, store, now):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps([{"id": "a", "nextReview": now.isoformat(), "repetitions": 2}]),
            encoding="utf-8",
        )

        items = store.load_items()

        assert items[0].id == "a"
        assert items[0].repetitions == 2

    def test_upsert_replaces_and_appends(self, store, now):
        first, second = new_item("a", now), new_item("b", now)
        store.save_items([first, second])

        reviewed = advance(first, 3, now).item
        merged = store.upsert_items([reviewed, new_item("c", now)])

        assert [item.id for item in merged] == ["a", "b", "c"]
        assert store.load_items()[0].last_quality == 3

    def test_record_without_next_review(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"items": [{"id": "broken"}]}), encoding="utf-8")

        with pytest.raises(MalformedItemState):
            store.load_items()

    def test_invalid_json(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DeckStoreError):
            store.load_items()


class TestSections:
    def test_defaults_when_absent(self, store):
        assert store.load_pattern() == StudyPattern()
        assert store.load_reminders() == ReminderState()

    def test_sections_survive_item_saves(self, store, now):
        store.save_pattern(StudyPattern(study_streak=4, last_study_date=now))
        store.save_reminders(ReminderState(streak_count=4))
        store.save_items([new_item("a", now)])

        assert store.load_pattern().study_streak == 4
        assert store.load_pattern().last_study_date == now
        assert store.load_reminders().streak_count == 4

    def test_invalid_section(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps({"items": [], "pattern": {"preferredStudyTimes": ["25:99"]}}),
            encoding="utf-8",
        )

        with pytest.raises(DeckStoreError):
            store.load_pattern()
