"""
Deck persistence for the Tether CLI.

The engine never reads or writes storage itself; callers load a snapshot,
run engine functions, and save what came back. This module is that caller
side for a single JSON deck file:

    {
      "items": [ {"id": ..., "nextReview": ..., ...}, ... ],
      "pattern": { ...StudyPattern... },
      "reminders": { ...ReminderState... }
    }

A file holding a bare JSON list is read as the items array.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from loguru import logger
from pydantic import ValidationError

from tether.core.errors import DeckStoreError
from tether.core.models import Item, ReminderState, StudyPattern, parse_item


class ItemRepository(Protocol):
    """What a caller needs to feed items to the engine and keep the results."""

    def load_items(self) -> list[Item]: ...

    def save_items(self, items: Iterable[Item]) -> None: ...


class DeckStore:
    """
    JSON-file deck storage.

    Every save rewrites the whole file; sections that are not being saved
    are carried over as they were on disk.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    # =========================================================================
    # ITEMS
    # =========================================================================

    def load_items(self) -> list[Item]:
        """Load every item; records that cannot be scheduled raise MalformedItemState."""
        records = self._read().get("items", [])
        if not isinstance(records, list):
            raise DeckStoreError(f"{self.path}: 'items' must be a list")
        return [parse_item(record) for record in records]

    def save_items(self, items: Iterable[Item]) -> None:
        data = self._read()
        data["items"] = [item.to_wire() for item in items]
        self._write(data)

    def upsert_items(self, updated: Iterable[Item]) -> list[Item]:
        """
        Replace stored items by id, appending unknown ids.

        Returns:
            The full item list as saved
        """
        by_id = {item.id: item for item in updated}
        merged = []
        for item in self.load_items():
            merged.append(by_id.pop(item.id, item))
        merged.extend(by_id.values())
        self.save_items(merged)
        return merged

    # =========================================================================
    # PATTERN / REMINDERS
    # =========================================================================

    def load_pattern(self) -> StudyPattern:
        """Stored study pattern, or the defaults when none is saved yet."""
        return self._load_section("pattern", StudyPattern)

    def save_pattern(self, pattern: StudyPattern) -> None:
        data = self._read()
        data["pattern"] = pattern.to_wire()
        self._write(data)

    def load_reminders(self) -> ReminderState:
        return self._load_section("reminders", ReminderState)

    def save_reminders(self, state: ReminderState) -> None:
        data = self._read()
        data["reminders"] = state.to_wire()
        self._write(data)

    # =========================================================================
    # FILE I/O
    # =========================================================================

    def _load_section(self, key: str, model: type[StudyPattern] | type[ReminderState]) -> Any:
        raw = self._read().get(key)
        if raw is None:
            return model()
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise DeckStoreError(f"{self.path}: invalid '{key}' section: {e}") from e

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"items": []}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DeckStoreError(f"Cannot read deck {self.path}: {e}") from e

        if isinstance(data, list):
            return {"items": data}
        if not isinstance(data, dict):
            raise DeckStoreError(f"{self.path}: expected a JSON object or list")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise DeckStoreError(f"Cannot write deck {self.path}: {e}") from e
        logger.debug(f"Saved deck {self.path}")
