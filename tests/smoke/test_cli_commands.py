"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent

NOW = "2024-03-06T12:00:00+00:00"


def run_cli_command(command: str, timeout: int = 30, input_text: str | None = None) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m tether.cli.main')
        timeout: Maximum time to wait
        input_text: Text fed to stdin for interactive commands

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m tether.cli.main {command}"

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        input=input_text,
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def deck(tmp_path):
    """Deck file with two new cards and one overdue reviewed card."""
    path = tmp_path / "deck.json"
    path.write_text(
        json.dumps(
            {
                "items": [
                    {"id": "osi", "repetitions": 0, "interval": 1, "easeFactor": 2.5,
                     "nextReview": "2024-03-06T08:00:00Z", "front": "OSI layers?", "back": "7"},
                    {"id": "tcp", "repetitions": 0, "nextReview": "2024-03-06T08:00:00Z"},
                    {"id": "arp", "repetitions": 3, "interval": 15, "easeFactor": 2.4,
                     "nextReview": "2024-03-01T08:00:00Z", "streak": 3},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


def load(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "tether" in stdout.lower()
        assert "Commands" in stdout

    @pytest.mark.parametrize(
        "command", ["add", "due", "stats", "grade", "review", "plan", "recommend", "remind", "reset"]
    )
    def test_command_help(self, command):
        code, stdout, stderr = run_cli_command(f"{command} --help")

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIDeck:
    """Test commands that only read or add cards."""

    def test_add(self, tmp_path):
        path = tmp_path / "new-deck.json"

        code, stdout, stderr = run_cli_command(f'add vlan -D "{path}" -f "What is a VLAN?" --now {NOW}')

        assert code == 0, f"Add failed: {stderr}"
        assert load(path)["items"][0]["id"] == "vlan"
        assert load(path)["items"][0]["front"] == "What is a VLAN?"

    def test_add_duplicate(self, deck):
        code, stdout, stderr = run_cli_command(f'add osi -D "{deck}"')
        assert code == 1

    def test_due(self, deck):
        code, stdout, stderr = run_cli_command(f'due -D "{deck}" --now {NOW}')

        assert code == 0, f"Due failed: {stderr}"
        assert "arp" in stdout
        assert "osi" in stdout

    def test_nothing_due(self, deck):
        code, stdout, stderr = run_cli_command(f'due -D "{deck}" --now 2024-01-01T00:00:00Z')

        assert code == 0
        assert "No cards due" in stdout

    def test_stats(self, deck):
        code, stdout, stderr = run_cli_command(f'stats -D "{deck}" --now {NOW}')

        assert code == 0, f"Stats failed: {stderr}"
        assert "Total Cards" in stdout
        assert "Mature" in stdout

    def test_bad_now(self, deck):
        code, stdout, stderr = run_cli_command(f'due -D "{deck}" --now yesterday')
        assert code != 0

    def test_corrupt_deck(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops", encoding="utf-8")

        code, stdout, stderr = run_cli_command(f'due -D "{path}"')

        assert code == 1
        assert "Cannot read deck" in stdout


class TestCLIStudy:
    """Test commands that change card state."""

    def test_grade(self, deck):
        code, stdout, stderr = run_cli_command(f'grade arp good -D "{deck}" --now {NOW}')

        assert code == 0, f"Grade failed: {stderr}"
        arp = next(item for item in load(deck)["items"] if item["id"] == "arp")
        assert arp["repetitions"] == 4
        assert arp["interval"] == 36
        assert arp["lastQuality"] == 2

    def test_grade_unknown_card(self, deck):
        code, stdout, stderr = run_cli_command(f'grade nope good -D "{deck}"')
        assert code == 1

    def test_reset(self, deck):
        code, stdout, stderr = run_cli_command(f'reset arp -D "{deck}" --now {NOW}')

        assert code == 0, f"Reset failed: {stderr}"
        arp = next(item for item in load(deck)["items"] if item["id"] == "arp")
        assert arp["repetitions"] == 0

    def test_review_session(self, deck):
        code, stdout, stderr = run_cli_command(
            f'review -D "{deck}" --now {NOW}', input_text="good\nagain\neasy\n"
        )

        assert code == 0, f"Review failed: {stderr}"
        assert "Session Summary" in stdout

        data = load(deck)
        assert all(item.get("lastReviewed") for item in data["items"])
        assert data["pattern"]["studyStreak"] == 1
        assert data["reminders"]["totalStudyDays"] == 1

    def test_review_quit_early(self, deck):
        code, stdout, stderr = run_cli_command(f'review -D "{deck}" --now {NOW}', input_text="good\nq\n")

        assert code == 0, f"Review failed: {stderr}"
        reviewed = [item["id"] for item in load(deck)["items"] if item.get("lastReviewed")]
        assert reviewed == ["arp"]


class TestCLIPlanning:
    """Test plan, recommend and remind."""

    def test_plan(self, deck):
        code, stdout, stderr = run_cli_command(f'plan -D "{deck}" --now {NOW}')

        assert code == 0, f"Plan failed: {stderr}"
        assert "Study Plan" in stdout
        assert "review" in stdout

    def test_recommend(self, deck):
        code, stdout, stderr = run_cli_command(f'recommend -D "{deck}" --now {NOW}')

        assert code == 0, f"Recommend failed: {stderr}"
        assert "Cards Due for Review" in stdout

    def test_remind(self, deck):
        code, stdout, stderr = run_cli_command(f'remind -D "{deck}" --now 2024-03-06T09:00:00Z')

        assert code == 0, f"Remind failed: {stderr}"
        assert load(deck)["reminders"]["reminderCount"] == 1
