"""
Tether CLI - Terminal front end for the scheduling engine.

Works against a single JSON deck file. The CLI is the caller the engine
expects: it reads the clock, loads the deck, runs engine functions, and saves
what they return.

Usage:
    tether add card-1 --front "Q" --back "A"
    tether due                      # Cards due now
    tether review -n 10             # Interactive study session
    tether grade card-1 good
    tether plan                     # Next session plan
    tether recommend                # Study recommendations
    tether stats -D networking.json # Deck statistics

Every command accepts --deck (default: TETHER_DECK_PATH) and --now (ISO-8601)
to evaluate the deck at a fixed time.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import get_settings
from tether.core.errors import TetherError
from tether.core.models import Item, Rating, new_item
from tether.storage.deck_store import DeckStore, ItemRepository
from tether.study.grader import quality_from_rating
from tether.study.planner import StudyPlanner
from tether.study.reminders import (
    is_reminder_due,
    mark_reminder_sent,
    motivation_message,
    record_study_day,
    streak_celebration,
)
from tether.study.selector import classify, get_due
from tether.study.session_manager import SessionManager
from tether.study.sm2 import SM2Scheduler
from tether.study.stats import get_item_schedule, get_study_stats, summarize_session, tier_breakdown

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="tether",
    help="Tether - spaced-repetition study scheduler",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

DeckOpt = Annotated[
    Path | None, typer.Option("--deck", "-D", help="Deck JSON file (default: TETHER_DECK_PATH)")
]
NowOpt = Annotated[
    str | None, typer.Option("--now", help="Evaluate at this ISO-8601 time instead of the clock")
]


def _resolve_now(value: str | None) -> datetime:
    """Local wall clock, or the --now value; naive values are read as local time."""
    if value is None:
        return datetime.now().astimezone()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not an ISO-8601 timestamp: {value}", param_hint="--now")
    return parsed if parsed.tzinfo else parsed.astimezone()


def _store(deck: Path | None) -> DeckStore:
    return DeckStore(deck or get_settings().deck_path)


@contextmanager
def _errors() -> Iterator[None]:
    """Turn engine and storage errors into a message and exit code 1."""
    try:
        yield
    except TetherError as e:
        console.print(f"[red]✗ {escape(e.message)}[/]")
        raise typer.Exit(1)


def _find_card(repository: ItemRepository, item_id: str) -> Item:
    """Look up one card, exiting with code 1 when the deck has no such id."""
    card = next((item for item in repository.load_items() if item.id == item_id), None)
    if card is None:
        console.print(f"[red]Card {escape(item_id)} not found[/]")
        raise typer.Exit(1)
    return card


def _front(item: Item) -> str:
    return escape(str(item.content.get("front", item.id)))


# =============================================================================
# Deck Commands
# =============================================================================


@app.command()
def add(
    item_id: Annotated[str, typer.Argument(help="Id of the new card")],
    deck: DeckOpt = None,
    front: Annotated[str, typer.Option("--front", "-f", help="Prompt side")] = "",
    back: Annotated[str, typer.Option("--back", "-b", help="Answer side")] = "",
    difficulty: Annotated[
        str, typer.Option("--difficulty", "-d", help="easy, medium or hard")
    ] = "medium",
    now: NowOpt = None,
) -> None:
    """Add a new, never-reviewed card to the deck."""
    with _errors():
        store = _store(deck)
        items = store.load_items()
        if any(item.id == item_id for item in items):
            console.print(f"[red]Card {item_id} already exists[/]")
            raise typer.Exit(1)

        card = new_item(
            item_id,
            _resolve_now(now),
            ease_factor=get_settings().initial_ease_factor,
            front=front,
            back=back,
            difficulty=difficulty,
        )
        store.save_items([*items, card])
    console.print(f"[green]✓ Added {item_id} ({len(items) + 1} cards)[/]")


@app.command()
def due(deck: DeckOpt = None, now: NowOpt = None) -> None:
    """List cards due for review, earliest first."""
    at = _resolve_now(now)
    with _errors():
        items = _store(deck).load_items()

    due_items = get_due(items, at)
    if not due_items:
        console.print("[yellow]No cards due for review. Great job! 🎉[/]")
        return

    table = Table(title=f"{len(due_items)} Cards Due")
    table.add_column("Card", style="cyan")
    table.add_column("Front")
    table.add_column("Tier", style="magenta")
    table.add_column("Interval", justify="right")
    table.add_column("Days", justify="right")
    for item in due_items:
        schedule = get_item_schedule(item, at)
        table.add_row(
            item.id,
            _front(item),
            schedule.tier.value,
            f"{schedule.interval}d",
            str(schedule.days_until_review),
        )
    console.print(table)


@app.command()
def stats(deck: DeckOpt = None, now: NowOpt = None) -> None:
    """Show deck statistics and the maturity breakdown."""
    at = _resolve_now(now)
    with _errors():
        items = _store(deck).load_items()

    result = get_study_stats(items, at)

    table = Table(title="Deck Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total Cards", str(result.total_cards))
    table.add_row("Due", str(result.due_cards))
    table.add_row("New", str(result.new_cards))
    table.add_row("In Review", str(result.review_cards))
    table.add_row("Average Ease", f"{result.average_ease_factor:.2f}")
    table.add_row("Average Interval", f"{result.average_interval:.2f}d")
    table.add_row("Longest Streak", str(result.longest_streak))
    table.add_row("Total Reviews", str(result.total_reviews))
    table.add_row("Accuracy", f"{result.accuracy_rate:.1f}%")
    console.print(table)

    tiers = Table(title="Maturity")
    tiers.add_column("Tier", style="magenta")
    tiers.add_column("Cards", justify="right")
    for tier, count in tier_breakdown(items).items():
        tiers.add_row(tier.value, str(count))
    console.print(tiers)


@app.command()
def reset(
    item_id: Annotated[str, typer.Argument(help="Card to reset")],
    deck: DeckOpt = None,
    now: NowOpt = None,
) -> None:
    """Forget a card's review history."""
    with _errors():
        store = _store(deck)
        card = _find_card(store, item_id)
        store.upsert_items([SM2Scheduler().reset_item(card, _resolve_now(now))])
    console.print(f"[green]✓ Reset {item_id}[/]")


# =============================================================================
# Study Commands
# =============================================================================


@app.command()
def grade(
    item_id: Annotated[str, typer.Argument(help="Card to grade")],
    rating: Annotated[str, typer.Argument(help="again, hard, good or easy")],
    deck: DeckOpt = None,
    now: NowOpt = None,
) -> None:
    """Grade a single card outside of a session."""
    at = _resolve_now(now)
    with _errors():
        store = _store(deck)
        card = _find_card(store, item_id)

        result = SM2Scheduler().advance(card, quality_from_rating(rating), at)
        store.upsert_items([result.item])

    console.print(
        f"[green]✓ {item_id}[/] next review in {result.interval}d "
        f"({result.next_review:%Y-%m-%d %H:%M}), ease {result.ease_factor:.2f}, "
        f"tier {classify(result.item).value}"
    )


@app.command()
def review(
    deck: DeckOpt = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Maximum cards in the session")
    ] = None,
    now: NowOpt = None,
) -> None:
    """
    Run an interactive study session.

    Due cards come first, then new cards. Type q at a rating prompt to stop
    early; graded cards are saved either way.
    """
    with _errors():
        store = _store(deck)
        items = store.load_items()
        manager = SessionManager()

        session = manager.create_session(items, _resolve_now(now), max_size=limit)
        if session.total_cards == 0:
            console.print("[yellow]Nothing to study right now. Great job! 🎉[/]")
            return

        console.print(
            Panel(
                f"[bold cyan]TETHER STUDY SESSION[/]\n"
                f"Cards: {session.total_cards}\n"
                f"Due: {len(session.due_items)}",
                border_style="cyan",
            )
        )

        choices = [rating.value for rating in Rating] + ["q"]
        for index, item_id in enumerate(session.item_ids, 1):
            card = session.find_item(item_id)
            console.print(f"\n[cyan]{index}/{session.total_cards}[/] {_front(card)}")
            if card.content.get("back"):
                console.print(f"[dim]{escape(str(card.content['back']))}[/]")
            answer = Prompt.ask("Rating", choices=choices, default="good", console=console)
            if answer == "q":
                break
            session = manager.grade_item(session, item_id, answer, _resolve_now(now))

        finished_at = _resolve_now(now)
        session = manager.finish_session(session, finished_at)
        summary = summarize_session(session)

        if session.completed_items:
            latest = {item.id: item for item in session.completed_items}
            store.upsert_items(latest.values())

            planner = StudyPlanner()
            pattern = planner.update_pattern_after_session(
                store.load_pattern(),
                cards_studied=summary.cards_completed,
                duration_minutes=max(summary.duration_minutes or 0.0, 0.0),
                now=finished_at,
            )
            store.save_pattern(pattern)
            reminders = record_study_day(store.load_reminders(), finished_at)
            store.save_reminders(reminders)

            celebration = streak_celebration(reminders)
            if celebration:
                console.print(f"\n{celebration.emoji} [bold green]{celebration.title}[/]")

    table = Table(title="Session Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Cards Graded", f"{summary.cards_completed}/{summary.total_cards}")
    table.add_row("Correct", str(summary.correct_answers))
    table.add_row("Accuracy", f"{summary.accuracy_percent:.0f}%")
    console.print(table)


# =============================================================================
# Planning Commands
# =============================================================================


@app.command()
def plan(deck: DeckOpt = None, now: NowOpt = None) -> None:
    """Show the next recommended study session."""
    at = _resolve_now(now)
    with _errors():
        store = _store(deck)
        session_plan = StudyPlanner().build_session_plan(store.load_items(), store.load_pattern(), at)

    console.print(
        Panel(
            f"Type: [bold]{session_plan.session_type.value}[/]\n"
            f"Priority: {session_plan.priority.value}\n"
            f"When: {session_plan.scheduled_for:%a %Y-%m-%d %H:%M}\n"
            f"Cards: {len(session_plan.card_ids)}\n"
            f"Duration: ~{session_plan.estimated_duration} min\n"
            f"Difficulty: {session_plan.difficulty}\n"
            f"Target accuracy: {session_plan.goals.target_accuracy:.0f}%",
            title="[bold]Study Plan[/bold]",
            border_style="blue",
        )
    )


@app.command()
def recommend(deck: DeckOpt = None, now: NowOpt = None) -> None:
    """List study recommendations for the deck."""
    at = _resolve_now(now)
    with _errors():
        store = _store(deck)
        recommendations = StudyPlanner().generate_recommendations(
            store.load_items(), store.load_pattern(), at
        )

    if not recommendations:
        console.print("[green]All caught up - no recommendations.[/]")
        return

    colors = {"high": "red", "medium": "yellow", "low": "dim"}
    for rec in recommendations:
        color = colors[rec.priority.value]
        console.print(f"[{color}]● {rec.title}[/] [dim]({rec.reason_tag})[/]")
        console.print(f"  {rec.message}")


@app.command()
def remind(deck: DeckOpt = None, now: NowOpt = None) -> None:
    """Check the daily reminder and record it as sent when due."""
    at = _resolve_now(now)
    with _errors():
        store = _store(deck)
        state = store.load_reminders()
        message = motivation_message(state, at)

        if is_reminder_due(state, at):
            store.save_reminders(mark_reminder_sent(state, at))
            console.print(f"{message.emoji} [bold]{message.title}[/]\n{message.message}")
        else:
            console.print(f"[dim]No reminder due (next at {state.reminder_time}).[/]")


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """
    Tether - spaced-repetition study scheduler

    \b
    Quick Start:
      tether add card-1 -f "Question" -b "Answer"
      tether review
      tether plan
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else get_settings().log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
