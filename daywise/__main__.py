"""CLI interface for Daywise.

Usage:
    python -m daywise add "title" 2026-10-20   Schedule a new review item
    python -m daywise review                   Review everything due today
    python -m daywise due [--date YYYY-MM-DD]  List items due on or before a day
    python -m daywise list                     List all review items
    python -m daywise delete <id>              Delete a review item
    python -m daywise score                    Show your points balance
    python -m daywise achievements             Show unlocked achievements
"""

import argparse
import asyncio
import logging
from datetime import date

from backend.database import async_session, create_tables, engine
from backend.services import Services, build_services
from backend.srs.review_items import Difficulty, ReviewItem
from backend.srs.review_store import ReviewItemValidationError
from backend.storage.kv import SqlKeyValueStore

RATING_KEYS = {"h": Difficulty.HARD, "m": Difficulty.MEDIUM, "e": Difficulty.EASY}


async def ensure_db() -> None:
    """Create tables if they don't exist."""
    await create_tables()


async def load_services() -> Services:
    """Create tables and load every component from the database."""
    await ensure_db()
    return await build_services(SqlKeyValueStore(async_session))


async def run_command(command, args: argparse.Namespace) -> None:
    try:
        await command(args)
    finally:
        await engine.dispose()


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}") from None


def format_item(item: ReviewItem) -> str:
    line = f"  {item.id[:8]}  {item.next_review_date}  {item.title}"
    if item.times_reviewed:
        line += f"  ({item.status.value}, every {item.current_interval_days}d)"
    else:
        line += "  (new)"
    return line


async def cmd_add(args: argparse.Namespace) -> None:
    """Schedule a new review item."""
    services = await load_services()
    try:
        item = await services.review_store.add(args.title, args.first_review_date, content=args.content)
    except ReviewItemValidationError as e:
        print(f"  Not added: {e}")
        return
    print(f"  Added, first review on {item.next_review_date}:")
    print(format_item(item))


async def cmd_review(args: argparse.Namespace) -> None:
    """Run an interactive review of everything due today."""
    services = await load_services()
    store = services.review_store
    due = store.due_items()

    if not due:
        print("\nNothing due for review. You're all caught up!")
        return

    print(f"\n  Review Session: {len(due)} item(s) due\n")
    print("  Ratings: h=Hard  m=Medium  e=Easy  s=Skip")
    print("  Type 'q' to quit\n")

    reviewed = 0
    for i, item in enumerate(due, 1):
        label = f"  [{i}/{len(due)}] {item.title}"
        if item.is_first_review:
            label += " (NEW)"
        print(label)
        if item.content:
            print(f"    {item.content}")

        response = input("\n  Rate [h/m/e/s]: ").strip().lower()
        while response not in RATING_KEYS and response not in ("s", "q"):
            response = input("  Please enter h, m, e, s or q: ").strip().lower()

        if response == "q":
            print("\n  Session ended early.")
            break
        if response == "s":
            continue

        updated = await store.mark_reviewed(item.id, RATING_KEYS[response])
        if updated is not None:
            reviewed += 1
            print(f"  Next review in {updated.current_interval_days} day(s) on {updated.next_review_date}\n")

    print(f"\n  Reviewed {reviewed} item(s)")


async def cmd_due(args: argparse.Namespace) -> None:
    """Show items due on or before a day."""
    services = await load_services()
    due = services.review_store.due_items(args.date)
    print(f"  {len(due)} item(s) due")
    for item in due:
        print(format_item(item))


async def cmd_list(args: argparse.Namespace) -> None:
    services = await load_services()
    items = services.review_store.items()
    if not items:
        print("  No review items yet.")
        return
    for item in items:
        print(format_item(item))


async def cmd_delete(args: argparse.Namespace) -> None:
    """Delete an item by its id or an unambiguous id prefix."""
    services = await load_services()
    store = services.review_store
    matches = [item for item in store.items() if item.id.startswith(args.item_id)]
    if len(matches) != 1:
        print(f"  No unique review item matches {args.item_id!r}")
        return
    await store.delete(matches[0].id)
    print(f"  Deleted {matches[0].title}")


async def cmd_score(args: argparse.Namespace) -> None:
    services = await load_services()
    print(f"  {services.score.score} points")
    boosts = await services.rewards.active_boosts()
    for boost in boosts:
        print(f"  Active boost: {boost.id}")


async def cmd_achievements(args: argparse.Namespace) -> None:
    """Show unlocked achievements and how many remain."""
    services = await load_services()
    definitions = {d.id: d for d in services.evaluator.definitions()}
    unlocked = services.evaluator.unlocked()
    print(f"  {len(unlocked)}/{len(definitions)} achievements unlocked")
    for achievement in unlocked:
        definition = definitions.get(achievement.id)
        if definition is None:
            continue
        print(f"  {definition.name} (+{definition.points})  {achievement.unlocked_at:%Y-%m-%d}")
        print(f"    {definition.description}")


def main() -> None:
    """Entry point for the Daywise CLI application."""
    parser = argparse.ArgumentParser(
        prog="daywise",
        description="Daywise spaced repetition and rewards",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add
    add_parser = subparsers.add_parser("add", help="Schedule a new review item")
    add_parser.add_argument("title", help="What to review")
    add_parser.add_argument("first_review_date", type=parse_date, help="First review date (YYYY-MM-DD)")
    add_parser.add_argument("-c", "--content", default=None, help="Notes shown during review")

    # review
    subparsers.add_parser("review", help="Review everything due today")

    # due
    due_parser = subparsers.add_parser("due", help="Show items due for review")
    due_parser.add_argument("--date", type=parse_date, default=None, help="Day to check (default today)")

    # list
    subparsers.add_parser("list", help="List all review items")

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete a review item")
    delete_parser.add_argument("item_id", help="Item id or id prefix")

    # score
    subparsers.add_parser("score", help="Show your points balance")

    # achievements
    subparsers.add_parser("achievements", help="Show unlocked achievements")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    cmd_map = {
        "add": cmd_add,
        "review": cmd_review,
        "due": cmd_due,
        "list": cmd_list,
        "delete": cmd_delete,
        "score": cmd_score,
        "achievements": cmd_achievements,
    }

    asyncio.run(run_command(cmd_map[args.command], args))


if __name__ == "__main__":
    main()
