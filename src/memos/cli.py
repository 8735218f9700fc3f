#!/usr/bin/env python3
"""Memos CLI for day-to-day operations."""

import argparse
from datetime import datetime, timezone

import questionary
from rich.console import Console
from rich.table import Table

from memos.config import Config
from memos.db import Database
from memos.errors import MemoError
from memos.logger import configure_logging
from memos.memo import MemoService
from memos.memo.schemas import MAX_LIMIT, MemoResponse, SortField

console = Console()


def build_service(config: Config) -> MemoService:
    return MemoService(Database(config.database_url))


def parse_due_date(value: str) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM' (or any ISO 8601 form); naive values are UTC."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid_due_date(value: str) -> bool | str:
    try:
        parse_due_date(value)
    except ValueError:
        return "Use YYYY-MM-DD HH:MM"
    return True


def render_memos(memos: list[MemoResponse], total: int) -> Table:
    table = Table(title=f"Memos ({len(memos)} of {total})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Due")
    table.add_column("Done", justify="center")
    for memo in memos:
        table.add_row(
            str(memo.id),
            memo.title,
            memo.date_to.strftime("%Y-%m-%d %H:%M"),
            "[green]✓[/]" if memo.completed else "",
        )
    return table


def select_memo(service: MemoService) -> MemoResponse | None:
    """Prompt the user to select a memo, soonest due first."""
    result = service.get_all({"limit": MAX_LIMIT, "sort_by": "date_to", "order": "asc"})
    if not result.data:
        console.print("[red]No memos found.[/]")
        return None
    return questionary.select(
        "Select a memo:",
        choices=[
            questionary.Choice(
                title=f"{'[x]' if m.completed else '[ ]'} {m.title} (due {m.date_to:%Y-%m-%d})",
                value=m,
            )
            for m in result.data
        ],
    ).ask()


def list_memos(service: MemoService, args: argparse.Namespace) -> None:
    """Print one page of memos."""
    result = service.get_all(
        {
            "limit": args.limit,
            "offset": args.offset,
            "completed": args.completed,
            "sort_by": args.sort_by,
            "order": args.order,
        }
    )
    if not result.data:
        console.print("[dim]No memos match.[/]")
        return
    console.print(render_memos(result.data, result.total))


def add_memo(service: MemoService, args: argparse.Namespace) -> None:
    """Create a memo from interactive prompts."""
    title = questionary.text("Title:").ask()
    if title is None:
        console.print("[dim]Cancelled.[/]")
        return
    description = questionary.text("Description (optional):").ask()
    due = questionary.text("Due (YYYY-MM-DD HH:MM):", validate=is_valid_due_date).ask()
    if due is None:
        console.print("[dim]Cancelled.[/]")
        return

    memo = service.create(
        {"title": title, "description": description or None, "date_to": parse_due_date(due)}
    )
    console.print(f"[green]Created memo {memo.id}.[/]")


def toggle_memo(service: MemoService, args: argparse.Namespace) -> None:
    """Flip the completion flag of a selected memo."""
    memo = select_memo(service)
    if not memo:
        return

    updated = service.toggle_complete(memo.id)
    state = "completed" if updated.completed else "incomplete"
    console.print(f"[green]Marked [bold]{updated.title}[/] as {state}.[/]")


def delete_memo(service: MemoService, args: argparse.Namespace) -> None:
    """Delete a selected memo after confirmation."""
    memo = select_memo(service)
    if not memo:
        return

    console.print(f"[yellow]Will permanently delete [bold]{memo.title}[/].[/]")
    if not questionary.confirm("Proceed with these changes?").ask():
        console.print("[dim]Cancelled.[/]")
        return

    service.delete(memo.id)
    console.print(f"[green]Deleted {memo.title}.[/]")


def serve(config: Config) -> None:
    from memos.app import create_app

    app = create_app(config)
    app.run(host=config.host, port=config.port)


COMMANDS = {
    "list": list_memos,
    "add": add_memo,
    "toggle": toggle_memo,
    "delete": delete_memo,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Memos CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the web server")

    list_parser = subparsers.add_parser("list", help="List memos")
    status = list_parser.add_mutually_exclusive_group()
    status.add_argument("--completed", dest="completed", action="store_const", const=True)
    status.add_argument("--pending", dest="completed", action="store_const", const=False)
    list_parser.add_argument(
        "--sort-by", default=SortField.CREATED_AT.value, choices=[f.value for f in SortField]
    )
    list_parser.add_argument("--order", default="desc", choices=["asc", "desc"])
    list_parser.add_argument("--limit", type=int, default=10)
    list_parser.add_argument("--offset", type=int, default=0)

    subparsers.add_parser("add", help="Create a memo")
    subparsers.add_parser("toggle", help="Toggle a memo's completion")
    subparsers.add_parser("delete", help="Delete a memo")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config.from_env()

    if args.command == "serve":
        serve(config)
        return 0

    configure_logging("WARNING", config.log_format)
    service = build_service(config)
    try:
        COMMANDS[args.command](service, args)
    except MemoError as e:
        console.print(f"[red]{e.kind.value}: {e.message}[/]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
