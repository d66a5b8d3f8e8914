#!/usr/bin/env python3
"""
SplitEase CLI - work with session snapshot files from the terminal

A session file is the JSON form of a session (members, expenses, completed
settlements and activity log). Every command reads it, and the commands that
change something write it back.

Usage:
    python cli.py new trip.json --title "Goa Trip"
    python cli.py plan trip.json
    python cli.py settle trip.json --from <member-id> --to <member-id> --amount 30
"""

import asyncio
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Tuple

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from splitease.models.category import DEFAULT_CATEGORIES, OTHER_CATEGORY
from splitease.models.expense import SplitType
from splitease.models.session import Session
from splitease.models.settlement import Settlement
from splitease.services.export import EXPORT_KINDS, CSVExporter
from splitease.services.session_store import (
    SessionStore,
    SessionStoreError,
    load_session_file,
    save_session_file,
)
from splitease.utils.helpers import format_currency
from splitease.utils.logger import get_logger
from splitease.utils.settings import get_settings

logger = get_logger(__name__)
console = Console()


def _open_store(session_file: str) -> Tuple[SessionStore, Session]:
    store = SessionStore()
    session = store.load_session(load_session_file(session_file))
    return store, session


def _parse_amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"'{value}' is not a valid amount")
    if not amount.is_finite():
        raise click.BadParameter(f"'{value}' is not a finite amount")
    return amount


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    💸 SplitEase CLI

    Track shared expenses and work out who pays whom.
    """
    pass


@cli.command()
@click.argument("session_file", type=click.Path(dir_okay=False))
@click.option("--title", default="", help="Session title")
@click.option("--currency", default=None, help="Display currency code, e.g. INR or USD")
def new(session_file: str, title: str, currency: str):
    """
    🎉 Create a new session file

    Examples:

      cli.py new trip.json --title "Goa Trip" --currency INR
    """
    if Path(session_file).exists():
        console.print(f"[red]❌ {session_file} already exists[/red]")
        sys.exit(1)

    store = SessionStore()
    session = asyncio.run(store.create_session(title, currency))
    save_session_file(session, session_file)
    console.print(f"[green]✅ Created session '{session.title}' (PIN {session.pin})[/green]")


@cli.command("add-member")
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
def add_member(session_file: str, name: str):
    """
    👤 Add a member to a session

    Examples:

      cli.py add-member trip.json "Asha"
    """
    try:
        store, session = _open_store(session_file)
        member = asyncio.run(store.add_member(session.id, name))
        save_session_file(session, session_file)
        console.print(f"[green]✅ Added {member.name} (ID: {member.id})[/green]")
    except SessionStoreError as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)


@cli.command("add-expense")
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--title", required=True, help="What the expense was for")
@click.option("--amount", required=True, help="Total amount paid")
@click.option("--paid-by", required=True, help="Member ID of the payer")
@click.option(
    "--participant",
    "participants",
    multiple=True,
    help="Member ID sharing the expense (repeatable, defaults to every member)",
)
@click.option(
    "--category",
    type=click.Choice(list(DEFAULT_CATEGORIES)),
    default=OTHER_CATEGORY,
    help="Expense category (default: other)",
)
def add_expense(
    session_file: str, title: str, amount: str, paid_by: str, participants: Tuple[str, ...], category: str
):
    """
    💰 Add an equally split expense

    Examples:

      cli.py add-expense trip.json --title Dinner --amount 90 --paid-by <id>
    """
    try:
        store, session = _open_store(session_file)
        expense = asyncio.run(
            store.add_expense(
                session.id,
                title=title,
                amount=_parse_amount(amount),
                paid_by=paid_by,
                participants=list(participants) or [m.id for m in session.members],
                split=SplitType.EQUAL,
                category=category,
            )
        )
        save_session_file(session, session_file)
        console.print(
            f"[green]✅ Added '{expense.title}' for {format_currency(expense.amount, session.currency)}[/green]"
        )
    except SessionStoreError as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
def balances(session_file: str):
    """
    📊 Show every member's balance

    Positive balances are owed money by the group, negative balances owe it.
    """
    store, session = _open_store(session_file)
    totals = store.get_member_totals(session.id)

    console.print(Panel.fit(f"📊 [bold cyan]{session.title}[/bold cyan]", border_style="cyan"))

    table = Table(title="Balances", show_header=True)
    table.add_column("Member", style="cyan")
    table.add_column("Paid", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Balance", justify="right")

    for member in session.members:
        values = totals[member.id]
        balance = values["balance"]
        style = "green" if balance > 0 else "red" if balance < 0 else "white"
        table.add_row(
            member.name,
            format_currency(values["paid"], session.currency),
            format_currency(values["share"], session.currency),
            f"[{style}]{format_currency(balance, session.currency)}[/{style}]",
        )

    console.print(table)


@cli.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
def plan(session_file: str):
    """
    🤝 Show the suggested settlements
    """
    store, session = _open_store(session_file)
    settlements = store.get_settlement_plan(session.id)

    if not settlements:
        console.print("[green]✅ All settled up![/green]")
        return

    names = session.member_names()
    table = Table(title="Suggested Settlements", show_header=True)
    table.add_column("From", style="red")
    table.add_column("To", style="green")
    table.add_column("Amount", justify="right")

    for settlement in settlements:
        table.add_row(
            names.get(settlement.from_member, settlement.from_member),
            names.get(settlement.to_member, settlement.to_member),
            format_currency(settlement.amount, session.currency),
        )

    console.print(table)


@cli.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--from", "from_member", required=True, help="Member ID who paid")
@click.option("--to", "to_member", required=True, help="Member ID who was paid")
@click.option("--amount", required=True, help="Amount transferred")
def settle(session_file: str, from_member: str, to_member: str, amount: str):
    """
    ✅ Record a settlement as done

    Examples:

      cli.py settle trip.json --from <id> --to <id> --amount 30
    """
    try:
        store, session = _open_store(session_file)
        record = asyncio.run(
            store.record_settlement_completed(
                session.id,
                Settlement(from_member=from_member, to_member=to_member, amount=_parse_amount(amount)),
            )
        )
        save_session_file(session, session_file)
        console.print(f"[green]✅ Recorded settlement of {format_currency(record.amount, session.currency)}[/green]")
    except SessionStoreError as e:
        console.print(f"[red]❌ Settlement not recorded: {e}[/red]")
        logger.error(f"Failed to record settlement in {session_file}: {e}")
        sys.exit(1)


@cli.command()
@click.argument("session_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--kind",
    type=click.Choice(EXPORT_KINDS),
    default="expenses",
    help="What to export (default: expenses)",
)
@click.option("--output", type=click.Path(dir_okay=False), help="CSV file to write (default: print to stdout)")
@click.option("--save", is_flag=True, help="Write to EXPORT_DIRECTORY as <title>_<kind>.csv")
def export(session_file: str, kind: str, output: str, save: bool):
    """
    📄 Export expenses, balances or settlements as CSV

    Examples:

      cli.py export trip.json --kind balances --output balances.csv

      cli.py export trip.json --kind settlements --save
    """
    _, session = _open_store(session_file)
    exporter = CSVExporter(session)
    if save and not output:
        output = str(Path(get_settings().EXPORT_DIRECTORY) / exporter.default_filename(kind))
    csv_text = exporter.to_csv(kind, output)

    if output:
        console.print(f"[green]✅ Wrote {kind} to {output}[/green]")
    else:
        click.echo(csv_text, nl=False)


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind the server to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=8000,
    type=int,
    help="Port to bind the server to (default: 8000)",
)
@click.option(
    "--reload/--no-reload",
    default=True,
    help="Enable auto-reload on code changes",
)
def serve(host: str, port: int, reload: bool):
    """
    🚀 Start the API server

    Examples:

      # Start with default settings
      cli.py serve

      # Start on specific port without auto-reload
      cli.py serve --port 3000 --no-reload
    """
    import uvicorn

    settings = get_settings()

    console.print(f"[bold green]🚀 Starting {settings.APP_NAME} server...[/bold green]")
    console.print(f"[cyan]📡 Host: {host}[/cyan]")
    console.print(f"[cyan]🔌 Port: {port}[/cyan]")
    console.print(f"[cyan]🔄 Auto-reload: {'Enabled' if reload else 'Disabled'}[/cyan]")
    console.print()

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    cli()
