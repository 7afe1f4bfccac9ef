from __future__ import annotations

import datetime as dt
import functools
import json
import logging
import math
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from loancalc_core.domain.errors import InvalidFieldError
from loancalc_core.domain.models import CompoundingConfig, EntryKind, Evaluation, Frequency, LedgerEntry
from loancalc_core.io import config as config_io
from loancalc_core.io import ledger as ledger_io
from loancalc_core.io import parsing
from loancalc_core.services import compounding
from loancalc_core.services import presentation
from loancalc_core.services.book import EntryBook

app = typer.Typer(help="Personal loan balance calculator with per-entry compound interest.")

logger = logging.getLogger(__name__)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _load_entries(ledger: Path) -> List[LedgerEntry]:
    try:
        entries = ledger_io.load_ledger(ledger)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--ledger") from exc
    logger.debug("Loaded %d entries from %s", len(entries), ledger)
    return entries


def _resolve_config(
    config_path: Optional[Path],
    balance_date: Optional[str],
    rate: Optional[float],
    frequency: Optional[Frequency],
) -> CompoundingConfig:
    """
    Build the calculation parameters: config file first, then CLI overrides.
    `rate` is given in percent on the command line.
    """
    base = None
    if config_path:
        try:
            base = config_io.load_compounding_config(config_path)
        except (OSError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--config") from exc

    if balance_date:
        try:
            resolved_date = parsing.parse_date(balance_date, field="balance-date")
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--balance-date") from exc
    elif base is not None:
        resolved_date = base.balance_date
    else:
        raise typer.BadParameter("Provide --balance-date or a --config with balance_date")

    if rate is not None:
        if not math.isfinite(rate):
            raise typer.BadParameter("must be a finite number", param_hint="--rate")
        annual_rate = rate / 100.0
    elif base is not None:
        annual_rate = base.annual_rate
    else:
        annual_rate = CompoundingConfig.annual_rate

    if frequency is None:
        frequency = base.frequency if base is not None else Frequency.MONTHLY

    return CompoundingConfig(balance_date=resolved_date, annual_rate=annual_rate, frequency=frequency)


def _results_table(evaluation: Evaluation, details: bool) -> Table:
    table = Table(title=f"Balance as of {presentation.format_date(evaluation.config.balance_date)}")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Kind")
    table.add_column("Amount", justify="right")
    table.add_column("Balance Date Amount", justify="right")
    if details:
        table.add_column("Days", justify="right")
        table.add_column("Years", justify="right")
        table.add_column("Periods", justify="right")
        table.add_column("Factor", justify="right")
    for r in evaluation.entries:
        color = "red" if r.entry.kind == EntryKind.BORROWED else "green"
        row = [
            str(r.entry.id),
            presentation.format_date(r.entry.date),
            f"[{color}]{r.entry.kind.value}[/{color}]",
            presentation.format_currency(r.entry.amount),
            f"[{color}]{presentation.format_currency(r.future_value)}[/{color}]",
        ]
        if details:
            row += [
                str(r.days_elapsed),
                f"{r.years_elapsed:.4f}",
                f"{r.compound_periods:.2f}",
                f"{r.growth_factor:.4f}",
            ]
        table.add_row(*row)
    return table


def _print_evaluation(console: Console, evaluation: Evaluation, details: bool) -> None:
    console.print(_results_table(evaluation, details))
    if evaluation.entries:
        ear = evaluation.entries[0].effective_annual_rate
        console.print(
            f"Rate {presentation.format_percent(evaluation.config.annual_rate, 2)} "
            f"{evaluation.config.frequency.value} (effective {presentation.format_percent(ear)})"
        )
    balance = evaluation.balance
    if not math.isfinite(balance.net_balance):
        console.print("[red]Final Balance: invalid input[/red]")
        return
    color = "red" if balance.is_owed else "green"
    console.print(f"Total borrowed: {presentation.format_currency(balance.total_borrowed)}")
    console.print(f"Total paid: {presentation.format_currency(balance.total_paid)}")
    console.print(
        f"[bold {color}]Final Balance: {presentation.format_currency(abs(balance.net_balance))} "
        f"({balance.status})[/bold {color}]"
    )


@app.command()
def balance(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,id,description]"),
    balance_date: Optional[str] = typer.Option(None, help="Balance date YYYY-MM-DD"),
    rate: Optional[float] = typer.Option(None, help="Annual interest rate in percent (default 11)"),
    frequency: Optional[Frequency] = typer.Option(None, case_sensitive=False, help="Compounding frequency"),
    config: Optional[Path] = typer.Option(None, help="JSON file with balance_date, annual_rate, frequency"),
    details: bool = typer.Option(False, help="Show per-entry elapsed time and growth factor"),
    as_json: bool = typer.Option(False, "--json", help="Print the result payload as JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for result JSON"),
):
    """Compute every entry's value and the net balance as of a date."""
    entries = _load_entries(ledger)
    cfg = _resolve_config(config, balance_date, rate, frequency)
    evaluation = compounding.run_evaluation(entries, cfg)
    payload = evaluation.to_dict()
    if out:
        _save_json(out, payload)
        typer.echo(f"Balance written to {out}")
    elif as_json:
        typer.echo(json.dumps(payload, indent=2))
    else:
        _print_evaluation(Console(), evaluation, details)


@app.command()
def explain(
    ledger: Path = typer.Option(..., help="CSV ledger with date,amount,kind[,id,description]"),
    entry_id: int = typer.Option(..., help="Entry id to explain"),
    balance_date: Optional[str] = typer.Option(None, help="Balance date YYYY-MM-DD"),
    rate: Optional[float] = typer.Option(None, help="Annual interest rate in percent (default 11)"),
    frequency: Optional[Frequency] = typer.Option(None, case_sensitive=False, help="Compounding frequency"),
    config: Optional[Path] = typer.Option(None, help="JSON file with balance_date, annual_rate, frequency"),
):
    """Show the step-by-step calculation for one entry."""
    entries = _load_entries(ledger)
    match = [e for e in entries if e.id == entry_id]
    if not match:
        raise typer.BadParameter(f"No entry with id {entry_id}", param_hint="--entry-id")
    cfg = _resolve_config(config, balance_date, rate, frequency)
    result = compounding.evaluate_entry(match[0], cfg)
    for line in presentation.explain(result, cfg):
        typer.echo(line)


@app.command("quick-dates")
def quick_dates(
    ledger: Optional[Path] = typer.Option(None, help="CSV ledger; offsets start at its earliest entry"),
    today: Optional[str] = typer.Option(None, help="Override today's date (YYYY-MM-DD)"),
):
    """List shortcut balance dates."""
    entries = _load_entries(ledger) if ledger else []
    try:
        today_date = parsing.parse_date(today, field="today") if today else None
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--today") from exc
    for label, value in presentation.quick_balance_dates(entries, today_date):
        typer.echo(f"{label}: {presentation.format_date(value)}")


# -------------------------------
# Interactive session (in memory)
# -------------------------------


def _prompt_entry(
    console: Console,
    save: Callable[..., LedgerEntry],
    current: Optional[LedgerEntry] = None,
) -> LedgerEntry:
    """Prompt until the fields parse and `save` accepts them; returns the saved entry."""
    while True:
        raw_date = typer.prompt(
            "Date (YYYY-MM-DD)",
            default=current.date.isoformat() if current else None,
        )
        raw_amount = typer.prompt("Amount", default=f"{current.amount:.2f}" if current else None)
        raw_kind = typer.prompt(
            "Type (borrowed/paid)",
            default=current.kind.value if current else EntryKind.BORROWED.value,
        )
        description = typer.prompt(
            "Description (optional)",
            default=(current.description or "") if current else "",
            show_default=False,
        )
        try:
            return save(
                date=parsing.parse_date(raw_date),
                amount=parsing.parse_amount(raw_amount),
                kind=parsing.parse_kind(raw_kind),
                description=description,
            )
        except InvalidFieldError as exc:
            console.print(f"[red]{exc}[/red]")


def _prompt_entry_id(console: Console, book: EntryBook) -> Optional[int]:
    raw = typer.prompt("Entry id")
    try:
        entry_id = int(raw)
        book.get(entry_id)
    except (ValueError, KeyError):
        console.print(f"[red]No entry with id {raw}[/red]")
        return None
    return entry_id


def _print_entries(console: Console, book: EntryBook) -> None:
    if not len(book):
        console.print("[yellow]No entries yet.[/yellow]")
        return
    table = Table(title="Loan/Payment Entries")
    table.add_column("ID", justify="right")
    table.add_column("Date")
    table.add_column("Kind")
    table.add_column("Amount", justify="right")
    table.add_column("Description")
    for e in book:
        table.add_row(
            str(e.id),
            presentation.format_date(e.date),
            e.kind.value,
            presentation.format_currency(e.amount),
            e.description or "",
        )
    console.print(table)


def _prompt_config(console: Console, book: EntryBook) -> Optional[CompoundingConfig]:
    for label, value in presentation.quick_balance_dates(book.entries()):
        console.print(f"  {label}: {presentation.format_date(value)}")
    raw_date = typer.prompt("Balance date", default=dt.date.today().isoformat())
    raw_rate = typer.prompt("Annual interest rate (%)", default="11")
    raw_freq = typer.prompt("Compound frequency (daily/weekly/monthly/yearly)", default="monthly")
    try:
        return CompoundingConfig(
            balance_date=parsing.parse_date(raw_date, field="balance date"),
            annual_rate=parsing.parse_rate(raw_rate),
            frequency=parsing.parse_frequency(raw_freq),
        )
    except InvalidFieldError as exc:
        console.print(f"[red]{exc}[/red]")
        return None


@app.command()
def interactive(
    ledger: Optional[Path] = typer.Option(None, help="Optional CSV ledger to start the session with"),
):
    """
    Interactive session: add, edit and delete entries, then calculate.
    Entries live only for the session.
    """
    console = Console()
    book = EntryBook()
    if ledger:
        try:
            book.load(_load_entries(ledger))
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--ledger") from exc
    console.print("[bold cyan]Loan Balance Calculator[/bold cyan]")

    actions = "add/list/edit/delete/calc/quit"
    while True:
        action = typer.prompt(f"Action ({actions})", default="list").strip().lower()
        if action in ("quit", "q", "exit"):
            break
        if action == "add":
            entry = _prompt_entry(console, book.add)
            console.print(f"[green]Added entry {entry.id}.[/green]")
        elif action == "list":
            _print_entries(console, book)
        elif action == "edit":
            entry_id = _prompt_entry_id(console, book)
            if entry_id is None:
                continue
            _prompt_entry(console, functools.partial(book.edit, entry_id), book.get(entry_id))
            console.print(f"[green]Updated entry {entry_id}.[/green]")
        elif action == "delete":
            entry_id = _prompt_entry_id(console, book)
            if entry_id is None:
                continue
            book.delete(entry_id)
            console.print(f"[green]Deleted entry {entry_id}.[/green]")
        elif action == "calc":
            cfg = _prompt_config(console, book)
            if cfg is None:
                continue
            evaluation = book.calculate(cfg)
            _print_evaluation(console, evaluation, details=True)
            if typer.confirm("Show step-by-step details?", default=False):
                for r in evaluation.entries:
                    console.print(f"\n[bold]Entry {r.entry.id}[/bold] {r.entry.description or ''}")
                    for line in presentation.explain(r, cfg):
                        console.print(line)
        else:
            console.print(f"[yellow]Unknown action '{action}'. Choose {actions}.[/yellow]")

    console.print("\n[bold cyan]Done.[/bold cyan]\n")


if __name__ == "__main__":
    app()
