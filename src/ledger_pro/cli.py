import asyncio
import typer
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from ledger_pro.config.settings import LedgerSettings
from ledger_pro.database.connection import DatabaseConfig, DatabaseManager, execute_schema
from ledger_pro.domain.enums import GuardVerdict, MutationOp
from ledger_pro.domain.errors import ClosedAccountError, ValidationError
from ledger_pro.logging_setup import configure_logging
from ledger_pro.repositories.closed_flag_store import ClosedFlagStore
from ledger_pro.repositories.sqlite_ledger_store import SQLiteLedgerStore
from ledger_pro.services.ledger_service import LedgerService
from ledger_pro.services.models import TransactionDraft

app = typer.Typer(
    name="ledger-pro",
    help="Simple ledger, clean balances",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    service: Optional[LedgerService] = None


state = State()

def build_service(settings: LedgerSettings) -> LedgerService:
    """Wire the SQLite store and closed-flag store into a LedgerService"""
    db_manager = DatabaseManager(DatabaseConfig(settings.database_path))
    execute_schema(db_manager.get_connection())
    store = SQLiteLedgerStore(db_manager)
    closed_flags = ClosedFlagStore(settings.closed_flags_path)
    return LedgerService(store, closed_flags)

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    LedgerPro - Accounts, dated debits and credits, running balances.
    """
    settings = LedgerSettings.load()
    configure_logging("DEBUG" if verbose else settings.log_level)

    if state.service is None:
        state.service = build_service(settings)

    state.verbose = verbose

def _report_error(e: Exception) -> None:
    if isinstance(e, ClosedAccountError):
        console.print(Panel(
            f"[yellow]Account {e.account_id} is closed.[/yellow]\n"
            f"Reopen it with: ledger-pro toggle-closed {e.account_id}",
            title="Account Closed",
            border_style="yellow",
        ))
    elif isinstance(e, ValidationError):
        console.print(f"[red]{escape(str(e))}[/red]")
    else:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if state.verbose:
            console.print_exception()

def _money(amount) -> str:
    return f"{amount:,.2f}" if amount else "-"

@app.command(name="accounts")
def list_accounts():
    """
    List accounts, open ones first, most recently active first.
    """
    try:
        ranked = asyncio.run(state.service.list_accounts())

        if not ranked:
            console.print(Panel(
                "[yellow]No accounts yet[/yellow]\n"
                "Create one with: ledger-pro add-account NAME",
                border_style="yellow",
            ))
            return

        table = Table(title="Accounts")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Last Entry", justify="right")

        for entry in ranked:
            status = "[red]CLOSED[/red]" if entry.closed else "[green]OPEN[/green]"
            table.add_row(
                entry.id,
                entry.name,
                status,
                str(entry.last_entry_date) if entry.last_entry_date else "-",
            )

        console.print(table)

    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="add-account")
def add_account(
    name: str = typer.Argument(..., help="Account name, e.g. 'Cash' or 'Bank - Main'"),
):
    """
    Create a new account.
    """
    try:
        account = asyncio.run(state.service.add_account(name))
        console.print(f"[bold green]✓ Created account {account.name}[/bold green] ({account.id})")
    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="transactions")
def list_transactions(
    account_id: str = typer.Argument(..., help="Account ID"),
):
    """
    Show an account's transactions, newest first, with running balance.
    """
    try:
        rows = asyncio.run(state.service.list_transactions(account_id))

        if not rows:
            console.print(Panel(
                "[yellow]No transactions yet[/yellow]",
                border_style="yellow",
            ))
            return

        table = Table(title=f"Transactions ({len(rows)} items)")
        table.add_column("Date", style="cyan")
        table.add_column("Due Date")
        table.add_column("Ref")
        table.add_column("Description", max_width=40)
        table.add_column("Remarks", style="dim", max_width=30)
        table.add_column("Debit", justify="right", style="red")
        table.add_column("Credit", justify="right", style="green")
        table.add_column("Balance", justify="right", style="bold")
        table.add_column("ID", style="dim")

        for txn in rows:
            table.add_row(
                str(txn.entry_date),
                str(txn.due_date) if txn.due_date else "-",
                txn.reference or "-",
                txn.description or "-",
                txn.remarks or "-",
                _money(txn.debit),
                _money(txn.credit),
                f"{txn.balance:,.2f}",
                txn.id,
            )

        console.print(table)
        if state.service.guard_verdict(account_id) is GuardVerdict.BLOCKED:
            console.print("[yellow]This account is closed.[/yellow]")

    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="add-transaction")
def add_transaction(
    account_id: str = typer.Argument(..., help="Account ID"),
    entry_date: Optional[str] = typer.Option(None, "--date", "-d", help="Date of entry (YYYY-MM-DD)"),
    due_date: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    reference: Optional[str] = typer.Option(None, "--ref", help="Reference"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    remarks: Optional[str] = typer.Option(None, "--remarks", help="Remarks"),
    debit: Optional[str] = typer.Option(None, "--debit", help="Debit amount"),
    credit: Optional[str] = typer.Option(None, "--credit", help="Credit amount"),
):
    """
    Add a transaction to an account.

    Examples:
        ledger-pro add-transaction ACCOUNT --date 2024-01-10 --credit 100
        ledger-pro add-transaction ACCOUNT -d 2024-01-12 --debit 30 --ref INV-7
    """
    try:
        draft = TransactionDraft.from_form(dict(
            entry_date=entry_date, due_date=due_date, reference=reference,
            description=description, remarks=remarks, debit=debit, credit=credit,
        ))
        result = asyncio.run(
            state.service.mutate_transaction(MutationOp.CREATE, account_id, draft)
        )
        console.print(f"[bold green]✓ Added transaction[/bold green] {result.transaction.id}")
    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="edit-transaction")
def edit_transaction(
    account_id: str = typer.Argument(..., help="Account ID"),
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    entry_date: Optional[str] = typer.Option(None, "--date", "-d", help="Date of entry (YYYY-MM-DD)"),
    due_date: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    reference: Optional[str] = typer.Option(None, "--ref", help="Reference"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
    remarks: Optional[str] = typer.Option(None, "--remarks", help="Remarks"),
    debit: Optional[str] = typer.Option(None, "--debit", help="Debit amount"),
    credit: Optional[str] = typer.Option(None, "--credit", help="Credit amount"),
):
    """
    Replace a transaction's fields. Fields not given are cleared.
    """
    try:
        draft = TransactionDraft.from_form(dict(
            entry_date=entry_date, due_date=due_date, reference=reference,
            description=description, remarks=remarks, debit=debit, credit=credit,
        ))
        asyncio.run(
            state.service.mutate_transaction(
                MutationOp.UPDATE, account_id, draft, transaction_id
            )
        )
        console.print(f"[bold green]✓ Updated transaction[/bold green] {transaction_id}")
    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="delete-transaction")
def delete_transaction(
    account_id: str = typer.Argument(..., help="Account ID"),
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """
    Delete a transaction.
    """
    if not yes and not typer.confirm("Delete this transaction?"):
        raise typer.Exit()

    try:
        asyncio.run(
            state.service.mutate_transaction(
                MutationOp.DELETE, account_id, transaction_id=transaction_id
            )
        )
        console.print(f"[bold green]✓ Deleted transaction[/bold green] {transaction_id}")
    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)

@app.command(name="toggle-closed")
def toggle_closed(
    account_id: str = typer.Argument(..., help="Account ID"),
):
    """
    Close an open account, or reopen a closed one.
    """
    try:
        closed = asyncio.run(state.service.toggle_closed(account_id))
        if closed:
            console.print(f"[yellow]Account {account_id} closed[/yellow]")
        else:
            console.print(f"[green]Account {account_id} reopened[/green]")
    except Exception as e:
        _report_error(e)
        raise typer.Exit(code=1)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
