"""Command-line entrypoints for managing quotes, settings, and exports."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .config import load_config
from .exceptions import QuoteTonicError
from .logging_setup import configure_logging
from .pricing import compute_totals, item_row_total
from .schemas import Quote, QuoteStatus
from .utils import format_money
from .workspace import Workspace

app = typer.Typer(add_completion=False, help="QuoteTonic quotation and invoice CLI")

STATUS_STYLES = {
    QuoteStatus.DRAFT: "yellow",
    QuoteStatus.FINALIZED: "green",
    QuoteStatus.WON: "blue",
    QuoteStatus.LOST: "dim",
}


def _workspace(ctx: typer.Context) -> Workspace:
    return ctx.obj


def _status_label(status: QuoteStatus) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


def _print_quote(quote: Quote) -> None:
    totals = compute_totals(quote.items)
    print(f"[bold]{quote.number}[/bold] {_status_label(quote.status)}  ({quote.doc_type}, id {quote.id})")
    print(f"Client: {quote.client_name or '-'} {quote.client_email}")
    print(f"Issued {quote.issue_date}, valid until {quote.expiry_date}, template {quote.template_id}")
    table = Table("Description", "Qty", "Unit price", "Tax %", "Amount")
    for item in quote.items:
        table.add_row(
            item.description or "-",
            format_money(item.quantity),
            format_money(item.unit_price),
            format_money(item.tax_rate),
            format_money(item_row_total(item)),
        )
    print(table)
    print(f"Subtotal: {format_money(totals.subtotal, quote.currency)}")
    if totals.total_discount > 0:
        print(f"Discount: -{format_money(totals.total_discount, quote.currency)}")
    print(f"Tax: {format_money(totals.total_tax, quote.currency)}")
    print(f"[bold]Total: {format_money(totals.grand_total, quote.currency)}[/bold]")


@app.callback()
def main_options(
    ctx: typer.Context,
    home: Optional[Path] = typer.Option(None, help="Storage directory (defaults to $QUOTETONIC_HOME or ~/.quotetonic)"),
) -> None:
    config = load_config(home)
    configure_logging(config.log_level, config.log_file)
    ctx.obj = Workspace(config)


@app.command()
def new(
    ctx: typer.Context,
    template: Optional[str] = typer.Option(None, help="Template id, e.g. standard or modern"),
    client: Optional[str] = typer.Option(None, help="Client name"),
    email: Optional[str] = typer.Option(None, help="Client email"),
) -> None:
    """Create and save a new draft quote."""
    ws = _workspace(ctx)
    try:
        ws.create_quote(template)
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    ws.editor.set_client(name=client, email=email)
    quote = ws.save_editor()
    print(f"Created {quote.number} (id {quote.id})")


@app.command("list")
def list_quotes(
    ctx: typer.Context,
    status: Optional[QuoteStatus] = typer.Option(None, help="Only show quotes in this status"),
    search: str = typer.Option("", help="Match client name or document number"),
) -> None:
    """List saved quotes, newest first."""
    ws = _workspace(ctx)
    quotes = ws.quote_store.filter_quotes(search, status)
    table = Table("Number", "Client", "Issued", "Status", "Total")
    for quote in quotes:
        table.add_row(
            quote.number,
            quote.client_name,
            quote.issue_date,
            _status_label(quote.status),
            format_money(compute_totals(quote.items).grand_total, quote.currency),
        )
    print(table)
    counts = ws.quote_store.status_counts()
    print(f"All {counts.total}  Draft {counts.draft}  Finalized {counts.finalized}  Won {counts.won}  Lost {counts.lost}")


@app.command()
def show(ctx: typer.Context, quote_id: str = typer.Argument(..., help="Quote id or document number")) -> None:
    """Show one quote with its totals."""
    try:
        _print_quote(_workspace(ctx).quote_store.get_quote(quote_id))
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)


@app.command()
def duplicate(ctx: typer.Context, quote_id: str = typer.Argument(..., help="Quote id or document number")) -> None:
    """Copy a quote into a new draft with the next document number."""
    try:
        copy = _workspace(ctx).duplicate_quote(quote_id)
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    print(f"Duplicated as {copy.number} (id {copy.id})")


@app.command()
def delete(
    ctx: typer.Context,
    quote_id: str = typer.Argument(..., help="Quote id or document number"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete a quote after confirmation."""
    ws = _workspace(ctx)
    try:
        deleted = ws.delete_quote(quote_id, lambda message: yes or typer.confirm(message))
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    print("Deleted." if deleted else "Nothing deleted.")


@app.command()
def status(
    ctx: typer.Context,
    quote_id: str = typer.Argument(..., help="Quote id or document number"),
    new_status: QuoteStatus = typer.Argument(..., help="Draft, Finalized, Won or Lost"),
) -> None:
    """Set the lifecycle status of a quote."""
    try:
        quote = _workspace(ctx).update_status(quote_id, new_status)
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    print(f"{quote.number} is now {_status_label(quote.status)}")


@app.command()
def export(
    ctx: typer.Context,
    quote_id: str = typer.Argument(..., help="Quote id or document number"),
    output: Optional[Path] = typer.Option(None, help="PDF path (defaults to <number>.pdf)"),
) -> None:
    """Render a quote to PDF."""
    try:
        path = _workspace(ctx).export_pdf(quote_id, output)
    except QuoteTonicError as exc:
        # ExportError messages are already localized for the user
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    print(f"PDF written to {path}")


@app.command()
def check(
    ctx: typer.Context,
    report: Optional[Path] = typer.Option(None, help="Optional path to write the JSON report"),
) -> None:
    """Check saved quotes for missing fields and suspicious numbers."""
    response = _workspace(ctx).validate()
    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(response.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        print(f"Report written to {report}")
    summary = response.summary
    print(f"[bold]Total:[/bold] {summary.total_quotes}")
    print(f"[green]Valid:[/green] {summary.valid_quotes}  [red]Invalid:[/red] {summary.invalid_quotes}")
    if summary.error_counts:
        print("Top errors:")
        for err, count in sorted(summary.error_counts.items(), key=lambda x: x[1], reverse=True):
            print(f"- {err}: {count}")
    if summary.invalid_quotes > 0:
        raise typer.Exit(code=1)


@app.command("settings")
def show_settings(ctx: typer.Context) -> None:
    """Show company profile, defaults, and numbering."""
    s = _workspace(ctx).settings
    print(f"[bold]{s.company_name}[/bold] ({s.representative_name})")
    print(f"Language: {s.language}  Currency: {s.default_currency}  Tax: {s.default_tax_rate}%")
    print(f"Template: {s.default_template_id}")
    print(f"Next number: {s.doc_number_prefix}{s.next_doc_number:06d}")


@app.command()
def configure(
    ctx: typer.Context,
    prefix: Optional[str] = typer.Option(None, help="Document number prefix"),
    next_number: Optional[int] = typer.Option(None, help="Next document number (can only go up)"),
    currency: Optional[str] = typer.Option(None, help="Default currency"),
    tax_rate: Optional[float] = typer.Option(None, help="Default tax rate in percent"),
    template: Optional[str] = typer.Option(None, help="Default template id"),
    language: Optional[str] = typer.Option(None, help="en or ko"),
    company_name: Optional[str] = typer.Option(None, help="Company name"),
) -> None:
    """Change settings."""
    store = _workspace(ctx).settings_store
    try:
        store.set_numbering(prefix=prefix, next_number=next_number)
        store.set_defaults(currency=currency, tax_rate=tax_rate, template_id=template)
        if language is not None:
            store.set_language(language)
        if company_name is not None:
            store.set_company_profile(company_name=company_name)
    except QuoteTonicError as exc:
        print(f"[red]{exc.message}[/red]")
        raise typer.Exit(code=1)
    print("Settings saved.")


def main():
    app()


if __name__ == "__main__":
    main()
