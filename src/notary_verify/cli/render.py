"""Terminal rendering of verification runs."""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from ..ledger import LedgerClient
from ..reconcile import VerificationResult
from ..ticket import VerificationRequest

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

LIST_LIMIT = 10
RULE = "═" * 50


def print_header(request: VerificationRequest) -> None:
    console.print()
    console.print(f"[bold]Namespace:[/bold]  {escape(request.namespace)}")
    console.print(f"[bold]Date range:[/bold] {request.date_start.isoformat()} to {request.date_end.isoformat()}")
    console.print(f"[bold]Owner:[/bold]      [dim]{escape(request.identity)}[/dim]")
    console.print()


def print_progress(message: str) -> None:
    console.print(f"[dim]  {escape(message)}[/dim]")


def print_error(message: str) -> None:
    err_console.print(f"\n[red]Error: {escape(message)}[/red]")


def _more(count: int) -> None:
    if count > LIST_LIMIT:
        console.print(f"[dim]  ... and {count - LIST_LIMIT} more[/dim]")


def print_results(result: VerificationResult, client: LedgerClient) -> None:
    console.print()
    console.print(f"[bold]{RULE}[/bold]")
    console.print("[bold]  VERIFICATION RESULTS[/bold]")
    console.print(f"[bold]{RULE}[/bold]")
    console.print()

    n_unnotarized = len(result.unnotarized)
    n_missing = len(result.missing)
    console.print(f"[green]✓[/green] Verified:     {len(result.verified)} logs")
    if n_unnotarized:
        console.print(f"[yellow]⚠[/yellow] Unnotarized:  {n_unnotarized} logs")
    else:
        console.print(f"[dim]○[/dim] Unnotarized:  {n_unnotarized} logs")
    if n_missing:
        console.print(f"[red]✗[/red] Missing:      {n_missing} logs")
    else:
        console.print(f"[dim]○[/dim] Missing:      {n_missing} logs")

    if result.is_clean:
        console.print("\n[green]✓ All logs matched.[/green]\n")
        return

    if n_unnotarized:
        console.print("\n[yellow]⚠ Unnotarized (in ZIP but not on Arweave):[/yellow]")
        for digest in result.unnotarized[:LIST_LIMIT]:
            console.print(f"[dim]  {digest}[/dim]")
        _more(n_unnotarized)

    if n_missing:
        console.print("\n[red]✗ Missing (on Arweave but not in ZIP):[/red]")
        for record in result.missing[:LIST_LIMIT]:
            console.print(f"[dim]  {escape(record.content_hash)}[/dim]")
            console.print(f"[cyan]    → {escape(client.explorer_url(record.record_id))}[/cyan]")
        _more(n_missing)

    console.print()
