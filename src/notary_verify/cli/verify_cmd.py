"""notary-verify command - check a log archive against ledger notarizations.

Usage:
    notary-verify --ticket <ticket.json> --logs <logs.zip>
    notary-verify --owner <addr> --namespace <ns> --start <date> --end <date> --logs <logs.zip>
    notary-verify --logs <logs.zip>                 (interactive)

Exit codes:
    0 - All logs matched
    1 - Discrepancies found, or verification failed
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from .. import __version__
from ..config import load_config
from ..errors import InvalidTicket, VerificationError
from ..ledger import LedgerClient
from ..reconcile import reconcile
from ..ticket import TICKET_TYPE, VerificationRequest, validate_ticket
from .exit_codes import EXIT_DISCREPANCY, EXIT_ERROR, EXIT_MATCHED, exit_code_description
from .prompts import PromptCancelled, prompt_for_missing
from .render import console, print_error, print_header, print_progress, print_results


def _read_ticket_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidTicket(f"Invalid ticket: could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidTicket(f"Invalid ticket: {path} is not valid JSON ({e})") from e


def _resolve_request(
    ticket: Optional[Path],
    owner: Optional[str],
    namespace: Optional[str],
    start: Optional[str],
    end: Optional[str],
    output_json: bool,
) -> VerificationRequest:
    # Mode 1: ticket file
    if ticket is not None:
        return validate_ticket(_read_ticket_file(ticket))

    # Mode 2: all values given as flags
    if owner and namespace and start and end:
        return validate_ticket({
            "type": TICKET_TYPE,
            "owner": owner,
            "namespace": namespace,
            "date_start": start,
            "date_end": end,
        })

    # Mode 3: interactive
    if not output_json:
        console.print("[dim]\nEnter verification details:\n[/dim]")
    return validate_ticket(prompt_for_missing(owner, namespace, start, end))


def _fail(message: str, output_json: bool, kind: str = "UsageError") -> None:
    if output_json:
        click.echo(json.dumps({
            "status": "ERROR",
            "kind": kind,
            "error": message,
            "exit_code": EXIT_ERROR,
            "exit_description": exit_code_description(EXIT_ERROR),
        }, indent=2))
    else:
        print_error(message)
    sys.exit(EXIT_ERROR)


@click.command("notary-verify")
@click.option("--ticket", "-t", type=click.Path(path_type=Path), help="Arweave verification ticket (JSON file)")
@click.option("--logs", "-l", type=click.Path(path_type=Path), help="ZIP file containing log files to verify")
@click.option("--owner", "-o", help="Arweave wallet address")
@click.option("--namespace", "-n", help="Namespace identifier")
@click.option("--start", "-s", help="Start date (YYYY-MM-DD)")
@click.option("--end", "-e", help="End date (YYYY-MM-DD)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Ledger config file (default: ~/.notary-verify/config.json)")
@click.option("--json", "output_json", is_flag=True, help="Output result as JSON")
@click.option("--verbose", is_flag=True, help="Log ledger requests to stderr")
@click.version_option(version=__version__, prog_name="notary-verify")
@click.pass_context
def verify_command(
    ctx: click.Context,
    ticket: Optional[Path],
    logs: Optional[Path],
    owner: Optional[str],
    namespace: Optional[str],
    start: Optional[str],
    end: Optional[str],
    config_path: Optional[Path],
    output_json: bool,
    verbose: bool,
) -> None:
    """Verify notarized logs against the Arweave blockchain.

    \b
    Examples:
      notary-verify --ticket ticket.json --logs logs.zip
      notary-verify -o 37LN... -n my_app -s 2026-01-01 -e 2026-01-31 -l logs.zip
      notary-verify --logs logs.zip
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(levelname)s - %(message)s")

    if logs is None:
        if not output_json:
            click.echo(ctx.get_help())
        _fail("--logs is required", output_json)
    if not logs.is_file():
        _fail(f"ZIP file not found: {logs}", output_json)
    if ticket is not None and not ticket.is_file():
        _fail(f"Ticket file not found: {ticket}", output_json)

    try:
        client = LedgerClient(load_config(config_path))
    except ValueError as e:
        _fail(str(e), output_json, kind="ConfigError")

    try:
        request = _resolve_request(ticket, owner, namespace, start, end, output_json)
        archive = logs.read_bytes()

        if not output_json:
            print_header(request)
        result = reconcile(
            request,
            archive,
            client=client,
            on_progress=None if output_json else print_progress,
        )
    except PromptCancelled:
        console.print("[dim]\nCancelled.[/dim]")
        sys.exit(EXIT_MATCHED)
    except VerificationError as e:
        _fail(e.message, output_json, kind=e.kind)
    except OSError as e:
        _fail(f"Could not read {logs}: {e}", output_json, kind="OSError")

    exit_code = EXIT_MATCHED if result.is_clean else EXIT_DISCREPANCY
    if output_json:
        payload = {
            "status": "MATCHED" if result.is_clean else "DISCREPANCY",
            "exit_code": exit_code,
            "exit_description": exit_code_description(exit_code),
            **result.to_dict(),
        }
        for entry in payload["missing"]:
            entry["explorer_url"] = client.explorer_url(entry["record_id"])
        click.echo(json.dumps(payload, indent=2))
    else:
        print_results(result, client)
    sys.exit(exit_code)
