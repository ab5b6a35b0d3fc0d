"""notary-verify CLI - check log archives against ledger notarizations.

Modes:
    ticket       - --ticket ticket.json --logs logs.zip
    flags        - --owner/--namespace/--start/--end --logs logs.zip
    interactive  - --logs logs.zip, prompts for anything missing
"""
from __future__ import annotations

from .verify_cmd import verify_command


def main() -> None:
    """CLI entry point."""
    verify_command(prog_name="notary-verify")


if __name__ == "__main__":
    main()
