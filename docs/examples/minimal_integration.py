"""Minimal notary-verify integration example.

Shows how to use the verification engine directly: validate a ticket,
run reconciliation against the live gateway, and inspect the outcome.

Usage:
    python docs/examples/minimal_integration.py ticket.json logs.zip

Prerequisites:
    pip install notary-verify
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

from notary_verify import LedgerClient, VerificationError, load_config, reconcile, validate_ticket


def main() -> None:
    ticket_path, logs_path = (Path(p) for p in sys.argv[1:3])

    # Step 1: Validate the ticket
    request = validate_ticket(json.loads(ticket_path.read_text()))
    print(f"Verifying {request.namespace} from {request.date_start} to {request.date_end}")

    # Step 2: Reconcile the archive against the ledger
    client = LedgerClient(load_config())
    try:
        result = reconcile(request, logs_path.read_bytes(), client=client, on_progress=print)
    except VerificationError as e:
        print(f"{e.kind}: {e.message}")
        sys.exit(1)

    # Step 3: Inspect the outcome
    print(f"Verified: {len(result.verified)}")
    print(f"Unnotarized: {len(result.unnotarized)}")
    print(f"Missing: {len(result.missing)}")
    for record in result.verified[:5]:
        print(f"  {record.content_hash[:16]}... tx={record.record_id} confirmations={record.confirmations}")


if __name__ == "__main__":
    main()
