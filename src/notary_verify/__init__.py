"""notary-verify - check local logs against Arweave notarizations.

Submodules:
    hashing    - RFC 8785 canonical content hashing
    ticket     - Ticket validation and date-range expansion
    archive    - Dated log entry selection from ZIP archives
    ledger     - Paginated GraphQL client for notarization records
    reconcile  - Verified / unnotarized / missing classification
    config     - Layered ledger configuration

Usage:
    from notary_verify import LedgerClient, reconcile, validate_ticket

    request = validate_ticket(json.loads(ticket_text))
    result = reconcile(request, zip_bytes, client=LedgerClient())
"""
from __future__ import annotations

__version__ = "0.1.0"

from notary_verify.config import LedgerConfig, load_config
from notary_verify.errors import (
    InvalidTicket,
    LedgerQueryError,
    LedgerUnavailable,
    MalformedContent,
    NoEntriesInRange,
    NoMatchingEntries,
    VerificationError,
)
from notary_verify.hashing import hash_content
from notary_verify.ledger import LedgerClient, LedgerRecord
from notary_verify.reconcile import VerificationResult, reconcile
from notary_verify.ticket import VerificationRequest, expand_dates, validate_ticket

__all__ = [
    "__version__",
    # Engine
    "reconcile",
    "VerificationResult",
    "hash_content",
    "validate_ticket",
    "expand_dates",
    "VerificationRequest",
    "LedgerClient",
    "LedgerRecord",
    # Config
    "LedgerConfig",
    "load_config",
    # Errors
    "VerificationError",
    "InvalidTicket",
    "MalformedContent",
    "NoMatchingEntries",
    "NoEntriesInRange",
    "LedgerUnavailable",
    "LedgerQueryError",
]
