"""Error taxonomy for notarization verification.

Every failure the engine can raise derives from VerificationError and carries
a stable ``kind`` so callers (the CLI, JSON output) can report it without
string matching. Nothing here is retried internally: a run either produces a
complete result or fails with exactly one of these.
"""
from __future__ import annotations


class VerificationError(RuntimeError):
    """Base class for engine failures."""

    kind = "VerificationError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "error": self.message}


class InvalidTicket(VerificationError):
    """Raised when a ticket is structurally or semantically defective."""

    kind = "InvalidTicket"


class MalformedContent(VerificationError):
    """Raised when an archive (or one of its entries) cannot be parsed."""

    kind = "MalformedContent"


class NoMatchingEntries(VerificationError):
    """Raised when no archive entry follows the dated log layout."""

    kind = "NoMatchingEntries"


class NoEntriesInRange(VerificationError):
    """Raised when dated entries exist but none fall inside the date window."""

    kind = "NoEntriesInRange"


class LedgerUnavailable(VerificationError):
    """Raised when a ledger request fails at the transport level."""

    kind = "LedgerUnavailable"


class LedgerQueryError(VerificationError):
    """Raised when the ledger answers but reports an application error."""

    kind = "LedgerQueryError"
