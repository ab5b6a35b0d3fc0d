"""Verification tickets.

A ticket names who notarized (the ledger owner address), under which
namespace, and over which inclusive UTC date range:

    {"type": "arweave", "owner": "...", "namespace": "...",
     "date_start": "YYYY-MM-DD", "date_end": "YYYY-MM-DD"}
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping

from .errors import InvalidTicket

TICKET_TYPE = "arweave"
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


@dataclass(frozen=True)
class VerificationRequest:
    """A validated ticket. Immutable once constructed."""
    identity: str
    namespace: str
    date_start: date
    date_end: date

    def dates(self) -> list[str]:
        return expand_dates(self.date_start, self.date_end)

    def to_ticket(self) -> dict[str, str]:
        return {
            "type": TICKET_TYPE,
            "owner": self.identity,
            "namespace": self.namespace,
            "date_start": self.date_start.isoformat(),
            "date_end": self.date_end.isoformat(),
        }


def _require_string(raw: Mapping[str, Any], key: str, label: str) -> str:
    value = raw.get(key)
    if not value or not isinstance(value, str):
        raise InvalidTicket(f"Invalid ticket: missing or invalid '{label}'")
    return value


def _parse_date(value: str, key: str) -> date:
    if not DATE_RE.fullmatch(value):
        raise InvalidTicket(f"Invalid ticket: {key} must be YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidTicket(f"Invalid ticket: {key} is not a calendar date ({value})") from None


def validate_ticket(raw: Any) -> VerificationRequest:
    """Validate a decoded ticket and build a VerificationRequest.

    Raises:
        InvalidTicket: With a human-readable reason for the first defect found.
    """
    if not isinstance(raw, Mapping):
        raise InvalidTicket("Invalid ticket: expected a JSON object")
    if raw.get("type") != TICKET_TYPE:
        raise InvalidTicket(f"Invalid ticket: type must be '{TICKET_TYPE}'")

    owner = _require_string(raw, "owner", "owner")
    namespace = _require_string(raw, "namespace", "namespace")
    date_start = _require_string(raw, "date_start", "date_start")
    date_end = _require_string(raw, "date_end", "date_end")

    start = _parse_date(date_start, "date_start")
    end = _parse_date(date_end, "date_end")

    # Fixed-width zero-padded dates compare correctly as strings
    if date_start > date_end:
        raise InvalidTicket("Invalid ticket: date_start must not be after date_end")

    return VerificationRequest(identity=owner, namespace=namespace, date_start=start, date_end=end)


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def expand_dates(start: date | str, end: date | str) -> list[str]:
    """Every calendar date from ``start`` to ``end`` inclusive, as YYYY-MM-DD.

    An inverted range yields an empty list.
    """
    current = _as_date(start)
    last = _as_date(end)
    dates: list[str] = []
    while current <= last:
        dates.append(current.isoformat())
        current += timedelta(days=1)
    return dates
