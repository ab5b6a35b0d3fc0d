"""Tests for ticket validation and date expansion."""
from __future__ import annotations

from datetime import date

import pytest

from notary_verify.errors import InvalidTicket
from notary_verify.ticket import VerificationRequest, expand_dates, validate_ticket


def _ticket(**overrides):
    raw = {
        "type": "arweave",
        "owner": "OWNER",
        "namespace": "ns",
        "date_start": "2026-01-01",
        "date_end": "2026-01-31",
    }
    raw.update(overrides)
    return raw


def test_valid_ticket_builds_request() -> None:
    request = validate_ticket(_ticket())
    assert request == VerificationRequest(
        identity="OWNER",
        namespace="ns",
        date_start=date(2026, 1, 1),
        date_end=date(2026, 1, 31),
    )


def test_request_round_trips_to_ticket() -> None:
    raw = _ticket()
    assert validate_ticket(raw).to_ticket() == raw


def test_same_start_and_end_accepted() -> None:
    request = validate_ticket(_ticket(date_start="2026-01-05", date_end="2026-01-05"))
    assert request.dates() == ["2026-01-05"]


def test_multi_year_range_accepted() -> None:
    request = validate_ticket(_ticket(date_start="2024-01-01", date_end="2026-12-31"))
    assert len(request.dates()) == 366 + 365 + 365


def test_start_after_end_rejected() -> None:
    with pytest.raises(InvalidTicket, match="date_start"):
        validate_ticket(_ticket(date_start="2026-02-01", date_end="2026-01-31"))


@pytest.mark.parametrize(
    "overrides, reason",
    [
        ({"type": "ethereum"}, "type must be 'arweave'"),
        ({"owner": ""}, "owner"),
        ({"owner": 42}, "owner"),
        ({"namespace": None}, "namespace"),
        ({"date_start": "2026-1-01"}, "YYYY-MM-DD"),
        ({"date_end": "01/31/2026"}, "YYYY-MM-DD"),
        ({"date_start": "2026-01-01\n"}, "YYYY-MM-DD"),
        ({"date_end": "\u0662\u0660\u0662\u0666-01-01"}, "YYYY-MM-DD"),
        ({"date_end": "2026-02-30"}, "calendar date"),
    ],
)
def test_invalid_tickets_rejected(overrides, reason) -> None:
    with pytest.raises(InvalidTicket, match=reason):
        validate_ticket(_ticket(**overrides))


def test_missing_fields_rejected() -> None:
    raw = _ticket()
    del raw["date_end"]
    with pytest.raises(InvalidTicket, match="date_end"):
        validate_ticket(raw)


def test_non_mapping_rejected() -> None:
    with pytest.raises(InvalidTicket):
        validate_ticket(["not", "a", "ticket"])


def test_expand_dates_inclusive() -> None:
    assert expand_dates("2026-01-01", "2026-01-03") == ["2026-01-01", "2026-01-02", "2026-01-03"]


def test_expand_dates_crosses_month_and_leap_day() -> None:
    assert expand_dates(date(2028, 2, 28), date(2028, 3, 1)) == ["2028-02-28", "2028-02-29", "2028-03-01"]


def test_expand_dates_inverted_range_is_empty() -> None:
    assert expand_dates("2026-01-02", "2026-01-01") == []
