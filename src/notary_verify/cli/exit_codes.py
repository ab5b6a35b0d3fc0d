"""Stable exit codes for notary-verify.

    0 - every local log matched a ledger record and nothing is missing
    1 - discrepancies found, or the run failed
"""
from __future__ import annotations

EXIT_MATCHED = 0
EXIT_DISCREPANCY = 1
EXIT_ERROR = 1

_DESCRIPTIONS = {
    EXIT_MATCHED: "All logs matched",
}


def exit_code_description(code: int) -> str:
    return _DESCRIPTIONS.get(code, "Discrepancies found or verification failed")
