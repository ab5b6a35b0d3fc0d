"""Interactive prompts for verification details not given as flags."""
from __future__ import annotations

from typing import Optional

import questionary
from questionary import Style

from ..ticket import DATE_RE, TICKET_TYPE

PROMPT_STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "fg:white bold"),
    ("answer", "fg:cyan bold"),
    ("instruction", "fg:#888888"),
    ("text", "fg:white"),
])


class PromptCancelled(Exception):
    """Raised when the user aborts a prompt (Ctrl+C)."""


def _required(value: str) -> bool | str:
    return len(value.strip()) > 0 or "Required"


def _date_format(value: str) -> bool | str:
    return bool(DATE_RE.fullmatch(value.strip())) or "Use YYYY-MM-DD format"


def _ask(message: str, validate) -> str:
    answer = questionary.text(message, validate=validate, style=PROMPT_STYLE).ask()
    if answer is None:
        raise PromptCancelled()
    return answer


def prompt_for_missing(
    owner: Optional[str],
    namespace: Optional[str],
    start: Optional[str],
    end: Optional[str],
) -> dict[str, str]:
    """Prompt for each missing value and return a raw ticket dict.

    Raises:
        PromptCancelled: If any prompt is aborted.
    """
    if not owner:
        owner = _ask("Arweave wallet address (owner):", _required)
    if not namespace:
        namespace = _ask("Namespace:", _required)
    if not start:
        start = _ask("Start date (YYYY-MM-DD):", _date_format)
    if not end:
        end = _ask("End date (YYYY-MM-DD):", _date_format)

    return {
        "type": TICKET_TYPE,
        "owner": owner.strip(),
        "namespace": namespace.strip(),
        "date_start": start.strip(),
        "date_end": end.strip(),
    }
