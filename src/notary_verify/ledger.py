"""Ledger client for notarization records on Arweave.

Records are transactions tagged by the notarizer:

    App-Name            - notarizing application (configurable)
    Namespace           - tenant namespace
    Notarized-Date-UTC  - YYYY-MM-DD the content was notarized
    Hash                - canonical content hash (the reconciliation key)
    Notarized-At        - full notarization timestamp
    Session-ID          - notarizer session
    Sequence            - position within the session

The GraphQL gateway returns at most 100 transactions per page, newest block
first, with a cursor per edge. query_records() walks every page; decoding is
lenient so one odd transaction cannot abort a whole scan.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass
from http.client import HTTPException
from typing import Any, Callable, Iterable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import LedgerConfig
from .errors import LedgerQueryError, LedgerUnavailable

LOGGER = logging.getLogger(__name__)

PageCallback = Callable[[int, int], None]
LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")

TRANSACTIONS_QUERY = """
query($owners: [String!], $tags: [TagFilter!], $first: Int, $after: String) {
  transactions(owners: $owners, tags: $tags, first: $first, after: $after, sort: HEIGHT_DESC) {
    pageInfo { hasNextPage }
    edges {
      cursor
      node {
        id
        block { timestamp height }
        tags { name value }
      }
    }
  }
}
""".strip()


@dataclass
class LedgerRecord:
    """One notarization event retrieved from the ledger."""
    record_id: str
    content_hash: str
    notarized_at: str = ""
    notarized_date: str = ""
    session_id: str = ""
    sequence: int = 0
    block_height: Optional[int] = None   # None while pending
    block_timestamp: Optional[int] = None
    confirmations: int = 0               # back-filled by reconciliation

    @property
    def is_mined(self) -> bool:
        return self.block_height is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _leading_int(value: str) -> int:
    """Integer prefix of ``value`` (``"12abc"`` -> 12); 0 when there is none."""
    match = LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else 0


def decode_record(node: dict[str, Any]) -> LedgerRecord:
    """Decode a GraphQL transaction node into a LedgerRecord.

    Absent tags default to "" / 0 / None.
    """
    tags: dict[str, str] = {}
    for tag in node.get("tags") or []:
        if isinstance(tag, dict) and tag.get("name") is not None:
            tags[str(tag["name"])] = "" if tag.get("value") is None else str(tag["value"])

    block = node.get("block") or {}
    sequence = _leading_int(tags.get("Sequence", ""))

    return LedgerRecord(
        record_id=str(node.get("id") or ""),
        content_hash=tags.get("Hash", ""),
        notarized_at=tags.get("Notarized-At", ""),
        notarized_date=tags.get("Notarized-Date-UTC", ""),
        session_id=tags.get("Session-ID", ""),
        sequence=sequence,
        block_height=_optional_int(block.get("height")),
        block_timestamp=_optional_int(block.get("timestamp")),
    )


class LedgerClient:
    """Read-only client for the ledger's GraphQL and info endpoints."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig()

    def _request_json(self, url: str, payload: Optional[dict] = None) -> Any:
        """POST ``payload`` (or GET when None) and decode the JSON reply."""
        body = json.dumps(payload).encode("utf-8") if payload is not None else None
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        req = Request(url, data=body, headers=headers, method="POST" if body is not None else "GET")

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as resp:
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    raise LedgerUnavailable(f"Ledger request to {url} failed: HTTP {status}")
                raw = resp.read()
        except HTTPError as e:
            raise LedgerUnavailable(f"Ledger request to {url} failed: HTTP {e.code} {e.reason}") from e
        except URLError as e:
            raise LedgerUnavailable(f"Ledger request to {url} failed: {e.reason}") from e
        except OSError as e:  # timeouts, resets
            raise LedgerUnavailable(f"Ledger request to {url} failed: {e}") from e
        except HTTPException as e:  # malformed status line, truncated body
            raise LedgerUnavailable(f"Ledger request to {url} failed: {type(e).__name__}: {e}") from e

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise LedgerUnavailable(f"Ledger response from {url} is not valid JSON: {e}") from e

    def build_variables(
        self,
        identity: str,
        namespace: str,
        dates: Iterable[str],
        cursor: Optional[str] = None,
    ) -> dict[str, Any]:
        variables: dict[str, Any] = {
            "owners": [identity],
            "tags": [
                {"name": "App-Name", "values": [self.config.app_name]},
                {"name": "Namespace", "values": [namespace]},
                {"name": "Notarized-Date-UTC", "values": list(dates)},
            ],
            "first": self.config.page_size,
        }
        if cursor:
            variables["after"] = cursor
        return variables

    def query_records(
        self,
        identity: str,
        namespace: str,
        dates: Iterable[str],
        on_page: Optional[PageCallback] = None,
    ) -> list[LedgerRecord]:
        """Fetch every record for ``identity``/``namespace`` on any of ``dates``.

        Pages are requested sequentially, each continuing from the last cursor
        of the previous page, until the gateway reports no further page or
        returns an empty one.

        Raises:
            LedgerUnavailable: On transport failure.
            LedgerQueryError: When the gateway reports a GraphQL error.
        """
        date_values = sorted(set(dates))
        results: list[LedgerRecord] = []
        cursor: Optional[str] = None
        page = 1

        while True:
            variables = self.build_variables(identity, namespace, date_values, cursor)
            LOGGER.debug("Querying ledger page %d (after=%s)", page, cursor)
            data = self._request_json(
                self.config.graphql_url,
                {"query": TRANSACTIONS_QUERY, "variables": variables},
            )
            if not isinstance(data, dict):
                raise LedgerUnavailable("Ledger response is not a JSON object")

            errors = data.get("errors")
            if errors:
                first = errors[0] if isinstance(errors, list) else errors
                message = first.get("message") if isinstance(first, dict) else first
                raise LedgerQueryError(f"Arweave GraphQL error: {message}")

            transactions = (data.get("data") or {}).get("transactions") or {}
            edges = transactions.get("edges") or []
            has_next = bool((transactions.get("pageInfo") or {}).get("hasNextPage", False))

            for edge in edges:
                results.append(decode_record((edge or {}).get("node") or {}))

            if on_page is not None:
                on_page(page, len(results))
            LOGGER.debug("Ledger page %d: %d edges, has_next=%s", page, len(edges), has_next)

            if not has_next or not edges:
                break
            next_cursor = (edges[-1] or {}).get("cursor")
            if not next_cursor or next_cursor == cursor:
                # A page without a fresh cursor would repeat forever
                LOGGER.debug("Stopping pagination: no new cursor after page %d", page)
                break
            cursor = next_cursor
            page += 1

        return results

    def current_height(self) -> int:
        """Current chain height, used to compute confirmations.

        Raises:
            LedgerUnavailable: On transport failure.
        """
        data = self._request_json(self.config.info_url)
        if not isinstance(data, dict):
            raise LedgerUnavailable("Ledger info response is not a JSON object")
        return _optional_int(data.get("height")) or 0

    def explorer_url(self, record_id: str) -> str:
        return self.config.explorer_url.format(tx_id=record_id)
