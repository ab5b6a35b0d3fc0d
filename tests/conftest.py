"""Pytest configuration and fixtures for notary-verify tests."""
from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Callable, Optional

import pytest

from notary_verify.config import LedgerConfig
from notary_verify.ledger import LedgerClient

TEST_CONFIG = LedgerConfig(
    graphql_url="https://gateway.test/graphql",
    info_url="https://gateway.test/info",
    explorer_url="https://explorer.test/tx/{tx_id}",
)


def build_zip(entries: dict[str, str | bytes]) -> bytes:
    """Build ZIP bytes from a {path: content} mapping; paths ending in / are dirs."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for path, content in entries.items():
            if path.endswith("/"):
                zf.writestr(zipfile.ZipInfo(path), b"")
            else:
                zf.writestr(path, content)
    return buf.getvalue()


def make_node(
    tx_id: str,
    content_hash: Optional[str],
    height: Optional[int] = 990,
    date: str = "2026-01-01",
    sequence: Optional[str] = "1",
) -> dict[str, Any]:
    """A GraphQL transaction node as the gateway returns it."""
    tags = [{"name": "App-Name", "value": "agentsystems-notary"}]
    if content_hash is not None:
        tags.append({"name": "Hash", "value": content_hash})
    tags.extend([
        {"name": "Notarized-At", "value": f"{date}T12:00:00Z"},
        {"name": "Notarized-Date-UTC", "value": date},
        {"name": "Session-ID", "value": "session-1"},
    ])
    if sequence is not None:
        tags.append({"name": "Sequence", "value": sequence})
    block = {"height": height, "timestamp": 1767268800} if height is not None else None
    return {"id": tx_id, "block": block, "tags": tags}


def graphql_page(nodes: list[dict[str, Any]], has_next: bool) -> dict[str, Any]:
    edges = [{"cursor": f"cursor-{node['id']}", "node": node} for node in nodes]
    return {"data": {"transactions": {"pageInfo": {"hasNextPage": has_next}, "edges": edges}}}


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200):
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class FakeGateway:
    """Stands in for urlopen: serves queued GraphQL pages and a fixed height."""

    def __init__(self) -> None:
        self.pages: list[dict[str, Any]] = []
        self.height = 1000
        self.requests: list[dict[str, Any]] = []
        self.info_calls = 0
        self.graphql_error: Optional[Exception] = None

    def __call__(self, req, timeout=None) -> FakeResponse:
        assert timeout is not None
        if req.full_url == TEST_CONFIG.info_url:
            self.info_calls += 1
            return FakeResponse(json.dumps({"height": self.height}).encode())
        if self.graphql_error is not None:
            raise self.graphql_error
        self.requests.append(json.loads(req.data.decode()))
        page = self.pages.pop(0) if self.pages else graphql_page([], False)
        return FakeResponse(json.dumps(page).encode())


@pytest.fixture
def zip_builder() -> Callable[[dict[str, str | bytes]], bytes]:
    return build_zip


@pytest.fixture
def gateway(monkeypatch) -> FakeGateway:
    fake = FakeGateway()
    monkeypatch.setattr("notary_verify.ledger.urlopen", fake)
    return fake


@pytest.fixture
def client() -> LedgerClient:
    return LedgerClient(TEST_CONFIG)
