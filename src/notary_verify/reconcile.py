"""Reconciliation of local log archives against ledger notarizations.

Three disjoint outcomes are produced:

    verified     - local hash with a matching ledger record
    unnotarized  - local hash with no ledger record
    missing      - ledger record whose hash has no local file

Local hashes are a multiset (duplicate files count separately) while the
missing side compares against the set of local hashes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from .archive import scan_archive
from .hashing import hash_content
from .ledger import LedgerClient, LedgerRecord
from .ticket import VerificationRequest, expand_dates

ProgressSink = Callable[[str], None]

HASH_PROGRESS_INTERVAL = 50


@dataclass
class VerificationResult:
    """Outcome of one verification run."""
    verified: list[LedgerRecord] = field(default_factory=list)
    unnotarized: list[str] = field(default_factory=list)
    missing: list[LedgerRecord] = field(default_factory=list)
    remote_count: int = 0

    @property
    def local_count(self) -> int:
        return len(self.verified) + len(self.unnotarized)

    @property
    def is_clean(self) -> bool:
        return not self.unnotarized and not self.missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "local_count": self.local_count,
            "remote_count": self.remote_count,
            "verified": [r.to_dict() for r in self.verified],
            "unnotarized": list(self.unnotarized),
            "missing": [r.to_dict() for r in self.missing],
        }


def compute_confirmations(records: Iterable[LedgerRecord], current_height: int) -> None:
    """Back-fill confirmations from the chain height; unmined records get 0."""
    for record in records:
        if record.block_height is None:
            record.confirmations = 0
        else:
            record.confirmations = max(0, current_height - record.block_height)


def _preferred(candidate: LedgerRecord, incumbent: LedgerRecord) -> bool:
    # Highest block wins; mined beats pending; ties keep the earlier record
    if candidate.block_height is None:
        return False
    if incumbent.block_height is None:
        return True
    return candidate.block_height > incumbent.block_height


def index_records(records: Iterable[LedgerRecord]) -> dict[str, LedgerRecord]:
    """Map content hash to the record reported for it.

    When several records share a hash, the one from the highest block is
    selected (pending records rank below mined ones, and among equals the
    first in ledger order is kept).
    """
    index: dict[str, LedgerRecord] = {}
    for record in records:
        incumbent = index.get(record.content_hash)
        if incumbent is None or _preferred(record, incumbent):
            index[record.content_hash] = record
    return index


def classify(local_hashes: list[str], records: list[LedgerRecord]) -> VerificationResult:
    """Partition local hashes and ledger records into the three outcomes."""
    by_hash = index_records(records)
    local_set = set(local_hashes)

    result = VerificationResult(remote_count=len(records))
    for digest in local_hashes:
        record = by_hash.get(digest)
        if record is not None:
            result.verified.append(record)
        else:
            result.unnotarized.append(digest)

    for record in records:
        if record.content_hash not in local_set:
            result.missing.append(record)
    return result


def hash_archive(
    archive: bytes,
    date_start: Any,
    date_end: Any,
    on_progress: Optional[ProgressSink] = None,
) -> list[str]:
    """Hash every in-range archive entry, preserving duplicates."""
    notify = on_progress or (lambda _msg: None)
    scan = scan_archive(archive, date_start, date_end)
    total = len(scan)
    notify(f"Found {total} files. Hashing...")

    hashes: list[str] = []
    for i, entry in enumerate(scan):
        if i and i % HASH_PROGRESS_INTERVAL == 0:
            notify(f"Hashed {i}/{total} files...")
        hashes.append(hash_content(entry.content))
    return hashes


def reconcile(
    request: VerificationRequest,
    archive: bytes,
    client: Optional[LedgerClient] = None,
    on_progress: Optional[ProgressSink] = None,
) -> VerificationResult:
    """Verify a log archive against the ledger for a validated request.

    Args:
        request: Validated ticket.
        archive: Raw ZIP bytes of the log archive.
        client: Ledger client; a default-configured one when omitted.
        on_progress: Receives human-readable status lines.

    Returns:
        VerificationResult with confirmations filled in.

    Raises:
        VerificationError subclasses from any step, unchanged.
    """
    client = client or LedgerClient()
    notify = on_progress or (lambda _msg: None)

    dates = expand_dates(request.date_start, request.date_end)

    notify("Reading ZIP file...")
    local_hashes = hash_archive(archive, request.date_start, request.date_end, notify)
    notify(f"Hashed {len(local_hashes)} files. Querying Arweave...")

    records = client.query_records(
        request.identity,
        request.namespace,
        dates,
        on_page=lambda page, count: notify(f"Fetching page {page} from Arweave ({count} transactions)..."),
    )
    notify(f"Found {len(records)} transactions. Calculating confirmations...")

    compute_confirmations(records, client.current_height())

    notify("Reconciling results...")
    return classify(local_hashes, records)
