"""Archive scanning for dated notarization logs.

Log archives are ZIP files whose entries follow the layout written by the
notarizer:

    {folder}/YYYY/MM/DD/{hash}.json

Entries outside that layout are ignored. Scanning is split in two: the entry
index is built (and validated) eagerly by scan_archive(), while entry content
is only read when the returned ArchiveScan is iterated. Each iteration opens
the archive afresh, so a scan can be consumed more than once.
"""
from __future__ import annotations

import io
import logging
import os
import re
import zipfile
import zlib
from dataclasses import dataclass
from datetime import date
from typing import Iterator

from .errors import MalformedContent, NoEntriesInRange, NoMatchingEntries

LOGGER = logging.getLogger(__name__)

EXPECTED_LAYOUT = "{folder}/YYYY/MM/DD/{hash}.json"
ENTRY_PATH_RE = re.compile(r"([0-9]{4})/([0-9]{2})/([0-9]{2})/[^/]+\.json\Z")
MAX_ENTRY_BYTES = int(os.environ.get("NOTARY_VERIFY_MAX_ENTRY_BYTES", str(64 * 1024 * 1024)))


@dataclass(frozen=True)
class ArchiveEntry:
    """One dated log entry read from the archive."""
    path: str
    date: str
    content: str


def _entry_date(path: str) -> str | None:
    match = ENTRY_PATH_RE.search(path)
    if not match:
        return None
    return f"{match.group(1)}-{match.group(2)}-{match.group(3)}"


def _open_zip(data: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise MalformedContent(f"Not a readable ZIP archive: {exc}") from exc


class ArchiveScan:
    """Lazy, restartable view over the in-range entries of an archive."""

    def __init__(self, data: bytes, selected: list[tuple[int, str, str]]) -> None:
        self._data = data
        self._selected = selected

    def __len__(self) -> int:
        return len(self._selected)

    @property
    def paths(self) -> list[str]:
        return [path for _, path, _ in self._selected]

    def __iter__(self) -> Iterator[ArchiveEntry]:
        with _open_zip(self._data) as zf:
            # Index by position: ZIP files may repeat a name
            infos = zf.infolist()
            for index, path, entry_date in self._selected:
                info = infos[index]
                if info.file_size > MAX_ENTRY_BYTES:
                    raise MalformedContent(
                        f"Archive entry {path} exceeds maximum size ({info.file_size} > {MAX_ENTRY_BYTES})"
                    )
                try:
                    raw = zf.read(info)
                except (zipfile.BadZipFile, zlib.error, RuntimeError, OSError) as exc:
                    raise MalformedContent(f"Could not read archive entry {path}: {exc}") from exc
                # The notarizer hashed the decoded text; invalid UTF-8 becomes U+FFFD there too
                yield ArchiveEntry(path=path, date=entry_date, content=raw.decode("utf-8", errors="replace"))


def _iso(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else value


def scan_archive(data: bytes, date_start: date | str, date_end: date | str) -> ArchiveScan:
    """Select the dated JSON entries of a ZIP archive within a date window.

    Args:
        data: Raw ZIP bytes.
        date_start: First date of the window (inclusive).
        date_end: Last date of the window (inclusive).

    Returns:
        ArchiveScan over the selected entries, in archive order.

    Raises:
        MalformedContent: If the bytes are not a ZIP archive.
        NoMatchingEntries: If no entry follows the dated layout.
        NoEntriesInRange: If dated entries exist but none are in the window.
    """
    start = _iso(date_start)
    end = _iso(date_end)

    with _open_zip(data) as zf:
        infos = zf.infolist()

    matched = 0
    selected: list[tuple[int, str, str]] = []
    for index, info in enumerate(infos):
        entry_date = _entry_date(info.filename)
        if entry_date is None:
            LOGGER.debug("Ignoring archive entry outside layout: %s", info.filename)
            continue
        matched += 1
        if info.is_dir():
            continue
        if start <= entry_date <= end:
            selected.append((index, info.filename, entry_date))
        else:
            LOGGER.debug("Archive entry %s dated %s is outside %s..%s", info.filename, entry_date, start, end)

    if matched == 0:
        raise NoMatchingEntries(f"No log files found in ZIP. Expected structure: {EXPECTED_LAYOUT}")
    if not selected:
        raise NoEntriesInRange(f"No log files found within date range {start} to {end}")
    return ArchiveScan(data, selected)
