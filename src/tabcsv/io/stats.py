"""
Sampling row-count estimator for CSV file sets.

Obtaining an exact row count means scanning every file. Instead, the estimator reads at most
SAMPLE_LINE_CAP (100) lines across all files combined, measures their average UTF-8 size,
and extrapolates over the total byte size of the file set.

Algorithm
1) For every file add its byte length to total_file_bytes.
2) While fewer than the cap have been sampled, read lines from the current file; each adds
   len(utf8(line)) + 1 to sampled_row_bytes.
3) If fewer lines than the cap were sampled, the whole set was read: use
   total_file_bytes as sampled_row_bytes. Line reading drops "\\r" from "\\r\\n", so the
   per-line sum undercounts CRLF files; this substitution is an approximation for that case
   and does not model other line-ending mixes.
4) Zero sampled bytes -> UNKNOWN; otherwise
   total_file_bytes * min(cap, sampled_row_count) // sampled_row_bytes.

Notes
- Any failure (missing file, permission error, ...) yields TableStats.UNKNOWN; estimation is
  advisory and never raises.
- One file handle is open at a time, released before the next file is visited.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

from tabcsv.core.constants import SAMPLE_LINE_CAP
from tabcsv.core.types import RowType

from .fs import file_size, open_text

__all__ = [
    "TableStats",
    "SampleStats",
    "collect_sample_stats",
    "estimate_row_count",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableStats:
    """
    Estimated table statistics.

    Attributes:
        row_count (int | None): Estimated row count, or None when unknown.
    """

    row_count: int | None

    UNKNOWN: ClassVar[TableStats]

    @property
    def is_unknown(self) -> bool:
        return self.row_count is None


TableStats.UNKNOWN = TableStats(None)


@dataclass
class SampleStats:
    """Accumulated sampling totals for one estimation call."""

    total_file_bytes: int = 0
    sampled_row_count: int = 0
    sampled_row_bytes: int = 0


def collect_sample_stats(
    files: Iterable[str | os.PathLike[str]],
    sample_cap: int = SAMPLE_LINE_CAP,
) -> SampleStats:
    """
    Accumulate total sizes and sample the first lines across a file set.

    Raises:
        OSError: If a file cannot be stat'ed or read.
    """
    stats = SampleStats()
    for path in files:
        stats.total_file_bytes += file_size(path)
        if stats.sampled_row_count >= sample_cap:
            continue
        with open_text(path, encoding="utf-8", errors="replace") as fh:
            for line in fh:
                if line.endswith("\n"):
                    line = line[:-1]
                stats.sampled_row_count += 1
                stats.sampled_row_bytes += len(line.encode("utf-8")) + 1
                if stats.sampled_row_count >= sample_cap:
                    break
    return stats


def estimate_row_count(
    files: Iterable[str | os.PathLike[str]],
    row_type: RowType | None = None,
) -> TableStats:
    """
    Estimate the number of rows in a set of CSV files without scanning them fully.

    Args:
        files (Iterable[str | os.PathLike[str]]): Files to estimate over.
        row_type (RowType | None): Produced row type; accepted for interface symmetry and
            not used for parsing.

    Returns:
        TableStats: Estimated row count, or TableStats.UNKNOWN.

    Examples:
        >>> estimate_row_count([]).is_unknown
        True
    """
    try:
        stats = collect_sample_stats(files)
    except Exception as exc:
        logger.debug("row count estimation failed, reporting unknown: %s", exc)
        return TableStats.UNKNOWN

    sampled_row_bytes = stats.sampled_row_bytes
    if stats.sampled_row_count < SAMPLE_LINE_CAP:
        sampled_row_bytes = stats.total_file_bytes
    if sampled_row_bytes == 0:
        return TableStats.UNKNOWN

    sampled_lines = min(SAMPLE_LINE_CAP, stats.sampled_row_count)
    return TableStats(stats.total_file_bytes * sampled_lines // sampled_row_bytes)
