# signtext/dataio/csv_utils.py
from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


def detect_delimiter(path: Path | str) -> str:
    """
    Robust delimiter detection with a preference for ';' if sniffing is inconclusive.
    """
    p = Path(path)
    text = p.read_text(encoding="utf-8-sig", errors="ignore")
    sample = text[: 64 * 1024]

    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=";,|\t")
        delim = dialect.delimiter or ";"
    except csv.Error:
        delim = ";"

    if delim in {",", ";"}:
        comma = sample.count(",")
        semi = sample.count(";")
        if comma == semi == 0:
            delim = ";"
        elif comma > semi:
            delim = ","
        else:
            delim = ";"

    logger.info("Detected delimiter '%s' for %s", delim, p)
    return delim


def _slug(s: str) -> str:
    """Normalize to compare names ignoring spaces/underscores/hyphens and case."""
    return re.sub(r"[\s_\-]+", "", str(s)).lower()


def find_column(columns: Iterable[str], *aliases: str) -> Optional[str]:
    """First column whose slug matches one of the aliases (e.g. 'Timestamp ms' ~ 'timestamp_ms')."""
    wanted: List[str] = [_slug(a) for a in aliases]
    for col in columns:
        if _slug(col) in wanted:
            return col
    return None
