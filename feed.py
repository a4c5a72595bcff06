"""Read-side helpers for a published writeup feed.

Loads the JSON feed (local file or static URL) and answers the lookups the
site performs: by id, free-text search with pagination, facet filtering.

Runnable standalone:
    python feed.py assets/data/writeups.json "sql injection"
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import requests

from converter import parse_feed_date
from models import ContentRecord

LOGGER = logging.getLogger(__name__)

FEED_REQUEST_TIMEOUT_SECONDS = 20
DEFAULT_PAGE_SIZE = 20
_ALL = "all"


def load_feed(source: str | Path) -> list[ContentRecord]:
    """Load a feed from an http(s) URL or a local JSON file."""
    source_str = str(source)
    if source_str.startswith(("http://", "https://")):
        response = requests.get(source_str, timeout=FEED_REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
        payload = response.json()
    else:
        payload = json.loads(Path(source_str).read_text(encoding="utf-8"))

    records = _parse_feed_payload(payload)
    LOGGER.info("Loaded %s record(s) from %s", len(records), source_str)
    return records


def _parse_feed_payload(payload: Any) -> list[ContentRecord]:
    if not isinstance(payload, list):
        raise RuntimeError("Unexpected feed payload shape: expected a list")
    return [ContentRecord.from_dict(item) for item in payload if isinstance(item, dict)]


def find_by_id(records: list[ContentRecord], record_id: str) -> ContentRecord:
    """Return the record with the given id; KeyError if absent."""
    for record in records:
        if record.id == record_id:
            return record
    raise KeyError(f"Writeup not found: {record_id}")


def search(
    records: list[ContentRecord],
    query: str,
    limit: int = DEFAULT_PAGE_SIZE,
    offset: int = 0,
) -> tuple[list[ContentRecord], int]:
    """Case-insensitive title/summary search.

    Returns (page, total_matches); matches are ordered newest-first before
    the page is sliced.
    """
    if not query or not query.strip():
        return [], 0

    needle = query.lower()
    matches = [
        r for r in records
        if needle in r.title.lower() or needle in r.summary.lower()
    ]
    matches.sort(key=lambda r: parse_feed_date(r.date), reverse=True)
    return matches[offset:offset + limit], len(matches)


def filter_records(
    records: list[ContentRecord],
    category: str | None = None,
    difficulty: str | None = None,
    tag: str | None = None,
    text: str | None = None,
) -> list[ContentRecord]:
    """Apply the site's facet filters; None or "all" disables a facet."""
    needle = text.strip().lower() if text else ""
    result: list[ContentRecord] = []

    for record in records:
        if category not in (None, _ALL) and record.category != category:
            continue
        if difficulty not in (None, _ALL) and record.difficulty != difficulty:
            continue
        if tag not in (None, _ALL) and tag not in record.tags:
            continue
        if needle:
            haystack = f"{record.title} {record.summary} {record.category} {record.hash}".lower()
            if needle not in haystack:
                continue
        result.append(record)

    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Search a writeup JSON feed")
    parser.add_argument("source", help="Feed path or http(s) URL")
    parser.add_argument("query", help="Text to look for in titles and summaries")
    parser.add_argument("--limit", type=int, default=DEFAULT_PAGE_SIZE)
    parser.add_argument("--offset", type=int, default=0)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    page, total = search(load_feed(args.source), args.query, limit=args.limit, offset=args.offset)
    logging.info("%s match(es), showing %s", total, len(page))
    for record in page:
        print(f"{record.date}  {record.id}  [{record.category}/{record.difficulty}]  {record.title}")


if __name__ == "__main__":
    main()
