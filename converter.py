"""Assemble writeup records from Markdown files and write the JSON feed."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path

from fields import (
    MAX_ID_LENGTH,
    content_hash,
    extract_difficulty,
    extract_mitigations,
    generate_id,
    normalize_tags,
    require_title,
    split_category_title,
    summarize,
)
from frontmatter import parse_frontmatter
from markdown_renderer import render_markdown
from models import ContentRecord

LOGGER = logging.getLogger(__name__)

SOURCE_SUFFIX = ".md"

# Records whose date cannot be parsed sort after every dated record.
_UNDATED = datetime.min.replace(tzinfo=UTC)


def build_record(text: str, now: datetime | None = None) -> ContentRecord:
    """Turn one raw document into a ContentRecord.

    Raises RuntimeError when the frontmatter has no title.
    """
    metadata, body = parse_frontmatter(text)

    raw_title = require_title(metadata)
    category, title = split_category_title(raw_title, metadata.get("category"))
    difficulty, tags = extract_difficulty(normalize_tags(metadata.get("tags")))

    date = metadata.get("date")
    if not isinstance(date, str) or not date:
        date = _iso_timestamp(now or datetime.now(UTC))

    return ContentRecord(
        id=generate_id(title),
        title=title,
        category=category,
        difficulty=difficulty,
        summary=summarize(body, metadata.get("subtitle")),
        content=render_markdown(body),
        tags=tuple(tags),
        hash=content_hash(body),
        mitigations=tuple(extract_mitigations(body)),
        date=date,
    )


def parse_writeup(path: Path, now: datetime | None = None) -> ContentRecord:
    """Read a Markdown file from disk and build its record."""
    return build_record(path.read_text(encoding="utf-8"), now=now)


def find_source_files(input_dir: Path) -> list[Path]:
    """Return the Markdown files directly inside input_dir, sorted by name.

    Raises FileNotFoundError if input_dir does not exist.
    """
    if not input_dir.is_dir():
        raise FileNotFoundError(f'Input directory "{input_dir}" not found')

    files = sorted(
        path for path in input_dir.iterdir()
        if path.is_file() and path.name.endswith(SOURCE_SUFFIX)
    )
    LOGGER.info("Found %s markdown file(s) in %s", len(files), input_dir)
    return files


def convert_files(files: list[Path], now: datetime | None = None) -> list[ContentRecord]:
    """Parse every file, skipping (and logging) the ones that fail.

    The result is sorted newest-first and ids are made unique.
    """
    now = now or datetime.now(UTC)
    records: list[ContentRecord] = []

    for path in files:
        try:
            record = parse_writeup(path, now=now)
        except Exception as exc:  # one bad file must not abort the batch
            LOGGER.exception("✗ Error parsing %s: %s", path.name, exc)
            continue
        LOGGER.info("✓ Parsed: %s → %s", path.name, record.id)
        records.append(record)

    return assign_unique_ids(sort_records(records))


def sort_records(records: list[ContentRecord]) -> list[ContentRecord]:
    """Stable sort by date, newest first; unparseable dates go last."""
    return sorted(records, key=lambda r: parse_feed_date(r.date), reverse=True)


def assign_unique_ids(records: list[ContentRecord]) -> list[ContentRecord]:
    """Give colliding slugs a numeric suffix (-2, -3, ...).

    The first record in the given order keeps the bare slug.
    """
    seen: set[str] = set()
    unique: list[ContentRecord] = []

    for record in records:
        candidate = record.id
        counter = 1
        while candidate in seen:
            counter += 1
            suffix = f"-{counter}"
            candidate = record.id[: MAX_ID_LENGTH - len(suffix)] + suffix

        if candidate != record.id:
            LOGGER.warning(
                "Duplicate id %r for title %r, renamed to %r", record.id, record.title, candidate
            )
            record = replace(record, id=candidate)

        seen.add(candidate)
        unique.append(record)

    return unique


def write_feed(records: list[ContentRecord], output_path: Path) -> None:
    """Serialize records as a pretty-printed JSON array."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [record.to_dict() for record in records]
    output_path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def parse_feed_date(raw: str) -> datetime:
    value = raw.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return _UNDATED

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        # e.g. 0001-01-01T00:00:00+01:00 has no UTC equivalent
        return _UNDATED


def _iso_timestamp(moment: datetime) -> str:
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
