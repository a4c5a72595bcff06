"""Metadata header (frontmatter) parsing for Markdown writeups."""

from __future__ import annotations

import re

from models import Metadata

# Opening `---` must be the very first line; the block may be empty.
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(?P<block>.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
_EDGE_QUOTE_RE = re.compile(r"^[\"']|[\"']$")


def parse_frontmatter(text: str) -> tuple[Metadata, str]:
    """Split raw document text into (metadata, body).

    Without a leading `---` block the metadata is empty and the text is
    returned untouched. Otherwise the body is everything after the closing
    `---` line, stripped of surrounding whitespace.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    metadata: Metadata = {}
    for line in (match.group("block") or "").splitlines():
        key, sep, raw_value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        metadata[key] = parse_scalar_value(raw_value)

    return metadata, text[match.end():].strip()


def parse_scalar_value(raw: str) -> str | list[str]:
    """Parse one frontmatter value: unquote it, expand `[a, b]` arrays."""
    value = raw.strip()

    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]

    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        if not inner.strip():
            return []
        return [_EDGE_QUOTE_RE.sub("", item.strip()) for item in inner.split(",")]

    return value
