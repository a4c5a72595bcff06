"""Derived record fields: id, category, difficulty, summary, mitigations, hash."""

from __future__ import annotations

import hashlib
import re
from typing import Any

from models import DEFAULT_CATEGORY, DEFAULT_DIFFICULTY, DIFFICULTY_LEVELS, FALLBACK_MITIGATIONS, Metadata

MAX_ID_LENGTH = 50
MAX_SUMMARY_LENGTH = 300
MAX_MITIGATIONS = 10
HASH_PREFIX = "sha512:"
HASH_HEX_LENGTH = 12

_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")
# Only a single leading word before the slash counts as a category.
_CATEGORY_TITLE_RE = re.compile(r"^(\w+)/(.+)$", re.ASCII | re.DOTALL)
_MITIGATION_HEADING_RE = re.compile(
    r"^#+\s*(mitigation|defense|protection|countermeasure|remediation)",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(r"^#+\s")
_BULLET_RE = re.compile(r"^[-*]\s+")


def require_title(metadata: Metadata) -> str:
    """Return the metadata title or raise when it is missing."""
    title = metadata.get("title")
    if not isinstance(title, str) or not title.strip():
        raise RuntimeError("Frontmatter is missing required 'title'")
    return title


def generate_id(title: str) -> str:
    """Slugify a title: lowercase, hyphen-separated, at most 50 chars."""
    slug = _SLUG_SEPARATOR_RE.sub("-", title.lower()).strip("-")
    return slug[:MAX_ID_LENGTH]


def split_category_title(title: str, category: Any = None) -> tuple[str, str]:
    """Split `web/SQL Injection` style titles into (category, title).

    Falls back to the explicit category (or the default) and the untouched
    title when the title has no `word/` prefix.
    """
    match = _CATEGORY_TITLE_RE.match(title)
    if match:
        return match.group(1).lower(), match.group(2).strip()

    if isinstance(category, str) and category:
        return category, title
    return DEFAULT_CATEGORY, title


def normalize_tags(value: Any) -> list[str]:
    """Coerce the `tags` metadata value into a clean list of strings."""
    if isinstance(value, list):
        items = value
    elif isinstance(value, str):
        items = re.sub(r"[\[\]\"']", "", value).split(",")
    else:
        return []
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def extract_difficulty(tags: list[str]) -> tuple[str, list[str]]:
    """Pull the difficulty level out of the tags.

    Returns (difficulty, remaining_tags). The first vocabulary hit wins and
    every vocabulary word is dropped from the remaining tags.
    """
    hits = [tag.lower() for tag in tags if tag.lower() in DIFFICULTY_LEVELS]
    if not hits:
        return DEFAULT_DIFFICULTY, list(tags)
    return hits[0], [tag for tag in tags if tag.lower() not in DIFFICULTY_LEVELS]


def summarize(body: str, subtitle: Any = None) -> str:
    if isinstance(subtitle, str) and subtitle:
        return subtitle
    return body.split("\n", 1)[0].rstrip("\r")[:MAX_SUMMARY_LENGTH]


def extract_mitigations(body: str) -> list[str]:
    """Collect bullet points from the first mitigation-style section.

    The section starts at a heading such as `## Mitigations` or `### Defense`
    and ends at the next heading of any level. Without such a section the
    fixed fallback recommendations are returned.
    """
    mitigations: list[str] = []
    in_section = False

    for line in body.split("\n"):
        if in_section:
            if _HEADING_RE.match(line):
                break
            if _BULLET_RE.match(line) and len(mitigations) < MAX_MITIGATIONS:
                item = _BULLET_RE.sub("", line, count=1).strip()
                if item:
                    mitigations.append(item)
        elif _MITIGATION_HEADING_RE.match(line):
            in_section = True

    return mitigations or list(FALLBACK_MITIGATIONS)


def content_hash(body: str) -> str:
    """Integrity fingerprint shown on the site: `sha512:` + 12 hex chars."""
    digest = hashlib.sha512(body.encode("utf-8")).hexdigest()
    return HASH_PREFIX + digest[:HASH_HEX_LENGTH]
