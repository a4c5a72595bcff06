"""Shared typed models for the writeup converter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Parsed frontmatter: scalar strings or inline arrays (e.g. tags).
Metadata = dict[str, str | list[str]]

DEFAULT_CATEGORY = "general"
DEFAULT_DIFFICULTY = "medium"
DIFFICULTY_LEVELS: tuple[str, ...] = ("init", "medium", "hard")

FALLBACK_MITIGATIONS: tuple[str, ...] = (
    "Review and validate security controls",
    "Implement proper input validation",
    "Enable security monitoring and logging",
)


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """One entry of the JSON feed consumed by the site."""

    id: str
    title: str
    category: str
    difficulty: str
    summary: str
    content: str
    tags: tuple[str, ...]
    hash: str
    mitigations: tuple[str, ...]
    date: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping, keys in feed order."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "difficulty": self.difficulty,
            "summary": self.summary,
            "content": self.content,
            "tags": list(self.tags),
            "hash": self.hash,
            "mitigations": list(self.mitigations),
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, item: dict[str, Any]) -> ContentRecord:
        """Rebuild a record from a feed entry, defaulting missing fields."""
        tags = item.get("tags")
        mitigations = item.get("mitigations")
        return cls(
            id=_as_str(item.get("id")),
            title=_as_str(item.get("title")),
            category=_as_str(item.get("category")) or DEFAULT_CATEGORY,
            difficulty=_as_str(item.get("difficulty")) or DEFAULT_DIFFICULTY,
            summary=_as_str(item.get("summary")),
            content=_as_str(item.get("content")),
            tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
            hash=_as_str(item.get("hash")),
            mitigations=(
                tuple(str(m) for m in mitigations)
                if isinstance(mitigations, list) and mitigations
                else FALLBACK_MITIGATIONS
            ),
            date=_as_str(item.get("date")),
        )


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""
