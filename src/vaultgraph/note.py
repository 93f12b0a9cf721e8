"""Core note dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NamedTuple


class RawNote(NamedTuple):
    """A note file as read from disk, before extraction."""

    id: str
    path: Path
    text: str
    modified: str | None = None


@dataclass(frozen=True)
class Extraction:
    """Tags and outbound link targets found in one note's text."""

    tags: frozenset[str] = frozenset()
    #: Raw link targets in first-occurrence order, alias and anchor removed
    links: tuple[str, ...] = ()


@dataclass
class Note:
    """A single note in the vault, after extraction.

    The raw text is not kept; only what the graph and the ``files`` query
    need survives.
    """

    id: str
    path: Path
    tags: set[str] = field(default_factory=set)
    links: list[str] = field(default_factory=list)
    frontmatter: dict[str, Any] = field(default_factory=dict)
    word_count: int = 0
    modified: str | None = None

    @property
    def name(self) -> str:
        """Base name of the note (last NoteId segment)."""
        return self.id.rsplit("/", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.id,
            "word_count": self.word_count,
            "link_count": len(self.links),
            "tag_count": len(self.tags),
            "modified": self.modified,
        }
