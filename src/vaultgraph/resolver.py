"""Resolve raw ``[[link]]`` targets to NoteIds.

Resolution order for a normalised target:

1. exact NoteId match (``[[folder/Note]]`` or ``[[Note]]`` at the root);
2. with short links enabled, the single note whose NoteId ends in
   ``/<target>`` (``[[Note]]`` or a partial path like ``[[sub/Note]]``).
   More than one such note is *ambiguous* and is never guessed;
3. a target carrying an attachment extension (``![[diagram.png]]``) is an
   *attachment* and is ignored by the graph;
4. anything else is *dangling*.

Targets starting with ``./`` or ``../`` are taken relative to the linking
note's folder and only match exactly.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

from vaultgraph.config import DEFAULT_ATTACHMENT_EXTENSIONS, DEFAULT_EXTENSIONS


class LinkStatus(str, Enum):
    RESOLVED = "resolved"
    DANGLING = "dangling"
    AMBIGUOUS = "ambiguous"
    ATTACHMENT = "attachment"


class Resolution(NamedTuple):
    status: LinkStatus
    note_id: str | None = None
    candidates: tuple[str, ...] = ()


class LinkResolver:
    """Maps link targets onto a fixed set of NoteIds."""

    def __init__(
        self,
        note_ids: Iterable[str],
        *,
        short_links: bool = True,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        attachment_extensions: Iterable[str] = DEFAULT_ATTACHMENT_EXTENSIONS,
    ) -> None:
        self.note_ids = frozenset(note_ids)
        self.short_links = short_links
        self.extensions = tuple(e.lower() for e in extensions)
        self.attachment_extensions = frozenset(e.lower() for e in attachment_extensions)

        # "a/b/c" is reachable as "c" and "b/c"
        self._by_suffix: dict[str, list[str]] = {}
        for note_id in sorted(self.note_ids):
            parts = note_id.split("/")
            for i in range(1, len(parts)):
                self._by_suffix.setdefault("/".join(parts[i:]), []).append(note_id)

    def normalise(self, target: str, source: str | None = None) -> str:
        """Clean a raw target: separators, relative segments, note extension."""
        target = target.strip().replace("\\", "/")
        if source is not None and target.startswith(("./", "../")):
            target = posixpath.normpath(posixpath.join(posixpath.dirname(source), target))
        target = target.strip("/")
        lowered = target.lower()
        for ext in self.extensions:
            if lowered.endswith(ext):
                return target[: -len(ext)]
        return target

    def resolve(self, target: str, source: str | None = None) -> Resolution:
        normalised = self.normalise(target, source)
        if not normalised or normalised == ".." or normalised.startswith("../"):
            return Resolution(LinkStatus.DANGLING)

        if normalised in self.note_ids:
            return Resolution(LinkStatus.RESOLVED, normalised)

        explicit_relative = target.strip().startswith(("./", "../"))
        if self.short_links and not explicit_relative:
            candidates = self._by_suffix.get(normalised, [])
            if len(candidates) == 1:
                return Resolution(LinkStatus.RESOLVED, candidates[0])
            if candidates:
                return Resolution(LinkStatus.AMBIGUOUS, candidates=tuple(candidates))

        if posixpath.splitext(normalised)[1].lower() in self.attachment_extensions:
            return Resolution(LinkStatus.ATTACHMENT)
        return Resolution(LinkStatus.DANGLING)
