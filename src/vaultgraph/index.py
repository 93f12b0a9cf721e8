"""VaultIndex: in-memory link graph, backlink and tag indexes for a vault."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import networkx as nx

from vaultgraph.config import VaultConfig
from vaultgraph.errors import AmbiguousLinkTarget, MalformedEncoding, NoteNotFoundError
from vaultgraph.loader import load_notes
from vaultgraph.note import Note
from vaultgraph.resolver import LinkResolver, LinkStatus

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Link:
    """One extracted ``[[link]]`` and what it resolved to."""

    source: str
    target: str
    resolved: str | None
    status: LinkStatus

    def to_dict(self) -> dict[str, str | None]:
        return {
            "source": self.source,
            "target": self.target,
            "resolved": self.resolved,
            "status": self.status.value,
        }


class VaultIndex:
    """Scans a vault directory and builds the link graph and tag index.

    Edges of :attr:`graph` only ever point at loaded notes. Dangling and
    ambiguous links are kept in :attr:`links` with their status; ambiguous
    ones are also reported per note in :attr:`diagnostics`. Backlinks and
    orphans are derived from the graph on every call, never stored.
    """

    def __init__(self, vault_dir: Path | None = None, config: VaultConfig | None = None) -> None:
        self.vault_dir = Path(vault_dir) if vault_dir is not None else None
        self.config = config or VaultConfig()
        self.notes: dict[str, Note] = {}
        self.graph: nx.DiGraph = nx.DiGraph()
        self.tags: dict[str, set[str]] = {}
        self.links: list[Link] = []
        self.diagnostics: dict[str, list[AmbiguousLinkTarget]] = {}
        self.skipped: list[MalformedEncoding] = []
        self.resolver = LinkResolver((), short_links=self.config.short_links)

    @classmethod
    def from_notes(cls, notes: Iterable[Note], config: VaultConfig | None = None) -> "VaultIndex":
        """Build an index from already-parsed notes (no filesystem access)."""
        index = cls(config=config)
        index.ingest(notes)
        return index

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)scan the vault and rebuild all indexes."""
        if self.vault_dir is None:
            raise ValueError("VaultIndex.build() needs a vault_dir; use from_notes() otherwise")
        notes, skipped = load_notes(self.vault_dir, self.config)
        self.ingest(notes)
        self.skipped = skipped
        log.info(
            "Indexed %d notes, %d links, %d tags (%d files skipped)",
            len(self.notes), len(self.links), len(self.tags), len(skipped),
        )

    def ingest(self, notes: Iterable[Note]) -> None:
        """Replace the index contents with *notes*.

        All NoteIds are collected before any link is resolved, so the result
        does not depend on the order of *notes*.
        """
        self.notes = {}
        for note in sorted(notes, key=lambda n: n.id):
            if note.id in self.notes:
                log.warning("Duplicate note id %r (%s); keeping %s", note.id, note.path, self.notes[note.id].path)
                continue
            self.notes[note.id] = note

        self.resolver = LinkResolver(
            self.notes,
            short_links=self.config.short_links,
            extensions=self.config.extensions,
            attachment_extensions=self.config.attachment_extensions,
        )
        self._build_graph()
        self._build_tags()

    def _build_graph(self) -> None:
        graph: nx.DiGraph = nx.DiGraph()
        for note_id, note in self.notes.items():
            graph.add_node(note_id, tags=frozenset(note.tags))

        links: list[Link] = []
        diagnostics: dict[str, list[AmbiguousLinkTarget]] = {}
        for note_id, note in self.notes.items():
            for target in note.links:
                resolution = self.resolver.resolve(target, source=note_id)
                links.append(Link(note_id, target, resolution.note_id, resolution.status))
                if resolution.status is LinkStatus.RESOLVED:
                    graph.add_edge(note_id, resolution.note_id)
                elif resolution.status is LinkStatus.AMBIGUOUS:
                    problem = AmbiguousLinkTarget(target, list(resolution.candidates), source=note_id)
                    log.warning("%s", problem)
                    diagnostics.setdefault(note_id, []).append(problem)
                elif resolution.status is LinkStatus.DANGLING:
                    log.debug("Dangling link [[%s]] in %s", target, note_id)

        self.graph = graph
        self.links = links
        self.diagnostics = diagnostics

    def _build_tags(self) -> None:
        self.tags = {}
        for note_id, note in self.notes.items():
            for tag in note.tags:
                self.tags.setdefault(tag, set()).add(note_id)

    # ------------------------------------------------------------------
    # Graph helpers
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> str:
        """Find the NoteId meant by *name* (NoteId, ``"Note.md"`` or short name).

        Raises :class:`NoteNotFoundError` or :class:`AmbiguousLinkTarget`.
        """
        resolution = self.resolver.resolve(name)
        if resolution.status is LinkStatus.RESOLVED:
            return resolution.note_id
        if resolution.status is LinkStatus.AMBIGUOUS:
            raise AmbiguousLinkTarget(name, list(resolution.candidates))
        raise NoteNotFoundError(name)

    def backlinks_of(self, note_id: str) -> set[str]:
        """Notes linking to *note_id*, the note itself excluded."""
        return {src for src in self.graph.predecessors(note_id) if src != note_id}

    def outlinks_of(self, note_id: str) -> set[str]:
        return set(self.graph.successors(note_id))

    def tags_of(self, note_id: str) -> frozenset[str]:
        return self.graph.nodes[note_id]["tags"]

    @property
    def backlinks(self) -> dict[str, set[str]]:
        """Full backlink index; the transpose of :attr:`graph` minus self-loops."""
        return {note_id: self.backlinks_of(note_id) for note_id in self.graph}

    def orphans(self) -> set[str]:
        """Notes with no incoming link from a different note."""
        return {note_id for note_id in self.graph if not self.backlinks_of(note_id)}

    def edges(self) -> list[tuple[str, str]]:
        """Return ``(source, target)`` pairs for every resolved link, sorted."""
        return sorted(self.graph.edges())
