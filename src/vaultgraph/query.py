"""Read-only queries over a built :class:`VaultIndex`.

Every query returns plain lists and dicts, sorted, ready for JSON. Queries
against a vault with no notes raise :class:`EmptyVaultError`; queries about a
note that does not exist raise :class:`NoteNotFoundError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from vaultgraph.errors import EmptyVaultError
from vaultgraph.resolver import LinkStatus

if TYPE_CHECKING:
    from vaultgraph.index import VaultIndex


class VaultQuery:
    def __init__(self, index: "VaultIndex") -> None:
        self.index = index

    def _require_notes(self) -> None:
        if not self.index.notes:
            raise EmptyVaultError(self.index.vault_dir)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def tags(self, note_id: str | None = None) -> dict[str, list[str]] | list[str]:
        """Tag -> sorted NoteIds for the vault, or the sorted tags of one note."""
        self._require_notes()
        if note_id is not None:
            return sorted(self.index.tags_of(self.index.lookup(note_id)))
        return {tag: sorted(ids) for tag, ids in sorted(self.index.tags.items())}

    def tag_counts(self) -> list[dict[str, Any]]:
        self._require_notes()
        return [{"tag": tag, "count": len(ids)} for tag, ids in sorted(self.index.tags.items())]

    def notes_with_tag(self, tag: str) -> list[str]:
        """NoteIds carrying *tag*; ``#`` prefix and case are ignored."""
        self._require_notes()
        key = tag.strip().lstrip("#").rstrip("/").lower()
        return sorted(self.index.tags.get(key, ()))

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def backlinks(self, note_id: str) -> list[str]:
        self._require_notes()
        return sorted(self.index.backlinks_of(self.index.lookup(note_id)))

    def outlinks(self, note_id: str) -> list[str]:
        self._require_notes()
        return sorted(self.index.outlinks_of(self.index.lookup(note_id)))

    def orphans(self) -> list[str]:
        self._require_notes()
        return sorted(self.index.orphans())

    def links(self, broken_only: bool = False) -> dict[str, Any]:
        """Every extracted link with its resolution, plus the dangling count."""
        self._require_notes()
        records = self.index.links
        broken = [link for link in records if link.status is LinkStatus.DANGLING]
        shown = broken if broken_only else records
        return {
            "links": [link.to_dict() for link in shown],
            "broken_count": len(broken),
        }

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def files(self, details: bool = False) -> list[str] | list[dict[str, Any]]:
        self._require_notes()
        if details:
            return [self.index.notes[note_id].to_dict() for note_id in sorted(self.index.notes)]
        return sorted(self.index.notes)

    def stats(self) -> dict[str, int]:
        self._require_notes()
        statuses = [link.status for link in self.index.links]
        return {
            "total_notes": len(self.index.notes),
            "total_tags": len(self.index.tags),
            "total_links": len(statuses),
            "broken_links": statuses.count(LinkStatus.DANGLING),
            "ambiguous_links": statuses.count(LinkStatus.AMBIGUOUS),
            "orphaned_notes": len(self.index.orphans()),
            "skipped_files": len(self.index.skipped),
        }
