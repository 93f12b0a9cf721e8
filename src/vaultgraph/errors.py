"""Exception types raised (or collected as diagnostics) by vaultgraph."""

from __future__ import annotations

from pathlib import Path


class VaultError(Exception):
    """Base class for every vaultgraph error."""


class ConfigError(VaultError):
    """Raised when ``.vaultgraph.toml`` cannot be parsed or holds bad values."""


class VaultNotFoundError(VaultError):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Vault not found or not a directory: {self.path}")


class EmptyVaultError(VaultError):
    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Vault{where} contains no notes")


class NoteNotFoundError(VaultError):
    def __init__(self, note_id: str) -> None:
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class MalformedEncoding(VaultError):
    """A note file that could not be read as text.

    Collected on :attr:`VaultIndex.skipped`; the rest of the vault is still
    indexed.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Skipping {self.path}: {reason}")


class AmbiguousLinkTarget(VaultError):
    """A short link that matches more than one note.

    Attached to the linking note as a diagnostic; the link stays unresolved.
    """

    def __init__(self, target: str, candidates: list[str], source: str | None = None) -> None:
        self.target = target
        self.candidates = sorted(candidates)
        self.source = source
        origin = f" in {source}" if source else ""
        super().__init__(
            f"Ambiguous link [[{target}]]{origin}: matches {', '.join(self.candidates)}"
        )

    def to_dict(self) -> dict[str, object]:
        return {"source": self.source, "target": self.target, "candidates": self.candidates}
