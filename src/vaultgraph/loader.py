"""Vault traversal: find note files and read them as :class:`RawNote`.

This is the only module that touches the filesystem.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from vaultgraph.config import VaultConfig
from vaultgraph.errors import MalformedEncoding, VaultNotFoundError
from vaultgraph.note import Note, RawNote
from vaultgraph.parser import parse_note

log = logging.getLogger(__name__)


def note_id_for(path: Path, vault_dir: Path) -> str:
    """Vault-relative POSIX path of *path* without its extension."""
    return path.relative_to(vault_dir).with_suffix("").as_posix()


def iter_note_paths(vault_dir: Path, config: VaultConfig | None = None) -> Iterator[Path]:
    """Yield every note file under *vault_dir*, in sorted order.

    Excluded and hidden directories are pruned. Symlinked directories are
    followed once the real tree has been walked, so a folder reachable both
    directly and through a link keeps its real path. Each directory is
    walked at most once, which also breaks symlink cycles.
    """
    config = config or VaultConfig()
    vault_dir = Path(vault_dir)
    if not vault_dir.is_dir():
        raise VaultNotFoundError(vault_dir)

    def on_error(exc: OSError) -> None:
        if exc.filename is not None and Path(exc.filename) == vault_dir:
            raise VaultNotFoundError(vault_dir) from exc
        log.warning("Skipping directory %s: %s", exc.filename, exc.strerror or exc)

    found: list[Path] = []
    visited: set[str] = set()
    pending: deque[str] = deque([str(vault_dir)])
    while pending:
        top = pending.popleft()
        for dirpath, dirnames, filenames in os.walk(top, onerror=on_error):
            real = os.path.realpath(dirpath)
            if real in visited:
                dirnames[:] = []
                continue
            visited.add(real)
            subdirs = [
                os.path.join(dirpath, d)
                for d in sorted(dirnames)
                if d not in config.excluded_dirs and not d.startswith(".")
            ]
            dirnames[:] = [os.path.basename(d) for d in subdirs if not os.path.islink(d)]
            pending.extend(d for d in subdirs if os.path.islink(d))
            for name in filenames:
                path = Path(dirpath) / name
                if config.is_note(path):
                    found.append(path)
    yield from sorted(found)


def read_note(path: Path, vault_dir: Path) -> RawNote:
    """Read one note file; raise :class:`MalformedEncoding` if it is not UTF-8 text."""
    try:
        data = path.read_bytes()
        stat = path.stat()
    except OSError as exc:
        raise MalformedEncoding(path, exc.strerror or str(exc)) from exc
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedEncoding(path, f"not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc
    modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
    return RawNote(id=note_id_for(path, vault_dir), path=path, text=text, modified=modified)


def _load_one(path: Path, vault_dir: Path) -> Note | MalformedEncoding:
    try:
        return parse_note(read_note(path, vault_dir))
    except MalformedEncoding as exc:
        return exc


def load_notes(
    vault_dir: Path, config: VaultConfig | None = None
) -> tuple[list[Note], list[MalformedEncoding]]:
    """Load and extract every note in the vault.

    Returns ``(notes, skipped)``. Files that cannot be decoded are logged and
    returned in ``skipped`` instead of aborting the scan. With
    ``config.workers > 1`` files are read and parsed on a thread pool;
    results are still collected in path order.
    """
    config = config or VaultConfig()
    vault_dir = Path(vault_dir)
    paths = list(iter_note_paths(vault_dir, config))
    log.debug("Found %d note files under %s", len(paths), vault_dir)

    if config.workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            results = list(pool.map(lambda p: _load_one(p, vault_dir), paths))
    else:
        results = [_load_one(p, vault_dir) for p in paths]

    notes: list[Note] = []
    skipped: list[MalformedEncoding] = []
    seen: dict[str, Path] = {}
    for result in results:
        if isinstance(result, MalformedEncoding):
            log.warning("%s", result)
            skipped.append(result)
            continue
        if result.id in seen:
            log.warning(
                "Skipping %s: note id %r already used by %s", result.path, result.id, seen[result.id]
            )
            continue
        seen[result.id] = result.path
        notes.append(result)
    return notes, skipped
