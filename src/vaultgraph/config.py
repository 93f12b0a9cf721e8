"""Vault configuration.

Defaults can be overridden per vault with a ``.vaultgraph.toml`` file at the
vault root::

    [vaultgraph]
    extensions    = [".md", ".markdown"]
    excluded_dirs = [".obsidian", "Templates"]
    short_links   = true
    workers       = 4

Command-line flags win over the file (see :meth:`VaultConfig.merged`).
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vaultgraph.errors import ConfigError

CONFIG_FILENAME = ".vaultgraph.toml"

DEFAULT_EXTENSIONS = (".md",)
DEFAULT_EXCLUDED_DIRS = (".obsidian", ".git", ".trash")
# Embeds of these are attachments, not notes
DEFAULT_ATTACHMENT_EXTENSIONS = (
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp", ".avif",
    ".pdf", ".mp3", ".wav", ".m4a", ".ogg", ".flac", ".mp4", ".webm",
    ".mov", ".mkv", ".canvas", ".excalidraw",
)


@dataclass(frozen=True)
class VaultConfig:
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    excluded_dirs: tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
    attachment_extensions: tuple[str, ...] = DEFAULT_ATTACHMENT_EXTENSIONS
    #: Resolve ``[[Name]]`` by base name when no exact path matches
    short_links: bool = True
    #: Threads used for loading and extraction; 1 means serial
    workers: int = 1

    def __post_init__(self) -> None:
        if not self.extensions:
            raise ConfigError("extensions must not be empty")
        if self.workers < 1:
            raise ConfigError(f"workers must be >= 1, got {self.workers}")
        object.__setattr__(self, "extensions", tuple(_dotted(e) for e in self.extensions))
        object.__setattr__(
            self, "attachment_extensions", tuple(_dotted(e) for e in self.attachment_extensions)
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VaultConfig":
        section = data.get("vaultgraph", data)
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        kwargs: dict[str, Any] = {}
        for key, value in section.items():
            if key == "short_links":
                if not isinstance(value, bool):
                    raise ConfigError(f"{key} must be a boolean")
                kwargs[key] = value
            elif key == "workers":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError("workers must be an integer")
                kwargs[key] = value
            else:
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"{key} must be a list of strings")
                kwargs[key] = tuple(value)
        return cls(**kwargs)

    def merged(self, **overrides: Any) -> "VaultConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes) if changes else self

    def is_note(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions


def _dotted(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def load_config(vault_dir: Path) -> VaultConfig:
    """Read ``<vault_dir>/.vaultgraph.toml`` or fall back to the defaults."""
    path = Path(vault_dir) / CONFIG_FILENAME
    if not path.is_file():
        return VaultConfig()
    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid {CONFIG_FILENAME}: {exc}") from exc
    return VaultConfig.from_dict(data)
