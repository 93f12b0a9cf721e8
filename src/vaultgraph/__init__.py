"""vaultgraph: tag, backlink and orphan extraction for Obsidian vaults."""

__version__ = "0.1.0"

from vaultgraph.config import VaultConfig, load_config  # noqa: E402
from vaultgraph.index import Link, VaultIndex  # noqa: E402
from vaultgraph.note import Extraction, Note, RawNote  # noqa: E402
from vaultgraph.parser import extract, parse_note, parse_tags, parse_wikilinks  # noqa: E402
from vaultgraph.query import VaultQuery  # noqa: E402
from vaultgraph.resolver import LinkResolver, LinkStatus  # noqa: E402

__all__ = [
    "Extraction",
    "Link",
    "LinkResolver",
    "LinkStatus",
    "Note",
    "RawNote",
    "VaultConfig",
    "VaultIndex",
    "VaultQuery",
    "extract",
    "load_config",
    "parse_note",
    "parse_tags",
    "parse_wikilinks",
]
