"""Shared fixtures for the vaultgraph tests."""

from __future__ import annotations

import logging
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest


def write_note(root: Path, name: str, content: str) -> Path:
    """Write ``<root>/<name>.md`` (``name`` may contain folders)."""
    path = root / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def make_vault(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a factory writing ``{note_name: content}`` into a fresh vault."""

    def _make(notes: dict[str, str]) -> Path:
        vault = tmp_path / "vault"
        vault.mkdir(exist_ok=True)
        for name, content in notes.items():
            write_note(vault, name, content)
        return vault

    return _make


@pytest.fixture()
def abc_vault(make_vault) -> Path:
    """A links to B and is tagged #project; B is empty; C links to a missing Z."""
    return make_vault(
        {
            "A": "Links to [[B]] #project\n",
            "B": "Nothing here.\n",
            "C": "See [[Z]].\n",
        }
    )


@pytest.fixture(autouse=True)
def _reset_vaultgraph_logger():
    """Undo configure_logging() so each test starts with a plain logger."""
    yield
    logger = logging.getLogger("vaultgraph")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
