"""
vaultgraph: read tags, backlinks, orphans and files out of an Obsidian vault

Usage:
    vaultgraph --vault ~/notes tags          # tag -> notes
    vaultgraph tag writing                   # notes carrying #writing
    vaultgraph backlinks "My Note.md"        # notes linking to My Note
    vaultgraph orphans                       # notes nothing links to
    vaultgraph files --details               # notes with word/link/tag counts
    vaultgraph links --broken                # links to missing notes
    vaultgraph                               # vault statistics

Results are printed as JSON on stdout; diagnostics and errors go to stderr.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from vaultgraph import __version__
from vaultgraph._logging import configure_logging
from vaultgraph.config import load_config
from vaultgraph.errors import VaultError
from vaultgraph.index import VaultIndex
from vaultgraph.output import emit
from vaultgraph.query import VaultQuery


@dataclass
class _Session:
    vault_path: Path
    workers: int | None = None
    short_links: bool | None = None

    def open(self) -> VaultQuery:
        config = load_config(self.vault_path).merged(
            workers=self.workers, short_links=self.short_links
        )
        index = VaultIndex(self.vault_path, config)
        index.build()
        return VaultQuery(index)


def _run(session: _Session, query: Callable[[VaultQuery], Any]) -> None:
    try:
        result = query(session.open())
    except VaultError as exc:
        raise click.ClickException(str(exc)) from exc
    emit(result)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vaultgraph")
@click.option(
    "--vault",
    "-v",
    "vault_path",
    type=click.Path(path_type=Path),
    default=".",
    show_default=True,
    envvar="VAULTGRAPH_VAULT",
    help="Path to the Obsidian vault",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Threads used to read and parse notes",
)
@click.option(
    "--no-short-links",
    is_flag=True,
    help="Only resolve [[links]] that spell out the full vault path",
)
@click.pass_context
def cli(ctx: click.Context, vault_path: Path, workers: int | None, no_short_links: bool):
    """Read tags, backlinks, orphans and files from an Obsidian vault as JSON."""
    configure_logging()
    ctx.obj = _Session(vault_path, workers, False if no_short_links else None)
    if ctx.invoked_subcommand is None:
        ctx.invoke(stats)


@cli.command()
@click.option("--note", "note_id", default=None, help="Only list the tags of this note")
@click.option("--counts", is_flag=True, help="List tags with the number of notes using them")
@click.pass_obj
def tags(session: _Session, note_id: str | None, counts: bool):
    """List tags and the notes that use them."""
    if counts and note_id:
        raise click.UsageError("--counts and --note cannot be combined")
    if counts:
        _run(session, lambda q: q.tag_counts())
    else:
        _run(session, lambda q: q.tags(note_id))


@cli.command()
@click.argument("name")
@click.pass_obj
def tag(session: _Session, name: str):
    """List notes carrying tag NAME."""
    _run(session, lambda q: {"tag": name, "files": q.notes_with_tag(name)})


@cli.command()
@click.argument("note")
@click.pass_obj
def backlinks(session: _Session, note: str):
    """List notes that link to NOTE."""
    _run(session, lambda q: q.backlinks(note))


@cli.command()
@click.argument("note")
@click.pass_obj
def outlinks(session: _Session, note: str):
    """List notes that NOTE links to."""
    _run(session, lambda q: q.outlinks(note))


@cli.command()
@click.pass_obj
def orphans(session: _Session):
    """List notes no other note links to."""
    _run(session, lambda q: q.orphans())


@cli.command()
@click.option("--details", is_flag=True, help="Include word, link and tag counts")
@click.pass_obj
def files(session: _Session, details: bool):
    """List every note in the vault."""
    _run(session, lambda q: q.files(details=details))


@cli.command()
@click.option("--broken", is_flag=True, help="Only show links to missing notes")
@click.pass_obj
def links(session: _Session, broken: bool):
    """List every link and how it resolved."""
    _run(session, lambda q: q.links(broken_only=broken))


@cli.command()
@click.pass_obj
def stats(session: _Session):
    """Show vault statistics."""
    _run(session, lambda q: q.stats())


if __name__ == "__main__":
    cli()
