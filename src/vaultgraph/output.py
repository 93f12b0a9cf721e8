"""JSON output for query results."""

from __future__ import annotations

import json
from typing import Any

import click


def to_json(data: Any) -> str:
    # Non-ASCII note names and tags are written as-is
    return json.dumps(data, indent=2, ensure_ascii=False)


def emit(data: Any) -> None:
    """Write *data* as JSON to stdout."""
    click.echo(to_json(data))
