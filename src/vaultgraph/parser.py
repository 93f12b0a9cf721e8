"""WikiLink, tag, and YAML-frontmatter parser.

Nothing inside fenced code blocks or inline code spans is a reference, so
both are blanked out (newlines kept) before the link and tag patterns run.
A tag marker directly after a code span or a link is not a tag. Every
function here accepts arbitrary text and never raises on malformed markup.
"""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from collections import defaultdict
from typing import Any

import yaml

from vaultgraph.note import Extraction, Note, RawNote

# [[Target]], [[Target|Alias]], [[Target#Heading]], ![[Embed]]
_WIKILINK_RE = re.compile(r"!?\[\[([^\[\]\n]+)\]\]")
# Inline #tags; the marker must start the text or follow whitespace/markup
_TAG_RE = re.compile(r"(?:^|(?<=[\s(\[{*>~,;]))#([\w/-]+)")
# A tag needs at least one character that is not a digit or "/"
_TAG_NON_NUMERIC_RE = re.compile(r"[^\d/]")
# YAML front-matter block (may be empty)
_FRONTMATTER_RE = re.compile(
    r"^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)", re.DOTALL
)
# Opening or closing code fence: up to 3 spaces, then ``` or ~~~ (or longer)
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
_BACKTICK_RUN_RE = re.compile(r"`+")
# Newline that starts a blank line
_BLANK_LINE_RE = re.compile(r"\n(?=[ \t]*\r?\n)")
_NOT_NEWLINE_RE = re.compile(r"[^\n]")
# Fill for masked text while scanning tags: not whitespace, not markup
_MASK = "\x00"


# ---------------------------------------------------------------------------
# Front-matter
# ---------------------------------------------------------------------------


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or it does not parse to a mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1) or "") or {}
    except (yaml.YAMLError, ValueError):
        # ValueError: out-of-range dates and similar constructor failures
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def frontmatter_tags(meta: dict[str, Any]) -> set[str]:
    """Tags declared in front-matter, as a list or a comma/space separated string."""
    raw = meta.get("tags")
    if raw is None:
        return set()
    if isinstance(raw, str):
        raw = re.split(r"[,\s]+", raw)
    elif not isinstance(raw, (list, tuple, set)):
        raw = [raw]

    tags: set[str] = set()
    for item in raw:
        if item is None:
            continue
        tag = str(item).strip().lstrip("#").rstrip("/").lower()
        if tag:
            tags.add(tag)
    return tags


# ---------------------------------------------------------------------------
# Code masking
# ---------------------------------------------------------------------------


def _blank(text: str, fill: str = " ") -> str:
    return _NOT_NEWLINE_RE.sub(fill, text)


def _mask_fences(text: str, fill: str) -> str:
    out: list[str] = []
    fence: tuple[str, int] | None = None
    for line in text.splitlines(keepends=True):
        m = _FENCE_RE.match(line)
        if fence is None:
            # Backtick fences may not carry backticks in their info string
            if m and not (m.group(1)[0] == "`" and "`" in m.group(2)):
                fence = (m.group(1)[0], len(m.group(1)))
                out.append(_blank(line, fill))
            else:
                out.append(line)
            continue
        if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= fence[1] and not m.group(2).strip():
            fence = None
        out.append(_blank(line, fill))
    # An unclosed fence runs to the end of the note
    return "".join(out)


def _mask_inline_code(text: str, fill: str) -> str:
    runs = list(_BACKTICK_RUN_RE.finditer(text))
    if not runs:
        return text
    blank_lines = [m.start() for m in _BLANK_LINE_RE.finditer(text)]
    starts_by_length: dict[int, list[int]] = defaultdict(list)
    for run in runs:
        starts_by_length[len(run.group())].append(run.start())

    out: list[str] = []
    pos = 0
    for opening in runs:
        if opening.start() < pos:
            continue
        size = len(opening.group())
        i = bisect_left(blank_lines, opening.end())
        limit = blank_lines[i] if i < len(blank_lines) else len(text)
        starts = starts_by_length[size]
        j = bisect_right(starts, opening.start())
        if j == len(starts) or starts[j] >= limit:
            # Unmatched run: the backticks are literal
            continue
        end = starts[j] + size
        out.append(text[pos : opening.start()])
        out.append(_blank(text[opening.start() : end], fill))
        pos = end
    out.append(text[pos:])
    return "".join(out)


def mask_code(text: str, fill: str = " ") -> str:
    """Blank out fenced code blocks and inline code spans, keeping offsets.

    Every masked character other than a newline is replaced by *fill*.
    """
    return _mask_inline_code(_mask_fences(text, fill), fill)


# ---------------------------------------------------------------------------
# Links and tags
# ---------------------------------------------------------------------------


def _link_target(body: str) -> str:
    # "\|" is how a pipe is escaped inside Markdown tables
    target = body.split("|", 1)[0].rstrip("\\")
    return target.split("#", 1)[0].strip()


def parse_wikilinks(text: str) -> list[str]:
    """Return all ``[[WikiLink]]`` targets found in *text* (de-duped, ordered).

    Aliases (``|Display``) and anchors (``#Heading``, ``#^block``) are
    dropped. Same-note anchors such as ``[[#Heading]]`` have no target and
    are skipped. Call on code-masked text to honour code spans.
    """
    seen: set[str] = set()
    result: list[str] = []
    for m in _WIKILINK_RE.finditer(text):
        target = _link_target(m.group(1))
        if target and target not in seen:
            seen.add(target)
            result.append(target)
    return result


def parse_tags(text: str) -> set[str]:
    """Return all inline ``#tag`` values found in *text*, lowercased."""
    # Link bodies are not tag context: [[#Heading]] or [[Note|#alias]]
    text = _WIKILINK_RE.sub(lambda m: _blank(m.group(), _MASK), text)
    tags: set[str] = set()
    for m in _TAG_RE.finditer(text):
        tag = m.group(1).rstrip("/")
        if tag and _TAG_NON_NUMERIC_RE.search(tag):
            tags.add(tag.lower())
    return tags


def _extract(meta: dict[str, Any], body: str) -> Extraction:
    visible = mask_code(body, _MASK)
    tags = frontmatter_tags(meta) | parse_tags(visible)
    links = parse_wikilinks(visible.replace(_MASK, " "))
    return Extraction(tags=frozenset(tags), links=tuple(links))


def extract(content: str) -> Extraction:
    """Extract the tag set and ordered link targets of one note's text."""
    return _extract(*parse_frontmatter(content))


def parse_note(raw: RawNote) -> Note:
    """Turn a loaded :class:`RawNote` into a :class:`Note`."""
    meta, body = parse_frontmatter(raw.text)
    extraction = _extract(meta, body)
    return Note(
        id=raw.id,
        path=raw.path,
        tags=set(extraction.tags),
        links=list(extraction.links),
        frontmatter=meta,
        word_count=len(raw.text.split()),
        modified=raw.modified,
    )
