"""Tolerant extraction helpers for hand-edited markdown.

Every helper fails soft: missing structure yields an empty string, list or
dict, never an exception. Heading and section names are matched
case-sensitively; inline field labels (``**Status:** Open``) are not.

Known limitation: block splitting is purely line based. A line starting with
``###`` inside an entity body (for example a sub-heading typed into a
risk's mitigation text) starts a new entity. Nested headings in field values
have to be avoided or indented by the author.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*))?$")
_FENCE_RE = re.compile(r"^[ \t]*(```|~~~)")
_LIST_ITEM_RE = re.compile(r"^[ \t]*[-*][ \t]+(.+)$", re.MULTILINE)
_CELL_SEPARATOR_RE = re.compile(r"(?<!\\)\|")
_BULLET_RE = re.compile(r"^[-*](?:[ \t]|$)")
_RULE_RE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
# "**Label:**" or "- **Label:**", with or without a value after it
_LABEL_LINE_RE = re.compile(r"^(?:[-*][ \t]+)?\*\*[^*\n]+?(?::\*\*|\*\*:)")
_EMPTY_LABEL_RE = re.compile(r"^(?:[-*][ \t]+)?\*\*[^*\n]+?(?::\*\*|\*\*:)$")
_PLAIN_LABEL_RE = re.compile(r"^[A-Za-z][\w /-]*:(?:[ \t]|$)")


@dataclass
class HeadingBlock:
    """A heading line and the text below it, up to the next sibling heading."""

    level: int
    heading: str
    body: str


def _heading(line: str) -> tuple[int, str] | None:
    match = _HEADING_RE.match(line.rstrip())
    if not match:
        return None
    return len(match.group(1)), (match.group(2) or "").strip()


def split_blocks(text: str, level: int) -> list[HeadingBlock]:
    """Split text into blocks headed by headings of exactly ``level``.

    A block's body runs until the next heading of the same or a higher level
    (fewer ``#``), or the end of the text. Deeper headings stay in the body.
    Text before the first heading of ``level`` is not part of any block.
    Lines inside fenced code blocks are never treated as headings.
    """
    blocks: list[HeadingBlock] = []
    current: str | None = None
    body: list[str] = []
    in_fence = False

    for line in text.splitlines():
        if _FENCE_RE.match(line):
            in_fence = not in_fence
        heading = None if in_fence else _heading(line)
        if heading is not None and heading[0] <= level:
            if current is not None:
                blocks.append(HeadingBlock(level, current, "\n".join(body)))
            current = heading[1] if heading[0] == level else None
            body = []
            continue
        if current is not None:
            body.append(line)

    if current is not None:
        blocks.append(HeadingBlock(level, current, "\n".join(body)))
    return blocks


def split_id_prefix(heading: str, prefix: str) -> tuple[str, str]:
    """Split ``"RISK-3: Vendor lock-in"`` into ``("RISK-3", "Vendor lock-in")``.

    Returns an empty ID and the whole heading when there is no prefix.
    """
    match = re.match(
        rf"^({re.escape(prefix)}-?\d+)(?:[ \t]*:[ \t]*|[ \t]+|$)(.*)$",
        heading.strip(),
        re.IGNORECASE,
    )
    if not match:
        return "", heading.strip()
    return match.group(1), match.group(2).strip()


def extract_title(text: str) -> str:
    """Return the text of the first level-1 heading, or ""."""
    for block in split_blocks(text, 1):
        return block.heading
    return ""


def extract_sections(text: str) -> dict[str, str]:
    """Map each level-2 heading to its trimmed body. Later duplicates win."""
    sections: dict[str, str] = {}
    for block in split_blocks(text, 2):
        sections[block.heading] = block.body.strip()
    return sections


def extract_field(body: str, name: str) -> str:
    """Extract a single-line inline field value.

    Tried in order: ``**Name:** value`` (colon inside or outside the bold),
    ``- **Name:** value``, then plain ``Name: value``. The first pattern that
    yields a value wins. A label left alone on its line takes the next
    non-empty line, unless that line is itself a label, bullet, table row or
    heading.
    """
    label = re.escape(name)
    patterns = (
        rf"\*\*{label}(?::\*\*|\*\*:)[ \t]*(.*)",
        rf"-[ \t]*\*\*{label}:\*\*[ \t]*(.*)",
        rf"(?<!\*)\b{label}:[ \t]*(.*)",
    )
    for pattern in patterns:
        match = re.search(pattern, body, re.IGNORECASE)
        if not match:
            continue
        value = match.group(1).strip() or _continuation_value(body[match.end():])
        if value:
            return value
    return ""


def _is_structural(line: str) -> bool:
    """True for a stripped line that is markup rather than prose."""
    return bool(
        _BULLET_RE.match(line)
        or _RULE_RE.match(line)
        or line.startswith("|")
        or _LABEL_LINE_RE.match(line)
        or _heading(line) is not None
    )


def _continuation_value(rest: str) -> str:
    for line in rest.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if _is_structural(stripped) or _PLAIN_LABEL_RE.match(stripped):
            return ""
        return stripped
    return ""


def extract_first_paragraph(body: str) -> str:
    """Return the first prose line of ``body``.

    Bullets, table rows, rules, headings and field label lines are skipped,
    as is a line that carries the value of an empty label above it.
    Emphasis such as ``*Core* domain`` is prose.
    """
    after_empty_label = False
    for line in body.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if _is_structural(stripped):
            after_empty_label = bool(_EMPTY_LABEL_RE.match(stripped))
            continue
        if after_empty_label:
            after_empty_label = False
            continue
        return stripped
    return ""


def extract_list_items(body: str) -> list[str]:
    """Return every ``-`` or ``*`` bullet in source order, markers stripped."""
    return [item.strip() for item in _LIST_ITEM_RE.findall(body)]


def split_table_row(line: str) -> list[str]:
    """Split a pipe table row into trimmed cells. ``\\|`` is kept as a literal pipe."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _CELL_SEPARATOR_RE.split(row)]


def parse_table(body: str) -> list[dict[str, str]]:
    """Parse the pipe table in ``body`` into header -> cell dicts.

    The first line containing a pipe is the header row and the second is
    taken to be the separator. Rows whose cell count differs from the header
    count are dropped.
    """
    lines = [line for line in body.splitlines() if "|" in line]
    if len(lines) < 2:
        return []

    headers = split_table_row(lines[0])
    rows: list[dict[str, str]] = []
    for line in lines[2:]:
        cells = split_table_row(line)
        if len(cells) != len(headers):
            logger.debug(
                f"Dropping table row with {len(cells)} cells (expected {len(headers)}): {line.strip()}"
            )
            continue
        rows.append(dict(zip(headers, cells)))
    return rows
