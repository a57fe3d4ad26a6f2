"""Markdown parsing for the POWER.md quick-reference index."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from ..errors import MalformedEntryError

INDEX_SECTION = "Quick Reference"

# ### 1. Eliminating Waterfalls (CRITICAL)
CATEGORY_HEADING_PATTERN = re.compile(r"^###\s+(?:\d+[.)]\s*)?(?P<name>.+?)(?:\s*\((?P<tier>[^()]+)\))?\s*$")

# ## Troubleshooting, # Title
SECTION_HEADING_PATTERN = re.compile(r"^#{1,2}\s")

# [async-parallel](steering/async-parallel.md)
LINK_PATTERN = re.compile(r"^\[(?P<text>[^\]]+)\]\([^)]*\)$")

# - async-parallel - summary / - `async-parallel`: summary
BULLET_PATTERN = re.compile(r"^\s*[-*+]\s+(?P<body>.*)$")
BULLET_ENTRY_PATTERN = re.compile(r"^(?P<id>\S+?)\s*(?::|\s[-–—])\s+(?P<summary>.+)$")

TABLE_SEPARATOR_PATTERN = re.compile(r"^\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?$")
UNESCAPED_PIPE = re.compile(r"(?<!\\)\|")


@dataclass
class RawEntry:
    """An ``(id, summary)`` pair as written in the index, before validation."""

    rule_id: str
    summary: str
    line: int
    text: str


@dataclass
class RawCategory:
    """A ``###`` category heading and the entries listed under it."""

    name: str
    tier_label: str | None
    line: int
    entries: list[RawEntry] = field(default_factory=list)


def extract_section(content: str, header: str) -> tuple[str, int] | None:
    """Extract content between ``## header`` and the next ``##`` or EOF.

    Returns:
        ``(section_text, first_line_number)`` or None if not found. The line
        number is 1-based and refers to the first line after the header.
    """
    pattern = rf"^## {re.escape(header)}[ \t]*\n(.*?)(?=^## |\Z)"
    match = re.search(pattern, content, re.MULTILINE | re.DOTALL | re.IGNORECASE)
    if not match:
        return None
    first_line = content.count("\n", 0, match.start(1)) + 1
    return match.group(1), first_line


def clean_rule_id(cell: str) -> str:
    """Strip link, code, and emphasis markup from an id cell."""
    value = cell.strip()
    link = LINK_PATTERN.match(value)
    if link:
        value = link.group("text").strip()
    return value.strip("`*_ ").strip()


def split_table_row(line: str) -> list[str]:
    """Split a ``| a | b |`` row into cells, honouring ``\\|`` escapes."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip().replace("\\|", "|") for cell in UNESCAPED_PIPE.split(stripped)]


def parse_category_heading(line: str) -> tuple[str, str | None] | None:
    """Parse ``### <n>. Name (TIER)`` into ``(name, tier_label)``."""
    match = CATEGORY_HEADING_PATTERN.match(line.strip())
    if not match:
        return None
    tier = match.group("tier")
    return match.group("name").strip(), tier.strip() if tier else None


def parse_index(
    content: str,
    first_line: int = 1,
    *,
    is_category: Callable[[str, str | None], bool] | None = None,
) -> list[RawCategory]:
    """Parse index text into raw categories with their ordered entries.

    Entries are table rows (after a header and separator row) or bullet
    lines. Other prose is ignored. Raises MalformedEntryError for entries
    that cannot be split into ``(id, summary)``.

    With ``is_category`` the text is a whole document rather than a
    dedicated index section: only ``###`` headings it accepts open a
    category block, a ``#`` or ``##`` heading closes the block, and bullets
    or tables outside a block are prose.
    """
    categories: list[RawCategory] = []
    current: RawCategory | None = None
    table: list[tuple[int, str]] = []
    in_fence = False
    loose = is_category is not None

    def flush_table() -> None:
        if table:
            if current is not None or not loose:
                _parse_table(table, current)
            table.clear()

    for offset, line in enumerate(content.split("\n")):
        lineno = first_line + offset
        stripped = line.strip()

        if stripped.startswith("```"):
            flush_table()
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        if stripped.startswith("|"):
            table.append((lineno, stripped))
            continue
        flush_table()

        if loose and SECTION_HEADING_PATTERN.match(stripped):
            current = None
            continue

        if stripped.startswith("### "):
            heading = parse_category_heading(stripped)
            if loose and (heading is None or not is_category(*heading)):
                current = None
                continue
            if heading is None:
                raise MalformedEntryError("unreadable category heading", line=lineno, text=stripped)
            name, tier_label = heading
            current = RawCategory(name=name, tier_label=tier_label, line=lineno)
            categories.append(current)
            continue

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            if loose and current is None:
                continue
            current = _require_category(current, lineno, stripped)
            current.entries.append(_parse_bullet(bullet.group("body"), current, lineno, stripped))

    flush_table()
    return categories


def _require_category(current: RawCategory | None, lineno: int, text: str) -> RawCategory:
    if current is None:
        raise MalformedEntryError("entry appears before any category heading", line=lineno, text=text)
    return current


def _parse_bullet(body: str, category: RawCategory, lineno: int, text: str) -> RawEntry:
    match = BULLET_ENTRY_PATTERN.match(body.strip())
    if not match:
        raise MalformedEntryError(
            "expected '<id> - <summary>'", category=category.name, line=lineno, text=text
        )
    return RawEntry(
        rule_id=clean_rule_id(match.group("id")),
        summary=match.group("summary").strip(),
        line=lineno,
        text=text,
    )


def _parse_table(rows: list[tuple[int, str]], current: RawCategory | None) -> None:
    """Parse a contiguous table block into entries of ``current``."""
    first_lineno, first_text = rows[0]
    current = _require_category(current, first_lineno, first_text)

    if len(rows) < 2 or not TABLE_SEPARATOR_PATTERN.match(rows[1][1]):
        raise MalformedEntryError(
            "table is missing its header separator row", category=current.name, line=first_lineno, text=first_text
        )

    headers = split_table_row(first_text)
    if len(headers) < 2:
        raise MalformedEntryError(
            "table needs an id column and a summary column", category=current.name, line=first_lineno, text=first_text
        )

    for lineno, text in rows[2:]:
        cells = split_table_row(text)
        if len(cells) != len(headers):
            raise MalformedEntryError(
                f"expected {len(headers)} cells, found {len(cells)}", category=current.name, line=lineno, text=text
            )
        current.entries.append(
            RawEntry(rule_id=clean_rule_id(cells[0]), summary=cells[1].strip(), line=lineno, text=text)
        )
