"""Build a validated Catalog from index text."""

from __future__ import annotations

import logging

from ..errors import DuplicateIdError, MalformedEntryError, TierMismatchError
from ..models import Catalog, Category, CategorySet, PriorityTier, RuleDescriptor, RULE_ID_PATTERN
from .parser import INDEX_SECTION, RawCategory, extract_section, parse_index

logger = logging.getLogger(__name__)


def load_catalog(
    content: str,
    power_name: str,
    categories: CategorySet | None = None,
    *,
    extension: str = ".md",
    section: str = INDEX_SECTION,
    line_offset: int = 0,
) -> Catalog:
    """Parse index content into a Catalog.

    If ``content`` has a ``## Quick Reference`` section only that section is
    read. Otherwise the whole text is scanned, and only ``###`` headings that
    name a known category or carry a tier label open a category; other
    prose is skipped. Pure: no steering documents are touched.
    ``line_offset`` shifts reported line numbers when ``content`` is a
    slice of a larger file.

    Raises:
        MalformedEntryError: an entry or heading cannot be parsed
        UnknownCategoryError: a heading names a category outside the set
        DuplicateIdError: an id is listed more than once
    """
    if categories is None:
        categories = CategorySet()

    found = extract_section(content, section)
    if found:
        index_text, first_line = found
        is_category = None
    else:
        index_text, first_line = content, 1
        is_category = _category_filter(categories)

    raw_categories = parse_index(index_text, first_line + line_offset, is_category=is_category)
    descriptors = _build_descriptors(raw_categories, categories, extension)

    logger.debug(
        "Parsed catalog for %s: %d rules in %d categories",
        power_name,
        len(descriptors),
        len(raw_categories),
    )
    return Catalog(power_name, descriptors, categories)


def _build_descriptors(raw_categories: list[RawCategory], categories: CategorySet, extension: str) -> list[RuleDescriptor]:
    descriptors: list[RuleDescriptor] = []
    seen_categories: dict[str, int] = {}
    owner: dict[str, str] = {}  # rule id -> category name

    for raw in raw_categories:
        category = categories.resolve(raw.name, line=raw.line)
        _check_tier(raw, category)

        if category.name in seen_categories:
            raise MalformedEntryError(
                f"category heading repeated (first at line {seen_categories[category.name]})",
                category=category.name,
                line=raw.line,
            )
        seen_categories[category.name] = raw.line

        for position, entry in enumerate(raw.entries):
            if not RULE_ID_PATTERN.match(entry.rule_id):
                raise MalformedEntryError(
                    "rule id is not a kebab-case token", category=category.name, line=entry.line, text=entry.text
                )
            if not entry.summary:
                raise MalformedEntryError("empty summary", category=category.name, line=entry.line, text=entry.text)

            if entry.rule_id in owner:
                raise DuplicateIdError(
                    entry.rule_id,
                    first_category=owner[entry.rule_id],
                    second_category=category.name,
                    line=entry.line,
                )
            owner[entry.rule_id] = category.name

            descriptors.append(
                RuleDescriptor(
                    id=entry.rule_id,
                    category=category,
                    summary=entry.summary,
                    position=position,
                    document_ref=f"{entry.rule_id}{extension}",
                )
            )

    return descriptors


def _category_filter(categories: CategorySet):
    """Accept headings that name a known category or declare a tier."""

    def is_category(name: str, tier_label: str | None) -> bool:
        if name in categories:
            return True
        if tier_label is None:
            return False
        try:
            PriorityTier.parse(tier_label)
        except ValueError:
            return False
        return True

    return is_category


def _check_tier(raw: RawCategory, category: Category) -> None:
    if raw.tier_label is None:
        return
    try:
        declared = PriorityTier.parse(raw.tier_label)
    except ValueError:
        raise MalformedEntryError(
            f"unknown priority tier '{raw.tier_label}'", category=category.name, line=raw.line
        ) from None
    if declared != category.tier:
        raise TierMismatchError(
            f"declared tier {declared.value} but category is {category.tier.value}",
            category=category.name,
            line=raw.line,
        )
