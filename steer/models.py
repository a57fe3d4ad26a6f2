"""Data models for power catalogs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from .errors import DescriptorNotFoundError, MalformedEntryError, UnknownCategoryError

# kebab-case rule ids: async-parallel, js-set-map-lookups
RULE_ID_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class PriorityTier(str, Enum):
    """Impact tier of a category, most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM_HIGH = "MEDIUM-HIGH"
    MEDIUM = "MEDIUM"
    LOW_MEDIUM = "LOW-MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @classmethod
    def parse(cls, label: str) -> "PriorityTier":
        """Parse a tier label like ``medium-high`` or ``LOW MEDIUM``."""
        normalized = re.sub(r"[\s_]+", "-", label.strip().upper())
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown priority tier '{label}'") from None


_TIER_ORDER = list(PriorityTier)


@dataclass(frozen=True)
class Category:
    """A rule category with its fixed tier and declaration rank."""

    name: str
    tier: PriorityTier
    rank: int
    prefix: str = ""

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.tier.rank, self.rank)


# The fixed category set for React/Next.js performance powers.
DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("Eliminating Waterfalls", PriorityTier.CRITICAL, 1, "async-"),
    Category("Bundle Size Optimization", PriorityTier.CRITICAL, 2, "bundle-"),
    Category("Server-Side Performance", PriorityTier.HIGH, 3, "server-"),
    Category("Client-Side Data Fetching", PriorityTier.MEDIUM_HIGH, 4, "client-"),
    Category("Re-render Optimization", PriorityTier.MEDIUM, 5, "rerender-"),
    Category("Rendering Performance", PriorityTier.MEDIUM, 6, "rendering-"),
    Category("JavaScript Performance", PriorityTier.LOW_MEDIUM, 7, "js-"),
    Category("Advanced Patterns", PriorityTier.LOW, 8, "advanced-"),
)


class CategorySet:
    """Closed set of categories, matched case-insensitively by name."""

    def __init__(self, categories: tuple[Category, ...] | list[Category] = DEFAULT_CATEGORIES):
        self._categories = tuple(categories)
        self._by_name = {c.name.lower(): c for c in self._categories}

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._by_name

    def get(self, name: str) -> Category | None:
        return self._by_name.get(name.strip().lower())

    def resolve(self, name: str, *, line: int | None = None) -> Category:
        category = self.get(name)
        if category is None:
            raise UnknownCategoryError(name.strip(), line=line, known=self.names())
        return category

    def names(self) -> list[str]:
        return [c.name for c in self._categories]


@dataclass(frozen=True)
class RuleDescriptor:
    """One rule as listed in the catalog index."""

    id: str
    category: Category
    summary: str
    position: int = 0  # order within its category
    document_ref: str = ""  # steering file name, resolved on demand

    def __post_init__(self):
        if not RULE_ID_PATTERN.match(self.id):
            raise MalformedEntryError("rule id is not a kebab-case token", category=self.category.name, text=self.id)
        if not self.summary.strip():
            raise MalformedEntryError("empty summary", category=self.category.name, text=self.id)
        if not self.document_ref:
            object.__setattr__(self, "document_ref", f"{self.id}.md")

    @property
    def tier(self) -> PriorityTier:
        return self.category.tier

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.name,
            "tier": self.tier.value,
            "summary": self.summary,
            "document": self.document_ref,
        }


@dataclass(frozen=True)
class Document:
    """Full text of one steering file."""

    id: str
    text: str
    path: Path
    content_id: str  # sha256 of text
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def title(self) -> str:
        """Extract title from first H1 header or use the id."""
        for line in self.text.split("\n"):
            if line.startswith("# "):
                return line[2:].strip()
        return self.id


class Catalog:
    """Ordered, read-only collection of rule descriptors for one power."""

    def __init__(self, power_name: str, descriptors: list[RuleDescriptor], categories: CategorySet | None = None):
        self.power_name = power_name
        self.categories = categories if categories is not None else CategorySet()
        self._descriptors = tuple(descriptors)
        self._by_id = {d.id: d for d in self._descriptors}

    def __iter__(self) -> Iterator[RuleDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __repr__(self) -> str:
        return f"Catalog(power={self.power_name!r}, rules={len(self)})"

    def ids(self) -> list[str]:
        return [d.id for d in self._descriptors]

    @property
    def descriptors(self) -> tuple[RuleDescriptor, ...]:
        return self._descriptors

    def get(self, rule_id: str) -> RuleDescriptor:
        """Look up a descriptor by id."""
        try:
            return self._by_id[rule_id]
        except KeyError:
            raise DescriptorNotFoundError(rule_id, power=self.power_name) from None

    def find(self, rule_id: str) -> RuleDescriptor | None:
        return self._by_id.get(rule_id)

    def describe(self, rule_id: str) -> dict[str, Any]:
        """Descriptor fields plus its position in category and priority order.

        Raises:
            DescriptorNotFoundError: ``rule_id`` is not in the catalog
        """
        descriptor = self.get(rule_id)
        data = descriptor.to_dict()
        data["position"] = descriptor.position
        data["priority"] = self.categories_by_priority().index(descriptor.category) + 1
        return data

    def rules_in_category(self, name: str) -> list[RuleDescriptor]:
        """Descriptors in a category, in declared order."""
        category = self.categories.resolve(name)
        rules = [d for d in self._descriptors if d.category == category]
        return sorted(rules, key=lambda d: d.position)

    def categories_by_priority(self) -> list[Category]:
        """Categories present in the catalog, CRITICAL first.

        Ties within a tier keep the category's fixed rank, not index order.
        """
        present = {d.category for d in self._descriptors}
        return sorted(present, key=lambda c: c.sort_key)

    def rules_at_or_above(self, tier: PriorityTier | str) -> list[RuleDescriptor]:
        """Descriptors whose category is at least as severe as ``tier``."""
        if isinstance(tier, str):
            tier = PriorityTier.parse(tier)
        result = []
        for category in self.categories_by_priority():
            if category.tier.rank <= tier.rank:
                result.extend(self.rules_in_category(category.name))
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "power": self.power_name,
            "categories": [
                {
                    "name": c.name,
                    "tier": c.tier.value,
                    "rules": [d.to_dict() for d in self.rules_in_category(c.name)],
                }
                for c in self.categories_by_priority()
            ],
        }
