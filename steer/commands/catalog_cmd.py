"""Catalog listing commands: rules and categories."""

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import UnknownCategoryError
from ..models import PriorityTier
from ..power import Power

TIER_STYLES = {
    PriorityTier.CRITICAL: "bold red",
    PriorityTier.HIGH: "red",
    PriorityTier.MEDIUM_HIGH: "yellow",
    PriorityTier.MEDIUM: "yellow",
    PriorityTier.LOW_MEDIUM: "cyan",
    PriorityTier.LOW: "dim",
}


def run_rules(
    power: Power,
    category: str | None = None,
    tier: str | None = None,
    output_json: bool = False,
) -> int:
    """List rule descriptors.

    Args:
        power: Loaded power
        category: Only rules in this category
        tier: Only rules at or above this priority tier
        output_json: Output as JSON instead of a table

    Returns:
        Exit code (0 = success, 1 = bad filter)
    """
    console = Console(stderr=True)
    catalog = power.catalog

    try:
        threshold = PriorityTier.parse(tier) if tier else PriorityTier.LOW
        if category:
            rules = catalog.rules_in_category(category)
        else:
            rules = catalog.rules_at_or_above(threshold)
    except UnknownCategoryError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1
    except ValueError as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        console.print(f"Available tiers: {', '.join(t.value for t in PriorityTier)}", style="dim")
        return 1

    rules = [r for r in rules if r.tier.rank <= threshold.rank]

    if output_json:
        print(json.dumps([r.to_dict() for r in rules], indent=2))
        return 0

    table = Table(title=f"{power.title} ({len(rules)} rules)")
    table.add_column("Rule", style="bold")
    table.add_column("Category")
    table.add_column("Tier")
    table.add_column("Summary")
    for rule in rules:
        table.add_row(rule.id, rule.category.name, f"[{TIER_STYLES[rule.tier]}]{rule.tier.value}[/]", escape(rule.summary))

    Console().print(table)
    return 0


def run_categories(power: Power, output_json: bool = False) -> int:
    """List categories in priority order with rule counts."""
    catalog = power.catalog
    categories = catalog.categories_by_priority()

    if output_json:
        data = [
            {
                "name": c.name,
                "tier": c.tier.value,
                "rules": len(catalog.rules_in_category(c.name)),
            }
            for c in categories
        ]
        print(json.dumps(data, indent=2))
        return 0

    table = Table(title=f"{power.title} categories")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Category", style="bold")
    table.add_column("Tier")
    table.add_column("Rules", justify="right")
    for i, c in enumerate(categories, start=1):
        table.add_row(
            str(i),
            c.name,
            f"[{TIER_STYLES[c.tier]}]{c.tier.value}[/]",
            str(len(catalog.rules_in_category(c.name))),
        )

    Console().print(table)
    return 0
