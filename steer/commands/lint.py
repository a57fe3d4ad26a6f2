"""Lint command implementation."""

import json

from rich.console import Console
from rich.markup import escape

from ..power import Power
from ..rules import RULE_EXPLANATIONS, LintResult, LintRules, get_rule_ids


def run_lint(power: Power, fail_on: str = "error", output_json: bool = False) -> int:
    """Run integrity checks on a power.

    Args:
        power: Loaded power
        fail_on: Exit with error if this level or higher found ("error" or "warning")
        output_json: Output results as JSON instead of human-readable

    Returns:
        Exit code (0 = success, 1 = failures found)
    """
    console = Console(stderr=True)
    console.print(escape(f"Checking power {power.name} at {power.path}..."), style="dim")

    results = LintRules(power).run_all()

    # Sort by level (errors first)
    level_order = {"error": 0, "warning": 1, "info": 2}
    results.sort(key=lambda r: (level_order.get(r.level, 99), str(r.file), r.line or 0))

    counts = {"error": 0, "warning": 0, "info": 0}
    for r in results:
        counts[r.level] = counts.get(r.level, 0) + 1

    if output_json:
        _output_json(power, results, counts)
    else:
        _print_human_output(console, power, results, counts)

    if fail_on == "warning":
        if counts["error"] > 0 or counts["warning"] > 0:
            return 1
    elif counts["error"] > 0:
        return 1

    return 0


def run_explain(rule_id: str) -> int:
    """Print the explanation for a lint rule."""
    console = Console()
    explanation = RULE_EXPLANATIONS.get(rule_id)
    if explanation is None:
        console.print(f"Unknown rule: {escape(rule_id)}", style="bold red")
        console.print(f"Available: {', '.join(get_rule_ids())}", style="dim")
        return 1

    console.print(f"[bold]{escape(rule_id)}[/]")
    console.print(explanation)
    return 0


def _output_json(power: Power, results: list[LintResult], counts: dict[str, int]) -> None:
    output = {
        "errors": [r.to_dict() for r in results if r.level == "error"],
        "warnings": [r.to_dict() for r in results if r.level == "warning"],
        "info": [r.to_dict() for r in results if r.level == "info"],
        "summary": {
            "power": power.name,
            "rules": len(power.catalog),
            "documents": len(power.store),
            "errors": counts["error"],
            "warnings": counts["warning"],
            "info": counts["info"],
        },
    }
    print(json.dumps(output, indent=2, default=str))


def _print_human_output(console: Console, power: Power, results: list[LintResult], counts: dict[str, int]) -> None:
    for r in results:
        if r.level == "error":
            style = "bold red"
        elif r.level == "warning":
            style = "yellow"
        else:
            style = "dim"
        console.print(escape(str(r)), style=style)

    console.print()
    summary = (
        f"{len(power.catalog)} rules, {len(power.store)} documents: "
        f"{counts['error']} error(s), {counts['warning']} warning(s), {counts['info']} info"
    )
    if counts["error"]:
        console.print(f"✗ {summary}", style="bold red")
    elif counts["warning"]:
        console.print(f"⚠ {summary}", style="yellow")
    else:
        console.print(f"✓ {summary}", style="bold green")
