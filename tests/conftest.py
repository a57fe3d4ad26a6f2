"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from steer.power import Power, load_power

# Categories deliberately listed out of priority order.
FIXTURE_INDEX = "\n".join(
    [
        "---",
        'name: "react-best-practices"',
        'displayName: "Fixture Power"',
        "keywords: [react, fixture]",
        "---",
        "",
        "# Fixture Power",
        "",
        "## Quick Reference",
        "",
        "### Re-render Optimization (MEDIUM)",
        "",
        "- `rerender-memo` - Extract expensive work into memoized components",
        "",
        "### Server-Side Performance (HIGH)",
        "",
        "| Rule | Description |",
        "|------|-------------|",
        "| [server-cache-react](steering/server-cache-react.md) | Use React.cache() for per-request deduplication |",
        "",
        "### 1. Eliminating Waterfalls (CRITICAL)",
        "",
        "| Rule | Description |",
        "|------|-------------|",
        "| `async-parallel` | Use Promise.all() for independent operations |",
        "| `async-defer-await` | Move await into branches where actually used |",
        "",
        "## Troubleshooting",
        "",
        "- not-an-entry - prose outside the quick reference is ignored",
        "",
    ]
)


def write_doc(steering: Path, rule_id: str, body: str | None = None) -> Path:
    """Write a steering document with title and example sections."""
    steering.mkdir(parents=True, exist_ok=True)
    if body is None:
        body = "\n".join(
            [
                f"# {rule_id.replace('-', ' ').title()}",
                "",
                f"Body of {rule_id}.",
                "",
                "## Incorrect",
                "",
                "```ts",
                "await a(); await b()",
                "```",
                "",
                "## Correct",
                "",
                "```ts",
                "await Promise.all([a(), b()])",
                "```",
                "",
            ]
        )
    path = steering / f"{rule_id}.md"
    path.write_text(body, encoding="utf-8")
    return path


def make_power(root: Path, index: str = FIXTURE_INDEX, docs: list[str] | None = None, config: str | None = None) -> Path:
    """Create a power directory under ``root`` and return its path."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "POWER.md").write_text(index, encoding="utf-8")
    if docs is None:
        docs = ["rerender-memo", "server-cache-react", "async-parallel", "async-defer-await"]
    for doc_id in docs:
        write_doc(root / "steering", doc_id)
    if config is not None:
        (root / "steer.toml").write_text(config, encoding="utf-8")
    return root


@pytest.fixture
def fixture_power_path(tmp_path: Path) -> Path:
    """Path to a minimal four-rule power."""
    return make_power(tmp_path / "power")


@pytest.fixture
def fixture_power(fixture_power_path: Path) -> Power:
    """Load the minimal fixture power."""
    return load_power(fixture_power_path)
