"""Lint rules for power integrity."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from .errors import DocumentNotFoundError

if TYPE_CHECKING:
    from .power import Power

REQUIRED_SECTIONS = ("Incorrect", "Correct")

RULE_EXPLANATIONS: dict[str, str] = {
    "catalog-mismatch": (
        "A rule listed in POWER.md has no steering file. read_steering fails for "
        "that id until the file is added or the entry removed."
    ),
    "orphan-document": (
        "A steering file is not listed in the POWER.md quick reference. Hosts "
        "cannot reach it through read_steering."
    ),
    "empty-document": "A steering file has no body text.",
    "missing-title": "A steering file has no '# ' title heading.",
    "prefix-mismatch": (
        "A rule id does not start with its category prefix (e.g. async- for "
        "Eliminating Waterfalls), which suggests it is filed in the wrong category."
    ),
    "missing-section": (
        "A steering file lacks an '## Incorrect' or '## Correct' example section."
    ),
}


def get_rule_ids() -> list[str]:
    return list(RULE_EXPLANATIONS)


@dataclass
class LintResult:
    """A single lint finding."""

    level: Literal["error", "warning", "info"]
    rule: str
    file: Path
    message: str
    line: int | None = None

    def __str__(self) -> str:
        loc = f"{self.file.name}"
        if self.line:
            loc += f":{self.line}"
        return f"{self.level.upper()}: [{self.rule}] {loc} - {self.message}"

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "rule": self.rule,
            "file": str(self.file),
            "message": self.message,
            "line": self.line,
        }


def _find_line(text: str, needle: str) -> int | None:
    for i, line in enumerate(text.split("\n"), start=1):
        if needle in line:
            return i
    return None


class LintRules:
    """Collection of lint rules for a loaded power."""

    def __init__(self, power: "Power"):
        self.power = power

    def run_all(self, allowed_rules: set[str] | None = None) -> list[LintResult]:
        """Run all lint checks and return findings."""
        checks = {
            "catalog-mismatch": self.check_catalog_mismatch,
            "orphan-document": self.check_orphan_documents,
            "empty-document": self.check_empty_documents,
            "missing-title": self.check_missing_titles,
            "prefix-mismatch": self.check_prefix_mismatch,
            "missing-section": self.check_missing_sections,
        }
        results = []
        for rule_id, check in checks.items():
            if allowed_rules is None or rule_id in allowed_rules:
                results.extend(check())
        return results

    def _documents(self):
        """Documents backing catalog entries, skipping missing ones."""
        for descriptor in self.power.catalog:
            try:
                yield descriptor, self.power.store.get(descriptor.id)
            except DocumentNotFoundError:
                continue

    def check_catalog_mismatch(self) -> list[LintResult]:
        """Check that every descriptor has a steering document."""
        index = self.power.index_path
        index_text = index.read_text(encoding="utf-8") if index.exists() else ""
        results = []
        for mismatch in self.power.mismatches:
            results.append(
                LintResult(
                    level="error",
                    rule="catalog-mismatch",
                    file=index,
                    message=str(mismatch),
                    line=_find_line(index_text, mismatch.rule_id),
                )
            )
        return results

    def check_orphan_documents(self) -> list[LintResult]:
        """Check for steering files not listed in the catalog."""
        results = []
        for doc_id in self.power.store.ids():
            if doc_id not in self.power.catalog:
                results.append(
                    LintResult(
                        level="info",
                        rule="orphan-document",
                        file=self.power.store.path_for(doc_id),
                        message=f"Steering file '{doc_id}' is not listed in {self.power.index_path.name}",
                    )
                )
        return results

    def check_empty_documents(self) -> list[LintResult]:
        results = []
        for descriptor, doc in self._documents():
            if not doc.text.strip():
                results.append(
                    LintResult(
                        level="warning",
                        rule="empty-document",
                        file=doc.path,
                        message=f"Steering file for '{descriptor.id}' is empty",
                    )
                )
        return results

    def check_missing_titles(self) -> list[LintResult]:
        results = []
        for descriptor, doc in self._documents():
            if doc.text.strip() and doc.title == doc.id:
                results.append(
                    LintResult(
                        level="info",
                        rule="missing-title",
                        file=doc.path,
                        message=f"Steering file for '{descriptor.id}' has no '# ' title",
                    )
                )
        return results

    def check_prefix_mismatch(self) -> list[LintResult]:
        """Check that rule ids carry their category prefix."""
        results = []
        for descriptor in self.power.catalog:
            prefix = descriptor.category.prefix
            if prefix and not descriptor.id.startswith(prefix):
                results.append(
                    LintResult(
                        level="warning",
                        rule="prefix-mismatch",
                        file=self.power.index_path,
                        message=(
                            f"'{descriptor.id}' is filed under '{descriptor.category.name}' "
                            f"but lacks the '{prefix}' prefix"
                        ),
                    )
                )
        return results

    def check_missing_sections(self) -> list[LintResult]:
        """Check that documents show incorrect and correct examples."""
        results = []
        for descriptor, doc in self._documents():
            if not doc.text.strip():
                continue
            for section in REQUIRED_SECTIONS:
                if not re.search(rf"^##\s+{section}\b", doc.text, re.MULTILINE | re.IGNORECASE):
                    results.append(
                        LintResult(
                            level="warning",
                            rule="missing-section",
                            file=doc.path,
                            message=f"Steering file for '{descriptor.id}' lacks '## {section}' section",
                        )
                    )
        return results
