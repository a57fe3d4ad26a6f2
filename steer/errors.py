"""Error taxonomy for catalog loading and steering retrieval.

Load-time errors (``CatalogError``) abort initialization so no partial power
is exposed. Per-call errors (``LookupFailure``, ``RequestError``) leave the
catalog and document store untouched.
"""

from __future__ import annotations

from pathlib import Path


class SteerError(Exception):
    """Base class for all steer errors."""


# ---------------------------------------------------------------------------
# Load-time integrity errors
# ---------------------------------------------------------------------------


class CatalogError(SteerError):
    """The catalog index or power configuration is invalid."""


class MalformedEntryError(CatalogError):
    """An index entry cannot be parsed into ``(id, summary)``."""

    def __init__(self, message: str, *, category: str | None = None, line: int | None = None, text: str = ""):
        self.category = category
        self.line = line
        self.text = text
        loc = f"line {line}" if line else "index"
        where = f" in category '{category}'" if category else ""
        detail = f": {text.strip()!r}" if text.strip() else ""
        super().__init__(f"{loc}{where}: {message}{detail}")


class TierMismatchError(MalformedEntryError):
    """A category heading declares a tier other than the category's fixed tier."""


class UnknownCategoryError(CatalogError):
    def __init__(self, category: str, *, line: int | None = None, known: list[str] | None = None):
        self.category = category
        self.line = line
        self.known = list(known or [])
        msg = f"Unknown category '{category}'"
        if line:
            msg = f"line {line}: {msg}"
        if self.known:
            msg += f" (known: {', '.join(self.known)})"
        super().__init__(msg)


class DuplicateIdError(CatalogError):
    def __init__(self, rule_id: str, *, first_category: str, second_category: str, line: int | None = None):
        self.rule_id = rule_id
        self.first_category = first_category
        self.second_category = second_category
        self.line = line
        if first_category == second_category:
            where = f"twice in category '{first_category}'"
        else:
            where = f"in both '{first_category}' and '{second_category}'"
        prefix = f"line {line}: " if line else ""
        super().__init__(f"{prefix}Duplicate rule id '{rule_id}' {where}")


class PowerIndexError(CatalogError):
    """POWER.md is missing, unreadable, or lacks required metadata."""

    def __init__(self, message: str, *, path: Path | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ConfigError(CatalogError):
    """steer.toml holds an invalid value."""

    def __init__(self, key: str, message: str, *, path: Path | None = None):
        self.key = key
        self.path = path
        where = f"{path}: " if path else ""
        super().__init__(f"{where}invalid '{key}': {message}")


class DuplicatePowerError(CatalogError, ValueError):
    """Two powers registered under the same name."""

    def __init__(self, power_name: str, *, path: Path | None = None):
        self.power_name = power_name
        self.path = path
        where = f" (from {path})" if path else ""
        super().__init__(f"Power '{power_name}' is already registered{where}")


class CatalogMismatchError(SteerError):
    """A descriptor references a steering document that does not exist.

    Collected as a load-time warning; raised only when the power is strict.
    """

    def __init__(self, rule_id: str, document_ref: str, *, category: str | None = None):
        self.rule_id = rule_id
        self.document_ref = document_ref
        self.category = category
        where = f" (category '{category}')" if category else ""
        super().__init__(f"Rule '{rule_id}'{where} references missing document '{document_ref}'")


# ---------------------------------------------------------------------------
# Per-call errors
# ---------------------------------------------------------------------------


class LookupFailure(SteerError, LookupError):
    """A lookup by id found nothing. Recoverable by the caller."""

    kind = "entry"

    def __init__(self, rule_id: str, *, power: str | None = None):
        self.rule_id = rule_id
        self.power = power
        where = f" in power '{power}'" if power else ""
        super().__init__(f"No {self.kind} for '{rule_id}'{where}")


class DocumentNotFoundError(LookupFailure):
    kind = "steering document"


class DescriptorNotFoundError(LookupFailure):
    kind = "rule descriptor"


class RequestError(SteerError, ValueError):
    """Invalid retrieval request. Recoverable by the caller."""


class UnknownPowerError(RequestError):
    def __init__(self, power_name: str, *, known: list[str] | None = None):
        self.power_name = power_name
        self.known = list(known or [])
        msg = f"Unknown power '{power_name}'"
        if self.known:
            msg += f" (available: {', '.join(self.known)})"
        super().__init__(msg)


class MalformedRequestError(RequestError):
    def __init__(self, steering_file: str, reason: str):
        self.steering_file = steering_file
        self.reason = reason
        super().__init__(f"Malformed steering file name {steering_file!r}: {reason}")
