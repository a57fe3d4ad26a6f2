"""Per-power configuration loaded from ``steer.toml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .models import DEFAULT_CATEGORIES, Category, CategorySet, PriorityTier

CONFIG_FILENAME = "steer.toml"


@dataclass(frozen=True)
class PowerConfig:
    """Loader options for one power directory."""

    name: str | None = None  # overrides POWER.md frontmatter
    steering_dir: str = "steering"
    extension: str = ".md"
    index_section: str = "Quick Reference"
    strict: bool = False  # catalog mismatches become fatal
    preload: bool = False
    categories: tuple[Category, ...] = field(default=DEFAULT_CATEGORIES)

    @property
    def category_set(self) -> CategorySet:
        return CategorySet(self.categories)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str_option(data: dict[str, Any], key: str, default: str, path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(key, "expected a non-empty string", path=path)
    return value.strip()


def _bool_option(data: dict[str, Any], key: str, default: bool, path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(key, "expected true or false", path=path)
    return value


def _load_categories(raw: Any, path: Path) -> tuple[Category, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError("categories", "expected a non-empty array of tables", path=path)

    categories: list[Category] = []
    seen: set[str] = set()
    for rank, item in enumerate(raw, start=1):
        item = _coerce_dict(item)
        name = str(item.get("name", "")).strip()
        if not name:
            raise ConfigError(f"categories[{rank - 1}].name", "is required", path=path)
        if name.lower() in seen:
            raise ConfigError(f"categories[{rank - 1}].name", f"'{name}' is listed twice", path=path)
        seen.add(name.lower())
        try:
            tier = PriorityTier.parse(str(item.get("tier", "")))
        except ValueError as e:
            raise ConfigError(f"categories[{rank - 1}].tier", str(e), path=path) from None
        prefix = str(item.get("prefix", "")).strip()
        categories.append(Category(name=name, tier=tier, rank=rank, prefix=prefix))
    return tuple(categories)


def load_config(power_path: Path) -> PowerConfig:
    """Load ``steer.toml`` from a power directory, or defaults if absent."""
    import tomllib

    path = power_path / CONFIG_FILENAME
    if not path.exists():
        return PowerConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError("<file>", str(e), path=path) from e

    name = data.get("name")
    if name is not None and (not isinstance(name, str) or not name.strip()):
        raise ConfigError("name", "expected a non-empty string", path=path)

    extension = _str_option(data, "extension", ".md", path)
    if not extension.startswith("."):
        raise ConfigError("extension", "must start with '.'", path=path)

    categories = DEFAULT_CATEGORIES
    if "categories" in data:
        categories = _load_categories(data["categories"], path)

    return PowerConfig(
        name=name.strip() if name else None,
        steering_dir=_str_option(data, "steering_dir", "steering", path),
        extension=extension,
        index_section=_str_option(data, "index_section", "Quick Reference", path),
        strict=_bool_option(data, "strict", False, path),
        preload=_bool_option(data, "preload", False, path),
        categories=categories,
    )
