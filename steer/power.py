"""Power loading: POWER.md index plus steering documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter
import yaml

from .catalog.loader import load_catalog
from .config import PowerConfig, load_config
from .errors import CatalogMismatchError, PowerIndexError
from .models import Catalog
from .store import DocumentStore

logger = logging.getLogger(__name__)

INDEX_FILENAME = "POWER.md"


@dataclass
class Power:
    """A loaded power: catalog, document store, and integrity findings."""

    path: Path
    name: str
    catalog: Catalog
    store: DocumentStore
    config: PowerConfig = field(default_factory=PowerConfig)
    display_name: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    mismatches: list[CatalogMismatchError] = field(default_factory=list)

    @property
    def index_path(self) -> Path:
        return self.path / INDEX_FILENAME

    @property
    def title(self) -> str:
        return self.display_name or self.name

    def __repr__(self) -> str:
        return f"Power(name={self.name!r}, rules={len(self.catalog)}, documents={len(self.store)})"


def _keywords(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    return [str(k) for k in value]


def load_power(power_path: Path) -> Power:
    """Load a power directory.

    Args:
        power_path: Directory containing POWER.md and the steering directory

    Returns:
        Power with a validated catalog. Descriptors without documents are
        recorded on ``Power.mismatches`` and logged as warnings.

    Raises:
        PowerIndexError: POWER.md missing or unreadable
        CatalogError: index content invalid (see load_catalog)
        CatalogMismatchError: a descriptor has no document and the power is strict
    """
    power_path = Path(power_path)
    index_path = power_path / INDEX_FILENAME
    if not index_path.is_file():
        raise PowerIndexError(f"{INDEX_FILENAME} not found", path=power_path)

    config = load_config(power_path)

    try:
        raw = index_path.read_text(encoding="utf-8")
        post = frontmatter.loads(raw)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
        raise PowerIndexError(f"cannot read index: {e}", path=index_path) from e

    meta = post.metadata
    name = config.name or str(meta.get("name") or "").strip() or power_path.name

    # Line numbers in errors count from the top of POWER.md.
    body_start = raw.find(post.content) if post.content else -1
    line_offset = raw.count("\n", 0, body_start) if body_start > 0 else 0

    catalog = load_catalog(
        post.content,
        name,
        config.category_set,
        extension=config.extension,
        section=config.index_section,
        line_offset=line_offset,
    )
    if len(catalog) == 0:
        raise PowerIndexError("index lists no rules", path=index_path)

    store = DocumentStore(power_path / config.steering_dir, extension=config.extension, power_name=name)

    mismatches = store.verify_catalog(catalog)
    for mismatch in mismatches:
        if config.strict:
            raise mismatch
        logger.warning("%s: %s", name, mismatch)

    if config.preload:
        store.preload()

    logger.info("Loaded power %s: %d rules, %d documents", name, len(catalog), len(store))

    return Power(
        path=power_path,
        name=name,
        catalog=catalog,
        store=store,
        config=config,
        display_name=str(meta.get("displayName") or meta.get("display_name") or ""),
        description=str(meta.get("description") or ""),
        keywords=_keywords(meta.get("keywords")),
        mismatches=mismatches,
    )
