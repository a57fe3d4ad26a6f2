"""
Read-only document store for steering files.

Documents are addressed by rule id and resolved from ``<dir>/<id><ext>``.
Loading is lazy: a file is read on first access and memoized, so repeated
lookups of an id return the same Document for the life of the store.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import frontmatter

from .errors import CatalogMismatchError, DocumentNotFoundError
from .models import RULE_ID_PATTERN, Document

if TYPE_CHECKING:
    from .models import Catalog

logger = logging.getLogger(__name__)


def compute_content_id(text: str) -> str:
    """Hex sha256 of the document text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class DocumentStore:
    """Maps rule ids to steering documents in a directory."""

    def __init__(self, directory: Path, *, extension: str = ".md", power_name: str | None = None):
        self.directory = directory
        self.extension = extension
        self.power_name = power_name
        self._paths = self._scan()
        self._cache: dict[str, Document] = {}
        self._lock = threading.Lock()

    def _scan(self) -> dict[str, Path]:
        """Index the key space once; file contents are read lazily."""
        paths: dict[str, Path] = {}
        if not self.directory.is_dir():
            logger.warning("Steering directory %s does not exist", self.directory)
            return paths

        for path in sorted(self.directory.glob(f"*{self.extension}")):
            if path.name.startswith(".") or not path.is_file():
                continue
            doc_id = path.name[: -len(self.extension)]
            if not RULE_ID_PATTERN.match(doc_id):
                logger.debug("Skipping %s: not a kebab-case document name", path.name)
                continue
            paths[doc_id] = path
        return paths

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def ids(self) -> list[str]:
        return list(self._paths)

    def path_for(self, doc_id: str) -> Path:
        try:
            return self._paths[doc_id]
        except KeyError:
            raise DocumentNotFoundError(doc_id, power=self.power_name) from None

    def get(self, doc_id: str) -> Document:
        """Return the Document for ``doc_id``, loading it on first access."""
        cached = self._cache.get(doc_id)
        if cached is not None:
            return cached

        path = self.path_for(doc_id)
        with self._lock:
            # Another thread may have loaded it while we waited.
            cached = self._cache.get(doc_id)
            if cached is None:
                cached = self._load(doc_id, path)
                self._cache[doc_id] = cached
        return cached

    def read(self, doc_id: str) -> str:
        """Full text of the document for ``doc_id``."""
        return self.get(doc_id).text

    def preload(self) -> int:
        """Load every document eagerly. Returns the number loaded."""
        for doc_id in self._paths:
            self.get(doc_id)
        return len(self._cache)

    def is_loaded(self, doc_id: str) -> bool:
        return doc_id in self._cache

    def _load(self, doc_id: str, path: Path) -> Document:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read steering document %s: %s", path, e)
            raise DocumentNotFoundError(doc_id, power=self.power_name) from e

        post = frontmatter.loads(raw)
        text = post.content.lstrip("\n")
        logger.debug("Loaded steering document %s (%d bytes)", doc_id, len(text))
        return Document(
            id=doc_id,
            text=text,
            path=path,
            content_id=compute_content_id(text),
            metadata=dict(post.metadata),
        )

    def verify_catalog(self, catalog: "Catalog") -> list[CatalogMismatchError]:
        """Return one CatalogMismatchError per descriptor without a document."""
        mismatches = []
        for descriptor in catalog:
            if descriptor.id not in self._paths:
                mismatches.append(
                    CatalogMismatchError(descriptor.id, descriptor.document_ref, category=descriptor.category.name)
                )
        return mismatches
