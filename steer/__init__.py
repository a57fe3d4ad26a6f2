"""steer - catalog and retrieval for steering-file powers."""

from .catalog import load_catalog
from .errors import (
    CatalogError,
    CatalogMismatchError,
    DescriptorNotFoundError,
    DocumentNotFoundError,
    DuplicateIdError,
    DuplicatePowerError,
    MalformedEntryError,
    MalformedRequestError,
    SteerError,
    UnknownCategoryError,
    UnknownPowerError,
)
from .models import Catalog, Category, Document, PriorityTier, RuleDescriptor
from .power import Power, load_power
from .retrieval import PowerRegistry, SteeringReader
from .store import DocumentStore

__version__ = "0.1.0"

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogMismatchError",
    "Category",
    "DescriptorNotFoundError",
    "Document",
    "DocumentNotFoundError",
    "DocumentStore",
    "DuplicateIdError",
    "DuplicatePowerError",
    "MalformedEntryError",
    "MalformedRequestError",
    "Power",
    "PowerRegistry",
    "PriorityTier",
    "RuleDescriptor",
    "SteerError",
    "SteeringReader",
    "UnknownCategoryError",
    "UnknownPowerError",
    "load_catalog",
    "load_power",
]
