"""Powers bundled with steer as package data."""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path

from ..errors import UnknownPowerError
from ..power import Power, load_power
from ..retrieval import PowerRegistry

BUILTIN_POWERS = ("react-best-practices",)


def builtin_power_path(name: str) -> Path:
    if name not in BUILTIN_POWERS:
        raise UnknownPowerError(name, known=list(BUILTIN_POWERS))
    return Path(str(files(__name__) / name))


def load_builtin(name: str = "react-best-practices") -> Power:
    """Load a bundled power by name."""
    return load_power(builtin_power_path(name))


def load_builtin_registry() -> PowerRegistry:
    """Registry holding every bundled power."""
    return PowerRegistry([load_builtin(name) for name in BUILTIN_POWERS])
