"""The host-facing ``readSteering`` boundary."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import DocumentNotFoundError, DuplicatePowerError, MalformedRequestError, UnknownPowerError
from .models import RULE_ID_PATTERN
from .power import Power, load_power

logger = logging.getLogger(__name__)


def normalize_steering_file(steering_file: str, extension: str = ".md") -> str:
    """Turn ``async-parallel.md`` (or ``async-parallel``) into a rule id.

    Raises:
        MalformedRequestError: path separators, another extension, or a name
            that is not a kebab-case token
    """
    if not isinstance(steering_file, str):
        raise MalformedRequestError(repr(steering_file), "expected a string")

    name = steering_file.strip()
    if not name:
        raise MalformedRequestError(steering_file, "empty name")
    if "/" in name or "\\" in name:
        raise MalformedRequestError(steering_file, "must be a bare file name, not a path")

    if name.lower().endswith(extension.lower()):
        name = name[: -len(extension)]
    elif "." in name:
        raise MalformedRequestError(steering_file, f"expected a '{extension}' file")

    if not RULE_ID_PATTERN.match(name):
        raise MalformedRequestError(steering_file, "not a kebab-case rule id")
    return name


class SteeringReader:
    """Serves steering documents for a single power."""

    def __init__(self, power: Power):
        self.power = power

    @property
    def power_name(self) -> str:
        return self.power.name

    def read_steering(self, power_name: str, steering_file: str) -> str:
        """Return the full document text for ``steering_file``.

        Raises:
            UnknownPowerError: ``power_name`` is not this power
            MalformedRequestError: file name does not follow ``<id>.md``
            DocumentNotFoundError: id not in the catalog, or its document is missing
        """
        if power_name != self.power.name:
            raise UnknownPowerError(power_name, known=[self.power.name])

        rule_id = normalize_steering_file(steering_file, self.power.config.extension)
        if rule_id not in self.power.catalog:
            raise DocumentNotFoundError(rule_id, power=self.power.name)

        text = self.power.store.read(rule_id)
        logger.debug("read_steering %s/%s (%d bytes)", power_name, rule_id, len(text))
        return text

    # Host agents call this name.
    readSteering = read_steering


class PowerRegistry:
    """Several powers keyed by name."""

    def __init__(self, powers: list[Power] | None = None):
        self._readers: dict[str, SteeringReader] = {}
        for power in powers or []:
            self.add(power)

    def add(self, power: Power) -> None:
        if power.name in self._readers:
            raise DuplicatePowerError(power.name, path=power.path)
        self._readers[power.name] = SteeringReader(power)

    def load(self, power_path: Path) -> Power:
        power = load_power(power_path)
        self.add(power)
        return power

    def __contains__(self, name: object) -> bool:
        return name in self._readers

    def __len__(self) -> int:
        return len(self._readers)

    def names(self) -> list[str]:
        return sorted(self._readers)

    def get(self, power_name: str) -> Power:
        return self._reader(power_name).power

    def _reader(self, power_name: str) -> SteeringReader:
        try:
            return self._readers[power_name]
        except KeyError:
            raise UnknownPowerError(power_name, known=self.names()) from None

    def read_steering(self, power_name: str, steering_file: str) -> str:
        return self._reader(power_name).read_steering(power_name, steering_file)

    readSteering = read_steering
