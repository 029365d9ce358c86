"""Builder configuration loaded from JSON documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from .arena import DEFAULT_GROWTH_FACTOR, DEFAULT_INITIAL_CAPACITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuilderConfig:
    """Tunables for one building session.

    ``initial_capacity`` and ``growth_factor`` drive the arena's geometric
    growth.  Turning ``growable`` off makes the arena keep its reserved
    capacity and raise :class:`~shaderir.errors.CapacityError` on overflow.
    ``header`` controls the ``GLOBALS`` line in disassembly listings.
    """

    initial_capacity: int = DEFAULT_INITIAL_CAPACITY
    growth_factor: int = DEFAULT_GROWTH_FACTOR
    growable: bool = True
    header: bool = True

    def __post_init__(self) -> None:
        for name in ("initial_capacity", "growth_factor"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer")
        for name in ("growable", "header"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean")
        if self.initial_capacity < 0:
            raise ValueError("initial_capacity must be non-negative")
        if self.growth_factor < 2:
            raise ValueError("growth_factor must be at least 2")
        if not self.growable and self.initial_capacity == 0:
            raise ValueError("fixed-capacity pools need a positive initial_capacity")

    @classmethod
    def from_mapping(cls, entry: Mapping[str, Any]) -> "BuilderConfig":
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(entry) - known)
        if unknown:
            raise ValueError(f"unknown builder config keys: {', '.join(unknown)}")
        return cls(**dict(entry))

    @classmethod
    def load(cls, path: Path) -> "BuilderConfig":
        """Load a configuration from a JSON object stored at ``path``."""

        payload = json.loads(path.read_text("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("builder config file must contain a JSON object")
        config = cls.from_mapping(payload)
        logger.debug("loaded builder config from %s: %s", path, config)
        return config

    def to_json(self) -> Dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


__all__ = ["BuilderConfig"]
