"""Generation parameters and their YAML loading."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

import yaml

from . import paths


class ConfigError(ValueError):
    """Raised when generation parameters describe an empty sampling range."""


@dataclass(frozen=True)
class GeoRandParameters:
    """
    Bounds and budgets for one generation call.

    max_polygon_vertices_count is an exclusive upper bound, so it must be
    greater than 3. max_collisions_count=None turns off the intersection
    check entirely.
    """

    max_polygons_count: int = 60
    max_polygon_vertices_count: int = 7
    max_collisions_count: Optional[int] = 100
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 100.0
    max_y: float = 100.0

    def validate_region(self) -> "GeoRandParameters":
        if not self.min_x < self.max_x:
            raise ConfigError(f"empty x range: min_x={self.min_x} >= max_x={self.max_x}")
        if not self.min_y < self.max_y:
            raise ConfigError(f"empty y range: min_y={self.min_y} >= max_y={self.max_y}")
        return self

    def validate(self) -> "GeoRandParameters":
        self.validate_region()
        if self.max_polygon_vertices_count <= 3:
            raise ConfigError(
                "max_polygon_vertices_count must be > 3 "
                f"(vertex count is drawn from [3, {self.max_polygon_vertices_count}))"
            )
        if self.max_polygons_count < 0:
            raise ConfigError(f"max_polygons_count must be >= 0, got {self.max_polygons_count}")
        if self.max_collisions_count is not None and self.max_collisions_count < 0:
            raise ConfigError(f"max_collisions_count must be >= 0 or None, got {self.max_collisions_count}")
        return self

    @property
    def bounds(self):
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def with_overrides(self, **overrides: Any) -> "GeoRandParameters":
        """Copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown parameter(s): {', '.join(unknown)}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "GeoRandParameters":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ConfigError(f"Unknown parameter(s): {', '.join(unknown)}")

        defaults = cls()
        collisions = cfg.get("max_collisions_count", defaults.max_collisions_count)
        return cls(
            max_polygons_count=int(cfg.get("max_polygons_count", defaults.max_polygons_count)),
            max_polygon_vertices_count=int(
                cfg.get("max_polygon_vertices_count", defaults.max_polygon_vertices_count)
            ),
            max_collisions_count=None if collisions is None else int(collisions),
            min_x=float(cfg.get("min_x", defaults.min_x)),
            min_y=float(cfg.get("min_y", defaults.min_y)),
            max_x=float(cfg.get("max_x", defaults.max_x)),
            max_y=float(cfg.get("max_y", defaults.max_y)),
        )


def load_config(path: paths.PathLike) -> Dict[str, Any]:
    config_path = paths.resolve_path(path, paths.CONFIG_DIR)
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parameters_from_config(cfg: Mapping[str, Any]) -> GeoRandParameters:
    # Parameters may live under "params:" or at the top level next to "seed".
    if "params" in cfg:
        section = cfg["params"] or {}
    else:
        section = {k: v for k, v in cfg.items() if k != "seed"}
    return GeoRandParameters.from_dict(section)


def load_parameters(path: paths.PathLike) -> GeoRandParameters:
    return parameters_from_config(load_config(path))


def config_seed(cfg: Mapping[str, Any], default: int = 0) -> int:
    return int(cfg.get("seed", default))


__all__ = [
    "ConfigError",
    "GeoRandParameters",
    "config_seed",
    "load_config",
    "load_parameters",
    "parameters_from_config",
]
