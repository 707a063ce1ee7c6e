"""Random polygon and multipolygon generation for geometry test fixtures."""

from . import paths
from .data import gen_shapes
from .params import ConfigError, GeoRandParameters

__all__ = ["paths", "gen_shapes", "ConfigError", "GeoRandParameters"]
