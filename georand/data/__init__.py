"""Shape generation and visualization utilities."""

from .contour import points_to_contour
from .gen_shapes import (
    GenerationState,
    ShapeKind,
    generate,
    sample_multipolygon,
    sample_multipolygon_with_stats,
    sample_point,
    sample_polygon,
)

__all__ = [
    "GenerationState",
    "ShapeKind",
    "generate",
    "points_to_contour",
    "sample_multipolygon",
    "sample_multipolygon_with_stats",
    "sample_point",
    "sample_polygon",
]
