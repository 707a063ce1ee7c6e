#!/usr/bin/env python3
"""
Random shape generator for geometry test fixtures.
- Points drawn uniformly inside the bounding region
- Polygons built from 3..max_polygon_vertices_count-1 random vertices in a
  random sub-box, then moved to a random spot inside the region
- Multipolygons assembled from polygons that do not intersect each other,
  bounded by a global collision budget

Every draw goes through the caller's numpy Generator in a fixed order
(box x1, y1, x2, y2 -> vertex count -> vertex x, y pairs -> offset x, y),
so one seed always reproduces the same shapes.

Usage:
  python -m georand.data.gen_shapes --seed 0 --out shapes.npz
  python -m georand.data.gen_shapes --config default.yaml --max_polygons_count 20 --out small.npz
  python -m georand.data.gen_shapes --kind polygon --max_polygon_vertices_count 12 --out one.npz
  python -m georand.data.gen_shapes --no_collisions --out overlapping.npz

Or import and use sample_point() / sample_polygon() / sample_multipolygon() / generate().
"""

from __future__ import annotations

import argparse
import dataclasses
import enum
import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .. import geometry, paths
from ..geometry import MultiPolygon, Point, Polygon
from ..params import ConfigError, GeoRandParameters, config_seed, load_config, parameters_from_config
from .contour import points_to_contour

logger = logging.getLogger(__name__)

Shape = Union[Point, Polygon, MultiPolygon]

# ----------------------------
# Points
# ----------------------------

def _draw_xy(rng: np.random.Generator, min_x: float, min_y: float, max_x: float, max_y: float) -> np.ndarray:
    # Two draws, x first.
    x = rng.uniform(min_x, max_x)
    y = rng.uniform(min_y, max_y)
    return np.array([x, y], dtype=np.float64)


def sample_point(rng: np.random.Generator, params: GeoRandParameters) -> Point:
    """One point uniform in [min_x, max_x) x [min_y, max_y)."""
    params.validate_region()
    x, y = _draw_xy(rng, *params.bounds)
    return geometry.make_point(x, y)


# ----------------------------
# Polygons
# ----------------------------

def _draw_box(rng: np.random.Generator, params: GeoRandParameters) -> Tuple[float, float, float, float]:
    x1 = rng.uniform(params.min_x, params.max_x)
    y1 = rng.uniform(params.min_y, params.max_y)
    x2 = rng.uniform(params.min_x, params.max_x)
    y2 = rng.uniform(params.min_y, params.max_y)
    return min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)


def _make_polygon(rng: np.random.Generator, params: GeoRandParameters) -> Polygon:
    box = _draw_box(rng, params)
    box_min_x, box_min_y, box_max_x, box_max_y = box
    vertices_count = int(rng.integers(3, params.max_polygon_vertices_count))

    points = np.empty((vertices_count, 2), dtype=np.float64)
    for i in range(vertices_count):
        points[i] = _draw_xy(rng, *box)

    ring = points_to_contour(points)
    if ring is None:
        raise RuntimeError("Contour construction produced no ring from a non-empty vertex set.")

    # Any offset in these ranges keeps the sub-box inside the region.
    dx = rng.uniform(params.min_x - box_min_x, params.max_x - box_max_x)
    dy = rng.uniform(params.min_y - box_min_y, params.max_y - box_max_y)

    return geometry.translate_polygon(geometry.make_polygon(ring), dx, dy)


def sample_polygon(rng: np.random.Generator, params: GeoRandParameters) -> Polygon:
    """
    One polygon inside the region, with 3 <= vertices < max_polygon_vertices_count.
    Holes are always empty. The ring is not guaranteed to be simple.
    """
    params.validate()
    return _make_polygon(rng, params)


# ----------------------------
# Multipolygons
# ----------------------------

class GenerationState(enum.Enum):
    # Non-terminal; never returned.
    ACCUMULATING = "accumulating"
    TARGET_REACHED = "target_reached"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclasses.dataclass
class MultiPolygonResult:
    multipolygon: MultiPolygon
    state: GenerationState
    collisions: int

    @property
    def polygons(self) -> List[Polygon]:
        return geometry.multipolygon_members(self.multipolygon)


def _budget_left(params: GeoRandParameters, collisions: int) -> bool:
    return params.max_collisions_count is None or collisions < params.max_collisions_count


def sample_multipolygon_with_stats(rng: np.random.Generator, params: GeoRandParameters) -> MultiPolygonResult:
    """
    Accumulate polygons until max_polygons_count are accepted or the collision
    budget runs out. A candidate touching any accepted polygon is discarded and
    counts one collision. With max_collisions_count=None nothing is checked and
    overlaps are kept.
    """
    params.validate()
    polygons: List[Polygon] = []
    collisions = 0
    check = params.max_collisions_count is not None

    while _budget_left(params, collisions) and len(polygons) < params.max_polygons_count:
        candidate = _make_polygon(rng, params)

        if check and any(geometry.polygons_intersect(candidate, accepted) for accepted in polygons):
            collisions += 1
            logger.debug("Rejected candidate %d (collision %d/%s)", len(polygons), collisions, params.max_collisions_count)
            continue

        polygons.append(candidate)

    if len(polygons) >= params.max_polygons_count:
        state = GenerationState.TARGET_REACHED
    else:
        state = GenerationState.BUDGET_EXHAUSTED
        logger.info(
            "Collision budget exhausted after %d collisions: %d/%d polygons accepted",
            collisions,
            len(polygons),
            params.max_polygons_count,
        )
    logger.info("Generated %d polygons (%s, %d collisions)", len(polygons), state.value, collisions)

    return MultiPolygonResult(geometry.make_multipolygon(polygons), state, collisions)


def sample_multipolygon(rng: np.random.Generator, params: GeoRandParameters) -> MultiPolygon:
    return sample_multipolygon_with_stats(rng, params).multipolygon


# ----------------------------
# Dispatch
# ----------------------------

class ShapeKind(str, enum.Enum):
    POINT = "point"
    POLYGON = "polygon"
    MULTIPOLYGON = "multipolygon"


_GENERATORS = {
    ShapeKind.POINT: sample_point,
    ShapeKind.POLYGON: sample_polygon,
    ShapeKind.MULTIPOLYGON: sample_multipolygon,
}


def generate(kind: Union[ShapeKind, str], rng: np.random.Generator, params: Optional[GeoRandParameters] = None) -> Shape:
    try:
        kind = ShapeKind(kind)
    except ValueError:
        raise ValueError(f"Unknown shape kind: {kind!r}") from None
    return _GENERATORS[kind](rng, params if params is not None else GeoRandParameters())


# ----------------------------
# Persistence
# ----------------------------

def shape_to_arrays(shape: Shape) -> List[np.ndarray]:
    """Vertex arrays (n, 2) for every part of a shape; a point is one (1, 2) array."""
    if isinstance(shape, Point):
        return [geometry.point_xy(shape)[None, :]]
    if isinstance(shape, Polygon):
        return [geometry.polygon_vertices(shape)]
    if isinstance(shape, MultiPolygon):
        return [geometry.polygon_vertices(p) for p in geometry.multipolygon_members(shape)]
    raise TypeError(f"Unsupported shape type: {type(shape).__name__}")


def save_shapes(
    path: paths.PathLike,
    shapes: Sequence[np.ndarray],
    params: GeoRandParameters,
    seed: int,
    kind: Union[ShapeKind, str] = ShapeKind.MULTIPOLYGON,
):
    """Write ragged vertex arrays as flat coords plus offsets; returns the resolved path."""
    out_path = paths.resolve_path(path, paths.RAW_DATA_DIR)
    paths.ensure_dir(out_path.parent)

    lengths = [len(s) for s in shapes]
    offsets = np.concatenate([[0], np.cumsum(lengths)]).astype(np.int64)
    coords = np.concatenate(shapes, axis=0) if shapes else np.empty((0, 2), dtype=np.float64)

    collisions = params.max_collisions_count
    np.savez_compressed(
        out_path,
        coords=coords.astype(np.float64),
        offsets=offsets,
        seed=np.int64(seed),
        kind=np.array(ShapeKind(kind).value),
        max_polygons_count=np.int64(params.max_polygons_count),
        max_polygon_vertices_count=np.int64(params.max_polygon_vertices_count),
        # -1 stands for "no budget"
        max_collisions_count=np.int64(-1 if collisions is None else collisions),
        bounds=np.array(params.bounds, dtype=np.float64),
    )
    return out_path


def load_shapes(path: paths.PathLike) -> Tuple[List[np.ndarray], GeoRandParameters]:
    file_path = paths.resolve_path(path, paths.RAW_DATA_DIR)
    with np.load(file_path) as data:
        coords = data["coords"]
        offsets = data["offsets"]
        collisions = int(data["max_collisions_count"])
        min_x, min_y, max_x, max_y = (float(v) for v in data["bounds"])
        params = GeoRandParameters(
            max_polygons_count=int(data["max_polygons_count"]),
            max_polygon_vertices_count=int(data["max_polygon_vertices_count"]),
            max_collisions_count=None if collisions < 0 else collisions,
            min_x=min_x,
            min_y=min_y,
            max_x=max_x,
            max_y=max_y,
        )
    shapes = [coords[offsets[i]:offsets[i + 1]] for i in range(len(offsets) - 1)]
    return shapes, params


# ----------------------------
# CLI
# ----------------------------

def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--config", type=str, default=None, help="YAML config (if no path, load from configs/)")
    p.add_argument("--seed", type=int, default=None, help="rng seed (overrides config)")
    p.add_argument("--kind", type=str, default=ShapeKind.MULTIPOLYGON.value, choices=[k.value for k in ShapeKind])
    p.add_argument(
        "--out",
        type=str,
        required=True,
        help="output .npz file (if no path, saves to data/raw/)",
    )
    p.add_argument("--max_polygons_count", type=int, default=None)
    p.add_argument("--max_polygon_vertices_count", type=int, default=None, help="exclusive upper bound, must be > 3")
    p.add_argument("--max_collisions_count", type=int, default=None)
    p.add_argument("--no_collisions", action="store_true", help="skip intersection checks (polygons may overlap)")
    p.add_argument("--min_x", type=float, default=None)
    p.add_argument("--min_y", type=float, default=None)
    p.add_argument("--max_x", type=float, default=None)
    p.add_argument("--max_y", type=float, default=None)
    p.add_argument("--log_level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args()

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg = load_config(args.config) if args.config else {}
    params = parameters_from_config(cfg).with_overrides(
        max_polygons_count=args.max_polygons_count,
        max_polygon_vertices_count=args.max_polygon_vertices_count,
        max_collisions_count=args.max_collisions_count,
        min_x=args.min_x,
        min_y=args.min_y,
        max_x=args.max_x,
        max_y=args.max_y,
    )
    if args.no_collisions:
        params = dataclasses.replace(params, max_collisions_count=None)
    seed = args.seed if args.seed is not None else config_seed(cfg)

    try:
        if args.kind == ShapeKind.POINT.value:
            params.validate_region()
        else:
            params.validate()
    except ConfigError as e:
        p.error(str(e))

    rng = np.random.default_rng(seed)
    shape = generate(args.kind, rng, params)
    shapes = shape_to_arrays(shape)

    out_path = save_shapes(args.out, shapes, params, seed, kind=args.kind)

    n_vertices = [len(s) for s in shapes]
    print(f"Saved {len(shapes)} {args.kind} part(s) to {out_path}")
    print(f"seed: {seed}  vertices per part: [{min(n_vertices)}, {max(n_vertices)}]" if shapes else f"seed: {seed}  (empty)")


if __name__ == "__main__":
    main()
