"""
Turn an unordered point set into a closed polygon ring.

The ring is built by a two-chain split rather than a hull: take the
leftmost and rightmost points, split the rest by which side of the
leftmost->rightmost segment they fall on, then walk the upper chain
left to right and the lower chain right to left.

Known limitation: both chains are ordered by x only. Points with equal or
nearly equal x but different y are not disambiguated, so clustered inputs
can yield a self-intersecting ring. Callers that need a simple polygon
must check it (see georand.geometry.is_simple).
"""

from __future__ import annotations

from typing import Optional

import numpy as np


def left_turn_test(direction: np.ndarray, offsets: np.ndarray) -> np.ndarray:
    """
    Sign test on the 2-D cross product direction x offset.

    offsets may be a single vector (2,) or a stack (m, 2). A zero cross
    product (collinear) counts as a left turn.
    """
    direction = np.asarray(direction)
    offsets = np.asarray(offsets)
    cross = direction[0] * offsets[..., 1] - direction[1] * offsets[..., 0]
    return cross >= 0


def extreme_points(points: np.ndarray):
    """
    Indices of the leftmost and rightmost points.

    Leftmost is the first point with the smallest x. Rightmost is the last
    point with the largest x.
    """
    x = points[:, 0]
    left_idx = int(np.argmin(x))
    right_idx = len(x) - 1 - int(np.argmax(x[::-1]))
    return left_idx, right_idx


def points_to_contour(points) -> Optional[np.ndarray]:
    """
    Closed ring leftmost -> upper chain -> rightmost -> lower chain -> leftmost.

    Returns an (n + 1, 2) array with the input dtype, or None when no point
    is given. Points equal in value to the chosen leftmost or rightmost
    point are dropped from both chains.
    """
    pts = np.asarray(points)
    if pts.size == 0:
        return None
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected points of shape (n, 2), got {pts.shape}")

    left_idx, right_idx = extreme_points(pts)
    left_most = pts[left_idx]
    right_most = pts[right_idx]
    if left_idx == right_idx:
        return np.stack([left_most, left_most])

    keep = ~(np.all(pts == left_most, axis=1) | np.all(pts == right_most, axis=1))
    rest = pts[keep]

    # Small or unsigned integer types would wrap in the cross product.
    wide = np.result_type(pts.dtype, np.int64)
    origin = left_most.astype(wide)
    above_mask = left_turn_test(right_most.astype(wide) - origin, rest.astype(wide) - origin)

    above = rest[above_mask]
    below = rest[~above_mask]

    # Stable sorts: equal x keeps input order in both chains.
    above = above[np.argsort(above[:, 0], kind="stable")]
    # Descending x, ties in input order.
    below_order = len(below) - 1 - np.argsort(below[::-1, 0], kind="stable")[::-1]
    below = below[below_order]

    return np.concatenate(
        [left_most[None, :], above, right_most[None, :], below, left_most[None, :]],
        axis=0,
    )


__all__ = ["extreme_points", "left_turn_test", "points_to_contour"]
