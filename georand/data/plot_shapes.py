#!/usr/bin/env python3
"""
Visualize shapes saved by gen_shapes.py

Usage:
  python -m georand.data.plot_shapes shapes.npz
  python -m georand.data.plot_shapes shapes.npz --show_vertices --out shapes.png
"""

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from .. import paths
from ..params import GeoRandParameters
from .gen_shapes import load_shapes


def plot_shape(ax, xy, color="black", show_vertices=False):
    if len(xy) == 1:
        ax.scatter(xy[:, 0], xy[:, 1], s=12, color=color)
        return

    # Close the ring
    xy_closed = np.vstack([xy, xy[0]])
    ax.fill(xy_closed[:, 0], xy_closed[:, 1], color=color, alpha=0.25)
    ax.plot(xy_closed[:, 0], xy_closed[:, 1], color=color, linewidth=1.5)
    if show_vertices:
        ax.scatter(xy[:, 0], xy[:, 1], s=8, color="black")


def plot_shapes(ax, shapes, params: GeoRandParameters, show_vertices=False):
    colors = plt.cm.tab20(np.linspace(0.0, 1.0, max(len(shapes), 1)))
    for xy, color in zip(shapes, colors):
        plot_shape(ax, xy, color=color, show_vertices=show_vertices)

    # Bounding region
    min_x, min_y, max_x, max_y = params.bounds
    ax.plot(
        [min_x, max_x, max_x, min_x, min_x],
        [min_y, min_y, max_y, max_y, min_y],
        color="gray",
        linestyle="--",
        linewidth=1,
    )
    ax.set_aspect("equal")


def plot_file(file: str | Path, *, show_vertices: bool = False):
    """Plot shapes from a saved .npz file and return (fig, ax)."""
    shapes, params = load_shapes(paths.resolve_path(file, paths.RAW_DATA_DIR))

    fig, ax = plt.subplots(figsize=(6, 6))
    plot_shapes(ax, shapes, params, show_vertices=show_vertices)
    ax.set_title(f"{len(shapes)} shape(s)", fontsize=10)
    plt.tight_layout()
    return fig, ax


def main():
    p = argparse.ArgumentParser()
    p.add_argument(
        "file",
        type=str,
        help=".npz file from generator (if no path, load from data/raw/)",
    )
    p.add_argument("--show_vertices", action="store_true", help="mark polygon vertices")
    p.add_argument("--out", type=str, default=None, help="save the figure instead of showing it")
    args = p.parse_args()

    fig, _ = plot_file(args.file, show_vertices=args.show_vertices)
    if args.out:
        fig.savefig(args.out, dpi=150)
        print(f"Saved figure to {args.out}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
