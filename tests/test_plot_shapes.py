import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from georand.data.gen_shapes import sample_multipolygon, save_shapes, shape_to_arrays
from georand.data.plot_shapes import plot_file, plot_shapes
from georand.params import GeoRandParameters


def test_plot_file(tmp_path):
    params = GeoRandParameters(max_polygons_count=5)
    shapes = shape_to_arrays(sample_multipolygon(np.random.default_rng(0), params))
    out_path = save_shapes(tmp_path / "plot.npz", shapes, params, seed=0)

    fig, ax = plot_file(out_path, show_vertices=True)
    # one outline per polygon plus the bounding box
    assert len(ax.lines) == len(shapes) + 1
    assert ax.get_title() == f"{len(shapes)} shape(s)"
    plt.close(fig)


def test_plot_point_and_empty():
    fig, ax = plt.subplots()
    plot_shapes(ax, [np.array([[1.0, 2.0]])], GeoRandParameters())
    assert len(ax.collections) == 1
    plot_shapes(ax, [], GeoRandParameters())
    plt.close(fig)
