import sys

import numpy as np
import pytest

from georand.data import gen_shapes
from georand.data.contour import points_to_contour
from georand.data.gen_shapes import (
    GenerationState,
    ShapeKind,
    generate,
    load_shapes,
    sample_multipolygon,
    sample_multipolygon_with_stats,
    sample_point,
    sample_polygon,
    save_shapes,
    shape_to_arrays,
)
from georand.geometry import MultiPolygon, Point, Polygon, polygon_ring, polygon_vertices, polygons_intersect
from georand.params import ConfigError, GeoRandParameters

EPS = 1e-9


def _in_bounds(xy, params):
    return (
        np.all(xy[:, 0] >= params.min_x - EPS)
        and np.all(xy[:, 0] <= params.max_x + EPS)
        and np.all(xy[:, 1] >= params.min_y - EPS)
        and np.all(xy[:, 1] <= params.max_y + EPS)
    )


def test_sample_point_draws_x_then_y():
    params = GeoRandParameters(min_x=-5.0, max_x=5.0, min_y=10.0, max_y=20.0)
    point = sample_point(np.random.default_rng(3), params)

    ref = np.random.default_rng(3)
    assert point.x == ref.uniform(-5.0, 5.0)
    assert point.y == ref.uniform(10.0, 20.0)
    assert -5.0 <= point.x < 5.0
    assert 10.0 <= point.y < 20.0


def test_sample_point_ignores_polygon_settings():
    params = GeoRandParameters(max_polygon_vertices_count=3, max_polygons_count=-1)
    point = sample_point(np.random.default_rng(0), params)
    assert 0.0 <= point.x < 100.0
    assert 0.0 <= point.y < 100.0


def test_sample_polygon_follows_draw_order():
    params = GeoRandParameters(max_polygon_vertices_count=9, min_x=-10.0, max_x=30.0, min_y=5.0, max_y=25.0)
    polygon = sample_polygon(np.random.default_rng(11), params)

    ref = np.random.default_rng(11)
    x1 = ref.uniform(params.min_x, params.max_x)
    y1 = ref.uniform(params.min_y, params.max_y)
    x2 = ref.uniform(params.min_x, params.max_x)
    y2 = ref.uniform(params.min_y, params.max_y)
    bx0, bx1 = min(x1, x2), max(x1, x2)
    by0, by1 = min(y1, y2), max(y1, y2)
    n = int(ref.integers(3, params.max_polygon_vertices_count))
    pts = np.array([(ref.uniform(bx0, bx1), ref.uniform(by0, by1)) for _ in range(n)])
    dx = ref.uniform(params.min_x - bx0, params.max_x - bx1)
    dy = ref.uniform(params.min_y - by0, params.max_y - by1)

    expected = points_to_contour(pts) + np.array([dx, dy])
    assert np.allclose(polygon_ring(polygon), expected)


def test_sample_polygon_invariants():
    params = GeoRandParameters(max_polygon_vertices_count=8, min_x=-3.0, max_x=4.0, min_y=100.0, max_y=400.0)
    rng = np.random.default_rng(0)
    counts = set()
    for _ in range(200):
        polygon = sample_polygon(rng, params)
        xy = polygon_vertices(polygon)
        counts.add(len(xy))
        assert 3 <= len(xy) < params.max_polygon_vertices_count
        assert len(polygon.interiors) == 0
        assert np.array_equal(polygon_ring(polygon)[0], polygon_ring(polygon)[-1])
        assert _in_bounds(xy, params)
    assert counts == {3, 4, 5, 6, 7}


@pytest.mark.parametrize(
    "params, generators",
    [
        (GeoRandParameters(max_polygon_vertices_count=3), (sample_polygon, sample_multipolygon)),
        (GeoRandParameters(min_x=10.0, max_x=10.0), (sample_point, sample_polygon, sample_multipolygon)),
        (GeoRandParameters(min_y=1.0, max_y=0.0), (sample_point, sample_polygon, sample_multipolygon)),
    ],
)
def test_config_errors_consume_no_randomness(params, generators):
    rng = np.random.default_rng(5)
    state = rng.bit_generator.state
    for fn in generators:
        with pytest.raises(ConfigError):
            fn(rng, params)
    assert rng.bit_generator.state == state


def test_multipolygon_without_budget_hits_target():
    params = GeoRandParameters(max_polygons_count=25, max_collisions_count=None, max_x=10.0, max_y=10.0)
    result = sample_multipolygon_with_stats(np.random.default_rng(1), params)
    assert isinstance(result.multipolygon, MultiPolygon)
    assert len(result.polygons) == 25
    assert result.state is GenerationState.TARGET_REACHED
    assert result.collisions == 0
    # Crowded region: some members overlap when nothing is checked.
    polys = result.polygons
    assert any(polygons_intersect(a, b) for i, a in enumerate(polys) for b in polys[i + 1:])


def test_multipolygon_members_do_not_intersect():
    params = GeoRandParameters(max_polygons_count=15, max_collisions_count=200)
    result = sample_multipolygon_with_stats(np.random.default_rng(2), params)
    polys = result.polygons
    assert 0 < len(polys) <= params.max_polygons_count
    assert result.collisions <= params.max_collisions_count
    for i, a in enumerate(polys):
        assert _in_bounds(polygon_vertices(a), params)
        for b in polys[i + 1:]:
            assert not polygons_intersect(a, b)


def test_budget_exhaustion_returns_partial_result():
    params = GeoRandParameters(max_polygons_count=500, max_collisions_count=3, max_x=10.0, max_y=10.0)
    result = sample_multipolygon_with_stats(np.random.default_rng(4), params)
    assert result.state is GenerationState.BUDGET_EXHAUSTED
    assert result.collisions == 3
    assert 1 <= len(result.polygons) < 500


def test_zero_budget_stops_before_any_candidate():
    params = GeoRandParameters(max_polygons_count=5, max_collisions_count=0)
    rng = np.random.default_rng(9)
    state = rng.bit_generator.state
    result = sample_multipolygon_with_stats(rng, params)
    assert result.state is GenerationState.BUDGET_EXHAUSTED
    assert len(result.polygons) == 0
    assert rng.bit_generator.state == state


def test_zero_target():
    result = sample_multipolygon_with_stats(np.random.default_rng(0), GeoRandParameters(max_polygons_count=0))
    assert result.state is GenerationState.TARGET_REACHED
    assert len(result.polygons) == 0


def test_same_seed_same_shapes():
    params = GeoRandParameters(max_polygons_count=10)
    a = shape_to_arrays(sample_multipolygon(np.random.default_rng(123), params))
    b = shape_to_arrays(sample_multipolygon(np.random.default_rng(123), params))
    assert len(a) == len(b)
    for xa, xb in zip(a, b):
        assert np.array_equal(xa, xb)


def test_generate_dispatch():
    params = GeoRandParameters(max_polygons_count=3)
    assert isinstance(generate("point", np.random.default_rng(0), params), Point)
    assert isinstance(generate(ShapeKind.POLYGON, np.random.default_rng(0), params), Polygon)
    assert isinstance(generate("multipolygon", np.random.default_rng(0), params), MultiPolygon)
    assert isinstance(generate(ShapeKind.POINT, np.random.default_rng(0)), Point)

    # Same draws as calling the generator directly.
    direct = sample_polygon(np.random.default_rng(8), params)
    via_kind = generate("polygon", np.random.default_rng(8), params)
    assert np.array_equal(polygon_ring(direct), polygon_ring(via_kind))

    with pytest.raises(ValueError):
        generate("linestring", np.random.default_rng(0), params)


def test_shape_to_arrays():
    params = GeoRandParameters()
    (pt,) = shape_to_arrays(sample_point(np.random.default_rng(0), params))
    assert pt.shape == (1, 2)
    (poly,) = shape_to_arrays(sample_polygon(np.random.default_rng(0), params))
    assert poly.ndim == 2 and poly.shape[1] == 2
    with pytest.raises(TypeError):
        shape_to_arrays([(0.0, 0.0)])


def test_save_and_load(tmp_path):
    params = GeoRandParameters(max_polygons_count=6, max_collisions_count=None, max_x=50.0)
    shapes = shape_to_arrays(sample_multipolygon(np.random.default_rng(6), params))

    out_path = save_shapes(tmp_path / "shapes.npz", shapes, params, seed=6)
    loaded, loaded_params = load_shapes(out_path)

    assert loaded_params == params
    assert len(loaded) == len(shapes)
    for a, b in zip(shapes, loaded):
        assert np.array_equal(a, b)


def test_save_empty(tmp_path):
    params = GeoRandParameters(max_collisions_count=0)
    out_path = save_shapes(tmp_path / "empty.npz", [], params, seed=0)
    loaded, loaded_params = load_shapes(out_path)
    assert loaded == []
    assert loaded_params.max_collisions_count == 0


def test_cli(tmp_path, monkeypatch, capsys):
    out_path = tmp_path / "cli.npz"
    argv = [
        "gen_shapes",
        "--seed", "3",
        "--out", str(out_path),
        "--max_polygons_count", "4",
        "--no_collisions",
        "--max_x", "20",
        "--max_y", "20",
    ]
    monkeypatch.setattr(sys, "argv", argv)
    gen_shapes.main()

    shapes, params = load_shapes(out_path)
    assert len(shapes) == 4
    assert params.max_collisions_count is None
    assert params.bounds == (0.0, 0.0, 20.0, 20.0)
    assert "Saved 4 multipolygon part(s)" in capsys.readouterr().out

    expected = shape_to_arrays(sample_multipolygon(np.random.default_rng(3), params))
    for a, b in zip(expected, shapes):
        assert np.array_equal(a, b)


def test_cli_rejects_bad_config(tmp_path, monkeypatch):
    argv = ["gen_shapes", "--out", str(tmp_path / "x.npz"), "--max_polygon_vertices_count", "3"]
    monkeypatch.setattr(sys, "argv", argv)
    with pytest.raises(SystemExit):
        gen_shapes.main()


def test_terminal_states_only():
    params = GeoRandParameters(max_polygons_count=8, max_collisions_count=2, max_x=10.0, max_y=10.0)
    for seed in range(5):
        result = sample_multipolygon_with_stats(np.random.default_rng(seed), params)
        assert result.state is not GenerationState.ACCUMULATING
        assert result.state in (GenerationState.TARGET_REACHED, GenerationState.BUDGET_EXHAUSTED)


def test_save_creates_missing_directories(tmp_path):
    params = GeoRandParameters(max_polygons_count=2, max_collisions_count=None)
    shapes = shape_to_arrays(sample_multipolygon(np.random.default_rng(0), params))
    out_path = save_shapes(tmp_path / "nested" / "deeper" / "shapes.npz", shapes, params, seed=0)
    assert out_path.exists()
    loaded, _ = load_shapes(out_path)
    assert len(loaded) == 2


def test_cli_point_with_small_vertex_bound(tmp_path, monkeypatch):
    out_path = tmp_path / "point.npz"
    argv = ["gen_shapes", "--kind", "point", "--out", str(out_path), "--max_polygon_vertices_count", "3"]
    monkeypatch.setattr(sys, "argv", argv)
    gen_shapes.main()
    shapes, _ = load_shapes(out_path)
    assert len(shapes) == 1
    assert shapes[0].shape == (1, 2)
