"""
Tests for the demo polygon generators in `polyaxis/demo.py`.
"""

import os
import sys

# Ensure local package import (when running tests from repo)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import numpy as np
import pytest
import shapely.geometry as sgeom

from polyaxis import (
    SkeletonAlgorithm,
    create_regular_polygon,
    create_square,
    create_star,
    create_weld_seam,
    demo_polygons,
    save_demo_svgs,
)
from polyaxis.boundary import signed_area
from polyaxis.demo import polygon_svg


@pytest.mark.parametrize("name", sorted(demo_polygons()))
def test_demo_polygons_are_simple_and_ccw(name):
    P = demo_polygons()[name]
    assert P.ndim == 2 and P.shape[1] == 2
    assert len(P) >= 3
    assert signed_area(P) > 0
    assert sgeom.Polygon(P).is_valid


def test_generator_shapes():
    assert create_star(points=5).shape == (10, 2)
    assert create_regular_polygon(7).shape == (7, 2)
    assert create_weld_seam().shape == (60, 2)
    assert create_weld_seam(samples=25, fat=True).shape == (50, 2)
    np.testing.assert_allclose(
        np.linalg.norm(create_regular_polygon(5, radius=3.0), axis=1), 3.0
    )


@pytest.mark.parametrize(
    "call",
    [
        lambda: create_regular_polygon(2),
        lambda: create_star(points=1),
        lambda: create_star(inner_radius=12.0),
        lambda: create_weld_seam(samples=1),
    ],
)
def test_generators_reject_bad_parameters(call):
    with pytest.raises(ValueError):
        call()


def test_polygon_svg():
    svg = polygon_svg(create_square(), SkeletonAlgorithm.CHORDAL_AXIS)
    assert svg.startswith("<svg")
    assert svg.endswith("</svg>")
    assert svg.count("<line") == 2


def test_save_demo_svgs(tmp_path):
    out = save_demo_svgs(
        str(tmp_path),
        algorithms=(SkeletonAlgorithm.CHORDAL_AXIS, SkeletonAlgorithm.VORONOI),
        shapes={"square": create_square},
    )
    assert set(out) == {"square_chordal_axis", "square_voronoi"}
    for path in out.values():
        assert os.path.exists(path)
        with open(path, encoding="utf-8") as fh:
            assert "<polygon" in fh.read()
