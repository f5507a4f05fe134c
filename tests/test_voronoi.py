"""
Unit tests for the Voronoi medial axis approximation in `polyaxis/voronoi.py`.
"""

import logging
import os
import sys

# Ensure local package import (when running tests from repo)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import numpy as np
import pytest
import shapely.geometry as sgeom

import polyaxis.voronoi as voronoi_mod
from polyaxis import (
    create_hand,
    create_l_shape,
    create_rectangle,
    create_square,
    create_star,
    create_weld_seam,
)
from polyaxis.boundary import contains_points
from polyaxis.voronoi import voronoi_skeleton

# ---- Helpers ----------------------------------------------------------------


def _path_length(path: np.ndarray) -> float:
    return float(np.hypot(*np.diff(path, axis=0).T).sum())


# ---- Basic shapes -----------------------------------------------------------


def test_rectangle_axis_runs_along_the_middle():
    P = create_rectangle()
    skel = voronoi_skeleton(P)
    assert not skel.is_empty
    assert np.all(contains_points(P, skel.nodes, tol=1e-4))
    path = skel.longest_path()
    assert _path_length(path) > 8.0
    # most of the central ridge y = 5 is recovered from the samples
    on_ridge = [
        e
        for e in skel.edges
        if abs(e.start[1] - 5.0) < 1e-6 and abs(e.end[1] - 5.0) < 1e-6
    ]
    assert sum(e.length for e in on_ridge) > 8.0
    for e in on_ridge:
        assert 5.0 <= e.start[0] <= 15.0 and 5.0 <= e.end[0] <= 15.0


@pytest.mark.parametrize(
    "make",
    [create_square, create_l_shape, create_star, create_hand, create_weld_seam],
    ids=["square", "l_shape", "star", "hand", "weld_seam"],
)
def test_edges_lie_inside(make):
    P = make()
    skel = voronoi_skeleton(P)
    assert skel.edge_count >= 1
    poly = sgeom.Polygon(P).buffer(1e-4)
    for e in skel.edges:
        assert poly.covers(sgeom.LineString([e.start, e.end]))


# ---- Options ----------------------------------------------------------------


def test_clip_modes_are_nested():
    P = create_l_shape()
    seg = voronoi_skeleton(P, clip="segment", prune_factor=0.0)
    ends = voronoi_skeleton(P, clip="endpoints", prune_factor=0.0)
    mid = voronoi_skeleton(P, clip="midpoint", prune_factor=0.0)
    assert seg.edge_count <= ends.edge_count <= mid.edge_count
    assert np.all(contains_points(P, mid.midpoints(), tol=1e-4))


def test_pruning_removes_spurs():
    P = create_hand()
    raw = voronoi_skeleton(P, prune_factor=0.0)
    pruned = voronoi_skeleton(P)
    assert 0 < pruned.edge_count <= raw.edge_count
    assert pruned.total_length <= raw.total_length


def test_explicit_spacing():
    P = create_square()
    coarse = voronoi_skeleton(P, spacing=5.0, prune_factor=0.0)
    fine = voronoi_skeleton(P, spacing=0.5, prune_factor=0.0)
    assert not coarse.is_empty
    assert fine.edge_count >= coarse.edge_count


@pytest.mark.parametrize(
    "kwargs",
    [
        {"clip": "everything"},
        {"spacing": 0.0},
        {"spacing_factor": -1.0},
        {"prune_factor": -0.5},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        voronoi_skeleton(create_square(), **kwargs)


# ---- Failure handling -------------------------------------------------------


def test_degenerate_input():
    assert voronoi_skeleton([]).is_empty
    assert voronoi_skeleton([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]).is_empty


def test_triangulation_failure_gives_empty_skeleton(monkeypatch, caplog):
    def boom(points):
        raise ValueError("flat input")

    monkeypatch.setattr(voronoi_mod, "delaunay_triangulation", boom)
    with caplog.at_level(logging.WARNING, logger="polyaxis.voronoi"):
        skel = voronoi_skeleton(create_square())
    assert skel.is_empty
    assert "flat input" in caplog.text
