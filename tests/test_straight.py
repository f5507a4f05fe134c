"""
Unit tests for the straight skeleton in `polyaxis/straight.py`.

Covers:
- Convex shapes with known skeletons (square, rectangle, triangle, hexagon)
- Reflex shapes (L, T, arrow, star)
- Rectilinear shapes with simultaneous collisions (comb, plus, staircase)
- Leaf/core split against the original polygon vertices
- Degenerate input and the event cap
"""

import os
import sys

# Ensure local package import (when running tests from repo)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import networkx as nx
import numpy as np
import pytest

from polyaxis import (
    create_arrow,
    create_l_shape,
    create_rectangle,
    create_regular_polygon,
    create_square,
    create_star,
    create_t_shape,
    create_triangle,
)
from polyaxis.boundary import contains_points
from polyaxis.straight import split_leaf_edges, straight_skeleton

# ---- Helpers ----------------------------------------------------------------


def _has_node(skel, p, atol=1e-6) -> bool:
    return bool(np.any(np.all(np.abs(skel.nodes - np.asarray(p)) <= atol, axis=1)))


def _sorted_rows(A: np.ndarray) -> np.ndarray:
    A = np.round(np.asarray(A, dtype=float), 6)
    return A[np.lexsort((A[:, 1], A[:, 0]))]


# ---- Convex shapes ----------------------------------------------------------


def test_square_meets_in_center():
    skel = straight_skeleton(create_square())
    assert skel.node_count == 5
    assert skel.edge_count == 4
    assert _has_node(skel, (5.0, 5.0))
    for e in skel.edges:
        assert e.length == pytest.approx(np.hypot(5.0, 5.0))


def test_rectangle_has_central_ridge():
    skel = straight_skeleton(create_rectangle())
    assert skel.node_count == 6
    assert skel.edge_count == 5
    assert _has_node(skel, (5.0, 5.0))
    assert _has_node(skel, (15.0, 5.0))
    core, leaves = split_leaf_edges(skel, create_rectangle())
    assert len(leaves) == 4
    assert len(core) == 1
    assert core.edges[0].length == pytest.approx(10.0)
    assert core.edges[0].middle == pytest.approx((10.0, 5.0))
    assert leaves.node_count == 6


def test_triangle_meets_at_incenter():
    P = create_triangle()
    skel = straight_skeleton(P)
    assert skel.node_count == 4
    assert skel.edge_count == 3
    a = np.hypot(*(P[1] - P[2]))
    b = np.hypot(*(P[2] - P[0]))
    c = np.hypot(*(P[0] - P[1]))
    incenter = (a * P[0] + b * P[1] + c * P[2]) / (a + b + c)
    assert _has_node(skel, incenter, atol=1e-6)


def test_regular_hexagon_is_a_star_of_spokes():
    skel = straight_skeleton(create_regular_polygon(6, radius=10.0))
    assert skel.node_count == 7
    assert skel.edge_count == 6
    assert _has_node(skel, (0.0, 0.0), atol=1e-5)


# ---- Reflex shapes ----------------------------------------------------------


@pytest.mark.parametrize(
    "make",
    [create_l_shape, create_t_shape, create_arrow, create_star],
    ids=["l_shape", "t_shape", "arrow", "star"],
)
def test_reflex_shapes_stay_inside(make):
    P = make()
    skel = straight_skeleton(P)
    n = len(P)
    assert skel.node_count >= n + 1
    assert skel.edge_count >= n
    assert np.all(contains_points(P, skel.nodes, tol=1e-6))
    assert np.all(contains_points(P, skel.midpoints(), tol=1e-6))
    # Skeleton of a simple polygon is a connected tree
    G = skel.to_networkx()
    assert G.number_of_edges() == G.number_of_nodes() - 1


@pytest.mark.parametrize(
    "make",
    [create_l_shape, create_t_shape, create_arrow],
    ids=["l_shape", "t_shape", "arrow"],
)
def test_one_spoke_per_vertex(make):
    P = make()
    skel = straight_skeleton(P)
    core, leaves = split_leaf_edges(skel, P)
    assert len(leaves) == len(P)
    assert len(core) == skel.edge_count - len(P)
    assert core.total_length + leaves.total_length == pytest.approx(skel.total_length)
    for v in P:
        assert _has_node(skel, v)


def test_l_shape_reflex_spoke_runs_diagonally():
    skel = straight_skeleton(create_l_shape())
    # the reflex corner (10, 10) runs along the diagonal to (5, 5)
    spokes = [
        e
        for e in skel.edges
        if np.allclose(e.start, (10, 10)) or np.allclose(e.end, (10, 10))
    ]
    assert len(spokes) == 1
    d = np.abs(spokes[0].direction)
    np.testing.assert_allclose(d, [np.sqrt(0.5), np.sqrt(0.5)], atol=1e-6)
    assert spokes[0].middle == pytest.approx((7.5, 7.5))


def test_l_shape_ridges():
    skel = straight_skeleton(create_l_shape())
    assert skel.node_count == 9
    assert skel.edge_count == 8
    for p in [(5.0, 5.0), (15.0, 5.0), (5.0, 15.0)]:
        assert _has_node(skel, p)
    core, _ = split_leaf_edges(skel, create_l_shape())
    assert sorted(round(e.length, 6) for e in core) == [10.0, 10.0]


def test_orientation_does_not_matter():
    P = create_t_shape()
    a = straight_skeleton(P)
    b = straight_skeleton(P[::-1])
    assert a.edge_count == b.edge_count
    np.testing.assert_allclose(_sorted_rows(a.nodes), _sorted_rows(b.nodes), atol=1e-5)


# ---- Degenerate input -------------------------------------------------------


@pytest.mark.parametrize(
    "pts",
    [[], [(0.0, 0.0), (1.0, 0.0)], [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]],
)
def test_degenerate_polygons_give_empty_skeleton(pts):
    skel = straight_skeleton(pts)
    assert skel.is_empty
    assert skel.node_count == 0
    assert skel.edge_count == 0


def test_event_cap_warns():
    P = create_l_shape()
    with pytest.warns(RuntimeWarning):
        skel = straight_skeleton(P, max_events=1)
    # one popped entry may cascade through a whole group of collisions
    assert skel.edge_count <= straight_skeleton(P).edge_count
    assert np.all(contains_points(P, skel.nodes, tol=1e-6))


def test_split_leaf_edges_of_empty_skeleton():
    core, leaves = split_leaf_edges(straight_skeleton([]), create_square())
    assert core.is_empty and leaves.is_empty


# ---- Rectilinear shapes -----------------------------------------------------
# Several corners and edges collide at the same instant in these polygons.

RECTILINEAR = {
    "notched_bar": [
        (0, 4), (1, 4), (1, 5), (4, 5), (4, 6),
        (9, 6), (9, 3), (8, 3), (8, 2), (0, 2),
    ],
    "hook": [
        (7, 2), (4, 2), (4, 4), (2, 4), (2, 8), (3, 8),
        (3, 9), (7, 9), (7, 6), (5, 6), (5, 4), (7, 4),
    ],
    "comb": [
        (0, 0), (10, 0), (10, 6), (8, 6), (8, 2), (6, 2),
        (6, 6), (4, 6), (4, 2), (2, 2), (2, 6), (0, 6),
    ],
    "plus": [
        (1, -1), (3, -1), (3, 1), (1, 1), (1, 3), (-1, 3),
        (-1, 1), (-3, 1), (-3, -1), (-1, -1), (-1, -3), (1, -3),
    ],
    "staircase": [(0, 0), (6, 0), (6, 2), (4, 2), (4, 4), (2, 4), (2, 6), (0, 6)],
}


@pytest.mark.parametrize("name", sorted(RECTILINEAR))
def test_rectilinear_skeleton_is_an_inner_tree(name):
    P = np.array(RECTILINEAR[name], dtype=float)
    skel = straight_skeleton(P)
    assert np.all(contains_points(P, skel.nodes, tol=1e-6))
    assert np.all(contains_points(P, skel.midpoints(), tol=1e-6))
    assert nx.is_tree(skel.to_networkx())
    for v in P:
        assert _has_node(skel, v)


@pytest.mark.parametrize(
    "name, nodes, edges",
    [("notched_bar", 17, 16), ("hook", 21, 20), ("comb", 18, 17), ("plus", 17, 16)],
)
def test_rectilinear_counts(name, nodes, edges):
    skel = straight_skeleton(RECTILINEAR[name])
    assert skel.node_count == nodes
    assert skel.edge_count == edges


def test_notched_bar_collisions():
    skel = straight_skeleton(RECTILINEAR["notched_bar"])
    # points where two or more corners collide
    for p in [(1, 3), (2, 3), (5.5, 3.5), (6.5, 4.5), (6, 4)]:
        assert _has_node(skel, p)
    assert not _has_node(skel, (4.5, 0.5))


def test_hook_split_on_a_vertex():
    skel = straight_skeleton(RECTILINEAR["hook"])
    # two reflex corners meet head on and split the face into two pieces
    G = skel.to_networkx()
    hub = [n for n, d in G.nodes(data=True) if np.allclose(d["pos"], (4, 7))]
    assert len(hub) == 1
    assert G.degree(hub[0]) == 4


def test_comb_ridges():
    skel = straight_skeleton(RECTILINEAR["comb"])
    core, _ = split_leaf_edges(skel, RECTILINEAR["comb"])
    mids = sorted((round(e.middle[0], 6), round(e.middle[1], 6)) for e in core)
    assert mids == [(1.0, 3.0), (3.0, 1.0), (5.0, 3.0), (7.0, 1.0), (9.0, 3.0)]


def test_plus_meets_in_center():
    skel = straight_skeleton(RECTILINEAR["plus"])
    G = skel.to_networkx()
    center = [n for n, d in G.nodes(data=True) if np.allclose(d["pos"], (0, 0))]
    assert len(center) == 1
    # four reflex spokes and four arm ridges
    assert G.degree(center[0]) == 8
