"""
Unit tests for the chordal axis in `polyaxis/chordal.py`.
"""

import os
import sys

# Ensure local package import (when running tests from repo)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import networkx as nx
import numpy as np
import pytest

from polyaxis import (
    create_hand,
    create_l_shape,
    create_person,
    create_rectangle,
    create_square,
    create_t_shape,
    create_triangle,
    create_weld_seam,
)
from polyaxis.boundary import contains_points
from polyaxis.chordal import chordal_axis, triangle_classes

# ---- Helpers ----------------------------------------------------------------


def _has_node(skel, p, atol=1e-9) -> bool:
    return bool(np.any(np.all(np.abs(skel.nodes - np.asarray(p)) <= atol, axis=1)))


def _path_length(path: np.ndarray) -> float:
    return float(np.hypot(*np.diff(path, axis=0).T).sum())


# ---- Simple shapes ----------------------------------------------------------


def test_square_axis_is_a_diagonal():
    skel = chordal_axis(create_square())
    assert skel.edge_count == 2
    assert skel.node_count == 3
    assert _has_node(skel, (5.0, 5.0))
    assert _path_length(skel.longest_path()) == pytest.approx(10.0 * np.sqrt(2.0))


def test_rectangle_axis_passes_through_center():
    P = create_rectangle()
    skel = chordal_axis(P)
    assert skel.edge_count == 2
    assert _has_node(skel, (10.0, 5.0))
    assert np.all(contains_points(P, skel.midpoints()))


def test_triangle_connects_centroid_to_vertices():
    P = create_triangle()
    skel = chordal_axis(P)
    assert skel.node_count == 4
    assert skel.edge_count == 3
    assert _has_node(skel, P.mean(axis=0), atol=1e-9)
    for v in P:
        assert _has_node(skel, v)


def test_without_terminal_branches():
    # Only terminal triangles: nothing left
    assert chordal_axis(create_rectangle(), terminal_branches=False).is_empty
    # Triangle count minus terminals contribute
    P = create_t_shape()
    full = chordal_axis(P)
    bare = chordal_axis(P, terminal_branches=False)
    n_term = int(np.sum(triangle_classes(P) == 2))
    assert bare.edge_count == full.edge_count - n_term


# ---- Structure --------------------------------------------------------------


@pytest.mark.parametrize(
    "make",
    [create_l_shape, create_t_shape, create_person, create_hand, create_weld_seam],
    ids=["l_shape", "t_shape", "person", "hand", "weld_seam"],
)
def test_axis_is_an_inside_tree(make):
    P = make()
    skel = chordal_axis(P)
    n = len(P)
    assert 1 <= skel.edge_count <= 3 * (n - 2) + 5
    assert np.all(contains_points(P, skel.nodes))
    assert np.all(contains_points(P, skel.midpoints()))
    G = skel.to_networkx()
    assert nx.is_connected(G)
    assert G.number_of_edges() == G.number_of_nodes() - 1


def test_junctions_have_degree_three():
    P = create_hand()
    skel = chordal_axis(P)
    n_junc = int(np.sum(triangle_classes(P) == 0))
    degrees = [d for _, d in skel.to_networkx().degree()]
    assert sum(1 for d in degrees if d == 3) == n_junc
    assert max(degrees) <= 3


def test_min_branch_length_prunes():
    P = create_person()
    full = chordal_axis(P)
    pruned = chordal_axis(P, min_branch_length=5.0)
    assert 0 < pruned.edge_count <= full.edge_count
    assert pruned.total_length <= full.total_length
    with pytest.raises(ValueError):
        chordal_axis(P, min_branch_length=-1.0)


def test_degenerate_input():
    assert chordal_axis([]).is_empty
    assert chordal_axis([(0.0, 0.0), (1.0, 1.0)]).is_empty
    assert triangle_classes([]).shape == (0,)
