"""
Chordal axis of a simple polygon.

The polygon is triangulated without Steiner points (constrained Delaunay,
see `triangulation.triangulate_polygon`) and every triangle contributes axis
edges according to how many of its sides lie on the boundary:

- sleeve (1 boundary edge): midpoint of one interior edge to the midpoint of
    the other, the pass-through of the axis.
- junction (0 boundary edges): centroid to the midpoint of each interior
    edge, a branch point.
- terminal (2 boundary edges): its single interior edge connects it to the
    neighbouring triangle. With `terminal_branches=True` the axis is carried
    on from that edge's midpoint to the terminal's apex vertex, so shapes made
    only of terminal triangles (squares, rectangles) still get an axis. With
    `terminal_branches=False` terminals contribute nothing.
- isolated (3 boundary edges, the polygon is a triangle): centroid to each
    vertex.

All emitted edges lie inside their triangle, hence inside the polygon.
"""

import logging
from collections import Counter
from typing import Optional

import numpy as np

from .boundary import PolygonLike, normalize_polygon, scaled_tolerance
from .skeleton import Skeleton, SkeletonBuilder
from .triangulation import TriangleKind, triangulate_polygon

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def chordal_axis(
    polygon: PolygonLike,
    *,
    terminal_branches: bool = True,
    min_branch_length: float = 0.0,
    tol: Optional[float] = None,
) -> Skeleton:
    """
    Compute the chordal axis of a simple polygon.

    Args:
        polygon: (N, 2) vertices of a simple polygon, either orientation.
        terminal_branches: Extend the axis into terminal triangles, up to the
            apex vertex.
        min_branch_length: Prune dangling branches shorter than this
            (0 disables pruning).
        tol: Node snapping tolerance (default 1e-7 x bbox diagonal).

    Returns:
        Skeleton; empty for degenerate polygons.
    """
    if min_branch_length < 0:
        raise ValueError("min_branch_length must be >= 0")
    V = normalize_polygon(polygon)
    if V is None:
        return Skeleton()
    if tol is None:
        tol = scaled_tolerance(V, 1e-7)

    tri = triangulate_polygon(V)
    P = tri.points
    et = tri.edge_triangles()
    centroids = tri.centroids()
    builder = SkeletonBuilder(tol)

    def mid(e):
        return 0.5 * (P[e[0]] + P[e[1]])

    kinds = tri.kinds()
    for t, kind in enumerate(kinds):
        interior = [e for e in tri.triangle_edges(t) if len(et[e]) == 2]
        if kind == TriangleKind.SLEEVE:
            builder.add_edge(mid(interior[0]), mid(interior[1]))
        elif kind == TriangleKind.JUNCTION:
            for e in interior:
                builder.add_edge(centroids[t], mid(e))
        elif kind == TriangleKind.TERMINAL:
            if terminal_branches:
                e = interior[0]
                apex = next(int(i) for i in tri.triangles[t] if i not in e)
                builder.add_edge(mid(e), P[apex])
        else:
            for i in tri.triangles[t]:
                builder.add_edge(centroids[t], P[int(i)])

    counts = Counter(k.name.lower() for k in kinds)
    logger.debug("Chordal axis triangle classes: %s", dict(counts))

    skel = builder.build()
    if min_branch_length > 0:
        skel = skel.prune(float(min_branch_length))
    return skel


def triangle_classes(polygon: PolygonLike) -> np.ndarray:
    """Boundary-edge count of every triangle of the polygon's triangulation."""
    V = normalize_polygon(polygon)
    if V is None:
        return np.zeros(0, dtype=int)
    return np.array([int(k) for k in triangulate_polygon(V).kinds()], dtype=int)
