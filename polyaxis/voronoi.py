"""
Voronoi-based medial axis approximation.

The boundary is densified and the Delaunay triangulation of the samples is
computed with scipy. The Voronoi diagram of the samples is the dual: every
Delaunay edge shared by two triangles yields the Voronoi edge joining their
circumcenters. Voronoi edges inside the polygon approximate the medial axis;
edges outside (or crossing the boundary) are clipped away. Short dangling
spurs, caused by boundary sampling, are pruned afterwards.

Clip modes:
    - "segment": keep an edge only if the whole segment is covered by the
        polygon (default).
    - "endpoints": keep an edge if both endpoints and its midpoint are
        covered.
    - "midpoint": keep an edge if its midpoint is covered.
"""

import logging
from typing import Optional

import numpy as np
import shapely.geometry as sgeom
from shapely.prepared import prep

from .boundary import (
    PolygonLike,
    densify_boundary,
    normalize_polygon,
    perimeter,
    scaled_tolerance,
    to_shapely,
)
from .skeleton import Skeleton, SkeletonBuilder
from .triangulation import delaunay_triangulation

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

CLIP_MODES = ("segment", "endpoints", "midpoint")


def voronoi_skeleton(
    polygon: PolygonLike,
    *,
    spacing: Optional[float] = None,
    spacing_factor: float = 0.2,
    clip: str = "segment",
    prune_factor: float = 0.5,
    max_prune_passes: int = 50,
    tol: Optional[float] = None,
) -> Skeleton:
    """
    Approximate the medial axis of a simple polygon from the Voronoi diagram
    of its densified boundary.

    Args:
        polygon: (N, 2) vertices of a simple polygon, either orientation.
        spacing: Maximum distance between boundary samples. Defaults to
            `spacing_factor` times the mean polygon edge length.
        spacing_factor: See `spacing`.
        clip: One of "segment", "endpoints", "midpoint".
        prune_factor: Dangling branches shorter than
            `prune_factor * perimeter / N` are pruned (0 disables pruning).
        max_prune_passes: Upper bound on pruning passes.
        tol: Node snapping / containment tolerance (default 1e-7 x bbox
            diagonal).

    Returns:
        Skeleton; empty for degenerate polygons or when the Delaunay
        triangulation of the samples fails.
    """
    if clip not in CLIP_MODES:
        raise ValueError(f"clip must be one of {CLIP_MODES}, got {clip!r}")
    if spacing is not None and spacing <= 0:
        raise ValueError("spacing must be > 0")
    if spacing_factor <= 0:
        raise ValueError("spacing_factor must be > 0")
    if prune_factor < 0:
        raise ValueError("prune_factor must be >= 0")

    V = normalize_polygon(polygon)
    if V is None:
        return Skeleton()
    if tol is None:
        tol = scaled_tolerance(V, 1e-7)

    n = len(V)
    per = perimeter(V)
    if spacing is None:
        spacing = spacing_factor * per / n
    samples = densify_boundary(V, spacing)

    try:
        tri = delaunay_triangulation(samples)
    except ValueError as e:
        logger.warning("Voronoi skeleton unavailable: %s", e)
        return Skeleton()

    centers = tri.circumcenters()
    region = prep(to_shapely(V).buffer(tol))
    builder = SkeletonBuilder(tol)

    kept = 0
    dual = 0
    for _, owners in sorted(tri.edge_triangles().items()):
        if len(owners) != 2:
            continue  # hull edge, Voronoi ray
        dual += 1
        a = centers[owners[0]]
        b = centers[owners[1]]
        if np.hypot(*(b - a)) <= tol:
            continue
        if _inside(region, a, b, clip) and builder.add_edge(a, b):
            kept += 1

    logger.debug(
        "Voronoi: %d samples, %d finite dual edges, %d kept (clip=%s)",
        len(samples),
        dual,
        kept,
        clip,
    )

    skel = builder.build()
    if prune_factor > 0 and not skel.is_empty:
        skel = skel.prune(prune_factor * per / n, max_passes=max_prune_passes)
    return skel


def _inside(region, a: np.ndarray, b: np.ndarray, clip: str) -> bool:
    mid = sgeom.Point(0.5 * (a + b))
    if clip == "midpoint":
        return region.covers(mid)
    if clip == "endpoints":
        return (
            region.covers(sgeom.Point(a))
            and region.covers(sgeom.Point(b))
            and region.covers(mid)
        )
    return region.covers(sgeom.LineString([a, b]))
