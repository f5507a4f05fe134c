"""
Polygon boundary preprocessing and predicates.

Every skeleton strategy starts here. A polygon is an ordered, implicitly closed
sequence of 2D vertices; `normalize_polygon` turns it into a clean
counter-clockwise `(N, 2)` array or reports that it is too degenerate to have
a skeleton at all (fewer than 3 distinct vertices, or zero area).

The remaining helpers are the small geometric predicates shared by the
extractors and by the tests (area, perimeter, containment, densification).
Containment is delegated to shapely.
"""

import logging
from typing import Any, Optional, Sequence, Union

import numpy as np
import shapely.geometry as sgeom
from shapely.prepared import prep

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Relative tolerance, scaled by the polygon's bounding-box diagonal.
DEFAULT_EPS = 1e-9

PolygonLike = Union[Sequence[Sequence[float]], np.ndarray]


def as_vertex_array(points: PolygonLike) -> np.ndarray:
    """
    Convert polygon-like input into an `(N, 2)` float64 array.

    Raises:
        ValueError: if the input is not a sequence of 2D points or contains
            non-finite coordinates.
    """
    if points is None:
        return np.zeros((0, 2), dtype=float)
    try:
        arr = np.asarray(points, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValueError("Polygon must be a sequence of (x, y) points") from e
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Polygon must be an (N,2) array, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Polygon coordinates must be finite")
    return arr


def scaled_tolerance(vertices: np.ndarray, eps: float = DEFAULT_EPS) -> float:
    """Absolute tolerance for `vertices`: `eps` times the bbox diagonal (>= eps)."""
    if vertices.size == 0:
        return float(eps)
    span = vertices.max(axis=0) - vertices.min(axis=0)
    diag = float(np.hypot(span[0], span[1]))
    return float(eps) * max(1.0, diag)


def signed_area(vertices: np.ndarray) -> float:
    """Shoelace area; positive for counter-clockwise vertex order."""
    if len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def perimeter(vertices: np.ndarray) -> float:
    if len(vertices) < 2:
        return 0.0
    d = np.roll(vertices, -1, axis=0) - vertices
    return float(np.hypot(d[:, 0], d[:, 1]).sum())


def normalize_polygon(
    points: PolygonLike, tol: Optional[float] = None
) -> Optional[np.ndarray]:
    """
    Clean up a polygon for skeletonization.

    Steps:
      1) drop an explicit closing vertex equal to the first one
      2) drop consecutive duplicates (cyclically), i.e. zero-length edges
      3) reject polygons with fewer than 3 distinct vertices or ~zero area
      4) orient counter-clockwise (interior on the left of every edge)

    Args:
        points: Polygon vertices, `(N, 2)` array-like.
        tol: Absolute distance under which two consecutive vertices are merged.
            Defaults to `scaled_tolerance(points)`.

    Returns:
        `(M, 2)` counter-clockwise vertex array, or None if the polygon is too
        degenerate to have a skeleton.
    """
    V = as_vertex_array(points)
    if tol is None:
        tol = scaled_tolerance(V)

    if len(V) < 3:
        logger.debug("Polygon has %d vertices; no skeleton", len(V))
        return None

    kept = [V[0]]
    for p in V[1:]:
        if np.hypot(*(p - kept[-1])) > tol:
            kept.append(p)
    while len(kept) > 1 and np.hypot(*(kept[-1] - kept[0])) <= tol:
        kept.pop()

    if len(kept) < 3:
        logger.debug("Polygon collapsed to %d distinct vertices", len(kept))
        return None

    out = np.array(kept, dtype=float)
    area = signed_area(out)
    if abs(area) <= tol * max(perimeter(out), 1.0):
        logger.debug("Polygon area %.3g is degenerate", area)
        return None
    if area < 0:
        out = out[::-1].copy()
    return out


def to_shapely(vertices: PolygonLike) -> sgeom.Polygon:
    return sgeom.Polygon(as_vertex_array(vertices))


def contains_points(
    polygon: Union[PolygonLike, sgeom.Polygon],
    points: PolygonLike,
    tol: float = 1e-6,
) -> np.ndarray:
    """
    Vectorised "inside or on the boundary" test.

    Args:
        polygon: Polygon vertices or a shapely Polygon.
        points: `(K, 2)` query points.
        tol: Points within this distance of the polygon count as inside.

    Returns:
        Boolean array of length K.
    """
    poly = polygon if isinstance(polygon, sgeom.Polygon) else to_shapely(polygon)
    P = as_vertex_array(points)
    if len(P) == 0:
        return np.zeros(0, dtype=bool)
    region = prep(poly.buffer(tol) if tol > 0 else poly)
    return np.array([region.covers(sgeom.Point(p)) for p in P], dtype=bool)


def densify_boundary(vertices: np.ndarray, spacing: float) -> np.ndarray:
    """
    Resample the closed boundary so consecutive samples are at most `spacing`
    apart. Original vertices are kept, in order.
    """
    if spacing <= 0:
        raise ValueError("spacing must be > 0")
    out = []
    n = len(vertices)
    for i in range(n):
        a = vertices[i]
        b = vertices[(i + 1) % n]
        length = float(np.hypot(*(b - a)))
        k = max(1, int(np.ceil(length / spacing)))
        for j in range(k):
            out.append(a + (b - a) * (j / k))
    return np.array(out, dtype=float)


def describe(vertices: Any) -> str:
    """Short human-readable summary used in log messages."""
    V = as_vertex_array(vertices)
    if len(V) == 0:
        return "polygon(n=0)"
    lo = V.min(axis=0)
    hi = V.max(axis=0)
    return "polygon(n=%d, bbox=[%.4g,%.4g]x[%.4g,%.4g])" % (
        len(V),
        lo[0],
        hi[0],
        lo[1],
        hi[1],
    )
