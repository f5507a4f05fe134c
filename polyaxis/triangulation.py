"""
Triangulation engine shared by the chordal axis and Voronoi strategies.

Two builders produce the same `Triangulation` container:

- `triangulate_polygon`: constrained Delaunay triangulation of a simple polygon
    using only its own vertices (no Steiner points). Ear clipping gives an
    initial triangulation; Lawson flips of the non-boundary diagonals then
    make every diagonal locally Delaunay. Boundary edges are constraints and
    are never flipped.
- `delaunay_triangulation`: unconstrained Delaunay triangulation of an
    arbitrary point set via `scipy.spatial.Delaunay`.

Determinism: predicates run on coordinates normalised to the unit box with
fixed tolerances, ears are scanned starting at the lexicographically smallest
vertex, and diagonals are flipped in sorted order. Co-circular configurations
(e.g. the four corners of a square) are left as produced by ear clipping
instead of being flipped back and forth.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError

from .boundary import as_vertex_array, signed_area

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Tolerances on unit-box normalised coordinates
_CROSS_EPS = 1e-12
_INCIRCLE_EPS = 1e-10

Edge = Tuple[int, int]
Point = Tuple[float, float]


def _key(u: int, v: int) -> Edge:
    return (u, v) if u < v else (v, u)


def _cross(o: Point, a: Point, b: Point) -> float:
    return float((a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0]))


def _incircle(a: Point, b: Point, c: Point, d: Point) -> float:
    """Positive when d lies inside the circumcircle of the CCW triangle abc."""
    adx, ady = a[0] - d[0], a[1] - d[1]
    bdx, bdy = b[0] - d[0], b[1] - d[1]
    cdx, cdy = c[0] - d[0], c[1] - d[1]
    ad = adx * adx + ady * ady
    bd = bdx * bdx + bdy * bdy
    cd = cdx * cdx + cdy * cdy
    return float(
        ad * (bdx * cdy - cdx * bdy)
        - bd * (adx * cdy - cdx * ady)
        + cd * (adx * bdy - bdx * ady)
    )


def _unit_box(P: np.ndarray) -> np.ndarray:
    lo = P.min(axis=0)
    span = float(np.max(P.max(axis=0) - lo))
    return (P - lo) / (span if span > 0 else 1.0)


# ============================================================================
# Data models
# ============================================================================


class TriangleKind(enum.IntEnum):
    """Triangle classification by its number of boundary edges."""

    JUNCTION = 0
    SLEEVE = 1
    TERMINAL = 2
    ISOLATED = 3


@dataclass
class Triangulation:
    """
    Indexed triangulation of a 2D point set.

    Attributes:
        points: (N, 2) vertex coordinates.
        triangles: (M, 3) vertex indices, counter-clockwise.
        constrained: Edges (sorted index pairs) that were required to be
            present, i.e. the polygon boundary for `triangulate_polygon`.
    """

    points: np.ndarray
    triangles: np.ndarray
    constrained: Set[Edge] = field(default_factory=set)

    def __len__(self) -> int:
        return int(len(self.triangles))

    def edge_triangles(self) -> Dict[Edge, List[int]]:
        """Map every edge to the indices of the (one or two) triangles using it."""
        out: Dict[Edge, List[int]] = {}
        for t, (a, b, c) in enumerate(self.triangles):
            for u, v in ((a, b), (b, c), (c, a)):
                out.setdefault(_key(int(u), int(v)), []).append(t)
        return out

    def edges(self) -> List[Edge]:
        return sorted(self.edge_triangles())

    def triangle_edges(self, t: int) -> List[Edge]:
        a, b, c = (int(i) for i in self.triangles[t])
        return [_key(a, b), _key(b, c), _key(c, a)]

    def neighbors(self, t: int) -> List[int]:
        et = self.edge_triangles()
        out = []
        for e in self.triangle_edges(t):
            out.extend(s for s in et[e] if s != t)
        return sorted(out)

    def boundary_edges(self, t: int) -> List[Edge]:
        """Edges of triangle t that have no triangle on the other side."""
        et = self.edge_triangles()
        return [e for e in self.triangle_edges(t) if len(et[e]) < 2]

    def boundary_edge_count(self, t: int) -> int:
        return len(self.boundary_edges(t))

    def kinds(self) -> List[TriangleKind]:
        et = self.edge_triangles()
        return [
            TriangleKind(sum(1 for e in self.triangle_edges(t) if len(et[e]) < 2))
            for t in range(len(self))
        ]

    def kind(self, t: int) -> TriangleKind:
        return TriangleKind(self.boundary_edge_count(t))

    def areas(self) -> np.ndarray:
        if len(self) == 0:
            return np.zeros(0, dtype=float)
        A = self.points[self.triangles[:, 0]]
        B = self.points[self.triangles[:, 1]]
        C = self.points[self.triangles[:, 2]]
        return 0.5 * (
            (B[:, 0] - A[:, 0]) * (C[:, 1] - A[:, 1])
            - (B[:, 1] - A[:, 1]) * (C[:, 0] - A[:, 0])
        )

    def area(self) -> float:
        return float(self.areas().sum())

    def centroids(self) -> np.ndarray:
        if len(self) == 0:
            return np.zeros((0, 2), dtype=float)
        return self.points[self.triangles].mean(axis=1)

    def circumcenters(self) -> np.ndarray:
        """
        Circumcenter of every triangle. Degenerate (near-collinear) triangles
        fall back to their centroid.
        """
        if len(self) == 0:
            return np.zeros((0, 2), dtype=float)
        A = self.points[self.triangles[:, 0]]
        B = self.points[self.triangles[:, 1]]
        C = self.points[self.triangles[:, 2]]
        d = 2.0 * (
            A[:, 0] * (B[:, 1] - C[:, 1])
            + B[:, 0] * (C[:, 1] - A[:, 1])
            + C[:, 0] * (A[:, 1] - B[:, 1])
        )
        a2 = (A**2).sum(axis=1)
        b2 = (B**2).sum(axis=1)
        c2 = (C**2).sum(axis=1)
        span = float(np.ptp(self.points, axis=0).max()) if len(self.points) else 1.0
        ok = np.abs(d) > 1e-12 * max(span, 1.0) ** 2
        safe = np.where(ok, d, 1.0)
        ux = (a2 * (B[:, 1] - C[:, 1]) + b2 * (C[:, 1] - A[:, 1]) + c2 * (A[:, 1] - B[:, 1])) / safe
        uy = (a2 * (C[:, 0] - B[:, 0]) + b2 * (A[:, 0] - C[:, 0]) + c2 * (B[:, 0] - A[:, 0])) / safe
        out = np.column_stack([ux, uy])
        if not np.all(ok):
            cent = self.centroids()
            out[~ok] = cent[~ok]
        return out


# ============================================================================
# Constrained triangulation of a simple polygon
# ============================================================================


def triangulate_polygon(vertices: np.ndarray) -> Triangulation:
    """
    Constrained Delaunay triangulation of a simple polygon.

    Args:
        vertices: (N, 2) polygon vertices, N >= 3, either orientation, without
            repeated closing vertex (see `boundary.normalize_polygon`).

    Returns:
        Triangulation with N-2 counter-clockwise triangles over the given
        vertices and the polygon edges as constraints.
    """
    P = as_vertex_array(vertices)
    n = len(P)
    if n < 3:
        raise ValueError("Polygon needs at least 3 vertices to triangulate")

    Q = [(float(x), float(y)) for x, y in _unit_box(P)]
    order = list(range(n))
    if signed_area(P) < 0:
        order.reverse()

    tris = _ear_clip(Q, order)
    constrained = {_key(order[i], order[(i + 1) % n]) for i in range(n)}
    tris = _lawson_flips(Q, tris, constrained)

    T = np.array(tris, dtype=int).reshape(-1, 3)
    logger.debug("Triangulated %d-gon into %d triangles", n, len(T))
    return Triangulation(points=P.copy(), triangles=T, constrained=constrained)


def _ear_clip(Q: List[Point], order: List[int]) -> List[Tuple[int, int, int]]:
    """
    Ear clipping over a circular doubly linked list of vertex indices.

    `order` lists the polygon vertices counter-clockwise. A vertex is an ear
    when it is strictly convex and no non-convex vertex lies in the closed
    triangle (prev, v, next). Only non-convex vertices can block an ear, so
    they are tracked in a set that is updated as neighbours get clipped.
    """
    m = len(order)
    nxt = {order[i]: order[(i + 1) % m] for i in range(m)}
    prv = {order[i]: order[(i - 1) % m] for i in range(m)}

    def convexity(v: int) -> float:
        return _cross(Q[prv[v]], Q[v], Q[nxt[v]])

    reflex = {v for v in order if convexity(v) <= _CROSS_EPS}

    def is_ear(v: int) -> bool:
        if v in reflex:
            return False
        a, c = prv[v], nxt[v]
        pa, pv, pc = Q[a], Q[v], Q[c]
        for k in reflex:
            if k == a or k == c:
                continue
            p = Q[k]
            if p == pa or p == pc:
                continue
            if (
                _cross(pa, pv, p) >= -_CROSS_EPS
                and _cross(pv, pc, p) >= -_CROSS_EPS
                and _cross(pc, pa, p) >= -_CROSS_EPS
            ):
                return False
        return True

    tris: List[Tuple[int, int, int]] = []
    remaining = m
    cur = min(order, key=lambda i: Q[i])
    while remaining > 3:
        ear = None
        v = cur
        for _ in range(remaining):
            if is_ear(v):
                ear = v
                break
            v = nxt[v]
        if ear is None:
            # Numerically degenerate leftovers: clip the most convex vertex
            ear = max(_ring(cur, nxt), key=lambda i: (convexity(i), -i))
            logger.warning(
                "Ear clipping found no strict ear among %d vertices; forcing vertex %d",
                remaining,
                ear,
            )
        a, c = prv[ear], nxt[ear]
        tris.append((a, ear, c))
        nxt[a] = c
        prv[c] = a
        reflex.discard(ear)
        for w in (a, c):
            if convexity(w) <= _CROSS_EPS:
                reflex.add(w)
            else:
                reflex.discard(w)
        remaining -= 1
        cur = c
    tris.append((prv[cur], cur, nxt[cur]))
    return tris


def _ring(start: int, nxt: Dict[int, int]) -> List[int]:
    out = [start]
    k = nxt[start]
    while k != start:
        out.append(k)
        k = nxt[k]
    return out


def _apex(tri: List[int], u: int, v: int) -> Tuple[int, bool]:
    """Vertex of `tri` opposite edge u-v, and whether tri holds the directed edge u->v."""
    for i in range(3):
        if tri[i] == u:
            forward = tri[(i + 1) % 3] == v
            apex = tri[(i + 2) % 3] if forward else tri[(i + 1) % 3]
            return apex, forward
    raise ValueError("edge not in triangle")


def _lawson_flips(
    Q: List[Point], tris: List[Tuple[int, int, int]], constrained: Set[Edge]
) -> List[List[int]]:
    T = [list(t) for t in tris]
    edge_map: Dict[Edge, Set[int]] = {}
    for t, (a, b, c) in enumerate(T):
        for u, v in ((a, b), (b, c), (c, a)):
            edge_map.setdefault(_key(u, v), set()).add(t)

    stack = sorted((e for e in edge_map if e not in constrained), reverse=True)
    limit = 10 * len(Q) * len(Q) + 100
    flips = 0
    while stack:
        e = stack.pop()
        owners = edge_map.get(e)
        if e in constrained or owners is None or len(owners) != 2:
            continue
        u, v = e
        t1, t2 = sorted(owners)
        a, fwd1 = _apex(T[t1], u, v)
        b, _ = _apex(T[t2], u, v)
        if not fwd1:
            # make t1 the triangle holding the directed edge u->v
            t1, t2 = t2, t1
            a, b = b, a
        # t1 = (u, v, a) and t2 = (v, u, b), both counter-clockwise
        if _incircle(Q[u], Q[v], Q[a], Q[b]) <= _INCIRCLE_EPS:
            continue
        if _cross(Q[a], Q[u], Q[b]) <= _CROSS_EPS or _cross(Q[b], Q[v], Q[a]) <= _CROSS_EPS:
            continue

        T[t1] = [a, u, b]
        T[t2] = [b, v, a]
        del edge_map[e]
        edge_map[_key(a, b)] = {t1, t2}
        edge_map[_key(v, a)].discard(t1)
        edge_map[_key(v, a)].add(t2)
        edge_map[_key(u, b)].discard(t2)
        edge_map[_key(u, b)].add(t1)
        for f in (_key(u, b), _key(b, v), _key(v, a), _key(a, u)):
            if f not in constrained:
                stack.append(f)

        flips += 1
        if flips > limit:
            logger.warning("Lawson flipping stopped after %d flips", flips)
            break

    logger.debug("Lawson flips: %d", flips)
    return T


# ============================================================================
# Unconstrained Delaunay triangulation of a point set
# ============================================================================


def delaunay_triangulation(points: np.ndarray) -> Triangulation:
    """
    Delaunay triangulation of an arbitrary point set (scipy / Qhull).

    Raises:
        ValueError: if the points are too few or degenerate (e.g. collinear).
    """
    P = as_vertex_array(points)
    if len(P) < 3:
        raise ValueError("Delaunay triangulation needs at least 3 points")
    try:
        tri = Delaunay(P)
    except QhullError as e:
        raise ValueError(f"Delaunay triangulation failed: {e}") from e

    T = np.array(tri.simplices, dtype=int).reshape(-1, 3)
    A = P[T[:, 0]]
    B = P[T[:, 1]]
    C = P[T[:, 2]]
    cross = (B[:, 0] - A[:, 0]) * (C[:, 1] - A[:, 1]) - (B[:, 1] - A[:, 1]) * (C[:, 0] - A[:, 0])
    cw = cross < 0
    T[cw] = T[cw][:, [0, 2, 1]]
    return Triangulation(points=P.copy(), triangles=T)
