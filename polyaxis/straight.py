"""
Straight skeleton of a simple polygon by wavefront simulation.

The polygon edges move inward at unit speed. Each wavefront vertex slides
along the bisector of its two adjacent edges with the velocity that keeps it
on both offset lines; reflex vertices move along the (diverging) bisector of
the reflex angle. The simulation is driven by a priority queue of events:

- edge event: a wavefront edge shrinks to zero length and its two vertices
    merge into one new vertex.
- split event: a reflex vertex runs into an opposite wavefront edge and splits
    its face in two.

Every vertex trajectory (from the point where the vertex was created to the
event that consumes it) becomes a skeleton edge, every event point a node.

Important details:
- Queue entries are keyed by (time, kind, vertex index, ...). Times are
    quantised to the working tolerance so that simultaneous events are ordered
    by kind (edge before split) and then by vertex index.
- An event is resolved as a collision at one point rather than as a pair of
    vertices. Every vertex of the face that reaches the point at that time is
    consumed in one step, together with any wavefront edge passing through
    it. Rectilinear shapes, where several edges and reflex corners meet at the
    same instant, are therefore handled without ordering artifacts. A split
    landing on a vertex is the same collision as a vertex event.
- The new vertices fill the angular gaps that every colliding corner leaves
    free; one gap per new vertex, so a face is split wherever its corners
    touch and merged wherever they overlap.
- Entries are never removed from the queue; stale ones (consumed vertices, or
    a split point that no longer lies on the face) are dropped when popped.
- When two antiparallel edges meet, their offset lines coincide and the
    wavefront between them has collapsed to a ridge. The vertex created there
    has no finite velocity; it is slid to its nearer neighbour at once.
- The loop stops when the queue is drained or after `max_events` pops; any
    faces still active at that point are reported and left open.
"""

import heapq
import itertools
import logging
import math
import warnings
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from .boundary import PolygonLike, normalize_polygon, scaled_tolerance
from .skeleton import Segment, Skeleton, SkeletonBuilder

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Point = Tuple[float, float]

_EDGE_EVENT = 0
_SPLIT_EVENT = 1


def _cross(a: Point, b: Point) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


# ============================================================================
# Data models
# ============================================================================


class _Edge(NamedTuple):
    """Original polygon edge with its unit direction and inward unit normal."""

    start: Point
    end: Point
    direction: Point
    normal: Point


class _Vertex:
    """
    Active wavefront vertex.

    Attributes:
        index: Tie-break index (original vertex index, then creation order).
        origin: Position at creation time.
        time: Creation time (offset distance).
        edge_left: Index of the original edge entering this vertex.
        edge_right: Index of the original edge leaving this vertex.
        velocity: Displacement per unit time, or None for a stationary
            (collapsed ridge) vertex.
        reflex: Whether the interior angle exceeds 180 degrees.
    """

    __slots__ = (
        "index",
        "origin",
        "time",
        "edge_left",
        "edge_right",
        "velocity",
        "reflex",
        "prev",
        "next",
        "valid",
    )

    def __init__(
        self,
        index: int,
        origin: Point,
        time: float,
        edge_left: int,
        edge_right: int,
        velocity: Optional[Point],
        reflex: bool,
    ):
        self.index = index
        self.origin = origin
        self.time = time
        self.edge_left = edge_left
        self.edge_right = edge_right
        self.velocity = velocity
        self.reflex = reflex
        self.prev: "_Vertex" = self
        self.next: "_Vertex" = self
        self.valid = True

    def position(self, t: float) -> Point:
        if self.velocity is None:
            return self.origin
        dt = t - self.time
        return (
            self.origin[0] + dt * self.velocity[0],
            self.origin[1] + dt * self.velocity[1],
        )

    def __repr__(self) -> str:
        return "_Vertex(%d, origin=(%.4g, %.4g), t=%.4g)" % (
            self.index,
            self.origin[0],
            self.origin[1],
            self.time,
        )


# ============================================================================
# Public API
# ============================================================================


def straight_skeleton(
    polygon: PolygonLike,
    *,
    tol: Optional[float] = None,
    max_events: Optional[int] = None,
) -> Skeleton:
    """
    Compute the straight skeleton of a simple polygon.

    Args:
        polygon: (N, 2) vertices of a simple polygon, either orientation.
        tol: Absolute geometric tolerance. Defaults to 1e-7 times the
            polygon's bounding-box diagonal.
        max_events: Upper bound on processed queue entries before the
            simulation gives up (default 20*n*n + 100).

    Returns:
        Skeleton with one spoke per polygon vertex plus the interior ridges.
        Degenerate polygons yield an empty skeleton.
    """
    V = normalize_polygon(polygon)
    if V is None:
        return Skeleton()
    if tol is None:
        tol = scaled_tolerance(V, 1e-7)
    sim = _Wavefront(V, float(tol))
    sim.run(max_events)
    skel = sim.builder.build()
    logger.debug(
        "Straight skeleton: %d nodes, %d edges from %d vertices",
        skel.node_count,
        skel.edge_count,
        len(V),
    )
    return skel


def split_leaf_edges(
    skeleton: Skeleton, polygon: PolygonLike, tol: Optional[float] = None
) -> Tuple[Skeleton, Skeleton]:
    """
    Partition straight-skeleton edges into (core, leaves).

    Leaf edges ("spokes") have an endpoint on an original polygon vertex;
    core edges are the interior ridges. Both parts are returned as skeletons
    so graph queries work on either of them.
    """
    V = normalize_polygon(polygon)
    if V is None or skeleton.edge_count == 0:
        return skeleton, Skeleton()
    if tol is None:
        tol = max(skeleton.tol, scaled_tolerance(V, 1e-7))
    ref = SkeletonBuilder(tol)
    for p in V:
        ref.add_node(p)

    core: List[Segment] = []
    leaves: List[Segment] = []
    for e in skeleton.edges:
        if ref.find_node(e.start) is not None or ref.find_node(e.end) is not None:
            leaves.append(e)
        else:
            core.append(e)
    return (
        Skeleton.from_segments(core, tol=skeleton.tol),
        Skeleton.from_segments(leaves, tol=skeleton.tol),
    )


# ============================================================================
# Collision geometry
# ============================================================================

_TWO_PI = 2.0 * math.pi
_ANGLE_EPS = 1e-9


def _dist(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _segment_distance(p: Point, a: Point, b: Point) -> float:
    ab = _sub(b, a)
    L2 = _dot(ab, ab)
    if L2 <= 0.0:
        return _dist(p, a)
    s = min(1.0, max(0.0, _dot(_sub(p, a), ab) / L2))
    return _dist(p, (a[0] + s * ab[0], a[1] + s * ab[1]))


def _wedge(d_in: Point, d_out: Point) -> Tuple[float, float]:
    """
    Free directions at a wavefront corner as (start angle, width).

    The wedge opens at the outgoing edge direction and sweeps counter-clockwise
    to the reversed incoming direction. A U-turn has width zero.
    """
    turn = math.atan2(_cross(d_in, d_out), _dot(d_in, d_out))
    if abs(abs(turn) - math.pi) <= _ANGLE_EPS:
        turn = math.pi
    return math.atan2(d_out[1], d_out[0]) % _TWO_PI, math.pi - turn


def _common_arcs(wedges: List[Tuple[float, float]]) -> List[Tuple[int, int]]:
    """
    Arcs of directions that lie inside every wedge.

    Each arc is returned as (j, i): it starts where wedge j starts and ends
    where wedge i ends.
    """
    arcs: List[Tuple[int, int]] = []
    seen: List[float] = []
    for j, (s, _) in enumerate(wedges):
        if any(min(abs(s - q), _TWO_PI - abs(s - q)) <= _ANGLE_EPS for q in seen):
            continue
        seen.append(s)
        end = None
        best = math.inf
        for i, (si, wi) in enumerate(wedges):
            off = (s - si) % _TWO_PI
            if off >= _TWO_PI - _ANGLE_EPS:
                off = 0.0
            if off > wi + _ANGLE_EPS:
                end = None
                break
            if wi - off < best:
                best = wi - off
                end = i
        if end is not None:
            arcs.append((j, end))
    return arcs


# ============================================================================
# Simulation
# ============================================================================


class _Wavefront:
    def __init__(self, vertices: np.ndarray, tol: float):
        self.tol = tol
        self.near = max(10.0 * tol, 1e-12)
        self.n = len(vertices)
        self.edges: List[_Edge] = []
        pts = [(float(x), float(y)) for x, y in vertices]
        for i in range(self.n):
            a = pts[i]
            b = pts[(i + 1) % self.n]
            d = _sub(b, a)
            L = math.hypot(d[0], d[1])
            u = (d[0] / L, d[1] / L)
            # counter-clockwise polygon: interior on the left
            self.edges.append(_Edge(a, b, u, (-u[1], u[0])))

        self.builder = SkeletonBuilder(self.near)
        self.queue: List[tuple] = []
        self._seq = itertools.count()
        self._ids = itertools.count(self.n)
        self.active = 0
        self.now = 0.0

        first: List[_Vertex] = []
        for i in range(self.n):
            left = (i - 1) % self.n
            first.append(self._make_vertex(i, pts[i], 0.0, left, i))
        for i, v in enumerate(first):
            v.prev = first[i - 1]
            v.next = first[(i + 1) % self.n]
        self.active = self.n
        for v in first:
            self._push_edge_event(v, v.next)
            if v.reflex:
                self._push_split_events(v)

    # ------------------------------ Vertices ------------------------------
    def _make_vertex(
        self, index: int, origin: Point, time: float, left: int, right: int
    ) -> _Vertex:
        n1 = self.edges[left].normal
        n2 = self.edges[right].normal
        det = _cross(n1, n2)
        if abs(det) <= 1e-12:
            # parallel edges: straight continuation or collapsed ridge
            velocity = n1 if _dot(n1, n2) > 0 else None
        else:
            velocity = ((n2[1] - n1[1]) / det, (n1[0] - n2[0]) / det)
        reflex = (
            _cross(self.edges[left].direction, self.edges[right].direction) < -1e-12
        )
        return _Vertex(index, origin, time, left, right, velocity, reflex)

    def _ring(self, v: _Vertex) -> Iterator[_Vertex]:
        cur = v
        for _ in range(self.active + 2):
            yield cur
            cur = cur.next
            if cur is v:
                return
        logger.warning("Wavefront ring around %r did not close", v)

    def _kill(self, *vs: _Vertex) -> None:
        for v in vs:
            if v.valid:
                v.valid = False
                self.active -= 1

    def _emit(self, a: Point, b: Point) -> None:
        self.builder.add_edge(a, b)

    # ------------------------------- Events -------------------------------
    def _push(self, t: float, kind: int, lo: int, hi: int, payload: tuple) -> None:
        key = round(t / self.tol)
        heapq.heappush(
            self.queue, (key, kind, lo, hi, next(self._seq), t, payload)
        )

    def _edge_event(self, a: _Vertex, b: _Vertex) -> Optional[Tuple[float, Point]]:
        """Time and point where the wavefront edge between a and b vanishes."""
        t0 = max(a.time, b.time, self.now)
        pa = a.position(t0)
        pb = b.position(t0)
        if a.velocity is None and b.velocity is None:
            return t0, ((pa[0] + pb[0]) * 0.5, (pa[1] + pb[1]) * 0.5)
        if a.velocity is None:
            return t0, pb
        if b.velocity is None:
            return t0, pa
        D = _sub(pb, pa)
        if math.hypot(D[0], D[1]) <= self.tol:
            return t0, ((pa[0] + pb[0]) * 0.5, (pa[1] + pb[1]) * 0.5)

        va, vb = a.velocity, b.velocity
        det = -_cross(va, vb)
        if abs(det) <= 1e-12 * math.hypot(*va) * math.hypot(*vb):
            return None
        neg_vb = (-vb[0], -vb[1])
        s = _cross(D, neg_vb) / det
        u = _cross(va, D) / det
        if s < -self.tol or u < -self.tol:
            return None
        s = max(s, 0.0)
        u = max(u, 0.0)
        X = (
            0.5 * (pa[0] + s * va[0] + pb[0] + u * vb[0]),
            0.5 * (pa[1] + s * va[1] + pb[1] + u * vb[1]),
        )
        return t0 + 0.5 * (s + u), X

    def _push_edge_event(self, a: _Vertex, b: _Vertex) -> None:
        if a is b:
            return
        ev = self._edge_event(a, b)
        if ev is None:
            return
        t, X = ev
        self._push(
            t,
            _EDGE_EVENT,
            min(a.index, b.index),
            max(a.index, b.index),
            (a, b, X),
        )

    def _push_split_events(self, v: _Vertex) -> None:
        """Candidate split events of reflex vertex v against every other edge."""
        if v.velocity is None:
            return
        start = max(v.time, self.now)
        for k, e in enumerate(self.edges):
            if k == v.edge_left or k == v.edge_right:
                continue
            vn = _dot(v.velocity, e.normal)
            denom = 1.0 - vn
            if denom <= 1e-12:
                continue
            dist = _dot(_sub(v.origin, e.start), e.normal)
            t = (dist - v.time * vn) / denom
            if t < start - self.tol:
                continue
            self._push(t, _SPLIT_EVENT, v.index, k, (v, k, v.position(t)))

    # ------------------------------ Main loop ------------------------------
    def run(self, max_events: Optional[int] = None) -> None:
        if max_events is None:
            max_events = 20 * self.n * self.n + 100
        popped = 0
        processed = 0
        while self.queue:
            if popped >= max_events:
                msg = (
                    "Straight skeleton stopped after %d queue entries with %d active vertices"
                    % (popped, self.active)
                )
                logger.warning(msg)
                warnings.warn(msg, RuntimeWarning)
                return
            popped += 1
            _, kind, _, _, _, t, payload = heapq.heappop(self.queue)
            self.now = max(self.now, t)
            if kind == _EDGE_EVENT:
                done = self._handle_edge_event(t, *payload)
            else:
                done = self._handle_split_event(t, *payload)
            processed += int(done)
        logger.debug(
            "Wavefront drained: %d entries popped, %d events applied", popped, processed
        )
        if self.active > 0:
            logger.warning(
                "Straight skeleton terminated early with %d active vertices", self.active
            )

    def _handle_edge_event(self, t: float, a: _Vertex, b: _Vertex, X: Point) -> bool:
        if not (a.valid and b.valid) or a.next is not b:
            return False
        return self._apply(t, X, a)

    def _handle_split_event(self, t: float, v: _Vertex, k: int, X: Point) -> bool:
        # the opposite edge is found again at resolution time; k may be stale
        if not v.valid or v.velocity is None:
            return False
        return self._apply(t, X, v)

    # ----------------------------- Collisions -----------------------------
    def _apply(self, t: float, P: Point, seed: _Vertex) -> bool:
        """Resolve the collision at P and queue the events of the new vertices."""
        created = self._resolve(t, P, seed)
        if created is None:
            return False
        pending = list(created)
        while pending:
            v = pending.pop()
            if not v.valid:
                continue
            if v.next is v:
                self._kill(v)
                continue
            if v.next.next is v:
                self._close(t, v, v.next)
                continue
            if v.velocity is None:
                # collapsed ridge: slide to the nearer neighbour at once
                a, b = v.prev, v.next
                pa, pb = a.position(t), b.position(t)
                if _dist(v.origin, pa) <= _dist(v.origin, pb):
                    more = self._resolve(t, pa, a)
                else:
                    more = self._resolve(t, pb, b)
                if more is not None:
                    pending.extend(more)
                    continue
            self._push_edge_event(v.prev, v)
            self._push_edge_event(v, v.next)
            if v.reflex:
                self._push_split_events(v)
        return True

    def _close(self, t: float, a: _Vertex, b: _Vertex) -> None:
        """Two-vertex face: its edges overlap, so it closes with one ridge."""
        pa = a.position(t)
        pb = b.position(t)
        self._emit(a.origin, pa)
        self._emit(b.origin, pb)
        self._emit(pa, pb)
        self._kill(a, b)

    def _resolve(self, t: float, P: Point, seed: _Vertex) -> Optional[List[_Vertex]]:
        """
        Merge every vertex of seed's face that sits at P at time t.

        Consecutive colliding vertices form runs; a wavefront edge passing
        through P without a colliding endpoint counts as a run of its own.
        The new vertices are placed in the angular gaps shared by all runs,
        one per gap, which splits the face wherever the runs touch.

        Returns:
            The vertices created or relinked, or None when nothing collides.
        """
        ring = list(self._ring(seed))
        member = {id(u) for u in ring if _dist(u.position(t), P) <= self.near}
        grew = bool(member)
        while grew:
            grew = False
            for u in ring:
                if id(u) in member or u.velocity is not None:
                    continue
                if id(u.prev) not in member and id(u.next) not in member:
                    continue
                reach = min(
                    _dist(u.origin, u.prev.position(t)),
                    _dist(u.origin, u.next.position(t)),
                )
                if _dist(u.origin, P) <= reach + self.near:
                    member.add(id(u))
                    grew = True
        if not member:
            return None
        members = [u for u in ring if id(u) in member]
        if all(
            u.time >= t - self.tol and _dist(u.origin, P) <= self.near for u in members
        ):
            return None

        if len(members) == len(ring):
            for u in members:
                self._emit(u.origin, P)
            self._kill(*members)
            return []

        # entries: (incoming edge, outgoing edge, vertex before, vertex after)
        entries: List[Tuple[int, int, _Vertex, _Vertex]] = []
        for y in ring:
            x = y.next
            if id(y) in member or id(x) in member:
                continue
            if _segment_distance(P, y.position(t), x.position(t)) <= self.near:
                entries.append((y.edge_right, y.edge_right, y, x))
        virtual = len(entries)
        if len(members) + virtual < 2:
            return None

        start = next(k for k, u in enumerate(ring) if id(u) not in member)
        run: List[_Vertex] = []
        for u in ring[start:] + ring[:start] + [ring[start]]:
            if id(u) in member:
                run.append(u)
            elif run:
                entries.append((run[0].edge_left, run[-1].edge_right, run[0].prev, u))
                run = []

        for u in members:
            self._emit(u.origin, P)
        self._kill(*members)

        wedges = [
            _wedge(self.edges[e_in].direction, self.edges[e_out].direction)
            for e_in, e_out, _, _ in entries
        ]
        arcs = _common_arcs(wedges)
        if len(arcs) != len(entries) or len({i for _, i in arcs}) != len(arcs):
            logger.debug(
                "Ambiguous collision of %d runs at (%.6g, %.6g), t=%.6g",
                len(entries),
                P[0],
                P[1],
                t,
            )
            arcs = [(k, k) for k in range(virtual, len(entries))]

        created: List[_Vertex] = []
        for j, i in arcs:
            e_in, _, prev_out, _ = entries[i]
            _, e_out, _, next_out = entries[j]
            if e_in == e_out:
                prev_out.next = next_out
                next_out.prev = prev_out
                created.append(prev_out)
                continue
            nv = self._make_vertex(next(self._ids), P, t, e_in, e_out)
            nv.prev = prev_out
            nv.next = next_out
            prev_out.next = nv
            next_out.prev = nv
            self.active += 1
            created.append(nv)
        return created
