"""
Skeleton value type shared by every strategy.

A `Skeleton` is a node set plus an edge set of geometric segments. Edges carry
their own endpoint coordinates rather than node indices, so any producer (the
straight skeleton, the chordal axis or the Voronoi extractor) can emit one
without agreeing on a numbering scheme.

Important terminology:
- "Node": a deduplicated 2D position (polygon vertex, branch point or
    wavefront collapse point).
- "Edge": a `Segment` whose endpoints coincide, within tolerance, with two
    nodes.
- "Leaf edge": an edge with an endpoint of degree 1.
- "Core edge" / "spine": every edge that is not a leaf edge.
- "Branch": a maximal path between two nodes of degree != 2.

Graph structure is never stored. Queries (`longest_path`, `branches`,
`split_dangling_edges`, `prune`) rebuild adjacency on demand by snapping edge
endpoints to nodes with a hash grid of quantised coordinates, then hand the
result to networkx. Edges whose endpoints do not resolve to a node are
ignored, so hand-built, inconsistent skeletons degrade to empty results
instead of raising.

Serialization uses two flat coordinate lists:

    {"nodes": [x0, y0, x1, y1, ...], "edges": [sx0, sy0, ex0, ey0, ...]}
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
import shapely.geometry as sgeom

# Module-level logger
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Endpoint-to-node matching tolerance used by graph queries.
DEFAULT_TOLERANCE = 1e-6

Point = Tuple[float, float]

# ============================================================================
# Data models
# ============================================================================


@dataclass(frozen=True)
class Segment:
    """
    A directed 2D segment used as a skeleton edge.

    Attributes:
        start: (x, y) start point.
        end: (x, y) end point.
    """

    start: Point
    end: Point

    def __post_init__(self):
        object.__setattr__(self, "start", (float(self.start[0]), float(self.start[1])))
        object.__setattr__(self, "end", (float(self.end[0]), float(self.end[1])))

    @property
    def middle(self) -> Point:
        return (
            0.5 * (self.start[0] + self.end[0]),
            0.5 * (self.start[1] + self.end[1]),
        )

    @property
    def length(self) -> float:
        return math.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def direction(self) -> Point:
        """Unit direction from start to end; (0, 0) for a zero-length segment."""
        L = self.length
        if L == 0.0:
            return (0.0, 0.0)
        return ((self.end[0] - self.start[0]) / L, (self.end[1] - self.start[1]) / L)

    def reversed(self) -> "Segment":
        return Segment(self.end, self.start)

    def as_array(self) -> np.ndarray:
        return np.array([self.start, self.end], dtype=float)


class _NodeIndex:
    """
    Hash grid over 2D points. Cells are 2*tol wide; a lookup scans the 3x3
    neighbourhood of the query cell and returns the closest point within tol.
    """

    def __init__(self, tol: float):
        self.tol = max(float(tol), 1e-12)
        self.cell = 2.0 * self.tol
        self.points: List[Point] = []
        self._grid: Dict[Tuple[int, int], List[int]] = {}

    def _key(self, x: float, y: float) -> Tuple[int, int]:
        return (int(math.floor(x / self.cell)), int(math.floor(y / self.cell)))

    def find(self, x: float, y: float) -> Optional[int]:
        kx, ky = self._key(x, y)
        best: Optional[int] = None
        best_d = self.tol
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for i in self._grid.get((kx + dx, ky + dy), ()):
                    px, py = self.points[i]
                    d = math.hypot(px - x, py - y)
                    if d <= best_d:
                        best, best_d = i, d
        return best

    def add(self, x: float, y: float) -> int:
        i = self.find(x, y)
        if i is not None:
            return i
        i = len(self.points)
        self.points.append((float(x), float(y)))
        self._grid.setdefault(self._key(x, y), []).append(i)
        return i


def _coerce_edges(edges: Any) -> Tuple[Segment, ...]:
    if edges is None:
        return ()
    if isinstance(edges, np.ndarray):
        arr = np.asarray(edges, dtype=float)
        if arr.size == 0:
            return ()
        if arr.ndim == 2 and arr.shape[1] == 4:
            arr = arr.reshape(-1, 2, 2)
        if arr.ndim != 3 or arr.shape[1:] != (2, 2):
            raise ValueError(f"Edge array must be (M,2,2) or (M,4), got {arr.shape}")
        return tuple(Segment(tuple(e[0]), tuple(e[1])) for e in arr)
    out = []
    for e in edges:
        if isinstance(e, Segment):
            out.append(e)
        else:
            a, b = e
            out.append(Segment(tuple(a), tuple(b)))
    return tuple(out)


def _coerce_nodes(nodes: Any) -> np.ndarray:
    if nodes is None:
        arr = np.zeros((0, 2), dtype=float)
    else:
        arr = np.asarray(nodes, dtype=float)
        if arr.size == 0:
            arr = np.zeros((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Nodes must be an (N,2) array, got shape {arr.shape}")
    arr = arr.copy()
    arr.setflags(write=False)
    return arr


class Skeleton:
    """
    Immutable skeleton graph: a node array and a tuple of `Segment` edges.

    Attributes:
        nodes: (N, 2) read-only array of node positions.
        edges: Tuple of `Segment` edges.
        tol: Endpoint-to-node matching tolerance used by graph queries.
    """

    def __init__(
        self,
        nodes: Any = None,
        edges: Any = None,
        *,
        tol: float = DEFAULT_TOLERANCE,
    ):
        self._nodes = _coerce_nodes(nodes)
        self._edges = _coerce_edges(edges)
        self.tol = float(tol)

    @classmethod
    def from_segments(
        cls, edges: Iterable[Any], *, tol: float = DEFAULT_TOLERANCE
    ) -> "Skeleton":
        """Build a consistent skeleton whose nodes are the deduplicated edge endpoints."""
        builder = SkeletonBuilder(tol)
        for e in _coerce_edges(list(edges)):
            builder.add_edge(e.start, e.end)
        return builder.build()

    @classmethod
    def from_polygon(
        cls, polygon: Any, algorithm: Any = "straight_skeleton", **kwargs: Any
    ) -> "Skeleton":
        """Shorthand for `polyaxis.skeletonize(polygon, algorithm, **kwargs)`."""
        from .strategy import skeletonize

        return skeletonize(polygon, algorithm, **kwargs)

    # ----------------------------- Basic accessors ----------------------------
    @property
    def nodes(self) -> np.ndarray:
        return self._nodes

    @property
    def edges(self) -> Tuple[Segment, ...]:
        return self._edges

    @property
    def node_count(self) -> int:
        return int(self._nodes.shape[0])

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def is_empty(self) -> bool:
        return self.node_count == 0 and self.edge_count == 0

    @property
    def total_length(self) -> float:
        return float(sum(e.length for e in self._edges))

    def __len__(self) -> int:
        return self.edge_count

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._edges)

    def __bool__(self) -> bool:
        return not self.is_empty

    def __repr__(self) -> str:
        return f"Skeleton(nodes={self.node_count}, edges={self.edge_count})"

    def edge_array(self) -> np.ndarray:
        """Edges as an (M, 2, 2) array."""
        if not self._edges:
            return np.zeros((0, 2, 2), dtype=float)
        return np.array([[e.start, e.end] for e in self._edges], dtype=float)

    def midpoints(self) -> np.ndarray:
        if not self._edges:
            return np.zeros((0, 2), dtype=float)
        return np.array([e.middle for e in self._edges], dtype=float)

    # ------------------------------- Adjacency -------------------------------
    def to_networkx(self) -> nx.Graph:
        """
        Derive an undirected graph from the node set and the edge endpoints.

        Node ids follow node order (duplicate nodes share one id). Each graph
        node has a `pos` attribute; each graph edge has `weight` and `length`
        (Euclidean length) and `segment` (index into `edges`). Edges whose
        endpoints do not match a node within `tol` are skipped.
        """
        G = nx.Graph()
        index = _NodeIndex(self.tol)
        for x, y in self._nodes:
            nid = index.add(float(x), float(y))
            if nid not in G:
                G.add_node(nid, pos=index.points[nid])

        skipped = 0
        for k, e in enumerate(self._edges):
            u = index.find(*e.start)
            v = index.find(*e.end)
            if u is None or v is None or u == v:
                skipped += 1
                continue
            L = e.length
            if G.has_edge(u, v) and G[u][v]["weight"] <= L:
                continue
            G.add_edge(u, v, weight=L, length=L, segment=k)
        if skipped:
            logger.debug("Skipped %d edges with unresolved or coincident endpoints", skipped)
        return G

    # -------------------------------- Queries --------------------------------
    def longest_path(self) -> np.ndarray:
        """
        Geometrically longest simple path, as an ordered (K, 2) point array.

        Uses a two-pass farthest-node search (Dijkstra with edge lengths as
        weights) on every connected component and returns the longest of the
        per-component diameters. An empty skeleton yields a (0, 2) array.
        """
        G = self.to_networkx()
        if G.number_of_edges() == 0:
            return np.zeros((0, 2), dtype=float)

        best_path: List[int] = []
        best_len = -1.0
        for comp in sorted(nx.connected_components(G), key=min):
            if len(comp) < 2:
                continue
            start = min(comp)
            dist = nx.single_source_dijkstra_path_length(G, start, weight="weight")
            a = max(sorted(dist), key=lambda n: dist[n])
            dist_a, paths = nx.single_source_dijkstra(G, a, weight="weight")
            b = max(sorted(dist_a), key=lambda n: dist_a[n])
            if dist_a[b] > best_len:
                best_len = float(dist_a[b])
                best_path = paths[b]

        return np.array([G.nodes[n]["pos"] for n in best_path], dtype=float).reshape(
            -1, 2
        )

    def branches(self) -> List[np.ndarray]:
        """
        Decompose the graph into maximal paths between nodes of degree != 2.

        A simple chain yields exactly one branch. Components that are pure
        cycles (no node of degree != 2) are returned as one closed path each,
        starting and ending at the same point.
        """
        G = self.to_networkx()
        if G.number_of_edges() == 0:
            return []

        def key(u: int, v: int) -> Tuple[int, int]:
            return (u, v) if u < v else (v, u)

        visited = set()
        paths: List[List[int]] = []

        ends = sorted(n for n in G.nodes if G.degree(n) != 2)
        for s in ends:
            for nbr in sorted(G.neighbors(s)):
                if key(s, nbr) in visited:
                    continue
                visited.add(key(s, nbr))
                path = [s, nbr]
                prev, cur = s, nbr
                while G.degree(cur) == 2:
                    nxt = next(m for m in G.neighbors(cur) if m != prev)
                    if key(cur, nxt) in visited:
                        break
                    visited.add(key(cur, nxt))
                    path.append(nxt)
                    prev, cur = cur, nxt
                paths.append(path)

        # Whatever is left belongs to cycles without any branch point
        for u, v in sorted(key(a, b) for a, b in G.edges):
            if key(u, v) in visited:
                continue
            visited.add(key(u, v))
            path = [u, v]
            cur = v
            while cur != u:
                nbrs = sorted(m for m in G.neighbors(cur) if key(cur, m) not in visited)
                if not nbrs:
                    break
                nxt = nbrs[0]
                visited.add(key(cur, nxt))
                path.append(nxt)
                cur = nxt
            paths.append(path)

        return [
            np.array([G.nodes[n]["pos"] for n in p], dtype=float) for p in paths
        ]

    def split_dangling_edges(self) -> Tuple[List[Segment], List[Segment]]:
        """
        Partition edges into (core, dangling) by graph degree.

        An edge dangles when one of its endpoints has degree 1. Edges that
        cannot be resolved against the node set count as core. This is a
        purely topological split; `polyaxis.straight.split_leaf_edges` instead
        separates the straight-skeleton spokes, which start at the original
        polygon vertices, and returns two skeletons.
        """
        G = self.to_networkx()
        index = _NodeIndex(self.tol)
        for x, y in self._nodes:
            index.add(float(x), float(y))

        core: List[Segment] = []
        leaves: List[Segment] = []
        for e in self._edges:
            u = index.find(*e.start)
            v = index.find(*e.end)
            is_leaf = False
            for n in (u, v):
                if n is not None and n in G and G.degree(n) == 1:
                    is_leaf = True
            (leaves if is_leaf else core).append(e)
        return core, leaves

    def spine(self) -> "Skeleton":
        """Skeleton made only of the core edges (leaf edges removed)."""
        core, _ = self.split_dangling_edges()
        return Skeleton.from_segments(core, tol=self.tol)

    def prune(self, min_length: float, max_passes: int = 50) -> "Skeleton":
        """
        Iteratively remove dangling branches shorter than `min_length`.

        A dangling branch runs from a leaf node to a junction (degree >= 3).
        Chains ending at another leaf are never removed, and within one pass
        a junction is never stripped below two remaining edges, so pruning
        cannot erase a whole component.

        Args:
            min_length: Branches with total length strictly below this value
                are removed. Values <= 0 disable pruning.
            max_passes: Maximum number of pruning passes.

        Returns:
            A new Skeleton (or self when nothing was pruned).
        """
        if min_length <= 0 or not self._edges:
            return self

        G = self.to_networkx()
        removed_total = 0
        for pass_no in range(int(max_passes)):
            candidates = []
            for leaf in sorted(n for n in G.nodes if G.degree(n) == 1):
                path = [leaf]
                length = 0.0
                prev, cur = None, leaf
                while True:
                    nbrs = [m for m in G.neighbors(cur) if m != prev]
                    if not nbrs:
                        break
                    nxt = nbrs[0]
                    length += G[cur][nxt]["weight"]
                    path.append(nxt)
                    prev, cur = cur, nxt
                    if G.degree(cur) != 2:
                        break
                if G.degree(cur) >= 3 and length < min_length:
                    candidates.append((length, path))

            candidates.sort(key=lambda c: (c[0], c[1][0]))
            removed = 0
            for _, path in candidates:
                junction = path[-1]
                if G.degree(junction) < 3:
                    continue
                if any(n not in G for n in path):
                    continue
                G.remove_edges_from(zip(path[:-1], path[1:]))
                G.remove_nodes_from(path[:-1])
                removed += 1
            removed_total += removed
            logger.debug("Prune pass %d removed %d branches", pass_no, removed)
            if removed == 0:
                break

        if removed_total == 0:
            return self

        keep = sorted({d["segment"] for _, _, d in G.edges(data=True)})
        nodes = [G.nodes[n]["pos"] for n in sorted(G.nodes) if G.degree(n) > 0]
        return Skeleton(nodes, [self._edges[k] for k in keep], tol=self.tol)

    # ------------------------------- Geometry -------------------------------
    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """(xmin, ymin, xmax, ymax) over nodes and edge endpoints, or None if empty."""
        pts = [self._nodes]
        if self._edges:
            pts.append(self.edge_array().reshape(-1, 2))
        P = np.vstack(pts)
        if P.size == 0:
            return None
        lo = P.min(axis=0)
        hi = P.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    def _map(self, fn: Any) -> "Skeleton":
        nodes = fn(np.asarray(self._nodes, dtype=float)) if self.node_count else None
        edges = None
        if self._edges:
            E = fn(self.edge_array().reshape(-1, 2)).reshape(-1, 2, 2)
            edges = E
        return Skeleton(nodes, edges, tol=self.tol)

    def translate(self, dx: float, dy: float) -> "Skeleton":
        t = np.array([dx, dy], dtype=float)
        return self._map(lambda P: P + t)

    def scale(
        self,
        sx: float,
        sy: Optional[float] = None,
        origin: Optional[Sequence[float]] = None,
    ) -> "Skeleton":
        s = np.array([sx, sx if sy is None else sy], dtype=float)
        o = np.zeros(2) if origin is None else np.asarray(origin, dtype=float)
        return self._map(lambda P: (P - o) * s + o)

    def rotate(
        self,
        angle: float,
        origin: Optional[Sequence[float]] = None,
        degrees: bool = True,
    ) -> "Skeleton":
        """Rotate counter-clockwise by `angle` around `origin` (default (0, 0))."""
        a = math.radians(angle) if degrees else float(angle)
        c, s = math.cos(a), math.sin(a)
        R = np.array([[c, -s], [s, c]], dtype=float)
        o = np.zeros(2) if origin is None else np.asarray(origin, dtype=float)
        return self._map(lambda P: (P - o) @ R.T + o)

    def __add__(self, offset: Sequence[float]) -> "Skeleton":
        return self.translate(float(offset[0]), float(offset[1]))

    def __sub__(self, offset: Sequence[float]) -> "Skeleton":
        return self.translate(-float(offset[0]), -float(offset[1]))

    def __mul__(self, factor: Union[float, Sequence[float]]) -> "Skeleton":
        if np.isscalar(factor):
            return self.scale(float(factor))
        return self.scale(float(factor[0]), float(factor[1]))

    def __truediv__(self, factor: Union[float, Sequence[float]]) -> "Skeleton":
        if np.isscalar(factor):
            return self.scale(1.0 / float(factor))
        return self.scale(1.0 / float(factor[0]), 1.0 / float(factor[1]))

    def intersections(self, geometry: Any) -> np.ndarray:
        """
        Points where skeleton edges meet a shapely geometry.

        Overlapping stretches contribute their end points. Returns a
        deduplicated (K, 2) array.
        """
        if not hasattr(geometry, "geom_type"):
            raise TypeError("geometry must be a shapely geometry")
        index = _NodeIndex(self.tol)
        for e in self._edges:
            hit = sgeom.LineString([e.start, e.end]).intersection(geometry)
            if hit.is_empty:
                continue
            for p in _points_of(hit):
                index.add(p[0], p[1])
        if not index.points:
            return np.zeros((0, 2), dtype=float)
        return np.array(index.points, dtype=float)

    # ----------------------------- Serialization -----------------------------
    def to_dict(self) -> Dict[str, List[float]]:
        return {
            "nodes": [float(v) for v in np.asarray(self._nodes).reshape(-1)],
            "edges": [
                float(v)
                for e in self._edges
                for v in (e.start[0], e.start[1], e.end[0], e.end[1])
            ],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any], *, tol: float = DEFAULT_TOLERANCE) -> "Skeleton":
        """
        Rebuild a skeleton from the flat layout produced by `to_dict`.
        Unknown keys are ignored; missing keys mean empty collections.
        """
        if not isinstance(data, dict):
            raise ValueError("Skeleton payload must be a mapping")
        nodes = [float(v) for v in (data.get("nodes") or [])]
        edges = [float(v) for v in (data.get("edges") or [])]
        if len(nodes) % 2 != 0:
            raise ValueError(
                f"'nodes' must hold x,y pairs, got {len(nodes)} values"
            )
        if len(edges) % 4 != 0:
            raise ValueError(
                f"'edges' must hold x1,y1,x2,y2 quadruples, got {len(edges)} values"
            )
        N = np.array(nodes, dtype=float).reshape(-1, 2)
        E = np.array(edges, dtype=float).reshape(-1, 2, 2)
        return Skeleton(N, E, tol=tol)

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @staticmethod
    def from_json(text: str, *, tol: float = DEFAULT_TOLERANCE) -> "Skeleton":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid skeleton JSON: {e}") from e
        return Skeleton.from_dict(data, tol=tol)

    def to_svg(
        self,
        stroke: str = "#dd3333",
        stroke_width: float = 0.25,
        fill: str = "#dd3333",
        node_radius: float = 0.4,
    ) -> str:
        """SVG fragment: one <line> per edge and one <circle> per node."""
        if self.is_empty:
            return ""
        parts = []
        for e in self._edges:
            parts.append(
                '<line x1="%.6g" y1="%.6g" x2="%.6g" y2="%.6g" stroke="%s" '
                'stroke-width="%.6g" stroke-linecap="round"/>'
                % (e.start[0], e.start[1], e.end[0], e.end[1], stroke, stroke_width)
            )
        for x, y in self._nodes:
            parts.append(
                '<circle cx="%.6g" cy="%.6g" r="%.6g" fill="%s"/>'
                % (x, y, node_radius, fill)
            )
        return "".join(parts)

    # visualization
    def draw(
        self,
        ax: Any = None,
        polygon: Optional[Any] = None,
        figsize: Optional[Tuple[float, float]] = None,
        node_size: int = 20,
        node_color: str = "C3",
        edge_color: str = "C3",
        polygon_color: str = "0.6",
        pad_frac: float = 0.05,
        **kwargs: Any,
    ) -> Any:
        """Draw the skeleton (and optionally its source polygon) with matplotlib.

        Args:
            ax: Optional matplotlib Axes. If None, a new figure/axes is created.
            polygon: Optional (N, 2) polygon outline drawn underneath.
            figsize: Optional (width, height) in inches for a new figure.
            node_size: Node marker size passed to networkx.draw.
            node_color: Node color.
            edge_color: Edge color.
            polygon_color: Outline color of the polygon.
            pad_frac: Fractional padding added to the axes limits.
            **kwargs: Additional kwargs forwarded to networkx.draw.

        Returns:
            The matplotlib Axes used for drawing.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=figsize)

        boxes = []
        if polygon is not None:
            P = np.asarray(polygon, dtype=float).reshape(-1, 2)
            if len(P):
                closed = np.vstack([P, P[:1]])
                ax.plot(closed[:, 0], closed[:, 1], color=polygon_color, lw=1.0)
                boxes.append((P.min(axis=0), P.max(axis=0)))

        G = self.to_networkx()
        pos = {n: d["pos"] for n, d in G.nodes(data=True)}
        if G.number_of_nodes():
            nx.draw(
                G,
                pos=pos,
                ax=ax,
                node_size=node_size,
                node_color=node_color,
                edge_color=edge_color,
                **kwargs,
            )
        b = self.bounds()
        if b is not None:
            boxes.append((np.array(b[:2]), np.array(b[2:])))

        if boxes:
            lo = np.min([bx[0] for bx in boxes], axis=0)
            hi = np.max([bx[1] for bx in boxes], axis=0)
            span = np.maximum(hi - lo, 1e-12)
            ax.set_xlim(lo[0] - pad_frac * span[0], hi[0] + pad_frac * span[0])
            ax.set_ylim(lo[1] - pad_frac * span[1], hi[1] + pad_frac * span[1])
        ax.set_aspect("equal", adjustable="box")
        ax.set_xlabel("x")
        ax.set_ylabel("y")
        return ax


def _points_of(geom: Any) -> List[Point]:
    """Flatten a shapely intersection result into a list of points."""
    if geom.is_empty:
        return []
    gt = geom.geom_type
    if gt == "Point":
        return [(geom.x, geom.y)]
    if gt == "LineString":
        coords = list(geom.coords)
        return [tuple(coords[0]), tuple(coords[-1])]
    if hasattr(geom, "geoms"):
        out: List[Point] = []
        for g in geom.geoms:
            out.extend(_points_of(g))
        return out
    return []


# ============================================================================
# Construction
# ============================================================================


class SkeletonBuilder:
    """
    Incremental skeleton construction used by the strategies.

    Every endpoint is snapped to an existing node within `tol`, so emitted
    edges share exact coordinates with the node set. Zero-length and
    duplicate edges are dropped. Only nodes referenced by at least one edge
    end up in the built skeleton.
    """

    def __init__(self, tol: float = DEFAULT_TOLERANCE):
        self.tol = float(tol)
        self._index = _NodeIndex(self.tol)
        self._edges: List[Tuple[int, int]] = []
        self._keys = set()

    def add_node(self, p: Sequence[float]) -> int:
        return self._index.add(float(p[0]), float(p[1]))

    def find_node(self, p: Sequence[float]) -> Optional[int]:
        """Index of the registered node within tolerance of p, if any."""
        return self._index.find(float(p[0]), float(p[1]))

    def add_edge(self, a: Sequence[float], b: Sequence[float]) -> bool:
        """Add the edge a-b. Returns False when it was degenerate or a duplicate."""
        ia = self.add_node(a)
        ib = self.add_node(b)
        if ia == ib:
            return False
        k = (ia, ib) if ia < ib else (ib, ia)
        if k in self._keys:
            return False
        self._keys.add(k)
        self._edges.append((ia, ib))
        return True

    def __len__(self) -> int:
        return len(self._edges)

    def build(self) -> Skeleton:
        used = sorted({i for e in self._edges for i in e})
        pts = self._index.points
        nodes = [pts[i] for i in used]
        edges = [Segment(pts[a], pts[b]) for a, b in self._edges]
        return Skeleton(nodes, edges, tol=max(self.tol, DEFAULT_TOLERANCE))
