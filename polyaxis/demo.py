"""
Demo polygon generators for polyaxis.

Provides example shapes for tutorials, demonstrations and tests: simple
convex shapes, shapes with reflex corners (L, T, arrow), star and regular
polygons, and organic outlines (person, hand, weld seams).
All generators return `(N, 2)` float arrays in counter-clockwise order.
"""

import logging
import os
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .boundary import normalize_polygon
from .strategy import SkeletonAlgorithm, skeletonize

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def _ccw(points) -> np.ndarray:
    P = normalize_polygon(points)
    if P is None:
        raise ValueError("Demo polygon is degenerate")
    return P


def create_square(size: float = 10.0) -> np.ndarray:
    return _ccw([(0.0, 0.0), (size, 0.0), (size, size), (0.0, size)])


def create_rectangle(width: float = 20.0, height: float = 10.0) -> np.ndarray:
    return _ccw([(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)])


def create_triangle() -> np.ndarray:
    """Equilateral-ish triangle with side 10."""
    return _ccw([(5.0, 0.0), (10.0, 8.66), (0.0, 8.66)])


def create_l_shape() -> np.ndarray:
    return _ccw(
        [(0.0, 0.0), (20.0, 0.0), (20.0, 10.0), (10.0, 10.0), (10.0, 20.0), (0.0, 20.0)]
    )


def create_t_shape() -> np.ndarray:
    return _ccw(
        [
            (0.0, 0.0),
            (30.0, 0.0),
            (30.0, 8.0),
            (18.0, 8.0),
            (18.0, 25.0),
            (12.0, 25.0),
            (12.0, 8.0),
            (0.0, 8.0),
        ]
    )


def create_arrow() -> np.ndarray:
    """Arrow pointing in +x: a shaft of width 8 and a triangular head."""
    return _ccw(
        [
            (0.0, 8.0),
            (20.0, 8.0),
            (20.0, 0.0),
            (35.0, 12.0),
            (20.0, 24.0),
            (20.0, 16.0),
            (0.0, 16.0),
        ]
    )


def create_regular_polygon(
    n: int = 6, radius: float = 10.0, center: Tuple[float, float] = (0.0, 0.0)
) -> np.ndarray:
    """
    Create a regular n-gon.

    Args:
        n: Number of vertices (>= 3)
        radius: Circumradius
        center: Center position (x, y)

    Returns:
        (n, 2) vertex array
    """
    if n < 3:
        raise ValueError("A regular polygon needs at least 3 vertices")
    ang = 2.0 * np.pi * np.arange(n) / n
    P = np.column_stack([np.cos(ang), np.sin(ang)]) * radius + np.asarray(center)
    return _ccw(P)


def create_star(
    points: int = 5, outer_radius: float = 10.0, inner_radius: float = 4.0
) -> np.ndarray:
    """
    Create a star with `points` tips; tips and notches alternate, the first
    tip pointing down (-y).
    """
    if points < 2:
        raise ValueError("A star needs at least 2 points")
    if not 0 < inner_radius < outer_radius:
        raise ValueError("Need 0 < inner_radius < outer_radius")
    i = np.arange(2 * points)
    ang = np.pi * i / points - np.pi / 2
    r = np.where(i % 2 == 0, outer_radius, inner_radius)
    return _ccw(np.column_stack([r * np.cos(ang), r * np.sin(ang)]))


def create_person() -> np.ndarray:
    """Person-like outline (head, raised arms, legs), 41 vertices."""
    return _ccw(
        [
            (22, 80), (22, 52), (20, 48), (20, 38), (30, 38), (32, 50), (34, 50),
            (32, 36), (20, 34), (18, 30), (16, 28), (16, 22), (17, 18), (20, 14),
            (20, 10), (18, 6), (14, 4), (10, 4), (6, 6), (4, 10), (4, 14),
            (7, 18), (8, 22), (8, 28), (6, 30), (4, 34), (-8, 36), (-10, 50),
            (-8, 50), (-6, 38), (4, 38), (4, 48), (2, 52), (2, 80), (6, 80),
            (6, 54), (10, 50), (12, 50), (14, 50), (18, 54), (18, 80),
        ]
    )  # fmt: skip


def create_hand() -> np.ndarray:
    """Hand outline with four fingers and a thumb."""
    return _ccw(
        [
            (8, 50), (6, 40), (2, 36), (0, 20), (2, 18), (4, 20), (6, 32),
            (7, 28), (6, 10), (8, 8), (10, 10), (11, 28), (12, 24), (12, 4),
            (14, 2), (16, 4), (16, 24), (17, 26), (18, 10), (20, 8), (22, 10),
            (21, 28), (22, 30), (28, 24), (30, 24), (30, 28), (24, 34),
            (22, 38), (20, 50),
        ]
    )  # fmt: skip


def create_weld_seam(
    length: float = 100.0, samples: int = 30, fat: bool = False
) -> np.ndarray:
    """
    Create a long wavy band, the kind of outline a weld seam segmentation
    produces.

    Args:
        length: Extent along x.
        samples: Number of samples per long side.
        fat: Produce the wide, gently curved variant instead of the thin,
            wiggly one.

    Returns:
        (2 * samples, 2) vertex array
    """
    if samples < 2:
        raise ValueError("samples must be >= 2")
    t = np.linspace(0.0, 1.0, samples)
    x = length * t
    if fat:
        top = 3.0 * np.sin(2.5 * np.pi * t)
        width = 10.0 + 2.0 * np.sin(1.5 * np.pi * t + 0.7)
    else:
        top = 2.0 * np.sin(3.0 * np.pi * t) + 1.5 * np.sin(7.0 * np.pi * t + 0.5)
        width = 3.0 + 1.5 * np.sin(2.0 * np.pi * t + 1.0)
    upper = np.column_stack([x, top])
    lower = np.column_stack([x, top + width])[::-1]
    return _ccw(np.vstack([upper, lower]))


def demo_polygons() -> Dict[str, np.ndarray]:
    """All demo shapes keyed by name."""
    return {
        "square": create_square(),
        "rectangle": create_rectangle(),
        "triangle": create_triangle(),
        "l_shape": create_l_shape(),
        "t_shape": create_t_shape(),
        "arrow": create_arrow(),
        "hexagon": create_regular_polygon(6),
        "star": create_star(),
        "person": create_person(),
        "hand": create_hand(),
        "weld_seam": create_weld_seam(),
        "fat_weld_seam": create_weld_seam(samples=25, fat=True),
    }


def polygon_svg(
    polygon: np.ndarray,
    algorithm=SkeletonAlgorithm.STRAIGHT_SKELETON,
    margin: float = 2.0,
) -> str:
    """Standalone SVG document showing a polygon and its skeleton."""
    P = np.asarray(polygon, dtype=float)
    skel = skeletonize(P, algorithm)
    lo = P.min(axis=0) - margin
    span = P.max(axis=0) - P.min(axis=0) + 2 * margin
    pts = " ".join("%.6g,%.6g" % (x, y) for x, y in P)
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="%.6g %.6g %.6g %.6g">'
        '<polygon points="%s" fill="#eeeeee" stroke="#555555" stroke-width="0.3"/>'
        "%s</svg>"
        % (lo[0], lo[1], span[0], span[1], pts, skel.to_svg())
    )


def save_demo_svgs(
    output_dir: str = "data/svg",
    algorithms: Optional[Tuple[SkeletonAlgorithm, ...]] = None,
    shapes: Optional[Dict[str, Callable[[], np.ndarray]]] = None,
) -> Dict[str, str]:
    """
    Skeletonize every demo shape and save one SVG per (shape, algorithm).

    Args:
        output_dir: Directory to save SVG files
        algorithms: Strategies to render (default: all)
        shapes: Optional name -> generator mapping replacing the demo set

    Returns:
        Dictionary mapping "<shape>_<algorithm>" to file paths
    """
    os.makedirs(output_dir, exist_ok=True)
    algos = algorithms if algorithms is not None else tuple(SkeletonAlgorithm)
    polys = (
        {name: fn() for name, fn in shapes.items()}
        if shapes is not None
        else demo_polygons()
    )

    out: Dict[str, str] = {}
    for name, P in polys.items():
        for algo in algos:
            key = f"{name}_{algo.value}"
            path = os.path.join(output_dir, key + ".svg")
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(polygon_svg(P, algo))
            out[key] = path
    logger.info("Saved %d demo SVGs to %s", len(out), output_dir)
    return out
