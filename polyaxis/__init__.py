"""
polyaxis: topological skeletons of 2D polygons

A Python package for extracting the skeleton (medial structure) of simple
polygons. Provides three interchangeable strategies sharing one output type:
the straight skeleton (wavefront simulation), the chordal axis (constrained
Delaunay triangulation) and a Voronoi-based medial axis approximation.
"""

__version__ = "0.1.0"
__author__ = "Jordan M. R. Fox"
__email__ = "jordanmrfox@gmail.com"

# Polygon preprocessing
from .boundary import contains_points, normalize_polygon

# Individual strategies
from .chordal import chordal_axis

# Demo polygon functions
from .demo import (
    create_arrow,
    create_hand,
    create_l_shape,
    create_person,
    create_rectangle,
    create_regular_polygon,
    create_square,
    create_star,
    create_t_shape,
    create_triangle,
    create_weld_seam,
    demo_polygons,
    save_demo_svgs,
)

# Skeleton output type
from .skeleton import Segment, Skeleton, SkeletonBuilder
from .straight import split_leaf_edges, straight_skeleton

# Skeletonization entry point
from .strategy import SkeletonAlgorithm, SkeletonOptions, skeletonize
from .triangulation import Triangulation, TriangleKind, triangulate_polygon
from .voronoi import voronoi_skeleton

__all__ = [
    # Skeletonization entry point
    "skeletonize",
    "SkeletonAlgorithm",
    "SkeletonOptions",
    # Skeleton output type
    "Skeleton",
    "Segment",
    "SkeletonBuilder",
    # Individual strategies
    "straight_skeleton",
    "split_leaf_edges",
    "chordal_axis",
    "voronoi_skeleton",
    # Triangulation
    "Triangulation",
    "TriangleKind",
    "triangulate_polygon",
    # Polygon preprocessing
    "normalize_polygon",
    "contains_points",
    # Demo polygon functions
    "create_square",
    "create_rectangle",
    "create_triangle",
    "create_l_shape",
    "create_t_shape",
    "create_arrow",
    "create_regular_polygon",
    "create_star",
    "create_person",
    "create_hand",
    "create_weld_seam",
    "demo_polygons",
    "save_demo_svgs",
]
