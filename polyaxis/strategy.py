"""
Algorithm selection and the top-level `skeletonize` entry point.

The three extractors are independent pure functions of the polygon that share
only their output type (`Skeleton`). `skeletonize` picks one by
`SkeletonAlgorithm` and forwards the matching fields of `SkeletonOptions`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from .boundary import PolygonLike, as_vertex_array, describe
from .chordal import chordal_axis
from .skeleton import Skeleton
from .straight import straight_skeleton
from .voronoi import CLIP_MODES, voronoi_skeleton

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class SkeletonAlgorithm(str, enum.Enum):
    """Available skeleton strategies."""

    STRAIGHT_SKELETON = "straight_skeleton"
    CHORDAL_AXIS = "chordal_axis"
    VORONOI = "voronoi"

    @classmethod
    def parse(cls, value: Union["SkeletonAlgorithm", str]) -> "SkeletonAlgorithm":
        """
        Accept an enum member, its value or its name, case-insensitively.
        Dashes and spaces are treated as underscores ("chordal-axis").
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Unknown skeleton algorithm: {value!r}")
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        aliases = {"straight": cls.STRAIGHT_SKELETON, "chordal": cls.CHORDAL_AXIS}
        if key in aliases:
            return aliases[key]
        raise ValueError(
            f"Unknown skeleton algorithm {value!r}; expected one of "
            f"{[m.value for m in cls]}"
        )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
@dataclass
class SkeletonOptions:
    tolerance: Optional[float] = None  # absolute; None = 1e-7 x bbox diagonal
    # Straight skeleton
    max_events: Optional[int] = None  # None = 20*n*n + 100
    # Chordal axis
    terminal_branches: bool = True
    chordal_min_branch_length: float = 0.0
    # Voronoi
    voronoi_spacing: Optional[float] = None  # None = factor x mean edge length
    voronoi_spacing_factor: float = 0.2
    voronoi_clip: str = "segment"  # or "endpoints", "midpoint"
    voronoi_prune_factor: float = 0.5
    voronoi_max_prune_passes: int = 50

    def validate(self) -> None:
        if self.tolerance is not None and self.tolerance <= 0:
            raise ValueError("tolerance must be > 0")
        if self.max_events is not None and self.max_events < 1:
            raise ValueError("max_events must be >= 1")
        if self.chordal_min_branch_length < 0:
            raise ValueError("chordal_min_branch_length must be >= 0")
        if self.voronoi_spacing is not None and self.voronoi_spacing <= 0:
            raise ValueError("voronoi_spacing must be > 0")
        if self.voronoi_spacing_factor <= 0:
            raise ValueError("voronoi_spacing_factor must be > 0")
        if self.voronoi_clip not in CLIP_MODES:
            raise ValueError(f"voronoi_clip must be one of {CLIP_MODES}")
        if self.voronoi_prune_factor < 0:
            raise ValueError("voronoi_prune_factor must be >= 0")
        if self.voronoi_max_prune_passes < 0:
            raise ValueError("voronoi_max_prune_passes must be >= 0")


def _run_straight(V: np.ndarray, o: SkeletonOptions) -> Skeleton:
    return straight_skeleton(V, tol=o.tolerance, max_events=o.max_events)


def _run_chordal(V: np.ndarray, o: SkeletonOptions) -> Skeleton:
    return chordal_axis(
        V,
        terminal_branches=o.terminal_branches,
        min_branch_length=o.chordal_min_branch_length,
        tol=o.tolerance,
    )


def _run_voronoi(V: np.ndarray, o: SkeletonOptions) -> Skeleton:
    return voronoi_skeleton(
        V,
        spacing=o.voronoi_spacing,
        spacing_factor=o.voronoi_spacing_factor,
        clip=o.voronoi_clip,
        prune_factor=o.voronoi_prune_factor,
        max_prune_passes=o.voronoi_max_prune_passes,
        tol=o.tolerance,
    )


_DISPATCH: Dict[SkeletonAlgorithm, Callable[[np.ndarray, SkeletonOptions], Skeleton]] = {
    SkeletonAlgorithm.STRAIGHT_SKELETON: _run_straight,
    SkeletonAlgorithm.CHORDAL_AXIS: _run_chordal,
    SkeletonAlgorithm.VORONOI: _run_voronoi,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def skeletonize(
    polygon: PolygonLike,
    algorithm: Union[SkeletonAlgorithm, str] = SkeletonAlgorithm.STRAIGHT_SKELETON,
    *,
    options: Optional[SkeletonOptions] = None,
    verbose: bool = False,
    verbosity: Optional[int] = None,
) -> Skeleton:
    """
    Compute the topological skeleton of a simple polygon.

    Args:
        polygon: (N, 2) polygon vertices, implicitly closed, either
            orientation.
        algorithm: Strategy to use (default straight skeleton). Strings such
            as "voronoi" or "chordal_axis" are accepted.
        options: Per-strategy tuning; defaults to `SkeletonOptions()`.
        verbose: Shorthand for `verbosity=2`.
        verbosity: 0 = silent, 1 = info, 2 = debug. Takes precedence over
            `verbose`.

    Returns:
        Skeleton. Polygons with fewer than 3 distinct vertices or zero area
        produce an empty skeleton.

    Raises:
        ValueError: on malformed input (wrong shape, non-finite coordinates),
            unknown algorithm names or invalid options.
    """
    if verbosity is None:
        eff_verbosity = 2 if verbose else 0
    else:
        try:
            eff_verbosity = int(verbosity)
        except (TypeError, ValueError):
            eff_verbosity = 0

    def v_info(msg: str, *args: Any) -> None:
        if eff_verbosity >= 1:
            logger.info(msg, *args)

    def v_debug(msg: str, *args: Any) -> None:
        if eff_verbosity >= 2:
            logger.debug(msg, *args)

    algo = SkeletonAlgorithm.parse(algorithm)
    opts = options if options is not None else SkeletonOptions()
    opts.validate()

    V = as_vertex_array(polygon)
    v_info("Skeletonizing %s with %s", describe(V), algo.value)
    v_debug("Options: %s", opts)

    skel = _DISPATCH[algo](V, opts)

    if skel.is_empty:
        v_info("No skeleton produced (degenerate polygon or no interior edges)")
    else:
        v_info(
            "Skeleton: %d nodes, %d edges, total length %.4g",
            skel.node_count,
            skel.edge_count,
            skel.total_length,
        )
    return skel
