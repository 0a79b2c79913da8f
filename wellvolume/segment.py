"""
Depth segmentation and ownership of the well bore.

The strings in a well overlap one another in depth. The segmenter cuts the
well into intervals within which the set of strings covering it doesn't
change, and the ownership resolver credits each interval to exactly one
string: the innermost one.
"""
import logging
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .architecture import CATEGORY, INNER_ROLES, Category, Pipe, Role
from .units import DEPTH_UNIT, magnitude

logger = logging.getLogger(__name__)


def point_of_interest(poi) -> Optional[float]:
    """
    The point of interest depth in meters, None when it's disabled or not a
    finite number.
    """
    if poi is None:
        return None
    poi = magnitude(poi, DEPTH_UNIT)
    if not math.isfinite(poi):
        logger.debug("Ignoring non-finite point of interest")
        return None
    return poi


def as_pipes(pipes) -> List[Pipe]:
    """
    Accept plain records (dicts) as well as ``Pipe`` instances.
    """
    return [p if isinstance(p, Pipe) else Pipe(**p) for p in pipes]


def breakpoints(pipes: List[Pipe], extra: Iterable[float] = ()) -> List[float]:
    """
    The sorted, unique depths at which the set of covering strings can
    change.

    Parameters
    ----------
    pipes: list of Pipe
        The strings in the well, inactive ones are ignored.
    extra: iterable of floats
        Additional depths to cut at, e.g. a point of interest or the
        boundaries of an inner string. Non-finite values are ignored.

    Returns
    -------
    points: list of floats
        Always includes 0 (surface).
    """
    points = [0.]
    for pipe in pipes:
        if not pipe.active:
            continue
        points.extend((pipe.top, pipe.bottom))
    points.extend(
        point for point in extra
        if point is not None and math.isfinite(point)
    )
    return np.unique(np.array(points, dtype=float)).tolist()


def segments(points: List[float]) -> List[Tuple[float, float]]:
    return [
        (start, end)
        for start, end in zip(points[:-1], points[1:])
        if end > start
    ]


def segment_well(pipes, extra=()):
    return segments(breakpoints(pipes, extra))


def in_use_flags(pipes: List[Pipe]) -> Tuple[bool, bool]:
    """
    Whether a surface and an intermediate string are in use. A string only
    needs to be switched on to count, it needn't have a usable diameter.
    """
    surface = any(p.use and p.role is Role.SURFACE for p in pipes)
    intermediate = any(p.use and p.role is Role.INTERMEDIATE for p in pipes)
    return surface, intermediate


def resolve_flags(pipes, surface_in_use=None, intermediate_in_use=None):
    surface, intermediate = in_use_flags(pipes)
    return (
        surface if surface_in_use is None else bool(surface_in_use),
        intermediate if intermediate_in_use is None
        else bool(intermediate_in_use)
    )


def is_suppressed(
    pipe: Pipe, surface_in_use: bool, intermediate_in_use: bool
) -> bool:
    """
    A conductor is no longer exposed to fluid once a surface string is in
    use, likewise a surface string once an intermediate string is in use.
    """
    if pipe.role is Role.CONDUCTOR and surface_in_use:
        return True
    if pipe.role is Role.SURFACE and intermediate_in_use:
        return True
    return False


def is_candidate(
    pipe: Pipe,
    start: float,
    end: float,
    surface_in_use: bool = False,
    intermediate_in_use: bool = False
) -> bool:
    if pipe.role in INNER_ROLES:
        return False
    if not pipe.covers(start, end):
        return False
    return not is_suppressed(pipe, surface_in_use, intermediate_in_use)


def ownership_key(pipe: Pipe, index: int) -> Tuple[float, int, int]:
    """
    Sort key ranking strings competing for the same interval, the first
    wins.

    The narrowest string claims the space whether it's part of the main
    well bore or a supplemental installation. Where the inner diameters are
    equal a main well bore string wins, then the order the strings were
    given in.
    """
    return (
        pipe.id_value,
        0 if CATEGORY[pipe.role] is Category.MAIN else 1,
        index
    )


def candidates(
    pipes, start, end, surface_in_use=False, intermediate_in_use=False
) -> List[Tuple[int, Pipe]]:
    """
    The strings competing for ``[start, end)``, ranked by ``ownership_key``.
    """
    return sorted(
        [
            (i, pipe) for i, pipe in enumerate(pipes)
            if is_candidate(
                pipe, start, end, surface_in_use, intermediate_in_use
            )
        ],
        key=lambda item: ownership_key(item[1], item[0])
    )


def resolve_owner(
    pipes: List[Pipe],
    start: float,
    end: float,
    surface_in_use: bool = False,
    intermediate_in_use: bool = False
) -> Optional[Tuple[int, Pipe]]:
    """
    Find the string that owns the interval ``[start, end)``.

    Parameters
    ----------
    pipes: list of Pipe
        All the strings in the well.
    start, end: float
        The interval, which should be a segment (or part of one) so that the
        covering strings are constant across it.
    surface_in_use, intermediate_in_use: bool
        Flags for suppressing the conductor and surface strings.

    Returns
    -------
    owner: (int, Pipe) or None
        The index in ``pipes`` and the owning string, None if no string
        covers the interval.
    """
    ranked = candidates(
        pipes, start, end, surface_in_use, intermediate_in_use
    )
    return ranked[0] if ranked else None
