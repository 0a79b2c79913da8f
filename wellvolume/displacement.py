"""
Volumes associated with an inner string (drill pipe or tubing) run inside
the well bore: the bore of the string, the annulus around it and the steel
it displaces from the outer strings.
"""
import logging
from collections import defaultdict
from typing import Dict, Optional

from pydantic import BaseModel

from .segment import (
    as_pipes, point_of_interest, resolve_flags, resolve_owner, segment_well
)

logger = logging.getLogger(__name__)

QUANTITIES = ('bore', 'annulus', 'displacement', 'open')


class InnerStringVolumes(BaseModel):
    """
    Volumes in cubic meters for an inner string.

    ``open`` is the outer string volume not occupied by the inner string,
    i.e. above its top and below its shoe. The ``*_above`` and ``*_below``
    splits are None when no point of interest is set.
    """
    mode: str
    shoe: float
    length: float
    bore_volume: float = 0.
    annulus_volume: float = 0.
    displacement_volume: float = 0.
    open_volume: float = 0.
    volume_below_shoe: float = 0.
    displacement_by_pipe: Dict[int, float] = {}
    poi: Optional[float] = None
    bore_above: Optional[float] = None
    bore_below: Optional[float] = None
    annulus_above: Optional[float] = None
    annulus_below: Optional[float] = None
    displacement_above: Optional[float] = None
    displacement_below: Optional[float] = None
    open_above: Optional[float] = None
    open_below: Optional[float] = None


def section_at(sections, start, end):
    for section in sections:
        if section.top <= start and section.bottom >= end:
            return section
    return None


def compute_inner_string(
    pipes,
    inner_string,
    poi=None,
    surface_in_use=None,
    intermediate_in_use=None,
) -> InnerStringVolumes:
    """
    Walk the well in depth and work out the volumes in and around an inner
    string.

    The well is cut at the outer strings' tops and shoes, the inner string's
    section boundaries and the point of interest. For each interval the
    owning outer string is resolved the same way as for the hole volume, and:

    - bore volume is the inner string's bore area times the length
    - annulus volume is the owner's inner area less the inner string's outer
      area (floored at zero) times the length
    - displacement is the steel area times the length, capped at the owner's
      volume in the interval
    - open volume is the owner's volume where the inner string is absent

    Parameters
    ----------
    pipes: list of Pipe
        The outer strings.
    inner_string: DrillString or TubingString
        The string run inside the well.
    poi: float or None
        The point of interest depth in meters. The whole of an interval
        starting at or below the point of interest is classified below it.
    surface_in_use, intermediate_in_use: bool or None
        Suppression flags, derived from ``pipes`` when None.

    Returns
    -------
    volumes: InnerStringVolumes
    """
    pipes = as_pipes(pipes)
    surface_in_use, intermediate_in_use = resolve_flags(
        pipes, surface_in_use, intermediate_in_use
    )
    poi = point_of_interest(poi)
    sections = inner_string.inner_sections()
    shoe = max((s.bottom for s in sections), default=0.)

    extra = [s.top for s in sections] + [s.bottom for s in sections]
    if poi is not None:
        extra.append(poi)

    totals = defaultdict(float)
    above, below = defaultdict(float), defaultdict(float)
    by_pipe = defaultdict(float)
    below_shoe = 0.

    for start, end in segment_well(pipes, extra):
        length = end - start
        owner = resolve_owner(
            pipes, start, end, surface_in_use, intermediate_in_use
        )
        owner_area = owner[1].area if owner is not None else 0.
        gross = owner_area * length

        section = section_at(sections, start, end)
        if section is None:
            quantities = dict(open=gross)
            if start >= shoe:
                below_shoe += gross
        else:
            displaced = min(section.steel_area * length, gross)
            quantities = dict(
                bore=section.bore_area * length,
                annulus=max(0., owner_area - section.od_area) * length,
                displacement=displaced,
            )
            if owner is not None and displaced > 0:
                by_pipe[owner[0]] += displaced
            elif owner is None:
                logger.debug(
                    f"No outer string around the inner string from {start} "
                    f"to {end}"
                )

        side = None if poi is None else (below if start >= poi else above)
        for k, v in quantities.items():
            totals[k] += v
            if side is not None:
                side[k] += v

    splits = {}
    if poi is not None:
        for k in QUANTITIES:
            splits[f"{k}_above"] = above[k]
            splits[f"{k}_below"] = below[k]

    return InnerStringVolumes(
        mode=inner_string.mode,
        shoe=shoe,
        length=sum(s.length for s in sections),
        bore_volume=totals['bore'],
        annulus_volume=totals['annulus'],
        displacement_volume=totals['displacement'],
        open_volume=totals['open'],
        volume_below_shoe=below_shoe,
        displacement_by_pipe=dict(by_pipe),
        poi=poi,
        **splits
    )
