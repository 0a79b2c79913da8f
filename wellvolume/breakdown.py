"""
Inner string volumes grouped by the outer string each part of it sits in,
for tabulating alongside the hole volume.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel

from .architecture import INNER_ROLES, Role
from .geometry import overlap
from .segment import as_pipes, is_candidate, ownership_key, resolve_flags
from .units import LITERS_PER_CUBIC_METER

logger = logging.getLogger(__name__)


class BreakdownRow(BaseModel):
    role: Role
    pipe_index: int
    pipe_id: Optional[float] = None
    top: float
    bottom: float
    length: float = 0.
    bore_volume: float = 0.
    annulus_volume: float = 0.

    @property
    def label(self) -> str:
        return f"{self.top:.1f}-{self.bottom:.1f}"

    @property
    def bore_l_per_m(self) -> float:
        if self.length <= 0:
            return 0.
        return self.bore_volume * LITERS_PER_CUBIC_METER / self.length

    @property
    def annulus_l_per_m(self) -> float:
        if self.length <= 0:
            return 0.
        return self.annulus_volume * LITERS_PER_CUBIC_METER / self.length


class Breakdown(BaseModel):
    mode: str
    used: bool = False
    rows: List[BreakdownRow] = []
    bore_volume: float = 0.
    annulus_volume: float = 0.
    length: float = 0.
    uncontained_length: float = 0.


def subtract_intervals(interval, claimed):
    """
    The parts of ``interval`` not covered by any of the ``claimed``
    intervals.

    >>> subtract_intervals((0, 100), [(20, 30), (50, 120)])
    [(0, 20), (30, 50)]
    """
    remaining = [interval]
    for c_top, c_bottom in claimed:
        pieces = []
        for top, bottom in remaining:
            if c_bottom <= top or c_top >= bottom:
                pieces.append((top, bottom))
                continue
            if c_top > top:
                pieces.append((top, c_top))
            if c_bottom < bottom:
                pieces.append((c_bottom, bottom))
        remaining = pieces
    return remaining


def breakdown_by_casing(
    pipes,
    inner_string,
    surface_in_use=None,
    intermediate_in_use=None,
) -> Breakdown:
    """
    Break the bore and annulus volumes of an inner string down by the outer
    string containing each part of it.

    The outer strings are processed narrowest first (ranked the same way as
    when resolving the owner of an interval for the hole volume). Each claims
    the parts of the inner string it covers that haven't already been
    claimed by a narrower string, so nested strings don't double count.

    Parameters
    ----------
    pipes: list of Pipe
        The outer strings.
    inner_string: DrillString or TubingString
        The string run inside the well.
    surface_in_use, intermediate_in_use: bool or None
        Suppression flags, derived from ``pipes`` when None.

    Returns
    -------
    breakdown: Breakdown
        One row per outer string and contiguous depth range it contains,
        sorted by depth.
    """
    pipes = as_pipes(pipes)
    surface_in_use, intermediate_in_use = resolve_flags(
        pipes, surface_in_use, intermediate_in_use
    )
    sections = inner_string.inner_sections()
    string_length = sum(s.length for s in sections)

    ranked = sorted(
        [
            (i, p) for i, p in enumerate(pipes)
            if p.active and p.role not in INNER_ROLES
        ],
        key=lambda item: ownership_key(item[1], item[0])
    )

    claimed = []
    rows = []
    for i, pipe in ranked:
        pieces = []
        for section in sections:
            interval = overlap(
                section.top, section.bottom, pipe.top, pipe.bottom
            )
            if interval is None:
                continue
            for top, bottom in subtract_intervals(interval, claimed):
                if not is_candidate(
                    pipe, top, bottom, surface_in_use, intermediate_in_use
                ):
                    continue
                pieces.append((top, bottom, section))

        pieces.sort(key=lambda piece: piece[0])
        for top, bottom, section in pieces:
            length = bottom - top
            bore = section.bore_area * length
            annulus = max(0., pipe.area - section.od_area) * length
            if rows and rows[-1].pipe_index == i and rows[-1].bottom == top:
                row = rows[-1]
                row.bottom = bottom
                row.length += length
                row.bore_volume += bore
                row.annulus_volume += annulus
            else:
                rows.append(BreakdownRow(
                    role=pipe.role, pipe_index=i, pipe_id=pipe.id,
                    top=top, bottom=bottom, length=length,
                    bore_volume=bore, annulus_volume=annulus
                ))
            claimed.append((top, bottom))

    rows = sorted(
        [row for row in rows if row.length > 0], key=lambda row: row.top
    )
    length = sum(row.length for row in rows)
    if string_length - length > 0:
        logger.debug(
            f"{string_length - length} m of the {inner_string.mode} string "
            "is outside the outer strings"
        )

    return Breakdown(
        mode=inner_string.mode,
        used=bool(rows),
        rows=rows,
        bore_volume=sum(row.bore_volume for row in rows),
        annulus_volume=sum(row.annulus_volume for row in rows),
        length=length,
        uncontained_length=max(0., string_length - length)
    )


def drillpipe_breakdown(pipes, drill_string, **kwargs) -> Breakdown:
    assert drill_string.mode == "drillpipe", "Expected a drill string"
    return breakdown_by_casing(pipes, drill_string, **kwargs)


def tubing_breakdown(pipes, tubing, **kwargs) -> Breakdown:
    assert tubing.mode == "tubing", "Expected a tubing string"
    return breakdown_by_casing(pipes, tubing, **kwargs)
