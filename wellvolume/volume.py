import logging
from typing import List, Optional

from pydantic import BaseModel

from .architecture import DrawItem, Role, deepest_shoe, draw_list
from .breakdown import breakdown_by_casing
from .catalog import validate_fit
from .displacement import InnerStringVolumes, compute_inner_string
from .geometry import split_length
from .segment import (
    as_pipes, point_of_interest, resolve_flags, resolve_owner, segment_well
)

logger = logging.getLogger(__name__)


class PipeVolume(BaseModel):
    """
    The volume credited to one string, in cubic meters, and the length of
    the well it owns.
    """
    index: int
    role: Role
    volume: float = 0.
    included_length: float = 0.
    per_meter: float = 0.
    physical_length: Optional[float] = None
    displacement: float = 0.
    use: bool = True


class VolumeResult(BaseModel):
    total_volume: float = 0.
    gross_volume: float = 0.
    per_pipe: List[PipeVolume] = []
    poi: Optional[float] = None
    plug_above_volume: Optional[float] = None
    plug_below_volume: Optional[float] = None
    casings_to_draw: List[DrawItem] = []
    inner: Optional[InnerStringVolumes] = None

    def flat(self) -> dict:
        """
        The result as a flat dict with fixed key names, for reporting and
        for the pressure test calculator.
        """
        data = dict(
            total_volume=self.total_volume,
            plug_above_volume=self.plug_above_volume,
            plug_below_volume=self.plug_below_volume,
        )
        for mode in ('drillpipe', 'tubing'):
            inner = (
                self.inner if self.inner is not None
                and self.inner.mode == mode else None
            )
            data[f"{mode}_capacity"] = None if inner is None else (
                inner.bore_volume
            )
            for side in ('above', 'below'):
                data[f"plug_{side}_{mode}"] = _get(inner, f"bore_{side}")
                data[f"plug_{side}_{mode}_annulus"] = _get(
                    inner, f"annulus_{side}"
                )
                data[f"plug_{side}_{mode}_open_casing"] = _get(
                    inner, f"open_{side}"
                )
        data['annulus_innermost'] = _get(self.inner, 'annulus_volume')
        data['casing_volume_below_tubing_shoe'] = (
            self.inner.volume_below_shoe
            if self.inner is not None and self.inner.mode == 'tubing'
            else None
        )
        return data


def _get(inner, attr):
    return None if inner is None else getattr(inner, attr)


def compute_volumes(
    pipes,
    inner_string=None,
    poi=None,
    surface_in_use=None,
    intermediate_in_use=None,
    subtract_displacement=True,
) -> VolumeResult:
    """
    Calculate the hole volume of a well, crediting each depth interval to
    the innermost string covering it.

    Parameters
    ----------
    pipes: list of Pipe (or dicts of Pipe fields)
        The strings in the well.
    inner_string: DrillString or TubingString or None
        A string run inside the well.
    poi: float or None
        The point of interest depth in meters at which volumes are split
        into above and below components.
    surface_in_use, intermediate_in_use: bool or None
        Flags suppressing the conductor and surface strings. Derived from
        ``pipes`` when None.
    subtract_displacement: bool (default True)
        Subtract the inner string's steel displacement from the volume of
        the strings it's run in.

    Returns
    -------
    result: VolumeResult
    """
    pipes = as_pipes(pipes)
    surface_in_use, intermediate_in_use = resolve_flags(
        pipes, surface_in_use, intermediate_in_use
    )
    poi = point_of_interest(poi)

    per_pipe = [
        PipeVolume(
            index=i,
            role=p.role,
            per_meter=p.area,
            physical_length=p.physical_length,
            use=p.use
        )
        for i, p in enumerate(pipes)
    ]
    for i, p in enumerate(pipes):
        if p.use and not p.active:
            logger.debug(
                f"Skipping pipe {i} ({p.role}): top {p.top}, depth {p.depth}"
            )

    total, above, below = 0., 0., 0.
    for start, end in segment_well(pipes):
        owner = resolve_owner(
            pipes, start, end, surface_in_use, intermediate_in_use
        )
        if owner is None:
            continue
        i, pipe = owner
        length = end - start
        volume = pipe.area * length

        total += volume
        per_pipe[i].volume += volume
        per_pipe[i].included_length += length

        if poi is not None:
            length_above, length_below = split_length(start, end, poi)
            above += pipe.area * length_above
            below += pipe.area * length_below

    gross = total
    inner = None
    if inner_string is not None:
        inner = compute_inner_string(
            pipes, inner_string, poi, surface_in_use, intermediate_in_use
        )
        if subtract_displacement:
            for i, displaced in inner.displacement_by_pipe.items():
                per_pipe[i].displacement = displaced
                per_pipe[i].volume -= displaced
            total -= inner.displacement_volume
            if poi is not None:
                above -= inner.displacement_above
                below -= inner.displacement_below

    return VolumeResult(
        total_volume=total,
        gross_volume=gross,
        per_pipe=per_pipe,
        poi=poi,
        plug_above_volume=above if poi is not None else None,
        plug_below_volume=below if poi is not None else None,
        casings_to_draw=draw_list(pipes),
        inner=inner
    )


class Well:
    def __init__(
        self,
        pipes,
        name=None,
        surface_in_use=None,
        intermediate_in_use=None,
    ):
        """
        A well bore made up of a number of strings, e.g. conductor, casings,
        liners and open hole.

        Parameters
        ----------
        pipes: list of Pipe (or dicts of Pipe fields)
            The strings in the well.
        name: str
            The name of the well.
        surface_in_use, intermediate_in_use: bool or None
            Flags suppressing the conductor and surface strings, derived
            from the pipes when None.
        """
        self.pipes = tuple(as_pipes(pipes))
        self.name = name
        self.surface_in_use, self.intermediate_in_use = resolve_flags(
            self.pipes, surface_in_use, intermediate_in_use
        )

    def volumes(self, inner_string=None, poi=None, subtract_displacement=True):
        return compute_volumes(
            self.pipes,
            inner_string=inner_string,
            poi=poi,
            surface_in_use=self.surface_in_use,
            intermediate_in_use=self.intermediate_in_use,
            subtract_displacement=subtract_displacement
        )

    def breakdown(self, inner_string):
        return breakdown_by_casing(
            self.pipes, inner_string,
            surface_in_use=self.surface_in_use,
            intermediate_in_use=self.intermediate_in_use
        )

    def validate_fit(self, catalog):
        return validate_fit(self.pipes, catalog)

    def draw_list(self):
        return draw_list(self.pipes)

    @property
    def deepest_shoe(self):
        return deepest_shoe(self.pipes)
