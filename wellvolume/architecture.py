import logging
import math
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .geometry import (
    area, bore_area_from_rate, steel_area, steel_area_from_rate
)
from .units import (
    DEPTH_UNIT, DIAMETER_UNIT, LITERS_PER_CUBIC_METER, RATE_UNIT, magnitude
)

logger = logging.getLogger(__name__)


class Role(Enum):
    CONDUCTOR: str = "conductor"
    RISER: str = "riser"
    SURFACE: str = "surface"
    INTERMEDIATE: str = "intermediate"
    PRODUCTION: str = "production"
    TIEBACK: str = "tieback"
    RESERVOIR: str = "reservoir"
    SMALL_LINER: str = "small_liner"
    UPPER_COMPLETION: str = "upper_completion"
    OPEN_HOLE: str = "open_hole"

    def __str__(self):
        return self.value

    @property
    def category(self) -> 'Category':
        return CATEGORY[self]

    @property
    def z(self) -> int:
        return Z_ORDER[self]


class Category(Enum):
    MAIN: str = "main"
    SUPPLEMENTAL: str = "supplemental"


# which class of installation each role belongs to when breaking ownership
# ties between overlapping strings
CATEGORY = {
    Role.CONDUCTOR: Category.MAIN,
    Role.SURFACE: Category.MAIN,
    Role.INTERMEDIATE: Category.MAIN,
    Role.PRODUCTION: Category.MAIN,
    Role.TIEBACK: Category.MAIN,
    Role.RISER: Category.SUPPLEMENTAL,
    Role.RESERVOIR: Category.SUPPLEMENTAL,
    Role.SMALL_LINER: Category.SUPPLEMENTAL,
    Role.UPPER_COMPLETION: Category.SUPPLEMENTAL,
    Role.OPEN_HOLE: Category.SUPPLEMENTAL,
}

# drawing priority, higher is drawn on top
Z_ORDER = {
    Role.CONDUCTOR: -1,
    Role.RISER: 0,
    Role.OPEN_HOLE: 0,
    Role.SURFACE: 1,
    Role.INTERMEDIATE: 2,
    Role.PRODUCTION: 3,
    Role.TIEBACK: 3,
    Role.RESERVOIR: 4,
    Role.SMALL_LINER: 5,
    Role.UPPER_COMPLETION: 6,
}

# roles that are run inside the outer strings and never contain fluid
# volume of their own in the hole volume
INNER_ROLES = frozenset([Role.UPPER_COMPLETION])


def _optional(value, unit):
    if value is None:
        return None
    return magnitude(value, unit)


class Pipe(BaseModel):
    """
    A single string in the well bore, e.g. a casing, liner, riser or a
    section of open hole.

    Parameters
    ----------
    role: Role or str
        The role of the string in the well, see ``Role``.
    id: float or None
        The inner diameter in inches.
    od: float or None
        The outer diameter in inches.
    top: float (default 0.)
        The depth of the top of the string in meters.
    depth: float or None
        The depth of the bottom (shoe) of the string in meters.
    use: bool (default True)
        Inactive strings contribute nothing.
    eod: float or None
        Open ended displacement in liters per meter, only meaningful for
        tubing.

    Diameters and depths may also be given as ``pint`` quantities.
    """
    model_config = ConfigDict(frozen=True)

    role: Role
    id: Optional[float] = None
    od: Optional[float] = None
    top: float = 0.
    depth: Optional[float] = None
    use: bool = True
    eod: Optional[float] = None

    @field_validator('id', 'od', mode='before')
    @classmethod
    def _diameter(cls, v):
        return _optional(v, DIAMETER_UNIT)

    @field_validator('depth', mode='before')
    @classmethod
    def _depth(cls, v):
        return _optional(v, DEPTH_UNIT)

    @field_validator('top', mode='before')
    @classmethod
    def _top(cls, v):
        return 0. if v is None else magnitude(v, DEPTH_UNIT)

    @field_validator('eod', mode='before')
    @classmethod
    def _eod(cls, v):
        return _optional(v, RATE_UNIT)

    @classmethod
    def from_catalog(cls, catalog, role, id, depth, top=0., use=True):
        """
        Build a pipe, looking up its outer diameter from the casing sizes in
        the ``catalog``.
        """
        role = Role(role)
        return cls(
            role=role, id=id, od=catalog.od_for(role, id), top=top,
            depth=depth, use=use
        )

    @property
    def category(self) -> Category:
        return CATEGORY[self.role]

    @property
    def bottom(self) -> float:
        return math.nan if self.depth is None else self.depth

    @property
    def active(self) -> bool:
        """
        Whether the string takes part in the volume calculations.
        """
        return (
            self.use
            and math.isfinite(self.top)
            and math.isfinite(self.bottom)
            and self.bottom > self.top
        )

    @property
    def id_value(self) -> float:
        """
        The inner diameter used to rank overlapping strings, infinite when
        the inner diameter is unusable so that the string never wins.
        """
        if self.id is None or not math.isfinite(self.id) or self.id <= 0:
            return math.inf
        return self.id

    @property
    def area(self) -> float:
        return area(self.id)

    @property
    def physical_length(self) -> Optional[float]:
        if not math.isfinite(self.bottom):
            return None
        return max(0., self.bottom - self.top)

    def covers(self, start: float, end: float) -> bool:
        return self.active and self.bottom > start and self.top < end


class InnerSection(BaseModel):
    """
    A depth interval of an inner string with a constant cross section, with
    areas in square meters.
    """
    model_config = ConfigDict(frozen=True)

    top: float
    bottom: float
    bore_area: float
    od_area: float
    steel_area: float
    name: Optional[str] = None

    @property
    def length(self) -> float:
        return self.bottom - self.top


class DrillPipeSection(BaseModel):
    """
    A length of drill pipe of one size.

    Parameters
    ----------
    length: float
        The length of the section in meters.
    l_per_m: float or None
        The bore capacity in liters per meter.
    od: float or None
        The outer diameter in inches.
    id: float or None
        The inner diameter in inches, only used when ``l_per_m`` is missing.
    eod: float or None
        The open ended displacement in liters per meter. When missing it's
        derived from ``od`` and ``l_per_m``.
    size: int or None
        The index of the size in the drill pipe catalog.
    name: str or None
    """
    model_config = ConfigDict(frozen=True)

    length: float = 0.
    l_per_m: Optional[float] = None
    od: Optional[float] = None
    id: Optional[float] = None
    eod: Optional[float] = None
    size: Optional[int] = None
    name: Optional[str] = None

    @field_validator('od', 'id', mode='before')
    @classmethod
    def _diameter(cls, v):
        return _optional(v, DIAMETER_UNIT)

    @field_validator('l_per_m', 'eod', mode='before')
    @classmethod
    def _rate(cls, v):
        return _optional(v, RATE_UNIT)

    @field_validator('length', mode='before')
    @classmethod
    def _length(cls, v):
        return 0. if v is None else magnitude(v, DEPTH_UNIT)

    @property
    def bore_area(self) -> float:
        bore = bore_area_from_rate(self.l_per_m)
        return bore if bore > 0 else area(self.id)

    @property
    def od_area(self) -> float:
        return area(self.od)

    @property
    def steel_area(self) -> float:
        """
        Steel area in square meters, preferring the catalogued open ended
        displacement.
        """
        if self.eod is not None and math.isfinite(self.eod) and self.eod > 0:
            return self.eod / LITERS_PER_CUBIC_METER
        if bore_area_from_rate(self.l_per_m) > 0:
            return steel_area_from_rate(self.od, self.l_per_m)
        return steel_area(self.od, self.id)


class DrillString(BaseModel):
    """
    Drill pipe run from surface, made up of sections of different sizes with
    the first section at the top.
    """
    model_config = ConfigDict(frozen=True)

    sections: Tuple[DrillPipeSection, ...] = ()
    mode: Literal["drillpipe"] = "drillpipe"

    @classmethod
    def from_catalog(cls, catalog, pipes):
        """
        Build a drill string from ``(size, length)`` pairs where ``size`` is
        the index of the size in the ``catalog.drillpipe`` list.
        """
        sections = []
        for size, length in pipes:
            entry = catalog.drillpipe[size]
            sections.append(DrillPipeSection(
                size=size, name=entry.name, length=length,
                l_per_m=entry.l_per_m, od=entry.od, id=entry.id,
                eod=entry.eod
            ))
        return cls(sections=tuple(sections))

    def inner_sections(self) -> Tuple[InnerSection, ...]:
        result = []
        cumulative = 0.
        for i, section in enumerate(self.sections):
            length = section.length
            if not math.isfinite(length) or length <= 0:
                logger.debug(
                    f"Skipping drill pipe section {i}: length {length}"
                )
                continue
            result.append(InnerSection(
                top=cumulative,
                bottom=cumulative + length,
                bore_area=section.bore_area,
                od_area=section.od_area,
                steel_area=section.steel_area,
                name=section.name
            ))
            cumulative += length
        return tuple(result)

    @property
    def shoe(self) -> float:
        sections = self.inner_sections()
        return sections[-1].bottom if sections else 0.


class TubingSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[float] = None
    od: Optional[float] = None
    top: float = 0.
    depth: Optional[float] = None
    eod: Optional[float] = None
    name: Optional[str] = None

    @field_validator('id', 'od', mode='before')
    @classmethod
    def _diameter(cls, v):
        return _optional(v, DIAMETER_UNIT)

    @field_validator('depth', mode='before')
    @classmethod
    def _depth(cls, v):
        return _optional(v, DEPTH_UNIT)

    @field_validator('top', mode='before')
    @classmethod
    def _top(cls, v):
        return 0. if v is None else magnitude(v, DEPTH_UNIT)

    @field_validator('eod', mode='before')
    @classmethod
    def _eod(cls, v):
        return _optional(v, RATE_UNIT)

    @property
    def steel_area(self) -> float:
        if self.eod is not None and math.isfinite(self.eod) and self.eod > 0:
            return self.eod / LITERS_PER_CUBIC_METER
        return steel_area(self.od, self.id)


class TubingString(BaseModel):
    """
    Production tubing, a single (possibly tapered) string occupying one
    contiguous depth interval.
    """
    model_config = ConfigDict(frozen=True)

    sections: Tuple[TubingSection, ...] = ()
    mode: Literal["tubing"] = "tubing"

    @classmethod
    def single(cls, id, od, depth, top=0., eod=None):
        return cls(sections=(
            TubingSection(id=id, od=od, top=top, depth=depth, eod=eod),
        ))

    @classmethod
    def from_pipes(cls, pipes):
        """
        Collect the active ``upper_completion`` pipes of a pipe list into a
        tubing string.
        """
        return cls(sections=tuple(
            TubingSection(
                id=p.id, od=p.od, top=p.top, depth=p.depth, eod=p.eod
            )
            for p in pipes
            if p.role is Role.UPPER_COMPLETION and p.active
        ))

    @classmethod
    def from_catalog(cls, catalog, tubings):
        """
        Build a tapered tubing string from ``(size, length)`` pairs, the top
        of each section being the shoe of the one above.
        """
        sections = []
        top = 0.
        for size, length in tubings:
            entry = catalog.tubing[size]
            sections.append(TubingSection(
                id=entry.id, od=entry.od, top=top, depth=top + length,
                eod=entry.eod, name=entry.name
            ))
            top += length
        return cls(sections=tuple(sections))

    def inner_sections(self) -> Tuple[InnerSection, ...]:
        result = []
        for i, section in enumerate(self.sections):
            top = section.top
            bottom = math.nan if section.depth is None else section.depth
            if not (math.isfinite(top) and math.isfinite(bottom)) or bottom <= top:
                logger.debug(
                    f"Skipping tubing section {i}: top {top}, depth {bottom}"
                )
                continue
            result.append(InnerSection(
                top=top,
                bottom=bottom,
                bore_area=area(section.id),
                od_area=area(section.od),
                steel_area=section.steel_area,
                name=section.name
            ))
        return tuple(sorted(result, key=lambda s: s.top))

    @property
    def shoe(self) -> float:
        sections = self.inner_sections()
        return max(s.bottom for s in sections) if sections else 0.


class DrawItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    id: Optional[float] = None
    od: Optional[float] = None
    top: float
    bottom: float
    z: int


def draw_list(pipes: List[Pipe]) -> List[DrawItem]:
    """
    The active strings with the drawing priority of their role, for
    rendering a schematic of the well.
    """
    return [
        DrawItem(
            role=p.role, id=p.id, od=p.od, top=p.top, bottom=p.bottom,
            z=Z_ORDER[p.role]
        )
        for p in pipes
        if p.active
    ]


def deepest_shoe(pipes: List[Pipe]) -> Optional[float]:
    depths = [p.bottom for p in pipes if p.active]
    return max(depths) if depths else None
