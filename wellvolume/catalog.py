"""
Size catalogs for drill pipe, tubing and casing, and the checks that need
them.

A ``Catalog`` is a read-only snapshot that's handed to whatever needs to look
up sizes. User customisation of the sizes lives in ``Definitions``, which
produces new snapshots and never changes one that's been handed out.
"""
import logging
import math
import os
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict

from .architecture import INNER_ROLES, Role
from .segment import as_pipes

logger = logging.getLogger(__name__)

PATH = os.path.dirname(__file__)
CATALOG_FILENAME = os.path.join('', *[PATH, 'data', 'catalog.yaml'])

# diameters within this are the same size
ACCURACY = 1e-6


class CasingSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: float
    od: Optional[float] = None
    drift: Optional[float] = None
    tj: Optional[float] = None
    label: Optional[str] = None


class PipeSize(BaseModel):
    """
    A drill pipe or tubing size. ``l_per_m`` is the bore capacity, ``eod``
    and ``ced`` the open and closed ended displacements, all in liters per
    meter.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    id: float
    od: float
    l_per_m: float
    eod: Optional[float] = None
    ced: Optional[float] = None


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    drillpipe: Tuple[PipeSize, ...] = ()
    tubing: Tuple[PipeSize, ...] = ()
    casing: Dict[Role, Tuple[CasingSize, ...]] = {}
    disallowed: Dict[Role, Tuple[float, ...]] = {}

    def sizes(self, role) -> Tuple[CasingSize, ...]:
        return self.casing.get(Role(role), ())

    def size(self, role, id) -> Optional[CasingSize]:
        for entry in self.sizes(role):
            if _same(entry.id, id):
                return entry
        return None

    def od_for(self, role, id) -> Optional[float]:
        """
        The outer diameter of a casing size, None if the size isn't in the
        catalog.
        """
        entry = self.size(role, id)
        return None if entry is None else entry.od

    def is_disallowed(self, role, id) -> bool:
        return any(
            _same(denied, id) for denied in self.disallowed.get(Role(role), ())
        )


def _same(a, b):
    try:
        return abs(float(a) - float(b)) < ACCURACY
    except (TypeError, ValueError):
        return False


def load_catalog(filename=None) -> Catalog:
    """
    Load a size catalog from a yaml file.

    Parameters
    ----------
    filename: str or None
        Path to the yaml file, the default catalog shipped with the package
        when None.

    Returns
    -------
    catalog: Catalog
    """
    filename = CATALOG_FILENAME if filename is None else filename
    with open(filename, 'r') as f:
        data = yaml.safe_load(f) or {}
    logger.debug(f"Loaded size catalog from {filename}")

    casing = {}
    for role, sizes in (data.get('casing') or {}).items():
        casing[Role(role)] = tuple(
            CasingSize(**{**s, 'label': s.get('label') or str(s.get('id'))})
            for s in sizes or []
        )

    catalog = Catalog(
        drillpipe=tuple(data.get('drillpipe') or ()),
        tubing=tuple(data.get('tubing') or ()),
        casing=casing,
        disallowed={
            Role(role): tuple(ids or ())
            for role, ids in (data.get('disallowed') or {}).items()
        }
    )

    # drop anything that's been listed as not selectable for its role
    return catalog.model_copy(update=dict(casing={
        role: tuple(s for s in sizes if not catalog.is_disallowed(role, s.id))
        for role, sizes in catalog.casing.items()
    }))


def _positive(value, name, required=False):
    try:
        value = float(value)
    except (TypeError, ValueError):
        value = math.nan
    if math.isfinite(value) and value > 0:
        return value
    if required:
        raise ValueError(f"Invalid {name}: must be a positive number")
    return None


class Definitions:
    def __init__(self, catalog: Catalog = None):
        """
        The size definitions a user is working with: the defaults plus any
        sizes they've added, changed or removed.

        Parameters
        ----------
        catalog: Catalog or None
            The defaults, loaded from the shipped catalog when None.
        """
        self.defaults = load_catalog() if catalog is None else catalog
        self.reset()

    def reset(self):
        self._casing = {
            role: list(sizes) for role, sizes in self.defaults.casing.items()
        }
        self._drillpipe = list(self.defaults.drillpipe)
        self._tubing = list(self.defaults.tubing)

    def upsert_casing(self, role, id, od=None, drift=None, tj=None, label=None):
        """
        Add a casing size to a role, or update it if the inner diameter is
        already defined.
        """
        role = Role(role)
        id = _positive(id, 'inner diameter', required=True)
        if self.defaults.is_disallowed(role, id):
            raise ValueError(f"Size {id} is not allowed for {role}")

        entry = CasingSize(
            id=id,
            od=_positive(od, 'outer diameter'),
            drift=_positive(drift, 'drift'),
            tj=_positive(tj, 'tool joint'),
            label=label.strip() if label and label.strip() else str(id)
        )
        sizes = self._casing.setdefault(role, [])
        for i, existing in enumerate(sizes):
            if _same(existing.id, id):
                sizes[i] = existing.model_copy(update={
                    k: v for k, v in entry.model_dump().items()
                    if v is not None
                })
                return sizes[i]
        sizes.append(entry)
        return entry

    def remove_casing(self, role, id):
        role = Role(role)
        sizes = self._casing.get(role, [])
        remaining = [s for s in sizes if not _same(s.id, id)]
        if len(remaining) == len(sizes):
            raise KeyError(f"Size {id} is not defined for {role}")
        self._casing[role] = remaining

    def _upsert_pipe(self, sizes, name, id, od, l_per_m, eod=None, ced=None):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Invalid name: must be a non-empty string")
        entry = PipeSize(
            name=name.strip(),
            id=_positive(id, 'inner diameter', required=True),
            od=_positive(od, 'outer diameter', required=True),
            l_per_m=_positive(l_per_m, 'capacity', required=True),
            eod=_positive(eod, 'open ended displacement'),
            ced=_positive(ced, 'closed ended displacement'),
        )
        for i, existing in enumerate(sizes):
            if existing.name == entry.name:
                sizes[i] = entry
                return entry
        sizes.append(entry)
        return entry

    def upsert_drillpipe(self, name, id, od, l_per_m, eod=None, ced=None):
        return self._upsert_pipe(
            self._drillpipe, name, id, od, l_per_m, eod, ced
        )

    def upsert_tubing(self, name, id, od, l_per_m, eod=None):
        return self._upsert_pipe(self._tubing, name, id, od, l_per_m, eod)

    def snapshot(self) -> Catalog:
        """
        An immutable catalog of the current definitions.
        """
        return Catalog(
            drillpipe=tuple(self._drillpipe),
            tubing=tuple(self._tubing),
            casing={
                role: tuple(sizes) for role, sizes in self._casing.items()
            },
            disallowed=dict(self.defaults.disallowed)
        )


class FitFailure(BaseModel):
    """
    An upper completion whose tool joint won't pass the drift of a string it
    is run through.
    """
    model_config = ConfigDict(frozen=True)

    role: Role
    pipe_index: int
    drift: float
    tj: float


def validate_fit(pipes, catalog: Catalog) -> List[FitFailure]:
    """
    Check the upper completion will pass through the strings containing it.

    A string contains an upper completion when its top is at or above the
    completion's top and its shoe is at or below the completion's shoe. Open
    hole has no drift and is never checked. The tool joint diameter comes
    from the ``upper_completion`` sizes in the ``catalog`` and the drift of
    each containing string from its own role's sizes; a size that isn't in
    the catalog, or has no drift or tool joint listed, isn't checked.

    Parameters
    ----------
    pipes: list of Pipe (or dicts of Pipe fields)
        All the strings in the well, including the upper completion.
    catalog: Catalog

    Returns
    -------
    failures: list of FitFailure
        Empty when everything fits.
    """
    pipes = as_pipes(pipes)
    failures = []
    for completion in pipes:
        if completion.role is not Role.UPPER_COMPLETION:
            continue
        if not completion.active:
            continue
        size = catalog.size(Role.UPPER_COMPLETION, completion.id)
        if size is None or size.tj is None:
            continue

        for i, pipe in enumerate(pipes):
            if not pipe.active or pipe.role in INNER_ROLES:
                continue
            if pipe.role is Role.OPEN_HOLE:
                continue
            if pipe.top > completion.top or pipe.bottom < completion.bottom:
                continue
            entry = catalog.size(pipe.role, pipe.id)
            if entry is None or entry.drift is None:
                continue
            if size.tj > entry.drift:
                logger.debug(
                    f"Tool joint {size.tj} won't pass {pipe.role} drift "
                    f"{entry.drift}"
                )
                failures.append(FitFailure(
                    role=pipe.role, pipe_index=i, drift=entry.drift,
                    tj=size.tj
                ))
    return failures
