from . import (
    architecture,
    breakdown,
    catalog,
    displacement,
    geometry,
    pressure,
    segment,
    units,
    volume,
)
from .version import __version__
