import math

from pint import Quantity, UnitRegistry
from pint.errors import DimensionalityError, PintError

ureg = UnitRegistry()
Q_ = ureg.Quantity

# the engine works in these units throughout
DIAMETER_UNIT = 'inch'
DEPTH_UNIT = 'meter'
RATE_UNIT = 'liter / meter'

METERS_PER_INCH = 0.0254
LITERS_PER_CUBIC_METER = 1000.


def magnitude(value, unit):
    """
    Coerce a value to a plain float in the given unit.

    Plain numbers are assumed to already be in ``unit``. ``pint`` quantities
    (or strings such as ``"7 inch"`` that ``pint`` can parse) are
    converted. Anything that can't be read as a number, or has the wrong
    dimension for ``unit``, comes back as ``nan`` so that callers can degrade
    rather than raise.

    Parameters
    ----------
    value : float | str | pint.Quantity | None
        The value to coerce.
    unit : str
        The unit the returned magnitude is expressed in.

    Returns
    -------
    magnitude : float

    Example
    -------
    >>> from wellvolume.units import magnitude, ureg
    >>> magnitude(ureg('7 inch'), 'meter')
    0.1778
    """
    if value is None:
        return math.nan
    if isinstance(value, str):
        try:
            value = Q_(value)
        except (PintError, SyntaxError, TypeError, ValueError):
            return math.nan
    if isinstance(value, Quantity):
        if value.dimensionless:
            return float(value.m_as(ureg.dimensionless))
        try:
            return float(value.to(unit).m)
        except DimensionalityError:
            # e.g. a mass where a length was expected
            return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan
