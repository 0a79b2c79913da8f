import math

from .units import LITERS_PER_CUBIC_METER, METERS_PER_INCH


def inches_to_meters(inches: float) -> float:
    """
    Convert a diameter in inches to meters, returning 0 for anything that
    isn't a finite number.
    """
    try:
        inches = float(inches)
    except (TypeError, ValueError):
        return 0.
    return inches * METERS_PER_INCH if math.isfinite(inches) else 0.


def area(diameter: float) -> float:
    """
    Calculate the cross sectional area of a circle.

    Parameters
    ----------
    diameter: float
        The diameter in inches.

    Returns
    -------
    area: float
        The area in square meters, 0 if the diameter is missing, non-finite
        or not positive.

    Examples
    --------
    >>> from wellvolume.geometry import area
    >>> area(6.276) * 100
    1.9958...
    """
    d = inches_to_meters(diameter)
    if d <= 0:
        return 0.
    return math.pi * (d / 2) ** 2


def annulus_area(outer_id: float, inner_od: float) -> float:
    """
    Calculate the area of the annulus between the inner diameter of an outer
    pipe and the outer diameter of a pipe run inside it.

    Floored at zero: an inner pipe wider than its container has no annulus.

    Parameters
    ----------
    outer_id: float
        Inner diameter of the outer (containing) pipe in inches.
    inner_od: float
        Outer diameter of the inner pipe in inches.

    Returns
    -------
    annulus_area: float
        The area in square meters.
    """
    return max(0., area(outer_id) - area(inner_od))


def bore_area_from_rate(l_per_m: float) -> float:
    """
    Bore area in square meters from a capacity in liters per meter.
    """
    try:
        l_per_m = float(l_per_m)
    except (TypeError, ValueError):
        return 0.
    if not math.isfinite(l_per_m) or l_per_m <= 0:
        return 0.
    return l_per_m / LITERS_PER_CUBIC_METER


def steel_area(od: float, id: float) -> float:
    """
    Steel cross sectional area in square meters of a pipe from its outer and
    inner diameters in inches.
    """
    od_m, id_m = inches_to_meters(od), inches_to_meters(id)
    if od_m <= 0 or od_m <= id_m:
        return 0.
    return math.pi * ((od_m / 2) ** 2 - (max(id_m, 0.) / 2) ** 2)


def steel_area_from_rate(od: float, l_per_m: float) -> float:
    """
    Steel cross sectional area of a pipe from its outer diameter and its bore
    capacity.

    The inner radius is backed out of the bore capacity, i.e.
    ``r = sqrt((l_per_m / 1000) / pi)``, so that a pipe catalogued only by its
    capacity gives the same open ended displacement as one where the
    displacement is stated explicitly.

    Parameters
    ----------
    od: float
        The outer diameter in inches.
    l_per_m: float
        The bore capacity in liters per meter.

    Returns
    -------
    steel_area: float
        The area in square meters, floored at zero.
    """
    od_m = inches_to_meters(od)
    bore = bore_area_from_rate(l_per_m)
    if od_m <= 0 or bore <= 0:
        return 0.
    radius_inner = math.sqrt(bore / math.pi)
    radius_outer = od_m / 2
    return max(0., math.pi * (radius_outer ** 2 - radius_inner ** 2))


def overlap(top_a, bottom_a, top_b, bottom_b):
    """
    The overlapping interval of two depth intervals, or None if they don't
    overlap (touching intervals don't overlap).
    """
    top, bottom = max(top_a, top_b), min(bottom_a, bottom_b)
    if bottom <= top:
        return None
    return top, bottom


def split_length(start: float, end: float, poi: float):
    """
    Split the interval ``[start, end)`` at the ``poi`` into the lengths above
    and below it.
    """
    if end <= poi:
        return end - start, 0.
    if start >= poi:
        return 0., end - start
    return poi - start, end - poi
