import math

# the volumes a pressure test can be run against, by the key they're
# reported under in ``VolumeResult.flat()``
SELECTABLE_KEYS = (
    'drillpipe_capacity',
    'tubing_capacity',
    'annulus_innermost',
)


def _valid(value):
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def pressure_volume(volume_m3, pressure_delta, k_value):
    """
    The volume of fluid in liters to pump to pressure up a volume.

    ``V_liters = (V_m3 * dP_bar) / k``

    Parameters
    ----------
    volume_m3: float
        The volume being pressured up in cubic meters.
    pressure_delta: float
        The pressure increase in bar.
    k_value: float
        The compressibility constant of the fluid.

    Returns
    -------
    volume: float or None
        None if any input is invalid, negative, or ``k_value`` isn't
        positive.
    """
    if not all(_valid(v) for v in (volume_m3, pressure_delta, k_value)):
        return None
    if volume_m3 < 0 or pressure_delta < 0 or k_value <= 0:
        return None
    return volume_m3 * pressure_delta / k_value


def selectable_volumes(result):
    """
    The named volumes in a ``VolumeResult`` that are available to a
    pressure test.
    """
    flat = result.flat()
    return {
        k: flat[k] for k in SELECTABLE_KEYS
        if flat.get(k) is not None
    }
