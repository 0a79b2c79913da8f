import math

import pytest

from wellvolume.architecture import Pipe, TubingString
from wellvolume.pressure import pressure_volume, selectable_volumes
from wellvolume.volume import compute_volumes


def test_pressure_volume():
    assert pressure_volume(1.0, 100, 21) == pytest.approx(4.7619, abs=1e-4)
    assert pressure_volume(0., 100, 21) == 0.


@pytest.mark.parametrize(
    "volume, dp, k",
    [
        (None, 100, 21),
        (1., math.nan, 21),
        (1., 100, 0),
        (1., 100, -21),
        (-1., 100, 21),
        (1., -100, 21),
        (1., 100, 'x'),
        (True, 100, 21),
    ],
)
def test_pressure_volume_invalid(volume, dp, k):
    assert pressure_volume(volume, dp, k) is None


def test_selectable_volumes_drillpipe(riser_production, drill_string_900):
    result = compute_volumes(riser_production, inner_string=drill_string_900)
    volumes = selectable_volumes(result)
    assert set(volumes) == {'drillpipe_capacity', 'annulus_innermost'}
    assert pressure_volume(
        volumes['drillpipe_capacity'], 100, 21
    ) == pytest.approx(0.013128 * 900 * 100 / 21)


def test_selectable_volumes_tubing():
    pipes = [Pipe(role='production', id=8.535, top=0, depth=3000)]
    tubing = TubingString.single(id=4.892, od=5.5, depth=2500)
    volumes = selectable_volumes(compute_volumes(pipes, inner_string=tubing))
    assert set(volumes) == {'tubing_capacity', 'annulus_innermost'}


def test_selectable_volumes_no_inner_string(riser_production):
    assert selectable_volumes(compute_volumes(riser_production)) == {}
