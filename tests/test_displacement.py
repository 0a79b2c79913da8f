import math

import pytest

from wellvolume.architecture import (
    DrillPipeSection, DrillString, Pipe, TubingSection, TubingString
)
from wellvolume.catalog import load_catalog
from wellvolume.displacement import compute_inner_string
from wellvolume.geometry import steel_area
from wellvolume.volume import compute_volumes


def area(diameter):
    return math.pi * (diameter / 2 * 0.0254) ** 2


def test_drill_string(riser_production, drill_string_900):
    volumes = compute_inner_string(riser_production, drill_string_900)
    assert volumes.mode == 'drillpipe'
    assert volumes.shoe == pytest.approx(900)
    assert volumes.length == pytest.approx(900)
    assert volumes.bore_volume == pytest.approx(0.013128 * 900)
    assert volumes.annulus_volume == pytest.approx(
        (area(7.725) - area(5.875)) * 800
        + (area(8.535) - area(5.875)) * 100
    )
    assert volumes.displacement_volume == pytest.approx(0.004739 * 900)
    assert volumes.open_volume == pytest.approx(area(8.535) * 2100)
    assert volumes.volume_below_shoe == pytest.approx(area(8.535) * 2100)
    assert volumes.displacement_by_pipe == pytest.approx({
        0: 0.004739 * 800,
        1: 0.004739 * 100,
    })
    assert volumes.bore_above is None


@pytest.mark.parametrize(
    "l_per_m, eod",
    [
        # 5 7/8" OD is 17.489 L/m of steel and bore together
        (13.128, 4.361),
        (13.1, 4.389),
    ],
)
def test_steel_from_capacity_matches_catalogued(
    riser_production, l_per_m, eod
):
    catalogued = DrillString(sections=[
        DrillPipeSection(length=900, l_per_m=l_per_m, od=5.875, eod=eod)
    ])
    derived = DrillString(sections=[
        DrillPipeSection(length=900, l_per_m=l_per_m, od=5.875)
    ])
    displaced = compute_inner_string(
        riser_production, derived
    ).displacement_volume
    assert displaced == pytest.approx(eod / 1000 * 900, rel=1e-3)
    assert displaced == pytest.approx(
        compute_inner_string(
            riser_production, catalogued
        ).displacement_volume,
        rel=1e-3
    )


def test_steel_from_diameters(riser_production):
    drill_string = DrillString(sections=[
        DrillPipeSection(length=500, od=5., id=4.276)
    ])
    volumes = compute_inner_string(riser_production, drill_string)
    assert volumes.bore_volume == pytest.approx(area(4.276) * 500)
    assert volumes.displacement_volume == pytest.approx(
        steel_area(5., 4.276) * 500
    )


def test_poi_split(riser_production, drill_string_900):
    volumes = compute_inner_string(
        riser_production, drill_string_900, poi=850
    )
    for quantity in ('bore', 'annulus', 'displacement', 'open'):
        assert (
            getattr(volumes, f"{quantity}_above")
            + getattr(volumes, f"{quantity}_below")
        ) == pytest.approx(getattr(volumes, f"{quantity}_volume"))
    assert volumes.bore_above == pytest.approx(0.013128 * 850)
    assert volumes.annulus_below == pytest.approx(
        (area(8.535) - area(5.875)) * 50
    )


def test_poi_at_shoe(riser_production, drill_string_900):
    volumes = compute_inner_string(
        riser_production, drill_string_900, poi=900
    )
    assert volumes.bore_below == 0.
    assert volumes.annulus_below == 0.
    assert volumes.displacement_below == 0.
    assert volumes.open_above == 0.
    assert volumes.open_below == pytest.approx(area(8.535) * 2100)


def test_poi_at_surface(riser_production, drill_string_900):
    volumes = compute_inner_string(riser_production, drill_string_900, poi=0)
    for quantity in ('bore', 'annulus', 'displacement', 'open'):
        assert getattr(volumes, f"{quantity}_above") == 0.


def test_multiple_sections(riser_production):
    drill_string = DrillString(sections=[
        DrillPipeSection(length=700, l_per_m=13.128, od=5.875, eod=4.739),
        DrillPipeSection(length=0, l_per_m=9.021, od=5., eod=4.144),
        DrillPipeSection(length=300, l_per_m=9.021, od=5., eod=4.144),
    ])
    sections = drill_string.inner_sections()
    assert [(s.top, s.bottom) for s in sections] == [(0, 700), (700, 1000)]
    assert drill_string.shoe == pytest.approx(1000)

    volumes = compute_inner_string(riser_production, drill_string)
    assert volumes.bore_volume == pytest.approx(
        0.013128 * 700 + 0.009021 * 300
    )
    assert volumes.annulus_volume == pytest.approx(
        (area(7.725) - area(5.875)) * 700
        + (area(7.725) - area(5.)) * 100
        + (area(8.535) - area(5.)) * 200
    )


def test_drill_string_from_catalog(riser_production):
    catalog = load_catalog()
    drill_string = DrillString.from_catalog(catalog, [(3, 900)])
    assert drill_string.sections[0].name == '5 7/8"'
    volumes = compute_inner_string(riser_production, drill_string)
    assert volumes.bore_volume == pytest.approx(0.013128 * 900)
    assert volumes.displacement_volume == pytest.approx(0.004739 * 900)


def test_below_all_casing():
    pipes = [Pipe(role='production', id=8.535, top=0, depth=500)]
    drill_string = DrillString(sections=[
        DrillPipeSection(length=800, l_per_m=13.128, od=5.875, eod=4.739)
    ])
    volumes = compute_inner_string(pipes, drill_string)
    assert volumes.bore_volume == pytest.approx(0.013128 * 800)
    assert volumes.annulus_volume == pytest.approx(
        (area(8.535) - area(5.875)) * 500
    )
    assert volumes.displacement_volume == pytest.approx(0.004739 * 500)
    assert volumes.volume_below_shoe == 0.


def test_displacement_capped():
    pipes = [Pipe(role='small_liner', id=3., top=0, depth=100)]
    drill_string = DrillString(sections=[
        DrillPipeSection(length=100, l_per_m=13.128, od=5.875, eod=4.739)
    ])
    volumes = compute_inner_string(pipes, drill_string)
    assert volumes.annulus_volume == 0.
    assert volumes.displacement_volume == pytest.approx(area(3.) * 100)

    result = compute_volumes(pipes, inner_string=drill_string)
    assert result.total_volume == pytest.approx(0.)


@pytest.fixture
def production_tubing():
    return TubingString.single(id=4.892, od=5.5, depth=2500)


def test_tubing(production_tubing):
    pipes = [Pipe(role='production', id=8.535, od=9.625, top=0, depth=3000)]
    volumes = compute_inner_string(pipes, production_tubing)
    assert volumes.mode == 'tubing'
    assert volumes.shoe == pytest.approx(2500)
    assert volumes.bore_volume == pytest.approx(area(4.892) * 2500)
    assert volumes.annulus_volume == pytest.approx(
        (area(8.535) - area(5.5)) * 2500
    )
    assert volumes.displacement_volume == pytest.approx(
        steel_area(5.5, 4.892) * 2500
    )
    assert volumes.volume_below_shoe == pytest.approx(area(8.535) * 500)

    flat = compute_volumes(pipes, inner_string=production_tubing).flat()
    assert flat['tubing_capacity'] == pytest.approx(area(4.892) * 2500)
    assert flat['casing_volume_below_tubing_shoe'] == pytest.approx(
        area(8.535) * 500
    )
    assert flat['drillpipe_capacity'] is None


def test_tubing_hung_below_surface():
    pipes = [Pipe(role='production', id=8.535, top=0, depth=3000)]
    tubing = TubingString(sections=[
        TubingSection(id=4.892, od=5.5, top=500, depth=2500)
    ])
    volumes = compute_inner_string(pipes, tubing)
    assert volumes.bore_volume == pytest.approx(area(4.892) * 2000)
    assert volumes.open_volume == pytest.approx(area(8.535) * 1000)
    assert volumes.volume_below_shoe == pytest.approx(area(8.535) * 500)


def test_tubing_from_pipes():
    pipes = [
        Pipe(role='production', id=8.535, top=0, depth=3000),
        Pipe(role='upper_completion', id=4.892, od=5.5, top=0, depth=2500),
        Pipe(
            role='upper_completion', id=3.958, od=4.5, top=0, depth=2000,
            use=False
        ),
    ]
    tubing = TubingString.from_pipes(pipes)
    assert len(tubing.sections) == 1
    assert tubing.shoe == pytest.approx(2500)


def test_tapered_tubing_from_catalog():
    catalog = load_catalog()
    tubing = TubingString.from_catalog(catalog, [(1, 1500), (0, 1000)])
    sections = tubing.inner_sections()
    assert [(s.top, s.bottom) for s in sections] == [
        (0, 1500), (1500, 2500)
    ]
    pipes = [Pipe(role='production', id=8.535, top=0, depth=3000)]
    volumes = compute_inner_string(pipes, tubing)
    assert volumes.bore_volume == pytest.approx(
        area(4.892) * 1500 + area(3.958) * 1000
    )


def test_modes_are_independent(production_tubing, drill_string_900):
    pipes = [
        Pipe(role='riser', id=7.725, od=8.625, top=0, depth=800),
        Pipe(role='production', id=8.535, od=9.625, top=800, depth=3000),
        Pipe(role='upper_completion', id=4.892, od=5.5, top=0, depth=2500),
    ]
    first = compute_volumes(pipes, inner_string=drill_string_900, poi=850)
    compute_volumes(pipes, inner_string=production_tubing, poi=850)
    second = compute_volumes(pipes, inner_string=drill_string_900, poi=850)
    assert first.model_dump() == second.model_dump()


def test_upper_completion_takes_no_outer_volume(riser_production):
    with_tubing = riser_production + [
        Pipe(role='upper_completion', id=4.892, od=5.5, top=0, depth=2500)
    ]
    assert compute_volumes(with_tubing).total_volume == pytest.approx(
        compute_volumes(riser_production).total_volume
    )


def test_empty_inner_string(riser_production):
    volumes = compute_inner_string(riser_production, DrillString())
    assert volumes.shoe == 0.
    assert volumes.bore_volume == 0.
    assert volumes.open_volume == pytest.approx(
        area(7.725) * 800 + area(8.535) * 2200
    )
