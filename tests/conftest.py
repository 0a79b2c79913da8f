import pytest

from wellvolume.architecture import DrillPipeSection, DrillString, Pipe


@pytest.fixture
def riser_production():
    return [
        Pipe(role='riser', id=7.725, od=8.625, top=0, depth=800),
        Pipe(role='production', id=8.535, od=9.625, top=800, depth=3000),
    ]


@pytest.fixture
def drill_string_900():
    return DrillString(sections=[
        DrillPipeSection(
            name='5 7/8"', length=900, l_per_m=13.128, od=5.875, eod=4.739
        )
    ])
