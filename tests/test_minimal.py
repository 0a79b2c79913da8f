"""
test_minimal.py
--------------
Test things that should work with a *minimal* wellvolume install.
"""
import wellvolume as wv


def test_well():
    well = wv.volume.Well([
        wv.architecture.Pipe(role='conductor', id=28, od=30, depth=100),
        wv.architecture.Pipe(role='surface', id=18.73, od=20, depth=500),
        wv.architecture.Pipe(
            role='intermediate', id=12.415, od=13.375, depth=1500
        ),
        wv.architecture.Pipe(
            role='production', id=8.535, od=9.625, top=1400, depth=3000
        ),
    ])
    result = well.volumes(
        inner_string=wv.architecture.DrillString.from_catalog(
            wv.catalog.load_catalog(), [(2, 2000)]
        ),
        poi=1000
    )
    assert isinstance(result, wv.volume.VolumeResult)
    assert result.total_volume > 0
    assert set(result.flat()) >= set(wv.pressure.SELECTABLE_KEYS)


def test_version():
    assert isinstance(wv.__version__, str)
