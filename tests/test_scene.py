import dataclasses

import pytest

from shockglobe.model import scene as scene_module
from shockglobe.model.scene import (
    CONTINENT_REGIONS,
    Epicenter,
    EventMarker,
    PropagationArc,
    Scene,
    SceneSnapshot,
    Severity,
    continent_dots,
    generate_continent_dots,
)


@pytest.mark.parametrize(
    "intensity,expected",
    [
        (1.0, Severity.CRITICAL),
        (0.75, Severity.CRITICAL),
        (0.74, Severity.HIGH),
        (0.5, Severity.HIGH),
        (0.3, Severity.MEDIUM),
        (0.1, Severity.LOW),
    ],
)
def test_severity_bands(intensity, expected):
    assert Severity.from_intensity(intensity) is expected
    assert EventMarker(0.0, 0.0, "x", intensity=intensity).severity is expected


def test_severity_intensity_maps_back_to_band():
    for severity in Severity:
        assert Severity.from_intensity(severity.intensity) is severity


def test_arc_point_at_endpoints():
    arc = PropagationArc(10.0, -60.0, 40.0, 0.0)
    assert arc.point_at(0.0) == (10.0, -60.0)
    assert arc.point_at(1.0) == (40.0, 0.0)
    assert arc.point_at(0.5) == pytest.approx((25.0, -30.0))


def test_records_are_frozen():
    marker = EventMarker(1.0, 2.0, "a")
    with pytest.raises(dataclasses.FrozenInstanceError):
        marker.lat = 5.0


def test_set_markers_swaps_snapshot():
    scene = Scene()
    before = scene.snapshot()
    scene.set_markers([EventMarker(1.0, 2.0, "a")])
    after = scene.snapshot()

    assert before is not after
    assert before.markers == ()
    assert len(after.markers) == 1


def test_old_snapshot_is_never_mutated():
    scene = Scene()
    scene.set_markers([EventMarker(1.0, 2.0, "a")])
    scene.set_arcs([PropagationArc(0.0, 0.0, 10.0, 10.0)])
    held = scene.snapshot()

    scene.set_markers([EventMarker(3.0, 4.0, "b"), EventMarker(5.0, 6.0, "c")])
    scene.set_epicenter(Epicenter(10.48, -66.88, "CARACAS"))

    assert [m.label for m in held.markers] == ["a"]
    assert held.epicenter is None
    # unchanged parts carry over into the new snapshot
    assert scene.snapshot().arcs == held.arcs


def test_caller_list_mutation_does_not_leak():
    markers = [EventMarker(1.0, 2.0, "a")]
    scene = Scene()
    scene.set_markers(markers)
    markers.append(EventMarker(3.0, 4.0, "b"))

    assert isinstance(scene.snapshot().markers, tuple)
    assert len(scene.snapshot().markers) == 1


def test_set_snapshot_and_clear():
    scene = Scene()
    snap = SceneSnapshot(markers=(EventMarker(0.0, 0.0, "a"),), epicenter=Epicenter(1.0, 1.0))
    scene.set_snapshot(snap)
    assert scene.snapshot() is snap

    scene.clear()
    assert scene.snapshot() == SceneSnapshot()


def test_continent_dots_are_a_singleton():
    first = continent_dots()
    assert continent_dots() is first
    assert len(first) == sum(region[4] for region in CONTINENT_REGIONS)


def test_continent_field_is_deterministic():
    assert generate_continent_dots(seed=7) == generate_continent_dots(seed=7)
    assert generate_continent_dots(seed=7) != generate_continent_dots(seed=8)


def test_continent_dots_stay_inside_their_regions():
    region = CONTINENT_REGIONS[0]
    dots = generate_continent_dots([region], seed=1)
    lat_min, lat_max, lng_min, lng_max, count = region
    assert len(dots) == count
    assert all(lat_min <= d.lat <= lat_max and lng_min <= d.lng <= lng_max for d in dots)


def test_continent_singleton_built_once(monkeypatch):
    calls = []
    real = scene_module.generate_continent_dots

    def counting(*args, **kwargs):
        calls.append(1)
        return real(*args, **kwargs)

    monkeypatch.setattr(scene_module, "_CONTINENT_DOTS", None)
    monkeypatch.setattr(scene_module, "generate_continent_dots", counting)
    scene_module.continent_dots()
    scene_module.continent_dots()
    assert len(calls) == 1
