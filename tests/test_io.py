import json
import math

import pytest

from shockglobe.config import DEFAULT_SCENARIO_PATH
from shockglobe.model.io import (
    ScenarioError,
    arcs_from_connections,
    epicenter_from_event,
    load_scenario,
    markers_from_events,
    markers_from_heatmap,
    save_scenario,
    snapshot_from_dict,
)
from shockglobe.model.scene import Epicenter, EventMarker, PropagationArc, SceneSnapshot, Severity


def test_markers_from_heatmap():
    rows = [
        {"country": "Venezuela", "countryCode": "VE", "lat": 6.4, "lng": -66.6, "shockIntensity": -0.8, "direction": "negative"},
        {"countryCode": "GY", "lat": 4.9, "lng": -58.9, "shockIntensity": 0.3},
    ]
    markers = markers_from_heatmap(rows)

    assert [m.label for m in markers] == ["Venezuela", "GY"]
    assert markers[0].intensity == pytest.approx(0.8)
    assert markers[0].severity is Severity.CRITICAL
    assert markers[0].category == "negative"
    assert markers[1].severity is Severity.MEDIUM


def test_markers_from_events_with_nested_location_and_band_names():
    events = [
        {"title": "Port strike", "type": "SUPPLY_CHAIN", "severity": "high", "location": {"lat": 51.9, "lng": 4.5}},
        {"title": "Quake", "type": "DISASTER", "severity": 9, "lat": 35.7, "lng": 139.7},
    ]
    markers = markers_from_events(events)

    assert markers[0] == EventMarker(51.9, 4.5, "Port strike", Severity.HIGH.intensity, "SUPPLY_CHAIN")
    assert markers[1].intensity == pytest.approx(0.9)
    assert markers[1].severity is Severity.CRITICAL


@pytest.mark.parametrize(
    "bad",
    [
        {"title": "no coords"},
        {"title": "nan", "lat": math.nan, "lng": 1.0},
        {"title": "inf", "lat": 1.0, "lng": math.inf},
        {"title": "text", "lat": "north", "lng": 1.0},
        {"title": "bool", "lat": True, "lng": 1.0},
        {"title": "off the globe", "lat": 95.0, "lng": 1.0},
    ],
)
def test_invalid_coordinates_are_dropped(bad, caplog):
    good = {"title": "ok", "lat": 1.0, "lng": 2.0}
    with caplog.at_level("WARNING", logger="shockglobe"):
        markers = markers_from_events([good, bad])
    assert [m.label for m in markers] == ["ok"]
    assert "Dropped 1 of 2" in caplog.text


def test_numeric_string_coordinates_are_accepted():
    markers = markers_from_events([{"title": "x", "lat": "10.5", "lng": "-20"}])
    assert (markers[0].lat, markers[0].lng) == (10.5, -20.0)


def test_arcs_from_connections_accepts_backend_field_names():
    rows = [
        {"startLat": 10.48, "startLng": -66.88, "endLat": 38.89, "endLng": -77.03, "toLabel": "WASHINGTON", "direction": "positive", "shockIntensity": -0.6},
        {"originLat": 10.48, "originLng": -66.88, "destLat": 6.8, "destLng": -58.15},
        {"startLat": None, "startLng": -66.88, "endLat": 1.0, "endLng": 1.0},
    ]
    arcs = arcs_from_connections(rows)

    assert len(arcs) == 2
    assert arcs[0] == PropagationArc(10.48, -66.88, 38.89, -77.03, "WASHINGTON", "positive", 0.6)
    assert arcs[1].category == "negative"
    assert arcs[1].intensity == 1.0


def test_epicenter_from_event():
    event = {"title": "Caracas unrest", "location": {"lat": 10.48, "lng": -66.88, "country": "Venezuela"}}
    assert epicenter_from_event(event) == Epicenter(10.48, -66.88, "Caracas unrest")
    assert epicenter_from_event({"location": {"lat": 1.0, "lng": 2.0, "country": "VE"}}).label == "VE"
    assert epicenter_from_event(None) is None
    assert epicenter_from_event({"title": "x", "lat": math.nan, "lng": 0.0}) is None


def test_snapshot_from_dict_rejects_wrong_shapes():
    with pytest.raises(ScenarioError):
        snapshot_from_dict([1, 2, 3])
    with pytest.raises(ScenarioError):
        snapshot_from_dict({"markers": {"lat": 1}})


def test_snapshot_from_dict_missing_keys_mean_empty():
    assert snapshot_from_dict({}) == SceneSnapshot()


def test_load_scenario_missing_file(tmp_path):
    with pytest.raises(ScenarioError):
        load_scenario(str(tmp_path / "nope.json"))


def test_load_scenario_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(ScenarioError):
        load_scenario(str(path))


def test_load_scenario_undecodable_bytes(tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"markers": [], "label": "\xff\xfe"}')
    with pytest.raises(ScenarioError):
        load_scenario(str(path))


@pytest.mark.parametrize("epicenter", ["CARACAS", [10.48, -66.88], 42])
def test_non_object_epicenter_is_a_scenario_error(tmp_path, epicenter):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps({"markers": [], "arcs": [], "epicenter": epicenter}), encoding="utf-8")
    with pytest.raises(ScenarioError):
        load_scenario(str(path))


def test_null_epicenter_is_allowed():
    assert snapshot_from_dict({"epicenter": None}).epicenter is None


def test_converters_skip_non_object_records():
    assert epicenter_from_event("CARACAS") is None
    assert epicenter_from_event([1.0, 2.0]) is None
    markers = markers_from_events(["oops", {"title": "ok", "lat": 1.0, "lng": 2.0}])
    assert [m.label for m in markers] == ["ok"]


def test_save_then_load_keeps_scene(tmp_path):
    snapshot = SceneSnapshot(
        markers=(EventMarker(15.5, 114.2, "South China Sea", 0.5, "GEOPOLITICAL"),),
        arcs=(PropagationArc(10.48, -66.88, 51.5, -0.12, "LONDON", "mixed", 0.4),),
        epicenter=Epicenter(10.48, -66.88, "CARACAS"),
    )
    path = tmp_path / "scenario.json"
    save_scenario(snapshot, str(path))

    assert "version" in json.loads(path.read_text(encoding="utf-8"))
    assert load_scenario(str(path)) == snapshot


def test_bundled_default_scenario_loads():
    snapshot = load_scenario(DEFAULT_SCENARIO_PATH)
    assert len(snapshot.markers) == 8
    assert len(snapshot.arcs) == 6
    assert snapshot.epicenter is not None
    assert snapshot.epicenter.lat == pytest.approx(10.48)
