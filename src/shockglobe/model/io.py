"""
Input/Output Manager (JSON)
Ingestion boundary between the dashboard's data layer and the globe scene.

Backend payloads (heatmap rows, connection arcs, events) and scenario files are
converted to frozen scene records here. This is the only place that validates
coordinates: rows with missing or non-finite lat/lng are dropped once, at
replace time, so the render loop never has to check them per frame.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict
from importlib.metadata import version, PackageNotFoundError
from typing import Any, Iterable, Mapping, Optional

from shockglobe.model.scene import (
    Epicenter,
    EventMarker,
    PropagationArc,
    SceneSnapshot,
    Severity,
)

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("shockglobe")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class ScenarioError(ValueError):
    """Raised when a scenario file cannot be read or has the wrong shape."""


# -------------------------------------------------------------------------------
# Field helpers
# -------------------------------------------------------------------------------

def _finite(value: Any) -> Optional[float]:
    """Return value as a finite float, or None."""
    if isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return None


def _lat_lng(record: Mapping[str, Any], lat_key: str = "lat", lng_key: str = "lng") -> Optional[tuple[float, float]]:
    """Read a coordinate pair, looking into a nested ``location`` if present."""
    if not isinstance(record, Mapping):
        return None
    source = record.get("location") if isinstance(record.get("location"), Mapping) else record
    lat = _finite(source.get(lat_key))
    lng = _finite(source.get(lng_key))
    if lat is None or lng is None:
        return None
    if not (-90.0 <= lat <= 90.0):
        return None
    return lat, lng


def _intensity(record: Mapping[str, Any], default: float = 0.5) -> float:
    """
    Normalise the different severity encodings to [0, 1].

    Accepts ``shockIntensity``/``intensity`` in [0, 1] (negative values count
    by magnitude), a numeric ``severity`` on a 0-10 scale, or a severity band
    name such as ``"HIGH"``.
    """
    raw = _first(record, "intensity", "shockIntensity")
    if raw is not None:
        value = _finite(raw)
        return _clamp01(abs(value)) if value is not None else default

    severity = record.get("severity")
    if isinstance(severity, str):
        try:
            return Severity(severity.upper()).intensity
        except ValueError:
            return default
    value = _finite(severity)
    if value is None:
        return default
    return _clamp01(value / 10.0 if value > 1.0 else value)


def _log_dropped(kind: str, total: int, kept: int) -> None:
    if kept < total:
        logger.warning(f"Dropped {total - kept} of {total} {kind} with missing or non-finite coordinates.")


# -------------------------------------------------------------------------------
# Converters
# -------------------------------------------------------------------------------

def markers_from_heatmap(entries: Iterable[Mapping[str, Any]]) -> list[EventMarker]:
    """Backend heatmap rows (one per affected country) to markers."""
    rows = list(entries)
    markers: list[EventMarker] = []
    for row in rows:
        coords = _lat_lng(row)
        if coords is None:
            continue
        markers.append(EventMarker(
            lat=coords[0],
            lng=coords[1],
            label=str(_first(row, "label", "country", "countryCode") or ""),
            intensity=_intensity(row),
            category=str(_first(row, "category", "direction") or ""),
        ))
    _log_dropped("heatmap entries", len(rows), len(markers))
    return markers


def markers_from_events(events: Iterable[Mapping[str, Any]]) -> list[EventMarker]:
    """Backend or OSINT events to markers."""
    rows = list(events)
    markers: list[EventMarker] = []
    for row in rows:
        coords = _lat_lng(row)
        if coords is None:
            continue
        markers.append(EventMarker(
            lat=coords[0],
            lng=coords[1],
            label=str(_first(row, "label", "title") or ""),
            intensity=_intensity(row),
            category=str(_first(row, "category", "type") or ""),
        ))
    _log_dropped("events", len(rows), len(markers))
    return markers


def arcs_from_connections(connections: Iterable[Mapping[str, Any]]) -> list[PropagationArc]:
    """Backend connection arcs (or scenario arcs) to propagation arcs."""
    rows = list(connections)
    arcs: list[PropagationArc] = []
    for row in rows:
        values = [
            _finite(_first(row, "originLat", "startLat", "origin_lat")),
            _finite(_first(row, "originLng", "startLng", "origin_lng")),
            _finite(_first(row, "destLat", "endLat", "dest_lat")),
            _finite(_first(row, "destLng", "endLng", "dest_lng")),
        ]
        if any(v is None for v in values):
            continue
        o_lat, o_lng, d_lat, d_lng = values
        if not (-90.0 <= o_lat <= 90.0 and -90.0 <= d_lat <= 90.0):
            continue
        arcs.append(PropagationArc(
            origin_lat=o_lat,
            origin_lng=o_lng,
            dest_lat=d_lat,
            dest_lng=d_lng,
            dest_label=str(_first(row, "destLabel", "toLabel", "dest_label") or ""),
            category=str(_first(row, "category", "direction") or "negative"),
            intensity=_intensity(row, default=1.0),
        ))
    _log_dropped("arcs", len(rows), len(arcs))
    return arcs


def epicenter_from_event(event: Mapping[str, Any] | None) -> Optional[Epicenter]:
    """The origin of the selected/simulated event, or None."""
    if not event:
        return None
    if not isinstance(event, Mapping):
        logger.warning(f"Epicenter ignored: expected an object, got {type(event).__name__}.")
        return None
    coords = _lat_lng(event)
    if coords is None:
        logger.warning("Epicenter ignored: missing or non-finite coordinates.")
        return None
    location = event.get("location") if isinstance(event.get("location"), Mapping) else {}
    label = _first(event, "label", "title") or location.get("country") or ""
    return Epicenter(lat=coords[0], lng=coords[1], label=str(label))


# -------------------------------------------------------------------------------
# Scenario files
# -------------------------------------------------------------------------------

def snapshot_from_dict(data: Mapping[str, Any]) -> SceneSnapshot:
    """
    Build a snapshot from a scenario mapping.

    Keys: ``markers`` (events or heatmap rows), ``arcs`` and ``epicenter``.
    Missing keys mean "empty".
    """
    if not isinstance(data, Mapping):
        raise ScenarioError(f"Scenario must be a JSON object, got {type(data).__name__}.")

    markers = data.get("markers") or []
    arcs = data.get("arcs") or []
    if not isinstance(markers, list) or not isinstance(arcs, list):
        raise ScenarioError("Scenario 'markers' and 'arcs' must be lists.")
    epicenter = data.get("epicenter")
    if epicenter is not None and not isinstance(epicenter, Mapping):
        raise ScenarioError(f"Scenario 'epicenter' must be an object or null, got {type(epicenter).__name__}.")

    return SceneSnapshot(
        markers=tuple(markers_from_events(m for m in markers if isinstance(m, Mapping))),
        arcs=tuple(arcs_from_connections(a for a in arcs if isinstance(a, Mapping))),
        epicenter=epicenter_from_event(epicenter),
    )


def load_scenario(filepath: str) -> SceneSnapshot:
    """Read a scenario JSON file."""
    logger.info(f"Loading scenario from: {filepath}")
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ScenarioError(f"Could not read scenario '{filepath}': {e}") from e

    snapshot = snapshot_from_dict(data)
    logger.info(
        f"Scenario loaded: {len(snapshot.markers)} markers, {len(snapshot.arcs)} arcs, "
        f"epicenter={'yes' if snapshot.epicenter else 'no'}."
    )
    return snapshot


def save_scenario(snapshot: SceneSnapshot, filepath: str) -> None:
    """Write a snapshot as a scenario JSON file readable by ``load_scenario``."""
    logger.info(f"Saving scenario to: {filepath}")
    data = {
        "version": APP_VERSION,
        "markers": [asdict(m) for m in snapshot.markers],
        "arcs": [
            {
                "originLat": a.origin_lat,
                "originLng": a.origin_lng,
                "destLat": a.dest_lat,
                "destLng": a.dest_lng,
                "destLabel": a.dest_label,
                "category": a.category,
                "intensity": a.intensity,
            }
            for a in snapshot.arcs
        ],
        "epicenter": asdict(snapshot.epicenter) if snapshot.epicenter else None,
    }
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
