"""
Scene Data Model
================
Everything the renderer draws besides the grid.

Why is this file needed?
------------------------
1. Static decoration: the continent dot field is generated once per process
   and shared read-only by every frame, so the globe never jitters.
2. Dynamic entities: markers, arcs and the epicenter are owned by the data
   layer and handed in wholesale. ``Scene`` keeps them in one immutable
   ``SceneSnapshot`` and swaps the reference on every update, so a frame sees
   either the old complete set or the new one.

Classes:
    EventMarker, PropagationArc, Epicenter, ContinentDot: Frozen records.
    SceneSnapshot: Immutable bundle read by one frame.
    Scene: Holder of the current snapshot.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Iterable, Optional

import numpy as np

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @classmethod
    def from_intensity(cls, intensity: float) -> Severity:
        """Map a [0, 1] shock intensity to its severity band."""
        if intensity >= 0.75:
            return cls.CRITICAL
        if intensity >= 0.5:
            return cls.HIGH
        if intensity >= 0.25:
            return cls.MEDIUM
        return cls.LOW

    @property
    def intensity(self) -> float:
        """Representative intensity of the band (its lower bound)."""
        return {
            Severity.CRITICAL: 0.75,
            Severity.HIGH: 0.5,
            Severity.MEDIUM: 0.25,
            Severity.LOW: 0.0,
        }[self]


@dataclass(frozen=True)
class ContinentDot:
    lat: float
    lng: float


@dataclass(frozen=True)
class EventMarker:
    """A geo-referenced event or affected country."""
    lat: float
    lng: float
    label: str
    intensity: float = 0.5
    category: str = ""

    @property
    def severity(self) -> Severity:
        return Severity.from_intensity(self.intensity)


@dataclass(frozen=True)
class PropagationArc:
    """Shock propagation from an event origin to an affected location."""
    origin_lat: float
    origin_lng: float
    dest_lat: float
    dest_lng: float
    dest_label: str = ""
    category: str = "negative"
    intensity: float = 1.0

    def point_at(self, t: float) -> tuple[float, float]:
        """Linear lat/lng interpolation at fraction t in [0, 1]."""
        lat = self.origin_lat + (self.dest_lat - self.origin_lat) * t
        lng = self.origin_lng + (self.dest_lng - self.origin_lng) * t
        return lat, lng


@dataclass(frozen=True)
class Epicenter:
    lat: float
    lng: float
    label: str = ""


@dataclass(frozen=True)
class SceneSnapshot:
    """One complete, immutable set of dynamic entities."""
    markers: tuple[EventMarker, ...] = field(default_factory=tuple)
    arcs: tuple[PropagationArc, ...] = field(default_factory=tuple)
    epicenter: Optional[Epicenter] = None


class Scene:
    """
    Holds the current ``SceneSnapshot``.

    The setters never touch the live snapshot: they build a new one and
    rebind ``self._snapshot`` in a single assignment. Renderers call
    ``snapshot()`` once at the start of a frame and use only that object.
    """
    def __init__(self, snapshot: SceneSnapshot | None = None) -> None:
        self._snapshot: SceneSnapshot = snapshot or SceneSnapshot()

    def snapshot(self) -> SceneSnapshot:
        return self._snapshot

    def set_markers(self, markers: Iterable[EventMarker]) -> None:
        self._snapshot = replace(self._snapshot, markers=tuple(markers))
        logger.debug(f"Scene markers replaced ({len(self._snapshot.markers)}).")

    def set_arcs(self, arcs: Iterable[PropagationArc]) -> None:
        self._snapshot = replace(self._snapshot, arcs=tuple(arcs))
        logger.debug(f"Scene arcs replaced ({len(self._snapshot.arcs)}).")

    def set_epicenter(self, epicenter: Epicenter | None) -> None:
        self._snapshot = replace(self._snapshot, epicenter=epicenter)

    def set_snapshot(self, snapshot: SceneSnapshot) -> None:
        """Replace markers, arcs and epicenter together."""
        self._snapshot = snapshot

    def clear(self) -> None:
        self._snapshot = SceneSnapshot()


# -------------------------------------------------------------------------------
# Continent dot field
# -------------------------------------------------------------------------------

# (lat_min, lat_max, lng_min, lng_max, n_dots): coarse land boxes
CONTINENT_REGIONS: tuple[tuple[float, float, float, float, int], ...] = (
    (25.0, 70.0, -165.0, -55.0, 260),   # North America
    (8.0, 25.0, -110.0, -77.0, 45),     # Central America
    (-55.0, 12.0, -81.0, -35.0, 190),   # South America
    (36.0, 70.0, -10.0, 40.0, 140),     # Europe
    (-35.0, 36.0, -17.0, 51.0, 240),    # Africa
    (12.0, 40.0, 35.0, 60.0, 50),       # Arabian Peninsula
    (5.0, 75.0, 60.0, 145.0, 330),      # Asia
    (-10.0, 20.0, 95.0, 150.0, 70),     # Maritime Southeast Asia
    (-40.0, -11.0, 113.0, 154.0, 90),   # Australia
    (60.0, 83.0, -55.0, -20.0, 40),     # Greenland
)

CONTINENT_SEED = 20240217

_CONTINENT_DOTS: tuple[ContinentDot, ...] | None = None


def generate_continent_dots(
    regions: Iterable[tuple[float, float, float, float, int]] = CONTINENT_REGIONS,
    seed: int = CONTINENT_SEED,
) -> tuple[ContinentDot, ...]:
    """
    Scatter dots uniformly inside each region box.

    Args:
        regions: (lat_min, lat_max, lng_min, lng_max, count) boxes.
        seed: Seed of the numpy generator; same seed, same field.

    Returns:
        Tuple of dots in region order.
    """
    rng = np.random.default_rng(seed)
    dots: list[ContinentDot] = []
    for lat_min, lat_max, lng_min, lng_max, count in regions:
        lats = rng.uniform(lat_min, lat_max, count)
        lngs = rng.uniform(lng_min, lng_max, count)
        dots.extend(ContinentDot(float(a), float(b)) for a, b in zip(lats, lngs))
    return tuple(dots)


def continent_dots() -> tuple[ContinentDot, ...]:
    """
    Process-wide continent dot field.

    Built on first use and never regenerated; every caller gets the very same
    tuple object.
    """
    global _CONTINENT_DOTS
    if _CONTINENT_DOTS is None:
        _CONTINENT_DOTS = generate_continent_dots()
        logger.debug(f"Continent dot field generated ({len(_CONTINENT_DOTS)} dots).")
    return _CONTINENT_DOTS
