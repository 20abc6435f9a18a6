"""
Globe Render Pipeline
=====================
Paints one frame of the globe with plain QPainter primitives.

Why is this file needed?
------------------------
There is no 3D library underneath: every grid line, dot, arc and pulse ring is
taken through ``model.projection`` (to_sphere -> rotate -> project) and drawn
as 2D paths, ellipses and gradients. The painter can be a widget (on screen)
or a QImage (export, tests).

Drawing order (back to front):
    background, ambient glow, binary texture, lat/lng grid, continent dots,
    specular + rim light, orbital rings, arc ghost paths, arc particles,
    event markers, destination crosshairs, epicenter, corner crosshairs, HUD.

Anything that cannot be projected, or faces away where it has to face the
viewer, is skipped for the frame. Nothing in here raises on geometry.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np
from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import (
    QBrush,
    QColor,
    QFont,
    QFontMetricsF,
    QImage,
    QPainter,
    QPen,
    QPolygonF,
    QRadialGradient,
)

from shockglobe.config import DEFAULT_CONFIG, GlobeConfig
from shockglobe.model.projection import (
    Point3,
    ScreenPoint,
    project,
    project_points,
    rotate,
    rotate_points,
    sphere_points,
    to_sphere,
)
from shockglobe.model.scene import (
    Epicenter,
    EventMarker,
    PropagationArc,
    SceneSnapshot,
    Severity,
    continent_dots,
)

if TYPE_CHECKING:
    import numpy.typing as npt

# -------------------------------------------------------------------------------
# Palette
# -------------------------------------------------------------------------------

BACKGROUND = QColor("#0a0a0a")
HUD_FONT_FAMILY = "IBM Plex Mono"

SEVERITY_COLORS: dict[Severity, tuple[int, int, int]] = {
    Severity.CRITICAL: (196, 30, 58),
    Severity.HIGH: (255, 152, 0),
    Severity.MEDIUM: (33, 150, 243),
    Severity.LOW: (0, 200, 83),
}

ARC_COLORS: dict[str, tuple[int, int, int]] = {
    "negative": (190, 25, 25),
    "positive": (46, 160, 96),
    "mixed": (205, 140, 30),
}
DEFAULT_ARC_COLOR = ARC_COLORS["negative"]


def rgba(r: int, g: int, b: int, a: float) -> QColor:
    """QColor from 0-255 channels and a 0-1 alpha (clamped)."""
    return QColor(r, g, b, int(round(max(0.0, min(1.0, a)) * 255)))


def hud_font(pixel_size: int) -> QFont:
    font = QFont(HUD_FONT_FAMILY)
    font.setStyleHint(QFont.StyleHint.Monospace)
    font.setPixelSize(pixel_size)
    return font


# -------------------------------------------------------------------------------
# Frame geometry and animation phases
# -------------------------------------------------------------------------------

@dataclass(frozen=True)
class FrameGeometry:
    """Everything a frame depends on besides the scene snapshot."""
    width: float
    height: float
    yaw: float
    pitch: float
    clock: float
    radius_factor: float = DEFAULT_CONFIG.radius_factor
    auto_rotate: bool = True

    @property
    def cx(self) -> float:
        return self.width / 2.0

    @property
    def cy(self) -> float:
        return self.height / 2.0

    @property
    def radius(self) -> float:
        return min(self.width, self.height) * self.radius_factor


def arc_elevation(t: float, elevation: float) -> float:
    """Radius multiplier along an arc: 1 at both ends, 1 + elevation at t = 0.5."""
    return 1.0 + math.sin(t * math.pi) * elevation


def particle_speed(arc_index: int, config: GlobeConfig = DEFAULT_CONFIG) -> float:
    """Per-arc speed; slightly different for each arc so they desynchronise."""
    return config.particle_base_speed + arc_index * config.particle_speed_step


def particle_count(arc: PropagationArc) -> int:
    return 3 if arc.intensity >= 0.5 else 2


def particle_head_t(clock: float, speed: float, index: int, count: int) -> float:
    """Fraction of the arc reached by particle ``index`` of ``count``."""
    return (clock * speed + index / count) % 1.0


def trail_fractions(head_t: float, config: GlobeConfig = DEFAULT_CONFIG) -> list[float]:
    """Arc fractions of the trail samples, oldest first, ending at the head."""
    steps = config.trail_steps
    return [
        max(0.0, head_t - config.trail_length * (1.0 - s / steps))
        for s in range(steps + 1)
    ]


def pulse_ring(clock: float, ring: int, config: GlobeConfig = DEFAULT_CONFIG) -> tuple[float, float, float]:
    """
    Expanding ring ``ring`` of the epicenter.

    Returns:
        (radius, opacity, line_width) before the facing factor is applied.
        Radius grows with the phase, opacity and width shrink with it.
    """
    phase = (clock * config.ring_speed + ring / config.ring_count) % 1.0
    return 6.0 + phase * 48.0, (1.0 - phase) * 0.85, 1.8 * (1.0 - phase) + 0.3


def _visible_runs(
    screen: npt.NDArray[np.float64],
    visible: npt.NDArray[np.bool_],
) -> list[npt.NDArray[np.float64]]:
    """Split a sampled line into contiguous visible runs of at least two points."""
    idx = np.flatnonzero(visible)
    if idx.size < 2:
        return []
    breaks = np.flatnonzero(np.diff(idx) > 1) + 1
    return [screen[group] for group in np.split(idx, breaks) if group.size >= 2]


def _polygon(points: npt.NDArray[np.float64]) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])


# -------------------------------------------------------------------------------
# Renderer
# -------------------------------------------------------------------------------

class GlobeRenderer:
    """
    Stateless per-frame painter.

    The only things kept between frames are derived caches that do not depend
    on rotation or time: the unit-sphere grid samples, the continent dots as
    arrays, and the pre-rendered binary texture for the current viewport size.
    """
    def __init__(self, config: GlobeConfig = DEFAULT_CONFIG) -> None:
        self.config = config

        # grid: one flat array of unit-sphere samples + slice bounds per line
        self._grid_unit, self._grid_slices = self._build_grid_samples(config)

        dots = continent_dots()
        self._dots_unit = sphere_points(
            [d.lat for d in dots], [d.lng for d in dots], 1.0
        )

        self._texture: Optional[QImage] = None
        self._texture_key: Optional[tuple[int, int, float]] = None

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def paint(self, painter: QPainter, frame: FrameGeometry, snapshot: SceneSnapshot) -> None:
        """Paint one complete frame. ``snapshot`` is read, never stored."""
        painter.save()
        try:
            if frame.radius <= 0.0:
                # degenerate viewport: nothing to project onto
                painter.fillRect(QRectF(0, 0, frame.width, frame.height), BACKGROUND)
                return
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
            painter.setRenderHint(QPainter.RenderHint.TextAntialiasing, True)

            self._draw_background(painter, frame)
            self._draw_binary_texture(painter, frame, painter.device().devicePixelRatioF())
            self._draw_grid(painter, frame)
            self._draw_continents(painter, frame)
            self._draw_sphere_shading(painter, frame)
            self._draw_orbital_rings(painter, frame)

            for arc in snapshot.arcs:
                self._draw_arc_ghost(painter, frame, arc)
            for i, arc in enumerate(snapshot.arcs):
                self._draw_arc_particles(painter, frame, arc, i)

            for i, marker in enumerate(snapshot.markers):
                self._draw_marker(painter, frame, marker, i)
            for arc in snapshot.arcs:
                self._draw_destination(painter, frame, arc)
            if snapshot.epicenter is not None:
                self._draw_epicenter(painter, frame, snapshot.epicenter)

            self._draw_corners(painter, frame)
            self._draw_hud(painter, frame, snapshot)
        finally:
            painter.restore()

    def locate(
        self,
        frame: FrameGeometry,
        lat: float,
        lng: float,
        elevation: float = 1.0,
    ) -> tuple[Point3, Optional[ScreenPoint]]:
        """View-space point and its projection for a single coordinate."""
        p = rotate(to_sphere(lat, lng, frame.radius * elevation), frame.yaw, frame.pitch)
        return p, project(p, frame.width, frame.height, self.config.focal_length)

    def project_unit_points(
        self,
        frame: FrameGeometry,
        unit_xyz: npt.NDArray[np.float64],
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.bool_]]:
        """
        Vectorised ``locate`` for unit-sphere samples.

        Returns:
            (screen, z, valid) where screen is (N, 2), z the view-space depth
            and valid the projectability mask.
        """
        xyz = rotate_points(unit_xyz * frame.radius, frame.yaw, frame.pitch)
        screen, valid = project_points(xyz, frame.width, frame.height, self.config.focal_length)
        return screen, xyz[:, 2], valid

    def grid_runs(self, frame: FrameGeometry) -> list[npt.NDArray[np.float64]]:
        """Screen polylines of the front-facing parts of every grid line."""
        screen, z, valid = self.project_unit_points(frame, self._grid_unit)
        visible = valid & (z > 0.0)
        runs: list[npt.NDArray[np.float64]] = []
        for start, stop in self._grid_slices:
            runs.extend(_visible_runs(screen[start:stop], visible[start:stop]))
        return runs

    def arc_samples(self, arc: PropagationArc, steps: int | None = None) -> list[tuple[float, float, float]]:
        """(lat, lng, elevation) samples of the lifted arc path, origin first."""
        steps = steps or self.config.arc_steps
        samples = []
        for i in range(steps + 1):
            t = i / steps
            lat, lng = arc.point_at(t)
            samples.append((lat, lng, arc_elevation(t, self.config.arc_elevation)))
        return samples

    def particle_head(
        self,
        frame: FrameGeometry,
        arc: PropagationArc,
        arc_index: int,
        particle: int,
    ) -> tuple[float, Point3, Optional[ScreenPoint]]:
        """Arc fraction, view-space point and projection of a particle head."""
        count = particle_count(arc)
        head_t = particle_head_t(frame.clock, particle_speed(arc_index, self.config), particle, count)
        lat, lng = arc.point_at(head_t)
        p, pr = self.locate(frame, lat, lng, arc_elevation(head_t, self.config.arc_elevation))
        return head_t, p, pr

    # ------------------------------------------------------------------------------
    # Caches
    # ------------------------------------------------------------------------------

    @staticmethod
    def _build_grid_samples(config: GlobeConfig) -> tuple[npt.NDArray[np.float64], list[tuple[int, int]]]:
        step, sample = config.grid_step_deg, config.grid_sample_deg
        lats: list[npt.NDArray[np.float64]] = []
        lngs: list[npt.NDArray[np.float64]] = []

        # parallels: -80 .. 70
        for lat in range(-80, 81, step):
            lng = np.arange(0, 360 + sample, sample, dtype=np.float64)
            lats.append(np.full(lng.shape, float(lat)))
            lngs.append(lng)
        # meridians: 0 .. 345
        for lng in range(0, 360, step):
            lat = np.arange(-90, 90 + sample, sample, dtype=np.float64)
            lats.append(lat)
            lngs.append(np.full(lat.shape, float(lng)))

        slices: list[tuple[int, int]] = []
        offset = 0
        for arr in lats:
            slices.append((offset, offset + arr.size))
            offset += arr.size

        unit = sphere_points(np.concatenate(lats), np.concatenate(lngs), 1.0)
        return unit, slices

    def _binary_texture(self, width: int, height: int, dpr: float) -> QImage:
        """Position-hashed 0/1 field, rendered once per viewport size."""
        key = (width, height, dpr)
        if self._texture is not None and self._texture_key == key:
            return self._texture

        image = QImage(
            max(1, int(width * dpr)), max(1, int(height * dpr)),
            QImage.Format.Format_ARGB32_Premultiplied,
        )
        image.setDevicePixelRatio(dpr)
        image.fill(Qt.GlobalColor.transparent)

        cx, cy = width / 2.0, height / 2.0
        max_r = min(width, height) * 0.68
        p = QPainter(image)
        p.setFont(hud_font(7))
        for by in range(10, height, 13):
            for bx in range(4, width, 9):
                h = (bx * 1733 + by * 9371) & 0xFFFF
                if (h & 0xFF) > 88:
                    continue
                dist = math.hypot(bx - cx, by - cy)
                alpha = max(0.0, 0.075 - (dist / max_r) * 0.065)
                if alpha < 0.005:
                    continue
                p.setPen(rgba(42, 36, 30, alpha))
                p.drawText(QPointF(bx, by), str((h >> 8) & 1))
        p.end()

        self._texture = image
        self._texture_key = key
        return image

    # ------------------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------------------

    def _draw_background(self, painter: QPainter, frame: FrameGeometry) -> None:
        painter.fillRect(QRectF(0, 0, frame.width, frame.height), BACKGROUND)

        center = QPointF(frame.cx, frame.cy)
        glow = QRadialGradient(center, frame.radius * 1.6)
        glow.setColorAt(0.0, rgba(18, 14, 10, 0.6))
        glow.setColorAt(1.0, rgba(10, 10, 10, 0.0))
        painter.fillRect(QRectF(0, 0, frame.width, frame.height), QBrush(glow))

    def _draw_binary_texture(self, painter: QPainter, frame: FrameGeometry, dpr: float) -> None:
        w, h = int(frame.width), int(frame.height)
        if w < 2 or h < 2:
            return
        painter.drawImage(QPointF(0, 0), self._binary_texture(w, h, dpr))

    def _draw_grid(self, painter: QPainter, frame: FrameGeometry) -> None:
        painter.setPen(QPen(rgba(45, 38, 32, 0.65), 0.5))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for run in self.grid_runs(frame):
            painter.drawPolyline(_polygon(run))

    def _draw_continents(self, painter: QPainter, frame: FrameGeometry) -> None:
        screen, z, valid = self.project_unit_points(frame, self._dots_unit)
        front = valid & (z > 0.0)
        if not front.any():
            return

        # depth shading: dots facing the viewer are brighter; bucketed so
        # each bucket is a single drawPoints call
        depth = z[front] / frame.radius
        points = screen[front]
        buckets = np.minimum((depth * 4).astype(int), 3)
        for b in range(4):
            sel = points[buckets == b]
            if sel.size == 0:
                continue
            alpha = 0.18 + 0.14 * b
            pen = QPen(rgba(120, 96, 78, alpha), 1.6)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setPen(pen)
            painter.drawPoints(_polygon(sel))

    def _draw_sphere_shading(self, painter: QPainter, frame: FrameGeometry) -> None:
        cx, cy, r = frame.cx, frame.cy, frame.radius
        painter.setPen(Qt.PenStyle.NoPen)

        spec = QRadialGradient(QPointF(cx, cy), r, QPointF(cx - r * 0.3, cy - r * 0.25))
        spec.setColorAt(0.0, rgba(50, 40, 30, 0.06))
        spec.setColorAt(1.0, rgba(0, 0, 0, 0.0))
        painter.setBrush(QBrush(spec))
        painter.drawEllipse(QPointF(cx, cy), r, r)

        rim_r = r * 1.06
        rim = QRadialGradient(QPointF(cx, cy), rim_r)
        rim.setColorAt(0.0, rgba(25, 18, 12, 0.0))
        rim.setColorAt(0.88 / 1.06, rgba(25, 18, 12, 0.0))
        rim.setColorAt(1.0, rgba(25, 18, 12, 0.18))
        painter.setBrush(QBrush(rim))
        painter.drawEllipse(QPointF(cx, cy), rim_r, rim_r)
        painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_orbital_rings(self, painter: QPainter, frame: FrameGeometry) -> None:
        # fixed 2D ellipses, independent of the globe rotation
        r = frame.radius
        rings = (
            (0.49, 1.38, 0.21, rgba(165, 20, 20, 0.55)),
            (-1.08, 1.26, 0.17, rgba(140, 15, 15, 0.38)),
        )
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for tilt, rx, ry, color in rings:
            painter.save()
            painter.translate(frame.cx, frame.cy)
            painter.rotate(math.degrees(tilt))
            painter.setPen(QPen(color, 0.9))
            painter.drawEllipse(QPointF(0, 0), r * rx, r * ry)
            painter.restore()

    def _draw_arc_ghost(self, painter: QPainter, frame: FrameGeometry, arc: PropagationArc) -> None:
        r, g, b = ARC_COLORS.get(arc.category, DEFAULT_ARC_COLOR)
        painter.setPen(QPen(rgba(int(r * 0.74), g, b, 0.14), 0.7))

        run: list[QPointF] = []
        for lat, lng, elev in self.arc_samples(arc):
            p, pr = self.locate(frame, lat, lng, elev)
            if p.z <= 0 or pr is None:
                if len(run) >= 2:
                    painter.drawPolyline(QPolygonF(run))
                run = []
                continue
            run.append(QPointF(pr.x, pr.y))
        if len(run) >= 2:
            painter.drawPolyline(QPolygonF(run))

    def _draw_arc_particles(
        self,
        painter: QPainter,
        frame: FrameGeometry,
        arc: PropagationArc,
        arc_index: int,
    ) -> None:
        r, g, b = ARC_COLORS.get(arc.category, DEFAULT_ARC_COLOR)
        steps = self.config.trail_steps
        strength = 0.5 + 0.5 * arc.intensity

        for k in range(particle_count(arc)):
            head_t, hp, hpr = self.particle_head(frame, arc, arc_index, k)

            # trail: short segments, brighter towards the head
            prev: Optional[ScreenPoint] = None
            for s, t in enumerate(trail_fractions(head_t, self.config)):
                lat, lng = arc.point_at(t)
                p, pr = self.locate(frame, lat, lng, arc_elevation(t, self.config.arc_elevation))
                if p.z <= 0 or pr is None:
                    prev = None
                    continue
                if prev is not None and s > 0:
                    painter.setPen(QPen(rgba(r, g, b, (s / steps) * 0.7 * strength), 1.2))
                    painter.drawLine(QPointF(prev.x, prev.y), QPointF(pr.x, pr.y))
                prev = pr

            if hp.z <= 0 or hpr is None:
                continue
            center = QPointF(hpr.x, hpr.y)
            glow = QRadialGradient(center, 8.0)
            glow.setColorAt(0.0, rgba(min(255, r + 30), min(255, g + 10), min(255, b + 10), 0.8 * strength))
            glow.setColorAt(1.0, rgba(r, g, b, 0.0))
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(glow))
            painter.drawEllipse(center, 8.0, 8.0)
            painter.setBrush(QBrush(QColor("#e8e0d8")))
            painter.drawEllipse(center, 1.5, 1.5)
            painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_marker(self, painter: QPainter, frame: FrameGeometry, marker: EventMarker, index: int) -> None:
        p, pr = self.locate(frame, marker.lat, marker.lng, 1.01)
        if p.z <= 0 or pr is None:
            return
        r, g, b = SEVERITY_COLORS[marker.severity]
        alpha = max(0.25, min(1.0, p.z / frame.radius + 0.35))
        center = QPointF(pr.x, pr.y)

        # pulse, desynchronised per marker
        phase = (frame.clock * 0.5 + index * 0.13) % 1.0
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(rgba(r, g, b, (1.0 - phase) * 0.6 * alpha), 1.2))
        ring = 4.0 + phase * 9.0
        painter.drawEllipse(center, ring, ring)

        core = 2.0 + 1.5 * marker.intensity
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(rgba(r, g, b, alpha)))
        painter.drawEllipse(center, core, core)
        painter.setBrush(Qt.BrushStyle.NoBrush)

        if marker.label and marker.intensity >= 0.5:
            label = marker.label if len(marker.label) <= 28 else marker.label[:27] + "…"
            painter.setFont(hud_font(8))
            painter.setPen(rgba(150, 140, 130, alpha * 0.8))
            painter.drawText(QPointF(pr.x + 7, pr.y + 3), label.upper())

    def _draw_destination(self, painter: QPainter, frame: FrameGeometry, arc: PropagationArc) -> None:
        p, pr = self.locate(frame, arc.dest_lat, arc.dest_lng, 1.01)
        if p.z < -frame.radius * 0.08 or pr is None:
            return
        alpha = max(0.18, min(1.0, p.z / frame.radius + 0.5))

        cs = 5.0
        painter.setPen(QPen(rgba(140, 130, 120, alpha), 0.8))
        painter.drawLine(QPointF(pr.x - cs, pr.y), QPointF(pr.x + cs, pr.y))
        painter.drawLine(QPointF(pr.x, pr.y - cs), QPointF(pr.x, pr.y + cs))

        if p.z > 0 and arc.dest_label:
            painter.setFont(hud_font(8))
            painter.setPen(rgba(120, 112, 104, alpha))
            painter.drawText(QPointF(pr.x + 6, pr.y - 3), arc.dest_label)

    def _draw_epicenter(self, painter: QPainter, frame: FrameGeometry, epicenter: Epicenter) -> None:
        p, pr = self.locate(frame, epicenter.lat, epicenter.lng, 1.01)
        if pr is None or p.z <= -frame.radius * 0.1:
            return
        # back-facing stays visible, dimmed
        facing = 1.0 if p.z > 0 else 0.3
        center = QPointF(pr.x, pr.y)
        ex, ey = pr.x, pr.y

        # ambient area glow
        area_r = frame.radius * 0.42
        area = QRadialGradient(center, area_r)
        area.setColorAt(0.0, rgba(180, 20, 20, facing * 0.09))
        area.setColorAt(1.0, rgba(180, 20, 20, 0.0))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(area))
        painter.drawEllipse(center, area_r, area_r)

        # pulse rings
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for ring in range(self.config.ring_count):
            radius, opacity, width = pulse_ring(frame.clock, ring, self.config)
            painter.setPen(QPen(rgba(190, 20, 20, opacity * facing), width))
            painter.drawEllipse(center, radius, radius)

        # core glow + dot
        core = QRadialGradient(center, 12.0)
        core.setColorAt(0.0, rgba(230, 30, 30, facing))
        core.setColorAt(1.0, rgba(190, 20, 20, 0.0))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(core))
        painter.drawEllipse(center, 12.0, 12.0)
        painter.setBrush(QBrush(rgba(240, 235, 228, facing)))
        painter.drawEllipse(center, 2.8, 2.8)
        painter.setBrush(Qt.BrushStyle.NoBrush)

        # split crosshair
        cs, gap = 11.0, 5.0
        painter.setPen(QPen(rgba(200, 25, 25, facing * 0.7), 0.8))
        painter.drawLine(QPointF(ex - cs, ey), QPointF(ex - gap, ey))
        painter.drawLine(QPointF(ex + gap, ey), QPointF(ex + cs, ey))
        painter.drawLine(QPointF(ex, ey - cs), QPointF(ex, ey - gap))
        painter.drawLine(QPointF(ex, ey + gap), QPointF(ex, ey + cs))

        if p.z > 0:
            painter.setFont(hud_font(8))
            painter.setPen(rgba(180, 20, 20, facing * 0.9))
            painter.drawText(QPointF(ex + 8, ey - 6), epicenter.label)
            painter.setFont(hud_font(7))
            painter.setPen(rgba(130, 60, 60, facing * 0.65))
            painter.drawText(QPointF(ex + 8, ey + 4), "EPICENTER")

    def _draw_corners(self, painter: QPainter, frame: FrameGeometry) -> None:
        s, pad = 14.0, 12.0
        w, h = frame.width, frame.height
        painter.setPen(QPen(rgba(60, 50, 42, 0.7), 0.8))
        for cx, cy in ((pad, pad), (w - pad, pad), (pad, h - pad), (w - pad, h - pad)):
            painter.drawLine(QPointF(cx - s, cy), QPointF(cx + s, cy))
            painter.drawLine(QPointF(cx, cy - s), QPointF(cx, cy + s))

    def _draw_hud(self, painter: QPainter, frame: FrameGeometry, snapshot: SceneSnapshot) -> None:
        w, h = frame.width, frame.height
        font = hud_font(8)
        metrics = QFontMetricsF(font)
        painter.setFont(font)

        def right(text: str, y: float) -> None:
            painter.drawText(QPointF(w - 20 - metrics.horizontalAdvance(text), y), text)

        # top left: counts
        painter.setPen(rgba(155, 18, 18, 0.75))
        painter.drawText(QPointF(20, 18), f"{len(snapshot.arcs)} PROPAGATION VECTORS ACTIVE")
        painter.setPen(rgba(80, 70, 60, 0.75))
        painter.drawText(QPointF(20, 28), f"{len(snapshot.markers)} ACTIVE EVENTS TRACKED")

        # bottom left: projection / interaction hints
        painter.setPen(rgba(60, 50, 40, 0.8))
        painter.drawText(QPointF(20, h - 16), "PROJ: ORTHOGRAPHIC")
        painter.drawText(QPointF(20, h - 6), "DRAG TO ROTATE" if frame.auto_rotate else "AUTO-ROTATE PAUSED")

        # bottom right: source tags
        painter.setPen(rgba(50, 42, 35, 0.7))
        right("SRC: MULTI-INT", h - 16)
        right("ALGO: SHOCK-v2.1", h - 6)

        # top right: severity legend
        y = 18.0
        for severity in Severity:
            r, g, b = SEVERITY_COLORS[severity]
            text = severity.value
            x = w - 20 - metrics.horizontalAdvance(text)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(rgba(r, g, b, 0.9)))
            painter.drawEllipse(QPointF(x - 8, y - 3), 3.0, 3.0)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.setPen(rgba(80, 80, 80, 0.9))
            painter.drawText(QPointF(x, y), text)
            y += 11.0


# -------------------------------------------------------------------------------
# Off-screen rendering
# -------------------------------------------------------------------------------

def render_image(
    snapshot: SceneSnapshot,
    width: int,
    height: int,
    yaw: float = DEFAULT_CONFIG.initial_yaw,
    pitch: float = DEFAULT_CONFIG.initial_pitch,
    clock: float = 0.0,
    device_pixel_ratio: float = 1.0,
    renderer: GlobeRenderer | None = None,
) -> QImage:
    """
    Render a single frame into a new QImage.

    Requires a QGuiApplication (fonts). The image is ``width * dpr`` by
    ``height * dpr`` pixels and carries the device pixel ratio.
    """
    renderer = renderer or GlobeRenderer()
    image = QImage(
        max(1, int(round(width * device_pixel_ratio))),
        max(1, int(round(height * device_pixel_ratio))),
        QImage.Format.Format_ARGB32_Premultiplied,
    )
    image.setDevicePixelRatio(device_pixel_ratio)
    image.fill(BACKGROUND)

    frame = FrameGeometry(
        width=width,
        height=height,
        yaw=yaw,
        pitch=pitch,
        clock=clock,
        radius_factor=renderer.config.radius_factor,
    )
    painter = QPainter(image)
    try:
        renderer.paint(painter, frame, snapshot)
    finally:
        painter.end()
    return image
