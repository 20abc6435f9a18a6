"""
Globe Widget
============
The Qt surface that hosts the globe engine.

Why is this file needed?
------------------------
1. Wiring: it owns one Scene, one InteractionController, one AnimationDriver
   and one GlobeRenderer, and connects them to Qt events.
2. Lifecycle: the animation loop runs only while the widget is shown. It is
   stopped on hide and on close, so a removed view never keeps ticking.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QCloseEvent, QHideEvent, QImage, QMouseEvent, QPainter, QPaintEvent, QShowEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from shockglobe.config import DEFAULT_CONFIG, GlobeConfig
from shockglobe.controller.animation import AnimationDriver
from shockglobe.controller.interaction import InteractionController, Scheduler
from shockglobe.model.scene import Epicenter, EventMarker, PropagationArc, Scene, SceneSnapshot
from shockglobe.view.renderer import FrameGeometry, GlobeRenderer, render_image

logger = logging.getLogger(__name__)


class GlobeWidget(QWidget):
    # Emitted whenever the scene content is replaced
    scene_changed = Signal(object)

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        config: GlobeConfig = DEFAULT_CONFIG,
        scheduler: Scheduler | None = None,
    ) -> None:
        super().__init__(parent)
        self.config = config

        self.scene = Scene()
        self.interaction = InteractionController(config=config, scheduler=scheduler)
        self.renderer = GlobeRenderer(config)
        self.driver = AnimationDriver(self.interaction, self.update, config=config, parent=self)

        self.setMinimumSize(320, 240)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setCursor(Qt.CursorShape.CrossCursor)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

    # ------------------------------------------------------------------------------
    # Data API (full replace only)
    # ------------------------------------------------------------------------------

    def set_markers(self, markers: Iterable[EventMarker]) -> None:
        self.scene.set_markers(markers)
        self.scene_changed.emit(self.scene.snapshot())

    def set_arcs(self, arcs: Iterable[PropagationArc]) -> None:
        self.scene.set_arcs(arcs)
        self.scene_changed.emit(self.scene.snapshot())

    def set_epicenter(self, epicenter: Epicenter | None) -> None:
        self.scene.set_epicenter(epicenter)
        self.scene_changed.emit(self.scene.snapshot())

    def set_snapshot(self, snapshot: SceneSnapshot) -> None:
        self.scene.set_snapshot(snapshot)
        self.scene_changed.emit(snapshot)

    # ------------------------------------------------------------------------------
    # View control
    # ------------------------------------------------------------------------------

    def reset_view(self) -> None:
        self.interaction.reset_view()
        self.update()

    def set_auto_rotate(self, enabled: bool) -> None:
        self.interaction.set_auto_rotate(enabled)

    def current_frame(self) -> FrameGeometry:
        """Frame geometry for the current size, rotation and clock."""
        rotation = self.interaction.rotation
        return FrameGeometry(
            width=float(self.width()),
            height=float(self.height()),
            yaw=rotation.yaw,
            pitch=rotation.pitch,
            clock=self.driver.clock.value,
            radius_factor=self.config.radius_factor,
            auto_rotate=self.interaction.should_auto_rotate,
        )

    def grab_frame(self) -> QImage:
        """Render the current view off-screen at the widget's pixel density."""
        frame = self.current_frame()
        return render_image(
            self.scene.snapshot(),
            int(frame.width),
            int(frame.height),
            yaw=frame.yaw,
            pitch=frame.pitch,
            clock=frame.clock,
            device_pixel_ratio=self.devicePixelRatioF(),
            renderer=self.renderer,
        )

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:
        # size and pixel density are read here, once per frame
        painter = QPainter(self)
        try:
            self.renderer.paint(painter, self.current_frame(), self.scene.snapshot())
        finally:
            painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self.interaction.pointer_down(pos.x(), pos.y())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        self.interaction.pointer_move(pos.x(), pos.y())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.interaction.pointer_up()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        self.interaction.pointer_leave()
        super().leaveEvent(event)

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self.driver.start()

    def hideEvent(self, event: QHideEvent) -> None:
        self.driver.stop()
        super().hideEvent(event)

    def closeEvent(self, event: QCloseEvent) -> None:
        self.driver.stop()
        super().closeEvent(event)
