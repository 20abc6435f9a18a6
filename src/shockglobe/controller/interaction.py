"""
Pointer Interaction
===================
Turns press/move/release events into yaw/pitch changes.

While the user drags, auto-rotation is off. On release a delayed callback
turns it back on after ``resume_delay_ms``, unless the user grabbed the globe
again in the meantime. Every press bumps a generation counter; the delayed
callback captures the generation at release time and only acts if it is
still current, so a late timer can never override a newer drag.

Classes:
    RotationState: The two view angles.
    InteractionController: The drag state machine.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QTimer

from shockglobe.config import DEFAULT_CONFIG, GlobeConfig

logger = logging.getLogger(__name__)

# (delay_ms, callback) -> None
Scheduler = Callable[[int, Callable[[], None]], None]


def qt_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    """Run callback once on the Qt event loop after delay_ms."""
    QTimer.singleShot(delay_ms, callback)


@dataclass
class RotationState:
    """
    View orientation in radians.

    Unbounded: angles wrap through the trig functions and pitch
    may go past the poles.
    """
    yaw: float = 0.0
    pitch: float = 0.0


class InteractionController:
    """Drag-to-rotate state machine. The only writer of ``rotation``."""

    def __init__(
        self,
        rotation: RotationState | None = None,
        config: GlobeConfig = DEFAULT_CONFIG,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config
        self.rotation = rotation or RotationState(config.initial_yaw, config.initial_pitch)
        self.dragging: bool = False
        self.last_position: Optional[tuple[float, float]] = None
        self.auto_rotate_enabled: bool = True
        # user switch, independent of the drag pause
        self.auto_rotate_paused: bool = False

        self._schedule: Scheduler = scheduler or qt_scheduler
        self._generation: int = 0

    # ------------------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------------------

    def pointer_down(self, x: float, y: float) -> None:
        self.dragging = True
        self.last_position = (x, y)
        self.auto_rotate_enabled = False
        self._generation += 1

    def pointer_move(self, x: float, y: float) -> None:
        if not self.dragging or self.last_position is None:
            return
        last_x, last_y = self.last_position
        sensitivity = self.config.drag_sensitivity
        self.rotation.yaw += (x - last_x) * sensitivity
        self.rotation.pitch += (y - last_y) * sensitivity
        self.last_position = (x, y)

    def pointer_up(self) -> None:
        if not self.dragging:
            return
        self.dragging = False
        generation = self._generation
        logger.debug(f"Drag released, auto-rotate resumes in {self.config.resume_delay_ms} ms (gen {generation}).")
        self._schedule(self.config.resume_delay_ms, lambda: self._resume_auto_rotate(generation))

    def pointer_leave(self) -> None:
        self.pointer_up()

    # ------------------------------------------------------------------------------
    # Programmatic control
    # ------------------------------------------------------------------------------

    def reset_view(self) -> None:
        """Back to the initial orientation, auto-rotation on."""
        self.rotation.yaw = self.config.initial_yaw
        self.rotation.pitch = self.config.initial_pitch
        self.dragging = False
        self.last_position = None
        self._generation += 1
        self.auto_rotate_enabled = True
        self.auto_rotate_paused = False

    def set_auto_rotate(self, enabled: bool) -> None:
        self.auto_rotate_paused = not enabled

    @property
    def should_auto_rotate(self) -> bool:
        return self.auto_rotate_enabled and not self.auto_rotate_paused and not self.dragging

    def _resume_auto_rotate(self, generation: int) -> None:
        if self.dragging or generation != self._generation:
            logger.debug(f"Stale auto-rotate resume ignored (gen {generation}, current {self._generation}).")
            return
        self.auto_rotate_enabled = True
