"""
Animation Driver
================
Owns the frame loop of the globe.

Each tick advances the animation clock by a fixed step, applies passive
auto-rotation when the user is not dragging, and asks the view to repaint.
The clock step is per frame, not per second, so perceived speed follows the
actual frame rate.

The host must call ``stop()`` when the view goes away; a running driver keeps
ticking (and burning CPU) even if nothing is visible.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from shockglobe.config import DEFAULT_CONFIG, GlobeConfig
from shockglobe.controller.interaction import InteractionController

logger = logging.getLogger(__name__)


@dataclass
class AnimationClock:
    """Monotonic frame clock used to phase every periodic effect."""
    value: float = 0.0
    step: float = 0.016

    def advance(self) -> float:
        self.value += self.step
        return self.value


class AnimationDriver(QObject):
    """Timer-driven frame loop: clock, auto-rotate, render."""
    # Emitted after each tick with the new clock value
    frame = Signal(float)

    def __init__(
        self,
        interaction: InteractionController,
        render: Callable[[], None],
        config: GlobeConfig = DEFAULT_CONFIG,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.config = config
        self.interaction = interaction
        self.clock = AnimationClock(step=config.clock_step)
        self._render = render
        self.frame_count: int = 0

        self._timer = QTimer(self)
        self._timer.setInterval(config.frame_interval_ms)
        self._timer.timeout.connect(self.tick)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        if self._timer.isActive():
            return
        logger.debug("Animation driver started.")
        self._timer.start()

    def stop(self) -> None:
        """Cancel the scheduled frames. Safe to call repeatedly."""
        if not self._timer.isActive():
            return
        self._timer.stop()
        logger.debug(f"Animation driver stopped after {self.frame_count} frames.")

    def tick(self) -> None:
        """Advance one frame."""
        self.clock.advance()
        if self.interaction.should_auto_rotate:
            self.interaction.rotation.yaw += self.config.auto_rotate_step
        self.frame_count += 1
        self._render()
        self.frame.emit(self.clock.value)
