"""
Configuration & Path Management
===============================
This module serves as the central registry for resource paths and the tuning
constants of the globe engine.

Why is this file needed?
------------------------
1. Abstraction: Every magic number of the projection, the animation and the
   pointer handling lives in one frozen dataclass instead of being scattered
   across the renderer and controllers.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find bundled resources (the default scenario) when the app is frozen.

Exports:
    GlobeConfig: Frozen dataclass with all engine constants.
    DEFAULT_CONFIG (GlobeConfig): Shared default instance.
    RESOURCES_PATH (str): Absolute path to the bundled resources directory.
    DEFAULT_SCENARIO_PATH (str): Absolute path to the bundled demo scenario.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from importlib.resources import files

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to a bundled resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "shockglobe", "resources", relative_path)

    return str(files("shockglobe").joinpath("resources", relative_path))


@dataclass(frozen=True)
class GlobeConfig:
    """Tuning constants shared by the renderer and the controllers."""
    # projection
    focal_length: float = 680.0
    radius_factor: float = 0.36  # sphere radius as a fraction of min(w, h)

    # initial orientation (radians)
    initial_yaw: float = -0.9
    initial_pitch: float = -0.1

    # animation driver
    frame_interval_ms: int = 16
    clock_step: float = 0.016
    auto_rotate_step: float = 0.0009

    # interaction
    drag_sensitivity: float = 0.004
    resume_delay_ms: int = 4000

    # arcs and particles
    arc_steps: int = 80
    arc_elevation: float = 0.38
    particle_base_speed: float = 0.15
    particle_speed_step: float = 0.017
    trail_length: float = 0.09
    trail_steps: int = 14

    # epicenter
    ring_speed: float = 0.36
    ring_count: int = 3

    # grid
    grid_step_deg: int = 15
    grid_sample_deg: int = 3


DEFAULT_CONFIG = GlobeConfig()

RESOURCES_PATH: str = get_resource_path("")
DEFAULT_SCENARIO_PATH: str = os.path.join(RESOURCES_PATH, "default_scenario.json")

if not os.path.exists(DEFAULT_SCENARIO_PATH):
    logger.warning(f"Default scenario not found at {DEFAULT_SCENARIO_PATH}")
