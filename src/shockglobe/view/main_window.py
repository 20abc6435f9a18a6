"""
Main Application Window
=======================
The primary GUI container: menu bar, the globe, and a status bar.

Why is this file needed?
------------------------
1. Layout: It hosts the GlobeWidget as the central widget.
2. Routing: It connects global actions (File -> Open Scenario, Export Frame,
   View -> Reset) to the scene I/O and the widget.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import QByteArray, QSettings
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import QFileDialog, QLabel, QMainWindow, QMessageBox

from shockglobe.model.io import ScenarioError, load_scenario, save_scenario
from shockglobe.model.scene import SceneSnapshot
from shockglobe.view.globe_widget import GlobeWidget

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "ShockGlobe"

SCENARIO_FILTER = "Scenario Files (*.json)"


class MainWindow(QMainWindow):
    def __init__(self, scenario_path: Optional[str] = None) -> None:
        super().__init__()
        self.scenario_path: Optional[str] = None
        self.settings = QSettings()

        self.resize(1200, 800)
        geometry = self.settings.value("window/geometry")
        if isinstance(geometry, QByteArray):
            self.restoreGeometry(geometry)

        # --- CENTRAL GLOBE ---
        self.globe = GlobeWidget(self)
        self.setCentralWidget(self.globe)

        # --- STATUS ---
        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)
        self.globe.scene_changed.connect(self.on_scene_changed)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        self.update_window_title()
        if scenario_path:
            self.open_scenario(scenario_path)
        else:
            self.on_scene_changed(self.globe.scene.snapshot())

    def _create_actions(self) -> None:
        # File Actions
        self.act_open = QAction("Open Scenario...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_save_as = QAction("Save Scenario As...", self)
        self.act_save_as.setShortcut("Ctrl+Shift+S")
        self.act_save_as.triggered.connect(self.on_file_save_as)

        self.act_export_frame = QAction("Export Frame...", self)
        self.act_export_frame.setShortcut("Ctrl+E")
        self.act_export_frame.triggered.connect(self.on_export_frame)

        self.act_clear = QAction("Clear Scene", self)
        self.act_clear.triggered.connect(self.on_clear_scene)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        # View Actions
        self.act_reset_view = QAction("Reset View", self)
        self.act_reset_view.setShortcut("R")
        self.act_reset_view.triggered.connect(self.on_reset_view)

        self.act_auto_rotate = QAction("Auto-Rotate", self)
        self.act_auto_rotate.setCheckable(True)
        self.act_auto_rotate.setChecked(True)
        self.act_auto_rotate.toggled.connect(self.globe.set_auto_rotate)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_save_as)
        file_menu.addSeparator()
        file_menu.addAction(self.act_export_frame)
        file_menu.addSeparator()
        file_menu.addAction(self.act_clear)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        view_menu = menu_bar.addMenu("&View")
        view_menu.addAction(self.act_reset_view)
        view_menu.addAction(self.act_auto_rotate)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        """Updates the window title based on the scenario file."""
        name = os.path.basename(self.scenario_path) if self.scenario_path else "No Scenario"
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{name}]")

    def open_scenario(self, filepath: str) -> bool:
        """Load a scenario file into the globe. Returns False on failure."""
        try:
            snapshot = load_scenario(filepath)
        except ScenarioError as e:
            logger.error(f"Failed to open scenario: {e}")
            QMessageBox.critical(self, "Error", f"Could not open scenario:\n{e}")
            return False

        self.globe.set_snapshot(snapshot)
        self.scenario_path = filepath
        self.settings.setValue("scenario/last_dir", os.path.dirname(os.path.abspath(filepath)))
        self.update_window_title()
        return True

    def _last_dir(self) -> str:
        return str(self.settings.value("scenario/last_dir", "", type=str))

    # --- SLOTS ---

    def on_scene_changed(self, snapshot: SceneSnapshot) -> None:
        epicenter = snapshot.epicenter.label if snapshot.epicenter else "none"
        self.status_label.setText(
            f"{len(snapshot.markers)} markers | {len(snapshot.arcs)} arcs | epicenter: {epicenter}"
        )

    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(self, "Open Scenario", self._last_dir(), SCENARIO_FILTER)
        if fname:
            self.open_scenario(fname)

    def on_file_save_as(self) -> None:
        fname, _ = QFileDialog.getSaveFileName(self, "Save Scenario", self._last_dir(), SCENARIO_FILTER)
        if not fname:
            return
        # Ensure extension
        if not fname.endswith(".json"):
            fname += ".json"
        try:
            save_scenario(self.globe.scene.snapshot(), fname)
            self.scenario_path = fname
            self.update_window_title()
        except OSError as e:
            logger.error(f"Failed to save scenario: {e}")
            QMessageBox.critical(self, "Error", f"Could not save scenario:\n{e}")

    def on_export_frame(self) -> None:
        fname, _ = QFileDialog.getSaveFileName(self, "Export Frame", self._last_dir(), "PNG Images (*.png)")
        if not fname:
            return
        if not fname.lower().endswith(".png"):
            fname += ".png"
        if self.globe.grab_frame().save(fname, "PNG"):
            logger.info(f"Frame exported to: {fname}")
            self.statusBar().showMessage(f"Frame exported to {fname}", 4000)
        else:
            logger.error(f"Failed to write frame to: {fname}")
            QMessageBox.critical(self, "Error", f"Could not write image:\n{fname}")

    def on_clear_scene(self) -> None:
        self.globe.set_snapshot(SceneSnapshot())
        self.scenario_path = None
        self.update_window_title()

    def on_reset_view(self) -> None:
        self.globe.reset_view()
        # reset_view turns auto-rotate back on
        self.act_auto_rotate.setChecked(True)

    def closeEvent(self, event: QCloseEvent, /) -> None:
        """Stop the frame loop and remember the window geometry."""
        self.globe.driver.stop()
        self.settings.setValue("window/geometry", self.saveGeometry())
        event.accept()
