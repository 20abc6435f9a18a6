"""
Application Initialization
==========================
This module parses the command line, builds the window and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging before anything else logs.
2. Creates the QApplication (settings, display name).
3. Either renders a single frame to disk (``--snapshot``) or opens the
   MainWindow with the requested scenario.
"""
import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from shockglobe.app.application import create_app
from shockglobe.config import DEFAULT_SCENARIO_PATH
from shockglobe.logging_config import LEVEL_NAMES, setup_logging

logger = logging.getLogger(__name__)


def _parse_size(text: str) -> tuple[int, int]:
    try:
        w, h = (int(part) for part in text.lower().split("x", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {text!r}")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shockglobe",
        description="Interactive globe of economic shock propagation.",
    )
    parser.add_argument(
        "--scenario",
        default=DEFAULT_SCENARIO_PATH,
        help="Scenario JSON to load (default: bundled demo scenario)",
    )
    parser.add_argument(
        "--snapshot",
        metavar="PNG",
        help="Render one frame to this PNG file and exit",
    )
    parser.add_argument(
        "--size",
        type=_parse_size,
        default=(1200, 800),
        metavar="WxH",
        help="Frame size for --snapshot (default: 1200x800)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LEVEL_NAMES,
        help="Logging verbosity",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def render_snapshot(scenario: str, output: str, size: tuple[int, int]) -> int:
    """Headless single-frame export. Returns a process exit code."""
    from shockglobe.model.io import ScenarioError, load_scenario
    from shockglobe.view.renderer import render_image

    try:
        snapshot = load_scenario(scenario)
    except ScenarioError as e:
        logger.error(f"Could not load scenario: {e}")
        return 2

    width, height = size
    image = render_image(snapshot, width, height)
    if not image.save(output, "PNG"):
        logger.error(f"Could not write image: {output}")
        return 1
    logger.info(f"Frame written to {output} ({width}x{height})")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Create the Qt Application (offscreen export never needs a display)
    if args.snapshot:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = create_app()

    # 3. Headless export
    if args.snapshot:
        sys.exit(render_snapshot(args.scenario, args.snapshot, args.size))

    # 4. Initialize the Main Window with the scenario
    from shockglobe.view.main_window import MainWindow

    window = MainWindow(scenario_path=args.scenario)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
