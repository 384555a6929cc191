"""Command-line entry point: ``python -m vidprep [video]``."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from vidprep import __version__
from vidprep.app import FrameToolWindow
from vidprep.config_store import ConfigStore, default_config_path


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="vidprep",
        description="Scrub a video and save chosen frames as numbered PNG images.",
    )
    parser.add_argument("video", nargs="?", help="video to open instead of the last one used")
    parser.add_argument("--config", help="config file path (default: per-user app data directory)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity (default: INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point to launch the application."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv[:1])
    app.setOrganizationName("vidprep")
    app.setApplicationName("Video Dataset Preparation Tool")

    config_path = args.config or default_config_path()
    logging.getLogger(__name__).info("Using config %s", config_path)
    window = FrameToolWindow(ConfigStore(config_path), video_path=args.video)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
