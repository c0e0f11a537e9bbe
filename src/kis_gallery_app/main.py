"""Application bootstrap utilities."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QApplication

from .io.loader import load_gallery_config
from .logging import configure_logging
from .ui.gallery_window import GalleryWindow
from .ui.theme import apply_gallery_theme


def _configure_high_dpi() -> None:
    """Configure high-DPI handling before QApplication instantiation."""
    QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kis-gallery", description="Walk through a virtual photo gallery.")
    parser.add_argument("config", nargs="?", default="gallery-config.json", type=Path, help="gallery config JSON")
    parser.add_argument("--touch", action="store_true", help="use joystick/swipe controls with the guided tour")
    parser.add_argument("--log-level", default="INFO", help="loguru level (DEBUG, INFO, ...)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Launch the gallery desktop application."""
    argv = list(sys.argv if argv is None else argv)
    args, qt_args = build_parser().parse_known_args(argv[1:])
    configure_logging(args.log_level)

    try:
        config = load_gallery_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Cannot start gallery: {}", exc)
        return 1

    _configure_high_dpi()
    app = QApplication(argv[:1] + qt_args)
    apply_gallery_theme(app)

    window = GalleryWindow(config, touch=args.touch, base_dir=args.config.resolve().parent)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
