"""Input/output helpers for gallery configuration files."""

from .loader import load_gallery_config, parse_gallery_config

__all__ = [
    "load_gallery_config",
    "parse_gallery_config",
]
