"""Output module for writing rendered images.

Components:
    export: PPM (P3) text output and PNG export via Pillow
"""

from .export import SUPPORTED_FORMATS, save_image, save_png, save_ppm, write_ppm

__all__ = [
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "SUPPORTED_FORMATS",
]
