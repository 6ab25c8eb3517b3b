"""Image export utilities.

The canonical output is the plain-text PPM (P3) format:

    P3
    <width> <height>
    255
    r g b        (one line per pixel, row-major from the top-left)

PNG export through Pillow is available as a convenience.

Example:
    >>> import sys
    >>> import numpy as np
    >>> from glimmer.output.export import write_ppm
    >>> write_ppm(np.zeros((1, 2, 3), dtype=np.uint8), sys.stdout)
    P3
    2 1
    255
    0 0 0
    0 0 0
"""

from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Supported export formats (by file suffix)
SUPPORTED_FORMATS = {".ppm", ".png"}


def _check_image(image: npt.NDArray[np.uint8]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (height, width, 3), got {image.shape}")


def write_ppm(image: npt.NDArray[np.uint8], stream: TextIO) -> None:
    """Write an 8-bit RGB image to a text stream as PPM (P3).

    Args:
        image: Array of shape (height, width, 3) with values in [0, 255].
        stream: Writable text stream.

    Raises:
        ValueError: If the image does not have shape (height, width, 3).
    """
    _check_image(image)
    height, width = image.shape[0], image.shape[1]

    stream.write(f"P3\n{width} {height}\n255\n")
    for row in image.astype(np.int64):
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in row))


def save_ppm(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image to a PPM (P3) file."""
    with open(filepath, "w", encoding="ascii", newline="\n") as f:
        write_ppm(image, f)


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image to a PNG file.

    Raises:
        ValueError: If the image does not have shape (height, width, 3).
    """
    _check_image(image)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    pil_image.save(filepath)


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image, choosing the format from the file suffix.

    Args:
        image: Array of shape (height, width, 3).
        filepath: Destination ending in .ppm or .png.

    Raises:
        ValueError: If the suffix is not a supported format.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported image format '{suffix}'. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )
    if suffix == ".png":
        save_png(image, filepath)
    else:
        save_ppm(image, filepath)
