"""Image export utilities for rendered images.

The renderer already produces display-ready 8-bit RGB (gamma corrected and
quantized), so export is only encoding.

Supported formats:
    - PNG (8-bit RGB via Pillow)
    - Raw row-major RGB bytes (top row first)

Example:
    >>> from rtcore.preview.export import save_png
    >>> image = renderer.render()
    >>> save_png(image, "out.png")
"""

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def _check_pixels(pixels: npt.NDArray[np.uint8]) -> None:
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (height, width, 3) buffer, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 buffer, got dtype {pixels.dtype}")


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB buffer as a PNG file.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8, top row
            first.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the buffer has the wrong shape or dtype.
    """
    _check_pixels(pixels)
    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels))
    pil_image.save(filepath, format="PNG")


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG back into an (height, width, 3) uint8 buffer."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)


def pixels_to_bytes(pixels: npt.NDArray[np.uint8]) -> bytes:
    """Flatten a buffer to raw bytes: rows top to bottom, RGB per pixel.

    Raises:
        ValueError: If the buffer has the wrong shape or dtype.
    """
    _check_pixels(pixels)
    return np.ascontiguousarray(pixels).tobytes()


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
