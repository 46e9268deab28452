"""Image export utilities for rendered images.

Rendered images are already resolved to 8 bits by the integrator, so
export only has to check their shape and hand them to Pillow. The
file format follows the extension of the output path (PNG is the usual
choice).

Example:
    >>> from src.spheretrace.preview.export import save_png
    >>> from src.spheretrace.core.renderer import Renderer, RenderSettings
    >>>
    >>> renderer = Renderer(RenderSettings(width=200, height=100, samples_per_pixel=16))
    >>> renderer.render()
    >>> save_png(renderer.get_image_uint8(), "output.png")
"""

from collections.abc import Iterable
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def _check_image(image: npt.NDArray[np.uint8]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got dtype {image.dtype}")


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an 8-bit RGB image.

    Args:
        image: Array of shape (H, W, 3) with dtype uint8, row 0 at the top.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
    """
    _check_image(image)
    PILImage.fromarray(image).save(filepath)


def image_from_pixels(
    pixels: Iterable[tuple[int, int, int]],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """Assemble a flat row-major pixel sequence into an image array.

    Args:
        pixels: (R, G, B) triples, left to right, top to bottom.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Array of shape (height, width, 3) with dtype uint8.

    Raises:
        ValueError: If the number of pixels is not width * height, or a
            component is outside [0, 255].
    """
    data = np.array(list(pixels), dtype=np.int64).reshape(-1, 3)
    if data.shape[0] != width * height:
        raise ValueError(
            f"Got {data.shape[0]} pixels for a {width}x{height} image "
            f"({width * height} expected)"
        )
    if data.size and (data.min() < 0 or data.max() > 255):
        raise ValueError("Pixel components must be in [0, 255]")
    return data.astype(np.uint8).reshape(height, width, 3)
