"""Render loop orchestration.

The Renderer drives the integrator over the image in horizontal bands of
rows. Each band is one parallel kernel launch, so between bands the host can:
- report progress through a callback or a generator
- check for cancellation

The scene and the camera must be loaded before rendering (SceneManager.load
and setup_camera); the renderer owns only the render target.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.camera import setup_camera
    >>> from src.spheretrace.core.renderer import Renderer, RenderSettings
    >>> from src.spheretrace.scene.manager import SceneManager
    >>> from src.spheretrace.scene.random_scene import create_cover_camera, create_random_scene
    >>>
    >>> SceneManager().load(create_random_scene())
    >>> setup_camera(create_cover_camera(300, 200))
    >>> renderer = Renderer(RenderSettings(width=300, height=200, samples_per_pixel=10))
    >>> renderer.render(callback=lambda done, total: print(f"{done}/{total} rows"))
    >>> renderer.save_image("out.png")
"""

from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from typing import Protocol

import numpy as np
import numpy.typing as npt

from src.spheretrace.core.integrator import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    clear_render_target,
    get_pixels_numpy,
    get_total_samples,
    render_rows,
    resolve_image,
    setup_render_target,
)
from src.spheretrace.core.integrator import get_pixel as _get_pixel

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class CancelToken(Protocol):
    """Anything with an is_set() method, such as threading.Event."""

    def is_set(self) -> bool: ...


class RenderCancelled(RuntimeError):
    """Raised when a render is cancelled between bands."""


@dataclass(frozen=True)
class RenderSettings:
    """Image size and sampling configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples added to each pixel by one render() call.
        band_height: Rows rendered per kernel launch. This is also the
            granularity of progress reports and cancellation: the cancel
            token is polled between bands, never inside one.
    """

    width: int
    height: int
    samples_per_pixel: int
    band_height: int = 16

    def __post_init__(self) -> None:
        if not 0 < self.width <= MAX_IMAGE_WIDTH:
            raise ValueError(f"Width {self.width} must be in [1, {MAX_IMAGE_WIDTH}]")
        if not 0 < self.height <= MAX_IMAGE_HEIGHT:
            raise ValueError(f"Height {self.height} must be in [1, {MAX_IMAGE_HEIGHT}]")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"Samples per pixel ({self.samples_per_pixel}) must be positive")
        if self.band_height <= 0:
            raise ValueError(f"Band height ({self.band_height}) must be positive")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Renders the loaded scene into an 8-bit image.

    The render target is a set of module-level Taichi fields, so only one
    Renderer is usable at a time; creating a Renderer sets the target up
    for its image size and clears it.

    Attributes:
        settings: The render settings.
    """

    def __init__(self, settings: RenderSettings) -> None:
        self.settings = settings
        setup_render_target(settings.width, settings.height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Discard all accumulated samples."""
        clear_render_target()

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render samples_per_pixel samples, yielding after each band.

        Yields:
            Tuple of (rows_done, total_rows). Rows are rendered from the top
            of the image down.

        Example:
            >>> for done, total in renderer.render_progressive():
            ...     print(f"{done}/{total}")
        """
        total = self.height
        band = self.settings.band_height
        for y_start in range(0, total, band):
            y_end = min(y_start + band, total)
            render_rows(y_start, y_end, self.settings.samples_per_pixel)
            yield (y_end, total)
        resolve_image()

    def render(
        self,
        callback: ProgressCallback | None = None,
        cancel: CancelToken | None = None,
    ) -> None:
        """Render samples_per_pixel samples into every pixel.

        Samples accumulate across calls: rendering twice gives twice the
        samples per pixel.

        Args:
            callback: Optional function called after each band with
                (rows_done, total_rows).
            cancel: Optional token polled before each band.

        Raises:
            RenderCancelled: If cancel was set. Bands finished before the
                cancellation keep their samples; the resolved image is not
                updated.
        """
        progress = self.render_progressive()
        while True:
            if cancel is not None and cancel.is_set():
                progress.close()
                raise RenderCancelled("Render cancelled")
            try:
                rows_done, total_rows = next(progress)
            except StopIteration:
                break
            if callback is not None:
                callback(rows_done, total_rows)

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8, row 0
            at the top.
        """
        return get_pixels_numpy()

    def pixels(self) -> Iterator[tuple[int, int, int]]:
        """Iterate over the pixels left to right, top to bottom."""
        image = self.get_image_uint8()
        for row in image:
            for r, g, b in row:
                yield (int(r), int(g), int(b))

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Get the pixel in column x, row y (0, 0 is the top-left)."""
        return _get_pixel(x, y)

    def save_image(self, filepath: str) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image; the format follows the extension.
        """
        from src.spheretrace.preview.export import save_png

        save_png(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )
