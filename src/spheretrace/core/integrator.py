"""Path tracing integrator.

This module estimates the color seen along camera rays and accumulates the
estimates into a render target.

A path starts at the camera and bounces off surfaces according to their
materials. A path that leaves the scene picks up the sky gradient; a path
that is absorbed, or that is still bouncing after MAX_DEPTH bounces,
contributes black. The color of a path is the sky color multiplied by the
attenuation of every bounce on the way.

Taichi functions cannot recurse, so color() runs the bounces as a bounded
loop that carries the product of attenuations.

Pixels are resolved to 8 bits as ``254.99 * sqrt(mean)`` per channel (a
gamma 2 curve), clamped to [0, 255] with NaN mapped to 0.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.integrator import (
    ...     get_pixels_numpy, render_image, resolve_image, setup_render_target
    ... )
    >>> from src.spheretrace.camera import setup_camera
    >>> from src.spheretrace.scene.manager import SceneManager
    >>> from src.spheretrace.scene.random_scene import (
    ...     create_three_sphere_camera, create_three_sphere_scene
    ... )
    >>>
    >>> SceneManager().load(create_three_sphere_scene())
    >>> setup_camera(create_three_sphere_camera(200, 100))
    >>> setup_render_target(200, 100)
    >>> render_image(samples=16)
    >>> resolve_image()
    >>> image = get_pixels_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.spheretrace.camera.thin_lens import get_ray_jittered
from src.spheretrace.core.ray import Ray, make_ray
from src.spheretrace.core.vector import unit_vector, vec3
from src.spheretrace.materials.scatter import scatter
from src.spheretrace.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum number of bounces; a path that hits a surface at this depth is black
MAX_DEPTH = 50

# Intersection window; T_MIN keeps scattered rays off the surface they left
T_MIN = 0.001
T_MAX = float(np.finfo(np.float32).max)

# Sky gradient endpoints
WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# Scale applied after the square-root gamma curve
COLOR_SCALE = 254.99

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color sum and sample count, indexed [i, j] with j = 0 at the bottom
_color_sum = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_sample_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Resolved 8-bit RGB, indexed [row, column] with row 0 at the top
_pixels = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers. The buffers
    are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT so that changing
    the image size does not recompile kernels.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the accumulated samples and the resolved pixels."""
    _color_sum.fill(0.0)
    _sample_count.fill(0)
    _pixels.fill(0)


def reset_render_target() -> None:
    """Forget the render target entirely; it must be set up again before use."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def background(direction: vec3) -> vec3:
    """Sky color for a ray that leaves the scene.

    Blends linearly from white (straight down) to sky blue (straight up)
    on the y component of the normalized direction.
    """
    t = 0.5 * (unit_vector(direction).y + 1.0)
    return (1.0 - t) * WHITE + t * SKY_BLUE


@ti.func
def color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the color seen along a ray.

    Args:
        ray: The ray to follow.
        depth: Number of bounces already taken before this ray.

    Returns:
        The background color times the attenuation of every bounce if the
        path escapes; black if it is absorbed or hits a surface at
        MAX_DEPTH or deeper.
    """
    result = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray

    # Active flag for path continuation
    active = 1

    for d in range(depth, ti.max(depth, MAX_DEPTH) + 1):
        if active == 1:
            rec = intersect_scene(current, T_MIN, T_MAX)

            if rec.hit == 0:
                result = throughput * background(current.direction)
                active = 0
            else:
                srec = scatter(current, rec)
                if srec.did_scatter == 0 or d >= MAX_DEPTH:
                    active = 0
                else:
                    throughput *= srec.attenuation
                    current = srec.scattered

    return result


@ti.func
def _to_byte(value: ti.f32) -> ti.i32:
    """Map a linear channel mean to [0, 255] with the gamma 2 curve."""
    byte = 0
    if not tm.isnan(value):
        scaled = COLOR_SCALE * ti.sqrt(ti.max(value, 0.0))
        byte = ti.cast(ti.min(scaled, 255.0), ti.i32)
    return byte


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32, height: ti.i32, samples: ti.i32):
    """Add `samples` samples to every pixel of rows [row_start, row_end).

    Rows count from the top of the image. Each pixel is an independent task
    of the parallel loop and runs its samples sequentially.
    """
    for row, i in ti.ndrange((row_start, row_end), width):
        j = height - 1 - row
        total = vec3(0.0, 0.0, 0.0)
        for _ in range(samples):
            total += color(get_ray_jittered(i, j, width, height), 0)
        _color_sum[i, j] += total
        _sample_count[i, j] += samples


@ti.kernel
def _resolve(width: ti.i32, height: ti.i32):
    """Convert accumulated sums into 8-bit pixels, flipping to top-left origin."""
    for i, j in ti.ndrange(width, height):
        rgb = ti.Vector([0, 0, 0], dt=ti.i32)
        n = _sample_count[i, j]
        if n > 0:
            mean = _color_sum[i, j] / ti.cast(n, ti.f32)
            for c in ti.static(range(3)):
                rgb[c] = _to_byte(mean[c])
        _pixels[height - 1 - j, i] = rgb


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    """Evaluate color() for one ray. Used for testing and debugging."""
    return color(make_ray(origin, direction), depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(y_start: int, y_end: int, samples: int) -> None:
    """Accumulate samples for a band of rows.

    Args:
        y_start: First row of the band, counting from the top (inclusive).
        y_end: End of the band (exclusive).
        samples: Number of samples to add to each pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the band is outside the image or samples is not
            positive.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= y_start <= y_end <= height:
        raise ValueError(f"Row band [{y_start}, {y_end}) is outside the image height {height}")
    if samples <= 0:
        raise ValueError(f"Samples per pixel ({samples}) must be positive")

    if y_end > y_start:
        _render_rows(y_start, y_end, width, height, samples)


def render_image(samples: int = 1) -> None:
    """Accumulate samples for every pixel of the image.

    Can be called multiple times to add more samples.

    Args:
        samples: Number of samples to add to each pixel.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If samples is not positive.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    render_rows(0, height, samples)


def resolve_image() -> None:
    """Convert the accumulated samples into 8-bit pixels.

    Pixels that have no samples yet resolve to black.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _resolve(width, height)


def get_pixels_numpy() -> npt.NDArray[np.uint8]:
    """Get the resolved image as a NumPy array.

    Call resolve_image() first to bring the pixels up to date.

    Returns:
        Array of shape (height, width, 3) with dtype uint8, row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _pixels.to_numpy()
    return full_image[:height, :width, :].astype(np.uint8)


def get_pixel(x: int, y: int) -> tuple[int, int, int]:
    """Get one resolved pixel.

    Args:
        x: Column, 0 at the left.
        y: Row, 0 at the top.

    Returns:
        Tuple of (R, G, B) in [0, 255].

    Raises:
        RuntimeError: If render target has not been set up.
        IndexError: If (x, y) is outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) is outside the {width}x{height} image")
    value = _pixels[y, x]
    return (int(value[0]), int(value[1]), int(value[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Evaluate the color along a single ray against the loaded scene.

    This is a Python-callable function for testing. For rendering, use
    render_image() which processes all pixels in parallel.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        depth: Number of bounces already taken.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    result = _trace_single_ray(vec3(*origin), vec3(*direction), depth)
    return (float(result[0]), float(result[1]), float(result[2]))


def get_total_samples() -> int:
    """Get the number of samples accumulated per pixel.

    Returns the sample count of the top-left pixel, which is the same for
    all pixels after render_image().

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    return int(_sample_count[0, height - 1])
