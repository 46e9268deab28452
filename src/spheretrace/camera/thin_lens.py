"""Thin-lens camera model with depth of field.

The camera maps normalized image-plane coordinates (s, t) to world-space
rays. It supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view specification
- Arbitrary aspect ratios
- A finite aperture focused at ``focus_dist`` (zero aperture is a pinhole)
- Jittered sampling for anti-aliasing

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The image plane is placed on the plane of focus, so every ray through a
given (s, t) converges there regardless of where on the lens it starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.camera.thin_lens import ThinLensCamera, setup_camera
    >>> camera = ThinLensCamera(
    ...     lookfrom=(13.0, 2.0, 3.0),
    ...     lookat=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=1.5,
    ...     aperture=0.1,
    ...     focus_dist=10.0,
    ... )
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.spheretrace.core.ray import Ray, make_ray
from src.spheretrace.core.sampler import random_float, random_in_unit_disk
from src.spheretrace.core.vector import vec3

# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass(frozen=True)
class ThinLensCamera:
    """Configuration for a thin-lens camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_dist: Distance from the camera to the plane in focus.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float
    aperture: float = 0.0
    focus_dist: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"Vertical field of view {self.vfov} must be in (0, 180) degrees")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio {self.aspect_ratio} must be positive")
        if self.aperture < 0.0:
            raise ValueError(f"Aperture {self.aperture} must not be negative")
        if self.focus_dist <= 0.0:
            raise ValueError(f"Focus distance {self.focus_dist} must be positive")

    @classmethod
    def for_image(
        cls,
        width: int,
        height: int,
        *,
        lookfrom: tuple[float, float, float],
        lookat: tuple[float, float, float],
        vup: tuple[float, float, float] = (0.0, 1.0, 0.0),
        vfov: float = 90.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0,
    ) -> "ThinLensCamera":
        """Create a camera whose aspect ratio matches an image size."""
        return cls(
            lookfrom=lookfrom,
            lookat=lookat,
            vup=vup,
            vfov=vfov,
            aspect_ratio=width / height,
            aperture=aperture,
            focus_dist=focus_dist,
        )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f32, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f32, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f32, shape=())  # Backward (opposite view)

# Viewport on the focus plane
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())

_lens_radius = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: ThinLensCamera) -> None:
    """Derive the camera basis and viewport and store them for rendering.

    Args:
        camera: Camera configuration with position, orientation, FOV and lens.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    theta = math.radians(camera.vfov)
    half_height = math.tan(theta / 2.0)
    half_width = camera.aspect_ratio * half_height
    focus = camera.focus_dist

    lookfrom = np.array(camera.lookfrom, dtype=np.float32)
    lookat = np.array(camera.lookat, dtype=np.float32)
    vup = np.array(camera.vup, dtype=np.float32)

    w = lookfrom - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    lower_left = lookfrom - half_width * focus * u - half_height * focus * v - focus * w
    horizontal = 2.0 * half_width * focus * u
    vertical = 2.0 * half_height * focus * v

    _camera_origin[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _lens_radius[None] = camera.aperture / 2.0


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    The ray starts at a random point on the lens disk and passes through
    the point (s, t) of the viewport on the focus plane:
    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    Args:
        s: Horizontal image-plane fraction in [0, 1].
        t: Vertical image-plane fraction in [0, 1].

    Returns:
        A Ray whose direction is not normalized.
    """
    rd = _lens_radius[None] * random_in_unit_disk()
    offset = _camera_u[None] * rd.x + _camera_v[None] * rd.y
    origin = _camera_origin[None]

    direction = (
        _lower_left_corner[None]
        + s * _viewport_horizontal[None]
        + t * _viewport_vertical[None]
        - origin
        - offset
    )
    return make_ray(origin + offset, direction)


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a ray through a random point inside a pixel.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A camera ray through ``((i + rand) / width, (j + rand) / height)``.
    """
    s = (ti.cast(pixel_i, ti.f32) + random_float()) / ti.cast(width, ti.f32)
    t = (ti.cast(pixel_j, ti.f32) + random_float()) / ti.cast(height, ti.f32)
    return get_ray(s, t)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float] | float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left
        (as tuples) and lens_radius.
    """

    def _as_tuple(f) -> tuple[float, float, float]:
        value = f[None]
        return (float(value[0]), float(value[1]), float(value[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "u": _as_tuple(_camera_u),
        "v": _as_tuple(_camera_v),
        "w": _as_tuple(_camera_w),
        "horizontal": _as_tuple(_viewport_horizontal),
        "vertical": _as_tuple(_viewport_vertical),
        "lower_left": _as_tuple(_lower_left_corner),
        "lens_radius": float(_lens_radius[None]),
    }
