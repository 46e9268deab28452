"""Random number source and rejection samplers for Monte Carlo rendering.

Every draw goes through random_float(). By default it returns ``ti.random``,
whose generator state is owned by the Taichi thread executing the current
pixel, so parallel pixel tasks never share a mutable generator.

For regression tests the stream can be replaced by a constant with
use_fixed_random(). The arithmetic of a render then depends only on the
scene and camera, and two renders produce identical images.

Example:
    >>> from src.spheretrace.core.sampler import use_fixed_random, use_thread_random
    >>> use_fixed_random(0.5)   # every draw returns 0.5
    >>> use_thread_random()     # back to per-thread random streams
"""

import math

import taichi as ti

from src.spheretrace.core.vector import squared_length, vec3

# Upper bound on rejection-sampling attempts. A uniform source accepts a
# candidate with probability pi/6 (sphere) or pi/4 (disk) per attempt.
MAX_REJECTION_TRIES = 100

# Deterministic stub state
_use_fixed = ti.field(dtype=ti.i32, shape=())
_fixed_value = ti.field(dtype=ti.f32, shape=())

# A constant draw v gives the candidate (2v - 1) * (1, 1, 1), which lies
# inside the unit sphere only when |2v - 1| < 1/sqrt(3)
_MAX_FIXED_OFFSET = 1.0 / math.sqrt(3.0)


def use_fixed_random(value: float) -> None:
    """Replace the random stream with a constant.

    Args:
        value: The value every draw returns, in [0, 1). The rejection
            samplers see the candidate (2 * value - 1) on every axis, so the
            value must keep it inside the unit sphere.

    Raises:
        ValueError: If value is outside [0, 1) or too far from 0.5.
    """
    if not 0.0 <= value < 1.0:
        raise ValueError(f"Fixed random value {value} is outside [0, 1)")
    if abs(2.0 * value - 1.0) >= _MAX_FIXED_OFFSET:
        raise ValueError(
            f"Fixed random value {value} gives a point outside the unit sphere; "
            f"use a value within {_MAX_FIXED_OFFSET / 2:.3f} of 0.5"
        )
    _fixed_value[None] = value
    _use_fixed[None] = 1


def use_thread_random() -> None:
    """Restore the per-thread Taichi random streams."""
    _use_fixed[None] = 0


def is_fixed_random() -> bool:
    """Check whether the deterministic stub is installed."""
    return bool(_use_fixed[None])


@ti.func
def random_float() -> ti.f32:
    """Draw a uniform float in [0, 1)."""
    result = 0.0
    if _use_fixed[None] == 1:
        result = _fixed_value[None]
    else:
        result = ti.random(ti.f32)
    return result


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point strictly inside the unit sphere.

    Draws points uniformly in the cube [-1, 1]^3 and rejects those with
    squared length >= 1. If every attempt is rejected the center is
    returned.

    Returns:
        A point with squared length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            p = 2.0 * vec3(random_float(), random_float(), random_float()) - vec3(1.0, 1.0, 1.0)
            if squared_length(p) < 1.0:
                found = 1
    assert found == 1, "random_in_unit_sphere: rejection sampling exhausted"
    if found == 0:
        p = vec3(0.0, 0.0, 0.0)
    return p


@ti.func
def random_in_unit_disk() -> vec3:
    """Generate a random point strictly inside the unit disk in the xy-plane.

    Used by the camera lens for depth of field. If every attempt is
    rejected the center is returned.

    Returns:
        A point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            p = 2.0 * vec3(random_float(), random_float(), 0.0) - vec3(1.0, 1.0, 0.0)
            if squared_length(p) < 1.0:
                found = 1
    assert found == 1, "random_in_unit_disk: rejection sampling exhausted"
    if found == 0:
        p = vec3(0.0, 0.0, 0.0)
    return p
