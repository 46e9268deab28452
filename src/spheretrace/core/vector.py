"""Vector algebra for the path tracer.

The vector primitive is Taichi's ``vec3`` (three f32 components). It already
provides componentwise arithmetic, unary negation, scalar multiplication from
either side, scalar division and the compound-assignment forms, so this
module only adds the free functions the renderer uses on top of it.

The same type doubles as an RGB color, with (x, y, z) read as (r, g, b).

Degenerate input is not guarded: normalizing a zero vector yields NaN/Inf
components, which then propagate through the rest of the computation.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.vector import cross, dot, vec3
    >>> @ti.kernel
    ... def k() -> ti.f32:
    ...     return dot(vec3(1.0, 2.0, 3.0), vec3(4.0, 5.0, 6.0))
    >>> k()
    32.0
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product ``sum(a_i * b_i)``."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product ``a x b``."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def squared_length(v: vec3) -> ti.f32:
    """Compute ``dot(v, v)``.

    Cheaper than length() when only comparing magnitudes, as it avoids
    the square root.
    """
    return dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(squared_length(v))


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Args:
        v: The input vector. Must be non-zero; a zero vector produces
            NaN components.

    Returns:
        ``v / length(v)``.
    """
    return v / length(v)


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect ``v`` about the normal ``n``.

    Computes ``v - 2 * dot(v, n) * n``. The normal should be unit length
    for a mirror reflection; ``v`` may have any length.
    """
    return v - 2.0 * dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: ti.f32):
    """Refract ``v`` through a surface with normal ``n`` using Snell's law.

    The incoming vector is normalized first. Refraction is impossible when
    the discriminant ``1 - (ni/nt)^2 * (1 - cos^2)`` is not positive, which
    is total internal reflection.

    Args:
        v: The incoming direction (any non-zero length).
        n: The unit surface normal on the side the ray arrives from.
        ni_over_nt: Ratio of the refractive index of the incident medium to
            that of the transmitting medium.

    Returns:
        A tuple ``(ok, refracted)``. ``ok`` is 1 when refraction happened
        and 0 on total internal reflection, in which case ``refracted`` is
        the zero vector.
    """
    uv = unit_vector(v)
    dt = dot(uv, n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)

    ok = 0
    refracted = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        ok = 1
        refracted = ni_over_nt * (uv - n * dt) - n * ti.sqrt(discriminant)

    return ok, refracted


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Schlick's approximation of angle-dependent reflectance.

    Args:
        cosine: Cosine of the angle between the ray and the normal.
        ref_idx: Refractive index of the material.

    Returns:
        ``r0 + (1 - r0) * (1 - cosine)^5`` with
        ``r0 = ((1 - ref_idx) / (1 + ref_idx))^2``.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)
