"""Double-precision vector type and vector utilities for the transport kernels.

Every position, direction and RGB colour in the renderer is a ``vec3``: a
3-component ``ti.f64`` vector. Arithmetic (``+``, ``-``, unary ``-``, scalar
and component-wise ``*``, ``/``) comes from Taichi's vector type; this module
adds the geometric helpers the camera, the sphere and the materials need.

All helpers are ``@ti.func`` and are inlined into the calling kernel.

Example:
    >>> import taichi as ti
    >>> from rtcore.config import init_taichi
    >>> init_taichi("cpu")
    >>> from rtcore.core.vec3 import reflect, vec3
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Scalar and vector types shared by every kernel
real = ti.f64
vec3 = ti.types.vector(3, real)

# Components below this magnitude count as zero in near_zero()
NEAR_ZERO_EPSILON = 1e-8


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Squared Euclidean length of v (no square root)."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Euclidean length of v."""
    return ti.sqrt(length_squared(v))


@ti.func
def unit(v: vec3) -> vec3:
    """Normalize v to unit length.

    The zero vector has no direction; passing it is a precondition
    violation and yields non-finite components.

    Args:
        v: The input vector (must be non-zero).

    Returns:
        v / |v|.
    """
    return v / length(v)


@ti.func
def sqrt_components(v: vec3) -> vec3:
    """Element-wise square root, used for gamma-2 correction of colours."""
    return vec3(ti.sqrt(v.x), ti.sqrt(v.y), ti.sqrt(v.z))


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check whether every component of v is below NEAR_ZERO_EPSILON in magnitude.

    Used to detect degenerate scatter directions.

    Returns:
        1 if v is (numerically) the zero vector, 0 otherwise.
    """
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Mirror v across the plane whose unit normal is n.

    Computes v - 2 (v . n) n. A vector lying exactly along n reflects to
    its exact negation.

    Args:
        v: The incoming direction (pointing toward the surface).
        n: The unit surface normal.

    Returns:
        The reflected direction (pointing away from the surface).
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(uv: vec3, n: vec3, etai_over_etat: real) -> vec3:
    """Bend a unit direction through an interface using Snell's law.

    The result is split into the component perpendicular to n, scaled by
    the ratio of refractive indices, and the parallel component that
    restores unit length. Callers must rule out total internal reflection
    first; the absolute value only guards against round-off.

    Args:
        uv: The incoming unit direction.
        n: The unit normal facing against uv.
        etai_over_etat: Ratio of the incident to the transmitted index.

    Returns:
        The refracted direction.
    """
    cos_theta = ti.min(tm.dot(-uv, n), 1.0)
    r_out_perp = etai_over_etat * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - length_squared(r_out_perp))) * n
    return r_out_perp + r_out_parallel
