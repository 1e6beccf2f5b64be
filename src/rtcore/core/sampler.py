"""Per-task random number generation for Monte Carlo sampling.

Kernels never share a generator. Each pixel seeds its own 32-bit xorshift
state from the render seed and the pixel index, and that state is threaded
explicitly through every sampling call::

    value, state = random_float(state)

Because the sequence a pixel sees depends only on (seed, pixel index), a
render is reproducible regardless of how Taichi schedules pixels onto
threads.

The rejection samplers loop until they accept; acceptance probability is
about 52% for the unit ball and 79% for the unit disk, so termination is
overwhelmingly likely within a handful of iterations.

Example:
    >>> @ti.kernel
    ... def draw(seed: ti.u32) -> ti.f64:
    ...     state = seed_state(seed, ti.cast(0, ti.u32))
    ...     value, state = random_float(state)
    ...     return value
"""

import taichi as ti

from rtcore.core.vec3 import length_squared, real, unit, vec3

# 2^-24: maps the top 24 bits of a state to [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0

# Unit-ball samples closer to the origin than this are redrawn before normalizing
_MIN_UNIT_VECTOR_LENGTH_SQUARED = 1e-160


@ti.func
def _wang_hash(x: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer (Thomas Wang's integer hash)."""
    h = (x ^ ti.cast(61, ti.u32)) ^ (x >> ti.cast(16, ti.u32))
    h *= ti.cast(9, ti.u32)
    h = h ^ (h >> ti.cast(4, ti.u32))
    h *= ti.cast(0x27D4EB2D, ti.u32)
    h = h ^ (h >> ti.cast(15, ti.u32))
    return h


@ti.func
def seed_state(seed: ti.u32, stream: ti.u32) -> ti.u32:
    """Derive an independent generator state for one task.

    Args:
        seed: The render-wide seed.
        stream: A task identifier (typically the flattened pixel index).

    Returns:
        A non-zero xorshift32 state.
    """
    state = _wang_hash(seed ^ _wang_hash(stream))
    if state == ti.cast(0, ti.u32):
        # xorshift has a fixed point at zero
        state = ti.cast(1, ti.u32)
    return state


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance a xorshift32 state by one step."""
    x = state
    x ^= x << ti.cast(13, ti.u32)
    x ^= x >> ti.cast(17, ti.u32)
    x ^= x << ti.cast(5, ti.u32)
    return x


@ti.func
def random_float(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple (value, new_state).
    """
    s = next_state(state)
    value = ti.cast(s >> ti.cast(8, ti.u32), real) * _INV_2_POW_24
    return value, s


@ti.func
def random_range(lo: real, hi: real, state: ti.u32):
    """Draw a uniform float in [lo, hi).

    Returns:
        A tuple (value, new_state).
    """
    value, s = random_float(state)
    return lo + (hi - lo) * value, s


@ti.func
def random_vec(state: ti.u32):
    """Draw a vector with each component uniform in [0, 1).

    Returns:
        A tuple (vector, new_state).
    """
    x, s = random_float(state)
    y, s = random_float(s)
    z, s = random_float(s)
    return vec3(x, y, z), s


@ti.func
def random_vec_range(lo: real, hi: real, state: ti.u32):
    """Draw a vector with each component uniform in [lo, hi).

    Returns:
        A tuple (vector, new_state).
    """
    x, s = random_range(lo, hi, state)
    y, s = random_range(lo, hi, s)
    z, s = random_range(lo, hi, s)
    return vec3(x, y, z), s


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Draw a point uniformly from the closed unit ball.

    Rejection sampling: draw from the cube [-1, 1]^3 and accept when the
    squared length is at most 1.

    Returns:
        A tuple (point, new_state) with |point| <= 1.
    """
    s = state
    p = vec3(0.0, 0.0, 0.0)
    while True:
        p, s = random_vec_range(-1.0, 1.0, s)
        if length_squared(p) <= 1.0:
            break
    return p, s


@ti.func
def random_unit_vector(state: ti.u32):
    """Draw a direction uniformly from the unit sphere surface.

    Normalizes a unit-ball sample, redrawing the (measure-zero) samples
    that sit on the origin.

    Returns:
        A tuple (unit_vector, new_state).
    """
    s = state
    p = vec3(0.0, 0.0, 1.0)
    while True:
        p, s = random_in_unit_sphere(s)
        if length_squared(p) > _MIN_UNIT_VECTOR_LENGTH_SQUARED:
            break
    return unit(p), s


@ti.func
def random_in_unit_disk(state: ti.u32):
    """Draw a point uniformly from the closed unit disk in the z = 0 plane.

    Used to jitter ray origins across the camera lens.

    Returns:
        A tuple (point, new_state) with point.z == 0 and |point| <= 1.
    """
    s = state
    p = vec3(0.0, 0.0, 0.0)
    while True:
        x, s = random_range(-1.0, 1.0, s)
        y, s = random_range(-1.0, 1.0, s)
        p = vec3(x, y, 0.0)
        if length_squared(p) <= 1.0:
            break
    return p, s
