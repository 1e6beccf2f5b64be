"""Core rendering module.

Components:
    vec3: Double-precision vector type and vector utilities
    sampler: Per-task xorshift generators and geometric sampling
    ray: Ray data structure
    integrator: Path loop, material dispatch and row kernel
    renderer: Row-streaming renderer producing 8-bit images
"""

from .ray import Ray, make_ray, ray_at
from .sampler import (
    next_state,
    random_float,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_range,
    random_unit_vector,
    random_vec,
    random_vec_range,
    seed_state,
)
from .vec3 import (
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    real,
    reflect,
    refract,
    sqrt_components,
    unit,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import them directly from rtcore.core.integrator and rtcore.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "real",
    "vec3",
    "dot",
    "cross",
    "length",
    "length_squared",
    "unit",
    "sqrt_components",
    "near_zero",
    "reflect",
    "refract",
    "seed_state",
    "next_state",
    "random_float",
    "random_range",
    "random_vec",
    "random_vec_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
]
