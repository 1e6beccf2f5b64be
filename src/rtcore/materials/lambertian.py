"""Lambertian (ideal diffuse) material.

A diffuse surface scatters toward ``normal + random_unit_vector()``, which
distributes outgoing directions proportionally to the cosine of the angle
from the normal. The attenuation is the albedo, independent of angle.

When the random unit vector is almost exactly opposite the normal the sum
cancels to (nearly) zero; the normal itself is used instead so the
scattered ray always has a usable direction.

Example:
    >>> # Inside a Taichi kernel:
    >>> # direction, attenuation, did_scatter, state = scatter_lambertian(
    >>> #     albedo, normal, state
    >>> # )
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from rtcore.core.sampler import random_unit_vector
from rtcore.core.vec3 import near_zero, vec3
from rtcore.materials.material import MaterialKind, validate_color


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material parameters.

    Attributes:
        albedo: The diffuse reflectance colour (RGB, each component in [0, 1]).
    """

    albedo: tuple[float, float, float]

    kind: ClassVar[MaterialKind] = MaterialKind.LAMBERTIAN

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_color("Albedo", self.albedo))


@ti.func
def _diffuse_direction(normal: vec3, offset: vec3) -> vec3:
    scattered_direction = normal + offset

    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, state: ti.u32):
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance colour.
        normal: The unit surface normal, facing the incoming ray.
        state: Generator state of the calling task.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, state).
        did_scatter is always 1: diffuse surfaces never absorb outright.
    """
    offset, s = random_unit_vector(state)
    return _diffuse_direction(normal, offset), albedo, 1, s
