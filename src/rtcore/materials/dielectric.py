"""Dielectric (glass/water) material.

A dielectric either refracts or reflects each incoming ray; it never
absorbs and never tints (attenuation is white).

Key physics:
    - Snell's law: n1 sin(theta1) = n2 sin(theta2)
    - Total internal reflection when (n1 / n2) sin(theta1) > 1
    - Schlick's approximation for the Fresnel reflectance

Rather than splitting the ray, the material picks reflection with
probability equal to the Schlick reflectance. Averaged over many samples
this reproduces the angle-dependent mix of reflection and transmission.

Example:
    >>> # Inside a Taichi kernel:
    >>> # direction, attenuation, did_scatter, state = scatter_dielectric(
    >>> #     ior, incident_dir, normal, hit_from_inside, state
    >>> # )
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from rtcore.core.sampler import random_float
from rtcore.core.vec3 import real, reflect, refract, unit, vec3
from rtcore.materials.material import MaterialKind


@dataclass(frozen=True)
class Dielectric:
    """Dielectric (glass/water) material parameters.

    Attributes:
        index_of_refraction: Index of refraction relative to the
            surrounding medium. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    index_of_refraction: float

    kind: ClassVar[MaterialKind] = MaterialKind.DIELECTRIC

    def __post_init__(self) -> None:
        if self.index_of_refraction <= 0.0:
            raise ValueError(
                f"Index of refraction must be positive, got {self.index_of_refraction}"
            )


@ti.func
def schlick_reflectance(cosine: real, ref_idx: real) -> real:
    """Fresnel reflectance via Schlick's approximation.

    r0 = ((1 - n) / (1 + n))^2,  R = r0 + (1 - r0) (1 - cos)^5

    Args:
        cosine: Cosine of the angle between the reversed incident
            direction and the normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The reflectance in [0, 1].
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def cannot_refract(cos_theta: real, refraction_ratio: real) -> ti.i32:
    """Whether Snell's law has no solution (total internal reflection)."""
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return refraction_ratio * sin_theta > 1.0


@ti.func
def scatter_dielectric(
    ior: real,
    incident_direction: vec3,
    normal: vec3,
    hit_from_inside: ti.i32,
    state: ti.u32,
):
    """Scatter a ray at a dielectric interface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.
        hit_from_inside: 1 if the ray travels inside the material
            (glass to air), 0 if it arrives from outside (air to glass).
        state: Generator state of the calling task.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, state).
        attenuation is always white and did_scatter always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    refraction_ratio = 1.0 / ior
    if hit_from_inside == 1:
        refraction_ratio = ior

    unit_direction = unit(incident_direction)
    # Round-off can push the cosine marginally past 1
    cos_theta = ti.min(tm.dot(-unit_direction, normal), 1.0)

    xi, s = random_float(state)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract(cos_theta, refraction_ratio) or schlick_reflectance(
        cos_theta, refraction_ratio
    ) > xi:
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio)

    return scattered_direction, attenuation, 1, s
