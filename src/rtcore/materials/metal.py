"""Metal (specular reflective) material.

A metal mirrors the incoming direction across the normal::

    R = I - 2 (I . N) N

and then perturbs the reflection by a random point in the unit ball scaled
by the fuzziness (0 = perfect mirror, larger = blurrier). If the perturbed
direction ends up at or below the surface the ray is absorbed.

Example:
    >>> # Inside a Taichi kernel:
    >>> # direction, attenuation, did_scatter, state = scatter_metal(
    >>> #     albedo, fuzziness, incident_dir, normal, state
    >>> # )
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from rtcore.core.sampler import random_in_unit_sphere
from rtcore.core.vec3 import real, reflect, unit, vec3
from rtcore.materials.material import MaterialKind, validate_color


@dataclass(frozen=True)
class Metal:
    """Metal (specular reflective) material parameters.

    Attributes:
        albedo: The reflective colour (RGB, each component in [0, 1]).
        fuzziness: Reflection blur in [0, 1]. 0 = perfect mirror.
    """

    albedo: tuple[float, float, float]
    fuzziness: float = 0.0

    kind: ClassVar[MaterialKind] = MaterialKind.METAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_color("Albedo", self.albedo))
        if not 0.0 <= self.fuzziness <= 1.0:
            raise ValueError(f"Fuzziness {self.fuzziness} is outside [0, 1]")


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzziness: real,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective colour.
        fuzziness: The reflection blur in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the incoming ray.
        state: Generator state of the calling task.

    Returns:
        A tuple (scattered_direction, attenuation, did_scatter, state).
        did_scatter is 0 exactly when the fuzzed reflection points into
        the surface (dot with the normal <= 0).
    """
    reflected = reflect(unit(incident_direction), normal)

    fuzz, s = random_in_unit_sphere(state)
    scattered_direction = reflected + fuzziness * fuzz

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter, s
