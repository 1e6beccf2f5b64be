"""Material kinds and the packed per-surface material record.

Each surface owns exactly one material. On the Python side a material is
one of the parameter classes ``Lambertian``, ``Metal`` or ``Dielectric``;
when a world is built, each surface's parameters are packed into its own
slot as a ``Material`` record tagged with its ``MaterialKind``. The
integrator dispatches on that tag to the matching scatter function.
"""

from enum import IntEnum

import taichi as ti

from rtcore.core.vec3 import real, vec3


class MaterialKind(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


@ti.dataclass
class Material:
    """Packed material parameters of one surface.

    Only the fields relevant to ``kind`` are meaningful; the rest are zero.

    Attributes:
        kind: The MaterialKind value.
        albedo: Reflectance colour (Lambertian, Metal).
        fuzziness: Reflection blur in [0, 1] (Metal).
        ior: Index of refraction (Dielectric).
    """

    kind: ti.i32
    albedo: vec3
    fuzziness: real
    ior: real


def validate_color(name: str, color: tuple[float, float, float]) -> tuple[float, float, float]:
    """Check that a colour has three components in [0, 1] and return it as floats.

    Raises:
        ValueError: If the colour has the wrong length or a component is
            outside [0, 1].
    """
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(color[0]), float(color[1]), float(color[2]))
