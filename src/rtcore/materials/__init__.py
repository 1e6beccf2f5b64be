"""Materials module for light scattering models.

Components:
    material: Material kinds and the packed per-surface material record
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance

Each material has a frozen parameter dataclass for scene construction and a
Taichi scatter function returning (direction, attenuation, did_scatter, state).
"""

from .dielectric import Dielectric, cannot_refract, scatter_dielectric, schlick_reflectance
from .lambertian import Lambertian, scatter_lambertian
from .material import Material, MaterialKind, validate_color
from .metal import Metal, scatter_metal

__all__ = [
    "MaterialKind",
    "Material",
    "validate_color",
    "Lambertian",
    "scatter_lambertian",
    "Metal",
    "scatter_metal",
    "Dielectric",
    "scatter_dielectric",
    "schlick_reflectance",
    "cannot_refract",
]
