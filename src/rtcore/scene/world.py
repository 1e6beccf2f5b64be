"""Scene storage and closest-hit intersection.

A world is an ordered, immutable sequence of spheres, each owning one
material. On construction the spheres are packed into Taichi fields
(structure-of-arrays layout): geometry in ``centers``/``radii`` and each
sphere's own material parameters in the parallel material fields. After
that the fields are only read, so any number of parallel workers can
intersect against the same world without synchronization.

Example:
    >>> world = World([
    ...     SphereSpec((0.0, -100.5, -1.0), 100.0, Lambertian((0.8, 0.8, 0.0))),
    ...     SphereSpec((0.0, 0.0, -1.0), 0.5, Dielectric(1.5)),
    ... ])
    >>> info = world.intersect((0, 0, 0), (0, 0, -1))
    >>> info.surface_id
    1
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np
import taichi as ti

from rtcore.core.ray import Ray, make_ray
from rtcore.core.vec3 import real, vec3
from rtcore.geometry.sphere import HitRecord, Sphere, hit_sphere, miss_record
from rtcore.materials.dielectric import Dielectric
from rtcore.materials.lambertian import Lambertian
from rtcore.materials.material import Material
from rtcore.materials.metal import Metal

logger = logging.getLogger(__name__)

MaterialSpec = Union[Lambertian, Metal, Dielectric]

# Default interval for intersect(); t_min suppresses self-intersection
DEFAULT_T_MIN = 0.001
DEFAULT_T_MAX = math.inf


@dataclass(frozen=True)
class SphereSpec:
    """A sphere surface and the material it owns.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (> 0).
        material: The sphere's material parameters.
    """

    center: tuple[float, float, float]
    radius: float
    material: MaterialSpec

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {len(self.center)}")
        if self.radius <= 0.0:
            raise ValueError(f"Radius must be positive, got {self.radius}")
        if not isinstance(self.material, (Lambertian, Metal, Dielectric)):
            raise ValueError(f"Unknown material type: {type(self.material).__name__}")
        object.__setattr__(self, "center", tuple(float(c) for c in self.center))


@dataclass(frozen=True)
class HitInfo:
    """Python-side copy of a successful intersection.

    Attributes:
        t: Ray parameter of the intersection.
        point: The intersection point.
        normal: Unit normal facing against the ray.
        hit_from_inside: Whether the ray hit the surface from inside.
        surface_id: Index of the hit sphere in the world.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    hit_from_inside: bool
    surface_id: int


@ti.func
def _with_surface_id(rec: HitRecord, surface_id: ti.i32) -> HitRecord:
    """Copy a sphere hit record, tagging it with the index of the hit surface."""
    return HitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        hit_from_inside=rec.hit_from_inside,
        surface_id=surface_id,
    )


@ti.data_oriented
class World:
    """An immutable list of spheres packed into Taichi fields.

    Args:
        spheres: The surfaces in scene order. May be empty.
    """

    def __init__(self, spheres: Sequence[SphereSpec]) -> None:
        self._spheres = tuple(spheres)
        self.count = len(self._spheres)

        # Fields cannot be empty; an empty world keeps one unused slot
        capacity = max(self.count, 1)
        self.centers = ti.Vector.field(3, dtype=real, shape=capacity)
        self.radii = ti.field(dtype=real, shape=capacity)
        self.material_kinds = ti.field(dtype=ti.i32, shape=capacity)
        self.albedos = ti.Vector.field(3, dtype=real, shape=capacity)
        self.fuzziness = ti.field(dtype=real, shape=capacity)
        self.iors = ti.field(dtype=real, shape=capacity)

        self._pack()

        # Output of intersect()
        self._query_hit = ti.field(dtype=ti.i32, shape=())
        self._query_t = ti.field(dtype=real, shape=())
        self._query_point = ti.Vector.field(3, dtype=real, shape=())
        self._query_normal = ti.Vector.field(3, dtype=real, shape=())
        self._query_inside = ti.field(dtype=ti.i32, shape=())
        self._query_surface = ti.field(dtype=ti.i32, shape=())

        logger.debug("Packed %d spheres into world fields", self.count)

    def _pack(self) -> None:
        """Copy sphere geometry and per-sphere material parameters into the fields."""
        capacity = self.radii.shape[0]
        centers = np.zeros((capacity, 3), dtype=np.float64)
        radii = np.zeros(capacity, dtype=np.float64)
        kinds = np.zeros(capacity, dtype=np.int32)
        albedos = np.zeros((capacity, 3), dtype=np.float64)
        fuzziness = np.zeros(capacity, dtype=np.float64)
        iors = np.zeros(capacity, dtype=np.float64)

        for i, sphere in enumerate(self._spheres):
            material = sphere.material
            centers[i] = sphere.center
            radii[i] = sphere.radius
            kinds[i] = int(material.kind)
            if isinstance(material, Lambertian):
                albedos[i] = material.albedo
            elif isinstance(material, Metal):
                albedos[i] = material.albedo
                fuzziness[i] = material.fuzziness
            else:
                iors[i] = material.index_of_refraction

        self.centers.from_numpy(centers)
        self.radii.from_numpy(radii)
        self.material_kinds.from_numpy(kinds)
        self.albedos.from_numpy(albedos)
        self.fuzziness.from_numpy(fuzziness)
        self.iors.from_numpy(iors)

    @property
    def spheres(self) -> tuple[SphereSpec, ...]:
        """The surfaces in scene order."""
        return self._spheres

    def __len__(self) -> int:
        return self.count

    @ti.func
    def hit(self, ray: Ray, t_min: real, t_max: real) -> HitRecord:
        """Find the closest intersection of a ray with any sphere.

        Each sphere is tested against an interval whose upper bound shrinks
        to the closest hit found so far, so the result is the globally
        closest hit regardless of scene order.

        Args:
            ray: The ray to test.
            t_min: Lower bound of the interval (exclusive).
            t_max: Upper bound of the interval (exclusive).

        Returns:
            The closest HitRecord with surface_id set, or a miss record.
        """
        closest_t = t_max
        result = miss_record()

        for i in range(self.count):
            sphere = Sphere(center=self.centers[i], radius=self.radii[i])
            rec = hit_sphere(ray, sphere, t_min, closest_t)
            if rec.hit == 1:
                closest_t = rec.t
                result = _with_surface_id(rec, i)

        return result

    @ti.func
    def material(self, surface_id: ti.i32) -> Material:
        """Get the material owned by a surface."""
        return Material(
            kind=self.material_kinds[surface_id],
            albedo=self.albedos[surface_id],
            fuzziness=self.fuzziness[surface_id],
            ior=self.iors[surface_id],
        )

    @ti.kernel
    def _intersect_kernel(
        self,
        ox: real,
        oy: real,
        oz: real,
        dx: real,
        dy: real,
        dz: real,
        t_min: real,
        t_max: real,
    ):
        ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        rec = self.hit(ray, t_min, t_max)
        self._query_hit[None] = rec.hit
        self._query_t[None] = rec.t
        self._query_point[None] = rec.point
        self._query_normal[None] = rec.normal
        self._query_inside[None] = rec.hit_from_inside
        self._query_surface[None] = rec.surface_id

    def intersect(
        self,
        origin: Sequence[float],
        direction: Sequence[float],
        t_min: float = DEFAULT_T_MIN,
        t_max: float = DEFAULT_T_MAX,
    ) -> HitInfo | None:
        """Intersect a single ray with the world from Python.

        Args:
            origin: The ray origin.
            direction: The ray direction.
            t_min: Lower bound of the interval (exclusive).
            t_max: Upper bound of the interval (exclusive).

        Returns:
            A HitInfo for the closest hit, or None if the ray hits nothing.
        """
        self._intersect_kernel(*origin, *direction, t_min, t_max)
        if self._query_hit[None] == 0:
            return None

        point = self._query_point.to_numpy()
        normal = self._query_normal.to_numpy()
        return HitInfo(
            t=float(self._query_t[None]),
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            hit_from_inside=bool(self._query_inside[None]),
            surface_id=int(self._query_surface[None]),
        )

    def __repr__(self) -> str:
        return f"World(spheres={self.count})"
