"""Sphere primitive and ray-sphere intersection.

The intersection solves ``|origin + t * direction - center|^2 = radius^2``
with the half-b form of the quadratic formula::

    a = |d|^2,  h = d . (origin - center),  c = |origin - center|^2 - r^2
    t = (-h -/+ sqrt(h^2 - a c)) / a

which drops the factors of 2 and 4 of the textbook form and loses less
precision to cancellation.

The returned normal always faces against the incoming ray; when the ray
starts inside the sphere the geometric normal is flipped and
``hit_from_inside`` is set.

Example:
    >>> @ti.kernel
    ... def first_hit_t() -> real:
    ...     ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
    ...     sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=1.0)
    ...     return hit_sphere(ray, sphere, 0.001, 1000.0).t  # 4.0
"""

import taichi as ti
import taichi.math as tm

from rtcore.core.ray import Ray, ray_at
from rtcore.core.vec3 import length_squared, real, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: real


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected the surface, 0 on a miss. The other
            fields are only meaningful when hit == 1.
        t: Ray parameter of the intersection, inside the queried interval.
        point: The intersection point.
        normal: Unit surface normal, oriented against the incoming ray.
        hit_from_inside: 1 if the ray hit the surface from inside (the
            geometric normal was flipped), 0 otherwise.
        surface_id: Index of the hit surface in its world, used to look up
            the surface's material. -1 when unset.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    hit_from_inside: ti.i32
    surface_id: ti.i32


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        hit_from_inside=0,
        surface_id=-1,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: real, t_max: real) -> HitRecord:
    """Intersect a ray with a sphere within the open interval (t_min, t_max).

    The nearer root is tried first and the farther one only if the nearer
    lies outside the interval, so the reported t is the closest valid hit
    on this sphere. Comparing hits across surfaces is up to the caller.

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.
        t_min: Lower bound (exclusive). A small positive epsilon keeps a
            scattered ray from re-hitting the surface it left.
        t_max: Upper bound (exclusive).

    Returns:
        A HitRecord; check its hit field. surface_id is left at -1.
    """
    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = tm.dot(ray.direction, oc)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    result = miss_record()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        valid = root > t_min and root < t_max
        if not valid:
            root = (-half_b + sqrt_d) / a
            valid = root > t_min and root < t_max

        if valid:
            point = ray_at(ray, root)
            # Dividing by the radius yields the unit outward normal
            outward_normal = (point - sphere.center) / sphere.radius

            normal = outward_normal
            inside = 0
            if tm.dot(outward_normal, ray.direction) > 0.0:
                normal = -outward_normal
                inside = 1

            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                hit_from_inside=inside,
                surface_id=-1,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: real) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
