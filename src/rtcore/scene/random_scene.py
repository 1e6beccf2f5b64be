"""The classic "final scene": a field of small random spheres around three large ones.

Layout:
- A huge grey Lambertian ground sphere (radius 1000, centred at y = -1000)
- A 22 x 22 grid of radius-0.2 spheres, jittered within each cell, skipping
  any that would crowd the large metal sphere
- Three radius-1 feature spheres: glass in the middle, brown diffuse behind,
  polished metal in front

Small sphere materials are drawn per cell: 80% diffuse, 15% metal, 5% glass.
The layout depends only on the scene seed, so the same seed always produces
the same list of spheres.

Example:
    >>> spheres = random_scene(seed=7)
    >>> world = World(spheres)
    >>> camera = random_scene_camera(aspect_ratio=3.0 / 2.0)
"""

import numpy as np

from rtcore.camera.thin_lens import ThinLensCamera
from rtcore.materials.dielectric import Dielectric
from rtcore.materials.lambertian import Lambertian
from rtcore.materials.metal import Metal
from rtcore.scene.world import SphereSpec

GRID_EXTENT = 11
SMALL_RADIUS = 0.2
GLASS_IOR = 1.5

# Small spheres closer than this to the metal sphere's footprint are skipped
_CLEARANCE = 0.9
_CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])


def random_scene(seed: int | None = None) -> list[SphereSpec]:
    """Build the random sphere field.

    Args:
        seed: Seed for the layout. None draws a fresh layout.

    Returns:
        The spheres in scene order: ground, grid spheres, feature spheres.
    """
    rng = np.random.default_rng(seed)

    spheres = [SphereSpec((0.0, -1000.0, 0.0), 1000.0, Lambertian((0.5, 0.5, 0.5)))]

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            # Draws happen even for skipped cells so every cell sees the same stream position
            material_choice = rng.random()
            center = np.array([a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()])

            if np.linalg.norm(center - _CLEARANCE_POINT) <= _CLEARANCE:
                continue

            if material_choice < 0.8:
                albedo = rng.random(3) * rng.random(3)
                material = Lambertian(tuple(albedo))
            elif material_choice < 0.95:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzziness = rng.uniform(0.0, 0.5)
                material = Metal(tuple(albedo), float(fuzziness))
            else:
                material = Dielectric(GLASS_IOR)

            spheres.append(SphereSpec(tuple(center), SMALL_RADIUS, material))

    spheres.append(SphereSpec((0.0, 1.0, 0.0), 1.0, Dielectric(GLASS_IOR)))
    spheres.append(SphereSpec((-4.0, 1.0, 0.0), 1.0, Lambertian((0.4, 0.2, 0.1))))
    spheres.append(SphereSpec((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.0)))

    return spheres


def random_scene_camera(aspect_ratio: float = 3.0 / 2.0) -> ThinLensCamera:
    """Create the camera framing the random scene.

    Looks at the origin from (13, 2, 3) with a narrow field of view and a
    small aperture focused 10 units away.
    """
    return ThinLensCamera(
        look_from=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_distance=10.0,
    )
