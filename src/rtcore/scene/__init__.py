"""Scene module.

Components:
    world: Sphere storage and closest-hit intersection
    random_scene: The classic random sphere field and its camera
"""

from .random_scene import random_scene, random_scene_camera
from .world import HitInfo, SphereSpec, World

__all__ = ["World", "SphereSpec", "HitInfo", "random_scene", "random_scene_camera"]
