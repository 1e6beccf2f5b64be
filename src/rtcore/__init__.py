"""Taichi-based Monte Carlo ray tracer for sphere scenes.

Renders worlds of spheres with diffuse, metal and glass materials through a
thin-lens camera, producing deterministic 8-bit images row by row.

Subpackages:
    core: Vector utilities, random sampling, rays, the integrator and the renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian, metal and dielectric scattering
    scene: World storage and the random sphere scene
    camera: Thin-lens camera with depth of field
    preview: Image export

Call ``rtcore.config.init_taichi`` before building any world, camera or
renderer.
"""

__version__ = "0.1.0"
