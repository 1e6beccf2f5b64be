"""Monte Carlo integrator for sphere scenes.

Light transport follows one path per camera sample: find the closest
surface, let its material scatter or absorb the ray, and repeat until the
ray escapes to the sky or runs out of bounces. The colour of a path is the
sky colour it escapes to, tinted by the product of the attenuations of
every surface it bounced off:

    ray_color(r, depth) = black                                    if depth == 0
                        = background(r)                            on a miss
                        = black                                    if absorbed
                        = attenuation * ray_color(scattered, depth - 1)

Taichi functions are inlined and cannot recurse, so ray_color runs the
equivalent loop, carrying the attenuation product (throughput) forward.

A frame is produced one row at a time. Within a row every column is an
independent task that seeds its own generator from (seed, pixel index),
averages ``samples_per_pixel`` jittered rays and applies gamma-2
correction. The row kernel's outermost loop runs in parallel over columns.

Example:
    >>> integrator = Integrator(world, camera, width=400, height=225,
    ...                         samples_per_pixel=50, max_depth=50)
    >>> colors = integrator.render_row(224, seed=42)  # top row, (400, 3) floats
    >>> row = quantize(colors)                        # (400, 3) uint8
"""

import logging
import math

import numpy as np
import numpy.typing as npt
import taichi as ti

from rtcore.camera.thin_lens import ThinLensCamera
from rtcore.core.ray import make_ray
from rtcore.core.sampler import random_float, seed_state
from rtcore.core.vec3 import real, sqrt_components, unit, vec3
from rtcore.geometry.sphere import HitRecord
from rtcore.materials.dielectric import scatter_dielectric
from rtcore.materials.lambertian import scatter_lambertian
from rtcore.materials.material import Material, MaterialKind
from rtcore.materials.metal import scatter_metal
from rtcore.scene.world import World

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Intersection interval for scattered and camera rays; T_MIN avoids shadow acne
T_MIN = 0.001
T_MAX = math.inf

# Largest channel value kept before scaling to 8 bits
QUANTIZE_CEILING = 0.999


class RenderCancelled(RuntimeError):
    """Raised when a render is stopped through its cancel event."""


@ti.func
def background(direction: vec3) -> vec3:
    """Sky colour for a ray that escapes the scene.

    Blends white at the horizon-down (unit y = -1) to light blue straight
    up (unit y = +1).
    """
    unit_direction = unit(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * vec3(1.0, 1.0, 1.0) + t * vec3(0.5, 0.7, 1.0)


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(material: Material, incident_direction: vec3, rec: HitRecord, state: ti.u32):
    """Dispatch to the scatter function of the hit surface's material.

    Args:
        material: The hit surface's packed material.
        incident_direction: Direction of the incoming ray.
        rec: The hit record (normal faces the incoming ray).
        state: Generator state of the calling task.

    Returns:
        A tuple (did_scatter, scattered_direction, attenuation, state).
        The scattered ray starts at rec.point.
    """
    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    s = state

    if material.kind == int(MaterialKind.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter, s = scatter_lambertian(
            material.albedo, rec.normal, state
        )

    elif material.kind == int(MaterialKind.METAL):
        scattered_direction, attenuation, did_scatter, s = scatter_metal(
            material.albedo, material.fuzziness, incident_direction, rec.normal, state
        )

    elif material.kind == int(MaterialKind.DIELECTRIC):
        scattered_direction, attenuation, did_scatter, s = scatter_dielectric(
            material.ior, incident_direction, rec.normal, rec.hit_from_inside, state
        )

    return did_scatter, scattered_direction, attenuation, s


# =============================================================================
# Integrator
# =============================================================================


@ti.data_oriented
class Integrator:
    """Row-at-a-time path tracer over a fixed world and camera.

    Image size, sample count and bounce budget are compile-time constants
    of the kernels; build a new integrator to change them.

    Args:
        world: The scene to render.
        camera: The camera to render from.
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Rays averaged per pixel.
        max_depth: Maximum bounces per ray.
    """

    def __init__(
        self,
        world: World,
        camera: ThinLensCamera,
        width: int,
        height: int,
        samples_per_pixel: int,
        max_depth: int,
    ) -> None:
        self.world = world
        self.camera = camera
        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth

        # A single row or column maps every sample to s = 0 or t = 0
        self._s_scale = 1.0 / max(width - 1, 1)
        self._t_scale = 1.0 / max(height - 1, 1)

        self._row = ti.Vector.field(3, dtype=real, shape=width)
        self._query_color = ti.Vector.field(3, dtype=real, shape=())

    @ti.func
    def ray_color(self, origin: vec3, direction: vec3, depth: ti.i32, state: ti.u32):
        """Estimate the light arriving back along a ray.

        Args:
            origin: The ray origin.
            direction: The ray direction (any length).
            depth: Remaining bounce budget; 0 gives black.
            state: Generator state of the calling task.

        Returns:
            A tuple (color, state).
        """
        # Stays black when the ray is absorbed or the budget runs out
        color = vec3(0.0, 0.0, 0.0)
        throughput = vec3(1.0, 1.0, 1.0)
        o = origin
        d = direction
        s = state

        bounce = 0
        while bounce < depth:
            rec = self.world.hit(make_ray(o, d), T_MIN, T_MAX)
            if rec.hit == 0:
                color = throughput * background(d)
                break

            material = self.world.material(rec.surface_id)
            did_scatter, scattered_direction, attenuation, s = _scatter_material(
                material, d, rec, s
            )
            if did_scatter == 0:
                break

            throughput = throughput * attenuation
            o = rec.point
            d = scattered_direction
            bounce += 1

        return color, s

    @ti.func
    def sample_pixel(self, i: ti.i32, j: ti.i32, seed: ti.u32) -> vec3:
        """Average samples_per_pixel jittered rays through pixel (i, j).

        j counts rows from the bottom of the image.

        Returns:
            The mean linear colour of the pixel.
        """
        state = seed_state(seed, ti.cast(j * self.width + i, ti.u32))
        total = vec3(0.0, 0.0, 0.0)

        for _ in range(self.samples_per_pixel):
            xi, state = random_float(state)
            eta, state = random_float(state)
            s = (ti.cast(i, real) + xi) * self._s_scale
            t = (ti.cast(j, real) + eta) * self._t_scale

            origin, direction, state = self.camera.get_ray(s, t, state)
            color, state = self.ray_color(origin, direction, self.max_depth, state)
            total += color

        return total / self.samples_per_pixel

    @ti.kernel
    def _render_row(self, j: ti.i32, seed: ti.u32):
        """Render row j (counted from the bottom) into the row buffer."""
        for i in range(self.width):
            self._row[i] = sqrt_components(self.sample_pixel(i, j, seed))

    @ti.kernel
    def _trace_kernel(
        self,
        ox: real,
        oy: real,
        oz: real,
        dx: real,
        dy: real,
        dz: real,
        depth: ti.i32,
        seed: ti.u32,
    ):
        state = seed_state(seed, ti.cast(0, ti.u32))
        color, _ = self.ray_color(vec3(ox, oy, oz), vec3(dx, dy, dz), depth, state)
        self._query_color[None] = color

    def render_row(self, j: int, seed: int) -> npt.NDArray[np.float64]:
        """Render one row of gamma-corrected colours.

        Args:
            j: Row index counted from the bottom of the image.
            seed: 32-bit render seed.

        Returns:
            Array of shape (width, 3), left to right.
        """
        if not 0 <= j < self.height:
            raise ValueError(f"Row {j} is outside [0, {self.height})")
        self._render_row(j, seed)
        return self._row.to_numpy()

    def trace(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        depth: int,
        seed: int = 0,
    ) -> tuple[float, float, float]:
        """Evaluate ray_color for a single ray from Python.

        Returns:
            The linear (not gamma-corrected) colour as (R, G, B).
        """
        self._trace_kernel(*origin, *direction, depth, seed & 0xFFFFFFFF)
        color = self._query_color.to_numpy()
        return (float(color[0]), float(color[1]), float(color[2]))


def quantize(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert gamma-corrected colours to 8-bit channels.

    Each channel is clamped to [0, 0.999], scaled by 256 and truncated, so
    1.0 maps to 255 and the 256 output levels are equally wide.

    Args:
        colors: Array of channel values, any shape.

    Returns:
        A uint8 array of the same shape.
    """
    return (np.clip(colors, 0.0, QUANTIZE_CEILING) * 256.0).astype(np.uint8)
