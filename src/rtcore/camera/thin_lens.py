"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:

- w: points from look_at toward look_from (the camera looks down -w)
- u: points right in the image plane
- v: points up in the image plane

The image plane sits at ``focus_distance`` in front of the camera. Each ray
starts at a random point on a lens disk of radius ``aperture / 2`` and
passes through the image-plane point for (s, t), so geometry at the focus
distance stays sharp and everything else blurs in proportion to the
aperture. With ``aperture = 0`` this is a pinhole camera.

The derived state is computed once on the Python side with NumPy, written to
0-D Taichi fields, and only read afterwards.

Example:
    >>> camera = ThinLensCamera(
    ...     look_from=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=20.0,
    ...     aspect_ratio=3.0 / 2.0,
    ...     aperture=0.1,
    ...     focus_distance=10.0,
    ... )
    >>> origin, direction = camera.sample_ray(0.5, 0.5, seed=1)
"""

import math
from collections.abc import Sequence

import numpy as np
import taichi as ti

from rtcore.core.sampler import random_in_unit_disk, seed_state
from rtcore.core.vec3 import real

# Minimum |cross(vup, w)| for the basis to be well defined
_MIN_BASIS_NORM = 1e-12


def _as_vector(name: str, value: Sequence[float]) -> np.ndarray:
    """Convert a 3-sequence to a float64 array, rejecting other shapes."""
    array = np.asarray(value, dtype=np.float64)
    if array.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {array.shape}")
    return array


@ti.data_oriented
class ThinLensCamera:
    """A look-at camera with a finite aperture.

    Args:
        look_from: Camera position in world space.
        look_at: Point the camera looks at (distinct from look_from).
        vup: Up direction (not parallel to the view direction).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Image width divided by height (> 0).
        aperture: Lens diameter (>= 0). 0 gives a pinhole camera.
        focus_distance: Distance to the plane of perfect focus (> 0).

    Raises:
        ValueError: If any parameter is outside its valid range.
    """

    def __init__(
        self,
        look_from: Sequence[float],
        look_at: Sequence[float],
        vup: Sequence[float] = (0.0, 1.0, 0.0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_distance: float = 1.0,
    ) -> None:
        if not 0.0 < vfov < 180.0:
            raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {vfov}")
        if aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        if aperture < 0.0:
            raise ValueError(f"Aperture must be non-negative, got {aperture}")
        if focus_distance <= 0.0:
            raise ValueError(f"Focus distance must be positive, got {focus_distance}")

        origin = _as_vector("look_from", look_from)
        target = _as_vector("look_at", look_at)
        up = _as_vector("vup", vup)

        view = origin - target
        view_norm = np.linalg.norm(view)
        if view_norm == 0.0:
            raise ValueError("look_from and look_at must be distinct points")
        w = view / view_norm

        side = np.cross(up, w)
        side_norm = np.linalg.norm(side)
        if side_norm < _MIN_BASIS_NORM:
            raise ValueError("vup must not be parallel to the view direction")
        u = side / side_norm
        v = np.cross(w, u)

        h = math.tan(math.radians(vfov) / 2.0)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        horizontal = u * viewport_width * focus_distance
        vertical = v * viewport_height * focus_distance
        lower_left = origin - horizontal / 2.0 - vertical / 2.0 - w * focus_distance

        self.vfov = float(vfov)
        self.aspect_ratio = float(aspect_ratio)
        self.aperture = float(aperture)
        self.focus_distance = float(focus_distance)
        self.lens_radius = self.aperture / 2.0

        self._basis = {
            "origin": origin,
            "u": u,
            "v": v,
            "w": w,
            "horizontal": horizontal,
            "vertical": vertical,
            "lower_left": lower_left,
        }

        self._origin = ti.Vector.field(3, dtype=real, shape=())
        self._u = ti.Vector.field(3, dtype=real, shape=())
        self._v = ti.Vector.field(3, dtype=real, shape=())
        self._horizontal = ti.Vector.field(3, dtype=real, shape=())
        self._vertical = ti.Vector.field(3, dtype=real, shape=())
        self._lower_left = ti.Vector.field(3, dtype=real, shape=())
        self._lens_radius = ti.field(dtype=real, shape=())

        self._origin[None] = origin.tolist()
        self._u[None] = u.tolist()
        self._v[None] = v.tolist()
        self._horizontal[None] = horizontal.tolist()
        self._vertical[None] = vertical.tolist()
        self._lower_left[None] = lower_left.tolist()
        self._lens_radius[None] = self.lens_radius

        # Output of sample_ray()
        self._query_origin = ti.Vector.field(3, dtype=real, shape=())
        self._query_direction = ti.Vector.field(3, dtype=real, shape=())

    @ti.func
    def get_ray(self, s: real, t: real, state: ti.u32):
        """Generate the ray through normalized image-plane coordinates (s, t).

        s runs left to right and t bottom to top; [0, 1] covers the image
        but values outside are not clamped. The origin is jittered across
        the lens disk using the caller's generator state.

        Args:
            s: Horizontal image-plane coordinate.
            t: Vertical image-plane coordinate.
            state: Generator state of the calling task.

        Returns:
            A tuple (origin, direction, state).
        """
        disk, new_state = random_in_unit_disk(state)
        rd = self._lens_radius[None] * disk
        offset = self._u[None] * rd.x + self._v[None] * rd.y

        origin = self._origin[None] + offset
        direction = (
            self._lower_left[None]
            + s * self._horizontal[None]
            + t * self._vertical[None]
            - self._origin[None]
            - offset
        )
        return origin, direction, new_state

    @ti.kernel
    def _sample_ray_kernel(self, s: real, t: real, seed: ti.u32):
        state = seed_state(seed, ti.cast(0, ti.u32))
        origin, direction, _ = self.get_ray(s, t, state)
        self._query_origin[None] = origin
        self._query_direction[None] = direction

    def sample_ray(self, s: float, t: float, seed: int = 0) -> tuple[np.ndarray, np.ndarray]:
        """Generate one camera ray from Python.

        Args:
            s: Horizontal image-plane coordinate.
            t: Vertical image-plane coordinate.
            seed: Seed for the lens jitter.

        Returns:
            Tuple of (origin, direction) as float64 arrays.
        """
        self._sample_ray_kernel(s, t, seed & 0xFFFFFFFF)
        return self._query_origin.to_numpy(), self._query_direction.to_numpy()

    def basis(self) -> dict[str, tuple[float, float, float]]:
        """Get the derived camera state for inspection.

        Returns:
            Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
        """
        return {name: tuple(float(c) for c in vector) for name, vector in self._basis.items()}

    def __repr__(self) -> str:
        origin = self.basis()["origin"]
        return (
            f"ThinLensCamera(origin={origin}, vfov={self.vfov}, "
            f"aspect_ratio={self.aspect_ratio}, aperture={self.aperture}, "
            f"focus_distance={self.focus_distance})"
        )
