"""Row-streaming renderer.

The Renderer wraps the integrator with the render settings and the seed,
and produces the final 8-bit image one row at a time, top row first. Rows
can be consumed as they finish (for progress reporting or streaming to an
encoder) or collected into a full buffer.

Rendering is deterministic: the same world, camera, settings and seed give
byte-identical pixels. A render can be stopped between rows by setting a
``threading.Event``.

Example:
    >>> import taichi as ti
    >>> from rtcore.config import RenderSettings, init_taichi
    >>> init_taichi("cpu")
    >>> from rtcore.core.renderer import Renderer
    >>> from rtcore.scene.random_scene import random_scene, random_scene_camera
    >>> from rtcore.scene.world import World
    >>>
    >>> settings = RenderSettings.from_aspect_ratio(300, 1.5, samples_per_pixel=20, seed=1)
    >>> renderer = Renderer(World(random_scene(seed=1)), random_scene_camera(1.5), settings)
    >>> for row, pixels in renderer.render_rows():
    ...     print(f"[{row + 1}/{renderer.height}] rows")
    >>> image = renderer.render()  # (200, 300, 3) uint8
"""

import logging
import threading
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from rtcore.camera.thin_lens import ThinLensCamera
from rtcore.config import RenderSettings
from rtcore.core.integrator import Integrator, RenderCancelled, quantize
from rtcore.preview.export import save_png
from rtcore.scene.world import World

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders a world through a camera with fixed settings.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: The 32-bit seed the render uses (drawn once if unset).
    """

    def __init__(self, world: World, camera: ThinLensCamera, settings: RenderSettings) -> None:
        """Initialize the renderer.

        Args:
            world: The scene to render.
            camera: The camera to render from.
            settings: Image size, sampling and seed.
        """
        self._world = world
        self._camera = camera
        self._settings = settings
        self._seed = settings.resolve_seed()
        self._integrator = Integrator(
            world,
            camera,
            width=settings.width,
            height=settings.height,
            samples_per_pixel=settings.samples_per_pixel,
            max_depth=settings.max_depth,
        )

        logger.info(
            "Renderer ready: %dx%d, %d spp, max depth %d, %d spheres",
            settings.width,
            settings.height,
            settings.samples_per_pixel,
            settings.max_depth,
            len(world),
        )
        logger.debug("Render seed: %d", self._seed)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._settings.height

    @property
    def seed(self) -> int:
        """Get the render seed."""
        return self._seed

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def world(self) -> World:
        """Get the scene being rendered."""
        return self._world

    @property
    def camera(self) -> ThinLensCamera:
        """Get the camera rays are generated from."""
        return self._camera

    def render_rows(
        self,
        callback: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> Generator[tuple[int, npt.NDArray[np.uint8]], None, None]:
        """Render the image row by row, yielding each row as it finishes.

        Args:
            callback: Optional function called after each row with
                (rows_done, total_rows).
            cancel: Optional event; when set, rendering stops before the
                next row.

        Yields:
            Tuple of (row_index, pixels) where row_index counts from the top
            (0 = top row) and pixels has shape (width, 3), dtype uint8,
            columns left to right.

        Raises:
            RenderCancelled: If the cancel event is set.
        """
        for row in range(self.height):
            if cancel is not None and cancel.is_set():
                logger.info("Render cancelled after %d of %d rows", row, self.height)
                raise RenderCancelled(f"Render cancelled after {row} of {self.height} rows")

            # Integrator rows count from the bottom
            j = self.height - 1 - row
            pixels = quantize(self._integrator.render_row(j, self._seed))
            logger.debug("Finished row %d/%d", row + 1, self.height)

            if callback is not None:
                callback(row + 1, self.height)

            yield row, pixels

    def render(
        self,
        callback: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render the full image.

        Args:
            callback: Optional per-row progress callback.
            cancel: Optional cancel event, checked between rows.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8, top
            row first.

        Raises:
            RenderCancelled: If the cancel event is set.
        """
        image = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        for row, pixels in self.render_rows(callback=callback, cancel=cancel):
            image[row] = pixels
        return image

    def trace(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        depth: int | None = None,
        seed: int | None = None,
    ) -> tuple[float, float, float]:
        """Estimate the colour of a single ray.

        Args:
            origin: The ray origin.
            direction: The ray direction.
            depth: Bounce budget; defaults to the settings' max_depth.
            seed: Generator seed; defaults to the render seed.

        Returns:
            The linear colour as (R, G, B).
        """
        if depth is None:
            depth = self._settings.max_depth
        if seed is None:
            seed = self._seed
        return self._integrator.trace(origin, direction, depth, seed)

    def save_image(self, filepath: str | Path) -> npt.NDArray[np.uint8]:
        """Render the image and save it as a PNG.

        Returns:
            The rendered pixel buffer.
        """
        image = self.render()
        save_png(image, filepath)
        return image

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self._settings.samples_per_pixel}, "
            f"max_depth={self._settings.max_depth}, seed={self._seed})"
        )
