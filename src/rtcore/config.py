"""Runtime initialisation and render settings.

``init_taichi`` is the one place that calls ``ti.init``; it must run before
any world, camera or renderer is constructed because those allocate Taichi
fields.

Example:
    >>> from rtcore.config import RenderSettings, init_taichi
    >>> init_taichi("cpu")
    >>> settings = RenderSettings.from_aspect_ratio(400, 16.0 / 9.0, samples_per_pixel=50)
    >>> settings.height
    225
"""

import logging
from dataclasses import dataclass

import numpy as np
import taichi as ti

logger = logging.getLogger(__name__)

# Backend names accepted on the command line
_ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
}

# Seeds are 32-bit: they feed the per-pixel xorshift32 generators
SEED_MASK = 0xFFFFFFFF


def available_archs() -> list[str]:
    """Get the backend names accepted by init_taichi()."""
    return sorted(_ARCHS)


def init_taichi(arch: str = "cpu", **kwargs) -> None:
    """Initialise the Taichi runtime in double precision.

    Args:
        arch: Backend name, one of available_archs().
        **kwargs: Extra keyword arguments forwarded to ti.init().

    Raises:
        ValueError: If the backend name is unknown.
    """
    if arch not in _ARCHS:
        raise ValueError(f"Unknown arch '{arch}', expected one of {available_archs()}")

    ti.init(arch=_ARCHS[arch], default_fp=ti.f64, **kwargs)
    logger.debug("Initialised Taichi with arch=%s", arch)


def draw_seed() -> int:
    """Draw a fresh 32-bit render seed from the operating system's entropy."""
    return int(np.random.SeedSequence().entropy) & SEED_MASK


@dataclass(frozen=True)
class RenderSettings:
    """Image and sampling parameters for one render.

    Attributes:
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).
        samples_per_pixel: Rays averaged per pixel (> 0).
        max_depth: Maximum number of bounces per ray (>= 0).
        seed: Render seed. None draws a fresh one when the renderer is built.
    """

    width: int
    height: int
    samples_per_pixel: int = 100
    max_depth: int = 50
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"Samples per pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"Max depth must be non-negative, got {self.max_depth}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"Seed must be non-negative, got {self.seed}")

    @classmethod
    def from_aspect_ratio(
        cls,
        width: int,
        aspect_ratio: float,
        samples_per_pixel: int = 100,
        max_depth: int = 50,
        seed: int | None = None,
    ) -> "RenderSettings":
        """Build settings whose height follows from the width and aspect ratio.

        Raises:
            ValueError: If the aspect ratio is not positive or the derived
                height is zero.
        """
        if aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")
        return cls(
            width=width,
            height=int(width / aspect_ratio),
            samples_per_pixel=samples_per_pixel,
            max_depth=max_depth,
            seed=seed,
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def resolve_seed(self) -> int:
        """Get the 32-bit seed to render with, drawing one if unset."""
        if self.seed is None:
            seed = draw_seed()
            logger.debug("No seed given, drew seed %d", seed)
            return seed
        return self.seed & SEED_MASK
