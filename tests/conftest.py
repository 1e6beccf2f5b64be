"""Pytest configuration for rtcore tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    from rtcore.config import init_taichi

    init_taichi("cpu")
    yield
    # Note: We don't call ti.reset() here; fields created by earlier tests
    # would be invalidated for any cleanup that runs afterwards


@pytest.fixture
def three_sphere_specs():
    """Ground, a diffuse centre sphere and a glass sphere in a row."""
    from rtcore.materials.dielectric import Dielectric
    from rtcore.materials.lambertian import Lambertian
    from rtcore.materials.metal import Metal
    from rtcore.scene.world import SphereSpec

    return [
        SphereSpec((0.0, -100.5, -1.0), 100.0, Lambertian((0.8, 0.8, 0.0))),
        SphereSpec((0.0, 0.0, -1.0), 0.5, Lambertian((0.1, 0.2, 0.5))),
        SphereSpec((-1.0, 0.0, -1.0), 0.5, Dielectric(1.5)),
        SphereSpec((1.0, 0.0, -1.0), 0.5, Metal((0.8, 0.6, 0.2), 0.0)),
    ]
