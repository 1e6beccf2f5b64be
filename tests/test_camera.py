"""Unit tests for the thin-lens camera.

Tests cover:
- Orthonormal basis construction
- Viewport geometry (horizontal, vertical, lower-left corner)
- Parameter validation
- Pinhole behaviour with zero aperture
- Lens jitter bounded by the aperture
- Determinism of sampled rays
"""

import math

import numpy as np
import pytest


def _default_camera(**overrides):
    from rtcore.camera.thin_lens import ThinLensCamera

    params = {
        "look_from": (0.0, 0.0, 0.0),
        "look_at": (0.0, 0.0, -1.0),
        "vup": (0.0, 1.0, 0.0),
        "vfov": 90.0,
        "aspect_ratio": 2.0,
        "aperture": 0.0,
        "focus_distance": 1.0,
    }
    params.update(overrides)
    return ThinLensCamera(**params)


class TestCameraBasis:
    """Tests for the derived camera state."""

    def test_axis_aligned_basis(self):
        basis = _default_camera().basis()

        assert basis["w"] == pytest.approx((0.0, 0.0, 1.0))
        assert basis["u"] == pytest.approx((1.0, 0.0, 0.0))
        assert basis["v"] == pytest.approx((0.0, 1.0, 0.0))
        # vfov 90 -> viewport height 2, width 2 * aspect
        assert basis["horizontal"] == pytest.approx((4.0, 0.0, 0.0))
        assert basis["vertical"] == pytest.approx((0.0, 2.0, 0.0))
        assert basis["lower_left"] == pytest.approx((-2.0, -1.0, -1.0))

    def test_basis_is_orthonormal(self):
        camera = _default_camera(
            look_from=(13.0, 2.0, 3.0), look_at=(0.0, 0.0, 0.0), vfov=20.0, aspect_ratio=1.5
        )
        basis = camera.basis()
        u, v, w = (np.array(basis[k]) for k in ("u", "v", "w"))

        for axis in (u, v, w):
            assert abs(np.linalg.norm(axis) - 1.0) < 1e-12
        assert abs(u @ v) < 1e-12
        assert abs(u @ w) < 1e-12
        assert abs(v @ w) < 1e-12
        # w points from the target back toward the camera
        assert np.allclose(w, np.array([13.0, 2.0, 3.0]) / math.sqrt(182.0))

    def test_focus_distance_scales_viewport(self):
        basis = _default_camera(focus_distance=10.0).basis()
        assert basis["horizontal"] == pytest.approx((40.0, 0.0, 0.0))
        assert basis["vertical"] == pytest.approx((0.0, 20.0, 0.0))
        assert basis["lower_left"] == pytest.approx((-20.0, -10.0, -10.0))

    def test_lens_radius(self):
        camera = _default_camera(aperture=0.1)
        assert camera.lens_radius == pytest.approx(0.05)


class TestCameraValidation:
    """Tests for constructor validation."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"vfov": 0.0},
            {"vfov": 180.0},
            {"aspect_ratio": 0.0},
            {"aperture": -0.1},
            {"focus_distance": 0.0},
            {"look_at": (0.0, 0.0, 0.0)},
            {"vup": (0.0, 0.0, 1.0)},
            {"vup": (0.0, 1.0)},
        ],
    )
    def test_invalid_parameters(self, overrides):
        with pytest.raises(ValueError):
            _default_camera(**overrides)


class TestCameraRays:
    """Tests for ray generation."""

    def test_pinhole_center_ray(self):
        camera = _default_camera()
        origin, direction = camera.sample_ray(0.5, 0.5, seed=3)

        assert origin == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)
        assert direction == pytest.approx([0.0, 0.0, -1.0], abs=1e-12)

    def test_pinhole_corners(self):
        camera = _default_camera()
        _, lower_left = camera.sample_ray(0.0, 0.0)
        _, upper_right = camera.sample_ray(1.0, 1.0)

        assert lower_left == pytest.approx([-2.0, -1.0, -1.0], abs=1e-12)
        assert upper_right == pytest.approx([2.0, 1.0, -1.0], abs=1e-12)

    def test_coordinates_not_clamped(self):
        camera = _default_camera()
        _, direction = camera.sample_ray(1.5, -0.5)
        assert direction == pytest.approx([4.0, -2.0, -1.0], abs=1e-12)

    def test_lens_jitter_bounded_and_focused(self):
        """Origins lie on the lens disk and all rays meet at the focus plane target."""
        camera = _default_camera(aperture=0.5, focus_distance=2.0)
        target = np.array([0.0, 0.0, -2.0])

        origins = []
        for seed in range(64):
            origin, direction = camera.sample_ray(0.5, 0.5, seed=seed)
            origins.append(origin)
            # Lens disk lies in the camera's u-v plane
            assert abs(origin[2]) < 1e-12
            assert math.hypot(origin[0], origin[1]) <= 0.25 + 1e-12
            # origin + direction lands on the in-focus point
            assert origin + direction == pytest.approx(target, abs=1e-12)

        assert len({tuple(o) for o in origins}) > 1

    def test_same_seed_same_ray(self):
        camera = _default_camera(aperture=1.0)
        first = camera.sample_ray(0.3, 0.7, seed=17)
        second = camera.sample_ray(0.3, 0.7, seed=17)

        np.testing.assert_array_equal(first[0], second[0])
        np.testing.assert_array_equal(first[1], second[1])

    def test_repr(self):
        assert "ThinLensCamera" in repr(_default_camera())
