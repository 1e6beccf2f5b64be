"""Unit tests for the Lambertian material module.

Tests cover:
- Parameter validation
- Scatter always succeeds with the albedo as attenuation
- Scattered directions lie in the normal's hemisphere
- Cosine-weighted distribution (mean cosine)
- Fallback to the normal when the offset cancels it
"""

import numpy as np
import pytest
import taichi as ti

N_SAMPLES = 4096


class TestLambertianParams:
    """Tests for the Lambertian parameter dataclass."""

    def test_valid_albedo(self):
        from rtcore.materials.lambertian import Lambertian
        from rtcore.materials.material import MaterialKind

        material = Lambertian((0.1, 0.2, 0.3))
        assert material.albedo == (0.1, 0.2, 0.3)
        assert material.kind == MaterialKind.LAMBERTIAN

    @pytest.mark.parametrize("albedo", [(1.1, 0.5, 0.5), (0.5, -0.1, 0.5), (0.5, 0.5)])
    def test_invalid_albedo(self, albedo):
        from rtcore.materials.lambertian import Lambertian

        with pytest.raises(ValueError):
            Lambertian(albedo)


class TestLambertianScatter:
    """Tests for scatter_lambertian."""

    def test_scatter_properties(self):
        from rtcore.core.sampler import seed_state
        from rtcore.core.vec3 import vec3
        from rtcore.materials.lambertian import scatter_lambertian

        directions = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)
        attenuations = ti.Vector.field(3, dtype=ti.f64, shape=N_SAMPLES)
        scattered = ti.field(dtype=ti.i32, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                state = seed_state(ti.cast(99, ti.u32), ti.cast(i, ti.u32))
                albedo = vec3(0.8, 0.3, 0.3)
                normal = vec3(0.0, 1.0, 0.0)
                direction, attenuation, did_scatter, _ = scatter_lambertian(albedo, normal, state)
                directions[i] = direction
                attenuations[i] = attenuation
                scattered[i] = did_scatter

        test_kernel()
        d = directions.to_numpy()
        a = attenuations.to_numpy()

        assert np.all(scattered.to_numpy() == 1)
        np.testing.assert_allclose(a, np.tile([0.8, 0.3, 0.3], (N_SAMPLES, 1)))
        # normal + unit vector never points below the surface
        assert np.all(d[:, 1] >= 0.0)
        # Never (numerically) zero
        assert np.all(np.linalg.norm(d, axis=1) > 0.0)

    def test_cosine_distribution(self):
        """For cosine-weighted directions the mean cosine is 2/3."""
        from rtcore.core.sampler import seed_state
        from rtcore.core.vec3 import unit, vec3
        from rtcore.materials.lambertian import scatter_lambertian

        cosines = ti.field(dtype=ti.f64, shape=N_SAMPLES)

        @ti.kernel
        def test_kernel():
            for i in range(N_SAMPLES):
                state = seed_state(ti.cast(100, ti.u32), ti.cast(i, ti.u32))
                normal = vec3(0.0, 0.0, 1.0)
                direction, _, _, _ = scatter_lambertian(vec3(0.5, 0.5, 0.5), normal, state)
                cosines[i] = unit(direction).z

        test_kernel()
        assert abs(cosines.to_numpy().mean() - 2.0 / 3.0) < 0.03


class TestDiffuseDirection:
    """Tests for the direction step of scatter_lambertian."""

    def test_cancelling_offset_falls_back_to_normal(self):
        from rtcore.core.vec3 import unit, vec3
        from rtcore.materials.lambertian import _diffuse_direction

        normals = ti.Vector.field(3, dtype=ti.f64, shape=4)
        directions = ti.Vector.field(3, dtype=ti.f64, shape=4)

        @ti.kernel
        def test_kernel():
            normals[0] = vec3(0.0, 1.0, 0.0)
            normals[1] = vec3(0.0, 0.0, -1.0)
            normals[2] = unit(vec3(1.0, 1.0, 1.0))
            normals[3] = unit(vec3(-0.3, 0.4, 0.2))
            for i in range(4):
                n = normals[i]
                directions[i] = _diffuse_direction(n, -n)

        test_kernel()
        np.testing.assert_array_equal(directions.to_numpy(), normals.to_numpy())

    def test_nearly_cancelling_offset_falls_back_to_normal(self):
        from rtcore.core.vec3 import vec3
        from rtcore.materials.lambertian import _diffuse_direction

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = _diffuse_direction(vec3(0.0, 1.0, 0.0), vec3(1e-9, -1.0, 0.0))

        test_kernel()
        np.testing.assert_array_equal(result.to_numpy(), [0.0, 1.0, 0.0])

    def test_regular_offset_is_added_to_normal(self):
        from rtcore.core.vec3 import vec3
        from rtcore.materials.lambertian import _diffuse_direction

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = _diffuse_direction(vec3(0.0, 1.0, 0.0), vec3(1.0, 0.0, 0.0))

        test_kernel()
        np.testing.assert_array_equal(result.to_numpy(), [1.0, 1.0, 0.0])
