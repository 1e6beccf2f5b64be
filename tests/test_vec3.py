"""Unit tests for the vector utilities.

Tests cover:
- Dot and cross products
- Length and normalization
- near_zero threshold
- Reflection (including the exact negation along the normal)
- Refraction at normal incidence and under Snell's law
- Component-wise square root
"""

import math

import taichi as ti


class TestBasicOperations:
    """Tests for dot, cross, length and unit."""

    def test_dot_and_cross(self):
        from rtcore.core.vec3 import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f64, shape=())
        cross_result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 2.0, 3.0)
            b = vec3(4.0, -5.0, 6.0)
            dot_result[None] = dot(a, b)
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(dot_result[None] - 12.0) < 1e-12
        c = cross_result[None]
        assert abs(c[0]) < 1e-12
        assert abs(c[1]) < 1e-12
        assert abs(c[2] - 1.0) < 1e-12

    def test_length_and_unit(self):
        from rtcore.core.vec3 import length, length_squared, unit, vec3

        len_sq = ti.field(dtype=ti.f64, shape=())
        len_val = ti.field(dtype=ti.f64, shape=())
        unit_len = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 12.0)
            len_sq[None] = length_squared(v)
            len_val[None] = length(v)
            unit_len[None] = length(unit(v))

        test_kernel()
        assert abs(len_sq[None] - 169.0) < 1e-12
        assert abs(len_val[None] - 13.0) < 1e-12
        assert abs(unit_len[None] - 1.0) < 1e-12

    def test_sqrt_components(self):
        from rtcore.core.vec3 import sqrt_components, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = sqrt_components(vec3(0.25, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.5) < 1e-12
        assert abs(r[1] - 1.0) < 1e-12
        assert abs(r[2]) < 1e-12


class TestNearZero:
    """Tests for the near_zero threshold."""

    def test_near_zero(self):
        from rtcore.core.vec3 import near_zero, vec3

        tiny = ti.field(dtype=ti.i32, shape=())
        one_large = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            tiny[None] = near_zero(vec3(1e-9, -1e-9, 0.0))
            one_large[None] = near_zero(vec3(1e-9, 1e-7, 0.0))

        test_kernel()
        assert tiny[None] != 0
        assert one_large[None] == 0


class TestReflect:
    """Tests for mirror reflection."""

    def test_reflect_45_degrees(self):
        from rtcore.core.vec3 import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-12
        assert abs(r[1] - 1.0) < 1e-12
        assert abs(r[2]) < 1e-12

    def test_reflect_along_normal_negates(self):
        """A vector along the normal reflects to its exact negation."""
        from rtcore.core.vec3 import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n = vec3(0.0, 0.0, 1.0)
            result[None] = reflect(n, n)

        test_kernel()
        r = result[None]
        assert r[0] == 0.0
        assert r[1] == 0.0
        assert r[2] == -1.0


class TestRefract:
    """Tests for refraction (Snell's law)."""

    def test_refract_normal_incidence(self):
        """Straight-on rays pass through unbent."""
        from rtcore.core.vec3 import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = refract(vec3(0.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-12
        assert abs(r[1] + 1.0) < 1e-12
        assert abs(r[2]) < 1e-12

    def test_refract_snells_law(self):
        from rtcore.core.vec3 import refract, vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            inv_sqrt2 = 1.0 / ti.sqrt(2.0)
            incident = vec3(inv_sqrt2, -inv_sqrt2, 0.0)
            result[None] = refract(incident, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)

        test_kernel()
        d = result[None]
        length = math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2)
        # Unit in, unit out
        assert abs(length - 1.0) < 1e-9
        # sin(theta2) = sin(45) / 1.5
        assert abs(d[0] - (1.0 / math.sqrt(2.0)) / 1.5) < 1e-9
        assert d[1] < 0.0
