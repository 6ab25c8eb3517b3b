"""Unit tests for the vector helpers and random samplers.

Tests cover:
- Length, normalization, dot and cross products
- Near-zero detection
- Reflection and refraction
- Ranges of the random vector generators
- Unit sphere, unit vector and unit disk samplers
"""

import math

import taichi as ti


class TestVectorBasics:
    """Tests for deterministic vector operations."""

    def test_length_and_length_squared(self):
        """Test lengths of a 3-4-0 vector."""
        from glimmer.core.vector import length, length_squared

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            v = ti.math.vec3(3.0, 4.0, 0.0)
            result[0] = length_squared(v)
            result[1] = length(v)

        test_kernel()
        assert abs(result[0] - 25.0) < 1e-5
        assert abs(result[1] - 5.0) < 1e-5

    def test_unit_vector(self):
        """Test that unit_vector divides by the length."""
        from glimmer.core.vector import unit_vector

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = unit_vector(ti.math.vec3(0.0, 3.0, 4.0))

        test_kernel()
        v = result[None]
        assert abs(v[0]) < 1e-6
        assert abs(v[1] - 0.6) < 1e-6
        assert abs(v[2] - 0.8) < 1e-6

    def test_dot_and_cross(self):
        """Test dot and cross products of the coordinate axes."""
        from glimmer.core.vector import cross, dot

        result_dot = ti.field(dtype=ti.f32, shape=())
        result_cross = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            x = ti.math.vec3(1.0, 0.0, 0.0)
            y = ti.math.vec3(0.0, 1.0, 0.0)
            result_dot[None] = dot(x, y) + dot(ti.math.vec3(1.0, 2.0, 3.0), ti.math.vec3(4.0, 5.0, 6.0))
            result_cross[None] = cross(x, y)

        test_kernel()
        assert abs(result_dot[None] - 32.0) < 1e-5
        c = result_cross[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_near_zero(self):
        """Test near-zero detection at and above the threshold."""
        from glimmer.core.vector import near_zero

        result = ti.field(dtype=ti.i32, shape=3)

        @ti.kernel
        def test_kernel():
            result[0] = near_zero(ti.math.vec3(1e-9, -1e-9, 0.0))
            result[1] = near_zero(ti.math.vec3(1e-9, 1e-3, 0.0))
            result[2] = near_zero(ti.math.vec3(0.0, 0.0, 0.0))

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
        assert result[2] == 1


class TestReflectRefract:
    """Tests for reflection and refraction helpers."""

    def test_reflect_mirrors_about_normal(self):
        """Test reflect((1,-1,0), (0,1,0)) == (1,1,0)."""
        from glimmer.core.vector import reflect

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(ti.math.vec3(1.0, -1.0, 0.0), ti.math.vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_refract_with_unit_ratio_is_identity(self):
        """Test that a ratio of 1 leaves the direction unchanged."""
        from glimmer.core.vector import refract

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            uv = ti.math.normalize(ti.math.vec3(1.0, -2.0, 0.5))
            result[None] = refract(uv, ti.math.vec3(0.0, 1.0, 0.0), 1.0)

        test_kernel()
        r = result[None]
        expected = [1.0, -2.0, 0.5]
        norm = math.sqrt(sum(e * e for e in expected))
        for k in range(3):
            assert abs(r[k] - expected[k] / norm) < 1e-5

    def test_refract_obeys_snell(self):
        """Test that sin(theta_t) == ratio * sin(theta_i)."""
        from glimmer.core.vector import refract

        result = ti.Vector.field(3, dtype=ti.f32, shape=())
        ratio = 1.0 / 1.5

        @ti.kernel
        def test_kernel():
            s = ti.sqrt(0.5)
            result[None] = refract(ti.math.vec3(s, -s, 0.0), ti.math.vec3(0.0, 1.0, 0.0), ratio)

        test_kernel()
        r = result[None]
        sin_t = abs(r[0]) / math.sqrt(r[0] ** 2 + r[1] ** 2 + r[2] ** 2)
        assert abs(sin_t - ratio * math.sqrt(0.5)) < 1e-5
        # Transmitted ray keeps going down
        assert r[1] < 0.0


class TestRandomSampling:
    """Tests for the random samplers."""

    def test_random_vec3_in_unit_cube(self):
        """Test that components are in [0, 1)."""
        from glimmer.core.vector import random_vec3

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_vec3()

        test_kernel()
        arr = samples.to_numpy()
        assert arr.min() >= 0.0
        assert arr.max() < 1.0

    def test_random_vec3_range(self):
        """Test that components are in [lo, hi)."""
        from glimmer.core.vector import random_vec3_range

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_vec3_range(0.5, 1.0)

        test_kernel()
        arr = samples.to_numpy()
        assert arr.min() >= 0.5
        assert arr.max() <= 1.0
        # Samples should cover most of the range
        assert arr.max() - arr.min() > 0.4

    def test_random_in_unit_sphere(self):
        """Test that samples lie strictly inside the unit sphere."""
        from glimmer.core.vector import random_in_unit_sphere

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_in_unit_sphere()

        test_kernel()
        arr = samples.to_numpy()
        lengths_sq = (arr**2).sum(axis=1)
        assert (lengths_sq < 1.0).all()
        assert (lengths_sq > 0.0).all()

    def test_random_unit_vector_has_unit_length(self):
        """Test that random unit vectors are normalized and roughly centered."""
        from glimmer.core.vector import random_unit_vector

        n = 2000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_unit_vector()

        test_kernel()
        arr = samples.to_numpy()
        lengths = (arr**2).sum(axis=1) ** 0.5
        assert abs(lengths - 1.0).max() < 1e-4
        # Uniform on the sphere: the mean is near the origin
        assert abs(arr.mean(axis=0)).max() < 0.1

    def test_random_in_unit_disk(self):
        """Test that disk samples lie in the xy-plane inside the unit circle."""
        from glimmer.core.vector import random_in_unit_disk

        n = 1000
        samples = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                samples[i] = random_in_unit_disk()

        test_kernel()
        arr = samples.to_numpy()
        assert (arr[:, 2] == 0.0).all()
        assert ((arr[:, 0] ** 2 + arr[:, 1] ** 2) < 1.0).all()
