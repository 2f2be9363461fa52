"""Unit tests for the radiance integrator.

Tests cover:
- Sky gradient for escaping rays
- Depth exhaustion and absorption terminate in black
- Attenuation along a mirror bounce
"""

import math

import pytest


def _load(*primitives):
    from pathtrace.scene.intersection import load_scene
    from pathtrace.scene.scene import Scene

    load_scene(Scene(primitives))


class TestSky:
    """Tests for rays that escape the scene."""

    def test_straight_up_is_blue(self):
        from pathtrace.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), max_depth=0) == pytest.approx(
            (0.5, 0.7, 1.0)
        )

    def test_straight_down_is_white(self):
        from pathtrace.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, -3.0, 0.0), max_depth=5) == pytest.approx(
            (1.0, 1.0, 1.0)
        )

    def test_horizon_is_midway(self):
        from pathtrace.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), max_depth=1) == pytest.approx(
            (0.75, 0.85, 1.0)
        )

    def test_sky_ignores_direction_length(self):
        from pathtrace.core.integrator import trace_ray

        direction = (1.0, 1.0, 0.0)
        y = 1.0 / math.sqrt(2.0)
        a = 0.5 * (y + 1.0)
        expected = (1.0 - 0.5 * a, 1.0 - 0.3 * a, 1.0)
        assert trace_ray((0.0, 0.0, 0.0), direction, max_depth=0) == pytest.approx(expected)
        assert trace_ray((0.0, 0.0, 0.0), (10.0, 10.0, 0.0), max_depth=0) == pytest.approx(expected)


class TestTermination:
    """Tests for rays that end on a surface."""

    def test_depth_zero_hit_is_black(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.lambertian import Lambertian

        _load(Sphere((0, 0, -3), 1.0, Lambertian((0.9, 0.9, 0.9))))

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=0) == (0.0, 0.0, 0.0)

    def test_absorbed_ray_is_black(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.metal import Metal

        # From inside a metal sphere the mirror direction points back in
        _load(Sphere((0, 0, 0), 1.0, Metal((0.9, 0.9, 0.9))))

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), max_depth=10) == (0.0, 0.0, 0.0)

    def test_negative_depth_raises(self):
        from pathtrace.core.integrator import trace_ray

        with pytest.raises(ValueError, match="max_depth"):
            trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), max_depth=-1)


class TestBounces:
    """Tests for attenuation along scattered paths."""

    def test_mirror_floor_attenuates_sky(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.geometry.plane import Plane
        from pathtrace.materials.metal import Metal

        # Floor seen from above, a perfect half-gray mirror
        _load(Plane((0, 0, 0), (0, -1, 0), Metal((0.5, 0.5, 0.5))))

        color = trace_ray((0.0, 1.0, 0.0), (0.0, -1.0, 0.0), max_depth=1)
        assert color == pytest.approx((0.25, 0.35, 0.5))

    def test_mirror_bounce_needs_depth(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.geometry.plane import Plane
        from pathtrace.materials.metal import Metal

        _load(Plane((0, 0, 0), (0, -1, 0), Metal((0.5, 0.5, 0.5))))

        assert trace_ray((0.0, 1.0, 0.0), (0.0, -1.0, 0.0), max_depth=0) == (0.0, 0.0, 0.0)

    def test_stub_random_lambertian_bounce(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.core.sampler import FixedSequenceRandom, configure_random
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.lambertian import Lambertian

        # Every rejection candidate is (-1, -1, -1), so the sample falls back
        # to the sphere center and the bounce leaves along the normal
        configure_random(FixedSequenceRandom((0.0,)))
        _load(Sphere((0, 0, -3), 1.0, Lambertian((0.5, 0.5, 0.5))))

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1)
        # Leaves horizontally along +z, which sees the horizon color
        assert color == pytest.approx((0.375, 0.425, 0.5))


class TestGlass:
    """Tests for paths through a dielectric sphere."""

    def test_refracts_through_glass_sphere(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.core.sampler import FixedSequenceRandom, configure_random
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.dielectric import Dielectric

        # 0.5 is above the Schlick probability on the way in (0.04) and on
        # the way out, so the ray passes straight through both surfaces
        configure_random(FixedSequenceRandom((0.5,)))
        _load(Sphere((0, 0, -3), 1.0, Dielectric(1.5)))

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=5)
        assert color == pytest.approx((0.75, 0.85, 1.0))

    def test_refracted_ray_ends_inside_without_depth(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.core.sampler import FixedSequenceRandom, configure_random
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.dielectric import Dielectric

        configure_random(FixedSequenceRandom((0.5,)))
        _load(Sphere((0, 0, -3), 1.0, Dielectric(1.5)))

        # One bounce enters the glass; the exit needs a second one
        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1) == (0.0, 0.0, 0.0)

    def test_reflected_ray_sees_sky_with_one_bounce(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.core.sampler import FixedSequenceRandom, configure_random
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.dielectric import Dielectric

        configure_random(FixedSequenceRandom((0.0,)))
        _load(Sphere((0, 0, -3), 1.0, Dielectric(1.5)))

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1)
        assert color == pytest.approx((0.75, 0.85, 1.0))

    def test_total_internal_reflection_inside_glass(self):
        from pathtrace.core.integrator import trace_ray
        from pathtrace.core.sampler import FixedSequenceRandom, configure_random
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.dielectric import Dielectric

        configure_random(FixedSequenceRandom((0.99,)))
        _load(Sphere((0, 0, 0), 1.0, Dielectric(1.5)))

        # Starting inside, close to the surface and almost tangent to it:
        # the exit is blocked and the ray stays in the glass until the
        # bounce budget runs out
        origin = (0.0, 0.99, 0.0)
        assert trace_ray(origin, (1.0, 0.05, 0.0), max_depth=2) == (0.0, 0.0, 0.0)
