"""Unit tests for plane intersection.

Tests cover:
- Hit from the accepted side with the negated normal
- One-sided behavior: rays from the other side pass through
- Parallel rays
- Host-side Plane validation and normalization
"""

import pytest
import taichi as ti


def _hit(origin, direction, point, normal, t_min=0.001, t_max=1000.0):
    """Run hit_plane in a kernel and return (hit, t, point, normal)."""
    from pathtrace.core.ray import vec3
    from pathtrace.geometry.plane import PlaneShape, hit_plane
    from pathtrace.materials.record import MaterialRecord

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    hit_point = ti.Vector.field(3, dtype=ti.f64, shape=())
    hit_normal = ti.Vector.field(3, dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, p: vec3, n: vec3):
        plane = PlaneShape(point=p, normal=n)
        material = MaterialRecord(
            kind=0, albedo=vec3(0.5, 0.5, 0.5), fuzz=0.0, refractive_index=0.0
        )
        record = hit_plane(o, d, plane, material, t_min, t_max)
        hit[None] = record.hit
        t_val[None] = record.t
        hit_point[None] = record.point
        hit_normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction), vec3(*point), vec3(*normal))
    p = hit_point[None]
    n = hit_normal[None]
    return hit[None], t_val[None], (p[0], p[1], p[2]), (n[0], n[1], n[2])


class TestPlaneIntersection:
    """Tests for the one-sided ray-plane test."""

    def test_hit_along_normal(self):
        # Floor at y=0 whose normal points down; a falling ray travels along it
        hit, t, point, normal = _hit((1.0, 2.0, 3.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(2.0)
        assert point == pytest.approx((1.0, 0.0, 3.0))
        # Returned normal faces the incoming ray
        assert normal == pytest.approx((0.0, 1.0, 0.0))

    def test_oblique_hit(self):
        hit, t, point, _ = _hit((0.0, 1.0, 0.0), (1.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(1.0)
        assert point == pytest.approx((1.0, 0.0, 0.0))

    def test_back_side_is_not_hit(self):
        # Same plane, ray arriving from below travelling up
        hit, _, _, _ = _hit((0.0, -2.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_parallel_ray_misses(self):
        hit, _, _, _ = _hit((0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_plane_behind_ray_misses(self):
        # Accepted direction, but the plane is behind the origin (t < 0)
        hit, _, _, _ = _hit((0.0, -1.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_t_max_excludes_hit(self):
        hit, _, _, _ = _hit(
            (0.0, 2.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, -1.0, 0.0), t_max=2.0
        )
        assert hit == 0


class TestPlaneHost:
    """Tests for the host-side Plane description."""

    def test_normal_is_normalized(self):
        from pathtrace.core.vector import Vector3
        from pathtrace.geometry.plane import Plane
        from pathtrace.materials.lambertian import Lambertian

        plane = Plane(point=(0, 0, 0), normal=(0, -3, 0), material=Lambertian((0.5, 0.5, 0.5)))
        assert plane.normal == Vector3(0.0, -1.0, 0.0)
        assert plane.point == Vector3(0.0, 0.0, 0.0)

    def test_zero_normal_raises(self):
        from pathtrace.geometry.plane import Plane
        from pathtrace.materials.lambertian import Lambertian

        with pytest.raises(ValueError):
            Plane(point=(0, 0, 0), normal=(0, 0, 0), material=Lambertian((0.5, 0.5, 0.5)))
