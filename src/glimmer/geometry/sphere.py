"""Sphere primitive and ray-sphere intersection.

The intersection solves ``|origin + t * direction - center|^2 = radius^2``
in its half-b form:

    a = |direction|^2
    h = direction . (center - origin)
    c = |center - origin|^2 - radius^2
    discriminant = h^2 - a c

The roots are ``(h -+ sqrt(discriminant)) / a``. They are computed as
``q / a`` and ``c / q`` with ``q = h + sign(h) * sqrt(discriminant)``, which
avoids subtracting nearly equal numbers in f32. The nearer root is tried
first and the farther root only if the nearer one falls outside the
accepted window.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from glimmer.core.interval import Interval, interval_surrounds
from glimmer.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. A negative radius flips the
            outward normal, which models a hollow shell.
        material_id: The unified material ID used for shading.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal, always pointing against the
            incoming ray. Only valid if hit == 1.
        front_face: 1 if the ray arrived from the outside of the surface,
            0 if it arrived from the inside. Only valid if hit == 1.
        material_id: The material ID of the hit surface. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient a unit outward normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: Unit normal pointing out of the surface.

    Returns:
        A tuple (front_face, normal) where front_face is 1 when the ray
        arrived from outside and normal always opposes ray_direction.
    """
    front_face = 0
    normal = -outward_normal
    if tm.dot(ray_direction, outward_normal) < 0.0:
        front_face = 1
        normal = outward_normal
    return front_face, normal


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrtd: ti.f32):
    """Return the roots (t0, t1), t0 <= t1, of a t^2 - 2 h t + c = 0."""
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = h + sign_h * sqrtd

    t0 = 0.0
    t1 = 0.0
    if ti.abs(q) < 1e-20:
        # Tangent or degenerate ray
        t0 = (h - sqrtd) / a
        t1 = (h + sqrtd) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, ray_t: Interval) -> HitRecord:
    """Intersect a ray with a sphere.

    A root is accepted only if it lies strictly inside ray_t, which keeps
    scattered rays from re-hitting the surface they leave.

    Args:
        ray: The ray to test. Its direction need not be normalized.
        sphere: The sphere to test against.
        ray_t: Window of acceptable ray parameters.

    Returns:
        A HitRecord for the nearest accepted root, or a miss record.
    """
    oc = sphere.center - ray.origin
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    result = make_miss_record()

    if discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        # Find the nearest root that lies in the acceptable range
        near, far = _solve_quadratic_robust(h, a, c, sqrtd)
        root = near
        valid = interval_surrounds(ray_t, root)
        if not valid:
            root = far
            valid = interval_surrounds(ray_t, root)

        if valid:
            point = ray_at(ray, root)
            outward_normal = (point - sphere.center) / sphere.radius
            front_face, normal = set_face_normal(ray.direction, outward_normal)
            result = HitRecord(
                hit=1,
                t=root,
                point=point,
                normal=normal,
                front_face=front_face,
                material_id=sphere.material_id,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere from center, radius and material ID."""
    return Sphere(center=center, radius=radius, material_id=material_id)
