"""Scene-level sphere storage and closest-hit traversal.

The world is a flat list of spheres kept in Taichi fields (Structure of
Arrays). ``hit_world`` walks the list in insertion order, shrinking the
accepted window to the closest hit found so far, so the returned record is
the globally nearest intersection. On exactly equal distances the first
inserted sphere keeps the hit because later candidates must be strictly
closer.

Nested Python-side lists are flattened into this storage depth-first by
``glimmer.scene.world.World.load``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use hit_world within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from glimmer.core.interval import Interval, make_interval
from glimmer.core.ray import Ray
from glimmer.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The field data is not cleared but will
    be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material_id: int = 0,
) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The radius of the sphere. Negative radii are stored as given.
        material_id: The unified material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Load the sphere stored at ``idx``."""
    return Sphere(
        center=sphere_centers[idx],
        radius=sphere_radii[idx],
        material_id=sphere_material_ids[idx],
    )


@ti.func
def hit_world(ray: Ray, ray_t: Interval) -> HitRecord:
    """Test a ray against every sphere in the scene.

    Args:
        ray: The ray to trace.
        ray_t: Window of acceptable ray parameters.

    Returns:
        The HitRecord of the nearest intersection inside ``ray_t``, or a
        miss record when nothing is hit.
    """
    closest_so_far = ray_t.maximum
    result = make_miss_record()

    n = num_spheres[None]
    for i in range(n):
        window = make_interval(ray_t.minimum, closest_so_far)
        rec = hit_sphere(ray, get_sphere(i), window)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
