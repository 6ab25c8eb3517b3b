"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters toward ``normal + random_unit_vector()``,
which distributes outgoing directions with a cosine falloff around the
normal. Attenuation is the material's albedo and the ray is never absorbed.

Example:
    >>> from glimmer.materials.lambertian import Lambertian
    >>> ground = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, normal)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from glimmer.core.vector import near_zero, random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True, eq=False)
class Lambertian:
    """Diffuse material description used when building scenes.

    Instances are immutable and may be shared by any number of spheres;
    the world registers each instance once.

    Attributes:
        albedo: The diffuse reflectance as (R, G, B), each in [0, 1].

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        _validate_albedo(self.albedo)


def _validate_albedo(albedo: tuple[float, float, float]) -> None:
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3):
    """Compute a scattered direction for a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color.
        normal: The unit surface normal facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: normal + random unit vector, or the normal
          itself when that sum degenerates to (nearly) zero.
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    scatter_direction = normal + random_unit_vector()

    # Catch degenerate scatter direction
    if near_zero(scatter_direction):
        scatter_direction = normal

    return scatter_direction, albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 1024

lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Empty the Lambertian registry. Stale slots are overwritten by later adds."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(material: Lambertian) -> int:
    """Add a Lambertian material to the device registry.

    Args:
        material: The material to upload.

    Returns:
        The index of the added material within the Lambertian registry.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    albedo = material.albedo
    lambertian_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by registry index."""
    return lambertian_albedos[material_idx]
