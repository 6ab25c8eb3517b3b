"""Metal (specular reflective) material implementation.

This module implements the metal BSDF, which models specular reflection with
optional fuzziness. A perfect metal (fuzz=0) is a mirror; with fuzz > 0 the
unit reflection is offset by a random point on a sphere of radius ``fuzz``.

The reflection formula is:
    R = I - 2(I . N)N

where I is the incident direction and N is the surface normal.

Rays whose perturbed direction ends up below the surface are absorbed.

Example:
    >>> from glimmer.materials.metal import Metal
    >>> brushed_steel = Metal(albedo=(0.8, 0.8, 0.8), fuzz=0.3)
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from glimmer.core.vector import random_unit_vector, reflect, unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True, eq=False)
class Metal:
    """Metal material description used when building scenes.

    Attributes:
        albedo: The reflective color as (R, G, B), each in [0, 1].
        fuzz: The reflection fuzziness. Clamped to [0, 1] on construction;
            0 is a perfect mirror.

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        if len(self.albedo) != 3:
            raise ValueError(f"Albedo must have 3 components, got {len(self.albedo)}")
        for i, component in enumerate(self.albedo):
            if component < 0.0 or component > 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        object.__setattr__(self, "fuzz", min(max(float(self.fuzz), 0.0), 1.0))


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
):
    """Compute a scattered direction for a metal surface.

    Reflects the incident direction about the normal, normalizes the
    reflection and offsets it by ``fuzz * random_unit_vector()``. At zero fuzz
    the offset vanishes and the result is the exact mirror direction.

    Args:
        albedo: The reflective color.
        fuzz: The fuzziness in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The perturbed unit reflection.
        - attenuation: The albedo.
        - did_scatter: 1 if the direction leaves the surface, 0 if absorbed.
    """
    reflected = reflect(incident_direction, normal)
    scattered_direction = unit_vector(reflected) + fuzz * random_unit_vector()

    # Rays scattered into the surface are absorbed
    did_scatter = 0
    if tm.dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 1024

# Storage for metal material properties
metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Empty the metal registry. Stale slots are overwritten by later adds."""
    num_metal_materials[None] = 0


def add_metal_material(material: Metal) -> int:
    """Add a metal material to the device registry.

    Args:
        material: The material to upload.

    Returns:
        The index of the added material within the metal registry.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    albedo = material.albedo
    metal_albedos[idx] = vec3(albedo[0], albedo[1], albedo[2])
    metal_fuzzes[idx] = material.fuzz
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by registry index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f32:
    """Get the fuzz for a metal material by registry index."""
    return metal_fuzzes[material_idx]
