"""Dielectric (glass/water) material implementation.

This module implements the dielectric BSDF, which models transparent materials
like glass and water with refraction and Fresnel reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when the refraction ratio times sin(theta) > 1

Each scatter picks reflection with probability equal to the Schlick
reflectance and refraction otherwise, so the Fresnel split is reproduced on
average over many samples. Glass absorbs nothing: attenuation is white.

Example:
    >>> from glimmer.materials.dielectric import Dielectric
    >>> glass = Dielectric(refraction_index=1.5)
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     refraction_index, incident_dir, normal, front_face
    >>> # )
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from glimmer.core.vector import reflect, refract, unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True, eq=False)
class Dielectric:
    """Dielectric material description used when building scenes.

    Attributes:
        refraction_index: Refractive index relative to the enclosing medium.
            Common values: Water=1.33, Glass=1.5, Diamond=2.4. Values below
            1.0 model a pocket of thinner medium (an air bubble in water).

    Raises:
        ValueError: If the refraction index is not positive.
    """

    refraction_index: float = 1.5

    def __post_init__(self) -> None:
        if not self.refraction_index > 0.0:
            raise ValueError(
                f"Refraction index = {self.refraction_index} must be positive."
            )


@ti.func
def reflectance(cosine: ti.f32, refraction_ratio: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between the incident ray and the normal.
        refraction_ratio: Ratio of refractive indices at the boundary.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - ratio) / (1 + ratio))^2.
    """
    r0 = (1.0 - refraction_ratio) / (1.0 + refraction_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


@ti.func
def scatter_dielectric(
    refraction_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Compute a scattered direction for a dielectric surface.

    Args:
        refraction_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray enters the material, 0 if it exits.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted unit direction.
        - attenuation: White (glass does not absorb).
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)

    # Entering: air to material. Exiting: material to air.
    ri = refraction_index
    if front_face == 1:
        ri = 1.0 / refraction_index

    unit_direction = unit_vector(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)

    cannot_refract = ri * sin_theta > 1.0

    scattered_direction = unit_direction
    if cannot_refract:
        scattered_direction = reflect(unit_direction, normal)
    elif ri != 1.0:
        # An index-matched boundary (ri == 1) neither bends nor reflects
        if reflectance(cos_theta, ri) > ti.random(ti.f32):
            scattered_direction = reflect(unit_direction, normal)
        else:
            scattered_direction = refract(unit_direction, normal, ri)

    return scattered_direction, attenuation, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

# Storage for dielectric material properties
dielectric_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Empty the dielectric registry. Stale slots are overwritten by later adds."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(material: Dielectric) -> int:
    """Add a dielectric material to the device registry.

    Args:
        material: The material to upload.

    Returns:
        The index of the added material within the dielectric registry.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[idx] = material.refraction_index
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_refraction_index(material_idx: ti.i32) -> ti.f32:
    """Get the refraction index for a dielectric material by registry index."""
    return dielectric_indices[material_idx]
