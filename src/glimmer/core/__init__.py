"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: Vector helpers, reflection/refraction and Monte Carlo samplers
    interval: Closed intervals for hit windows and color clamping
    ray: Ray data structure and point evaluation
    color: Gamma correction and 8-bit quantization
    integrator: Material dispatch, the bounce loop and render kernels

The integrator turns camera rays into radiance: it intersects the scene,
asks the hit material to scatter, multiplies attenuations along the path and
returns the sky gradient when a ray escapes. Path length is bounded by the
camera's maximum depth.

All per-ray operations are Taichi functions evaluated inside kernels.
"""

from .interval import (
    Interval,
    empty_interval,
    interval_clamp,
    interval_contains,
    interval_size,
    interval_surrounds,
    make_interval,
    universal_interval,
)
from .ray import Ray, make_ray, ray_at
from .vector import (
    color3,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_unit_vector,
    random_vec3,
    random_vec3_range,
    reflect,
    refract,
    unit_vector,
    vec3,
)

# Note: integrator is NOT imported here; it declares Taichi fields and
# depends on the camera and scene packages. Import it directly from
# glimmer.core.integrator when needed.

__all__ = [
    "Interval",
    "make_interval",
    "empty_interval",
    "universal_interval",
    "interval_size",
    "interval_contains",
    "interval_surrounds",
    "interval_clamp",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "color3",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
    "random_vec3",
    "random_vec3_range",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
]
