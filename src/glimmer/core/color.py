"""Gamma correction and 8-bit quantization of linear radiance.

Colors accumulate as unclamped linear RGB. Before output each channel is
gamma corrected with a square root (gamma 2), clamped to [0.000, 0.999] and
scaled by 256, which maps the unit range evenly onto the byte range [0, 255].
"""

import taichi as ti
import taichi.math as tm

from glimmer.core.interval import interval_clamp, make_interval

vec3 = tm.vec3

# Channel range kept before scaling to bytes
INTENSITY_MIN = 0.000
INTENSITY_MAX = 0.999


@ti.func
def linear_to_gamma(linear_component: ti.f32) -> ti.f32:
    """Convert a linear channel value to gamma 2 space.

    Non-positive inputs map to 0, so negative radiance never produces NaN.

    Args:
        linear_component: Linear channel value.

    Returns:
        sqrt(linear_component) for positive input, otherwise 0.
    """
    result = 0.0
    if linear_component > 0.0:
        result = ti.sqrt(linear_component)
    return result


@ti.func
def color_to_rgb8(pixel_color: vec3) -> tm.ivec3:
    """Quantize a linear color to 8-bit channels.

    Args:
        pixel_color: Averaged linear RGB color of a pixel.

    Returns:
        Integer (r, g, b), each in [0, 255].
    """
    intensity = make_interval(INTENSITY_MIN, INTENSITY_MAX)
    rgb = tm.ivec3(0, 0, 0)
    for c in ti.static(range(3)):
        gamma = linear_to_gamma(pixel_color[c])
        rgb[c] = ti.cast(256.0 * interval_clamp(intensity, gamma), ti.i32)
    return rgb
