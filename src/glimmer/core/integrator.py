"""Light transport integrator and render kernels.

A camera ray is followed through the scene for at most ``max_depth``
scatter events. At each hit the material decides whether the ray scatters
(and with what attenuation) or is absorbed; the product of attenuations
along the path multiplies the sky color once the ray escapes. A path that
is absorbed or runs out of depth contributes black.

The recursion is written as a loop with a running throughput, so the depth
limit bounds the work per primary ray without using the call stack.

Rendering happens one scanline per kernel launch so that the caller can
report progress. Loops are serialized, which makes the sequence of random
draws, and therefore the image, a pure function of the Taichi seed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.core.integrator import trace_ray
    >>> # Straight up into an empty world: the zenith sky color
    >>> r, g, b = trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=10)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from glimmer.camera.thin_lens import get_ray
from glimmer.core.color import color_to_rgb8
from glimmer.core.interval import INFINITY, make_interval
from glimmer.core.ray import Ray, make_ray
from glimmer.geometry.sphere import HitRecord
from glimmer.materials.dielectric import (
    get_dielectric_refraction_index,
    scatter_dielectric,
)
from glimmer.materials.lambertian import (
    get_lambertian_albedo,
    scatter_lambertian,
)
from glimmer.materials.metal import (
    get_metal_albedo,
    get_metal_fuzz,
    scatter_metal,
)
from glimmer.scene.intersection import hit_world
from glimmer.scene.world import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Lower bound of the accepted hit window; keeps scattered rays from
# re-hitting the surface they start on
T_MIN = 0.001

# Scattered rays start this far off the surface, on the side they leave
# toward, so f32 rounding of the hit point cannot put them back inside
RAY_EPSILON = 1e-4

# Sky gradient endpoints
HORIZON_COLOR = vec3(1.0, 1.0, 1.0)
ZENITH_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffers)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Averaged linear color per pixel, indexed [column, row] with row 0 at the top
_pixel_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Quantized 8-bit color per pixel
_rgb_buffer = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    _pixel_buffer.fill(0.0)
    _rgb_buffer.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(material_id: ti.i32, ray_in: Ray, rec: HitRecord):
    """Dispatch to the scatter function of the hit material.

    Args:
        material_id: The unified material ID.
        ray_in: The incoming ray.
        rec: The hit record at the scattering point.

    Returns:
        A tuple of (did_scatter, attenuation, scattered_direction). An
        unknown material ID absorbs the ray.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = get_lambertian_albedo(type_index)
        scattered_direction, attenuation, did_scatter = scatter_lambertian(
            albedo, rec.normal
        )

    elif mat_type == int(MaterialType.METAL):
        albedo = get_metal_albedo(type_index)
        fuzz = get_metal_fuzz(type_index)
        scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, fuzz, ray_in.direction, rec.normal
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        refraction_index = get_dielectric_refraction_index(type_index)
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            refraction_index, ray_in.direction, rec.normal, rec.front_face
        )

    return did_scatter, attenuation, scattered_direction


# =============================================================================
# Light Transport
# =============================================================================


@ti.func
def background_color(direction: vec3) -> vec3:
    """Sky color seen along a direction.

    Blends from white at the bottom to light blue at the top by the
    normalized direction's y component. A zero-length direction is never
    normalized and gets the midpoint of the blend.

    Args:
        direction: The escaping ray direction (any length).

    Returns:
        The background radiance.
    """
    a = 0.5
    len_sq = tm.dot(direction, direction)
    if len_sq > 0.0:
        a = 0.5 * (direction.y / ti.sqrt(len_sq) + 1.0)
    return (1.0 - a) * HORIZON_COLOR + a * ZENITH_COLOR


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Move a scattered ray's origin off the surface it starts on.

    Args:
        point: The hit point.
        normal: The unit normal at the hit, facing the incoming ray.
        direction: The scattered direction.

    Returns:
        The point pushed RAY_EPSILON along the normal, toward the side the
        scattered direction travels into (inward for refraction).
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + RAY_EPSILON * offset_dir


@ti.func
def sanitize_sample(sample: vec3) -> vec3:
    """Zero NaN, infinite and negative channels of one radiance sample."""
    result = sample
    for c in ti.static(range(3)):
        if tm.isnan(result[c]) or tm.isinf(result[c]):
            result[c] = 0.0
    return tm.max(result, vec3(0.0, 0.0, 0.0))


@ti.func
def ray_color(ray: Ray, depth: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        ray: The ray to follow.
        depth: Maximum number of hits to process. With depth <= 0 the
            result is black regardless of the scene.

    Returns:
        The radiance carried back along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1

    for _ in range(depth):
        if active == 1:
            current = make_ray(origin, direction)
            rec = hit_world(current, make_interval(T_MIN, INFINITY))

            if rec.hit == 0:
                color = throughput * background_color(direction)
                active = 0
            else:
                did_scatter, attenuation, scattered_direction = scatter_material(
                    rec.material_id, current, rec
                )
                if did_scatter == 0:
                    active = 0
                else:
                    throughput *= attenuation
                    origin = _offset_ray_origin(rec.point, rec.normal, scattered_direction)
                    direction = scattered_direction

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_scanline(
    j: ti.i32,
    width: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    pixel_samples_scale: ti.f32,
):
    """Render every pixel of row j into the pixel buffer."""
    ti.loop_config(serialize=True)
    for i in range(width):
        pixel_color = vec3(0.0, 0.0, 0.0)
        for _ in range(samples_per_pixel):
            # One bad sample must not poison the pixel
            pixel_color += sanitize_sample(ray_color(get_ray(i, j), max_depth))

        _pixel_buffer[i, j] = pixel_color * pixel_samples_scale


@ti.kernel
def _quantize_image(width: ti.i32, height: ti.i32):
    """Convert the pixel buffer to gamma-corrected 8-bit values."""
    for i, j in ti.ndrange(width, height):
        _rgb_buffer[i, j] = color_to_rgb8(_pixel_buffer[i, j])


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return ray_color(make_ray(origin, direction), depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_scanline(
    j: int,
    samples_per_pixel: int,
    max_depth: int,
    pixel_samples_scale: float,
) -> None:
    """Render one image row using the camera currently set up.

    Args:
        j: Row index (0 = top).
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Maximum scatter events per primary ray.
        pixel_samples_scale: Weight of one sample (1 / samples_per_pixel).

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, _ = get_image_dimensions()
    _render_scanline(j, width, samples_per_pixel, max_depth, pixel_samples_scale)


def quantize_image() -> None:
    """Fill the 8-bit buffer from the averaged linear colors."""
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _quantize_image(width, height)


def get_linear_image() -> np.ndarray:
    """Get the averaged linear colors as a (height, width, 3) float32 array.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    image = _pixel_buffer.to_numpy()[:width, :height, :]
    return np.transpose(image, (1, 0, 2)).astype(np.float32)


def get_image_rgb8() -> np.ndarray:
    """Get the quantized image as a (height, width, 3) uint8 array.

    Row 0 is the top of the image. Call quantize_image() first.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    image = _rgb_buffer.to_numpy()[:width, :height, :]
    # (width, height, 3) to (height, width, 3); rows already run top to bottom
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2))).astype(np.uint8)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int,
) -> tuple[float, float, float]:
    """Follow a single ray through the loaded world from Python.

    Useful for testing the transport loop without a camera.

    Args:
        origin: Ray origin.
        direction: Ray direction (any length).
        depth: Maximum number of hits to process.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    color = _trace_ray_kernel(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))
