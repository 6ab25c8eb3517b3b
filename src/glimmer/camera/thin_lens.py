"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits on the focus plane, ``focus_dist`` in front of the camera.
Pixel rows run top to bottom, so the vertical viewport edge is ``-v``. Rays
start either at the camera center (defocus_angle <= 0) or at a random point
on a disk of radius ``focus_dist * tan(defocus_angle / 2)`` around it, and
aim at a jittered point inside the pixel footprint.

Geometry is derived on the Python side with NumPy and written to Taichi
fields once per render; ``get_ray`` reads those fields inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.camera.thin_lens import (
    ...     CameraConfig, compute_camera_geometry, setup_camera, get_ray
    ... )
    >>> config = CameraConfig(image_width=400, aspect_ratio=16.0 / 9.0)
    >>> geometry = compute_camera_geometry(config)
    >>> geometry.image_height
    225
    >>> setup_camera(geometry)
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0)  # Ray through the top-left pixel
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from glimmer.core.ray import Ray, make_ray
from glimmer.core.vector import random_in_unit_disk

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Squared norms below this make the camera basis undefined
_DEGENERATE_EPSILON = 1e-12

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class CameraConfig:
    """Configuration for a thin-lens camera.

    Attributes:
        aspect_ratio: Width divided by height of the output image. A
            non-positive value falls back to a square image.
        image_width: Rendered image width in pixels (>= 1).
        samples_per_pixel: Number of jittered samples averaged per pixel (>= 1).
        max_depth: Maximum number of scatter events per primary ray (>= 0).
        vfov: Vertical field of view in degrees.
        lookfrom: Camera position in world space.
        lookat: Point the camera is looking at.
        vup: Up direction used to orient the camera.
        defocus_angle: Cone angle in degrees of rays through each pixel.
            0 disables depth of field.
        focus_dist: Distance from lookfrom to the plane of perfect focus.
    """

    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    defocus_angle: float = 0.0
    focus_dist: float = 10.0


@dataclass(frozen=True)
class CameraGeometry:
    """State derived once from a CameraConfig.

    Attributes:
        image_width: Image width in pixels.
        image_height: Image height in pixels (>= 1).
        samples_per_pixel: Samples averaged per pixel.
        max_depth: Maximum scatter events per primary ray.
        pixel_samples_scale: Weight of one sample, 1 / samples_per_pixel.
        center: Camera center.
        pixel00_loc: Center of the top-left pixel on the focus plane.
        pixel_delta_u: Offset from one pixel to the next to the right.
        pixel_delta_v: Offset from one pixel to the next one down.
        u: Camera right vector.
        v: Camera up vector.
        w: Camera backward vector.
        defocus_angle: Defocus cone angle in degrees.
        defocus_disk_u: Horizontal radius vector of the defocus disk.
        defocus_disk_v: Vertical radius vector of the defocus disk.
    """

    image_width: int
    image_height: int
    samples_per_pixel: int
    max_depth: int
    pixel_samples_scale: float
    center: np.ndarray
    pixel00_loc: np.ndarray
    pixel_delta_u: np.ndarray
    pixel_delta_v: np.ndarray
    u: np.ndarray
    v: np.ndarray
    w: np.ndarray
    defocus_angle: float
    defocus_disk_u: np.ndarray
    defocus_disk_v: np.ndarray


def compute_image_height(image_width: int, aspect_ratio: float) -> int:
    """Compute the image height for a width and aspect ratio.

    The height is truncated and floored at one pixel. A non-positive aspect
    ratio is treated as 1.0.

    Args:
        image_width: Image width in pixels.
        aspect_ratio: Width divided by height.

    Returns:
        The image height in pixels.
    """
    if not aspect_ratio > 0.0:
        logger.warning(
            "Aspect ratio %r is not positive; rendering a square image", aspect_ratio
        )
        aspect_ratio = 1.0
    return max(1, int(image_width / aspect_ratio))


def compute_camera_geometry(config: CameraConfig) -> CameraGeometry:
    """Derive viewport and lens geometry from a camera configuration.

    Args:
        config: The camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        ValueError: If image_width < 1, samples_per_pixel < 1, max_depth < 0,
            lookfrom equals lookat, or vup is parallel to the view direction.
    """
    if config.image_width < 1:
        raise ValueError(f"image_width must be >= 1, got {config.image_width}")
    if config.samples_per_pixel < 1:
        raise ValueError(
            f"samples_per_pixel must be >= 1, got {config.samples_per_pixel}"
        )
    if config.max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {config.max_depth}")

    image_width = int(config.image_width)
    image_height = compute_image_height(image_width, config.aspect_ratio)

    center = np.array(config.lookfrom, dtype=np.float64)
    lookat = np.array(config.lookat, dtype=np.float64)
    vup = np.array(config.vup, dtype=np.float64)

    # Viewport dimensions on the focus plane
    theta = math.radians(config.vfov)
    h = math.tan(theta / 2.0)
    viewport_height = 2.0 * h * config.focus_dist
    viewport_width = viewport_height * (image_width / image_height)

    # w points from lookat toward lookfrom (backward)
    w = center - lookat
    if np.dot(w, w) < _DEGENERATE_EPSILON:
        raise ValueError("lookfrom and lookat must be distinct points")
    w = w / np.linalg.norm(w)

    # u points right (perpendicular to w and vup)
    u = np.cross(vup, w)
    if np.dot(u, u) < _DEGENERATE_EPSILON:
        raise ValueError("vup must not be parallel to the view direction")
    u = u / np.linalg.norm(u)

    # v points up in the camera's frame
    v = np.cross(w, u)

    # Edges across the viewport; rows go down the image
    viewport_u = viewport_width * u
    viewport_v = viewport_height * -v

    pixel_delta_u = viewport_u / image_width
    pixel_delta_v = viewport_v / image_height

    viewport_upper_left = (
        center - config.focus_dist * w - viewport_u / 2.0 - viewport_v / 2.0
    )
    pixel00_loc = viewport_upper_left + 0.5 * (pixel_delta_u + pixel_delta_v)

    defocus_radius = config.focus_dist * math.tan(math.radians(config.defocus_angle / 2.0))

    return CameraGeometry(
        image_width=image_width,
        image_height=image_height,
        samples_per_pixel=int(config.samples_per_pixel),
        max_depth=int(config.max_depth),
        pixel_samples_scale=1.0 / config.samples_per_pixel,
        center=center,
        pixel00_loc=pixel00_loc,
        pixel_delta_u=pixel_delta_u,
        pixel_delta_v=pixel_delta_v,
        u=u,
        v=v,
        w=w,
        defocus_angle=float(config.defocus_angle),
        defocus_disk_u=u * defocus_radius,
        defocus_disk_v=v * defocus_radius,
    )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_center = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel00_loc = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_pixel_delta_v = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_angle = ti.field(dtype=ti.f32, shape=())
_defocus_disk_u = ti.Vector.field(3, dtype=ti.f32, shape=())
_defocus_disk_v = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(geometry: CameraGeometry) -> None:
    """Upload derived camera geometry to the Taichi fields read by get_ray.

    Args:
        geometry: Geometry from compute_camera_geometry().

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    _camera_center[None] = geometry.center.tolist()
    _pixel00_loc[None] = geometry.pixel00_loc.tolist()
    _pixel_delta_u[None] = geometry.pixel_delta_u.tolist()
    _pixel_delta_v[None] = geometry.pixel_delta_v.tolist()
    _defocus_angle[None] = geometry.defocus_angle
    _defocus_disk_u[None] = geometry.defocus_disk_u.tolist()
    _defocus_disk_v[None] = geometry.defocus_disk_v.tolist()


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def defocus_disk_sample() -> vec3:
    """Return a random point on the camera's defocus disk."""
    p = random_in_unit_disk()
    return _camera_center[None] + p.x * _defocus_disk_u[None] + p.y * _defocus_disk_v[None]


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate a camera ray for pixel (i, j).

    The ray aims at a point offset uniformly in [-0.5, 0.5) in both
    directions from the pixel center. Its direction is left unnormalized.

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).

    Returns:
        A Ray from the camera center or the defocus disk.
    """
    offset_x = ti.random(ti.f32) - 0.5
    offset_y = ti.random(ti.f32) - 0.5

    pixel_sample = (
        _pixel00_loc[None]
        + (ti.cast(i, ti.f32) + offset_x) * _pixel_delta_u[None]
        + (ti.cast(j, ti.f32) + offset_y) * _pixel_delta_v[None]
    )

    ray_origin = _camera_center[None]
    if _defocus_angle[None] > 0.0:
        ray_origin = defocus_disk_sample()

    return make_ray(ray_origin, pixel_sample - ray_origin)


# =============================================================================
# Utility Functions
# =============================================================================

_sampled_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_sampled_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _sample_ray_kernel(i: ti.i32, j: ti.i32):
    ray = get_ray(i, j)
    _sampled_origin[None] = ray.origin
    _sampled_direction[None] = ray.direction


def sample_ray(i: int, j: int) -> tuple[np.ndarray, np.ndarray]:
    """Draw one camera ray for pixel (i, j) from Python.

    Requires setup_camera() to have been called.

    Returns:
        A tuple (origin, direction) of float32 NumPy arrays.
    """
    _sample_ray_kernel(i, j)
    return _sampled_origin.to_numpy(), _sampled_direction.to_numpy()


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera field state for debugging.

    Returns:
        Dictionary with center, pixel00_loc, pixel_delta_u, pixel_delta_v,
        defocus_disk_u and defocus_disk_v.
    """
    fields = {
        "center": _camera_center,
        "pixel00_loc": _pixel00_loc,
        "pixel_delta_u": _pixel_delta_u,
        "pixel_delta_v": _pixel_delta_v,
        "defocus_disk_u": _defocus_disk_u,
        "defocus_disk_v": _defocus_disk_v,
    }
    info = {}
    for name, f in fields.items():
        value = f[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
