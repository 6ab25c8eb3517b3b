"""Camera module for view setup and ray generation.

Components:
    thin_lens: CameraConfig, derived geometry and the get_ray() kernel function
    camera: The Camera class that initializes and renders

Ray generation uses pixel indices:
    i in [0, width): left to right across the image
    j in [0, height): top to bottom across the image

Each ray aims at a uniformly jittered point inside its pixel and starts on
the defocus disk when the defocus angle is positive.
"""

from .thin_lens import (
    CameraConfig,
    CameraGeometry,
    compute_camera_geometry,
    compute_image_height,
    get_camera_info,
    get_ray,
    sample_ray,
    setup_camera,
)

# Note: Camera is NOT imported here; glimmer.camera.camera depends on the
# integrator, which itself imports get_ray from this package. Import it
# from glimmer.camera.camera.

__all__ = [
    "CameraConfig",
    "CameraGeometry",
    "compute_camera_geometry",
    "compute_image_height",
    "setup_camera",
    "get_ray",
    "sample_ray",
    "get_camera_info",
]
