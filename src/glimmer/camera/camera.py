"""Camera: configure, initialize, render.

The Camera ties the pieces together. It holds a frozen CameraConfig,
derives its geometry once on ``initialize()`` and renders a Hittable tree
scanline by scanline into an 8-bit image, optionally streaming it out as
PPM text.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=7)
    >>> from glimmer.camera.camera import Camera
    >>> from glimmer.camera.thin_lens import CameraConfig
    >>> from glimmer.scene.final_scene import create_two_sphere_scene
    >>>
    >>> camera = Camera(CameraConfig(image_width=200, aspect_ratio=16.0 / 9.0))
    >>> image = camera.render(create_two_sphere_scene())
    >>> image.shape
    (112, 200, 3)
"""

import logging
from collections.abc import Callable
from typing import TextIO

import numpy as np
import numpy.typing as npt

from glimmer.camera.thin_lens import (
    CameraConfig,
    CameraGeometry,
    compute_camera_geometry,
    setup_camera,
)
from glimmer.core.integrator import (
    get_image_rgb8,
    quantize_image,
    render_scanline,
    setup_render_target,
)
from glimmer.output.export import write_ppm
from glimmer.scene.world import Hittable, World

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives the number of scanlines still to render after each row
ScanlineCallback = Callable[[int], None]


class Camera:
    """A thin-lens camera that renders Hittable scenes.

    Attributes:
        config: The immutable camera configuration.
    """

    def __init__(self, config: CameraConfig | None = None) -> None:
        """Create a camera.

        Args:
            config: Camera parameters. Defaults to CameraConfig().
        """
        self.config = config if config is not None else CameraConfig()
        self._geometry: CameraGeometry | None = None
        self._rendering = False

    def initialize(self) -> CameraGeometry:
        """Derive the camera geometry. Repeated calls return the cached result.

        Returns:
            The derived CameraGeometry.

        Raises:
            ValueError: If the configuration is invalid.
        """
        if self._geometry is None:
            self._geometry = compute_camera_geometry(self.config)
        return self._geometry

    @property
    def image_width(self) -> int:
        """Get the image width in pixels."""
        return self.initialize().image_width

    @property
    def image_height(self) -> int:
        """Get the image height in pixels."""
        return self.initialize().image_height

    def render(
        self,
        world: Hittable,
        *,
        output: TextIO | None = None,
        progress: ScanlineCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render a scene.

        Loads the scene into the device-side world, traces every pixel and
        quantizes the result.

        Args:
            world: The scene root, a SphereNode or a HittableList.
            output: Optional text stream that receives the image as PPM (P3).
            progress: Optional callback called after each completed scanline
                with the number of scanlines left (0 after the last one).

        Returns:
            The image as a (height, width, 3) uint8 array, row 0 at the top.

        Raises:
            RuntimeError: If called while this camera is already rendering,
                or if the scene exceeds device capacity.
            ValueError: If the configuration or scene is invalid.
        """
        if self._rendering:
            raise RuntimeError("Camera.render() is not reentrant")

        self._rendering = True
        try:
            geometry = self.initialize()
            width = geometry.image_width
            height = geometry.image_height

            setup_render_target(width, height)
            setup_camera(geometry)

            scene = World()
            scene.load(world)

            logger.info(
                "Rendering %dx%d, %d spp, max depth %d, %d spheres, %d materials",
                width,
                height,
                geometry.samples_per_pixel,
                geometry.max_depth,
                scene.get_sphere_count(),
                scene.get_material_count(),
            )

            for j in range(height):
                render_scanline(
                    j,
                    geometry.samples_per_pixel,
                    geometry.max_depth,
                    geometry.pixel_samples_scale,
                )
                remaining = height - j - 1
                logger.debug("Scanline %d done, %d remaining", j, remaining)
                if progress is not None:
                    progress(remaining)

            quantize_image()
            image = get_image_rgb8()
            logger.info("Render complete")

            if output is not None:
                write_ppm(image, output)

            return image
        finally:
            self._rendering = False

    def __repr__(self) -> str:
        """Return a string representation of the camera."""
        return f"Camera(config={self.config!r})"
