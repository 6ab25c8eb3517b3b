"""End-to-end rendering tests through the Camera."""

import io

import numpy as np


def _expected_sky_rgb8(geometry):
    """Quantized sky color through every pixel center of a pinhole camera."""
    i = np.arange(geometry.image_width)[None, :, None]
    j = np.arange(geometry.image_height)[:, None, None]
    targets = geometry.pixel00_loc + i * geometry.pixel_delta_u + j * geometry.pixel_delta_v
    directions = targets - geometry.center
    unit_y = directions[..., 1] / np.linalg.norm(directions, axis=-1)
    a = 0.5 * (unit_y + 1.0)[..., None]
    linear = (1.0 - a) * np.array([1.0, 1.0, 1.0]) + a * np.array([0.5, 0.7, 1.0])
    return (256.0 * np.clip(np.sqrt(linear), 0.0, 0.999)).astype(np.int64)


class TestEmptyWorld:
    """Rendering a scene with no objects shows only the sky."""

    def _render(self, output=None, progress=None):
        from glimmer.camera.camera import Camera
        from glimmer.camera.thin_lens import CameraConfig
        from glimmer.scene.world import HittableList

        config = CameraConfig(
            aspect_ratio=16.0 / 9.0,
            image_width=400,
            samples_per_pixel=1,
            max_depth=1,
            vfov=90.0,
        )
        camera = Camera(config)
        image = camera.render(HittableList(), output=output, progress=progress)
        return camera, image

    def test_sky_gradient_image(self):
        """Test every pixel against the analytic gradient."""
        camera, image = self._render()

        assert image.shape == (225, 400, 3)
        assert image.dtype == np.uint8

        expected = _expected_sky_rgb8(camera.initialize())
        assert np.abs(image.astype(np.int64) - expected).max() <= 2

        # Blue saturates everywhere; the top-left is the bluest corner
        assert (image[..., 2] == 255).all()
        top_left = image[0, 0].astype(np.int64)
        assert np.abs(top_left - np.array([204, 226, 255])).max() <= 2

        # Red and green brighten from top to bottom
        row_means = image[..., :2].astype(np.float64).mean(axis=1)
        assert (np.diff(row_means, axis=0) >= -0.5).all()
        assert row_means[-1, 0] > row_means[0, 0]

    def test_progress_and_ppm_output(self):
        """Test the countdown and the streamed PPM text."""
        calls = []
        stream = io.StringIO()
        _, image = self._render(output=stream, progress=calls.append)

        assert calls == list(range(224, -1, -1))

        lines = stream.getvalue().splitlines()
        assert lines[:3] == ["P3", "400 225", "255"]
        assert len(lines) == 3 + 400 * 225
        r, g, b = image[0, 0]
        assert lines[3] == f"{r} {g} {b}"
        r, g, b = image[-1, -1]
        assert lines[-1] == f"{r} {g} {b}"


class TestTwoSphereScene:
    """Rendering the ground-plus-ball scene."""

    def test_ball_is_darker_than_sky(self):
        """Test that diffuse gray surfaces reflect at most half the sky."""
        from glimmer.camera.camera import Camera
        from glimmer.camera.thin_lens import CameraConfig
        from glimmer.scene.final_scene import create_two_sphere_scene

        camera = Camera(
            CameraConfig(
                aspect_ratio=16.0 / 9.0,
                image_width=40,
                samples_per_pixel=4,
                max_depth=10,
            )
        )
        image = camera.render(create_two_sphere_scene())

        assert image.shape == (22, 40, 3)
        # Center pixel sees the ball; every bounce halves the sky color
        assert image[11, 20, 2] <= 182
        # Top row sees open sky
        assert (image[0, :, 2] == 255).all()


class TestDegenerateFocus:
    """Rendering with a non-positive focus distance."""

    def test_zero_focus_distance_is_deterministic(self):
        """Test that focus_dist 0 renders the same flat image every time."""
        from glimmer.camera.camera import Camera
        from glimmer.camera.thin_lens import CameraConfig
        from glimmer.scene.final_scene import create_two_sphere_scene

        config = CameraConfig(image_width=16, samples_per_pixel=2, max_depth=5, focus_dist=0.0)
        world = create_two_sphere_scene()

        first = Camera(config).render(world)
        second = Camera(config).render(world)

        assert np.array_equal(first, second)
        # Zero-length directions hit nothing and see the middle of the sky blend
        assert (first == np.array([221, 236, 255], dtype=np.uint8)).all()
