"""Tests for the ready-made scenes."""

import numpy as np
import pytest


def _spheres(world):
    from glimmer.scene.world import _iter_spheres

    return list(_iter_spheres(world))


class TestFinalScene:
    """Tests for create_final_scene."""

    def test_same_seed_same_scene(self):
        """Test that scene generation is deterministic for a seed."""
        from glimmer.scene.final_scene import create_final_scene
        from glimmer.scene.world import world_to_dict

        first, _ = create_final_scene(seed=123)
        second, _ = create_final_scene(seed=123)
        other, _ = create_final_scene(seed=124)

        assert world_to_dict(first) == world_to_dict(second)
        assert world_to_dict(first) != world_to_dict(other)

    def test_sphere_count(self):
        """Test one ground, up to 22x22 small and three feature spheres."""
        from glimmer.scene.final_scene import create_final_scene

        world, _ = create_final_scene(seed=1)
        count = len(_spheres(world))
        assert 4 < count <= 1 + 22 * 22 + 3

    def test_ground_and_feature_spheres(self):
        """Test the fixed spheres and their materials."""
        from glimmer.materials import Dielectric, Lambertian, Metal
        from glimmer.scene.final_scene import create_final_scene

        world, _ = create_final_scene(seed=2)
        spheres = _spheres(world)

        ground = spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0
        assert isinstance(ground.material, Lambertian)
        assert ground.material.albedo == (0.5, 0.5, 0.5)

        glass, diffuse, metal = spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert isinstance(glass.material, Dielectric)
        assert glass.material.refraction_index == 1.5
        assert diffuse.center == (-4.0, 1.0, 0.0)
        assert isinstance(diffuse.material, Lambertian)
        assert diffuse.material.albedo == (0.4, 0.2, 0.1)
        assert metal.center == (4.0, 1.0, 0.0)
        assert isinstance(metal.material, Metal)
        assert metal.material.albedo == (0.7, 0.6, 0.5)
        assert metal.material.fuzz == 0.0

    def test_small_spheres(self):
        """Test placement, keep-out zone and material ranges of small spheres."""
        from glimmer.materials import Dielectric, Lambertian, Metal
        from glimmer.scene.final_scene import create_final_scene

        world, _ = create_final_scene(seed=3)
        small = _spheres(world)[1:-3]
        assert len(small) > 0

        keep_out = np.array([4.0, 0.2, 0.0])
        for sphere in small:
            center = np.array(sphere.center)
            assert sphere.radius == 0.2
            assert center[1] == pytest.approx(0.2)
            assert -11.0 <= center[0] < 11.0
            assert -11.0 <= center[2] < 11.0
            assert np.linalg.norm(center - keep_out) > 0.9

            material = sphere.material
            if isinstance(material, Metal):
                assert all(0.5 <= c <= 1.0 for c in material.albedo)
                assert 0.0 <= material.fuzz <= 0.5
            elif isinstance(material, Dielectric):
                assert material.refraction_index == 1.5
            else:
                assert isinstance(material, Lambertian)

    def test_camera_config(self):
        """Test the camera that frames the final scene."""
        from glimmer.scene.final_scene import create_final_scene

        _, config = create_final_scene(seed=0)
        assert config.aspect_ratio == pytest.approx(16.0 / 9.0)
        assert config.image_width == 400
        assert config.samples_per_pixel == 100
        assert config.max_depth == 50
        assert config.vfov == 20.0
        assert config.lookfrom == (13.0, 2.0, 3.0)
        assert config.lookat == (0.0, 0.0, 0.0)
        assert config.vup == (0.0, 1.0, 0.0)
        assert config.defocus_angle == 0.6
        assert config.focus_dist == 10.0

    def test_scene_loads(self):
        """Test that the whole scene fits into device storage."""
        from glimmer.scene.final_scene import create_final_scene
        from glimmer.scene.world import World

        world, _ = create_final_scene(seed=4)
        scene = World()
        scene.load(world)
        assert scene.get_sphere_count() == len(_spheres(world))


class TestTwoSphereScene:
    """Tests for create_two_sphere_scene."""

    def test_layout(self):
        """Test the ball and ground spheres sharing one material."""
        from glimmer.scene.final_scene import create_two_sphere_scene
        from glimmer.scene.world import World

        world = create_two_sphere_scene()
        ball, ground = _spheres(world)
        assert ball.center == (0.0, 0.0, -1.0)
        assert ball.radius == 0.5
        assert ground.center == (0.0, -100.5, -1.0)
        assert ground.radius == 100.0
        assert ball.material is ground.material

        scene = World()
        scene.load(world)
        assert scene.get_material_count() == 1
