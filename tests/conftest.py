"""Pytest configuration for glimmer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields the renderer declares.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene and material data before and after each test."""
    # Import here so the field-declaring modules load after ti.init()
    from glimmer.materials.dielectric import clear_dielectric_materials
    from glimmer.materials.lambertian import clear_lambertian_materials
    from glimmer.materials.metal import clear_metal_materials
    from glimmer.scene.intersection import clear_scene
    from glimmer.scene.world import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()

    _clear_all()

    yield

    _clear_all()
