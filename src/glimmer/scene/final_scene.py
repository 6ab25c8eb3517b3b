"""Ready-made scenes.

``create_final_scene`` builds the random-spheres showcase: a huge gray
ground sphere, a 22x22 grid of small spheres with randomly chosen materials,
and three large feature spheres (glass, diffuse brown, polished metal),
together with the camera that frames them.

``create_two_sphere_scene`` is a minimal ground-plus-ball scene useful for
quick checks.

Example:
    >>> from glimmer.scene.final_scene import create_final_scene
    >>> world, camera_config = create_final_scene(seed=7)
    >>> camera_config.image_width
    400
"""

import numpy as np

from glimmer.camera.thin_lens import CameraConfig
from glimmer.materials.dielectric import Dielectric
from glimmer.materials.lambertian import Lambertian
from glimmer.materials.metal import Metal
from glimmer.scene.world import HittableList, SphereNode

# =============================================================================
# Final Scene Constants
# =============================================================================

GROUND_ALBEDO = (0.5, 0.5, 0.5)
GLASS_REFRACTION_INDEX = 1.5

# Small spheres sit on a grid of cells [GRID_MIN, GRID_MAX) on each axis
GRID_MIN = -11
GRID_MAX = 11
SMALL_RADIUS = 0.2

# Material selection thresholds for the small spheres
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95  # cumulative

# Small spheres closer than this to KEEP_OUT_CENTER are skipped
KEEP_OUT_CENTER = (4.0, 0.2, 0.0)
KEEP_OUT_DISTANCE = 0.9

FINAL_CAMERA = CameraConfig(
    aspect_ratio=16.0 / 9.0,
    image_width=400,
    samples_per_pixel=100,
    max_depth=50,
    vfov=20.0,
    lookfrom=(13.0, 2.0, 3.0),
    lookat=(0.0, 0.0, 0.0),
    vup=(0.0, 1.0, 0.0),
    defocus_angle=0.6,
    focus_dist=10.0,
)


def _as_color(values: np.ndarray) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


def create_final_scene(
    seed: int | None = None,
) -> tuple[HittableList, CameraConfig]:
    """Create the random-spheres scene and its camera configuration.

    Args:
        seed: Seed for numpy.random.default_rng. The same seed always
            produces the same scene.

    Returns:
        A tuple of (world, camera_config).
    """
    rng = np.random.default_rng(seed)
    world = HittableList()

    ground = Lambertian(albedo=GROUND_ALBEDO)
    world.add(SphereNode((0.0, -1000.0, 0.0), 1000.0, ground))

    keep_out = np.array(KEEP_OUT_CENTER)
    for a in range(GRID_MIN, GRID_MAX):
        for b in range(GRID_MIN, GRID_MAX):
            choose_mat = rng.random()
            center = np.array(
                [a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()]
            )

            if np.linalg.norm(center - keep_out) <= KEEP_OUT_DISTANCE:
                continue

            if choose_mat < DIFFUSE_PROBABILITY:
                albedo = rng.random(3) * rng.random(3)
                material = Lambertian(albedo=_as_color(albedo))
            elif choose_mat < METAL_PROBABILITY:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = float(rng.uniform(0.0, 0.5))
                material = Metal(albedo=_as_color(albedo), fuzz=fuzz)
            else:
                material = Dielectric(refraction_index=GLASS_REFRACTION_INDEX)

            world.add(SphereNode(_as_color(center), SMALL_RADIUS, material))

    world.add(
        SphereNode((0.0, 1.0, 0.0), 1.0, Dielectric(refraction_index=GLASS_REFRACTION_INDEX))
    )
    world.add(SphereNode((-4.0, 1.0, 0.0), 1.0, Lambertian(albedo=(0.4, 0.2, 0.1))))
    world.add(SphereNode((4.0, 1.0, 0.0), 1.0, Metal(albedo=(0.7, 0.6, 0.5), fuzz=0.0)))

    return world, FINAL_CAMERA


def create_two_sphere_scene() -> HittableList:
    """Create a ground sphere with one small ball resting in front of the camera.

    The ground has radius 100 centered at y = -100.5 and the ball has radius
    0.5 at (0, 0, -1). Both use a gray diffuse material.

    Returns:
        The scene as a HittableList.
    """
    gray = Lambertian(albedo=GROUND_ALBEDO)
    world = HittableList()
    world.add(SphereNode((0.0, 0.0, -1.0), 0.5, gray))
    world.add(SphereNode((0.0, -100.5, -1.0), 100.0, gray))
    return world
