"""Scene module for world storage and scene construction.

Components:
    intersection: Flattened sphere storage and closest-hit traversal
    world: Hittable tree (SphereNode, HittableList), World loader and
        material-type tables, scene (de)serialization
    final_scene: Ready-made scenes (random spheres showcase, two spheres)

Scene data is organized for device access:
    - Structure-of-Arrays layout for sphere data
    - One unified material ID per distinct material instance
    - Material ID to (type, type-local index) lookup for dispatch
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    hit_world,
)
from .world import (
    MAX_MATERIALS,
    Hittable,
    HittableList,
    MaterialInfo,
    MaterialType,
    SphereInfo,
    SphereNode,
    World,
    get_material_type,
    get_material_type_index,
    world_from_dict,
    world_to_dict,
)

# final_scene must come after world: it pulls in the camera package
from .final_scene import FINAL_CAMERA, create_final_scene, create_two_sphere_scene  # noqa: E402

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "hit_world",
    "MAX_SPHERES",
    # World module
    "World",
    "Hittable",
    "HittableList",
    "SphereNode",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "MAX_MATERIALS",
    "get_material_type",
    "get_material_type_index",
    "world_to_dict",
    "world_from_dict",
    # Final scene module
    "create_final_scene",
    "create_two_sphere_scene",
    "FINAL_CAMERA",
]
