"""World loading: from a Python-side Hittable tree to device storage.

Scenes are built on the Python side as a tree of ``SphereNode`` leaves and
``HittableList`` composites, each sphere carrying a reference to an
immutable material object. Many spheres may share one material instance.

``World.load`` flattens that tree depth-first in list order into the sphere
fields of ``glimmer.scene.intersection`` and registers every distinct
material instance exactly once. Each registered material gets a unified
material ID; the device-side tables map that ID to a material type and to
the index inside the type's own registry, which is what the integrator uses
to dispatch scattering.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.materials import Lambertian, Metal
    >>> from glimmer.scene.world import HittableList, SphereNode, World
    >>> ground = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> scene = HittableList()
    >>> scene.add(SphereNode((0.0, -1000.0, 0.0), 1000.0, ground))
    >>> scene.add(SphereNode((4.0, 1.0, 0.0), 1.0, Metal((0.7, 0.6, 0.5), 0.0)))
    >>> world = World()
    >>> world.load(scene)
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

import taichi as ti

from glimmer.materials import Material
from glimmer.materials.dielectric import (
    Dielectric,
    add_dielectric_material,
    clear_dielectric_materials,
)
from glimmer.materials.lambertian import (
    Lambertian,
    add_lambertian_material,
    clear_lambertian_materials,
)
from glimmer.materials.metal import Metal, add_metal_material, clear_metal_materials
from glimmer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)


class MaterialType(IntEnum):
    """Material kinds a unified material ID can resolve to.

    The integrator switches on these values to pick a scatter model.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Upper bound on unified material IDs (one full registry per type)
MAX_MATERIALS = 3072

# Unified material ID -> MaterialType value
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# Unified material ID -> slot in that type's own registry
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def _clear_material_tracking() -> None:
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Look up the MaterialType value of a unified material ID.

    IDs outside the registered range yield -1, which the integrator treats
    as an absorbing surface.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Look up the per-type registry slot of a unified material ID (-1 if unknown)."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


# =============================================================================
# Hittable Tree (Python side)
# =============================================================================


@dataclass(frozen=True, eq=False)
class SphereNode:
    """A sphere leaf of the scene tree.

    Attributes:
        center: The center point as (x, y, z).
        radius: The radius. Must be non-zero; a negative radius flips the
            outward normal.
        material: The material shared by reference.

    Raises:
        ValueError: If the radius is zero.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Center must have 3 components, got {len(self.center)}")
        if self.radius == 0.0:
            raise ValueError("Sphere radius must be non-zero")


@dataclass
class HittableList:
    """An ordered, nestable collection of hittables.

    Attributes:
        objects: The children in insertion order.
    """

    objects: list["Hittable"] = field(default_factory=list)

    def add(self, obj: "Hittable") -> None:
        """Append a sphere or a nested list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all children."""
        self.objects.clear()

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator["Hittable"]:
        return iter(self.objects)


Hittable = Union[SphereNode, HittableList]


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material.
        type_index: The index within the type-specific material array.
        material: The registered material object.
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    material: Material


@dataclass
class SphereInfo:
    """Information about a sphere uploaded to the device.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The unified material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


class World:
    """Device-side scene built from a Hittable tree.

    The World owns the process-wide sphere and material fields; loading a
    new tree replaces whatever was there before.

    Attributes:
        materials: MaterialInfo for every registered material, indexed by
            unified material ID.
        spheres: SphereInfo for every sphere, in traversal order.
    """

    def __init__(self) -> None:
        """Initialize an empty world."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._material_ids: dict[int, int] = {}
        self.clear()

    def clear(self) -> None:
        """Remove every sphere and material from the device and local tracking."""
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        _clear_material_tracking()
        self.materials.clear()
        self.spheres.clear()
        self._material_ids.clear()

    # =========================================================================
    # Material Management
    # =========================================================================

    def register_material(self, material: Material) -> int:
        """Register a material, returning its unified material ID.

        A material instance that is already registered returns its existing
        ID, so shared materials are uploaded once.

        Args:
            material: A Lambertian, Metal or Dielectric instance.

        Returns:
            The unified material ID.

        Raises:
            ValueError: If the material is of an unknown type.
            RuntimeError: If a material registry is full.
        """
        existing = self._material_ids.get(id(material))
        if existing is not None:
            return existing

        if isinstance(material, Lambertian):
            material_type = MaterialType.LAMBERTIAN
            type_index = add_lambertian_material(material)
        elif isinstance(material, Metal):
            material_type = MaterialType.METAL
            type_index = add_metal_material(material)
        elif isinstance(material, Dielectric):
            material_type = MaterialType.DIELECTRIC
            type_index = add_dielectric_material(material)
        else:
            raise ValueError(f"Unknown material type: {type(material).__name__}")

        material_id = num_materials[None]
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        material_types[material_id] = int(material_type)
        material_type_indices[material_id] = type_index
        num_materials[None] = material_id + 1

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material_type,
                type_index=type_index,
                material=material,
            )
        )
        self._material_ids[id(material)] = material_id
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of registered materials."""
        return int(num_materials[None])

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(self, sphere: SphereNode) -> int:
        """Upload a single sphere, registering its material if needed.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        material_id = self.register_material(sphere.material)
        sphere_index = add_sphere(sphere.center, sphere.radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=tuple(sphere.center),
                radius=sphere.radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def load(self, root: Hittable) -> None:
        """Replace the current world with the spheres of a Hittable tree.

        Children are visited depth-first in list order, so the device
        storage order matches the order a recursive list traversal would
        test them in.

        Args:
            root: A SphereNode or a (possibly nested) HittableList.

        Raises:
            ValueError: If the tree contains an unknown node type.
            RuntimeError: If the sphere or material capacity is exceeded.
        """
        self.clear()
        self._load_node(root)
        logger.debug(
            "Loaded world: %d spheres, %d materials",
            self.get_sphere_count(),
            self.get_material_count(),
        )

    def _load_node(self, node: Hittable) -> None:
        if isinstance(node, SphereNode):
            self.add_sphere(node)
        elif isinstance(node, HittableList):
            for child in node:
                self._load_node(child)
        else:
            raise ValueError(f"Unknown hittable type: {type(node).__name__}")

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the world."""
        return get_sphere_count()

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS


# =============================================================================
# Scene Serialization
# =============================================================================


def _material_to_dict(material: Material) -> dict[str, Any]:
    if isinstance(material, Lambertian):
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if isinstance(material, Metal):
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    if isinstance(material, Dielectric):
        return {"type": "dielectric", "refraction_index": material.refraction_index}
    raise ValueError(f"Unknown material type: {type(material).__name__}")


def _material_from_dict(mat_config: dict[str, Any]) -> Material:
    mat_type = mat_config.get("type", "").lower()
    if mat_type == "lambertian":
        albedo_list = mat_config.get("albedo", [0.5, 0.5, 0.5])
        return Lambertian(albedo=(albedo_list[0], albedo_list[1], albedo_list[2]))
    if mat_type == "metal":
        albedo_list = mat_config.get("albedo", [0.8, 0.8, 0.8])
        fuzz = mat_config.get("fuzz", 0.0)
        return Metal(albedo=(albedo_list[0], albedo_list[1], albedo_list[2]), fuzz=fuzz)
    if mat_type == "dielectric":
        return Dielectric(refraction_index=mat_config.get("refraction_index", 1.5))
    raise ValueError(f"Unknown material type: {mat_type}")


def _iter_spheres(node: Hittable) -> Iterator[SphereNode]:
    if isinstance(node, SphereNode):
        yield node
    elif isinstance(node, HittableList):
        for child in node:
            yield from _iter_spheres(child)
    else:
        raise ValueError(f"Unknown hittable type: {type(node).__name__}")


def world_to_dict(root: Hittable) -> dict[str, Any]:
    """Export a Hittable tree to a dictionary (for JSON serialization).

    Nested lists are flattened in traversal order. Each distinct material
    instance appears once in ``materials`` and spheres refer to it by index,
    so sharing survives a round trip.

    Args:
        root: A SphereNode or a (possibly nested) HittableList.

    Returns:
        A dictionary with 'materials' and 'spheres' keys.
    """
    materials: list[dict[str, Any]] = []
    spheres: list[dict[str, Any]] = []
    indices: dict[int, int] = {}

    for sphere in _iter_spheres(root):
        key = id(sphere.material)
        if key not in indices:
            indices[key] = len(materials)
            materials.append(_material_to_dict(sphere.material))
        spheres.append(
            {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "material": indices[key],
            }
        )

    return {"materials": materials, "spheres": spheres}


def world_from_dict(data: dict[str, Any]) -> HittableList:
    """Build a Hittable tree from a dictionary produced by world_to_dict.

    Args:
        data: Dictionary with 'materials' and 'spheres' keys.

    Returns:
        A flat HittableList whose spheres share material instances exactly
        as the material indices in ``data`` describe.

    Raises:
        ValueError: If a material type is unknown or a sphere refers to a
            material index that does not exist.
    """
    materials = [_material_from_dict(m) for m in data.get("materials", [])]

    world = HittableList()
    for sphere_config in data.get("spheres", []):
        center_list = sphere_config.get("center", [0.0, 0.0, 0.0])
        center: tuple[float, float, float] = (
            center_list[0],
            center_list[1],
            center_list[2],
        )
        radius = sphere_config.get("radius", 1.0)
        material_index = sphere_config.get("material", 0)
        if not 0 <= material_index < len(materials):
            raise ValueError(f"Invalid material index: {material_index}")
        world.add(SphereNode(center, radius, materials[material_index]))

    return world
