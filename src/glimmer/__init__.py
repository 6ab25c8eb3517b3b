"""Glimmer: a Taichi-based Monte Carlo ray tracer for scenes of spheres.

This package renders scenes of spheres with diffuse, metallic and glass
materials using recursive light transport, evaluated in Taichi kernels:
- Antialiased camera rays with defocus blur (depth of field)
- Closest-hit ray/sphere intersection over nestable object lists
- Lambertian, fuzzy metal and dielectric scattering
- Plain-text PPM (P3) output, with optional PNG export

Subpackages:
    core: Vectors, intervals, rays, color quantization and the integrator
    geometry: Sphere primitive and hit records
    materials: Scattering models and their device-side registries
    scene: Scene graph, world loading and bundled scenes
    camera: Camera configuration, ray generation and the render driver
    output: Image writers
"""

__version__ = "0.1.0"
