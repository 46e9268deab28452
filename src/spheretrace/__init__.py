"""Taichi-based sphere path tracer.

This package renders scenes made of spheres with stochastic path tracing:
- Diffuse (Lambertian), metal and dielectric (glass) materials
- Thin-lens camera with depth of field
- Sky gradient background
- Parallel rendering in row bands with progress reporting and cancellation

Subpackages:
    core: Vector utilities, rays, random sampling, integrator and render loop
    geometry: Sphere intersection
    materials: Material models and dispatch
    scene: Scene construction, upload and ready-made scenes
    camera: Thin-lens camera with ray generation
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
