"""Ready-made scenes.

create_random_scene() builds the classic "final render" scene: a huge grey
ground sphere, a grid of small spheres with randomly chosen materials, and
three large spheres (glass, green diffuse, polished metal) in the middle.
create_three_sphere_scene() is a small fixed scene that renders quickly.

Both return host-side worlds; load them with SceneManager.load().

Example:
    >>> import numpy as np
    >>> from src.spheretrace.scene.random_scene import create_cover_camera, create_random_scene
    >>> world = create_random_scene(np.random.default_rng(7))
    >>> camera = create_cover_camera(1200, 800)
"""

import numpy as np

from src.spheretrace.camera.thin_lens import ThinLensCamera
from src.spheretrace.materials.dielectric import Dielectric
from src.spheretrace.materials.lambertian import Lambertian
from src.spheretrace.materials.metal import Metal
from src.spheretrace.scene.world import HittableList, Sphere

# =============================================================================
# Random Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.5, 0.5, 0.5)

# Small spheres are placed on a jittered grid over [-11, 11) x [-11, 11)
GRID_EXTENT = 11
SMALL_RADIUS = 0.2
JITTER = 0.6

# A small sphere is dropped when it would sit this close to a big one
CLEARANCE = 1.2

BIG_RADIUS = 1.0
GLASS_CENTER = (0.0, 1.0, 0.0)
DIFFUSE_CENTER = (-4.0, 1.0, 0.0)
METAL_CENTER = (4.0, 1.0, 0.0)
BIG_DIFFUSE_ALBEDO = (0.1, 0.8, 0.1)
BIG_METAL_ALBEDO = (0.7, 0.6, 0.5)

GLASS_REF_IDX = 1.5

# Material choice thresholds
DIFFUSE_PROBABILITY = 0.8
METAL_PROBABILITY = 0.95


def _too_close(center: np.ndarray) -> bool:
    for big in (METAL_CENTER, DIFFUSE_CENTER, GLASS_CENTER):
        if np.linalg.norm(center - np.array(big)) <= CLEARANCE:
            return True
    return False


def create_random_scene(rng: np.random.Generator | None = None) -> HittableList:
    """Create the random spheres scene.

    Args:
        rng: Source of randomness. Defaults to a freshly seeded
            numpy.random.default_rng(); pass a seeded generator for a
            reproducible layout.

    Returns:
        The world: ground sphere first, then the small spheres in grid
        order, then the glass, diffuse and metal big spheres.
    """
    if rng is None:
        rng = np.random.default_rng()

    objects = [Sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(GROUND_ALBEDO))]

    for a in range(-GRID_EXTENT, GRID_EXTENT):
        for b in range(-GRID_EXTENT, GRID_EXTENT):
            choose_mat = rng.random()
            center = np.array(
                [a + JITTER * rng.random(), SMALL_RADIUS, b + JITTER * rng.random()]
            )
            if _too_close(center):
                continue

            if choose_mat < DIFFUSE_PROBABILITY:
                # diffuse
                material = Lambertian(tuple(rng.random(3)))
            elif choose_mat < METAL_PROBABILITY:
                # metal
                albedo = tuple(0.5 * (1.0 + rng.random(3)))
                material = Metal(albedo, 0.5 * rng.random())
            else:
                # glass
                material = Dielectric(GLASS_REF_IDX)

            objects.append(Sphere(tuple(center), SMALL_RADIUS, material))

    objects.append(Sphere(GLASS_CENTER, BIG_RADIUS, Dielectric(GLASS_REF_IDX)))
    objects.append(Sphere(DIFFUSE_CENTER, BIG_RADIUS, Lambertian(BIG_DIFFUSE_ALBEDO)))
    objects.append(Sphere(METAL_CENTER, BIG_RADIUS, Metal(BIG_METAL_ALBEDO, 0.0)))

    return HittableList(objects)


def create_cover_camera(width: int, height: int, aperture: float = 0.1) -> ThinLensCamera:
    """Create the camera the random scene is composed for.

    Looks from (13, 2, 3) at the origin with a 20 degree field of view,
    focused at distance 10.
    """
    return ThinLensCamera.for_image(
        width,
        height,
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aperture=aperture,
        focus_dist=10.0,
    )


def create_three_sphere_scene() -> HittableList:
    """Create a small scene: one sphere of each material on a large ground.

    Returns:
        The world with a yellow ground, a red diffuse sphere in the middle, a
        gold metal sphere on the right and a glass sphere on the left.
    """
    return HittableList(
        [
            Sphere((0.0, 0.0, -1.0), 0.5, Lambertian((0.8, 0.3, 0.3))),
            Sphere((0.0, -100.5, -1.0), 100.0, Lambertian((0.8, 0.8, 0.0))),
            Sphere((1.0, 0.0, -1.0), 0.5, Metal((0.8, 0.6, 0.2), 0.03)),
            Sphere((-1.0, 0.0, -1.0), 0.5, Dielectric(GLASS_REF_IDX)),
        ]
    )


def create_three_sphere_camera(width: int, height: int, aperture: float = 0.0) -> ThinLensCamera:
    """Create a camera framing the three sphere scene."""
    return ThinLensCamera.for_image(
        width,
        height,
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aperture=aperture,
        focus_dist=1.0,
    )
