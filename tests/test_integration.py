"""Integration tests for end-to-end rendering pipeline.

This module tests the complete rendering pipeline from scene creation through
final image output. It verifies that all components work together correctly
and that the output meets basic quality criteria.

Tests are designed to be fast (low resolution, few samples) while still
exercising the full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image as PILImage

if TYPE_CHECKING:
    import numpy.typing as npt


def _render_three_spheres(width: int = 40, height: int = 20, samples: int = 8) -> npt.NDArray[np.uint8]:
    from src.spheretrace.camera import setup_camera
    from src.spheretrace.core.renderer import Renderer, RenderSettings
    from src.spheretrace.scene.manager import SceneManager
    from src.spheretrace.scene.random_scene import (
        create_three_sphere_camera,
        create_three_sphere_scene,
    )

    SceneManager().load(create_three_sphere_scene())
    setup_camera(create_three_sphere_camera(width, height))
    renderer = Renderer(RenderSettings(width=width, height=height, samples_per_pixel=samples))
    renderer.render()
    return renderer.get_image_uint8()


class TestThreeSphereIntegration:
    """Integration tests for the three sphere scene."""

    def test_renders_successfully(self) -> None:
        image = _render_three_spheres()
        assert image.shape == (20, 40, 3)
        assert image.dtype == np.uint8

    def test_top_row_is_sky(self) -> None:
        """Nothing in the scene reaches the top of the view."""
        image = _render_three_spheres().astype(np.int32)
        top = image[0]
        assert np.all(top[:, 2] >= top[:, 0])
        assert np.all(top[:, 2] > 240)

    def test_bottom_row_is_yellow_ground(self) -> None:
        """The ground albedo has no blue, so directly hit ground pixels have none."""
        image = _render_three_spheres()
        bottom = image[-1]
        assert np.all(bottom[:, 2] == 0)
        assert bottom[:, 0].mean() > 50
        assert bottom[:, 1].mean() > 50

    def test_center_is_red_sphere(self) -> None:
        image = _render_three_spheres().astype(np.float64)
        patch = image[8:12, 18:22]
        assert patch[..., 0].mean() > patch[..., 2].mean()
        assert patch[..., 0].mean() > patch[..., 1].mean()


class TestRandomSceneIntegration:
    """Integration tests for the random spheres scene."""

    def test_renders_successfully(self) -> None:
        from src.spheretrace.camera import setup_camera
        from src.spheretrace.core.renderer import Renderer, RenderSettings
        from src.spheretrace.scene.manager import SceneManager
        from src.spheretrace.scene.random_scene import create_cover_camera, create_random_scene

        SceneManager().load(create_random_scene(np.random.default_rng(42)))
        setup_camera(create_cover_camera(48, 32))
        renderer = Renderer(RenderSettings(width=48, height=32, samples_per_pixel=2, band_height=8))

        bands = []
        renderer.render(callback=lambda done, total: bands.append(done))

        image = renderer.get_image_uint8()
        assert bands == [8, 16, 24, 32]
        assert renderer.sample_count == 2
        assert image.shape == (32, 48, 3)
        assert image.max() > 0

    def test_example_script(self, tmp_path: Path) -> None:
        from examples.render_random_scene import render_scene

        path, image = render_scene(
            width=24,
            height=16,
            num_samples=2,
            output_path=str(tmp_path / "out" / "image.png"),
            band_height=4,
            scene_name="random",
            seed=3,
            quiet=True,
        )

        assert path.exists()
        loaded = np.asarray(PILImage.open(path).convert("RGB"))
        assert np.array_equal(loaded, image)
