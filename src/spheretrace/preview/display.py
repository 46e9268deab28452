"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.spheretrace.preview.display import show_preview
    >>> from src.spheretrace.core.renderer import Renderer, RenderSettings
    >>>
    >>> renderer = Renderer(RenderSettings(width=200, height=100, samples_per_pixel=16))
    >>> renderer.render()
    >>> show_preview(renderer.get_image_uint8(), title="16 SPP")
"""

import numpy as np
import numpy.typing as npt


def show_preview(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: Array of shape (H, W, 3) with dtype uint8, row 0 at the top.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
    """
    import matplotlib.pyplot as plt

    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
