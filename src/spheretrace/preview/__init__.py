"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export and pixel sequence assembly (Pillow)

Example:
    >>> from src.spheretrace.preview import save_png, show_preview
    >>> image = renderer.get_image_uint8()
    >>> save_png(image, "output.png")
    >>> show_preview(image)
"""

from src.spheretrace.preview.display import show_preview
from src.spheretrace.preview.export import image_from_pixels, save_png

__all__ = [
    "show_preview",
    "save_png",
    "image_from_pixels",
]
