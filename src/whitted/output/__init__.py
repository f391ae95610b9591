"""Output module for writing rendered images.

Components:
    export: Quantization and Pillow-based image encoding
"""

from .export import image_to_uint8, resolve_output_format, save_image

__all__ = [
    "image_to_uint8",
    "resolve_output_format",
    "save_image",
]
