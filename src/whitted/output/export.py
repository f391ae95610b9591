"""Image export for rendered images.

The renderer produces a linear float image in [0, 1]. Export quantizes it to
8 bits per channel (optionally gamma-encoding first) and hands it to Pillow,
which picks the encoder registered for the file extension.

Supported formats:
    - Every format Pillow can write RGB images in (PNG, JPEG, BMP, PPM, TIFF, ...)

Example:
    >>> from src.whitted.output.export import save_image
    >>> image = renderer.get_image_numpy()
    >>> save_image(image, "output.png")
"""

from __future__ import annotations

import io
import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.errors import UnsupportedOutputFormatError

logger = logging.getLogger(__name__)


def resolve_output_format(filepath: str | os.PathLike[str]) -> str:
    """Pillow format name for an output path, chosen by its extension.

    Args:
        filepath: Output file path.

    Returns:
        The Pillow format name (e.g. "PNG").

    Raises:
        UnsupportedOutputFormatError: If no writable format is registered for
            the extension.
    """
    ext = os.path.splitext(os.fspath(filepath))[1].lower()
    if not ext:
        raise UnsupportedOutputFormatError(f"output path {filepath!s} has no file extension")

    fmt = PILImage.registered_extensions().get(ext)
    if fmt is None or fmt not in PILImage.SAVE:
        raise UnsupportedOutputFormatError(f"no image encoder for extension {ext!r}")

    # Stub plugins (BUFR, GRIB, HDF5, WMF) register a save handler that only
    # fails at write time, and some encoders cannot take RGB input
    try:
        PILImage.new("RGB", (1, 1)).save(io.BytesIO(), format=fmt)
    except (OSError, ValueError) as e:
        raise UnsupportedOutputFormatError(f"cannot write RGB images as {ext!r}: {e}") from e
    return fmt


def image_to_uint8(image: npt.NDArray[np.float32], gamma: float = 1.0) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8.

    Values are clamped to [0, 1], gamma-encoded when gamma != 1 and mapped
    with round(c * 255).

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value. Default 1.0 (linear).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If gamma is not positive.
    """
    if not gamma > 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")

    processed = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    if gamma != 1.0:
        processed = np.power(processed, 1.0 / gamma)

    return np.rint(processed * 255.0).astype(np.uint8)


def save_image(
    image: npt.NDArray[np.float32],
    filepath: str | os.PathLike[str],
    gamma: float = 1.0,
) -> None:
    """Save a float image to a file.

    Args:
        image: Image array of shape (H, W, 3), top row first.
        filepath: Output file path; the extension selects the encoder.
        gamma: Gamma correction value. Default 1.0 (linear).

    Raises:
        UnsupportedOutputFormatError: If the extension is not supported.
        OSError: If the file cannot be written.
    """
    fmt = resolve_output_format(filepath)
    image_uint8 = image_to_uint8(image, gamma=gamma)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath, format=fmt)

    logger.info(
        "Wrote %dx%d %s image to %s", image_uint8.shape[1], image_uint8.shape[0], fmt, filepath
    )
