"""
Intensity grid extraction.
Converts a decoded image into per-pixel intensity in the 0-1 range.
"""
import numpy as np

from ..errors import InvalidDimensions
from .utils import validate_image


def extract_intensity(image: np.ndarray) -> np.ndarray:
    """
    Build the intensity grid of an image.

    Each pixel takes its red value if red is strictly the largest channel,
    otherwise green if green beats blue, otherwise blue; divided by 255.

    Args:
        image: (H, W, 3) RGB or (H, W) grayscale array, 0-255 range

    Returns:
        Read-only intensity grid (float64, H x W)
    """
    image = validate_image(image)

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidDimensions(f"Image has no pixels: shape {image.shape}")

    if image.ndim == 2:
        intensity = image.astype(np.float64) / 255
    else:
        rgb = image.astype(np.float64)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        intensity = np.where((r > g) & (r > b), r, np.where(g > b, g, b)) / 255

    intensity.flags.writeable = False
    return intensity
