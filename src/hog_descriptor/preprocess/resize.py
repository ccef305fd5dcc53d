"""
Image resizing module.
Resamples an image to exact requested dimensions before descriptor computation.
"""
import numpy as np
import cv2

from ..errors import InvalidDimensions, InvalidInput
from .utils import validate_image


INTERPOLATIONS = {
    'bilinear': cv2.INTER_LINEAR,
    'nearest': cv2.INTER_NEAREST,
    'cubic': cv2.INTER_CUBIC,
    'area': cv2.INTER_AREA,
}


def resize_image(image: np.ndarray, width: int, height: int,
                 method: str = "bilinear") -> np.ndarray:
    """
    Resize image to target size.

    Args:
        image: Input image as numpy array
        width: Target width in pixels
        height: Target height in pixels
        method: Resize method (bilinear, nearest, cubic, area)

    Returns:
        Resized image with shape (height, width[, 3])
    """
    image = validate_image(image)

    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"Cannot resize to {width}x{height}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidDimensions(f"Cannot resize an empty image: shape {image.shape}")
    if method not in INTERPOLATIONS:
        raise InvalidInput(f"Unknown resize method: {method}")

    return cv2.resize(image, (width, height), interpolation=INTERPOLATIONS[method])
