"""
Utility functions for preprocessing module.
Config loading, image decoding and image source resolution.
"""
from pathlib import Path
from typing import Union
import numpy as np
import cv2
import yaml
from PIL import Image, UnidentifiedImageError

from ..errors import InvalidInput, UnsupportedFormat, CorruptFile
from .pgm import load_pgm


RASTER_EXTENSIONS = ['.png', '.jpg', '.jpeg']
IMAGE_EXTENSIONS = RASTER_EXTENSIONS + ['.pgm']

ImageSource = Union[np.ndarray, str, Path]


def load_config(config_path: Union[str, Path]) -> dict:
    """Load configuration from YAML file."""
    config_path = Path(config_path)
    if not config_path.exists():
        raise InvalidInput(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def ensure_dir(path: Path) -> None:
    """Ensure directory exists."""
    path.mkdir(parents=True, exist_ok=True)


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file into an RGB array.

    Args:
        image_path: Path to .png, .jpg/.jpeg or .pgm file

    Returns:
        Image as numpy array (uint8, H x W x 3, RGB order)
    """
    image_path = Path(image_path)
    extension = image_path.suffix.lower()

    if extension not in IMAGE_EXTENSIONS:
        raise UnsupportedFormat(f"Unsupported image format '{extension}': {image_path}")

    if not image_path.exists():
        raise InvalidInput(f"Image file not found: {image_path}")

    if extension == '.pgm':
        return load_pgm(image_path)

    img = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if img is not None:
        # BGR to RGB (cv2 reads BGR)
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    # Try with PIL as fallback
    try:
        with Image.open(image_path) as pil_img:
            return np.array(pil_img.convert('RGB'))
    except (UnidentifiedImageError, OSError) as e:
        raise CorruptFile(f"Failed to decode {image_path}: {e}")


def validate_image(image: np.ndarray) -> np.ndarray:
    """
    Check that an in-memory image has a shape the pipeline understands.

    Args:
        image: (H, W) grayscale or (H, W, 3) RGB array

    Returns:
        The same image
    """
    if not isinstance(image, np.ndarray):
        raise InvalidInput(f"Expected numpy array, got {type(image).__name__}")

    if image.ndim == 3 and image.shape[2] != 3:
        raise InvalidInput(f"Expected 3 color channels, got shape {image.shape}")
    if image.ndim not in (2, 3):
        raise InvalidInput(f"Expected 2D grayscale or 3D RGB image, got shape {image.shape}")

    return image


def resolve_image(source: ImageSource) -> np.ndarray:
    """
    Resolve an image source (array or file path) into an image array.

    Args:
        source: In-memory image array or path to an image file

    Returns:
        Image array, validated
    """
    if isinstance(source, np.ndarray):
        return validate_image(source)

    if isinstance(source, (str, Path)):
        return validate_image(load_image(source))

    raise InvalidInput(f"The image is not an array or a valid file: {source!r}")
