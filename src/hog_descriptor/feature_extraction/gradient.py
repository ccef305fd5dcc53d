"""
Gradient field computation.
Central differences with the [-1, 0, 1] kernel in both directions.
"""
from typing import NamedTuple, Tuple
import numpy as np

from ..errors import InvalidDimensions


class GradientField(NamedTuple):
    """
    Per-pixel gradient of an intensity grid.

    All four arrays are read-only and share the shape of the source grid.
    Orientation is unsigned, in degrees, within [0, 180).
    """
    horizontal: np.ndarray
    vertical: np.ndarray
    magnitude: np.ndarray
    orientation: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return self.magnitude.shape


def _freeze(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def unsigned_orientation(horizontal: np.ndarray, vertical: np.ndarray) -> np.ndarray:
    """
    Gradient direction folded into [0, 180) degrees.

    atan2 returns -180..180; negative angles get 180 added. An angle of
    exactly 180 (pure negative horizontal gradient) lands on 0, the same
    direction once polarity is discarded.
    """
    orientation = np.degrees(np.arctan2(vertical, horizontal))
    orientation = np.where(orientation < 0, orientation + 180, orientation)
    return np.where(orientation >= 180, orientation - 180, orientation)


def compute_gradient(intensity: np.ndarray) -> GradientField:
    """
    Compute the gradient field of an intensity grid.

    At the image border the missing neighbour is replaced by the pixel
    itself, so e.g. horizontal[y, 0] = intensity[y, 1] - intensity[y, 0].

    Args:
        intensity: (H, W) intensity grid, 0-1 range

    Returns:
        GradientField with horizontal, vertical, magnitude and orientation
    """
    if intensity.ndim != 2 or intensity.size == 0:
        raise InvalidDimensions(f"Expected non-empty 2D intensity grid, got shape {intensity.shape}")

    # Edge padding repeats the border pixel, i.e. the pixel stands in for its missing neighbour
    padded = np.pad(np.asarray(intensity, dtype=np.float64), 1, mode='edge')

    # kernel [-1, 0, 1]
    horizontal = padded[1:-1, 2:] - padded[1:-1, :-2]
    # kernel [-1, 0, 1]T
    vertical = padded[2:, 1:-1] - padded[:-2, 1:-1]

    magnitude = np.sqrt(horizontal ** 2 + vertical ** 2)
    orientation = unsigned_orientation(horizontal, vertical)

    return GradientField(
        horizontal=_freeze(horizontal),
        vertical=_freeze(vertical),
        magnitude=_freeze(magnitude),
        orientation=_freeze(orientation),
    )
