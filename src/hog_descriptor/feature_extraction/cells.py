"""
Orientation binning.
Accumulates a magnitude-weighted orientation histogram for every cell.
"""
from typing import Tuple
import numpy as np

from ..errors import InvalidDimensions
from .gradient import GradientField


def cell_grid_shape(height: int, width: int,
                    cell_height: int, cell_width: int) -> Tuple[int, int]:
    """Number of cells (rows, columns); partial cells at the bottom/right count."""
    return -(-height // cell_height), -(-width // cell_width)


def orientation_bins(orientation: np.ndarray, bins_number: int) -> np.ndarray:
    """
    Histogram bin of every orientation.

    Bins are evenly spread over 0-180 degrees (unsigned gradient). The bin
    index is ceil(orientation / bin_width), with bins_number wrapping to 0;
    an orientation of exactly 0 therefore lands in bin 0 while anything
    just above it lands in bin 1.
    """
    bin_width = 180 / bins_number
    bins = np.ceil(orientation / bin_width).astype(np.int64)
    bins[bins >= bins_number] = 0
    return bins


def compute_cells(gradient: GradientField,
                  cell_height: int,
                  cell_width: int,
                  bins_number: int) -> np.ndarray:
    """
    Build the cell histogram grid.

    Every pixel votes its full gradient magnitude into a single bin of its
    cell (hard assignment). Histograms are the raw magnitude sums.

    Args:
        gradient: Gradient field of the image
        cell_height: Pixels per cell vertically
        cell_width: Pixels per cell horizontally
        bins_number: Number of orientation bins

    Returns:
        Read-only array (cells_per_column, cells_per_row, bins_number)
    """
    height, width = gradient.shape
    if height == 0 or width == 0:
        raise InvalidDimensions(f"Gradient field has no pixels: shape {gradient.shape}")

    n_cells_y, n_cells_x = cell_grid_shape(height, width, cell_height, cell_width)

    bins = orientation_bins(gradient.orientation, bins_number)
    cell_rows = (np.arange(height) // cell_height)[:, np.newaxis]
    cell_cols = (np.arange(width) // cell_width)[np.newaxis, :]

    # Flat index into (cell_row, cell_col, bin)
    flat_index = (cell_rows * n_cells_x + cell_cols) * bins_number + bins

    histograms = np.bincount(
        flat_index.ravel(),
        weights=gradient.magnitude.ravel(),
        minlength=n_cells_y * n_cells_x * bins_number
    ).reshape(n_cells_y, n_cells_x, bins_number)

    histograms.flags.writeable = False
    return histograms
