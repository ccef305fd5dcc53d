"""
HOG visualization module.
Renders gradient fields, cell histograms and normalized blocks as line glyphs.
"""
from pathlib import Path
from typing import List, Tuple, Union
import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection

from ..preprocess.utils import ensure_dir
from .gradient import GradientField
from .blocks import iter_blocks


Segment = Tuple[Tuple[float, float], Tuple[float, float]]


def _save_glyphs(segments: List[Segment], brightness: List[float],
                 width: float, height: float, output_path: Union[str, Path],
                 dpi: int = 100) -> None:
    """
    Draw grey line segments on a black canvas of width x height pixels.

    Segment coordinates are in pixels with y pointing down.
    """
    output_path = Path(output_path)
    ensure_dir(output_path.parent)

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi, facecolor='black')
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_facecolor('black')
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis('off')

    grey = np.clip(np.asarray(brightness, dtype=np.float64), 0, 1)
    colors = np.stack([grey, grey, grey, np.ones_like(grey)], axis=-1) if len(grey) else 'white'
    ax.add_collection(LineCollection(segments, colors=colors, linewidths=1))

    plt.savefig(output_path, dpi=dpi, facecolor='black')
    plt.close(fig)

    print(f"✓ Saved HOG visualization to {output_path}")


def _glyph(center_x: float, center_y: float, angle_degrees: float, radius: float) -> Segment:
    angle = np.deg2rad(angle_degrees)
    return ((center_x, center_y),
            (center_x + np.cos(angle) * radius, center_y - np.sin(angle) * radius))


def save_gradient_image(gradient: GradientField, output_path: Union[str, Path],
                        length: int = 5) -> None:
    """
    Render one line per pixel pointing along its gradient orientation.

    Args:
        gradient: Gradient field
        output_path: Image file to write (.png, .jpg)
        length: Pixels per source pixel (and line length)
    """
    height, width = gradient.shape
    segments = []
    brightness = []

    for y in range(height):
        for x in range(width):
            segments.append(_glyph(x * length, y * length, gradient.orientation[y, x], length))
            brightness.append((50 + gradient.magnitude[y, x] * 155) / 255)

    _save_glyphs(segments, brightness, width * length, height * length, output_path)


def save_orientation_cells_image(cells: np.ndarray, cell_width: int,
                                 output_path: Union[str, Path]) -> None:
    """
    Render each cell histogram as a star of lines, one per bin.

    Bins are L1-normalized per cell for display only.

    Args:
        cells: Cell histogram grid (cells_per_column, cells_per_row, bins)
        cell_width: Pixels per cell horizontally (sets glyph size)
        output_path: Image file to write
    """
    n_cells_y, n_cells_x, bins_number = cells.shape
    length = cell_width * 6
    bin_degrees = 180 / bins_number
    segments = []
    brightness = []

    for y in range(n_cells_y):
        for x in range(n_cells_x):
            bins = cells[y, x]
            total = np.abs(bins).sum()
            if total > 0:
                bins = bins / total

            center_x, center_y = x * length + length / 2, y * length + length / 2
            for bin_index, value in enumerate(bins):
                segments.append(_glyph(center_x, center_y, bin_index * bin_degrees, length / 2))
                brightness.append(value)

    _save_glyphs(segments, brightness, n_cells_x * length, n_cells_y * length, output_path)


def save_descriptor_blocks_image(cells: np.ndarray, block_height: int, block_width: int,
                                 block_stride: int, output_path: Union[str, Path],
                                 length: int = 6) -> None:
    """
    Render every normalized block as a star of lines at its scan position.

    Args:
        cells: Cell histogram grid
        block_height: Cells per block vertically
        block_width: Cells per block horizontally
        block_stride: Step between blocks in cells
        output_path: Image file to write
        length: Pixels per block glyph
    """
    bins_number = cells.shape[2]
    bin_degrees = 180 / bins_number
    n_blocks_y = -(-cells.shape[0] // block_stride)
    n_blocks_x = -(-cells.shape[1] // block_stride)
    segments = []
    brightness = []

    for (cell_y, cell_x), block in iter_blocks(cells, block_height, block_width, block_stride):
        center_x = (cell_x // block_stride) * length + length / 2
        center_y = (cell_y // block_stride) * length + length / 2
        for index, value in enumerate(block):
            segments.append(_glyph(center_x, center_y, (index % bins_number) * bin_degrees, length / 2))
            brightness.append(value)

    _save_glyphs(segments, brightness, n_blocks_x * length, n_blocks_y * length, output_path)
