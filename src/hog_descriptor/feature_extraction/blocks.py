"""
Block normalization and descriptor assembly.
"""
from typing import Iterator, List, Tuple
import numpy as np

from ..errors import InvalidDimensions


EPS = 1e-8


def l1_normalize(vector: np.ndarray, eps: float = EPS) -> np.ndarray:
    """L1-normalize a vector; an all-zero vector stays all zero."""
    return vector / (np.abs(vector).sum() + eps)


def block_origins(n_cells_y: int, n_cells_x: int, block_stride: int) -> List[Tuple[int, int]]:
    """Block origins (cell_row, cell_col) in raster scan order."""
    return [(y, x)
            for y in range(0, n_cells_y, block_stride)
            for x in range(0, n_cells_x, block_stride)]


def extract_block(cells: np.ndarray, cell_y: int, cell_x: int,
                  block_height: int, block_width: int) -> np.ndarray:
    """
    Flatten the cells of one block into a normalized vector.

    Cells falling outside the grid are left out, so blocks at the bottom
    and right edges are smaller. The whole flattened block is normalized
    as one vector.
    """
    block = cells[cell_y:cell_y + block_height, cell_x:cell_x + block_width, :]
    return l1_normalize(block.ravel())


def iter_blocks(cells: np.ndarray,
                block_height: int,
                block_width: int,
                block_stride: int) -> Iterator[Tuple[Tuple[int, int], np.ndarray]]:
    """
    Yield ((cell_row, cell_col), normalized block vector) in scan order.
    """
    n_cells_y, n_cells_x = cells.shape[:2]
    for cell_y, cell_x in block_origins(n_cells_y, n_cells_x, block_stride):
        yield (cell_y, cell_x), extract_block(cells, cell_y, cell_x, block_height, block_width)


def assemble_descriptor(cells: np.ndarray,
                        block_height: int,
                        block_width: int,
                        block_stride: int) -> np.ndarray:
    """
    Concatenate all normalized blocks into the final descriptor.

    Neighbouring blocks overlap when the stride is smaller than the block,
    so a cell shows up several times, each time with its block's
    normalization.

    Args:
        cells: Cell histogram grid (cells_per_column, cells_per_row, bins)
        block_height: Cells per block vertically
        block_width: Cells per block horizontally
        block_stride: Step between block origins, in cells

    Returns:
        Read-only descriptor vector (float64)
    """
    if cells.ndim != 3 or cells.shape[0] == 0 or cells.shape[1] == 0:
        raise InvalidDimensions(f"Cell grid is empty: shape {cells.shape}")

    blocks = [block for _, block in iter_blocks(cells, block_height, block_width, block_stride)]
    descriptor = np.concatenate(blocks)
    descriptor.flags.writeable = False
    return descriptor


def assemble_cell_descriptor(cells: np.ndarray) -> np.ndarray:
    """
    Concatenate every cell histogram (row-major) and normalize the whole
    vector at once, without forming blocks.
    """
    if cells.ndim != 3 or cells.shape[0] == 0 or cells.shape[1] == 0:
        raise InvalidDimensions(f"Cell grid is empty: shape {cells.shape}")

    descriptor = l1_normalize(cells.ravel())
    descriptor.flags.writeable = False
    return descriptor


def descriptor_length(n_cells_y: int, n_cells_x: int, bins_number: int,
                      block_height: int, block_width: int, block_stride: int) -> int:
    """Descriptor length, counting the truncated blocks at the grid edges."""
    total = 0
    for cell_y, cell_x in block_origins(n_cells_y, n_cells_x, block_stride):
        rows = min(block_height, n_cells_y - cell_y)
        cols = min(block_width, n_cells_x - cell_x)
        total += rows * cols * bins_number
    return total
