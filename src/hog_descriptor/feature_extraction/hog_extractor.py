"""
HOG (Histogram of Oriented Gradients) feature extractor.
Extracts edge orientation statistics from grayscale intensity.
"""
from typing import Dict, Optional, Tuple
import numpy as np

from ..errors import InvalidConfiguration, InvalidInput
from ..preprocess.intensity import extract_intensity
from ..preprocess.utils import ImageSource, resolve_image
from .gradient import GradientField, compute_gradient
from .cells import cell_grid_shape, compute_cells
from .blocks import assemble_cell_descriptor, assemble_descriptor, descriptor_length


DEFAULTS = {
    'cell_height': 6,
    'cell_width': 6,
    'bins_number': 9,
    'block_height': 2,
    'block_width': 2,
    'block_stride': 1,
}

# Pipeline keys allowed in the hog config section besides the numeric ones
PIPELINE_KEYS = {'resize', 'mode'}


class HOGExtractor:
    """
    HOG feature extractor.

    Unsigned gradients (0-180 degrees), hard-assigned orientation votes and
    L1 block normalization. Defaults follow Dalal and Triggs: 6x6 pixel
    cells, 9 bins, 2x2 cell blocks moving one cell at a time.
    """

    def __init__(self,
                 cell_height: int = 6,
                 cell_width: int = 6,
                 bins_number: int = 9,
                 block_height: int = 2,
                 block_width: int = 2,
                 block_stride: int = 1):
        """
        Initialize HOG extractor.

        Args:
            cell_height: Pixels per cell vertically
            cell_width: Pixels per cell horizontally
            bins_number: Number of orientation bins over 0-180 degrees
            block_height: Cells per block vertically
            block_width: Cells per block horizontally
            block_stride: Step between blocks in cells (smaller than block = overlap)
        """
        params = {
            'cell_height': cell_height,
            'cell_width': cell_width,
            'bins_number': bins_number,
            'block_height': block_height,
            'block_width': block_width,
            'block_stride': block_stride,
        }
        for name, value in params.items():
            # bool is an int subclass but never a valid size
            if not isinstance(value, (int, np.integer)) or isinstance(value, bool) or value <= 0:
                raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")

        self.cell_height = int(cell_height)
        self.cell_width = int(cell_width)
        self.bins_number = int(bins_number)
        self.block_height = int(block_height)
        self.block_width = int(block_width)
        self.block_stride = int(block_stride)

    @classmethod
    def from_config(cls, config: Optional[Dict] = None) -> 'HOGExtractor':
        """
        Create an extractor from a config dictionary.

        Args:
            config: Whole project config (uses config['features']['hog'])
                or the hog section itself; None means all defaults

        Returns:
            HOGExtractor
        """
        if config is None:
            return cls()
        if not isinstance(config, dict):
            raise InvalidConfiguration(f"Config must be a mapping, got {type(config).__name__}")

        if 'features' in config:
            hog_config = (config['features'] or {}).get('hog') or {}
        else:
            hog_config = config

        unknown = set(hog_config) - set(DEFAULTS) - PIPELINE_KEYS
        if unknown:
            raise InvalidConfiguration(f"Unknown HOG config keys: {sorted(unknown)}")

        params = {name: hog_config.get(name, default) for name, default in DEFAULTS.items()}
        return cls(**params)

    def get_config(self) -> Dict[str, int]:
        """Current parameters as a config dictionary."""
        return {name: getattr(self, name) for name in DEFAULTS}

    def cell_grid_shape(self, height: int, width: int) -> Tuple[int, int]:
        """(cells_per_column, cells_per_row) for an image size."""
        return cell_grid_shape(height, width, self.cell_height, self.cell_width)

    def get_feature_dim(self, height: int, width: int) -> int:
        """Block descriptor length for an image of the given size."""
        n_cells_y, n_cells_x = self.cell_grid_shape(height, width)
        return descriptor_length(n_cells_y, n_cells_x, self.bins_number,
                                 self.block_height, self.block_width, self.block_stride)

    def get_cell_feature_dim(self, height: int, width: int) -> int:
        """Cell-only descriptor length for an image of the given size."""
        n_cells_y, n_cells_x = self.cell_grid_shape(height, width)
        return n_cells_y * n_cells_x * self.bins_number

    def gradient(self, image: ImageSource) -> GradientField:
        """Gradient field of an image (array or file path)."""
        return compute_gradient(extract_intensity(resolve_image(image)))

    def cells(self, gradient: GradientField) -> np.ndarray:
        """Cell histogram grid of a gradient field."""
        if not isinstance(gradient, GradientField):
            raise InvalidInput(f"Expected GradientField, got {type(gradient).__name__}")
        return compute_cells(gradient, self.cell_height, self.cell_width, self.bins_number)

    def extract(self, image: ImageSource) -> np.ndarray:
        """
        Extract the block HOG descriptor.

        Args:
            image: RGB/grayscale uint8 array or path to an image file

        Returns:
            HOG feature vector (float64)
        """
        cells = self.cells(self.gradient(image))
        return assemble_descriptor(cells, self.block_height, self.block_width, self.block_stride)

    def extract_cells(self, image: ImageSource) -> np.ndarray:
        """
        Extract the cell-only descriptor: every cell histogram, normalized
        as one whole-image vector.
        """
        return assemble_cell_descriptor(self.cells(self.gradient(image)))


def compute_descriptor(image: ImageSource, config: Optional[Dict] = None) -> np.ndarray:
    """Block HOG descriptor of an image."""
    return HOGExtractor.from_config(config).extract(image)


def compute_cell_descriptor(image: ImageSource, config: Optional[Dict] = None) -> np.ndarray:
    """Cell-only HOG descriptor of an image."""
    return HOGExtractor.from_config(config).extract_cells(image)


def compute_gradient_field(image: ImageSource, config: Optional[Dict] = None) -> GradientField:
    """Gradient field of an image, for rendering and debugging."""
    return HOGExtractor.from_config(config).gradient(image)


def compute_cell_histograms(gradient: GradientField, config: Optional[Dict] = None) -> np.ndarray:
    """Cell histogram grid of a gradient field, for rendering."""
    return HOGExtractor.from_config(config).cells(gradient)
