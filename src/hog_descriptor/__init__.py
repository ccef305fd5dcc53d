"""
HOG (Histogram of Oriented Gradients) descriptor computation.
"""
from .errors import (
    HOGError,
    InvalidInput,
    UnsupportedFormat,
    CorruptFile,
    InvalidDimensions,
    InvalidConfiguration,
)
from .feature_extraction.gradient import GradientField
from .feature_extraction.hog_extractor import (
    HOGExtractor,
    compute_descriptor,
    compute_cell_descriptor,
    compute_gradient_field,
    compute_cell_histograms,
)
from .preprocess.utils import load_image, load_config
from .preprocess.resize import resize_image

__version__ = "0.1.0"
