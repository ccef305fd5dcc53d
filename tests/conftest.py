import numpy as np
import pytest


def make_pgm(width, height, pixels, max_value=255, header_comment=None):
    """Build P5 PGM bytes from a flat list of samples."""
    header = b"P5\n"
    if header_comment:
        header += b"# " + header_comment + b"\n"
    header += f"{width} {height}\n{max_value}\n".encode()
    dtype = '>u2' if max_value > 255 else np.uint8
    return header + np.asarray(pixels, dtype=dtype).tobytes()


@pytest.fixture
def uniform_image():
    """6x6 grey image, every pixel the same."""
    return np.full((6, 6), 128, dtype=np.uint8)


@pytest.fixture
def vertical_edge_image():
    """12x12 image: left half black, right half white."""
    image = np.zeros((12, 12), dtype=np.uint8)
    image[:, 6:] = 255
    return image


@pytest.fixture
def horizontal_edge_image():
    """12x12 image: top half black, bottom half white."""
    image = np.zeros((12, 12), dtype=np.uint8)
    image[6:, :] = 255
    return image


@pytest.fixture
def random_rgb_image():
    rng = np.random.RandomState(0)
    return rng.randint(0, 256, size=(25, 31, 3)).astype(np.uint8)
