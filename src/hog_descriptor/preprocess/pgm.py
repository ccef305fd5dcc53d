"""
Binary PGM (P5) reader.
Decodes portable graymaps into RGB arrays so they flow through the same
intensity extraction as PNG/JPEG images.
"""
from pathlib import Path
from typing import List, Tuple, Union
import numpy as np

from ..errors import CorruptFile, InvalidInput


PGM_MAGIC = b'P5'
WHITESPACE = b' \t\n\r\x0b\x0c'


def _read_header(data: bytes) -> Tuple[List[bytes], int]:
    """
    Read the four header tokens (magic, width, height, maxval).

    Args:
        data: Raw file contents

    Returns:
        Tuple of (tokens, offset of the first raster byte)
    """
    tokens = []
    pos = 0
    size = len(data)

    while len(tokens) < 4:
        # Skip whitespace and comments between tokens
        while pos < size:
            if data[pos] in WHITESPACE:
                pos += 1
            elif data[pos:pos + 1] == b'#':
                end = data.find(b'\n', pos)
                pos = size if end == -1 else end + 1
            else:
                break

        if pos >= size:
            raise CorruptFile("Truncated PGM header")

        start = pos
        while pos < size and data[pos] not in WHITESPACE and data[pos:pos + 1] != b'#':
            pos += 1
        tokens.append(data[start:pos])

        # Magic number is checked before the rest of the header is parsed
        if len(tokens) == 1 and tokens[0] != PGM_MAGIC:
            raise CorruptFile(f"Unsupported PGM version: {tokens[0]!r}")

    # A single whitespace byte separates maxval from the raster
    if pos >= size or data[pos] not in WHITESPACE:
        raise CorruptFile("Missing raster separator after PGM header")

    return tokens, pos + 1


def decode_pgm(data: bytes) -> np.ndarray:
    """
    Decode P5 PGM bytes.

    Args:
        data: Raw file contents

    Returns:
        RGB image (uint8, H x W x 3) with equal channels
    """
    tokens, offset = _read_header(data)

    try:
        width, height, max_value = (int(token) for token in tokens[1:])
    except ValueError:
        raise CorruptFile(f"Non-numeric PGM header field in {tokens[1:]!r}")

    if width <= 0 or height <= 0:
        raise CorruptFile(f"Invalid PGM size: {width}x{height}")
    if not 0 < max_value < 65536:
        raise CorruptFile(f"Invalid PGM maxval: {max_value}")

    # 16-bit samples are stored big-endian
    dtype = np.dtype('>u2') if max_value > 255 else np.dtype(np.uint8)
    expected = width * height * dtype.itemsize
    raster = data[offset:offset + expected]

    if len(raster) < expected:
        raise CorruptFile(
            f"Truncated PGM pixel stream: expected {expected} bytes, got {len(raster)}"
        )

    pixels = np.frombuffer(raster, dtype=dtype).reshape(height, width)

    if max_value > 255:
        # Scale to the 8-bit range the rest of the pipeline expects
        pixels = np.round(pixels.astype(np.float64) * 255.0 / max_value)

    gray = pixels.astype(np.uint8)
    return np.stack([gray, gray, gray], axis=-1)


def load_pgm(image_path: Union[str, Path]) -> np.ndarray:
    """Load a P5 PGM file as an RGB array."""
    image_path = Path(image_path)
    if not image_path.exists():
        raise InvalidInput(f"Image file not found: {image_path}")

    return decode_pgm(image_path.read_bytes())
