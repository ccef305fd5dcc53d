"""
Utility functions for feature extraction.
Generator pattern for memory-efficient image loading.
"""
import json
from pathlib import Path
from typing import Generator, List, Optional, Sequence, Set, Tuple, Union
import numpy as np

from ..errors import HOGError
from ..preprocess.utils import IMAGE_EXTENSIONS, ensure_dir, load_image


def collect_image_paths(inputs: Sequence[Union[str, Path]]) -> List[Path]:
    """
    Expand files and directories into a list of image paths.

    Directories are searched recursively for supported extensions and
    their contents sorted; explicit files are kept as given, even with an
    unsupported extension, so the error surfaces when they are loaded.

    Args:
        inputs: Image files and/or directories

    Returns:
        List of image paths
    """
    image_paths = []
    for item in inputs:
        item = Path(item)
        if item.is_dir():
            found = [p for p in item.rglob("*")
                     if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS]
            image_paths.extend(sorted(found))
        else:
            image_paths.append(item)
    return image_paths


def unique_stem(image_path: Path, taken: Set[str]) -> str:
    """
    Output name for an image that no earlier image in the run has used.

    Images sharing a stem (same name in another directory, or another
    extension) get a counter: x, x_1, x_2, ...

    Args:
        image_path: Source image
        taken: Names already in use; the returned name is added to it

    Returns:
        File stem for the image's outputs
    """
    stem = image_path.stem
    counter = 1
    while stem in taken:
        stem = f"{image_path.stem}_{counter}"
        counter += 1
    taken.add(stem)
    return stem


def image_generator(image_paths: List[Path]) -> Generator[
        Tuple[Path, Optional[np.ndarray], Optional[HOGError]], None, None]:
    """
    Generator that loads images one at a time for memory efficiency.

    Args:
        image_paths: List of image paths

    Yields:
        Tuple of (image_path, image, error); exactly one of image/error is None
    """
    for img_path in image_paths:
        try:
            yield img_path, load_image(img_path), None
        except HOGError as e:
            yield img_path, None, e


def save_descriptor(descriptor: np.ndarray, output_path: Path) -> None:
    """Save a single descriptor vector to a .npy file."""
    ensure_dir(output_path.parent)
    np.save(str(output_path), np.asarray(descriptor, dtype=np.float64))


def save_descriptors(descriptors: List[np.ndarray], image_paths: List[Path],
                     output_dir: Path) -> Path:
    """
    Save a batch of equal-length descriptors and the paths they came from.

    Args:
        descriptors: Descriptor vectors
        image_paths: Source image of each descriptor
        output_dir: Output directory

    Returns:
        Path of the saved descriptors file
    """
    ensure_dir(output_dir)

    features_file = output_dir / "descriptors.npy"
    paths_file = output_dir / "paths.json"

    np.save(str(features_file), np.stack(descriptors).astype(np.float64))
    with open(paths_file, 'w') as f:
        json.dump([str(p) for p in image_paths], f, indent=2)

    print(f"✓ Saved {len(descriptors)} descriptors to {features_file}")
    return features_file


def save_stats(stats: dict, output_path: Path) -> None:
    """Save run statistics as JSON."""
    ensure_dir(output_path.parent)
    with open(output_path, 'w') as f:
        json.dump(stats, f, indent=2, default=str)
