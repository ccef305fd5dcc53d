"""
Main HOG extraction pipeline.
Computes descriptors for image files and optionally renders them.
"""
import argparse
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from tqdm import tqdm

from ..errors import HOGError, InvalidConfiguration
from ..preprocess.utils import load_config
from ..preprocess.resize import resize_image
from .hog_extractor import DEFAULTS, HOGExtractor
from .utils import (
    collect_image_paths,
    image_generator,
    save_descriptor,
    save_descriptors,
    save_stats,
    unique_stem,
)
from . import visualization as hog_vis


MODES = ['blocks', 'cells']

# Batch output files in the same directory as the per-image .npy files
RESERVED_STEMS = {'descriptors', 'paths', 'extraction_stats'}


def validate_resize(resize) -> Optional[Tuple[int, int]]:
    """Check a resize setting: None or [width, height] of positive ints."""
    if resize is None:
        return None

    if (not isinstance(resize, (list, tuple)) or len(resize) != 2
            or any(isinstance(v, bool) or not isinstance(v, int) or v <= 0 for v in resize)):
        raise InvalidConfiguration(f"resize must be [width, height] of positive integers, got {resize!r}")

    return resize[0], resize[1]


def build_hog_config(config: Optional[Dict], overrides: Dict) -> Dict:
    """
    Merge the hog section of a config file with command-line overrides.

    Args:
        config: Loaded config file (may be None)
        overrides: Values from the command line; None means not given

    Returns:
        Hog config section
    """
    hog_config = {}
    if config:
        if 'features' in config:
            hog_config.update((config['features'] or {}).get('hog') or {})
        else:
            hog_config.update(config)

    for key, value in overrides.items():
        if value is not None:
            hog_config[key] = value

    hog_config.setdefault('mode', 'blocks')
    return hog_config


def visualize_image(extractor: HOGExtractor, image: np.ndarray,
                    output_dir: Path, stem: str) -> None:
    """Render gradient, cell and block images for one image."""
    gradient = extractor.gradient(image)
    cells = extractor.cells(gradient)

    hog_vis.save_gradient_image(gradient, output_dir / f"{stem}_gradient.png")
    hog_vis.save_orientation_cells_image(cells, extractor.cell_width, output_dir / f"{stem}_cells.png")
    hog_vis.save_descriptor_blocks_image(
        cells,
        extractor.block_height,
        extractor.block_width,
        extractor.block_stride,
        output_dir / f"{stem}_blocks.png"
    )


def run_extraction_pipeline(inputs: Sequence[str],
                            hog_config: Dict,
                            output_dir: Optional[Path] = None,
                            visualize_dir: Optional[Path] = None) -> Dict:
    """
    Run the complete descriptor pipeline over images.

    Args:
        inputs: Image files and/or directories
        hog_config: Hog config section (numeric parameters, mode, resize)
        output_dir: Where to save descriptors and stats (None = don't save)
        visualize_dir: Where to save renderings (None = don't render)

    Returns:
        Dictionary with descriptors, failures and statistics
    """
    extractor = HOGExtractor.from_config(
        {key: value for key, value in hog_config.items() if key in DEFAULTS}
    )
    mode = hog_config.get('mode', 'blocks')
    if mode not in MODES:
        raise InvalidConfiguration(f"Unknown mode: {mode}")
    resize = validate_resize(hog_config.get('resize'))

    image_paths = collect_image_paths(inputs)

    print("\n" + "=" * 60)
    print("HOG Descriptor Extraction")
    print("=" * 60)
    print(f"Images: {len(image_paths)}")
    print(f"Mode: {mode}")
    print(f"Parameters: {extractor.get_config()}")
    if resize:
        print(f"Resize: {resize[0]}x{resize[1]}")
    print("=" * 60)

    descriptors: List[np.ndarray] = []
    processed_paths: List[Path] = []
    failures: Dict[str, str] = {}
    outputs: Dict[str, str] = {}
    taken = set(RESERVED_STEMS)

    for img_path, image, error in tqdm(image_generator(image_paths),
                                       total=len(image_paths), desc="Extracting HOG"):
        try:
            if error is not None:
                raise error

            if resize:
                image = resize_image(image, resize[0], resize[1])

            if mode == 'cells':
                descriptor = extractor.extract_cells(image)
            else:
                descriptor = extractor.extract(image)

            stem = unique_stem(img_path, taken)
            if output_dir is not None:
                save_descriptor(descriptor, output_dir / f"{stem}.npy")
            if visualize_dir is not None:
                visualize_image(extractor, image, visualize_dir, stem)
        except HOGError as e:
            print(f"⚠️  Failed to extract features from {img_path}: {e}")
            failures[str(img_path)] = f"{type(e).__name__}: {e}"
            continue

        descriptors.append(descriptor)
        processed_paths.append(img_path)
        outputs[str(img_path)] = stem

    feature_dims = sorted({len(d) for d in descriptors})
    stats = {
        'num_images': len(image_paths),
        'processed': len(descriptors),
        'failed': len(failures),
        'mode': mode,
        'parameters': extractor.get_config(),
        'resize': resize,
        'feature_dims': feature_dims,
        'failures': failures,
        'outputs': outputs,
    }

    if output_dir is not None:
        if len(descriptors) > 1 and len(feature_dims) == 1:
            save_descriptors(descriptors, processed_paths, output_dir)
        elif len(feature_dims) > 1:
            print("⚠️  Descriptor lengths differ (use --resize); saved per-image files only")
        save_stats(stats, output_dir / "extraction_stats.json")

    print(f"\n✓ Extraction complete:")
    print(f"  - Processed: {len(descriptors)}/{len(image_paths)}")
    print(f"  - Failed: {len(failures)}")
    print(f"  - Feature dims: {feature_dims}")

    return {
        'descriptors': descriptors,
        'paths': processed_paths,
        'failures': failures,
        'stats': stats,
    }


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Compute HOG descriptors for images')
    parser.add_argument('inputs', nargs='+',
                        help='Image files (.png, .jpg, .jpeg, .pgm) or directories')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config.yaml')
    parser.add_argument('--mode', type=str, default=None, choices=MODES,
                        help='Block descriptor (default) or cell-only descriptor')
    parser.add_argument('--resize', type=int, nargs=2, default=None, metavar=('WIDTH', 'HEIGHT'),
                        help='Resize images before extraction')
    parser.add_argument('--output', type=str, default=None,
                        help='Directory to save descriptors (.npy) and statistics')
    parser.add_argument('--visualize', type=str, default=None,
                        help='Directory to save gradient/cell/block renderings')
    for name in DEFAULTS:
        parser.add_argument(f"--{name.replace('_', '-')}", dest=name, type=int, default=None,
                            help=f"Override {name} (default {DEFAULTS[name]})")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for HOG extraction."""
    args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else None
        overrides = {name: getattr(args, name) for name in DEFAULTS}
        overrides['mode'] = args.mode
        overrides['resize'] = args.resize
        hog_config = build_hog_config(config, overrides)

        results = run_extraction_pipeline(
            args.inputs,
            hog_config,
            output_dir=Path(args.output) if args.output else None,
            visualize_dir=Path(args.visualize) if args.visualize else None
        )
    except HOGError as e:
        print(f"Error: {e}")
        return 1

    if results['stats']['processed'] == 0:
        return 1

    if args.output is None:
        for img_path, descriptor in zip(results['paths'], results['descriptors']):
            print(f"{img_path}: {len(descriptor)} features")

    return 0
