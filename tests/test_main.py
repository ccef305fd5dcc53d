import json

import numpy as np
import pytest
import cv2

from hog_descriptor.errors import InvalidConfiguration
from hog_descriptor.feature_extraction.main import build_hog_config, main, validate_resize

from conftest import make_pgm


def write_images(directory, vertical_edge_image, horizontal_edge_image):
    directory.mkdir()
    cv2.imwrite(str(directory / "a_vertical.png"), vertical_edge_image)
    cv2.imwrite(str(directory / "b_horizontal.png"), horizontal_edge_image)
    (directory / "c_small.pgm").write_bytes(make_pgm(6, 6, [0, 255] * 18))
    (directory / "notes.txt").write_text("not an image")


def test_batch_run_writes_descriptors(tmp_path, vertical_edge_image, horizontal_edge_image):
    images = tmp_path / "images"
    output = tmp_path / "features"
    write_images(images, vertical_edge_image, horizontal_edge_image)

    exit_code = main([str(images), "--resize", "12", "12", "--output", str(output)])

    assert exit_code == 0
    descriptors = np.load(output / "descriptors.npy")
    assert descriptors.shape == (3, 81)
    assert (output / "a_vertical.npy").exists()

    paths = json.loads((output / "paths.json").read_text())
    assert [p.split("/")[-1] for p in paths] == ["a_vertical.png", "b_horizontal.png", "c_small.pgm"]

    stats = json.loads((output / "extraction_stats.json").read_text())
    assert stats['processed'] == 3
    assert stats['failed'] == 0
    assert stats['feature_dims'] == [81]


def test_cells_mode_and_overrides(tmp_path, vertical_edge_image):
    image_path = tmp_path / "edge.png"
    output = tmp_path / "out"
    cv2.imwrite(str(image_path), vertical_edge_image)

    exit_code = main([str(image_path), "--mode", "cells", "--cell-height", "4",
                      "--cell-width", "4", "--output", str(output)])

    assert exit_code == 0
    assert np.load(output / "edge.npy").shape == (3 * 3 * 9,)


def test_visualize(tmp_path, vertical_edge_image):
    image_path = tmp_path / "edge.png"
    cv2.imwrite(str(image_path), vertical_edge_image)

    exit_code = main([str(image_path), "--visualize", str(tmp_path / "vis")])

    assert exit_code == 0
    for suffix in ("gradient", "cells", "blocks"):
        assert (tmp_path / "vis" / f"edge_{suffix}.png").exists()


def test_failures_are_reported(tmp_path, vertical_edge_image):
    good = tmp_path / "good.png"
    bad = tmp_path / "bad.pgm"
    cv2.imwrite(str(good), vertical_edge_image)
    bad.write_bytes(b"P2\n1 1\n255\n0\n")
    output = tmp_path / "out"

    exit_code = main([str(good), str(bad), "--output", str(output)])

    assert exit_code == 0
    stats = json.loads((output / "extraction_stats.json").read_text())
    assert stats['processed'] == 1
    assert stats['failed'] == 1
    assert stats['failures'][str(bad)].startswith("CorruptFile")


def test_single_failure_exits_nonzero(tmp_path):
    assert main([str(tmp_path / "image.bmp")]) == 1


def test_invalid_override_exits_nonzero(tmp_path, vertical_edge_image):
    image_path = tmp_path / "edge.png"
    cv2.imwrite(str(image_path), vertical_edge_image)

    assert main([str(image_path), "--bins-number", "0"]) == 1


def test_config_file_is_merged_with_overrides():
    hog_config = build_hog_config(
        {'features': {'hog': {'cell_height': 8, 'mode': 'cells'}}},
        {'cell_height': None, 'cell_width': 4, 'mode': None, 'resize': None}
    )

    assert hog_config == {'cell_height': 8, 'cell_width': 4, 'mode': 'cells'}


def test_images_sharing_a_stem_get_separate_outputs(tmp_path, vertical_edge_image,
                                                     horizontal_edge_image):
    images = tmp_path / "images"
    (images / "sub").mkdir(parents=True)
    cv2.imwrite(str(images / "x.png"), vertical_edge_image)
    cv2.imwrite(str(images / "sub" / "x.png"), horizontal_edge_image)
    (images / "x.pgm").write_bytes(make_pgm(12, 12, [0, 255] * 72))
    output = tmp_path / "out"

    exit_code = main([str(images), "--output", str(output)])

    assert exit_code == 0
    per_image = sorted(p.name for p in output.glob("*.npy") if p.name != "descriptors.npy")
    assert per_image == ["x.npy", "x_1.npy", "x_2.npy"]

    stats = json.loads((output / "extraction_stats.json").read_text())
    descriptors = np.load(output / "descriptors.npy")
    paths = json.loads((output / "paths.json").read_text())
    assert len(set(stats['outputs'].values())) == 3
    for row, path in zip(descriptors, paths):
        np.testing.assert_array_equal(np.load(output / f"{stats['outputs'][path]}.npy"), row)


def test_image_named_like_batch_file_keeps_batch_file(tmp_path, vertical_edge_image,
                                                      horizontal_edge_image):
    images = tmp_path / "images"
    images.mkdir()
    cv2.imwrite(str(images / "descriptors.png"), vertical_edge_image)
    cv2.imwrite(str(images / "other.png"), horizontal_edge_image)
    output = tmp_path / "out"

    assert main([str(images), "--output", str(output)]) == 0

    assert np.load(output / "descriptors.npy").shape == (2, 81)
    assert (output / "descriptors_1.npy").exists()


@pytest.mark.parametrize("resize", ["64", "[64]", "[64, 0]", "[64, true]", "[64.5, 32]"])
def test_malformed_resize_in_config_exits_nonzero(tmp_path, vertical_edge_image, resize):
    image_path = tmp_path / "edge.png"
    cv2.imwrite(str(image_path), vertical_edge_image)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(f"features:\n  hog:\n    resize: {resize}\n")

    assert main([str(image_path), "--config", str(config_path)]) == 1


def test_malformed_resize_is_rejected():
    with pytest.raises(InvalidConfiguration):
        validate_resize([64])
    assert validate_resize([64, 32]) == (64, 32)
    assert validate_resize(None) is None
