import numpy as np
import pytest

from hog_descriptor.errors import InvalidDimensions
from hog_descriptor.feature_extraction.cells import cell_grid_shape, compute_cells, orientation_bins
from hog_descriptor.feature_extraction.gradient import GradientField, compute_gradient
from hog_descriptor.preprocess.intensity import extract_intensity


def make_field(magnitude, orientation):
    magnitude = np.asarray(magnitude, dtype=np.float64)
    zeros = np.zeros_like(magnitude)
    return GradientField(zeros, zeros, magnitude, np.asarray(orientation, dtype=np.float64))


def test_cell_grid_includes_partial_cells():
    assert cell_grid_shape(12, 12, 6, 6) == (2, 2)
    assert cell_grid_shape(13, 20, 6, 6) == (3, 4)
    assert cell_grid_shape(1, 1, 6, 6) == (1, 1)


def test_bin_index_uses_ceiling_with_wraparound():
    orientation = np.array([0.0, 0.001, 20.0, 20.5, 90.0, 170.0, 179.9])

    bins = orientation_bins(orientation, 9)

    np.testing.assert_array_equal(bins, [0, 1, 1, 2, 5, 0, 0])


def test_votes_are_full_magnitude_into_one_bin():
    field = make_field([[2.0, 3.0], [0.5, 1.0]], [[10.0, 10.0], [45.0, 0.0]])

    cells = compute_cells(field, 2, 2, 9)

    assert cells.shape == (1, 1, 9)
    expected = np.zeros(9)
    expected[1] = 5.0
    expected[3] = 0.5
    expected[0] = 1.0
    np.testing.assert_allclose(cells[0, 0], expected)


def test_histograms_are_not_divided_by_cell_area():
    field = make_field(np.ones((6, 6)), np.full((6, 6), 30.0))

    cells = compute_cells(field, 6, 6, 9)

    assert cells[0, 0, 2] == pytest.approx(36.0)


def test_partial_cells_collect_remaining_pixels():
    field = make_field(np.ones((7, 8)), np.full((7, 8), 100.0))

    cells = compute_cells(field, 6, 6, 9)

    assert cells.shape == (2, 2, 9)
    bin_index = 5
    assert cells[0, 0, bin_index] == pytest.approx(36.0)
    assert cells[0, 1, bin_index] == pytest.approx(12.0)
    assert cells[1, 0, bin_index] == pytest.approx(6.0)
    assert cells[1, 1, bin_index] == pytest.approx(2.0)


def test_vertical_edge_concentrates_in_edge_cells(vertical_edge_image):
    field = compute_gradient(extract_intensity(vertical_edge_image))

    cells = compute_cells(field, 6, 6, 9)

    assert cells.shape == (2, 2, 9)
    for row in range(2):
        for col in range(2):
            # Column 5 falls in cell column 0, column 6 in cell column 1
            assert cells[row, col, 0] == pytest.approx(6.0)
            assert not cells[row, col, 1:].any()


def test_cells_are_read_only():
    cells = compute_cells(make_field(np.ones((2, 2)), np.zeros((2, 2))), 2, 2, 4)

    with pytest.raises(ValueError):
        cells[0, 0, 0] = 1.0


def test_empty_field_is_rejected():
    with pytest.raises(InvalidDimensions):
        compute_cells(make_field(np.zeros((0, 0)), np.zeros((0, 0))), 6, 6, 9)
