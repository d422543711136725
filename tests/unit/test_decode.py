import pytest

from multiway.exceptions import DecodingError
from multiway.optimization import build_model, decode_assignment, group_sums


def _load(model, rows):
    for row, values in zip(model.assignment, rows):
        for var, value in zip(row, values):
            var.varValue = value


def test_decode_clean_one_hot_rows():
    model = build_model([1, 2, 3], 3)
    _load(model, [[0, 0, 1], [1, 0, 0], [0, 1, 0]])

    assert decode_assignment(model) == [3, 1, 2]


def test_decode_tolerates_near_binary_values():
    model = build_model([1, 2], 2)
    _load(model, [[0.9999999, 1e-7], [2e-9, 1.0000001]])

    assert decode_assignment(model) == [1, 2]


def test_two_hot_row_raises():
    model = build_model([1, 2], 2)
    _load(model, [[1, 0], [1, 1]])

    with pytest.raises(DecodingError) as exc_info:
        decode_assignment(model)

    assert exc_info.value.row == 1
    assert exc_info.value.values == [1, 1]


def test_zero_hot_row_raises():
    model = build_model([1, 2], 2)
    _load(model, [[0, 0], [0, 1]])

    with pytest.raises(DecodingError) as exc_info:
        decode_assignment(model)

    assert exc_info.value.row == 0


def test_missing_values_raise():
    model = build_model([1, 2], 2)
    # No values loaded: every varValue is None

    with pytest.raises(DecodingError, match="no solution values"):
        decode_assignment(model)


def test_fractional_row_with_custom_threshold():
    model = build_model([1, 2], 2)
    _load(model, [[0.7, 0.3], [0.3, 0.7]])

    assert decode_assignment(model, threshold=0.6) == [1, 2]
    with pytest.raises(DecodingError):
        decode_assignment(model, threshold=0.8)


def test_group_sums_by_one_based_index():
    assert group_sums([1, 1, 1, 3, 2, 1], [1, 1, 1, 2, 3, 3], 3) == [3.0, 3.0, 3.0]


def test_group_sums_keeps_empty_groups():
    assert group_sums([4], [2], 3) == [0.0, 4.0, 0.0]
