import copy

import pytest

from svtarray.core import Leaf, dense_to_svt, svt_to_dense
from svtarray.subassign_nindex import subassign_with_short_vector


def _pos(i, j, nrow):
    """Column-major position of 1-based (i, j)."""
    return (j - 1) * nrow + (i - 1)


def test_whole_array_fill_on_empty():
    svt = subassign_with_short_vector((2, 3), "integer", None,
                                      [None, None], [7, 8])
    assert svt_to_dense(svt, (2, 3), "integer") == [7, 8, 7, 8, 7, 8]


def test_selected_elements_get_vector_values():
    dense = [1, 0, 2, 0, 3, 0, 0, 4, 5, 6, 0, 0]
    dim = (3, 4)
    svt = dense_to_svt(dense, dim, "integer")
    rows, cols, vector = [1, 3], [2, 4], [10, 20]
    out = svt_to_dense(
        subassign_with_short_vector(dim, "integer", svt, [rows, cols], vector),
        dim, "integer")
    touched = set()
    for j in cols:
        for k, i in enumerate(rows):
            p = _pos(i, j, 3)
            touched.add(p)
            assert out[p] == vector[k % len(vector)]
    for p, value in enumerate(dense):
        if p not in touched:
            assert out[p] == value


def test_recycling_along_first_dimension():
    dim = (4, 2)
    out = svt_to_dense(
        subassign_with_short_vector(dim, "double", None, [[1, 2, 3, 4], [2]],
                                    [1.5, 2.5]),
        dim, "double")
    assert out[4:] == [1.5, 2.5, 1.5, 2.5]
    assert out[:4] == [0.0] * 4


def test_assigning_zeros_removes_nonzeros():
    dim = (2, 2)
    svt = dense_to_svt([3, 4, 5, 6], dim, "integer")
    out = subassign_with_short_vector(dim, "integer", svt, [None, None], [0])
    assert out is None


def test_partial_zero_assignment_keeps_others():
    dim = (3, 2)
    dense = [1, 2, 3, 4, 5, 6]
    svt = dense_to_svt(dense, dim, "integer")
    out = subassign_with_short_vector(dim, "integer", svt, [[2], None], [0])
    result = svt_to_dense(out, dim, "integer")
    assert result[_pos(2, 1, 3)] == 0
    assert result[_pos(2, 2, 3)] == 0
    assert [result[p] for p in (0, 2, 3, 5)] == [dense[p] for p in (0, 2, 3, 5)]


def test_input_svt_not_mutated():
    dim = (2, 3)
    svt = dense_to_svt([1, 0, 0, 2, 3, 0], dim, "integer")
    before = copy.deepcopy(svt)
    subassign_with_short_vector(dim, "integer", svt, [[2], [1, 3]], [9])
    assert svt == before


def test_idempotent():
    dim = (3, 2, 2)
    svt = dense_to_svt(list(range(12)), dim, "integer")
    nindex = [[1, 3], [2], None]
    once = subassign_with_short_vector(dim, "integer", svt, nindex, [5, 6])
    twice = subassign_with_short_vector(dim, "integer", once, nindex, [5, 6])
    assert svt_to_dense(once, dim, "integer") == svt_to_dense(twice, dim,
                                                              "integer")


def test_three_dimensions_selected_slab():
    dim = (2, 2, 3)
    out = subassign_with_short_vector(dim, "integer", None,
                                      [None, [1], [3]], [4, 5])
    result = svt_to_dense(out, dim, "integer")
    # Element (i, 1, 3) sits at (i-1) + 0*2 + 2*4.
    assert result[8] == 4
    assert result[9] == 5
    assert sum(1 for v in result if v != 0) == 2


def test_one_dimensional():
    leaf = dense_to_svt([0, 2, 0, 3], (4,), "integer")
    out = subassign_with_short_vector((4,), "integer", leaf, [[1, 4]], [7])
    assert svt_to_dense(out, (4,), "integer") == [7, 2, 0, 7]


def test_ones_give_lacunar_leaf():
    out = subassign_with_short_vector((3,), "integer", None, [[1, 3]], [1])
    assert out == Leaf(None, [0, 2])


def test_zero_extent_is_noop():
    svt = object()
    assert subassign_with_short_vector((0, 3), "integer", svt,
                                       [None, None], [1]) is svt


def test_out_of_bounds_coordinate():
    with pytest.raises(IndexError):
        subassign_with_short_vector((2, 2), "integer", None, [[3], None], [1])
    with pytest.raises(IndexError):
        subassign_with_short_vector((2, 2), "integer", None, [[1], [0]], [1])


def test_invalid_vector_length():
    with pytest.raises(ValueError):
        subassign_with_short_vector((4, 2), "integer", None,
                                    [[1, 2, 3], None], [1, 2])
    with pytest.raises(ValueError):
        subassign_with_short_vector((4, 2), "integer", None, [None, None], [])


def test_wrong_number_of_subscripts():
    with pytest.raises(ValueError):
        subassign_with_short_vector((2, 2), "integer", None, [None], [1])


def test_character_type():
    dim = (2, 2)
    out = subassign_with_short_vector(dim, "character", None,
                                      [[2], None], ["a"])
    assert svt_to_dense(out, dim, "character") == ["", "a", "", "a"]