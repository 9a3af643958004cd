import pytest

from svtarray.core import Leaf, dense_to_svt, svt_to_dense
from svtarray.subassign_lindex import subassign_by_lindex, subassign_by_mindex


DIM = (3, 2)
DENSE = [0, 1, 0, 2, 0, 0]


def make_svt():
    return dense_to_svt(DENSE, DIM, "integer")


def test_fill_from_empty_round_trips():
    dense = [4, 0, 7, 0, 0, 9]
    svt = subassign_by_lindex(DIM, "integer", None, range(1, 7), dense)
    assert svt == dense_to_svt(dense, DIM, "integer")
    assert svt_to_dense(svt, DIM, "integer") == dense


def test_replace_and_remove():
    svt = subassign_by_lindex(DIM, "integer", make_svt(), [1, 4], [5, 0])
    assert svt_to_dense(svt, DIM, "integer") == [5, 1, 0, 0, 0, 0]


def test_last_assignment_wins():
    svt = subassign_by_lindex(DIM, "integer", None, [2, 2], [7, 9])
    assert svt_to_dense(svt, DIM, "integer")[1] == 9


def test_zero_after_nonzero_erases():
    svt = subassign_by_lindex(DIM, "integer", None, [3, 3], [7, 0])
    assert svt is None


def test_all_zeros_gives_empty():
    svt = subassign_by_lindex(DIM, "integer", make_svt(), [2, 4], [0, 0])
    assert svt is None


def test_noop_reuses_leaf():
    svt = make_svt()
    ans = subassign_by_lindex(DIM, "integer", svt, [2, 4], [1, 2])
    assert ans[0] is svt[0]
    assert ans[1] is svt[1]


def test_empty_vals_returns_input():
    svt = make_svt()
    assert subassign_by_lindex(DIM, "integer", svt, [], []) is svt


def test_float_lindex_is_truncated():
    svt = subassign_by_lindex(DIM, "double", None, [2.7], [3.5])
    assert svt_to_dense(svt, DIM, "double")[1] == 3.5


def test_ones_make_lacunar_leaf():
    svt = subassign_by_lindex(DIM, "integer", None, [1, 3], [1, 1])
    assert svt[0].is_lacunar()
    assert svt[0].nzoffs == [0, 2]


def test_three_dimensions_round_trip():
    dim = (2, 2, 2)
    dense = [0, 3, 0, 0, 5, 0, 0, 8]
    svt = subassign_by_lindex(dim, "integer", None, range(1, 9), dense)
    assert svt_to_dense(svt, dim, "integer") == dense


def test_one_dimension():
    leaf = Leaf([2, 3], [0, 2])
    ans = subassign_by_lindex((4,), "integer", leaf, [1, 4], [0, 6])
    assert svt_to_dense(ans, (4,), "integer") == [0, 0, 3, 6]


def test_one_dimension_na_background_unsupported():
    with pytest.raises(NotImplementedError):
        subassign_by_lindex((4,), "integer", None, [1], [2], True)


def test_na_background_drops_na():
    svt = dense_to_svt([1.5, 0.0, 0.0, 0.0, 0.0, 0.0], DIM, "double")
    ans = subassign_by_lindex(DIM, "double", svt, [1], [float("nan")], True)
    assert ans is None


def test_length_mismatch():
    with pytest.raises(ValueError):
        subassign_by_lindex(DIM, "integer", None, [1, 2], [1])


@pytest.mark.parametrize("bad", [0, -1, None, float("nan")])
def test_invalid_lindex(bad):
    with pytest.raises(ValueError):
        subassign_by_lindex(DIM, "integer", None, [bad], [1])


def test_out_of_bounds_lindex():
    with pytest.raises(IndexError):
        subassign_by_lindex(DIM, "integer", None, [7], [1])


def test_mindex_matches_lindex():
    by_m = subassign_by_mindex(DIM, "integer", make_svt(),
                               [[1, 1], [3, 2]], [5, 6])
    by_l = subassign_by_lindex(DIM, "integer", make_svt(), [1, 6], [5, 6])
    assert by_m == by_l


def test_mindex_one_dimension():
    ans = subassign_by_mindex((3,), "integer", None, [[2]], [4])
    assert svt_to_dense(ans, (3,), "integer") == [0, 4, 0]


def test_mindex_bad_shape():
    with pytest.raises(ValueError):
        subassign_by_mindex(DIM, "integer", None, [[1, 1]], [1, 2])
    with pytest.raises(ValueError):
        subassign_by_mindex(DIM, "integer", None, [[1]], [1])


def test_mindex_out_of_bounds():
    with pytest.raises(IndexError):
        subassign_by_mindex(DIM, "integer", None, [[4, 1]], [1])