import math

import pytest

from svtarray.core import (
    Leaf,
    RType,
    SVTArray,
    dense_to_svt,
    is_na,
    is_zero,
    leaf_from_dense,
    leaf_to_dense,
    one_value,
    rtype_from_string,
    svt_to_dense,
    zero_value,
)


def _sample(n):
    return [(i * 7) % 5 if i % 3 else 0 for i in range(n)]


def test_rtype_from_string():
    assert rtype_from_string("double") is RType.DOUBLE
    assert rtype_from_string(RType.LIST) is RType.LIST


def test_rtype_from_string_invalid():
    with pytest.raises(ValueError):
        rtype_from_string("float128")


@pytest.mark.parametrize("rtype", list(RType))
def test_zero_value_is_zero(rtype):
    assert is_zero(zero_value(rtype), rtype)


@pytest.mark.parametrize("rtype", [RType.LOGICAL, RType.INTEGER, RType.DOUBLE,
                                   RType.COMPLEX, RType.RAW])
def test_one_value_is_not_zero(rtype):
    assert not is_zero(one_value(rtype), rtype)


@pytest.mark.parametrize("rtype", [RType.CHARACTER, RType.LIST])
def test_one_value_unsupported(rtype):
    with pytest.raises(ValueError):
        one_value(rtype)


def test_is_na():
    assert is_na(None, RType.INTEGER)
    assert is_na(float("nan"), RType.DOUBLE)
    assert not is_na(1.5, RType.DOUBLE)
    assert is_na(complex(math.nan, 0.0), RType.COMPLEX)
    assert not is_na(0, RType.RAW)
    assert is_na(None, RType.CHARACTER)
    assert not is_na("a", RType.CHARACTER)


def test_is_na_list_unsupported():
    with pytest.raises(ValueError):
        is_na(None, RType.LIST)


def test_na_is_not_zero():
    assert not is_zero(None, RType.INTEGER)
    assert not is_zero(float("nan"), RType.DOUBLE)


def test_leaf_from_dense():
    leaf = leaf_from_dense([0, 5, 0, 7], RType.INTEGER)
    assert leaf == Leaf([5, 7], [1, 3])
    assert leaf.nzcount() == 2
    assert not leaf.is_lacunar()


def test_leaf_from_dense_all_zero():
    assert leaf_from_dense([0, 0, 0], RType.INTEGER) is None


def test_leaf_from_dense_lacunar():
    leaf = leaf_from_dense([0, 1, 1], RType.INTEGER)
    assert leaf.is_lacunar()
    assert leaf.nzoffs == [1, 2]
    assert leaf.values(RType.INTEGER) == [1, 1]
    assert leaf.values(RType.DOUBLE) == [1.0, 1.0]


def test_character_leaf_never_lacunar():
    leaf = leaf_from_dense(["", "a"], RType.CHARACTER)
    assert leaf == Leaf(["a"], [1])


def test_leaf_length_mismatch():
    with pytest.raises(ValueError):
        Leaf([1, 2], [0])


def test_leaf_to_dense_round_trip():
    values = [0.0, 2.5, 0.0, 1.0, -3.0]
    leaf = leaf_from_dense(values, RType.DOUBLE)
    assert leaf_to_dense(leaf, len(values), RType.DOUBLE) == values


def test_leaf_to_dense_none():
    assert leaf_to_dense(None, 3, RType.INTEGER) == [0, 0, 0]


def test_leaf_to_dense_out_of_bounds():
    with pytest.raises(ValueError):
        leaf_to_dense(Leaf([4], [5]), 3, RType.INTEGER)


@pytest.mark.parametrize("dim", [(5,), (2, 3), (2, 3, 4), (3, 1, 2), (1, 1, 6)])
def test_dense_svt_round_trip(dim):
    values = _sample(math.prod(dim))
    svt = dense_to_svt(values, dim, RType.INTEGER)
    assert svt_to_dense(svt, dim, RType.INTEGER) == values


def test_dense_to_svt_all_zero():
    assert dense_to_svt([0] * 12, (3, 4), RType.INTEGER) is None


def test_dense_to_svt_structure():
    svt = dense_to_svt([0, 0, 3, 0], (2, 2), RType.INTEGER)
    assert svt == [None, Leaf([3], [0])]


def test_dense_to_svt_length_mismatch():
    with pytest.raises(ValueError):
        dense_to_svt([1, 2, 3], (2, 2), RType.INTEGER)


def test_svt_to_dense_bad_shape():
    with pytest.raises(ValueError):
        svt_to_dense([None, None, Leaf([1], [0])], (2, 2), RType.INTEGER)


def test_svtarray_round_trip():
    values = _sample(24)
    arr = SVTArray.from_dense(values, (2, 3, 4), "integer")
    assert arr.rtype is RType.INTEGER
    assert arr.dim == (2, 3, 4)
    assert arr.to_dense() == values


def test_svtarray_empty():
    arr = SVTArray.from_dense([0.0] * 6, [3, 2], RType.DOUBLE)
    assert arr.svt is None
    assert arr.to_dense() == [0.0] * 6