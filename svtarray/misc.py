"""Element-wise ``is.na()``, ``is.nan()`` and ``is.infinite()`` on SVTs."""

from __future__ import annotations

import cmath
import math
from typing import Callable, Optional, Sequence

from .core import Leaf, RType, _make_leaf, rtype_from_string

IS_NA = "is.na"
IS_NAN = "is.nan"
IS_INFINITE = "is.infinite"


def _is_missing(value, rtype: RType) -> bool:
    if value is None:
        return True
    if rtype is RType.DOUBLE:
        return isinstance(value, float) and math.isnan(value)
    if rtype is RType.COMPLEX:
        return cmath.isnan(complex(value))
    return False


def _is_nan(value, rtype: RType) -> bool:
    # A missing value (None) is NA, not NaN.
    if value is None:
        return False
    if rtype is RType.DOUBLE:
        return isinstance(value, float) and math.isnan(value)
    z = complex(value)
    return math.isnan(z.real) or math.isnan(z.imag)


def _is_infinite(value, rtype: RType) -> bool:
    if value is None:
        return False
    if rtype is RType.DOUBLE:
        return math.isinf(value)
    z = complex(value)
    return math.isinf(z.real) or math.isinf(z.imag)


_PREDICATES: dict = {
    IS_NA: _is_missing,
    IS_NAN: _is_nan,
    IS_INFINITE: _is_infinite,
}


def _leaf_apply(leaf: Leaf, predicate: Callable, rtype: RType) -> Optional[Leaf]:
    if leaf.is_lacunar():
        return None
    offs = [off for off, value in zip(leaf.nzoffs, leaf.nzvals)
            if predicate(value, rtype)]
    return _make_leaf([True] * len(offs), offs, RType.LOGICAL)


def _rec_apply(svt, dim: Sequence[int], ndim: int, predicate: Callable,
               rtype: RType):
    if svt is None:
        return None
    if ndim == 1:
        return _leaf_apply(svt, predicate, rtype)
    ans = [_rec_apply(sub, dim, ndim - 1, predicate, rtype) for sub in svt]
    if all(elt is None for elt in ans):
        return None
    return ans


def apply_is_fun(dim, rtype, svt, is_fun: str):
    """Apply ``is_fun`` ("is.na", "is.nan" or "is.infinite") to an SVT.

    Returns the SVT of a logical array of the same dimensions, whose nonzero
    (TRUE) elements mark where the predicate holds.
    """
    rtype = rtype_from_string(rtype)
    if not isinstance(is_fun, str):
        raise TypeError("'is_fun' must be a single string")
    try:
        predicate = _PREDICATES[is_fun]
    except KeyError:
        raise ValueError(f"unsupported function: {is_fun!r}") from None
    if rtype is RType.LIST:
        raise ValueError(f"{is_fun}() is not supported yet on "
                         "SVT_SparseArray objects of type \"list\"")
    if rtype is RType.RAW or (is_fun != IS_NA and
                              rtype not in (RType.DOUBLE, RType.COMPLEX)):
        return None
    dim = tuple(dim)
    return _rec_apply(svt, dim, len(dim), predicate, rtype)