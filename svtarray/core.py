"""Sparse vector tree (SVT) representation of multidimensional sparse arrays.

An SVT is ``None`` when the array holds no nonzero value. A one-dimensional
SVT is a :class:`Leaf`. An SVT with ``n >= 2`` dimensions is a list whose
length is the extent of the last dimension, and whose elements are SVTs with
``n - 1`` dimensions. Dense data is laid out in column-major order: the first
dimension varies fastest.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

# When on, leaves whose nonzero values are all ones store no values at all.
LACUNAR_MODE = True


class RType(Enum):
    """Element types that a sparse array can hold."""

    LOGICAL = "logical"
    INTEGER = "integer"
    DOUBLE = "double"
    COMPLEX = "complex"
    RAW = "raw"
    CHARACTER = "character"
    LIST = "list"


_ZEROS = {
    RType.LOGICAL: False,
    RType.INTEGER: 0,
    RType.DOUBLE: 0.0,
    RType.COMPLEX: 0j,
    RType.RAW: 0,
    RType.CHARACTER: "",
    RType.LIST: None,
}

_ONES = {
    RType.LOGICAL: True,
    RType.INTEGER: 1,
    RType.DOUBLE: 1.0,
    RType.COMPLEX: 1 + 0j,
    RType.RAW: 1,
}


def rtype_from_string(name) -> RType:
    """Return the :class:`RType` named by ``name`` (an RType passes through)."""
    if isinstance(name, RType):
        return name
    try:
        return RType(name)
    except ValueError:
        raise ValueError(f"invalid type: {name!r}") from None


def zero_value(rtype) -> Any:
    """Return the zero (background) value of ``rtype``."""
    return _ZEROS[rtype_from_string(rtype)]


def one_value(rtype) -> Any:
    """Return the value one of ``rtype``; character and list types have none."""
    rtype = rtype_from_string(rtype)
    try:
        return _ONES[rtype]
    except KeyError:
        raise ValueError(f"type {rtype.value!r} has no 'one' value") from None


def is_zero(value, rtype) -> bool:
    """Tell whether ``value`` is the zero of ``rtype``."""
    rtype = rtype_from_string(rtype)
    if rtype is RType.LIST:
        return value is None
    if value is None:
        return False
    return value == _ZEROS[rtype]


def is_na(value, rtype) -> bool:
    """Tell whether ``value`` is missing (NA or NaN) for ``rtype``."""
    rtype = rtype_from_string(rtype)
    if rtype is RType.RAW:
        return False
    if rtype is RType.LIST:
        raise ValueError("is_na() is not supported on type 'list'")
    if value is None:
        return True
    if rtype is RType.DOUBLE:
        return isinstance(value, float) and math.isnan(value)
    if rtype is RType.COMPLEX:
        return cmath.isnan(complex(value))
    return False


def _can_be_lacunar(rtype: RType) -> bool:
    return rtype in _ONES


def _all_ones(values: Sequence, rtype: RType) -> bool:
    one = _ONES[rtype]
    return all(v is not None and v == one for v in values)


def _make_leaf(nzvals: list, nzoffs: list, rtype: RType) -> Optional["Leaf"]:
    """Build a leaf, lacunar when possible; ``None`` when it would be empty."""
    if not nzoffs:
        return None
    if LACUNAR_MODE and _can_be_lacunar(rtype) and _all_ones(nzvals, rtype):
        return Leaf(None, list(nzoffs))
    return Leaf(list(nzvals), list(nzoffs))


@dataclass
class Leaf:
    """A sparse vector: strictly ascending offsets with their nonzero values.

    ``nzvals`` is ``None`` for a lacunar leaf, whose nonzero values are all one.
    """

    nzvals: Optional[list]
    nzoffs: list

    def __post_init__(self) -> None:
        if self.nzvals is not None and len(self.nzvals) != len(self.nzoffs):
            raise ValueError("'nzvals' and 'nzoffs' must have the same length")

    def nzcount(self) -> int:
        """Number of nonzero values."""
        return len(self.nzoffs)

    def is_lacunar(self) -> bool:
        """True when the leaf stores no values (they are all one)."""
        return self.nzvals is None

    def values(self, rtype) -> list:
        """The nonzero values, with ones filled in for a lacunar leaf."""
        if self.nzvals is None:
            return [one_value(rtype)] * len(self.nzoffs)
        return list(self.nzvals)


def leaf_from_dense(values, rtype) -> Optional[Leaf]:
    """Build a leaf from a dense sequence; ``None`` if it holds only zeros."""
    rtype = rtype_from_string(rtype)
    nzoffs = []
    nzvals = []
    for offset, value in enumerate(values):
        if not is_zero(value, rtype):
            nzoffs.append(offset)
            nzvals.append(value)
    return _make_leaf(nzvals, nzoffs, rtype)


def leaf_to_dense(leaf: Optional[Leaf], length: int, rtype) -> list:
    """Expand a leaf (or ``None``) into a dense list of ``length`` values."""
    rtype = rtype_from_string(rtype)
    out = [_ZEROS[rtype]] * length
    if leaf is None:
        return out
    for offset, value in zip(leaf.nzoffs, leaf.values(rtype)):
        if not 0 <= offset < length:
            raise ValueError(f"leaf offset {offset} is out of bounds")
        out[offset] = value
    return out


def _check_dim(dim) -> tuple:
    dim = tuple(dim)
    if not dim:
        raise ValueError("'dim' cannot be empty")
    if any(d < 0 for d in dim):
        raise ValueError("'dim' cannot contain negative values")
    return dim


def dense_to_svt(values, dim, rtype):
    """Build an SVT from dense column-major ``values`` of dimensions ``dim``."""
    rtype = rtype_from_string(rtype)
    dim = _check_dim(dim)
    values = list(values)
    if len(values) != math.prod(dim):
        raise ValueError("length of 'values' does not match 'dim'")
    return _dense_to_svt(values, dim, rtype)


def _dense_to_svt(values: list, dim: tuple, rtype: RType):
    if len(dim) == 1:
        return leaf_from_dense(values, rtype)
    stride = math.prod(dim[:-1])
    children = [
        _dense_to_svt(values[i * stride:(i + 1) * stride], dim[:-1], rtype)
        for i in range(dim[-1])
    ]
    if all(child is None for child in children):
        return None
    return children


def svt_to_dense(svt, dim, rtype) -> list:
    """Expand an SVT into a dense column-major list."""
    rtype = rtype_from_string(rtype)
    dim = _check_dim(dim)
    return _svt_to_dense(svt, dim, rtype)


def _svt_to_dense(svt, dim: tuple, rtype: RType) -> list:
    if len(dim) == 1:
        return leaf_to_dense(svt, dim[0], rtype)
    if svt is None:
        return [_ZEROS[rtype]] * math.prod(dim)
    if not isinstance(svt, list) or len(svt) != dim[-1]:
        raise ValueError("SVT does not match the supplied dimensions")
    out: list = []
    for sub in svt:
        out.extend(_svt_to_dense(sub, dim[:-1], rtype))
    return out


@dataclass
class SVTArray:
    """A sparse array: its dimensions, its element type and its SVT."""

    dim: tuple
    rtype: RType
    svt: Any = None

    def __post_init__(self) -> None:
        self.dim = _check_dim(self.dim)
        self.rtype = rtype_from_string(self.rtype)

    @classmethod
    def from_dense(cls, values, dim, rtype) -> "SVTArray":
        """Build a sparse array from dense column-major values."""
        rtype = rtype_from_string(rtype)
        return cls(tuple(dim), rtype, dense_to_svt(values, dim, rtype))

    def to_dense(self) -> list:
        """Dense column-major list of all the array's values."""
        return svt_to_dense(self.svt, self.dim, self.rtype)