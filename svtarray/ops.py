"""Arithmetic, comparison and logical operations on sparse vector trees.

The operations with a scalar assume that ``0 op scalar`` is zero (for
arithmetic) or FALSE (for comparisons), so that only the nonzero values of
the array need to be visited. Missing values (NA) are represented by
``None``; double NaN is kept as a float NaN.
"""

from __future__ import annotations

import math
import warnings
from enum import Enum
from typing import Callable, Iterator, Optional

from .core import Leaf, RType, _make_leaf, is_zero, rtype_from_string, zero_value

INT_MAX = 2**31 - 1

_CONTINUE = object()


class ArithOp(Enum):
    """Arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MULT = "*"
    DIV = "/"
    POW = "^"
    MOD = "%%"
    IDIV = "%/%"


class CompareOp(Enum):
    """Comparison operators."""

    EQ = "=="
    NE = "!="
    LE = "<="
    GE = ">="
    LT = "<"
    GT = ">"


class LogicOp(Enum):
    """Element-wise logical operators."""

    AND = "&"
    OR = "|"


def _parse_op(enum_cls, op):
    if isinstance(op, enum_cls):
        return op
    try:
        return enum_cls(op)
    except ValueError:
        raise ValueError(f"invalid operator: {op!r}") from None


def _check_conformable(x_dim, y_dim) -> tuple:
    x_dim = tuple(x_dim)
    if x_dim != tuple(y_dim):
        raise ValueError("non-conformable arrays")
    return x_dim


# ---------------------------------------------------------------------------
# Element-wise operations
# ---------------------------------------------------------------------------

def _is_na_value(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, complex):
        return math.isnan(value.real) or math.isnan(value.imag)
    return False


def _as_int(value) -> Optional[int]:
    if _is_na_value(value):
        return None
    return int(value)


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _as_logical(value) -> Optional[bool]:
    if _is_na_value(value):
        return None
    return bool(value)


def _fdiv(x: float, y: float) -> float:
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def _fpow(x: float, y: float) -> float:
    try:
        return math.pow(x, y)
    except ValueError:
        if x == 0 and y < 0:
            return math.inf
        return math.nan
    except OverflowError:
        if x > 0 or (y.is_integer() and int(y) % 2 == 0):
            return math.inf
        return -math.inf


class _Arith:
    """Applies one arithmetic operator, producing values of ``ans_rtype``."""

    def __init__(self, op: ArithOp, ans_rtype: RType) -> None:
        if ans_rtype not in (RType.INTEGER, RType.DOUBLE, RType.COMPLEX):
            raise ValueError(f"invalid result type: {ans_rtype.value!r}")
        if ans_rtype is RType.INTEGER and op in (ArithOp.DIV, ArithOp.POW):
            raise ValueError(f'"{op.value}" cannot produce an integer result')
        if ans_rtype is RType.COMPLEX and op in (ArithOp.MOD, ArithOp.IDIV):
            raise ValueError("invalid operation on complex numbers")
        self.op = op
        self.ans_rtype = ans_rtype
        self.overflow = False

    def __call__(self, x, y):
        if self.ans_rtype is RType.INTEGER:
            return self._integer(x, y)
        if self.ans_rtype is RType.DOUBLE:
            return self._double(x, y)
        return self._complex(x, y)

    def _integer(self, x, y):
        x, y = _as_int(x), _as_int(y)
        if x is None or y is None:
            return None
        op = self.op
        if op is ArithOp.MOD:
            return None if y == 0 else x % y
        if op is ArithOp.IDIV:
            return None if y == 0 else x // y
        if op is ArithOp.ADD:
            result = x + y
        elif op is ArithOp.SUB:
            result = x - y
        else:
            result = x * y
        if abs(result) > INT_MAX:
            self.overflow = True
            return None
        return result

    def _double(self, x, y):
        x, y = _as_float(x), _as_float(y)
        op = self.op
        if op is ArithOp.POW and (x == 1.0 or y == 0.0):
            return 1.0
        if x is None or y is None:
            return None
        if op is ArithOp.ADD:
            return x + y
        if op is ArithOp.SUB:
            return x - y
        if op is ArithOp.MULT:
            return x * y
        if op is ArithOp.DIV:
            return _fdiv(x, y)
        if op is ArithOp.POW:
            return _fpow(x, y)
        if op is ArithOp.MOD:
            if y == 0 or math.isnan(x) or math.isnan(y):
                return math.nan
            return x % y
        quotient = _fdiv(x, y)
        if math.isfinite(quotient):
            return float(math.floor(quotient))
        return quotient

    def _complex(self, x, y):
        if x is None or y is None:
            return None
        x, y = complex(x), complex(y)
        op = self.op
        if op is ArithOp.ADD:
            return x + y
        if op is ArithOp.SUB:
            return x - y
        if op is ArithOp.MULT:
            return x * y
        if op is ArithOp.DIV:
            try:
                return x / y
            except ZeroDivisionError:
                return complex(math.nan, math.nan)
        try:
            return x ** y
        except ZeroDivisionError:
            return complex(math.inf, 0.0)
        except OverflowError:
            return complex(math.nan, math.nan)


def _compare(op: CompareOp, x, y) -> Optional[bool]:
    if _is_na_value(x) or _is_na_value(y):
        return None
    if isinstance(x, complex) or isinstance(y, complex):
        if op is CompareOp.EQ:
            return complex(x) == complex(y)
        if op is CompareOp.NE:
            return complex(x) != complex(y)
        raise ValueError("invalid comparison with complex values")
    if op is CompareOp.EQ:
        return x == y
    if op is CompareOp.NE:
        return x != y
    if op is CompareOp.LE:
        return x <= y
    if op is CompareOp.GE:
        return x >= y
    if op is CompareOp.LT:
        return x < y
    return x > y


def _logic(op: LogicOp, x, y) -> Optional[bool]:
    if op is LogicOp.AND:
        if x is False or y is False:
            return False
        if x is None or y is None:
            return None
        return True
    if x is True or y is True:
        return True
    if x is None or y is None:
        return None
    return False


def _coerce_value(value, rtype: RType):
    if rtype is RType.INTEGER:
        return _as_int(value)
    if rtype is RType.DOUBLE:
        return _as_float(value)
    if rtype is RType.COMPLEX:
        return None if value is None else complex(value)
    if rtype is RType.LOGICAL:
        return _as_logical(value)
    raise ValueError(f"cannot coerce to type {rtype.value!r}")


# ---------------------------------------------------------------------------
# Leaves and tree traversals
# ---------------------------------------------------------------------------

def _build_leaf(pairs, rtype: RType) -> Optional[Leaf]:
    offs: list = []
    vals: list = []
    for off, value in pairs:
        if not is_zero(value, rtype):
            offs.append(off)
            vals.append(value)
    return _make_leaf(vals, offs, rtype)


def _leaf_items(leaf: Optional[Leaf], rtype: RType) -> dict:
    if leaf is None:
        return {}
    return dict(zip(leaf.nzoffs, leaf.values(rtype)))


def _leaf_pairs(leaf1, rtype1: RType, leaf2, rtype2: RType,
                union: bool = True) -> Iterator[tuple]:
    """Yield ``(offset, value1, value2)``; absent values are filled with zero."""
    items1 = _leaf_items(leaf1, rtype1)
    items2 = _leaf_items(leaf2, rtype2)
    keys = items1.keys() | items2.keys() if union else items1.keys() & items2.keys()
    zero1, zero2 = zero_value(rtype1), zero_value(rtype2)
    for off in sorted(keys):
        yield off, items1.get(off, zero1), items2.get(off, zero2)


def _rec_map(svt, ndim: int, leaf_fn: Callable):
    if svt is None:
        return None
    if ndim == 1:
        return leaf_fn(svt)
    ans = [_rec_map(sub, ndim - 1, leaf_fn) for sub in svt]
    if all(elt is None for elt in ans):
        return None
    return ans


def _rec_binary(svt1, svt2, dim: tuple, ndim: int,
                leaf_fn: Callable, shortcut: Callable):
    if svt1 is None and svt2 is None:
        return None
    result = shortcut(svt1, svt2, ndim)
    if result is not _CONTINUE:
        return result
    if ndim == 1:
        return leaf_fn(svt1, svt2)
    n = dim[ndim - 1]
    subs1 = svt1 if svt1 is not None else [None] * n
    subs2 = svt2 if svt2 is not None else [None] * n
    ans = [_rec_binary(a, b, dim, ndim - 1, leaf_fn, shortcut)
           for a, b in zip(subs1, subs2)]
    if all(elt is None for elt in ans):
        return None
    return ans


def _no_shortcut(svt1, svt2, ndim):
    return _CONTINUE


def _coerce_svt(svt, ndim: int, from_rtype: RType, to_rtype: RType):
    if from_rtype is to_rtype:
        return svt
    return _rec_map(svt, ndim, lambda leaf: _build_leaf(
        ((off, _coerce_value(v, to_rtype))
         for off, v in zip(leaf.nzoffs, leaf.values(from_rtype))),
        to_rtype))


def _warn_overflow(arith: _Arith) -> None:
    if arith.overflow:
        warnings.warn("NAs produced by integer overflow", RuntimeWarning,
                      stacklevel=3)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def unary_minus(dim, rtype, svt):
    """Return the SVT of ``-x``, of the same type as ``x``."""
    rtype = rtype_from_string(rtype)
    if rtype not in (RType.LOGICAL, RType.INTEGER, RType.DOUBLE, RType.COMPLEX):
        raise ValueError(f"invalid argument to unary operator "
                         f"(type {rtype.value!r})")
    dim = tuple(dim)

    def negate(leaf: Leaf):
        return _build_leaf(
            ((off, None if v is None else -v)
             for off, v in zip(leaf.nzoffs, leaf.values(rtype))),
            rtype)

    return _rec_map(svt, len(dim), negate)


def arith_svt_scalar(dim, rtype, svt, scalar, op, ans_rtype):
    """Return the SVT of ``x op scalar`` for ``*``, ``/``, ``^``, ``%%``, ``%/%``."""
    rtype = rtype_from_string(rtype)
    ans_rtype = rtype_from_string(ans_rtype)
    op = _parse_op(ArithOp, op)
    if op not in (ArithOp.MULT, ArithOp.DIV, ArithOp.POW,
                  ArithOp.MOD, ArithOp.IDIV):
        raise ValueError(f'"{op.value}" is not supported between an '
                         "SVT_SparseArray object and a numeric vector")
    arith = _Arith(op, ans_rtype)
    dim = tuple(dim)
    ans = _rec_map(svt, len(dim), lambda leaf: _build_leaf(
        ((off, arith(v, scalar))
         for off, v in zip(leaf.nzoffs, leaf.values(rtype))),
        ans_rtype))
    _warn_overflow(arith)
    return ans


def compare_svt_scalar(dim, rtype, svt, scalar, op):
    """Return the logical SVT of ``x op scalar``."""
    rtype = rtype_from_string(rtype)
    if rtype is RType.LIST:
        raise ValueError("comparison is not supported on type 'list'")
    op = _parse_op(CompareOp, op)
    dim = tuple(dim)
    return _rec_map(svt, len(dim), lambda leaf: _build_leaf(
        ((off, _compare(op, v, scalar))
         for off, v in zip(leaf.nzoffs, leaf.values(rtype))),
        RType.LOGICAL))


def arith_svts(x_dim, x_rtype, x_svt, y_dim, y_rtype, y_svt, op, ans_rtype):
    """Return the SVT of ``x op y`` for ``+``, ``-`` or ``*``."""
    dim = _check_conformable(x_dim, y_dim)
    x_rtype = rtype_from_string(x_rtype)
    y_rtype = rtype_from_string(y_rtype)
    ans_rtype = rtype_from_string(ans_rtype)
    op = _parse_op(ArithOp, op)
    if op not in (ArithOp.ADD, ArithOp.SUB, ArithOp.MULT):
        raise ValueError(f'"{op.value}" is not supported between '
                         "SVT_SparseArray objects")
    arith = _Arith(op, ans_rtype)

    def shortcut(svt1, svt2, ndim):
        if svt1 is None and op is ArithOp.ADD:
            return _coerce_svt(svt2, ndim, y_rtype, ans_rtype)
        if svt2 is None and op in (ArithOp.ADD, ArithOp.SUB):
            return _coerce_svt(svt1, ndim, x_rtype, ans_rtype)
        return _CONTINUE

    def leaf_fn(leaf1, leaf2):
        return _build_leaf(
            ((off, arith(a, b))
             for off, a, b in _leaf_pairs(leaf1, x_rtype, leaf2, y_rtype)),
            ans_rtype)

    ans = _rec_binary(x_svt, y_svt, dim, len(dim), leaf_fn, shortcut)
    _warn_overflow(arith)
    return ans


def compare_svts(x_dim, x_rtype, x_svt, y_dim, y_rtype, y_svt, op):
    """Return the logical SVT of ``x op y`` for ``!=``, ``<`` or ``>``."""
    dim = _check_conformable(x_dim, y_dim)
    x_rtype = rtype_from_string(x_rtype)
    y_rtype = rtype_from_string(y_rtype)
    if RType.LIST in (x_rtype, y_rtype):
        raise ValueError("comparison is not supported on type 'list'")
    op = _parse_op(CompareOp, op)
    if op not in (CompareOp.NE, CompareOp.LT, CompareOp.GT):
        raise ValueError(f'"{op.value}" is not supported between '
                         "SVT_SparseArray objects")

    def leaf_fn(leaf1, leaf2):
        return _build_leaf(
            ((off, _compare(op, a, b))
             for off, a, b in _leaf_pairs(leaf1, x_rtype, leaf2, y_rtype)),
            RType.LOGICAL)

    return _rec_binary(x_svt, y_svt, dim, len(dim), leaf_fn, _no_shortcut)


def logic_svts(x_dim, x_rtype, x_svt, y_dim, y_rtype, y_svt, op):
    """Return the logical SVT of ``x & y`` or ``x | y``.

    When one side is empty, ``&`` gives an empty result and ``|`` gives the
    other side as it is.
    """
    dim = _check_conformable(x_dim, y_dim)
    x_rtype = rtype_from_string(x_rtype)
    y_rtype = rtype_from_string(y_rtype)
    op = _parse_op(LogicOp, op)

    def shortcut(svt1, svt2, ndim):
        if svt1 is None or svt2 is None:
            if op is LogicOp.AND:
                return None
            return svt2 if svt1 is None else svt1
        return _CONTINUE

    def leaf_fn(leaf1, leaf2):
        pairs = _leaf_pairs(leaf1, x_rtype, leaf2, y_rtype,
                            union=op is LogicOp.OR)
        return _build_leaf(
            ((off, _logic(op, _as_logical(a), _as_logical(b)))
             for off, a, b in pairs),
            RType.LOGICAL)

    return _rec_binary(x_svt, y_svt, dim, len(dim), leaf_fn, shortcut)