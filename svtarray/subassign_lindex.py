"""Subassignment of a sparse array by linear index or by matrix index.

A linear index addresses the elements of the array in column-major order,
starting at 1. When the same element is addressed several times, the last
assignment wins. Assigning zero (the background value) to an element removes
it from the tree.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence

from .core import Leaf, RType, _make_leaf, is_na, is_zero, rtype_from_string


def _linear_index(value) -> int:
    """Return a 1-based linear index, validated to be a number >= 1."""
    if isinstance(value, bool):
        raise TypeError("'Lindex' must be an integer or numeric vector")
    if value is None:
        raise ValueError("'Lindex' contains invalid linear indices")
    if isinstance(value, int):
        if value < 1:
            raise ValueError("'Lindex' contains invalid linear indices")
        return value
    if isinstance(value, float):
        if math.isnan(value) or value < 1 or math.isinf(value):
            raise ValueError("'Lindex' contains invalid linear indices")
        return int(value)
    raise TypeError("'Lindex' must be an integer or numeric vector")


def _checked_offsets(lindex, length: int) -> list:
    offsets = []
    for value in lindex:
        lidx = _linear_index(value)
        if lidx > length:
            raise IndexError("subassignment subscript contains invalid indices")
        offsets.append(lidx - 1)
    return offsets


def _background_test(rtype: RType, na_background: bool) -> Callable:
    if not na_background:
        return lambda value: is_zero(value, rtype)
    if rtype in (RType.RAW, RType.LIST):
        raise ValueError(f"type {rtype.value!r} is not supported "
                         "with an NA background")
    return lambda value: is_na(value, rtype)


def _same_value(rtype: RType) -> Callable:
    if rtype is RType.LIST:
        return lambda a, b: a is b
    return lambda a, b: a == b


def _subassign_1d(leaf: Optional[Leaf], dim0: int, lindex: list, vals: list,
                  rtype: RType, na_background: bool) -> Optional[Leaf]:
    if na_background:
        raise NotImplementedError("subassignment of 1D NaArray objects "
                                  "is not supported yet")
    offsets = _checked_offsets(lindex, dim0)
    items = {} if leaf is None else dict(zip(leaf.nzoffs, leaf.values(rtype)))
    for off, value in zip(offsets, vals):
        items[off] = value
    kept = [(off, items[off]) for off in sorted(items)
            if not is_zero(items[off], rtype)]
    return _make_leaf([v for _, v in kept], [off for off, _ in kept], rtype)


def _subassign_leaf(leaf: Optional[Leaf], assignments: list, vals: list,
                    rtype: RType, is_background: Callable,
                    same: Callable) -> Optional[Leaf]:
    """Apply ``(idx0, k)`` assignments (value ``vals[k]``) to one leaf."""
    last: dict = {}
    for idx0, k in assignments:
        last[idx0] = k
    if leaf is None:
        kept = [(idx0, vals[last[idx0]]) for idx0 in sorted(last)
                if not is_background(vals[last[idx0]])]
        return _make_leaf([v for _, v in kept], [i for i, _ in kept], rtype)

    existing = dict(zip(leaf.nzoffs, leaf.values(rtype)))
    is_noop = True
    out: dict = dict(existing)
    for idx0, k in last.items():
        value = vals[k]
        if is_background(value):
            if idx0 in existing:
                is_noop = False
                del out[idx0]
            continue
        if idx0 not in existing or not same(existing[idx0], value):
            is_noop = False
        out[idx0] = value
    if is_noop:
        return leaf
    offs = sorted(out)
    return _make_leaf([out[off] for off in offs], offs, rtype)


def _rec_subassign(node, svt, dim: tuple, ndim: int, vals: list,
                   rtype: RType, is_background: Callable, same: Callable):
    if node is None:
        return svt
    if ndim == 1:
        return _subassign_leaf(svt, node, vals, rtype, is_background, same)
    ans = [
        _rec_subassign(node.get(i), None if svt is None else svt[i],
                       dim, ndim - 1, vals, rtype, is_background, same)
        for i in range(dim[ndim - 1])
    ]
    if all(elt is None for elt in ans):
        return None
    return ans


def _build_assignment_tree(offsets: list, dim: tuple) -> dict:
    """Group linear offsets by the leaf they land on."""
    ndim = len(dim)
    strides = [math.prod(dim[:along]) for along in range(ndim)]
    root: dict = {}
    for k, lidx0 in enumerate(offsets):
        node = root
        rem = lidx0
        for along in range(ndim - 1, 0, -1):
            i, rem = divmod(rem, strides[along])
            if along > 1:
                node = node.setdefault(i, {})
            else:
                node.setdefault(i, []).append((rem, k))
    return root


def subassign_by_lindex(dim, rtype, svt, lindex, vals, na_background=False):
    """Return the SVT of ``x`` after ``x[lindex] <- vals``.

    ``lindex`` holds 1-based linear indices (int or float) and must have the
    same length as ``vals``. With ``na_background`` the background value is
    NA rather than zero.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    lindex = list(lindex)
    vals = list(vals)
    if len(lindex) != len(vals):
        raise ValueError("length(Lindex) != length(vals)")
    if not vals:
        return svt
    if not isinstance(na_background, bool):
        raise TypeError("'na_background' must be True or False")
    if len(dim) == 1:
        return _subassign_1d(svt, dim[0], lindex, vals, rtype, na_background)
    is_background = _background_test(rtype, na_background)
    offsets = _checked_offsets(lindex, math.prod(dim))
    tree = _build_assignment_tree(offsets, dim)
    return _rec_subassign(tree, svt, dim, len(dim), vals, rtype,
                          is_background, _same_value(rtype))


def _mindex_rows(mindex, nvals: int, ndim: int) -> list:
    try:
        rows = [list(row) for row in mindex]
    except TypeError:
        raise TypeError("'Mindex' must be a matrix") from None
    if len(rows) != nvals:
        raise ValueError("nrow(Mindex) != length(vals)")
    for row in rows:
        if len(row) != ndim:
            raise ValueError("ncol(Mindex) != length(dim(x))")
        if any(isinstance(c, bool) or not isinstance(c, int) for c in row):
            raise TypeError("'Mindex' must be an integer matrix")
    return rows


def subassign_by_mindex(dim, rtype, svt, mindex, vals: Sequence):
    """Return the SVT of ``x`` after ``x[mindex] <- vals``.

    ``mindex`` is a matrix given as a sequence of rows, one row of 1-based
    array coordinates for each value in ``vals``.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    vals = list(vals)
    rows = _mindex_rows(mindex, len(vals), len(dim))
    if not vals:
        return svt
    if len(dim) == 1:
        return _subassign_1d(svt, dim[0], [row[0] for row in rows], vals,
                             rtype, False)
    strides = [math.prod(dim[:along]) for along in range(len(dim))]
    lindex = []
    for row in rows:
        lidx0 = 0
        for coord, d, stride in zip(row, dim, strides):
            if coord < 1 or coord > d:
                raise IndexError("subscript contains "
                                 "out-of-bound indices or NAs")
            lidx0 += (coord - 1) * stride
        lindex.append(lidx0 + 1)
    return subassign_by_lindex(dim, rtype, svt, lindex, vals, False)