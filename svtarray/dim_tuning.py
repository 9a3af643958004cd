"""Adding and dropping ineffective dimensions of a sparse array.

A dim tuner is a sequence of operations, one of:
``1`` (add an ineffective dimension), ``0`` (keep a dimension of the input)
or ``-1`` (drop an input dimension, which must have extent 1). The number of
``0`` and ``-1`` values must equal the number of input dimensions, and at
least one ``0`` is required.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .core import Leaf, RType, _make_leaf, rtype_from_string

KEEP_DIM = 0
DROP_DIM = -1
ADD_DIM = 1


def dim_tuner_is_normalized(ops: Sequence[int]) -> bool:
    """Tell whether no 1 and -1 values in ``ops`` are direct neighbours."""
    ops = list(ops)
    return all(prev * op >= 0 for prev, op in zip(ops, ops[1:]))


def _cumall_keep_drop(ops: list, dim: tuple) -> tuple:
    """Validate ``ops`` against ``dim``; return the cumulative KEEP/DROP flags."""
    ndim = len(dim)
    cum_keep = [False] * ndim
    cum_drop = [False] * ndim
    along1 = 0
    nkept = 0
    for r, op in enumerate(ops):
        if op == ADD_DIM:
            continue
        if along1 >= ndim:
            raise ValueError("number of 0 (KEEP) or -1 (DROP) values "
                             "in 'dim_tuner' is > 'length(dim(x))'")
        if op == KEEP_DIM:
            if r == along1 and (r == 0 or cum_keep[r - 1]):
                cum_keep[r] = True
            nkept += 1
            along1 += 1
            continue
        if op != DROP_DIM:
            raise ValueError("'dim_tuner' can only contain 0 (KEEP), "
                             "-1 (DROP), or 1 (ADD) values")
        if dim[along1] != 1:
            raise ValueError(f"'dim_tuner[{r + 1}]' (= -1) is mapped to "
                             f"'dim(x)[{along1 + 1}]' (= {dim[along1]}) "
                             "which cannot be dropped")
        if r == along1 and (r == 0 or cum_drop[r - 1]):
            cum_drop[r] = True
        along1 += 1
    if along1 < ndim:
        raise ValueError("number of 0 (KEEP) or -1 (DROP) values "
                         "in 'dim_tuner' is < 'length(dim(x))'")
    if nkept == 0:
        raise ValueError("'dim_tuner' must contain at least one 0")
    return cum_keep, cum_drop


def _add_outermost_dims(svt, n: int):
    for _ in range(n):
        svt = [svt]
    return svt


def _drop_outermost_dims(svt, n: int):
    for _ in range(n):
        if not isinstance(svt, list) or len(svt) != 1:
            raise ValueError("SVT not as expected while dropping dimensions")
        svt = svt[0]
    return svt


def _unroll_leaf(leaf: Leaf, n: int, ans_ndim: int, rtype: RType) -> list:
    """Turn a leaf of length ``n`` into the SVT of a 1x1x..xn array."""
    ans: list = [None] * n
    lacunar = leaf.is_lacunar()
    for k, off in enumerate(leaf.nzoffs):
        if lacunar:
            scalar = Leaf(None, [0])
        else:
            scalar = _make_leaf([leaf.nzvals[k]], [0], rtype)
        ans[off] = _add_outermost_dims(scalar, ans_ndim - 2)
    return ans


def _roll_into_leaf(svt: list, ndim: int, rtype: RType) -> Optional[Leaf]:
    """Turn the SVT of a 1x1x..xN array into a leaf of length N."""
    nzvals = []
    nzoffs = []
    for i, sub in enumerate(svt):
        if sub is None:
            continue
        scalar = _drop_outermost_dims(sub, ndim - 2)
        if (not isinstance(scalar, Leaf) or scalar.nzcount() != 1
                or scalar.nzoffs[0] != 0):
            raise ValueError("not a scalar leaf")
        nzvals.append(scalar.values(rtype)[0])
        nzoffs.append(i)
    if not nzoffs:
        raise ValueError("cannot roll an empty SVT into a leaf")
    return _make_leaf(nzvals, nzoffs, rtype)


def _rec_tune(svt, dim: tuple, ndim: int, ops: list, nops: int,
              cum_keep: list, cum_drop: list, rtype: RType):
    if svt is None or (nops == ndim and cum_keep[ndim - 1]):
        return svt
    op = ops[nops - 1]
    if op == ADD_DIM:
        elt = _rec_tune(svt, dim, ndim, ops, nops - 1,
                        cum_keep, cum_drop, rtype)
        return _add_outermost_dims(elt, 1)
    if op == KEEP_DIM:
        if ndim == 1:
            return _unroll_leaf(svt, dim[0], nops, rtype)
        if nops == ndim and cum_drop[ndim - 2]:
            return _roll_into_leaf(svt, ndim, rtype)
        return [_rec_tune(svt[i], dim, ndim - 1, ops, nops - 1,
                          cum_keep, cum_drop, rtype)
                for i in range(dim[ndim - 1])]
    # DROP_DIM: 'ndim' is at least 2 here since the tuner is normalized.
    return _rec_tune(svt[0], dim, ndim - 1, ops, nops - 1,
                     cum_keep, cum_drop, rtype)


def tune_dims(dim, rtype, svt, dim_tuner):
    """Return the SVT of the array with dimensions tuned by ``dim_tuner``."""
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    ndim = len(dim)
    if ndim == 0:
        raise ValueError("'dim(x)' cannot be empty")
    ops = list(dim_tuner)
    if len(ops) < ndim:
        raise ValueError("length(dim_tuner) < length(dim(x))")
    if not dim_tuner_is_normalized(ops):
        raise ValueError("'dim_tuner' is not normalized")
    cum_keep, cum_drop = _cumall_keep_drop(ops, dim)
    return _rec_tune(svt, dim, ndim, ops, len(ops), cum_keep, cum_drop, rtype)