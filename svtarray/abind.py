"""Binding multidimensional sparse arrays along a dimension."""

from __future__ import annotations

from typing import Optional, Sequence

from .core import Leaf, RType, SVTArray, _make_leaf, rtype_from_string


def _collect_ith(svts: list, i: int, d: int) -> list:
    out = []
    for svt in svts:
        if svt is None:
            out.append(None)
            continue
        if not isinstance(svt, list) or len(svt) != d:
            raise ValueError("invalid SVT found while binding objects")
        out.append(svt[i])
    return out


def _concatenate_svts(svts: list, dims_along: Sequence[int]) -> list:
    out: list = []
    for n, (svt, d) in enumerate(zip(svts, dims_along), start=1):
        if svt is None:
            out.extend([None] * d)
            continue
        if not isinstance(svt, list) or len(svt) != d:
            raise ValueError(f"input object {n} is an invalid SVT_SparseArray")
        out.extend(svt)
    return out


def _concatenate_leaves(leaves: list, dims_along: Sequence[int],
                        rtype: RType) -> Optional[Leaf]:
    nzvals: list = []
    nzoffs: list = []
    offset = 0
    for leaf, d in zip(leaves, dims_along):
        if leaf is not None:
            nzoffs.extend(off + offset for off in leaf.nzoffs)
            nzvals.extend(leaf.values(rtype))
        offset += d
    return _make_leaf(nzvals, nzoffs, rtype)


def _rec_abind(svts: list, ans_dim: list, ndim: int, along0: int,
               dims_along: Sequence[int], rtype: RType):
    if all(svt is None for svt in svts):
        return None
    if ndim == 1:
        return _concatenate_leaves(svts, dims_along, rtype)
    if along0 == ndim - 1:
        return _concatenate_svts(svts, dims_along)
    ans_len = ans_dim[ndim - 1]
    ans = [
        _rec_abind(_collect_ith(svts, i, ans_len), ans_dim, ndim - 1,
                   along0, dims_along, rtype)
        for i in range(ans_len)
    ]
    if all(elt is None for elt in ans):
        return None
    return ans


def abind(objects: Sequence[SVTArray], along: int, rtype) -> SVTArray:
    """Bind sparse arrays along dimension ``along`` (1-based).

    The result has type ``rtype``. All the objects must have the same number
    of dimensions and the same extents except along ``along``.
    """
    objects = list(objects)
    if not objects:
        raise ValueError("'objects' cannot be an empty list")
    if isinstance(along, bool) or not isinstance(along, int):
        raise TypeError("'along' must be a single positive integer")
    ans_rtype = rtype_from_string(rtype)
    along0 = along - 1
    first_dim = tuple(objects[0].dim)
    if not 0 <= along0 < len(first_dim):
        raise ValueError("'along' must be >= 1 and <= the number "
                         "of dimensions of the objects to bind")
    dims_along = []
    for obj in objects:
        dim = tuple(obj.dim)
        if len(dim) != len(first_dim):
            raise ValueError("all the objects to bind must have "
                             "the same number of dimensions")
        if any(a != b for k, (a, b) in enumerate(zip(dim, first_dim))
               if k != along0):
            raise ValueError("all the objects to bind must have the same "
                             "dimensions except along the binding dimension")
        dims_along.append(dim[along0])
    ans_dim = list(first_dim)
    ans_dim[along0] = sum(dims_along)
    svt = _rec_abind([obj.svt for obj in objects], ans_dim, len(ans_dim),
                     along0, dims_along, ans_rtype)
    return SVTArray(tuple(ans_dim), ans_rtype, svt)