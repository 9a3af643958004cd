"""Permutation of the dimensions of a sparse array, for any permutation.

The inner and outer margins of a permutation are the number of leading and
trailing dimensions that it leaves in place. For the identity permutation
both margins equal the number of dimensions.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from .core import Leaf, RType, _make_leaf, rtype_from_string


def check_perm(perm, ndim: int) -> tuple:
    """Validate a 1-based permutation of ``ndim`` dimensions; return it as a tuple."""
    perm = tuple(perm)
    if any(isinstance(p, bool) or not isinstance(p, int) for p in perm):
        raise TypeError("'perm' must be an integer vector")
    if len(perm) != ndim:
        raise ValueError("'length(perm)' not equal to number "
                         "of dimensions of array to permute")
    seen = set()
    for p in perm:
        if not 1 <= p <= ndim:
            raise ValueError("invalid 'perm' argument")
        if p in seen:
            raise ValueError("'perm' cannot contain duplicates")
        seen.add(p)
    return perm


def perm_margins(dim, perm) -> tuple:
    """Return ``(ans_dim, inner_margin, outer_margin)`` for permuting ``dim``."""
    dim = tuple(dim)
    ndim = len(dim)
    perm = check_perm(perm, ndim)
    ans_dim = tuple(dim[p - 1] for p in perm)
    moved = [along for along, p in enumerate(perm) if p - 1 != along]
    if not moved:
        return ans_dim, ndim, ndim
    return ans_dim, moved[0], ndim - (moved[-1] + 1)


def _iter_subtrees(svt, ndim: int, inner_margin: int,
                   outer: tuple = ()) -> Iterator[tuple]:
    """Yield ``(coords, subsvt)`` for the non-empty inner_margin-D sub-SVTs.

    ``coords`` holds the coordinates along dimensions ``inner_margin`` to
    ``ndim - 1`` (0-based) of the original array.
    """
    for i, sub in enumerate(svt):
        if sub is None:
            continue
        coords = (i,) + outer
        if ndim > inner_margin + 1:
            yield from _iter_subtrees(sub, ndim - 1, inner_margin, coords)
        else:
            yield coords, sub


def _preserving_leaves(svt, ndim: int, perm: tuple, ans_dim: tuple,
                       inner_margin: int) -> list:
    ans: list = [None] * ans_dim[ndim - 1]
    for coords, sub in _iter_subtrees(svt, ndim, inner_margin):
        node = ans
        for along in range(ndim - 1, inner_margin, -1):
            i = coords[perm[along] - 1 - inner_margin]
            if node[i] is None:
                node[i] = [None] * ans_dim[along - 1]
            node = node[i]
        i = coords[perm[inner_margin] - 1 - inner_margin]
        if node[i] is not None:
            raise RuntimeError("graft spot is already taken")
        node[i] = sub
    return ans


def _iter_nonzeros(svt, ndim: int, rtype: RType,
                   outer: tuple = ()) -> Iterator[tuple]:
    """Yield ``(coords, value)`` for every nonzero element, outermost first."""
    if svt is None:
        return
    if ndim == 1:
        for off, value in zip(svt.nzoffs, svt.values(rtype)):
            yield (off,) + outer, value
        return
    for i, sub in enumerate(svt):
        yield from _iter_nonzeros(sub, ndim - 1, rtype, (i,) + outer)


def _shattering_leaves(svt, ndim: int, rtype: RType, perm: tuple,
                       ans_dim: tuple):
    groups: dict = {}
    for coords, value in _iter_nonzeros(svt, ndim, rtype):
        out = tuple(coords[p - 1] for p in perm)
        offs, vals = groups.setdefault(out[1:], ([], []))
        # Traversal order makes the offsets of each output leaf ascending.
        offs.append(out[0])
        vals.append(value)
    if not groups:
        return None
    ans: list = [None] * ans_dim[ndim - 1]
    for key, (offs, vals) in groups.items():
        node = ans
        for along in range(ndim - 1, 1, -1):
            i = key[along - 1]
            if node[i] is None:
                node[i] = [None] * ans_dim[along - 1]
            node = node[i]
        leaf: Leaf = _make_leaf(vals, offs, rtype)
        node[key[0]] = leaf
    return ans


def aperm0(dim, rtype, svt, perm):
    """Permute the dimensions of the SVT of an array of dimensions ``dim``.

    When the first dimension stays in place the leaves of ``svt`` are reused
    as they are; otherwise entirely new leaves are built.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    ndim = len(dim)
    ans_dim, inner_margin, outer_margin = perm_margins(dim, perm)
    perm = tuple(perm)
    if outer_margin == ndim or svt is None:
        return svt
    if perm[0] == 1:
        return _preserving_leaves(svt, ndim, perm, ans_dim, inner_margin)
    return _shattering_leaves(svt, ndim, rtype, perm, ans_dim)