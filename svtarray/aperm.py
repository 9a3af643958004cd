"""Permutation of the dimensions of a sparse array, skipping the outer margin."""

from __future__ import annotations

from .core import rtype_from_string
from .permute import aperm0, perm_margins


def aperm(dim, rtype, svt, perm):
    """Permute the dimensions of the SVT of an array of dimensions ``dim``.

    Trailing dimensions that the permutation leaves in place are walked
    through rather than rebuilt.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    ndim = len(dim)
    _, _, outer_margin = perm_margins(dim, perm)
    perm = tuple(perm)
    if outer_margin == ndim or svt is None:
        return svt

    def rec(sub, n: int):
        if perm[n - 1] != n:
            return aperm0(dim[:n], rtype, sub, perm[:n])
        return [None if child is None else rec(child, n - 1) for child in sub]

    return rec(svt, ndim)