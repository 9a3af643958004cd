"""Subassignment of a sparse array with a short vector, by N-index.

An N-index holds one entry per dimension: a sequence of 1-based coordinates
along that dimension, or ``None`` to select the whole dimension. The selected
elements receive the values of a short vector, recycled along the first
dimension. The number of coordinates selected along the first dimension must
be a multiple of the vector's length.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .core import (
    Leaf,
    RType,
    leaf_from_dense,
    leaf_to_dense,
    rtype_from_string,
    zero_value,
)


def _coord0(coord, extent: int) -> int:
    """Return the 0-based position of a 1-based coordinate, validated."""
    if (coord is None or isinstance(coord, bool) or not isinstance(coord, int)
            or not 1 <= coord <= extent):
        raise IndexError("subscript contains out-of-bound indices or NAs")
    return coord - 1


class _LeafAssigner:
    """Assigns the recycled short vector to the selected positions of a leaf."""

    def __init__(self, dim0: int, index0: Optional[Sequence[int]],
                 vector: list, rtype: RType) -> None:
        self.rtype = rtype
        self.dim0 = dim0
        self.vector = vector
        short_len = len(vector)
        if index0 is None:
            self.positions = None
            dense = [vector[i % short_len] for i in range(dim0)]
            self.full_replacement = True
        else:
            self.positions = [_coord0(c, dim0) for c in index0]
            dense = [zero_value(rtype)] * dim0
            for i2, i1 in enumerate(self.positions):
                dense[i1] = vector[i2 % short_len]
            self.full_replacement = len(set(self.positions)) == dim0
        self.precomputed = leaf_from_dense(dense, rtype)

    def __call__(self, leaf: Optional[Leaf]) -> Optional[Leaf]:
        if self.full_replacement or leaf is None:
            return self.precomputed
        dense = leaf_to_dense(leaf, self.dim0, self.rtype)
        short_len = len(self.vector)
        for i2, i1 in enumerate(self.positions):
            dense[i1] = self.vector[i2 % short_len]
        return leaf_from_dense(dense, self.rtype)


def _rec_subassign(svt, dim: tuple, ndim: int, nindex: list,
                   assign: _LeafAssigner):
    d1 = dim[ndim - 1]
    node = [None] * d1 if svt is None else list(svt)
    if len(node) != d1:
        raise ValueError("SVT does not match the supplied dimensions")
    index = nindex[ndim - 1]
    selected = range(d1) if index is None else (_coord0(c, d1) for c in index)
    for i1 in selected:
        if ndim == 2:
            node[i1] = assign(node[i1])
        else:
            node[i1] = _rec_subassign(node[i1], dim, ndim - 1, nindex, assign)
    if all(elt is None for elt in node):
        return None
    return node


def subassign_with_short_vector(dim, rtype, svt, nindex, vector):
    """Return the SVT of ``x`` after ``x[nindex] <- vector``.

    ``vector`` must be non-empty and is recycled along the first dimension.
    The input SVT is left untouched.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    ndim = len(dim)
    if ndim == 0:
        raise ValueError("'dim' cannot be empty")
    nindex = [None if idx is None else list(idx) for idx in nindex]
    if len(nindex) != ndim:
        raise ValueError("incorrect number of subscripts")
    if any(d == 0 for d in dim):
        return svt
    vector = list(vector)
    index0 = nindex[0]
    if not vector:
        raise ValueError("invalid short vector length")
    if index0 is not None and len(index0) % len(vector) != 0:
        raise ValueError("invalid short vector length")
    assign = _LeafAssigner(dim[0], index0, vector, rtype)
    if ndim == 1:
        return assign(svt)
    return _rec_subassign(svt, dim, ndim, nindex, assign)