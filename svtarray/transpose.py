"""Transposition of two-dimensional sparse arrays."""

from __future__ import annotations

from .core import _make_leaf, rtype_from_string


def transpose_2d(dim, rtype, svt):
    """Transpose the SVT of a matrix of dimensions ``dim`` = (nrow, ncol).

    Returns the SVT of the ``ncol`` x ``nrow`` transposed matrix.
    """
    rtype = rtype_from_string(rtype)
    dim = tuple(dim)
    if len(dim) != 2:
        raise ValueError("object to transpose must have exactly 2 dimensions")
    if svt is None:
        return None
    nrow, ncol = dim
    if not isinstance(svt, list) or len(svt) != ncol:
        raise ValueError("SVT does not match the supplied dimensions")
    row_offs: list = [[] for _ in range(nrow)]
    row_vals: list = [[] for _ in range(nrow)]
    for j, leaf in enumerate(svt):
        if leaf is None:
            continue
        for off, value in zip(leaf.nzoffs, leaf.values(rtype)):
            if not 0 <= off < nrow:
                raise ValueError(f"leaf offset {off} is out of bounds")
            row_offs[off].append(j)
            row_vals[off].append(value)
    return [_make_leaf(vals, offs, rtype)
            for vals, offs in zip(row_vals, row_offs)]