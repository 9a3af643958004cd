# svtarray

`svtarray` stores sparse multidimensional arrays as *sparse vector trees*
(SVTs). It is a pure-Python library with no dependencies.

## The representation

- An SVT is `None` when the array holds no nonzero value.
- A one-dimensional SVT is a `Leaf`. A leaf has `nzoffs`, the offsets of its
  nonzero elements in ascending order, and `nzvals`, their values. A leaf
  whose nonzero values are all one may be *lacunar*: its `nzvals` is `None`.
  `Leaf.values(rtype)` gives the values with the ones filled in.
- An SVT with `n >= 2` dimensions is a list whose length is the extent of
  the last dimension. Its elements are SVTs with `n - 1` dimensions.

Dense data is in column-major order, so the first index varies fastest.
Element types are the members of `RType`: `LOGICAL`, `INTEGER`, `DOUBLE`,
`COMPLEX`, `RAW`, `CHARACTER` and `LIST`. Every function that takes a type
accepts either an `RType` or its name, for example `"double"`.
`rtype_from_string` turns a name into an `RType`.

## Modules

- `svtarray.core`: `RType`, `Leaf`, `SVTArray` (dimensions, type and SVT,
  with `SVTArray.from_dense` and `SVTArray.to_dense`), `dense_to_svt`,
  `svt_to_dense`, `leaf_from_dense`, `leaf_to_dense`, and the helpers
  `zero_value`, `one_value`, `is_zero` and `is_na`.
- `svtarray.abind`: `abind(objects, along, rtype)` binds `SVTArray` objects
  along a dimension (1-based) and returns a new `SVTArray`.
- `svtarray.transpose`: `transpose_2d(dim, rtype, svt)` transposes a matrix.
- `svtarray.permute`: `check_perm`, `perm_margins` and
  `aperm0(dim, rtype, svt, perm)`, which permutes the dimensions for any
  1-based permutation. When the first dimension stays in place, the leaves
  of the input are reused.
- `svtarray.aperm`: `aperm(dim, rtype, svt, perm)`, the same permutation.
  Trailing dimensions that stay in place are walked through and not rebuilt.
- `svtarray.dim_tuning`: `tune_dims(dim, rtype, svt, dim_tuner)` adds
  dimensions of extent 1 (`1`), keeps dimensions (`0`) or drops dimensions
  of extent 1 (`-1`). `dim_tuner_is_normalized` checks that no `1` and `-1`
  are direct neighbours.
- `svtarray.misc`: `apply_is_fun(dim, rtype, svt, is_fun)` with `"is.na"`,
  `"is.nan"` or `"is.infinite"`. It returns a logical SVT, or `None` where
  the type cannot hold such values.
- `svtarray.ops`: `ArithOp`, `CompareOp` and `LogicOp`, and the functions
  `unary_minus`, `arith_svt_scalar` (`*`, `/`, `^`, `%%`, `%/%`),
  `compare_svt_scalar`, `arith_svts` (`+`, `-`, `*`), `compare_svts`
  (`!=`, `<`, `>`) and `logic_svts` (`&`, `|`). Missing values are `None`.
  Integer overflow gives `None` and a `RuntimeWarning`.
- `svtarray.subassign_lindex`: `subassign_by_lindex` assigns by 1-based
  linear indices. When an index repeats, the last value wins. It can treat
  NA as the background value. `subassign_by_mindex` assigns by a matrix
  given as rows of 1-based coordinates.
- `svtarray.subassign_nindex`: `subassign_with_short_vector` assigns a short
  vector, recycled along the first dimension, to a selection. The selection
  has one index sequence per dimension, or `None` for the whole dimension.

## Example

```python
from svtarray.core import SVTArray, rtype_from_string
from svtarray.transpose import transpose_2d

rtype = rtype_from_string("double")
x = SVTArray.from_dense([0.0, 1.5, 0.0, 0.0, 2.0, 0.0], (3, 2), rtype)

t = SVTArray(dim=(2, 3), rtype=rtype, svt=transpose_2d(x.dim, rtype, x.svt))
print(t.to_dense())  # [0.0, 0.0, 1.5, 2.0, 0.0, 0.0]
```

The operations do not modify their input trees. A result may share the
leaves or subtrees that it leaves unchanged, and it may return the input
itself when nothing changes. Bad arguments raise `ValueError` or
`TypeError`. Indices out of bounds raise `IndexError`.

## What it does not do

- There is no command-line tool and no file format for storing arrays.
- It has no row or column summaries (sums, counts of NAs and the like).
- It cannot assign a dense array or another sparse array into a selection.
- `subassign_by_lindex` does not support an NA background on
  one-dimensional arrays. It raises `NotImplementedError`.

## Installation and tests

```
pip install .
pip install .[test]
pytest
```