"""Sparse multidimensional arrays stored as sparse vector trees."""

__version__ = "0.1.0"
__all__ = [
    "core",
    "abind",
    "transpose",
    "misc",
    "dim_tuning",
    "permute",
    "aperm",
    "ops",
    "subassign_lindex",
    "subassign_nindex",
]