from .reductions import (Norm, argmax, argmin, average, cumsum, deviation, max,
                         min, norm, prod, sum, variance)
from .sort import permute, sort_indices

__all__ = [
    "Norm",
    "argmax",
    "argmin",
    "average",
    "cumsum",
    "deviation",
    "max",
    "min",
    "norm",
    "permute",
    "prod",
    "sort_indices",
    "sum",
    "variance",
]
