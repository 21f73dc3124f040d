# dependencies
import ndlattice.logger

from ndlattice.errors import DimensionMismatch, LengthError, RangeError
from ndlattice.core import ArrayIterator, Slice, all_of, any_of, for_each
from ndlattice.arrays import (Buffer, DelayedArray, ImmediateArray, Indexable,
                              delay, immediate, make_delayed)
from ndlattice.delayed import (abs, all, any, arange, arccos, arcsin, arctan,
                               arctan2, astype, broadcast_shapes, ceil, choose,
                               concat, constants, constants_like, cos, cosh,
                               divide_inplace, exp, fix_dimension, floor, fmod,
                               identity, linspace, litarray, log, map, maximum,
                               minimum, ones, ones_like, pad, power, remainder,
                               reshape, roll, round, shifted, sin, sinh, slice,
                               sqrt, stack, tan, tanh, transform, transpose,
                               widen, widen_right, zeros, zeros_like, zip)
from ndlattice.numerics import (Norm, argmax, argmin, average, cumsum,
                                deviation, max, min, norm, permute, prod,
                                sort_indices, sum, variance)

__all__ = [
    "ArrayIterator",
    "Buffer",
    "DelayedArray",
    "DimensionMismatch",
    "ImmediateArray",
    "Indexable",
    "LengthError",
    "Norm",
    "RangeError",
    "Slice",
    "abs",
    "all",
    "all_of",
    "any",
    "any_of",
    "arange",
    "arccos",
    "arcsin",
    "arctan",
    "arctan2",
    "argmax",
    "argmin",
    "astype",
    "average",
    "broadcast_shapes",
    "ceil",
    "choose",
    "concat",
    "constants",
    "constants_like",
    "cos",
    "cosh",
    "cumsum",
    "delay",
    "deviation",
    "divide_inplace",
    "exp",
    "fix_dimension",
    "floor",
    "fmod",
    "for_each",
    "identity",
    "immediate",
    "linspace",
    "litarray",
    "log",
    "make_delayed",
    "map",
    "max",
    "maximum",
    "min",
    "minimum",
    "norm",
    "ones",
    "ones_like",
    "pad",
    "permute",
    "power",
    "prod",
    "remainder",
    "reshape",
    "roll",
    "round",
    "shifted",
    "sin",
    "sinh",
    "slice",
    "sort_indices",
    "sqrt",
    "stack",
    "sum",
    "tan",
    "tanh",
    "transform",
    "transpose",
    "variance",
    "widen",
    "widen_right",
    "zeros",
    "zeros_like",
    "zip",
]
