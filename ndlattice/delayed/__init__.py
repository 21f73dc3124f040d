from .broadcasting import broadcast_shapes, divide_inplace, widen, widen_right
from .comparisons import all, any
from .maps import (abs, arccos, arcsin, arctan, arctan2, astype, ceil, cos,
                   cosh, exp, floor, fmod, log, map, maximum, minimum, power,
                   remainder, round, sin, sinh, sqrt, tan, tanh, transform)
from .ranges import (arange, constants, constants_like, identity, linspace,
                     litarray, ones, ones_like, zeros, zeros_like)
from .transforms import (choose, concat, fix_dimension, pad, reshape, roll,
                         shifted, slice, stack, transpose, zip)

__all__ = [
    "abs",
    "all",
    "any",
    "arange",
    "arccos",
    "arcsin",
    "arctan",
    "arctan2",
    "astype",
    "broadcast_shapes",
    "ceil",
    "choose",
    "concat",
    "constants",
    "constants_like",
    "cos",
    "cosh",
    "divide_inplace",
    "exp",
    "fix_dimension",
    "floor",
    "fmod",
    "identity",
    "linspace",
    "litarray",
    "log",
    "map",
    "maximum",
    "minimum",
    "ones",
    "ones_like",
    "pad",
    "power",
    "remainder",
    "reshape",
    "roll",
    "round",
    "shifted",
    "sin",
    "sinh",
    "slice",
    "sqrt",
    "stack",
    "tan",
    "tanh",
    "transform",
    "transpose",
    "widen",
    "widen_right",
    "zeros",
    "zeros_like",
    "zip",
]
