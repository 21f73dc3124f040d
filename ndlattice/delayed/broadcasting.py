"""Broadcasting: operate on arrays of different rank by repeating the
lower-rank operand along extra leading axes.

The plain operators (`a + b`, ...) require equal shapes. The functions in
this module align shapes on their trailing axes first, like NumPy, except
that existing axes are never stretched: `(3, 4, 5)` and `(4, 5)` broadcast,
`(3, 4, 5)` and `(1, 5)` do not.

Example:
    >>> m = ones((3, 4, 5))
    >>> v = ones((4, 5))
    >>> add(m, v).shape
    (3, 4, 5)
"""
from __future__ import annotations

import operator
from typing import Any, Sequence

import numpy as np

from ndlattice.arrays.base import Indexable
from ndlattice.arrays.delayed import DelayedArray, make_delayed
from ndlattice.configuration import bound_checks_enabled
from ndlattice.errors import shape_mismatch

from .arithmetic import binary


def widen(shape: Sequence[int], array: Indexable) -> Indexable:
    """Repeat `array` along new leading axes so that it takes `shape`. The
    trailing axes of `shape` must equal the shape of `array`.
    """
    shape = tuple(int(dim) for dim in shape)
    extra = len(shape) - array.ndim
    if extra < 0 or (bound_checks_enabled() and shape[extra:] != array.shape):
        raise shape_mismatch("broadcast", array.shape, shape)
    if extra == 0:
        return array
    read = array._get
    return make_delayed(
        shape,
        lambda coords: read(coords[extra:]),
        dtype=array.dtype,
        sources=(array,),
    )


def widen_right(shape: Sequence[int], array: Indexable) -> Indexable:
    """Repeat `array` along new trailing axes so that it takes `shape`. The
    leading axes of `shape` must equal the shape of `array`.
    """
    shape = tuple(int(dim) for dim in shape)
    ndim = array.ndim
    if len(shape) < ndim or (bound_checks_enabled() and shape[:ndim] != array.shape):
        raise shape_mismatch("right-broadcast", array.shape, shape)
    if len(shape) == ndim:
        return array
    read = array._get
    return make_delayed(
        shape,
        lambda coords: read(coords[:ndim]),
        dtype=array.dtype,
        sources=(array,),
    )


def broadcast_shapes(*shapes: Sequence[int]) -> tuple[int, ...]:
    """The shape that all `shapes` broadcast to: the longest one, provided
    that every other shape is a suffix of it.
    """
    shapes = [tuple(shape) for shape in shapes]
    result = max(shapes, key=len, default=())
    for shape in shapes:
        if len(shape) and result[len(result) - len(shape):] != shape:
            raise shape_mismatch("broadcast", *shapes)
    return result


def _broadcast(op, left: Indexable | Any, right: Indexable | Any, name: str, dtype=None) -> DelayedArray:
    if isinstance(left, Indexable) and isinstance(right, Indexable):
        shape = broadcast_shapes(left.shape, right.shape)
        left, right = widen(shape, left), widen(shape, right)
    return binary(op, left, right, name, dtype=dtype)


def add(a, b) -> DelayedArray:
    return _broadcast(operator.add, a, b, "add")


def subtract(a, b) -> DelayedArray:
    return _broadcast(operator.sub, a, b, "subtract")


def multiply(a, b) -> DelayedArray:
    return _broadcast(operator.mul, a, b, "multiply")


def divide(a, b) -> DelayedArray:
    return _broadcast(operator.truediv, a, b, "divide")


def equal(a, b) -> DelayedArray:
    return _broadcast(operator.eq, a, b, "compare", dtype=np.bool_)


def not_equal(a, b) -> DelayedArray:
    return _broadcast(operator.ne, a, b, "compare", dtype=np.bool_)


def less(a, b) -> DelayedArray:
    return _broadcast(operator.lt, a, b, "compare", dtype=np.bool_)


def less_equal(a, b) -> DelayedArray:
    return _broadcast(operator.le, a, b, "compare", dtype=np.bool_)


def greater(a, b) -> DelayedArray:
    return _broadcast(operator.gt, a, b, "compare", dtype=np.bool_)


def greater_equal(a, b) -> DelayedArray:
    return _broadcast(operator.ge, a, b, "compare", dtype=np.bool_)


def divide_inplace(numerator: Indexable, denominator: Indexable) -> Indexable:
    """Divide a writable array in place by an array of lower or equal rank,
    e.g. every row of a matrix by the same vector.
    """
    numerator /= widen(numerator.shape, denominator)
    return numerator
