"""Builders for elementwise expressions. The operators of every array
(`a + b`, `a < 3`, `-a`, ...) end up here; nothing is evaluated until an
element of the result is read.
"""
from __future__ import annotations

from typing import Any, Callable

import numpy as np

from ndlattice.arrays.base import Indexable
from ndlattice.arrays.delayed import DelayedArray, make_delayed
from ndlattice.configuration import bound_checks_enabled
from ndlattice.errors import shape_mismatch


def check_same_shape(name: str, *arrays: Indexable) -> None:
    if not bound_checks_enabled():
        return
    shapes = [tuple(array.shape) for array in arrays]
    if any(shape != shapes[0] for shape in shapes[1:]):
        raise shape_mismatch(name, *shapes)


def binary(
    op: Callable[[Any, Any], Any],
    left: Indexable | Any,
    right: Indexable | Any,
    name: str,
    dtype: np.dtype | None = None,
) -> DelayedArray:
    """Combine two arrays of equal shape, or an array and a scalar, element
    by element with `op`. Mismatched shapes are reported here, before any
    element is computed.
    """
    if isinstance(left, Indexable) and isinstance(right, Indexable):
        check_same_shape(name, left, right)
        read_left, read_right = left._get, right._get
        getter = lambda coords: op(read_left(coords), read_right(coords))
        shape = left.shape
    elif isinstance(left, Indexable):
        read_left = left._get
        getter = lambda coords: op(read_left(coords), right)
        shape = left.shape
    elif isinstance(right, Indexable):
        read_right = right._get
        getter = lambda coords: op(left, read_right(coords))
        shape = right.shape
    else:
        raise TypeError("At least one operand must be an array.")
    return make_delayed(shape, getter, dtype=dtype, sources=(left, right))


def unary(
    op: Callable[[Any], Any],
    array: Indexable,
    dtype: np.dtype | None = None,
) -> DelayedArray:
    read = array._get
    return make_delayed(
        array.shape, lambda coords: op(read(coords)), dtype=dtype, sources=(array,)
    )
