"""Elementwise functions. Each returns a delayed array applying a scalar
function to every element of its input when that element is read.
"""
from __future__ import annotations

import math
from typing import Any, Callable

import numpy as np

from ndlattice.arrays.base import Indexable
from ndlattice.arrays.delayed import DelayedArray
from ndlattice.core.loops import update_each

from .arithmetic import binary, check_same_shape, unary


def map(array: Indexable, function: Callable[[Any], Any], dtype=None) -> DelayedArray:
    """Apply `function` to every element of `array`."""
    return unary(function, array, dtype=dtype)


def astype(array: Indexable, dtype) -> DelayedArray:
    dtype = np.dtype(dtype)
    return unary(dtype.type, array, dtype=dtype)


def abs(array: Indexable) -> DelayedArray:
    return unary(np.abs, array, dtype=array.dtype)


def sqrt(array: Indexable) -> DelayedArray:
    return unary(np.sqrt, array)


def exp(array: Indexable) -> DelayedArray:
    return unary(np.exp, array)


def log(array: Indexable) -> DelayedArray:
    return unary(np.log, array)


def power(array: Indexable, exponent) -> DelayedArray:
    return unary(lambda value: value ** exponent, array)


def sin(array: Indexable) -> DelayedArray:
    return unary(np.sin, array)


def cos(array: Indexable) -> DelayedArray:
    return unary(np.cos, array)


def tan(array: Indexable) -> DelayedArray:
    return unary(np.tan, array)


def arcsin(array: Indexable) -> DelayedArray:
    return unary(np.arcsin, array)


def arccos(array: Indexable) -> DelayedArray:
    return unary(np.arccos, array)


def arctan(array: Indexable) -> DelayedArray:
    return unary(np.arctan, array)


def sinh(array: Indexable) -> DelayedArray:
    return unary(np.sinh, array)


def cosh(array: Indexable) -> DelayedArray:
    return unary(np.cosh, array)


def tanh(array: Indexable) -> DelayedArray:
    return unary(np.tanh, array)


def arctan2(y: Indexable | float, x: Indexable | float) -> DelayedArray:
    """Angle of the point (x, y) in radians, element by element."""
    return binary(np.arctan2, y, x, "take the arctangent of")


def ceil(array: Indexable) -> DelayedArray:
    return unary(np.ceil, array)


def floor(array: Indexable) -> DelayedArray:
    return unary(np.floor, array)


def _round_half_away(value):
    return np.copysign(np.floor(np.abs(value) + 0.5), value)


def round(array: Indexable) -> DelayedArray:
    """Round to the nearest integer, halfway cases away from zero (unlike
    `numpy.round`, which rounds them to even).
    """
    return unary(_round_half_away, array)


def fmod(array: Indexable, divisor: float) -> DelayedArray:
    """Remainder with the sign of the dividend."""
    return unary(lambda value: np.fmod(value, divisor), array)


def remainder(array: Indexable, divisor: float) -> DelayedArray:
    """IEEE 754 remainder: `value - n * divisor` where `n` is the integer
    nearest to `value / divisor`.
    """
    return unary(lambda value: math.remainder(value, divisor), array)


def maximum(array: Indexable, other: Indexable | float) -> DelayedArray:
    """Elementwise maximum with another array or a scalar."""
    return binary(np.maximum, array, other, "take the maximum of", dtype=array.dtype)


def minimum(array: Indexable, other: Indexable | float) -> DelayedArray:
    return binary(np.minimum, array, other, "take the minimum of", dtype=array.dtype)


def transform(array: Indexable, *args) -> Indexable:
    """Modify a writable array in place.

    `transform(a, f)` replaces every element `x` of `a` with `f(x)`;
    `transform(a, b, f)` replaces it with `f(x, y)`, where `y` is the element
    of `b` at the same coordinates.
    """
    array._check_writable()
    if len(args) == 1:
        (function,) = args
        update_each(array, lambda coords, value: function(value))
    elif len(args) == 2:
        other, function = args
        check_same_shape("transform", array, other)
        read = array._reader(other)
        update_each(array, lambda coords, value: function(value, read(coords)))
    else:
        raise TypeError(
            f"transform() takes an array and a function, optionally with a "
            f"second array in between ({len(args) + 1} arguments given)"
        )
    return array
