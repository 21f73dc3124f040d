"""Reductions and statistics. Reducing over every element returns a scalar
computed immediately; reducing along one axis returns a delayed array with
that axis removed, each element of which is reduced when it is read.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable

from ndlattice.arrays.base import Indexable, element_dtype
from ndlattice.arrays.delayed import DelayedArray, immediate, make_delayed
from ndlattice.arrays.immediate import ImmediateArray
from ndlattice.core.loops import for_each
from ndlattice.core.shape import Coords, add_coordinate, change_coordinate, remove_coordinate
from ndlattice.delayed import maps


class Norm(Enum):
    """Norms available to `norm`."""

    # maximum of the absolute values
    INFINITY = "inf"


def _check_axis(array: Indexable, axis: int) -> None:
    if not 0 <= axis < array.ndim:
        raise IndexError(
            f"Cannot reduce axis {axis} of a {array.ndim}-dimensional array."
        )


def _reduce(array: Indexable, function: Callable[[Any, Any], Any], initial: Any) -> Any:
    total = initial

    def accumulate(coords: Coords, value: Any) -> None:
        nonlocal total
        total = function(total, value)

    for_each(array, accumulate)
    return total


def _reduce_axis(
    array: Indexable,
    axis: int,
    function: Callable[[Any, Any], Any],
    initial: Any,
) -> DelayedArray:
    _check_axis(array, axis)
    n = array.shape[axis]
    read = array._get

    def getter(coords: Coords) -> Any:
        path = add_coordinate(coords, axis, 0)
        total = initial
        for i in range(n):
            total = function(total, read(change_coordinate(path, axis, i)))
        return total

    return make_delayed(remove_coordinate(array.shape, axis), getter, sources=(array,))


def sum(array: Indexable, axis: int | None = None):
    """Sum of all elements, or a delayed array of sums along `axis`."""
    add = lambda total, value: total + value
    if axis is None:
        return _reduce(array, add, 0)
    return _reduce_axis(array, axis, add, 0)


def prod(array: Indexable, axis: int | None = None):
    multiply = lambda total, value: total * value
    if axis is None:
        return _reduce(array, multiply, 1)
    return _reduce_axis(array, axis, multiply, 1)


def average(array: Indexable, axis: int | None = None):
    if axis is None:
        if array.size == 0:
            raise ValueError("Cannot average an empty array.")
        return sum(array) / array.size
    _check_axis(array, axis)
    n = array.shape[axis]
    if n == 0:
        raise ValueError(f"Cannot average along axis {axis} of size 0.")
    return sum(array, axis) / n


def variance(array: Indexable, axis: int | None = None, bessel_correction: bool = False):
    """Sample variance, computed with a two-pass formula.

    With `bessel_correction`, the sum of squared deviations is divided by
    N - 1 (as in Matlab), otherwise by N (as in NumPy). Along an axis, the
    averages are computed and stored when this function is called.
    """
    if axis is None:
        if bessel_correction and array.size == 1:
            raise ValueError("Cannot apply Bessel's correction to a single sample.")
        avg = average(array)
        squares = _reduce(array, lambda total, value: total + (value - avg) ** 2, 0)
        return squares / (array.size - 1 if bessel_correction else array.size)

    _check_axis(array, axis)
    n = array.shape[axis]
    if bessel_correction and n == 1:
        raise ValueError(
            f"Cannot apply Bessel's correction along axis {axis} of size 1."
        )
    avg = immediate(average(array, axis))
    divisor = n - 1 if bessel_correction else n
    read, read_avg = array._get, avg._get

    def getter(coords: Coords) -> Any:
        path = add_coordinate(coords, axis, 0)
        mean = read_avg(coords)
        squares = 0
        for i in range(n):
            squares += (read(change_coordinate(path, axis, i)) - mean) ** 2
        return squares / divisor

    return make_delayed(avg.shape, getter, sources=(array, avg))


def deviation(array: Indexable, axis: int | None = None, bessel_correction: bool = False):
    """Standard deviation, the square root of `variance`."""
    if axis is None:
        return math.sqrt(variance(array, bessel_correction=bessel_correction))
    return maps.sqrt(variance(array, axis, bessel_correction))


def _argbest(array: Indexable, better: Callable[[Any, Any], bool]) -> Coords:
    if array.size == 0:
        raise ValueError("Cannot search an empty array.")
    best_coords: Coords | None = None
    best_value = None

    def visit(coords: Coords, value: Any) -> None:
        nonlocal best_coords, best_value
        if best_coords is None or better(value, best_value):
            best_coords, best_value = coords, value

    for_each(array, visit)
    return best_coords


def argmax(array: Indexable) -> Coords:
    """Coordinates of the first occurrence of the largest element."""
    return _argbest(array, lambda value, best: value > best)


def argmin(array: Indexable) -> Coords:
    """Coordinates of the first occurrence of the smallest element."""
    return _argbest(array, lambda value, best: value < best)


def max(array: Indexable):
    return array._get(argmax(array))


def min(array: Indexable):
    return array._get(argmin(array))


def norm(array: Indexable, kind: Norm = Norm.INFINITY):
    if kind is Norm.INFINITY:
        return max(maps.abs(array))
    raise ValueError(f"Unsupported norm {kind!r}")


def cumsum(array: Indexable, axis: int = 0) -> ImmediateArray:
    """Cumulative sum along `axis`, stored in a new immediate array. Every
    element is computed from the previous one along the axis, which has
    already been written since elements are filled in row-major order.
    """
    _check_axis(array, axis)
    result = ImmediateArray(array.shape, element_dtype(array))
    read, read_result = array._get, result._get

    def getter(coords: Coords) -> Any:
        if coords[axis] == 0:
            return read(coords)
        previous = change_coordinate(coords, axis, coords[axis] - 1)
        return read_result(previous) + read(coords)

    result.assign(make_delayed(array.shape, getter, sources=(array,)))
    return result
