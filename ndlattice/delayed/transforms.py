"""Structural transforms: delayed arrays that rearrange, select or combine
the elements of other arrays without copying them.
"""
from __future__ import annotations

import builtins
from bisect import bisect_right
from itertools import accumulate
from numbers import Integral
from typing import Any, Sequence

from ndlattice.arrays.base import Indexable
from ndlattice.arrays.delayed import DelayedArray, delay, make_delayed
from ndlattice.configuration import bound_checks_enabled
from ndlattice.core.shape import (Coords, add_coordinate, append_coordinate,
                                  change_coordinate, default_strides,
                                  linear_offset, prepend_coordinate,
                                  remove_coordinate, size, unravel)
from ndlattice.core.slices import Slice
from ndlattice.errors import LengthError, RangeError, shape_mismatch


def _check_axis(axis: int, ndim: int, action: str) -> None:
    if not 0 <= axis < ndim:
        raise IndexError(
            f"Cannot {action} axis {axis} of a {ndim}-dimensional array."
        )


def _choose_array(index, arrays: Sequence[Indexable]) -> Indexable:
    if not 0 <= index < len(arrays):
        raise RangeError(
            f"Selector {index} does not refer to one of {len(arrays)} arrays."
        )
    return arrays[index]


def reshape(array: Indexable, shape: Sequence[int]) -> DelayedArray:
    """View the elements of `array`, in row-major order, with a different
    shape holding the same number of elements.
    """
    shape = tuple(int(dim) for dim in shape)
    if size(shape) != array.size:
        raise LengthError(
            f"Cannot reshape array of shape {array.shape} (size {array.size}) "
            f"into shape {shape} (size {size(shape)})."
        )
    old_strides = default_strides(array.shape)
    new_strides = default_strides(shape)

    def source_coords(coords: Coords) -> Coords:
        return unravel(linear_offset(coords, new_strides), old_strides)

    read, write = array._get, array._put
    return make_delayed(
        shape,
        lambda coords: read(source_coords(coords)),
        setter=(lambda coords, value: write(source_coords(coords), value))
        if array.writable
        else None,
        dtype=array.dtype,
        sources=(array,),
    )


def roll(array: Indexable, shift: int, axis: int = 0) -> DelayedArray:
    """Shift elements along `axis` by `shift` positions, wrapping around at
    the ends.
    """
    _check_axis(axis, array.ndim, "roll")
    n = array.shape[axis]
    read = array._get

    def getter(coords: Coords) -> Any:
        return read(change_coordinate(coords, axis, (coords[axis] - shift) % n))

    return make_delayed(array.shape, getter, dtype=array.dtype, sources=(array,))


def slice(array: Indexable, index: int | Slice) -> DelayedArray:
    """With an integer, the subarray at `index` along the first axis (one
    dimension less). With a Slice, the region it describes.
    """
    if isinstance(index, Slice):
        return delay(array)[index]
    if not isinstance(index, Integral):
        raise TypeError(f"Cannot slice array with {type(index).__name__} object")
    if array.ndim == 0:
        raise IndexError("Cannot slice a 0-dimensional array.")
    if bound_checks_enabled() and not 0 <= index < array.shape[0]:
        raise RangeError(
            f"Slice index {index} is too large for axis 0 with size {array.shape[0]}."
        )
    read = array._get
    return make_delayed(
        array.shape[1:],
        lambda coords: read(prepend_coordinate(coords, index)),
        dtype=array.dtype,
        sources=(array,),
    )


def fix_dimension(array: Indexable, axis: int, index: int) -> DelayedArray:
    """Remove `axis` by fixing its coordinate to `index`. Writes go through
    to `array` when it is writable.
    """
    _check_axis(axis, array.ndim, "fix")
    if bound_checks_enabled() and not 0 <= index < array.shape[axis]:
        raise IndexError(
            f"Index {index} is out of bounds for axis {axis} with size "
            f"{array.shape[axis]}."
        )
    read, write = array._get, array._put
    return make_delayed(
        remove_coordinate(array.shape, axis),
        lambda coords: read(add_coordinate(coords, axis, index)),
        setter=(lambda coords, value: write(add_coordinate(coords, axis, index), value))
        if array.writable
        else None,
        dtype=array.dtype,
        sources=(array,),
    )


def stack(*arrays: Indexable) -> DelayedArray:
    """Stack arrays of identical shape along a new leading axis, whose
    coordinate selects the array.
    """
    if not arrays:
        raise ValueError("Need at least one array to stack.")
    shape = arrays[0].shape
    if bound_checks_enabled() and any(a.shape != shape for a in arrays[1:]):
        raise shape_mismatch("stack", *(a.shape for a in arrays))

    def getter(coords: Coords) -> Any:
        return _choose_array(coords[0], arrays)._get(coords[1:])

    return make_delayed(prepend_coordinate(shape, len(arrays)), getter, sources=arrays)


def concat(*arrays: Indexable, axis: int = 0) -> DelayedArray:
    """Join arrays along an existing axis. All other axes must agree."""
    if not arrays:
        raise ValueError("Need at least one array to concatenate.")
    first = arrays[0]
    _check_axis(axis, first.ndim, "concatenate along")
    if bound_checks_enabled() and any(
        a.ndim != first.ndim
        or remove_coordinate(a.shape, axis) != remove_coordinate(first.shape, axis)
        for a in arrays[1:]
    ):
        raise shape_mismatch("concatenate", *(a.shape for a in arrays))

    # upper end of each array along the concatenation axis
    ends = list(accumulate(a.shape[axis] for a in arrays))

    def getter(coords: Coords) -> Any:
        i = coords[axis]
        j = bisect_right(ends, i)
        start = ends[j - 1] if j > 0 else 0
        return _choose_array(j, arrays)._get(change_coordinate(coords, axis, i - start))

    return make_delayed(
        change_coordinate(first.shape, axis, ends[-1]), getter, sources=arrays
    )


def zip(a: Indexable, b: Indexable) -> DelayedArray:
    """Pair two arrays of the same shape along a new trailing axis of size 2:
    `zip(a, b)(*c, 0) == a(c)` and `zip(a, b)(*c, 1) == b(c)`.
    """
    if bound_checks_enabled() and a.shape != b.shape:
        raise shape_mismatch("zip", a.shape, b.shape)
    ndim = a.ndim
    read_a, read_b = a._get, b._get

    def getter(coords: Coords) -> Any:
        c = coords[:ndim]
        return read_a(c) if coords[ndim] == 0 else read_b(c)

    return make_delayed(append_coordinate(a.shape, 2), getter, sources=(a, b))


def shifted(array: Indexable, offset: Sequence[int], default: Any = 0) -> DelayedArray:
    """Element `c` of the result is element `c + offset` of `array`, or
    `default` where that lies outside of `array`.
    """
    offset = tuple(int(o) for o in offset)
    if len(offset) != array.ndim:
        raise shape_mismatch("shift", array.shape, offset)
    shape = array.shape
    read = array._get

    def getter(coords: Coords) -> Any:
        source = tuple(c + o for c, o in builtins.zip(coords, offset))
        if any(not 0 <= c < n for c, n in builtins.zip(source, shape)):
            return default
        return read(source)

    return make_delayed(shape, getter, dtype=array.dtype, sources=(array,))


def pad(array: Indexable, shape: Sequence[int], value: Any = 0) -> DelayedArray:
    """Centre `array` inside a larger `shape`, filling the border with
    `value`. When the extra space along an axis is odd, the border after the
    array is the larger one.
    """
    shape = tuple(int(dim) for dim in shape)
    inner = array.shape
    if len(shape) != array.ndim or any(
        new < old for new, old in builtins.zip(shape, inner)
    ):
        raise shape_mismatch("pad", inner, shape)
    before = [(new - old) // 2 for new, old in builtins.zip(shape, inner)]
    read = array._get

    def getter(coords: Coords) -> Any:
        source = tuple(c - b for c, b in builtins.zip(coords, before))
        if any(not 0 <= c < n for c, n in builtins.zip(source, inner)):
            return value
        return read(source)

    return make_delayed(shape, getter, dtype=array.dtype, sources=(array,))


def choose(index: Indexable, *arrays: Indexable) -> DelayedArray:
    """Element `c` of the result is element `c` of `arrays[index(c)]`."""
    if not arrays:
        raise ValueError("Need at least one array to choose from.")
    if bound_checks_enabled() and any(a.shape != index.shape for a in arrays):
        raise shape_mismatch("choose from", index.shape, *(a.shape for a in arrays))
    read_index = index._get

    def getter(coords: Coords) -> Any:
        return _choose_array(int(read_index(coords)), arrays)._get(coords)

    return make_delayed(index.shape, getter, sources=(index, *arrays))


def transpose(array: Indexable, axes: Sequence[int] | None = None) -> DelayedArray:
    """Permute the axes of `array`; by default reverse them. Axis `i` of the
    result is axis `axes[i]` of `array`.
    """
    ndim = array.ndim
    axes = tuple(reversed(range(ndim))) if axes is None else tuple(axes)
    if sorted(axes) != list(range(ndim)):
        raise ValueError(f"Axes {axes} are not a permutation of {ndim} axes.")
    shape = tuple(array.shape[axis] for axis in axes)

    def source_coords(coords: Coords) -> Coords:
        source = [0] * ndim
        for c, axis in builtins.zip(coords, axes):
            source[axis] = c
        return tuple(source)

    read, write = array._get, array._put
    return make_delayed(
        shape,
        lambda coords: read(source_coords(coords)),
        setter=(lambda coords, value: write(source_coords(coords), value))
        if array.writable
        else None,
        dtype=array.dtype,
        sources=(array,),
    )
