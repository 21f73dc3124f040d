"""Pure shape, stride and coordinate arithmetic.

Shapes, strides and coordinates are plain tuples of ints. Strides are
counted in elements (not bytes) and may be negative. Every function here
also works for rank 0, where the only coordinate is `()` and its offset is 0.
"""
from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np
from numba import njit
from nptyping import NDArray

from ndlattice.configuration import bound_checks_enabled

Shape = tuple[int, ...]
Strides = tuple[int, ...]
Coords = tuple[int, ...]


def size(shape: Sequence[int]) -> int:
    return math.prod(shape)


def default_strides(shape: Sequence[int]) -> Strides:
    """Row-major strides: the last axis has stride 1, every other axis has
    the stride of the next axis times the size of the next axis.
    """
    strides = [0] * len(shape)
    prev = 1
    for i in reversed(range(len(shape))):
        strides[i] = prev
        prev *= shape[i]
    return tuple(strides)


def linear_offset(coords: Sequence[int], strides: Sequence[int]) -> int:
    offset = 0
    for coord, stride in zip(coords, strides):
        offset += coord * stride
    return offset


def unravel(index: int, strides: Sequence[int]) -> Coords:
    """Inverse of `linear_offset` for default (row-major) strides."""
    coords = []
    for stride in strides:
        if stride == 0:
            # only happens for shapes containing a zero-length axis
            coords.append(0)
            continue
        coords.append(index // stride)
        index %= stride
    return tuple(coords)


def is_contiguous(shape: Sequence[int], strides: Sequence[int]) -> bool:
    expected = 1
    for dim, stride in zip(reversed(shape), reversed(strides)):
        if stride != expected:
            return False
        expected *= dim
    return True


def normalize_coordinates(coords: tuple) -> Coords:
    """Accept both `a(i, j)` and `a((i, j))` call styles."""
    if len(coords) == 1 and isinstance(coords[0], (tuple, list, np.ndarray)):
        coords = coords[0]
    return tuple(int(coord) for coord in coords)


def check_coordinates(coords: Coords, shape: Shape) -> None:
    if not bound_checks_enabled():
        return
    if len(coords) != len(shape):
        raise IndexError(
            f"Invalid number of coordinates: array is {len(shape)}-dimensional, "
            f"but {len(coords)} coordinates were given."
        )
    for axis, (coord, dim) in enumerate(zip(coords, shape)):
        if not 0 <= coord < dim:
            raise IndexError(
                f"Index {coord} is out of bounds for axis {axis} with size {dim}."
            )


def remove_coordinate(coords: Sequence[int], axis: int) -> tuple[int, ...]:
    return tuple(coords[:axis]) + tuple(coords[axis + 1:])


def add_coordinate(coords: Sequence[int], axis: int, value: int = 0) -> tuple[int, ...]:
    return tuple(coords[:axis]) + (value,) + tuple(coords[axis:])


def change_coordinate(coords: Sequence[int], axis: int, value: int) -> tuple[int, ...]:
    return tuple(coords[:axis]) + (value,) + tuple(coords[axis + 1:])


def prepend_coordinate(coords: Sequence[int], value: int) -> tuple[int, ...]:
    return add_coordinate(coords, 0, value)


def append_coordinate(coords: Sequence[int], value: int) -> tuple[int, ...]:
    return add_coordinate(coords, len(coords), value)


@njit
def _strided_offsets(shape, strides, base, out):
    # odometer over coordinates: increment the last axis, carry into
    # earlier axes on overflow
    ndim = shape.shape[0]
    coords = np.zeros(ndim, dtype=np.int64)
    for k in range(out.shape[0]):
        offset = base
        for i in range(ndim):
            offset += coords[i] * strides[i]
        out[k] = offset
        i = ndim - 1
        while i >= 0:
            coords[i] += 1
            if coords[i] < shape[i]:
                break
            coords[i] = 0
            i -= 1
    return out


def strided_offsets(
    shape: Iterable[int],
    strides: Iterable[int],
    base: int = 0,
) -> NDArray:
    """Buffer offsets of every element of a strided view, in row-major
    coordinate order.
    """
    shape = np.asarray(tuple(shape), dtype=np.int64)
    strides = np.asarray(tuple(strides), dtype=np.int64)
    out = np.empty(int(np.prod(shape)), dtype=np.int64)
    return _strided_offsets(shape, strides, np.int64(base), out)
