from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np

from ndlattice.arrays.base import Indexable, element_dtype
from ndlattice.arrays.delayed import DelayedArray, make_delayed
from ndlattice.arrays.immediate import ImmediateArray


def constants(shape: Sequence[int], value: Any, dtype=None) -> DelayedArray:
    """An array of `shape` whose every element is `value`."""
    dtype = np.dtype(dtype) if dtype is not None else np.asarray(value).dtype
    value = dtype.type(value)
    return make_delayed(shape, lambda coords: value, dtype=dtype)


def zeros(shape: Sequence[int], dtype=np.float64) -> DelayedArray:
    return constants(shape, 0, dtype)


def ones(shape: Sequence[int], dtype=np.float64) -> DelayedArray:
    return constants(shape, 1, dtype)


def constants_like(array: Indexable, value: Any, dtype=None) -> DelayedArray:
    return constants(array.shape, value, dtype)


def zeros_like(array: Indexable, dtype=None) -> DelayedArray:
    return constants(array.shape, 0, element_dtype(array, dtype))


def ones_like(array: Indexable, dtype=None) -> DelayedArray:
    return constants(array.shape, 1, element_dtype(array, dtype))


def arange(start, stop=None, step=1) -> DelayedArray:
    """Evenly spaced values `start, start + step, ...` up to but excluding
    `stop`. With a single argument, counts from 0 to `start`.
    """
    if stop is None:
        start, stop = 0, start
    if stop <= start:
        raise ValueError(f"Range stop {stop} must be greater than start {start}.")
    if step <= 0:
        raise ValueError(f"Range step must be positive, got {step}.")
    dtype = np.result_type(np.asarray(start), np.asarray(stop), np.asarray(step))
    n = math.ceil((stop - start) / step)
    convert = dtype.type
    return make_delayed((n,), lambda coords: convert(start + step * coords[0]), dtype=dtype)


def linspace(start: float, stop: float, num: int, endpoint: bool = True) -> DelayedArray:
    """`num` evenly spaced floating point values from `start` to `stop`,
    including `stop` if `endpoint` is set.
    """
    if num < 0:
        raise ValueError(f"Number of samples must be non-negative, got {num}.")
    intervals = num - 1 if endpoint else num
    step = (stop - start) / intervals if intervals > 0 else 0.0
    return make_delayed(
        (num,),
        lambda coords: np.float64(start + step * coords[0]),
        dtype=np.float64,
    )


def identity(n: int, dtype=np.float64) -> DelayedArray:
    """The `n` by `n` identity matrix."""
    dtype = np.dtype(dtype)
    one, zero = dtype.type(1), dtype.type(0)
    return make_delayed(
        (n, n),
        lambda coords: one if coords[0] == coords[1] else zero,
        dtype=dtype,
    )


def litarray(*values, dtype=None) -> ImmediateArray:
    """A one-dimensional immediate array holding `values`, e.g.
    `litarray(12, 35, 19)`.
    """
    return ImmediateArray.from_numpy(np.array(values, dtype=dtype))
