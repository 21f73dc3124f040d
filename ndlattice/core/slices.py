from __future__ import annotations

import math
from numbers import Integral
from typing import Sequence, Union

import numpy as np

from ndlattice.configuration import bound_checks_enabled
from ndlattice.errors import DimensionMismatch, LengthError

from .shape import Shape, Strides, linear_offset

# A single index element, e.g. arr[3:6]
Index = Union[int, slice, type(Ellipsis)]
# A single indexing location, e.g. arr[2, 0] or arr[:-2]
Location = Union[Index, tuple[Index, ...]]


def _as_tuple(value: int | Sequence[int], ndim: int | None = None) -> tuple[int, ...]:
    if isinstance(value, (Integral, np.integer)):
        return (int(value),) * (1 if ndim is None else ndim)
    return tuple(int(v) for v in value)


class Slice:
    """A rectangular, possibly strided, region of an N-dimensional array,
    described per axis by a start index, a number of elements and a step.

    1-D slices compose into N-D slices with `+`, which appends axes:

        >>> s = Slice(1, 3) + Slice(1, 2)
        >>> s.start, s.size, s.stride
        ((1, 1), (3, 2), (1, 1))

    Steps may be negative, in which case the region is walked backwards from
    `start`.
    """

    __slots__ = ("_start", "_size", "_stride")

    def __init__(
        self,
        start: int | Sequence[int],
        size: int | Sequence[int],
        stride: int | Sequence[int] = 1,
    ) -> None:
        start = _as_tuple(start)
        size = _as_tuple(size, len(start))
        stride = _as_tuple(stride, len(start))
        if not len(start) == len(size) == len(stride):
            raise ValueError(
                f"Slice start {start}, size {size} and stride {stride} must "
                f"have the same length."
            )
        if any(n < 0 for n in size):
            raise ValueError(f"Slice sizes must be non-negative, got {size}.")
        if any(s == 0 for s in stride):
            raise ValueError("Slice strides must be non-zero.")
        self._start = start
        self._size = size
        self._stride = stride

    @classmethod
    def from_triples(cls, triples: Sequence[Sequence[int]]) -> Slice:
        """Build from `[(start, size, stride), ...]`. A size or stride of 0
        means 1, so that `(i, 0, 0)` selects the single element `i`.
        """
        starts, sizes, strides = [], [], []
        for start, n, stride in triples:
            starts.append(start)
            sizes.append(n if n != 0 else 1)
            strides.append(stride if stride != 0 else 1)
        return cls(starts, sizes, strides)

    @classmethod
    def from_location(
        cls,
        location: Location,
        shape: Shape,
    ) -> tuple[Slice, tuple[int, ...]]:
        """Translate standard Python indexing (ints, slices and at most one
        Ellipsis) into a Slice over all axes of `shape`, plus the axes that
        were indexed with an integer and should be dropped from the result.
        Missing trailing indices select the whole axis.
        """
        if isinstance(location, tuple):
            location = list(location)
        else:
            location = [location]

        # check if Ellipsis occurs in location
        ellipses = [dim for dim, index in enumerate(location) if index is Ellipsis]
        if ellipses:
            if len(ellipses) > 1:
                raise IndexError("An index can only have a single ellipsis ('...').")
            # pad location with slice(None) elements until length equals the
            # number of dimensions
            i = ellipses[0]
            location[i : i + 1] = [slice(None)] * (len(shape) - len(location) + 1)

        if len(location) > len(shape):
            raise IndexError(
                f"Too many indices for array: array is {len(shape)}-dimensional, "
                f"but {len(location)} were indexed."
            )
        location += [slice(None)] * (len(shape) - len(location))

        starts, sizes, strides, dropped = [], [], [], []
        for axis, (index, dim) in enumerate(zip(location, shape)):
            if isinstance(index, (Integral, np.integer)) and not isinstance(index, bool):
                index = int(index)
                if index < 0:
                    index += dim
                if bound_checks_enabled() and not 0 <= index < dim:
                    raise IndexError(
                        f"Index {index} is out of bounds for axis {axis} with size {dim}."
                    )
                starts.append(index)
                sizes.append(1)
                strides.append(1)
                dropped.append(axis)
            elif isinstance(index, slice):
                start, stop, step = index.indices(dim)
                n = max(0, math.ceil((stop - start) / step))
                # an empty selection does not point anywhere
                starts.append(start if n > 0 else 0)
                sizes.append(n)
                strides.append(step)
            else:
                raise TypeError(
                    f"Cannot index array with {type(index).__name__} object"
                )

        return cls(starts, sizes, strides), tuple(dropped)

    @property
    def start(self) -> tuple[int, ...]:
        return self._start

    @property
    def size(self) -> tuple[int, ...]:
        return self._size

    @property
    def stride(self) -> tuple[int, ...]:
        return self._stride

    @property
    def ndim(self) -> int:
        return len(self._start)

    def __add__(self, other: Slice) -> Slice:
        if not isinstance(other, Slice):
            return NotImplemented
        return Slice(
            self._start + other._start,
            self._size + other._size,
            self._stride + other._stride,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Slice):
            return NotImplemented
        return (
            self._start == other._start
            and self._size == other._size
            and self._stride == other._stride
        )

    def __hash__(self) -> int:
        return hash((self._start, self._size, self._stride))

    def __repr__(self) -> str:
        return f"Slice(start={self._start}, size={self._size}, stride={self._stride})"

    def validate(self, shape: Shape) -> None:
        """Raise if this slice does not fit inside an array of `shape`. A
        no-op when bound checks are disabled.
        """
        if not bound_checks_enabled():
            return
        if self.ndim != len(shape):
            raise DimensionMismatch(
                f"Cannot apply a {self.ndim}-dimensional slice to an array "
                f"of shape {tuple(shape)}."
            )
        for axis, (start, n, stride, dim) in enumerate(
            zip(self._start, self._size, self._stride, shape)
        ):
            if not (0 <= start < dim or start == dim == 0):
                raise IndexError(
                    f"Invalid starting point {start} for slicing axis {axis} "
                    f"with size {dim}."
                )
            if n == 0:
                continue
            last = start + (n - 1) * stride
            if not 0 <= last < dim:
                raise LengthError(
                    f"Slicing view of {n} elements with stride {stride} from "
                    f"{start} exceeds axis {axis} with size {dim}."
                )

    def apply(self, shape: Shape, strides: Strides) -> tuple[Shape, Strides, int]:
        """Return the shape, strides and offset delta of the view obtained by
        applying this slice to a strided array.
        """
        self.validate(shape)
        new_strides = tuple(
            old * step for old, step in zip(strides, self._stride)
        )
        return self._size, new_strides, linear_offset(self._start, strides)

    def translate(self, coords: Sequence[int]) -> tuple[int, ...]:
        """Map coordinates inside the sliced region to coordinates in the
        original array.
        """
        return tuple(
            start + coord * step
            for coord, start, step in zip(coords, self._start, self._stride)
        )
