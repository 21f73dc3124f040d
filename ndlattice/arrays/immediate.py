# fmt: off
from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from ndlattice.configuration import settings
from ndlattice.core.shape import (Coords, Shape, Strides, default_strides,
                                  is_contiguous, linear_offset,
                                  remove_coordinate, strided_offsets)
from ndlattice.core.slices import Slice

from .base import Indexable
from .buffer import Buffer
from .storage import StorageType

# fmt: on


class ImmediateArray(Indexable):
    """An array whose elements live in memory: a Buffer plus the shape,
    strides (in elements) and base offset that map coordinates onto it.
    Views created by indexing or slicing share the Buffer with the array
    they come from, so writes through a view are visible in the original.

    Example:
        >>> a = ImmediateArray((4, 5), dtype=np.int64)
        >>> a.assign(reshape(arange(20), (4, 5)))
        >>> b = a[Slice((1, 1), (3, 2))]
        >>> b(0, 0)
        6
        >>> b.set((0, 0), -1)
        >>> a(1, 1)
        -1
    """

    def __init__(
        self,
        shape: Sequence[int],
        dtype: np.dtype | None = None,
        *,
        storage: StorageType | None = None,
    ) -> None:
        shape = tuple(int(dim) for dim in shape)
        if any(dim < 0 for dim in shape):
            raise ValueError(f"Array dimensions must be non-negative, got {shape}.")
        if dtype is None:
            dtype = settings["dtype"]
        if storage is None:
            storage = settings["storage"]
        n = 1
        for dim in shape:
            n *= dim
        self._buffer = Buffer.allocate(n, np.dtype(dtype), storage)
        self._shape = shape
        self._strides = default_strides(shape)
        self._offset = 0

    @classmethod
    def from_numpy(
        cls,
        ndarray: np.ndarray,
        *,
        storage: StorageType | None = None,
    ) -> ImmediateArray:
        """Allocate a new array and copy the contents of `ndarray` into it."""
        ndarray = np.asarray(ndarray)
        array = cls(ndarray.shape, ndarray.dtype, storage=storage)
        return array.assign(ndarray)

    @classmethod
    def _from_buffer(
        cls,
        buffer: Buffer,
        shape: Shape,
        strides: Strides,
        offset: int,
    ) -> ImmediateArray:
        array = cls.__new__(cls)
        array._buffer = buffer
        array._shape = tuple(shape)
        array._strides = tuple(strides)
        array._offset = offset
        return array

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def strides(self) -> Strides:
        return self._strides

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def dtype(self) -> np.dtype:
        return self._buffer.dtype

    @property
    def storage(self) -> StorageType:
        return self._buffer.kind

    @property
    def writable(self) -> bool:
        return True

    def _memory(self) -> np.ndarray:
        return self._buffer.memory

    def _offsets(self) -> np.ndarray:
        return strided_offsets(self._shape, self._strides, self._offset)

    def _get(self, coords: Coords) -> Any:
        return self._buffer.memory[self._offset + linear_offset(coords, self._strides)]

    def _put(self, coords: Coords, value: Any) -> None:
        self._buffer.memory[self._offset + linear_offset(coords, self._strides)] = value

    def _view(self, descriptor: Slice, dropped: tuple[int, ...]) -> ImmediateArray:
        shape, strides, delta = descriptor.apply(self._shape, self._strides)
        # drop from the highest axis down so that earlier axis numbers stay valid
        for axis in sorted(dropped, reverse=True):
            shape = remove_coordinate(shape, axis)
            strides = remove_coordinate(strides, axis)
        return self._from_buffer(
            self._buffer.share(), shape, strides, self._offset + delta
        )

    def view(self) -> ImmediateArray:
        """A new array on the same Buffer, with identical shape and strides."""
        return self._from_buffer(
            self._buffer.share(), self._shape, self._strides, self._offset
        )

    def slice(self, descriptor: Slice) -> ImmediateArray:
        return self._view(descriptor, ())

    def slice_for_dim(self, axis: int, index: int) -> ImmediateArray:
        """A view in which `axis` keeps only the element at `index`, as an
        axis of size 1.
        """
        if not 0 <= axis < self.ndim:
            raise IndexError(f"Axis {axis} is out of bounds for a {self.ndim}-dimensional array.")
        starts = [0] * self.ndim
        sizes = list(self._shape)
        starts[axis] = index
        sizes[axis] = 1
        return self._view(Slice(starts, sizes), ())

    fix_axis = slice_for_dim

    def contiguous(self) -> bool:
        return is_contiguous(self._shape, self._strides)

    def data(self) -> np.ndarray:
        """The flat block of elements this array covers, as a numpy view on
        its Buffer. Only defined for contiguous arrays.
        """
        if not self.contiguous():
            raise ValueError(
                f"Array with shape {self._shape} and strides {self._strides} "
                f"is not contiguous."
            )
        return self._memory()[self._offset : self._offset + self.size]

    def _buffers(self) -> tuple:
        return (self._buffer,)

    def copy(self) -> ImmediateArray:
        """A contiguous array on a new Buffer with the same elements."""
        copy = ImmediateArray(self._shape, self.dtype, storage=self.storage)
        copy.assign(self)
        return copy

    def to_numpy(self, dtype=None) -> np.ndarray:
        array = self._memory()[self._offsets()].reshape(self._shape)
        if dtype is not None:
            array = array.astype(dtype, copy=False)
        return array

    def release(self) -> None:
        """Give up this array's handle on its Buffer. The memory is freed
        once every view on it has been released.
        """
        self._buffer.release()
