from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

from ndlattice.core.shape import Coords, Shape, add_coordinate

from .base import Indexable, element_dtype
from .immediate import ImmediateArray
from .storage import StorageType

Getter = Callable[[Coords], Any]
Setter = Callable[[Coords, Any], None]


class DelayedArray(Indexable):
    """An array whose elements are computed on access by calling `getter`
    with their coordinates. Nothing is cached: reading the same element twice
    calls the getter twice.

    A delayed array is modifiable only if it was given a `setter`, which
    receives the coordinates and the value of each write.

    `buffers` lists the Buffers that `getter` reads from, so that writing a
    delayed expression into an array that it reads can snapshot it first.
    """

    def __init__(
        self,
        shape: Sequence[int],
        getter: Getter,
        setter: Setter | None = None,
        dtype: np.dtype | None = None,
        buffers: Sequence = (),
    ) -> None:
        shape = tuple(int(dim) for dim in shape)
        if any(dim < 0 for dim in shape):
            raise ValueError(f"Array dimensions must be non-negative, got {shape}.")
        self._shape = shape
        self._getter = getter
        self._setter = setter
        self._dtype = np.dtype(dtype) if dtype is not None else None
        self._sources = tuple(buffers)

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def dtype(self) -> np.dtype | None:
        return self._dtype

    @property
    def writable(self) -> bool:
        return self._setter is not None

    def _buffers(self) -> tuple:
        return self._sources

    def _get(self, coords: Coords) -> Any:
        return self._getter(coords)

    def _put(self, coords: Coords, value: Any) -> None:
        if self._setter is None:
            raise TypeError(f"{type(self).__name__} is not modifiable.")
        self._setter(coords, value)

    def _view(self, descriptor, dropped: tuple[int, ...]) -> DelayedArray:
        descriptor.validate(self._shape)
        shape = tuple(
            n for axis, n in enumerate(descriptor.size) if axis not in dropped
        )

        def source_coords(coords: Coords) -> Coords:
            for axis in sorted(dropped):
                coords = add_coordinate(coords, axis, 0)
            return descriptor.translate(coords)

        read = self._get
        write = self._put
        return DelayedArray(
            shape,
            lambda coords: read(source_coords(coords)),
            (lambda coords, value: write(source_coords(coords), value))
            if self.writable
            else None,
            dtype=self._dtype,
            buffers=self._sources,
        )


def make_delayed(
    shape: Sequence[int],
    getter: Getter,
    *,
    setter: Setter | None = None,
    dtype: np.dtype | None = None,
    sources: Sequence = (),
) -> DelayedArray:
    """A delayed array over `getter`. `sources` are the arrays and scalars
    the getter reads, their Buffers are tracked for aliasing.
    """
    buffers = [
        buffer
        for source in sources
        if isinstance(source, Indexable)
        for buffer in source._buffers()
    ]
    return DelayedArray(shape, getter, setter, dtype, buffers)


def delay(array: Indexable) -> DelayedArray:
    """Wrap any array in a delayed array that reads (and, if `array` is
    writable, writes) through to it.
    """
    return DelayedArray(
        array.shape,
        array._get,
        array._put if array.writable else None,
        dtype=array.dtype,
        buffers=array._buffers(),
    )


def immediate(
    array: Indexable,
    dtype: np.dtype | None = None,
    *,
    storage: StorageType | None = None,
) -> ImmediateArray:
    """Evaluate every element of `array` into a newly allocated immediate
    array.
    """
    result = ImmediateArray(array.shape, element_dtype(array, dtype), storage=storage)
    result.assign(array)
    return result
