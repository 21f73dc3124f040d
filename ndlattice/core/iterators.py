from __future__ import annotations

from typing import Any

from .shape import Coords, default_strides, linear_offset, size, unravel


class ArrayIterator:
    """Random-access iterator over the elements of an array in row-major
    order. The position is a linear index between 0 and `size(array.shape)`
    (the past-the-end position); coordinates are derived from it through the
    default strides of the array shape.

    Also usable as a Python iterator: `next()` returns the current value and
    advances.
    """

    def __init__(self, array, position: int | Coords = 0) -> None:
        self._array = array
        self._shape = tuple(array.shape)
        self._strides = default_strides(self._shape)
        self._end = size(self._shape)
        if isinstance(position, tuple):
            position = linear_offset(position, self._strides)
        if not 0 <= position <= self._end:
            raise IndexError(
                f"Iterator position {position} out of range for array of "
                f"size {self._end}."
            )
        self._position = position

    @property
    def array(self):
        return self._array

    @property
    def position(self) -> int:
        return self._position

    @property
    def coords(self) -> Coords:
        if self._position >= self._end:
            raise IndexError("Past-the-end iterator has no coordinates.")
        return unravel(self._position, self._strides)

    @property
    def value(self) -> Any:
        return self._array(self.coords)

    @value.setter
    def value(self, value: Any) -> None:
        self._array.set(self.coords, value)

    def _moved(self, position: int) -> ArrayIterator:
        return type(self)(self._array, position)

    def increment(self) -> None:
        if self._position >= self._end:
            raise IndexError("Cannot increment past-the-end iterator.")
        self._position += 1

    def decrement(self) -> None:
        if self._position <= 0:
            raise IndexError("Cannot decrement iterator at the first element.")
        self._position -= 1

    def __add__(self, offset: int) -> ArrayIterator:
        return self._moved(self._position + offset)

    __radd__ = __add__

    def __sub__(self, other: ArrayIterator | int) -> ArrayIterator | int:
        if isinstance(other, ArrayIterator):
            if other._array is not self._array:
                raise ValueError("Cannot compute distance between iterators of different arrays.")
            return self._position - other._position
        return self._moved(self._position - other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayIterator):
            return NotImplemented
        return self._array is other._array and self._position == other._position

    def __lt__(self, other: ArrayIterator) -> bool:
        return self._position < other._position

    def __iter__(self) -> ArrayIterator:
        return self

    def __next__(self) -> Any:
        if self._position >= self._end:
            raise StopIteration
        value = self.value
        self._position += 1
        return value

    def __repr__(self) -> str:
        return f"ArrayIterator(position={self._position}, end={self._end})"
