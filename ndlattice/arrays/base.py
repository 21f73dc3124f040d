# fmt: off
from __future__ import annotations

import operator
from numbers import Number
from typing import Any, Callable, Iterator, TypeVar

import numpy as np

from ndlattice.core.iterators import ArrayIterator
from ndlattice.core.loops import for_each, iter_coords, update_each
from ndlattice.core.shape import (Coords, Shape, check_coordinates,
                                  normalize_coordinates, size)
from ndlattice.core.slices import Location, Slice
from ndlattice.configuration import bound_checks_enabled
from ndlattice.errors import shape_mismatch

# fmt: on
Self = TypeVar("Self", bound="Indexable")


def _elementwise():
    # imported on first use, the delayed package builds on this module
    from ndlattice.delayed import arithmetic
    return arithmetic


def is_operand(value: Any) -> bool:
    """True for values that elementwise operators accept: arrays of this
    library and scalars.
    """
    return isinstance(value, (Indexable, Number, np.generic))


def element_dtype(array: Indexable, dtype=None) -> np.dtype:
    """The dtype used when materializing `array`: an explicit dtype, the
    dtype the array declares, or the dtype of its first element.
    """
    if dtype is not None:
        return np.dtype(dtype)
    if array.dtype is not None:
        return np.dtype(array.dtype)
    if array.size == 0:
        return np.dtype(np.float64)
    first = next(iter_coords(array.shape))
    return np.asarray(array._get(first)).dtype


class Indexable:
    """Common interface of immediate and delayed arrays: a shape, coordinate
    access and the operator surface. Operators never compute anything, they
    return delayed arrays that evaluate the expression element by element on
    demand.

    Subclasses implement `shape`, `dtype`, `_get`, `_put` (when writable) and
    `_view`.

    Example:
        >>> a = ImmediateArray((2, 3))
        >>> a.fill(1.0)
        >>> b = a * 2 + 1
        >>> b(1, 2)
        3.0
    """

    @property
    def shape(self) -> Shape:
        raise NotImplementedError

    @property
    def dtype(self) -> np.dtype | None:
        raise NotImplementedError

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        return size(self.shape)

    @property
    def writable(self) -> bool:
        return False

    def _get(self, coords: Coords) -> Any:
        raise NotImplementedError

    def _put(self, coords: Coords, value: Any) -> None:
        raise TypeError(f"{type(self).__name__} is not modifiable.")

    def _view(self: Self, descriptor: Slice, dropped: tuple[int, ...]) -> Self:
        raise NotImplementedError

    def _buffers(self) -> tuple:
        """The Buffers whose memory this array reads its elements from."""
        return ()

    def shares_storage(self, other: Any) -> bool:
        """True if this array and `other` read memory of the same Storage."""
        if not isinstance(other, Indexable):
            return False
        return any(
            mine.shares_storage(theirs)
            for mine in self._buffers()
            for theirs in other._buffers()
        )

    def _reader(self, source: Indexable | np.ndarray) -> Callable[[Coords], Any]:
        """A function that reads the elements of `source` by coordinates. If
        `source` reads memory that writing to this array may overwrite, it
        reads from a snapshot of `source` taken now.
        """
        if isinstance(source, np.ndarray):
            buffers = [buffer for buffer in self._buffers() if not buffer.closed]
            if any(np.may_share_memory(source, buffer.memory) for buffer in buffers):
                source = source.copy()
            return source.__getitem__
        if self.shares_storage(source):
            return source.to_numpy().__getitem__
        return source._get

    def _check_writable(self) -> None:
        if not self.writable:
            raise TypeError(f"{type(self).__name__} is not modifiable.")

    def __call__(self, *coords) -> Any:
        coords = normalize_coordinates(coords)
        check_coordinates(coords, self.shape)
        return self._get(coords)

    def set(self, coords, value: Any) -> None:
        self._check_writable()
        coords = normalize_coordinates((coords,))
        check_coordinates(coords, self.shape)
        self._put(coords, value)

    def __getitem__(self: Self, location: Slice | Location) -> Self:
        if isinstance(location, Slice):
            return self._view(location, ())
        descriptor, dropped = Slice.from_location(location, self.shape)
        return self._view(descriptor, dropped)

    def __setitem__(self, location: Slice | Location, value: Any) -> None:
        self._check_writable()
        view = self[location]
        if isinstance(value, (Indexable, np.ndarray)):
            view.assign(value)
        else:
            view.fill(value)

    def fill(self, value: Any) -> None:
        self._check_writable()
        put = self._put
        for coords in iter_coords(self.shape):
            put(coords, value)

    def assign(self: Self, source: Indexable | np.ndarray) -> Self:
        """Overwrite every element with the element of `source` at the same
        coordinates. This is what forces a delayed expression into memory.
        """
        self._check_writable()
        if bound_checks_enabled() and tuple(source.shape) != self.shape:
            raise shape_mismatch("assign", source.shape, self.shape)
        read = self._reader(source)
        put = self._put
        for coords in iter_coords(self.shape):
            put(coords, read(coords))
        return self

    def map(self, visitor: Callable[[Coords, Any], None]) -> None:
        """Call `visitor(coords, value)` for every element, in row-major
        order.
        """
        for_each(self, visitor)

    def begin(self) -> ArrayIterator:
        return ArrayIterator(self, 0)

    def end(self) -> ArrayIterator:
        return ArrayIterator(self, self.size)

    def __iter__(self) -> Iterator[Any]:
        read = self._get
        for coords in iter_coords(self.shape):
            yield read(coords)

    def to_numpy(self, dtype=None) -> np.ndarray:
        dtype = element_dtype(self, dtype)
        read = self._get
        # filled one element at a time so that tuple elements stay objects
        out = np.empty(self.size, dtype=dtype)
        for i, coords in enumerate(iter_coords(self.shape)):
            out[i] = read(coords)
        return out.reshape(self.shape)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        array = self.to_numpy()
        if dtype is not None:
            array = array.astype(dtype, copy=False)
        return array

    def __repr__(self) -> str:
        prefix = type(self).__name__ + "("
        dtype = self.dtype
        suffix = (
            f", dtype={np.dtype(dtype).name if dtype is not None else None}"
            ")"
        )
        return (
            prefix
            + np.array2string(
                self.__array__(),
                separator=",",
                prefix=prefix,
                suffix=suffix,
            )
            + suffix
        )

    def __bool__(self) -> bool:
        return bool(self.__array__())

    # elementwise operators

    def _binary(self, op, other, name: str, reflected: bool = False, dtype=None):
        if not is_operand(other):
            return NotImplemented
        left, right = (other, self) if reflected else (self, other)
        return _elementwise().binary(op, left, right, name, dtype=dtype)

    def __add__(self, other):
        return self._binary(operator.add, other, "add")

    def __radd__(self, other):
        return self._binary(operator.add, other, "add", reflected=True)

    def __sub__(self, other):
        return self._binary(operator.sub, other, "subtract")

    def __rsub__(self, other):
        return self._binary(operator.sub, other, "subtract", reflected=True)

    def __mul__(self, other):
        return self._binary(operator.mul, other, "multiply")

    def __rmul__(self, other):
        return self._binary(operator.mul, other, "multiply", reflected=True)

    def __truediv__(self, other):
        return self._binary(operator.truediv, other, "divide")

    def __rtruediv__(self, other):
        return self._binary(operator.truediv, other, "divide", reflected=True)

    def __floordiv__(self, other):
        return self._binary(operator.floordiv, other, "divide")

    def __rfloordiv__(self, other):
        return self._binary(operator.floordiv, other, "divide", reflected=True)

    def __mod__(self, other):
        return self._binary(operator.mod, other, "take the modulo of")

    def __rmod__(self, other):
        return self._binary(operator.mod, other, "take the modulo of", reflected=True)

    def __pow__(self, other):
        return self._binary(operator.pow, other, "exponentiate")

    def __rpow__(self, other):
        return self._binary(operator.pow, other, "exponentiate", reflected=True)

    def __neg__(self):
        return _elementwise().unary(operator.neg, self, dtype=self.dtype)

    def __pos__(self):
        return _elementwise().unary(operator.pos, self, dtype=self.dtype)

    def __abs__(self):
        return _elementwise().unary(operator.abs, self, dtype=self.dtype)

    # comparisons produce boolean arrays, so arrays are not hashable

    __hash__ = None

    def __eq__(self, other):
        return self._binary(operator.eq, other, "compare", dtype=np.bool_)

    def __ne__(self, other):
        return self._binary(operator.ne, other, "compare", dtype=np.bool_)

    def __lt__(self, other):
        return self._binary(operator.lt, other, "compare", dtype=np.bool_)

    def __le__(self, other):
        return self._binary(operator.le, other, "compare", dtype=np.bool_)

    def __gt__(self, other):
        return self._binary(operator.gt, other, "compare", dtype=np.bool_)

    def __ge__(self, other):
        return self._binary(operator.ge, other, "compare", dtype=np.bool_)

    # in-place operators write through to the array itself

    def _inplace(self: Self, op, other, name: str) -> Self:
        self._check_writable()
        if isinstance(other, Indexable):
            if bound_checks_enabled() and other.shape != self.shape:
                raise shape_mismatch(name, self.shape, other.shape)
            read = self._reader(other)
            update_each(self, lambda coords, value: op(value, read(coords)))
        elif is_operand(other):
            update_each(self, lambda coords, value: op(value, other))
        else:
            return NotImplemented
        return self

    def __iadd__(self, other):
        return self._inplace(operator.add, other, "add")

    def __isub__(self, other):
        return self._inplace(operator.sub, other, "subtract")

    def __imul__(self, other):
        return self._inplace(operator.mul, other, "multiply")

    def __itruediv__(self, other):
        return self._inplace(operator.truediv, other, "divide")

    def __imod__(self, other):
        return self._inplace(operator.mod, other, "take the modulo of")
