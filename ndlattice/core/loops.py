"""The traversal engine. Every elementwise algorithm in the library (fill,
assignment, reductions, searches, predicates) is a visitor handed to one of
the functions below, which all walk coordinates in the same row-major order:
axis 0 outermost, the last axis innermost.
"""
from __future__ import annotations

from itertools import product
from typing import Any, Callable, Iterator

from .shape import Coords, Shape

Visitor = Callable[[Coords, Any], None]
Predicate = Callable[[Any], bool]


def iter_coords(shape: Shape) -> Iterator[Coords]:
    """Enumerate all coordinates of `shape` in row-major order. A rank-0
    shape has exactly one (empty) coordinate; a shape with a zero-length
    axis has none.
    """
    return product(*(range(dim) for dim in shape))


def _reader(array) -> Callable[[Coords], Any]:
    # arrays of this library expose an unchecked reader, since the coordinates
    # generated here are always in range
    return getattr(array, "_get", array)


def for_each(array, visitor: Visitor) -> None:
    """Call `visitor(coords, value)` for every element of `array`."""
    read = _reader(array)
    for coords in iter_coords(tuple(array.shape)):
        visitor(coords, read(coords))


def any_of(array, predicate: Predicate) -> bool:
    """True if `predicate` holds for at least one element. Stops at the first
    element that satisfies it.
    """
    read = _reader(array)
    for coords in iter_coords(tuple(array.shape)):
        if predicate(read(coords)):
            return True
    return False


def all_of(array, predicate: Predicate) -> bool:
    """True if `predicate` holds for every element. Stops at the first
    element that violates it.
    """
    return not any_of(array, lambda value: not predicate(value))


def update_each(array, function: Callable[[Coords, Any], Any]) -> None:
    """Replace every element of a writable `array` with
    `function(coords, value)`.
    """
    write = getattr(array, "_put", None) or array.set
    for_each(array, lambda coords, value: write(coords, function(coords, value)))
