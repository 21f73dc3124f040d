from __future__ import annotations

from ndlattice.arrays.base import Indexable
from ndlattice.core.loops import all_of, any_of


def any(array: Indexable) -> bool:
    """True if at least one element is truthy, e.g. `any(a > 0)`."""
    return any_of(array, bool)


def all(array: Indexable) -> bool:
    """True if every element is truthy, e.g. `all(a == b)`."""
    return all_of(array, bool)
