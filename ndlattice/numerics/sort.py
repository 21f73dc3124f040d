from __future__ import annotations

from ndlattice.arrays.base import Indexable
from ndlattice.arrays.delayed import DelayedArray, make_delayed
from ndlattice.arrays.immediate import ImmediateArray
from ndlattice.configuration import bound_checks_enabled
from ndlattice.core.loops import iter_coords
from ndlattice.errors import shape_mismatch


def sort_indices(array: Indexable) -> ImmediateArray:
    """An array of the same shape holding the coordinates of the elements of
    `array`, ordered (row-major) by increasing value. Equal values keep their
    original order.
    """
    read = array._get
    coords = sorted(iter_coords(array.shape), key=read)
    indices = ImmediateArray(array.shape, dtype=object, storage="local")
    memory = indices.data()
    for i, c in enumerate(coords):
        memory[i] = c
    return indices


def permute(array: Indexable, indices: Indexable) -> DelayedArray:
    """Element `c` of the result is element `indices(c)` of `array`, e.g.
    `permute(a, sort_indices(a))` is `a` sorted.
    """
    if bound_checks_enabled() and indices.shape != array.shape:
        raise shape_mismatch("permute", array.shape, indices.shape)
    read, read_indices = array._get, indices._get
    return make_delayed(
        array.shape,
        lambda coords: read(tuple(read_indices(coords))),
        dtype=array.dtype,
        sources=(array, indices),
    )
