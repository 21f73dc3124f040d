from .shape import (Coords, Shape, Strides, add_coordinate, append_coordinate,
                    change_coordinate, check_coordinates, default_strides,
                    is_contiguous, linear_offset, normalize_coordinates,
                    prepend_coordinate, remove_coordinate, size, unravel)
from .slices import Slice
from .loops import all_of, any_of, for_each, iter_coords, update_each
from .iterators import ArrayIterator

__all__ = [
    "Coords",
    "Shape",
    "Strides",
    "Slice",
    "ArrayIterator",
    "add_coordinate",
    "all_of",
    "any_of",
    "append_coordinate",
    "change_coordinate",
    "check_coordinates",
    "default_strides",
    "for_each",
    "is_contiguous",
    "iter_coords",
    "linear_offset",
    "normalize_coordinates",
    "prepend_coordinate",
    "remove_coordinate",
    "size",
    "unravel",
    "update_each",
]
