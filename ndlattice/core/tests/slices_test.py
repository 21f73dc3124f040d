# fmt: off
import math
from itertools import islice

import numpy as np
import numpy.random as random
import pytest

from ndlattice.configuration import bound_checks
from ndlattice.core.slices import Location, Slice
from ndlattice.errors import DimensionMismatch, LengthError

# fmt: on
PROB_SLICE = 0.5
PROB_INDEX_NEGATIVE = 0.3
PROB_STEP_NEGATIVE = 0.3
MAX_STEP = 3
PROB_SLICE_EL_NONE = 0.2


def random_int(rng: random.Generator, size: int) -> int:
    index = int(rng.integers(size))
    return index - size if rng.random() < PROB_INDEX_NEGATIVE else index


def random_slice(rng: random.Generator, size: int) -> slice:
    step = int(rng.integers(1, high=MAX_STEP, endpoint=True))
    step = -step if rng.random() < PROB_STEP_NEGATIVE else step
    start = int(rng.integers(size))
    stop = int(rng.integers(size + 1))
    start = None if rng.random() < PROB_SLICE_EL_NONE else start
    stop = None if rng.random() < PROB_SLICE_EL_NONE else stop
    return slice(start, stop, step)


def random_location(rng: random.Generator, shape: tuple[int, ...]) -> Location:
    return tuple(
        random_slice(rng, size) if rng.random() < PROB_SLICE else random_int(rng, size)
        for size in islice(shape, rng.integers(1, high=len(shape), endpoint=True))
    )


def apply_to_numpy(np_array: np.ndarray, descriptor: Slice, dropped) -> np.ndarray:
    location = tuple(
        start if axis in dropped else slice(start, start + n * step if start + n * step >= 0 else None, step)
        for axis, (start, n, step) in enumerate(zip(descriptor.start, descriptor.size, descriptor.stride))
    )
    return np_array[location]


# fmt: off
@pytest.fixture(scope="module")
def rng():
    return random.default_rng(seed=42)


class TestSliceCreation:
    def test_scalar_arguments(self):
        s = Slice(1, 3)
        assert s.start == (1,)
        assert s.size == (3,)
        assert s.stride == (1,)
        assert s.ndim == 1

    def test_sequence_arguments(self):
        s = Slice([1, 2], [3, 4], [1, 2])
        assert s.start == (1, 2)
        assert s.size == (3, 4)
        assert s.stride == (1, 2)

    def test_broadcast_size_and_stride(self):
        s = Slice((1, 1), 2)
        assert s.size == (2, 2)
        assert s.stride == (1, 1)

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            Slice([1, 2], [3, 4, 5])

    def test_zero_stride(self):
        with pytest.raises(ValueError):
            Slice(0, 3, 0)

    def test_negative_size(self):
        with pytest.raises(ValueError):
            Slice(0, -1)

    def test_from_triples(self):
        s = Slice.from_triples([(2, 0, 0), (1, 3, 2)])
        assert s == Slice((2, 1), (1, 3), (1, 2))

    def test_composition(self):
        s = Slice(1, 3) + Slice(1, 2) + Slice(0, 4, 2)
        assert s == Slice((1, 1, 0), (3, 2, 4), (1, 1, 2))
        assert s.ndim == 3

    def test_hash(self):
        assert hash(Slice(1, 3)) == hash(Slice([1], [3], [1]))


class TestFromLocation:
    def test_int(self):
        s, dropped = Slice.from_location(2, (4, 5))
        assert s == Slice((2, 0), (1, 5))
        assert dropped == (0,)

    def test_negative_int(self):
        s, dropped = Slice.from_location((-1, -2), (4, 5))
        assert s == Slice((3, 3), (1, 1))
        assert dropped == (0, 1)

    def test_slices(self):
        s, dropped = Slice.from_location((slice(1, 4), slice(None, None, 2)), (4, 5))
        assert s == Slice((1, 0), (3, 3), (1, 2))
        assert dropped == ()

    def test_reversed(self):
        s, _ = Slice.from_location(slice(None, None, -1), (5,))
        assert s == Slice(4, 5, -1)

    def test_empty(self):
        s, _ = Slice.from_location(slice(3, 3), (5,))
        assert s.size == (0,)
        s.validate((5,))

    def test_ellipsis(self):
        s, dropped = Slice.from_location((Ellipsis, 1), (2, 3, 4))
        assert s == Slice((0, 0, 1), (2, 3, 1))
        assert dropped == (2,)

    def test_two_ellipses(self):
        with pytest.raises(IndexError):
            Slice.from_location((Ellipsis, 0, Ellipsis), (2, 3, 4))

    def test_too_many_indices(self):
        with pytest.raises(IndexError):
            Slice.from_location((0, 0, 0), (2, 3))

    def test_out_of_bounds(self):
        with pytest.raises(IndexError):
            Slice.from_location(4, (4, 5))
        with pytest.raises(IndexError):
            Slice.from_location(-5, (4, 5))

    def test_bad_type(self):
        with pytest.raises(TypeError):
            Slice.from_location("a", (4, 5))

    def test_matches_numpy(self, rng):
        np_array = np.arange(6 * 7 * 8).reshape(6, 7, 8)
        for _ in range(500):
            location = random_location(rng, np_array.shape)
            s, dropped = Slice.from_location(location, np_array.shape)
            s.validate(np_array.shape)
            assert np.array_equal(apply_to_numpy(np_array, s, dropped), np_array[location])


class TestValidate:
    def test_valid(self):
        Slice((1, 1), (3, 2)).validate((4, 5))
        Slice(4, 5, -1).validate((5,))

    def test_start_out_of_range(self):
        with pytest.raises(IndexError):
            Slice(5, 1).validate((5,))
        with pytest.raises(IndexError):
            Slice(-1, 1).validate((5,))

    def test_empty_start_out_of_range(self):
        with pytest.raises(IndexError):
            Slice(9, 0).validate((4,))
        with pytest.raises(IndexError):
            Slice((0, 7), (2, 0)).validate((4, 5))
        Slice(0, 0).validate((0,))
        Slice(3, 0).validate((4,))

    def test_extent_out_of_range(self):
        with pytest.raises(LengthError):
            Slice(3, 3).validate((5,))
        with pytest.raises(LengthError):
            Slice(0, 3, 3).validate((5,))
        with pytest.raises(LengthError):
            Slice(1, 3, -1).validate((5,))

    def test_rank_mismatch(self):
        with pytest.raises(DimensionMismatch):
            Slice(0, 1).validate((4, 5))

    def test_disabled(self):
        with bound_checks(False):
            Slice(3, 3).validate((5,))

    def test_apply(self):
        shape, strides, offset = Slice((1, 1), (3, 2), (1, 2)).apply((4, 5), (5, 1))
        assert shape == (3, 2)
        assert strides == (5, 2)
        assert offset == 6

    def test_translate(self):
        s = Slice((1, 4), (3, 2), (1, -2))
        assert s.translate((0, 0)) == (1, 4)
        assert s.translate((2, 1)) == (3, 2)
