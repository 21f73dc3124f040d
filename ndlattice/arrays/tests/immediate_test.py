import numpy as np
import pytest

from ndlattice.arrays import ImmediateArray, base, delay, immediate
from ndlattice.configuration import bound_checks, configure, settings
from ndlattice.core.loops import iter_coords
from ndlattice.core.slices import Slice
from ndlattice.delayed import all, any, arange, reshape, transpose
from ndlattice.errors import DimensionMismatch, LengthError


# fmt: off
@pytest.fixture
def grid():
    # a(i, j) == 5 * i + j
    return immediate(reshape(arange(20), (4, 5)))


class TestCreation:
    def test_attributes(self, blank_array, shape, dtype, storage):
        assert blank_array.shape == shape
        assert blank_array.dtype == dtype
        assert blank_array.storage == storage
        assert blank_array.ndim == 2
        assert blank_array.size == 20
        assert blank_array.strides == (5, 1)
        assert blank_array.offset == 0
        assert blank_array.contiguous()

    def test_negative_dimension(self):
        with pytest.raises(ValueError):
            ImmediateArray((3, -1))

    def test_default_dtype(self):
        assert ImmediateArray((2,)).dtype == np.float64

    def test_configured_defaults(self):
        previous = dict(settings)
        try:
            configure({"dtype": "int16"})
            assert ImmediateArray((2,)).dtype == np.int16
        finally:
            configure({"dtype": previous["dtype"]})

    def test_rank_zero(self):
        a = ImmediateArray((), np.int64)
        a.set((), 123)
        assert a() == 123
        assert a.size == 1
        assert a.data()[0] == 123

    def test_from_numpy(self, array, np_array):
        assert np.array_equal(array, np_array)
        assert np.asarray(array).dtype == np_array.dtype

    def test_from_numpy_copies(self, np_array):
        a = ImmediateArray.from_numpy(np_array)
        np_array[0, 0] = 99
        assert a(0, 0) == 0


class TestAccess:
    def test_call(self, array, np_array):
        assert array(1, 2) == np_array[1, 2]
        assert array((3, 4)) == np_array[3, 4]

    def test_set(self, array):
        array.set((1, 2), -7)
        assert array(1, 2) == -7

    @pytest.mark.parametrize("coords", [(4, 0), (0, 5), (0,), (0, 0, 0)])
    def test_out_of_range(self, array, coords):
        with pytest.raises(IndexError):
            array(coords)
        with pytest.raises(IndexError):
            array.set(coords, 1)

    def test_iteration(self, array, np_array):
        assert list(array) == list(np_array.reshape(-1))


class TestIndexing:
    def test_axis_zero(self, grid):
        row = grid[2]
        assert row.ndim == 1
        assert row.size == 5
        assert row.strides == (1,)
        assert row(2) == 12
        assert row(3) == 13

    def test_axis_zero_of_vector(self):
        a = immediate(arange(127))
        element = a[45]
        assert element.ndim == 0
        assert element.size == 1
        assert element() == 45

    def test_negative_index(self, grid):
        assert np.array_equal(grid[-1], [15, 16, 17, 18, 19])

    def test_out_of_bounds(self, grid):
        with pytest.raises(IndexError):
            grid[7]
        with pytest.raises(IndexError):
            grid[0][7]

    def test_python_location(self, grid):
        np_grid = np.arange(20).reshape(4, 5)
        for location in [
            (slice(1, 3), slice(None, None, 2)),
            (Ellipsis, 1),
            (slice(None, None, -1), 2),
            (slice(3, 0, -2), slice(4, None, -3)),
        ]:
            assert np.array_equal(grid[location], np_grid[location])

    def test_views_share_storage(self, grid):
        view = grid[1:3, 2]
        assert grid.shares_storage(view)
        view.set(0, -1)
        assert grid(1, 2) == -1

    def test_setitem_scalar(self, array, np_array):
        array[0, 2:4] = -7
        np_array[0, 2:4] = -7
        assert np.array_equal(array, np_array)

    def test_setitem_array(self, grid):
        grid[0] = immediate(arange(8, 13))
        row = grid[0]
        assert row(1) == 9
        assert grid(0, 0) == 8
        assert grid(0, 4) == 12

    def test_setitem_ellipsis(self, array, np_array):
        array[..., 0] = -7
        np_array[..., 0] = -7
        assert np.array_equal(array, np_array)

    def test_setitem_reversed(self, array, np_array, dtype):
        values = np.arange(4, dtype=dtype) * 2
        array[::-1, 0] = values
        np_array[::-1, 0] = values
        assert np.array_equal(array, np_array)


class TestSlicing:
    def test_slice(self, grid):
        b = grid.slice(Slice((1, 1), (3, 2)))
        assert b.shape == (3, 2)
        assert b.strides == grid.strides
        assert b(0, 0) == 6
        assert b(0, 1) == grid(1, 2)
        assert b(2, 1) == 17

        b.set((0, 0), 42)
        assert grid(1, 1) == 42

    def test_double_slice(self, grid):
        b = grid.slice(Slice(1, 3) + Slice(1, 4))
        c = b.slice(Slice(0, 3) + Slice(2, 2))
        assert c.shape == (3, 2)
        assert c.strides == (5, 1)
        assert np.array_equal(c, [[8, 9], [13, 14], [18, 19]])

    def test_strided(self):
        a = immediate(arange(98))
        evens = a.slice(Slice(0, 49, 2))
        expected = arange(0, 98, 2)
        assert all(evens == expected)
        assert not any(evens != expected)
        assert not evens.contiguous()

    def test_out_of_bounds(self, grid):
        with pytest.raises(IndexError):
            grid.slice(Slice((4, 0), (1, 1)))
        with pytest.raises(LengthError):
            grid.slice(Slice((2, 0), (3, 1)))
        with pytest.raises(LengthError):
            grid.slice(Slice((0, 0), (2, 3), (1, 3)))
        with pytest.raises(DimensionMismatch):
            grid.slice(Slice(0, 1))

    def test_empty_out_of_bounds(self):
        a = immediate(arange(4))
        with pytest.raises(IndexError):
            a.slice(Slice(9, 0))
        assert a.slice(Slice(2, 0)).shape == (0,)

    def test_slice_for_dim(self):
        a = immediate(reshape(arange(24), (2, 4, 3)))
        assert a(0, 2, 1) == 7
        assert a(1, 2, 2) == 20

        b = a.slice_for_dim(1, 2)
        assert b.shape == (2, 1, 3)
        assert b(0, 0, 0) == 6
        assert b(1, 0, 2) == 20
        with pytest.raises(IndexError):
            a.fix_axis(3, 0)

    def test_contiguity(self, grid):
        assert grid.contiguous()
        assert grid[1].contiguous()
        assert grid[1:3].contiguous()
        assert not grid[:, 1:3].contiguous()
        assert not grid[::2].contiguous()

    def test_data(self, grid):
        data = grid[1:3].data()
        assert np.array_equal(data, np.arange(5, 15))
        data[0] = -1
        assert grid(1, 0) == -1
        with pytest.raises(ValueError):
            grid[:, ::2].data()


class TestCopies:
    def test_view(self, grid):
        view = grid.view()
        assert view.shape == grid.shape
        assert view.strides == grid.strides
        view.set((0, 0), 456)
        assert grid(0, 0) == 456

    def test_copy(self, array, np_array):
        copy = array.copy()
        assert copy.contiguous()
        assert np.array_equal(copy, array)
        copy.set((1, 1), 0)
        assert array(1, 1) == np_array[1, 1]
        assert not copy.shares_storage(array)

    def test_copy_of_strided_view(self, grid):
        copy = grid[::-1, 1::2].copy()
        assert copy.contiguous()
        assert copy.strides == (2, 1)
        assert np.array_equal(copy, np.arange(20).reshape(4, 5)[::-1, 1::2])

    def test_immediate_copies(self):
        a = immediate(arange(24))
        b = immediate(a)
        assert a(2) == b(2)
        b.set(2, 42)
        assert a(2) == 2
        assert b(2) == 42

    def test_round_trip(self, array):
        assert all(immediate(delay(array)) == array)


class TestAssignment:
    def test_fill(self, array, dtype):
        array.fill(3)
        assert np.array_equal(array, np.full((4, 5), 3, dtype))

    def test_fill_view(self, grid):
        grid[:, 1].fill(0)
        assert np.array_equal(grid[:, 1], [0, 0, 0, 0])
        assert grid(0, 2) == 2

    def test_assign_mismatch(self, grid):
        with pytest.raises(DimensionMismatch):
            grid.assign(immediate(arange(20)))
        with pytest.raises(DimensionMismatch):
            grid[0] = immediate(arange(4))

    def test_fill_and_assign_traverse_coordinates(self, grid, monkeypatch):
        visited = []

        def recording(shape):
            visited.append(shape)
            return iter_coords(shape)

        monkeypatch.setattr(base, "iter_coords", recording)
        grid[1:3].fill(0)
        grid.assign(np.ones((4, 5), dtype=np.int64))
        assert visited == [(2, 5), (4, 5)]
        assert np.array_equal(grid, np.ones((4, 5)))

    def test_assign_disabled_checks(self, grid):
        with bound_checks(False):
            grid[0].assign(np.arange(5) * 10)
        assert grid(0, 4) == 40

    def test_self_overlapping(self, grid):
        # shift every row up by one, as if the source had been copied first
        grid[:3] = grid[1:]
        expected = np.arange(20).reshape(4, 5)
        expected[:3] = expected[1:].copy()
        assert np.array_equal(grid, expected)

    def test_self_overlapping_reversed_view(self):
        a = immediate(arange(6))
        a[::-1] += a
        assert np.array_equal(a, [5, 5, 5, 5, 5, 5])

    def test_assign_transposed_self(self):
        a = immediate(reshape(arange(4), (2, 2)))
        a.assign(transpose(a))
        assert np.array_equal(a, [[0, 2], [1, 3]])

    def test_assign_expression_over_reversed_view(self):
        a = immediate(arange(6))
        a.assign(reshape(a[::-1], (6,)) * 1)
        assert np.array_equal(a, [5, 4, 3, 2, 1, 0])

    def test_assign_overlapping_ndarray(self):
        a = immediate(arange(6))
        a.assign(a.data()[::-1])
        assert np.array_equal(a, [5, 4, 3, 2, 1, 0])

    def test_storage_tracked_through_expressions(self, grid):
        assert transpose(grid + 1).shares_storage(grid)
        assert grid.shares_storage(grid[1:, ::2] * 2)
        assert not (reshape(arange(20), (4, 5)) + 1).shares_storage(grid)
        assert not grid.shares_storage(immediate(grid))


class TestInplace:
    def test_increment(self):
        a = immediate(reshape(arange(20), (4, 5)))
        b = immediate(3 * reshape(arange(20), (4, 5)))
        a += b
        assert a(0, 0) == 0
        assert a(1, 0) == 20
        assert a(3, 4) == 76

        b += b
        assert b(0, 0) == 0
        assert b(2, 4) == 84
        assert b(3, 1) == 96

    def test_scalars(self, grid):
        grid += 1
        grid *= 2
        grid -= 2
        assert np.array_equal(grid, np.arange(20).reshape(4, 5) * 2)
        grid %= 3
        assert grid(0, 2) == 1

    def test_divide(self):
        a = immediate(arange(1.0, 5.0, 1.0))
        a /= 2
        assert np.allclose(a, [0.5, 1.0, 1.5, 2.0])

    def test_on_view(self, grid):
        row = grid[1]
        row += 100
        assert grid(1, 3) == 108
        assert grid(2, 3) == 13

    def test_transposed_self(self):
        a = immediate(reshape(arange(4), (2, 2)))
        a += transpose(a)
        assert np.array_equal(a, [[0, 3], [3, 6]])

    def test_mismatch(self, grid):
        with pytest.raises(DimensionMismatch):
            grid += immediate(arange(5))


class TestRepresentation:
    def test_repr(self, grid):
        text = repr(grid)
        assert text.startswith("ImmediateArray(")
        assert "dtype=int64" in text

    def test_to_numpy(self, grid):
        view = grid[::2, ::-1]
        assert np.array_equal(view.to_numpy(), np.arange(20).reshape(4, 5)[::2, ::-1])
        assert view.to_numpy(np.float32).dtype == np.float32

    def test_bool(self):
        assert bool(immediate(arange(1, 2)))
        with pytest.raises(ValueError):
            bool(immediate(arange(3)))


class TestRelease:
    def test_release(self):
        a = ImmediateArray((3,))
        view = a[1:]
        assert a.buffer.holders == 2
        a.release()
        assert view.buffer.holders == 1
        view.fill(1.0)
        with pytest.raises(RuntimeError):
            a(0)
        with pytest.raises(RuntimeError):
            a.set(0, 1.0)
        view.release()

    def test_shared_storage(self):
        a = ImmediateArray((2, 3), np.int64, storage="shared")
        a.fill(7)
        copy = a.copy()
        assert copy.storage == "shared"
        assert np.array_equal(copy, np.full((2, 3), 7))
        copy.release()
        a.release()
