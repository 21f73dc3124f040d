import numpy as np
import pytest

from ndlattice.arrays import ImmediateArray


@pytest.fixture(scope="session")
def shape():
    return (4, 5)


@pytest.fixture(params=[np.float32, np.int32], scope="session")
def dtype(request):
    return request.param


@pytest.fixture(params=["local", "shared"], scope="session")
def storage(request):
    return request.param


@pytest.fixture
def np_array(shape, dtype):
    return np.arange(np.prod(shape), dtype=dtype).reshape(shape)


@pytest.fixture
def blank_array(shape, dtype, storage):
    array = ImmediateArray(shape, dtype, storage=storage)
    yield array
    array.release()


@pytest.fixture
def array(blank_array: ImmediateArray, np_array: np.ndarray):
    blank_array[...] = np_array
    return blank_array
