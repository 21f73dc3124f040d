import numpy as np
import pytest

from ndlattice.arrays import ImmediateArray


@pytest.fixture(params=[(), (5,), (4, 5), (2, 3, 4)], ids=["rank0", "rank1", "rank2", "rank3"])
def shape(request):
    return request.param


@pytest.fixture
def np_array(shape):
    return np.arange(int(np.prod(shape)), dtype=np.int64).reshape(shape)


@pytest.fixture
def array(np_array):
    return ImmediateArray.from_numpy(np_array)
