import numpy as np
import pytest

from ndlattice.arrays import ImmediateArray, immediate
from ndlattice.delayed import arange, reshape


@pytest.fixture
def np_matrix():
    return np.arange(20).reshape(4, 5)


@pytest.fixture
def matrix():
    # m(i, j) == 5 * i + j, computed on demand
    return reshape(arange(20), (4, 5))


@pytest.fixture
def stored(np_matrix):
    array = ImmediateArray.from_numpy(np_matrix)
    yield array
    array.release()


@pytest.fixture
def vector():
    return immediate(arange(5))
