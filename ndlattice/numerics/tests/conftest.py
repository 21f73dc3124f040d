import numpy as np
import pytest

from ndlattice.delayed import arange, reshape


@pytest.fixture
def np_cube():
    return np.arange(24).reshape(2, 3, 4)


@pytest.fixture
def cube():
    return reshape(arange(24), (2, 3, 4))
