import pytest
import numpy as np
from rlematrix import RleMatrix

# Unimodular matrices whose Gauss-Jordan pivots are all 1, so truncating
# integer division stays exact during reduction.
unimodular = [
    [[1, 2], [3, 7]],
    [[1, 2, 3], [0, 1, 4], [5, 6, 0]],
    [[1, 0, 0, 0], [2, 1, 0, 0], [0, 3, 1, 0], [4, 0, 5, 1]],
]

# Matrices with an exact Doolittle factorization
lu_factorable = [
    [[2, 1, 1], [4, 3, 3], [8, 7, 9]],
    [[1, 2], [3, 4]],
    [[3, 0, 0, 0], [0, 3, 0, 0], [0, 0, 3, 0], [0, 0, 0, 3]],
]


@pytest.fixture(params=unimodular, scope="session")
def unimodular_rows(request: pytest.FixtureRequest) -> list:
    """Provide session-level fixture for invertible integer matrices."""
    return request.param


@pytest.fixture(params=lu_factorable, scope="session")
def lu_rows(request: pytest.FixtureRequest) -> list:
    """Provide session-level fixture for matrices with exact LU factors."""
    return request.param


@pytest.fixture
def a22() -> RleMatrix:
    return RleMatrix.from_dense([[1, 2], [3, 2]])


@pytest.fixture
def a23() -> RleMatrix:
    return RleMatrix.from_dense([[1, 2, 3], [4, 5, 6]])


@pytest.fixture
def banded() -> RleMatrix:
    """Large matrix with long constant runs in every column."""
    data = np.zeros((200, 6), dtype=np.int64)
    data[:100, 0] = 1
    data[50:, 2] = -3
    data[::2, 4] = 7
    np.fill_diagonal(data, 9)
    return RleMatrix.from_dense(data)
