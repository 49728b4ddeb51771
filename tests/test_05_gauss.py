"""Test elimination: reduction, inversion, LU factorization, solving, determinants and nullspaces."""
import logging
import pytest
import numpy as np
import scipy.linalg
from rlematrix import BAREISS, COFACTOR, RleMatrix, RleVector
from rlematrix.exceptions import (DomainError, NonSquareError, RleMatrixError, ShapeConstraintError, ShapeError,
                                  SingularMatrixError)


@pytest.mark.timeout(15)
def test_reduce_returns_reduced_copy():
    w = RleMatrix.from_dense([[2, 3, 5], [-4, 2, 3]])
    r = w.reduce()
    assert (r.to_list() == [[1, 0, 1], [0, 1, 1]])
    assert (r.slice_cols(0, 2) == RleMatrix.eye(2))
    assert (w.to_list() == [[2, 3, 5], [-4, 2, 3]])


@pytest.mark.timeout(15)
def test_reduce_in_place():
    w = RleMatrix.from_dense([[1, 2, 3], [2, 5, 8]])
    alias = w
    assert (w.reduce_ip() is w)
    assert (alias.to_list() == [[1, 0, -1], [0, 1, 2]])


def test_reduce_shape_constraint():
    with pytest.raises(ShapeConstraintError):
        RleMatrix(3, 2).reduce()


@pytest.mark.timeout(15)
def test_inverse(unimodular_rows):
    a = RleMatrix.from_dense(unimodular_rows)
    n = a.dim1
    inv = a.inverse()
    assert ((a * inv) == RleMatrix.eye(n))
    assert ((inv * a) == RleMatrix.eye(n))
    expected = np.round(np.linalg.inv(np.array(unimodular_rows))).astype(int)
    assert (inv.to_numpy().tolist() == expected.tolist())
    assert (a.to_list() == unimodular_rows)


def test_inverse_known_values():
    a = RleMatrix.from_dense([[1, 2], [3, 7]])
    assert (a.inverse().to_list() == [[7, -2], [-3, 1]])


@pytest.mark.timeout(15)
def test_inverse_in_place(unimodular_rows):
    a = RleMatrix.from_dense(unimodular_rows)
    alias = a
    inv = a.inverse_ip()
    assert (alias == RleMatrix.eye(a.dim1))
    assert ((RleMatrix.from_dense(unimodular_rows) * inv) == RleMatrix.eye(a.dim1))


def test_inverse_with_pivoting(caplog):
    a = RleMatrix.from_dense([[0, 1], [1, 0]])
    with caplog.at_level(logging.DEBUG, logger='rlematrix'):
        inv = a.inverse()
    assert (inv.to_list() == [[0, 1], [1, 0]])
    assert ("swapping rows 0 and 1" in caplog.text)


def test_singular_matrix():
    a = RleMatrix.from_dense([[1, 2], [2, 4]])
    with pytest.raises(SingularMatrixError):
        a.inverse()
    with pytest.raises(ArithmeticError):
        RleMatrix(2).inverse()
    with pytest.raises(NonSquareError):
        RleMatrix(2, 3).inverse()


def test_determinant_and_trace(a22):
    assert (a22.det() == -4)
    assert (a22.trace() == 3)
    assert (RleMatrix.eye(5).det() == 1)
    assert (RleMatrix(0).det() == 1)
    with pytest.raises(NonSquareError):
        RleMatrix(2, 3).det()


def test_determinant_methods_agree(unimodular_rows, lu_rows):
    for rows in (unimodular_rows, lu_rows):
        a = RleMatrix.from_dense(rows)
        expected = round(scipy.linalg.det(np.array(rows)))
        assert (a.det(COFACTOR) == expected)
        assert (a.det(BAREISS) == expected)


@pytest.mark.timeout(15)
def test_large_determinant_uses_bareiss(caplog):
    rng = np.random.default_rng(0)
    data = rng.integers(-3, 4, size=(10, 10))
    a = RleMatrix.from_dense(data)
    with caplog.at_level(logging.DEBUG, logger='rlematrix'):
        d = a.det()
    assert (d == round(scipy.linalg.det(data)))
    assert ("by bareiss" in caplog.text)
    data[3] = data[5]
    assert (RleMatrix.from_dense(data).det() == 0)


def test_determinant_method_errors():
    with pytest.raises(ValueError):
        RleMatrix.eye(10).det(COFACTOR)
    with pytest.raises(ValueError):
        RleMatrix.eye(2).det('laplace')


@pytest.mark.timeout(15)
def test_lu_decomposition(lu_rows):
    a = RleMatrix.from_dense(lu_rows)
    l, u = a.lud_npp()
    assert ((l * u) == a)
    assert (l == l.lower_t())
    assert (u == u.upper_t())
    assert (l.get_diag().to_list() == [1] * a.dim1)
    assert (a.to_list() == lu_rows)


def test_lu_known_factors():
    a = RleMatrix.from_dense([[2, 1, 1], [4, 3, 3], [8, 7, 9]])
    l, u = a.lud_npp()
    assert (l.to_list() == [[1, 0, 0], [2, 1, 0], [4, 3, 1]])
    assert (u.to_list() == [[2, 1, 1], [0, 1, 1], [0, 0, 2]])


@pytest.mark.timeout(15)
def test_lu_in_place(lu_rows):
    a = RleMatrix.from_dense(lu_rows)
    l, u = a.lud_ip()
    assert (u is a)
    assert (u == u.upper_t())
    assert ((l * u) == RleMatrix.from_dense(lu_rows))
    assert ((l, u) == RleMatrix.from_dense(lu_rows).lud_npp())


def test_lu_zero_pivot():
    with pytest.raises(DomainError):
        RleMatrix.from_dense([[0, 1], [1, 0]]).lud_npp()
    with pytest.raises(NonSquareError):
        RleMatrix(2, 3).lud_npp()


@pytest.mark.timeout(15)
def test_solve(lu_rows):
    a = RleMatrix.from_dense(lu_rows)
    x = [1, -1, 2, 5][:a.dim1]
    b = a * x
    assert (a.solve(b).to_list() == x)
    lu = a.lud_npp()
    assert (a.solve(b, lu).to_list() == x)
    assert (RleMatrix.lu_solve(*lu, b).to_list() == x)


def test_solve_known_system():
    a = RleMatrix.from_dense([[2, 1, 1], [4, 3, 3], [8, 7, 9]])
    x = a.solve([7, 19, 49])
    assert (isinstance(x, RleVector))
    assert (x.to_list() == [1, 2, 3])
    with pytest.raises(ShapeError):
        a.solve([1, 2])


def test_back_substitution():
    u = RleMatrix.from_dense([[2, 1], [0, 3]])
    assert (u.bsolve([5, 6]).to_list() == [1, 2])
    with pytest.raises(DomainError):
        RleMatrix(2).bsolve([1, 1])


def test_nullspace():
    w = RleMatrix.from_dense([[1, 2, 3], [2, 5, 8]])
    ns = w.nullspace()
    assert (ns.to_list() == [1, -2, 1])
    assert ((w * ns).to_list() == [0, 0])
    assert (w.to_list() == [[1, 2, 3], [2, 5, 8]])
    assert (w.nullspace_ip() == ns)
    assert (w.to_list() == [[1, 0, -1], [0, 1, 2]])
    with pytest.raises(ShapeConstraintError):
        RleMatrix.eye(2).nullspace()


def test_fault_hierarchy():
    assert (issubclass(ShapeConstraintError, ShapeError))
    assert (issubclass(NonSquareError, ValueError))
    assert (issubclass(SingularMatrixError, RleMatrixError))
    assert (issubclass(DomainError, ZeroDivisionError))


def test_determinant_of_wide_integers():
    a = RleMatrix.from_rows([[2**70, 0], [0, 1]])
    assert (a.det() == 2**70)
    assert (a.det(BAREISS) == 2**70)
    b = RleMatrix.from_rows([[2**40, 1, 0], [1, 2**40, 0], [0, 0, 3]])
    assert (b.det() == 3 * (2**80 - 1))
    assert (b.det(BAREISS) == b.det(COFACTOR))
