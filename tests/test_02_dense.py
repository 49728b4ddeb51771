"""Test the dense fallback containers and operand dispatch."""
import pytest
import numpy as np
import rlematrix as rm
from rlematrix import DenseMatrix, DenseVector, OperandKind, RleMatrix, RleVector, operand_kind
from rlematrix.dense import cofactor_det, trunc_div_array
from rlematrix.exceptions import DomainError, NonSquareError, ShapeError
from rlematrix.matrix_operations import as_int, as_int_list, dispatch


def test_import():
    assert (rm.__version__)
    assert (rm.MAX_COFACTOR_ORDER == 8)
    assert (rm.DET_METHODS == (rm.AUTO, rm.COFACTOR, rm.BAREISS))


def test_operand_kinds():
    assert (operand_kind(3) is OperandKind.SCALAR)
    assert (operand_kind(np.int64(3)) is OperandKind.SCALAR)
    assert (operand_kind(True) is None)
    assert (operand_kind(1.5) is None)
    assert (operand_kind([1, 2]) is OperandKind.VECTOR)
    assert (operand_kind(np.array([1, 2])) is OperandKind.VECTOR)
    assert (operand_kind(np.array([1.0, 2.0])) is None)
    assert (operand_kind(np.array([[1]])) is OperandKind.DENSE_MATRIX)
    assert (operand_kind(RleVector(2)) is OperandKind.VECTOR)
    assert (operand_kind(DenseVector([1])) is OperandKind.VECTOR)
    assert (operand_kind(RleMatrix(2)) is OperandKind.RLE_MATRIX)
    assert (operand_kind(DenseMatrix([[1]])) is OperandKind.DENSE_MATRIX)


def test_dispatch_unsupported_operand():
    table = {OperandKind.SCALAR: 'transpose'}
    assert (dispatch(DenseMatrix([[1]]), table, [1]) is NotImplemented)
    assert (dispatch(DenseMatrix([[1]]), table, 'x') is NotImplemented)


def test_int_coercion():
    assert (as_int(np.int32(4)) == 4)
    assert (as_int_list(np.array([1, 2])) == [1, 2])
    assert (as_int_list(RleVector.from_dense([3, 3])) == [3, 3])
    with pytest.raises(TypeError):
        as_int(2.0)
    with pytest.raises(TypeError):
        as_int_list(5)


def test_trunc_div_array():
    q = trunc_div_array(np.array([-7, 7, -1]), 2)
    assert (q.tolist() == [-3, 3, 0])
    with pytest.raises(DomainError):
        trunc_div_array(np.array([1]), 0)


def test_cofactor_det():
    assert (cofactor_det([]) == 1)
    assert (cofactor_det([[4]]) == 4)
    assert (cofactor_det([[1, 2], [3, 2]]) == -4)
    assert (cofactor_det([[2, 0, 1], [1, 3, 2], [1, 1, 2]]) == 6)


def test_dense_vector():
    v = DenseVector.zeros(3)
    v[1] = 4
    assert (v.to_list() == [0, 4, 0])
    assert (len(v) == 3 and v[1] == 4)
    assert (v[1:].to_list() == [4, 0])
    assert (v.dot([1, 2, 3]) == 8)
    assert (v == [0, 4, 0])
    with pytest.raises(ShapeError):
        v.dot([1])
    with pytest.raises(ShapeError):
        DenseVector([[1, 2]])


def test_dense_matrix_access():
    a = DenseMatrix([[1, 2], [3, 4]])
    assert (a.shape == (2, 2) and a.is_square())
    assert (a[0, 1] == 2)
    assert (a[1].to_list() == [3, 4])
    assert (a.col(0).to_list() == [1, 3])
    assert (a.T.to_list() == [[1, 3], [2, 4]])
    assert (a[0:1, :].to_list() == [[1, 2]])
    assert ([r.to_list() for r in a] == [[1, 2], [3, 4]])
    a[0, 0] = 5
    a[1] = [7, 8]
    assert (a.to_list() == [[5, 2], [7, 8]])
    with pytest.raises(ShapeError):
        DenseMatrix([1, 2])


def test_dense_matrix_det():
    a = DenseMatrix([[1, 2, 0], [3, 4, 1], [0, 1, 1]])
    assert (a.det() == -3)
    assert (a.slice_exclude(0, 0).to_list() == [[4, 1], [1, 1]])
    with pytest.raises(NonSquareError):
        DenseMatrix([[1, 2]]).det()


def test_dense_matrix_arithmetic():
    a = DenseMatrix([[1, 2], [3, 4]])
    assert ((a + 1).to_list() == [[2, 3], [4, 5]])
    assert ((a - a).to_list() == [[0, 0], [0, 0]])
    assert ((a * 2).to_list() == [[2, 4], [6, 8]])
    assert ((a * a).to_list() == (a.to_numpy() @ a.to_numpy()).tolist())
    assert ((a @ a) == (a * a))
    assert ((a * [1, 1]) == DenseVector([3, 7]))
    assert ((-a / 2).to_list() == [[0, -1], [-1, -2]])
    assert ((a + RleMatrix.eye(2)).to_list() == [[2, 2], [3, 5]])
    with pytest.raises(ShapeError):
        a + DenseMatrix([[1, 2, 3]])
    with pytest.raises(ShapeError):
        a * [1]
    with pytest.raises(ShapeError):
        a * DenseMatrix([[1, 2]])
    with pytest.raises(TypeError):
        a + 1.5


def test_to_int_wraps_to_32_bits():
    a = DenseMatrix([[2**31, -2**31 - 1, 5]])
    assert (a.to_int().to_list() == [[-2**31, 2**31 - 1, 5]])


def test_dense_equals_rle():
    a = DenseMatrix([[1, 0], [0, 1]])
    assert (a == RleMatrix.eye(2))
    assert (not (a == RleMatrix.eye(3)))


def test_dense_containers_hold_exact_integers():
    big = DenseMatrix([[2**70, -1], [0, 2**40]])
    assert (big[0, 0] == 2**70)
    assert ((big * 2).to_list() == [[2**71, -2], [0, 2**41]])
    assert ((big * big).to_list() == [[2**140, -2**70 - 2**40], [0, 2**80]])
    assert ((big * [1, 1]) == DenseVector([2**70 - 1, 2**40]))
    assert ((-big / 3).to_list() == [[-(2**70 // 3), 0], [0, -(2**40 // 3)]])
    assert (big.det() == 2**110)
    assert (DenseVector([2**65]).dot([2]) == 2**66)
    assert (DenseMatrix([[2**32 + 5]]).to_int().to_list() == [[5]])
    with pytest.raises(TypeError):
        DenseMatrix([[1.5]])
    with pytest.raises(TypeError):
        DenseVector([1, 2.0])


def test_object_arrays_are_operands():
    assert (operand_kind(np.array([2**70, 1], dtype=object)) is OperandKind.VECTOR)
    assert (operand_kind(DenseMatrix([[1]]).to_numpy()) is OperandKind.DENSE_MATRIX)
    assert (operand_kind(np.array([1.5], dtype=object)) is None)
