#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""
Dense fallback containers.

DenseMatrix and DenseVector store Python ints in numpy object arrays, so they
share the unbounded integer model of the run-length encoded containers. They
are the conversion target of ``RleMatrix.to_dense`` and the scratch storage of
the triangular solvers, and they carry products that are not expected to
compress (an RleMatrix times a dense operand).
"""

import logging
from typing import List, Sequence

import numpy as np

from .exceptions import DomainError, NonSquareError, ShapeError
from .matrix_operations import OperandKind, as_int, as_int_list, dispatch, operand_kind
from .names import INT32_MAX, INT32_MIN

LOG = logging.getLogger(__name__)

_TO_INT = np.frompyfunc(as_int, 1, 1)


def _int_array(data, ndim: int, kind: str) -> np.ndarray:
    """Object array of Python ints; rejects non-integer elements."""
    arr = np.array(data, dtype=object)
    if arr.ndim != ndim:
        raise ShapeError(f"{kind} needs {ndim}D data, got shape {arr.shape}.")
    if arr.size == 0:
        return arr
    return _TO_INT(arr).astype(object)


def trunc_div_array(a: np.ndarray, b) -> np.ndarray:
    """Elementwise integer division rounding toward zero."""
    b = np.asarray(b, dtype=object)
    if np.any(b == 0):
        raise DomainError("Division by zero.")
    q = np.abs(a) // np.abs(b)
    return np.where((a < 0) != (b < 0), -q, q)


def cofactor_det(rows: List[List[int]]) -> int:
    """Determinant by cofactor expansion along row 0 (exact, O(n!))."""
    n = len(rows)
    if n == 0:
        return 1
    if n == 1:
        return rows[0][0]
    if n == 2:
        return rows[0][0] * rows[1][1] - rows[0][1] * rows[1][0]
    total = 0
    for j in range(n):
        a0j = rows[0][j]
        if a0j == 0:
            continue
        minor = [r[:j] + r[j + 1:] for r in rows[1:]]
        term = a0j * cofactor_det(minor)
        total += term if j % 2 == 0 else -term
    return total


class DenseVector:
    """Conventional integer vector."""

    operand_kind = OperandKind.VECTOR

    def __init__(self, data: Sequence[int]):
        self._data = _int_array(data, 1, "DenseVector")

    @classmethod
    def zeros(cls, size: int) -> 'DenseVector':
        return cls(np.zeros(size, dtype=object))

    @property
    def size(self) -> int:
        return int(self._data.shape[0])

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, i):
        if isinstance(i, slice):
            return DenseVector(self._data[i])
        return int(self._data[i])

    def __setitem__(self, i: int, x: int):
        self._data[i] = as_int(x)

    def __iter__(self):
        return iter(self.to_list())

    def to_list(self) -> List[int]:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def dot(self, u) -> int:
        other = as_int_list(u)
        if len(other) != self.size:
            raise ShapeError(f"dot: sizes differ ({self.size} vs {len(other)}).")
        return sum(a * b for a, b in zip(self.to_list(), other))

    def __eq__(self, other):
        if operand_kind(other) is not OperandKind.VECTOR:
            return NotImplemented
        return self.to_list() == as_int_list(other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"DenseVector({self.to_list()})"


class DenseMatrix:
    """Conventional row-major integer matrix."""

    operand_kind = OperandKind.DENSE_MATRIX

    _ADD = {
        OperandKind.SCALAR: '_add_scalar',
        OperandKind.DENSE_MATRIX: '_add_matrix',
        OperandKind.RLE_MATRIX: '_add_matrix',
    }
    _SUB = {
        OperandKind.SCALAR: '_sub_scalar',
        OperandKind.DENSE_MATRIX: '_sub_matrix',
        OperandKind.RLE_MATRIX: '_sub_matrix',
    }
    _MUL = {
        OperandKind.SCALAR: '_mul_scalar',
        OperandKind.VECTOR: '_mul_vector',
        OperandKind.DENSE_MATRIX: '_mul_matrix',
        OperandKind.RLE_MATRIX: '_mul_matrix',
    }
    _MATMUL = {
        OperandKind.DENSE_MATRIX: '_mul_matrix',
        OperandKind.RLE_MATRIX: '_mul_matrix',
    }

    def __init__(self, data):
        if hasattr(data, 'to_numpy') and getattr(data, 'operand_kind', None) is not None:
            data = data.to_numpy()
        self._data = _int_array(data, 2, "DenseMatrix")

    @classmethod
    def zeros(cls, dim1: int, dim2: int) -> 'DenseMatrix':
        return cls(np.zeros((dim1, dim2), dtype=object))

    # -------------------------------------------------------------------------
    # Shape and access
    # -------------------------------------------------------------------------

    @property
    def dim1(self) -> int:
        return int(self._data.shape[0])

    @property
    def dim2(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self):
        return self.dim1, self.dim2

    def is_square(self) -> bool:
        return self.dim1 == self.dim2

    def __getitem__(self, key):
        if isinstance(key, tuple):
            i, j = key
            if isinstance(i, slice) or isinstance(j, slice):
                return DenseMatrix(self._data[i, j])
            return int(self._data[i, j])
        return DenseVector(self._data[key])

    def __setitem__(self, key, x):
        if isinstance(key, tuple):
            self._data[key] = as_int(x)
        else:
            self._data[key] = as_int_list(x)

    def row(self, i: int) -> DenseVector:
        return DenseVector(self._data[i])

    def col(self, j: int) -> DenseVector:
        return DenseVector(self._data[:, j])

    def __iter__(self):
        for i in range(self.dim1):
            yield self.row(i)

    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def to_list(self) -> List[List[int]]:
        return self._data.tolist()

    def to_int(self) -> 'DenseMatrix':
        """Narrow every element to 32 bits (two's complement wrap-around)."""
        narrowed = (self._data - INT32_MIN) % 2**32 + INT32_MIN
        if np.any((self._data < INT32_MIN) | (self._data > INT32_MAX)):
            LOG.debug("to_int: values outside the 32 bit range were wrapped.")
        return DenseMatrix(narrowed)

    def transpose(self) -> 'DenseMatrix':
        return DenseMatrix(self._data.T)

    @property
    def T(self) -> 'DenseMatrix':
        return self.transpose()

    def slice_exclude(self, row: int, col: int) -> 'DenseMatrix':
        """Copy of this matrix without the given row and column."""
        keep_r = [i for i in range(self.dim1) if i != row]
        keep_c = [j for j in range(self.dim2) if j != col]
        return DenseMatrix(self._data[np.ix_(keep_r, keep_c)])

    def det(self) -> int:
        """Determinant by recursive cofactor expansion along row 0."""
        if not self.is_square():
            raise NonSquareError(f"det requires a square matrix, got {self.dim1}x{self.dim2}.")
        return cofactor_det(self.to_list())

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _check_same_shape(self, b, op: str):
        if (b.dim1, b.dim2) != (self.dim1, self.dim2):
            raise ShapeError(f"{op}: shapes differ ({self.dim1}x{self.dim2} vs {b.dim1}x{b.dim2}).")

    def _add_scalar(self, x) -> 'DenseMatrix':
        return DenseMatrix(self._data + as_int(x))

    def _add_matrix(self, b) -> 'DenseMatrix':
        self._check_same_shape(b, '+')
        return DenseMatrix(self._data + b.to_numpy())

    def _sub_scalar(self, x) -> 'DenseMatrix':
        return DenseMatrix(self._data - as_int(x))

    def _sub_matrix(self, b) -> 'DenseMatrix':
        self._check_same_shape(b, '-')
        return DenseMatrix(self._data - b.to_numpy())

    def _mul_scalar(self, x) -> 'DenseMatrix':
        return DenseMatrix(self._data * as_int(x))

    def _mul_vector(self, u) -> DenseVector:
        vals = as_int_list(u)
        if len(vals) < self.dim2:
            raise ShapeError(f"matrix * vector: vector size {len(vals)} < {self.dim2} columns.")
        return DenseVector(self._data @ np.array(vals[:self.dim2], dtype=object))

    def _mul_matrix(self, b) -> 'DenseMatrix':
        if self.dim2 != b.dim1:
            raise ShapeError(f"matrix * matrix: incompatible cross dimensions {self.dim2} and {b.dim1}.")
        return DenseMatrix(self._data @ b.to_numpy())

    def __add__(self, other):
        return dispatch(self, self._ADD, other)

    def __sub__(self, other):
        return dispatch(self, self._SUB, other)

    def __mul__(self, other):
        return dispatch(self, self._MUL, other)

    def __matmul__(self, other):
        return dispatch(self, self._MATMUL, other)

    def __truediv__(self, x):
        """Divide by an integer scalar, truncating toward zero."""
        if operand_kind(x) is not OperandKind.SCALAR:
            return NotImplemented
        return DenseMatrix(trunc_div_array(self._data, int(x)))

    def __neg__(self) -> 'DenseMatrix':
        return DenseMatrix(-self._data)

    def __eq__(self, other):
        kind = operand_kind(other)
        if kind not in (OperandKind.DENSE_MATRIX, OperandKind.RLE_MATRIX):
            return NotImplemented
        other_data = other.to_numpy() if hasattr(other, 'to_numpy') else np.asarray(other)
        return self._data.shape == other_data.shape and bool(np.array_equal(self._data, other_data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"DenseMatrix({self.to_list()})"
