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
Run-length encoded integer matrices.

An RleMatrix of shape ``dim1 x dim2`` is a list of ``dim2`` RleVector columns,
each of size ``dim1``. Column-oriented work (scalar arithmetic, column slicing
and concatenation) operates on the runs directly; row-oriented reads (transpose,
matrix-vector products, conversion) sweep all columns once with one run cursor
per column.

    >>> a = RleMatrix.from_dense([[1, 2],
    ...                           [3, 2]])
    >>> a.det(), a.trace()
    (-4, 3)
    >>> (a * RleMatrix.eye(2)) == a
    True

Binary operators classify their right operand (scalar, vector, RleMatrix or
DenseMatrix, see ``matrix_operations``) and look the handler up in a per
operator table. An RleMatrix times a dense matrix is computed densely and
returns a DenseMatrix.

Pure operations return new matrices. In-place forms (``+=``, ``-=``, ``*=``,
``/=``, ``mul_cols_ip``, ``reduce_ip``, ``inverse_ip``, ``lud_ip``,
``nullspace_ip``) rewrite the column run lists of the receiver and return that
same object, so every other reference to it sees the new contents.
"""

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from . import csv_io, gauss
from .dense import DenseMatrix
from .exceptions import DomainError, NonSquareError, ShapeError
from .matrix_operations import OperandKind, as_int, as_int_list, dispatch, operand_kind
from .names import AUTO
from .rle_vector import RleVector

LOG = logging.getLogger(__name__)


class RleMatrix:
    """Integer matrix stored column-major as run-length encoded vectors."""

    operand_kind = OperandKind.RLE_MATRIX

    # handlers returning the new column list
    _ADD = {
        OperandKind.SCALAR: '_add_scalar',
        OperandKind.VECTOR: '_add_vector',
        OperandKind.RLE_MATRIX: '_add_matrix',
        OperandKind.DENSE_MATRIX: '_add_matrix',
    }
    _SUB = {
        OperandKind.SCALAR: '_sub_scalar',
        OperandKind.VECTOR: '_sub_vector',
        OperandKind.RLE_MATRIX: '_sub_matrix',
        OperandKind.DENSE_MATRIX: '_sub_matrix',
    }
    _DIV = {OperandKind.SCALAR: '_div_scalar'}
    # handlers returning a finished result
    _MUL = {
        OperandKind.SCALAR: '_mul_scalar',
        OperandKind.VECTOR: '_mul_vector',
        OperandKind.RLE_MATRIX: '_mul_rle',
        OperandKind.DENSE_MATRIX: '_mul_dense',
    }
    _MATMUL = {
        OperandKind.VECTOR: '_mul_vector',
        OperandKind.RLE_MATRIX: '_mul_rle',
        OperandKind.DENSE_MATRIX: '_mul_dense',
    }
    _IMUL = {
        OperandKind.SCALAR: '_imul_scalar',
        OperandKind.RLE_MATRIX: '_imul_matrix',
        OperandKind.DENSE_MATRIX: '_imul_matrix',
    }
    _POW = {OperandKind.SCALAR: 'power', OperandKind.VECTOR: 'mul_cols'}

    def __init__(self, dim1: int, dim2: Optional[int] = None, columns: Optional[List[RleVector]] = None):
        """Create a zero ``dim1 x dim2`` matrix, or wrap ``columns`` (taken over, not copied)."""
        if dim2 is None:
            dim2 = dim1
        if dim1 < 0 or dim2 < 0:
            raise ShapeError(f"negative matrix dimension: {dim1}x{dim2}")
        if columns is None:
            columns = [RleVector(dim1) for _ in range(dim2)]
        elif len(columns) != dim2:
            raise ShapeError(f"expected {dim2} columns, got {len(columns)}")
        else:
            for j, c in enumerate(columns):
                if c.size != dim1:
                    raise ShapeError(f"column {j} has size {c.size}, expected {dim1} (matrix is not rectangular)")
        self._dim1 = dim1
        self._dim2 = dim2
        self._columns = columns

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dense(cls, data) -> 'RleMatrix':
        """Encode a DenseMatrix, a 2D integer numpy array or a list of rows."""
        if isinstance(data, DenseMatrix):
            rows = data.to_list()
        elif operand_kind(data) is OperandKind.DENSE_MATRIX:
            rows = data.tolist()
        else:
            rows = [as_int_list(r) for r in data]
        return cls.from_rows(rows)

    @classmethod
    def from_columns(cls, columns: Sequence) -> 'RleMatrix':
        """Build from column vectors.

        RleVector arguments are taken over, not copied: do not keep mutating
        them through another reference once the matrix is in use.
        """
        cols = [RleVector.coerce(c) for c in columns]
        dim1 = cols[0].size if cols else 0
        return cls(dim1, len(cols), cols)

    @classmethod
    def from_rows(cls, rows: Sequence) -> 'RleMatrix':
        """Build from row vectors; every column is encoded directly from the rows."""
        rows = [as_int_list(r) for r in rows]
        dim1 = len(rows)
        dim2 = len(rows[0]) if rows else 0
        for i, r in enumerate(rows):
            if len(r) != dim2:
                raise ShapeError(f"row {i} has {len(r)} elements, expected {dim2}")
        cols = [RleVector.from_dense([r[j] for r in rows]) for j in range(dim2)]
        return cls(dim1, dim2, cols)

    @classmethod
    def eye(cls, m: int, n: int = 0) -> 'RleMatrix':
        """``m x n`` identity matrix (``n <= 0`` gives a square one)."""
        n = m if n <= 0 else n
        c = cls(m, n)
        for i in range(min(m, n)):
            c._columns[i].update(i, 1)
        return c

    @classmethod
    def zeros(cls, m: int, n: int) -> 'RleMatrix':
        return cls(m, n)

    @classmethod
    def read(cls, path) -> 'RleMatrix':
        """Load a matrix written by ``write``."""
        return cls.from_rows(csv_io.read_csv(path))

    def zero(self, m: int, n: int) -> 'RleMatrix':
        return type(self)(m, n)

    def copy(self) -> 'RleMatrix':
        return type(self)(self._dim1, self._dim2, [c.copy() for c in self._columns])

    # -------------------------------------------------------------------------
    # Shape queries
    # -------------------------------------------------------------------------

    @property
    def dim1(self) -> int:
        return self._dim1

    @property
    def dim2(self) -> int:
        return self._dim2

    @property
    def shape(self) -> Tuple[int, int]:
        return self._dim1, self._dim2

    def is_square(self) -> bool:
        return self._dim1 == self._dim2

    def is_rectangular(self) -> bool:
        return len(self._columns) == self._dim2 and all(c.size == self._dim1 for c in self._columns)

    def csize(self) -> List[int]:
        """Number of runs stored per column."""
        return [c.csize for c in self._columns]

    def _require_square(self, op: str):
        if not self.is_square():
            raise NonSquareError(f"{op} requires a square matrix, got {self._dim1}x{self._dim2}")

    def _check_same_shape(self, b, op: str):
        if (b.dim1, b.dim2) != (self._dim1, self._dim2):
            raise ShapeError(f"{op}: shapes differ ({self._dim1}x{self._dim2} vs {b.dim1}x{b.dim2})")

    # -------------------------------------------------------------------------
    # Element, row and column access
    # -------------------------------------------------------------------------

    def _iter_rows(self) -> Iterator[List[int]]:
        """Decode the matrix row by row with one run cursor per column."""
        runs = [c.runs for c in self._columns]
        pos = [0] * self._dim2
        for i in range(self._dim1):
            row = []
            for j, rs in enumerate(runs):
                k = pos[j]
                while rs[k].end <= i:
                    k += 1
                pos[j] = k
                row.append(rs[k].value)
            yield row

    def __getitem__(self, key):
        if isinstance(key, tuple):
            i, j = key
            if isinstance(i, slice) and isinstance(j, slice):
                rows = range(*i.indices(self._dim1))
                cols = range(*j.indices(self._dim2))
                if rows.step == 1 and cols.step == 1:
                    return self.slice_range(rows.start, rows.start + len(rows), cols.start, cols.start + len(cols))
                return self.select_rows(rows).select_cols(cols)
            if isinstance(i, slice):
                return self._columns[j][i]
            if isinstance(j, slice):
                return self.row(i)[j]
            return self._columns[j][i]
        return self.row(key)

    def __setitem__(self, key, x):
        if isinstance(key, tuple):
            i, j = key
            if isinstance(i, slice) and isinstance(j, slice):
                self._assign_block(i, j, x)
            elif isinstance(i, slice):
                col = self._columns[j]
                self._assign_cells(range(*i.indices(self._dim1)), x, lambda r, v: col.update(r, v))
            elif isinstance(j, slice):
                self._assign_cells(range(*j.indices(self._dim2)), x, lambda c, v: self._columns[c].update(i, v))
            else:
                self._columns[j].update(i, x)
        else:
            self.set_row(key, x)

    @staticmethod
    def _assign_cells(positions: range, u, setter) -> None:
        vals = as_int_list(u)
        if len(vals) != len(positions):
            raise ShapeError(f"cannot assign {len(vals)} element(s) to {len(positions)} position(s)")
        for p, v in zip(positions, vals):
            setter(p, v)

    def _assign_block(self, ri: slice, rj: slice, b):
        rows = range(*ri.indices(self._dim1))
        cols = range(*rj.indices(self._dim2))
        if (b.dim1, b.dim2) != (len(rows), len(cols)):
            raise ShapeError(f"cannot assign a {b.dim1}x{b.dim2} matrix to a {len(rows)}x{len(cols)} block")
        for bj, j in enumerate(cols):
            col = self._columns[j]
            for bi, i in enumerate(rows):
                col.update(i, b[bi, bj])

    def row(self, i: int) -> RleVector:
        if i < 0:
            i += self._dim1
        return RleVector.from_dense([c[i] for c in self._columns])

    def col(self, j: int, start: int = 0) -> RleVector:
        """Copy of column ``j`` from row ``start`` on."""
        c = self._columns[j]
        return c.copy() if start == 0 else c.slice(start, self._dim1)

    def __iter__(self) -> Iterator[RleVector]:
        for r in self._iter_rows():
            yield RleVector.from_dense(r)

    def set_row(self, i: int, u, j: int = 0) -> None:
        """Overwrite row ``i`` from column ``j`` on with the elements of ``u``."""
        vals = as_int_list(u)
        if j + len(vals) > self._dim2:
            raise ShapeError(f"set_row: {len(vals)} elements from column {j} exceed {self._dim2} columns")
        for k, x in enumerate(vals):
            self._columns[k + j].update(i, x)

    def set_col(self, j: int, u) -> None:
        col = RleVector.coerce(u).copy()
        if col.size != self._dim1:
            raise ShapeError(f"set_col: vector size {col.size} != {self._dim1} rows")
        self._columns[j] = col

    def set_all(self, x: int) -> None:
        x = as_int(x)
        self._columns = [RleVector.constant(x, self._dim1) for _ in range(self._dim2)]

    def set_values(self, rows) -> None:
        """Replace the contents with the given rows (same shape required)."""
        other = RleMatrix.from_rows(rows)
        self._check_same_shape(other, 'set_values')
        self._columns = other._columns

    def swap(self, i: int, k: int, start_col: int = 0) -> None:
        """Swap rows ``i`` and ``k`` in columns ``start_col`` onward."""
        if i == k:
            return
        for c in self._columns[start_col:]:
            a, b = c[i], c[k]
            if a != b:
                c.update(i, b)
                c.update(k, a)

    # -------------------------------------------------------------------------
    # Slicing and selection
    # -------------------------------------------------------------------------

    def slice(self, start: int, end: int) -> 'RleMatrix':
        """Rows ``start`` (inclusive) to ``end`` (exclusive)."""
        return RleMatrix(end - start, self._dim2, [c.slice(start, end) for c in self._columns])

    def slice_cols(self, start: int, end: int) -> 'RleMatrix':
        """Columns ``start`` (inclusive) to ``end`` (exclusive)."""
        if start >= end:
            return RleMatrix(self._dim1, 0)
        return RleMatrix(self._dim1, end - start, [c.copy() for c in self._columns[start:end]])

    def slice_range(self, r_from: int, r_end: int, c_from: int, c_end: int) -> 'RleMatrix':
        cols = [c.slice(r_from, r_end) for c in self._columns[c_from:c_end]]
        return RleMatrix(r_end - r_from, len(cols), cols)

    def slice_exclude(self, row: Optional[int] = None, col: Optional[int] = None) -> 'RleMatrix':
        """Copy without row ``row`` and/or column ``col`` (None keeps all)."""
        cols = []
        for j, c in enumerate(self._columns):
            if j == col:
                continue
            if row is None:
                cols.append(c.copy())
            else:
                cols.append(c.slice(0, row).concat(c.slice(row + 1, self._dim1)))
        dim1 = self._dim1 if row is None else self._dim1 - 1
        return RleMatrix(dim1, len(cols), cols)

    def select_rows(self, row_index: Sequence[int]) -> 'RleMatrix':
        idx = list(row_index)
        cols = [RleVector.from_dense([c[i] for i in idx]) for c in self._columns]
        return RleMatrix(len(idx), self._dim2, cols)

    def select_cols(self, col_index: Sequence[int]) -> 'RleMatrix':
        cols = [self._columns[j].copy() for j in col_index]
        return RleMatrix(self._dim1, len(cols), cols)

    # -------------------------------------------------------------------------
    # Concatenation
    # -------------------------------------------------------------------------

    def _row_values(self, u, op: str) -> List[int]:
        vals = as_int_list(u)
        if len(vals) != self._dim2:
            raise ShapeError(f"{op}: vector size {len(vals)} does not match {self._dim2} columns")
        return vals

    def _col_vector(self, u, op: str) -> RleVector:
        v = RleVector.coerce(u).copy()
        if v.size != self._dim1:
            raise ShapeError(f"{op}: vector size {v.size} does not match {self._dim1} rows")
        return v

    def prepend_row(self, u) -> 'RleMatrix':
        """New matrix with ``u`` as its first row."""
        vals = self._row_values(u, 'prepend_row')
        cols = [RleVector.constant(x, 1).concat(c) for x, c in zip(vals, self._columns)]
        return RleMatrix(self._dim1 + 1, self._dim2, cols)

    def append_row(self, u) -> 'RleMatrix':
        """New matrix with ``u`` as its last row."""
        vals = self._row_values(u, 'append_row')
        cols = [c.concat(x) for x, c in zip(vals, self._columns)]
        return RleMatrix(self._dim1 + 1, self._dim2, cols)

    def prepend_col(self, u) -> 'RleMatrix':
        """New matrix with ``u`` as its first column."""
        v = self._col_vector(u, 'prepend_col')
        return RleMatrix(self._dim1, self._dim2 + 1, [v] + [c.copy() for c in self._columns])

    def append_col(self, u) -> 'RleMatrix':
        """New matrix with ``u`` as its last column."""
        v = self._col_vector(u, 'append_col')
        return RleMatrix(self._dim1, self._dim2 + 1, [c.copy() for c in self._columns] + [v])

    def concat_rows(self, b) -> 'RleMatrix':
        """Stack ``b`` below this matrix; every column's run list is rebuilt."""
        if b.dim2 != self._dim2:
            raise ShapeError(f"concat_rows: {b.dim2} columns do not match {self._dim2}")
        cols = [c.concat(b.col(j)) for j, c in enumerate(self._columns)]
        return RleMatrix(self._dim1 + b.dim1, self._dim2, cols)

    def concat_cols(self, b) -> 'RleMatrix':
        """Place ``b`` to the right of this matrix."""
        if b.dim1 != self._dim1:
            raise ShapeError(f"concat_cols: {b.dim1} rows do not match {self._dim1}")
        cols = [c.copy() for c in self._columns] + [RleVector.coerce(b.col(j)) for j in range(b.dim2)]
        return RleMatrix(self._dim1, self._dim2 + b.dim2, cols)

    def transpose(self) -> 'RleMatrix':
        """Read this matrix row by row and use the rows as columns."""
        cols = [RleVector.from_dense(r) for r in self._iter_rows()]
        return RleMatrix(self._dim2, self._dim1, cols)

    @property
    def T(self) -> 'RleMatrix':
        return self.transpose()

    # -------------------------------------------------------------------------
    # Elementwise arithmetic
    # -------------------------------------------------------------------------

    def _broadcast(self, u, op: str) -> List[int]:
        vals = as_int_list(u)
        if len(vals) != self._dim2:
            raise ShapeError(f"{op}: vector size {len(vals)} does not match {self._dim2} columns")
        return vals

    def _add_scalar(self, x) -> List[RleVector]:
        return [c + x for c in self._columns]

    def _add_vector(self, u) -> List[RleVector]:
        return [c + x for c, x in zip(self._columns, self._broadcast(u, '+'))]

    def _add_matrix(self, b) -> List[RleVector]:
        self._check_same_shape(b, '+')
        return [c + b.col(j) for j, c in enumerate(self._columns)]

    def _sub_scalar(self, x) -> List[RleVector]:
        return [c - x for c in self._columns]

    def _sub_vector(self, u) -> List[RleVector]:
        return [c - x for c, x in zip(self._columns, self._broadcast(u, '-'))]

    def _sub_matrix(self, b) -> List[RleVector]:
        self._check_same_shape(b, '-')
        return [c - b.col(j) for j, c in enumerate(self._columns)]

    def _div_scalar(self, x) -> List[RleVector]:
        if as_int(x) == 0:
            raise DomainError(f"Division of a {self._dim1}x{self._dim2} matrix by zero.")
        return [c / x for c in self._columns]

    def _pure(self, table, other):
        cols = dispatch(self, table, other)
        if cols is NotImplemented:
            return cols
        return RleMatrix(self._dim1, self._dim2, cols)

    def _in_place(self, table, other):
        cols = dispatch(self, table, other)
        if cols is NotImplemented:
            return cols
        self._columns = cols
        return self

    def __add__(self, other):
        return self._pure(self._ADD, other)

    def __radd__(self, other):
        if operand_kind(other) is not OperandKind.SCALAR:
            return NotImplemented
        return self._pure(self._ADD, other)

    def __sub__(self, other):
        return self._pure(self._SUB, other)

    def __truediv__(self, other):
        """Divide every element by an integer, truncating toward zero."""
        return self._pure(self._DIV, other)

    def __neg__(self) -> 'RleMatrix':
        return RleMatrix(self._dim1, self._dim2, [-c for c in self._columns])

    def __iadd__(self, other):
        return self._in_place(self._ADD, other)

    def __isub__(self, other):
        return self._in_place(self._SUB, other)

    def __itruediv__(self, other):
        return self._in_place(self._DIV, other)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def _mul_scalar(self, x) -> 'RleMatrix':
        return RleMatrix(self._dim1, self._dim2, [c * x for c in self._columns])

    def _mul_vector(self, u) -> RleVector:
        """``c[i] = sum_j a(i, j) * u[j]``, reading one row at a time."""
        vals = as_int_list(u)
        if len(vals) < self._dim2:
            raise ShapeError(f"matrix * vector: vector size {len(vals)} < {self._dim2} columns")
        vals = vals[:self._dim2]
        return RleVector.from_dense([RleVector.from_dense(r).dot(vals) for r in self._iter_rows()])

    def _mul_rle(self, b: 'RleMatrix') -> 'RleMatrix':
        if self._dim2 != b.dim1:
            raise ShapeError(f"matrix * matrix: incompatible cross dimensions {self._dim2} and {b.dim1}")
        return self.transpose().mdot(b)

    def _mul_dense(self, b: DenseMatrix) -> DenseMatrix:
        if not isinstance(b, DenseMatrix):
            b = DenseMatrix(b)
        LOG.debug("RleMatrix * dense operand: computing a dense product.")
        return self.to_dense() * b

    def _imul_scalar(self, x) -> 'RleMatrix':
        self._columns = [c * x for c in self._columns]
        return self

    def _imul_matrix(self, b) -> 'RleMatrix':
        if b.dim1 != b.dim2:
            raise NonSquareError(f"*=: right operand must be square, got {b.dim1}x{b.dim2}")
        if self._dim2 != b.dim1:
            raise ShapeError(f"*=: incompatible cross dimensions {self._dim2} and {b.dim1}")
        product = self._mul_rle(b) if isinstance(b, RleMatrix) else RleMatrix.from_dense(self._mul_dense(b))
        self._columns = product._columns
        return self

    def __mul__(self, other):
        return dispatch(self, self._MUL, other)

    def __rmul__(self, other):
        if operand_kind(other) is not OperandKind.SCALAR:
            return NotImplemented
        return self._mul_scalar(other)

    def __matmul__(self, other):
        return dispatch(self, self._MATMUL, other)

    def __imul__(self, other):
        return dispatch(self, self._IMUL, other)

    def __pow__(self, other):
        """``a ** p`` for an integer p is the matrix power, ``a ** u`` for a vector is ``mul_cols``."""
        return dispatch(self, self._POW, other)

    def __rpow__(self, other):
        """``u ** a`` scales row i by ``u[i]`` (see ``mul_rows``)."""
        if operand_kind(other) is not OperandKind.VECTOR:
            return NotImplemented
        return self.mul_rows(other)

    def power(self, p: int) -> 'RleMatrix':
        """Raise this square matrix to the integer power ``p >= 2`` by repeated squaring."""
        p = as_int(p)
        if p < 2:
            raise ValueError(f"power: p must be an integer >= 2, got {p}")
        self._require_square('power')
        result = RleMatrix.eye(self._dim1)
        base = self.copy()
        while p > 0:
            if p & 1:
                result = result * base
            p >>= 1
            if p:
                base = base * base
        return result

    def mul_cols(self, u) -> 'RleMatrix':
        """``c(i, j) = a(i, j) * u[j]`` for the first ``min(dim2, len(u))`` columns."""
        vals = as_int_list(u)
        cols = [c * x for c, x in zip(self._columns, vals)]
        return RleMatrix(self._dim1, len(cols), cols)

    def mul_cols_ip(self, u) -> 'RleMatrix':
        """In-place ``a(i, j) *= u[j]``; ``u`` must cover every column."""
        vals = as_int_list(u)
        if len(vals) < self._dim2:
            raise ShapeError(f"mul_cols_ip: vector size {len(vals)} < {self._dim2} columns")
        self._columns = [c * x for c, x in zip(self._columns, vals)]
        return self

    def mul_rows(self, u) -> 'RleMatrix':
        """``c(i, j) = u[i] * a(i, j)``."""
        vals = as_int_list(u)
        if len(vals) < self._dim1:
            raise ShapeError(f"mul_rows: vector size {len(vals)} < {self._dim1} rows")
        scale = RleVector.from_dense(vals[:self._dim1])
        return RleMatrix(self._dim1, self._dim2, [c * scale for c in self._columns])

    def dot(self, b):
        """``a.t * b`` for a vector b; column-wise dot products for a matrix b."""
        kind = operand_kind(b)
        if kind is OperandKind.VECTOR:
            vals = as_int_list(b)
            if len(vals) != self._dim1:
                raise ShapeError(f"dot: vector size {len(vals)} != {self._dim1} rows")
            return RleVector.from_dense([c.dot(vals) for c in self._columns])
        if kind in (OperandKind.RLE_MATRIX, OperandKind.DENSE_MATRIX):
            self._check_same_shape(b, 'dot')
            return RleVector.from_dense([c.dot(b.col(j)) for j, c in enumerate(self._columns)])
        raise TypeError(f"dot: unsupported operand {type(b).__name__}")

    def mdot(self, b) -> 'RleMatrix':
        """Matrix ``a.t * b`` computed from dot products of columns."""
        if self._dim1 != b.dim1:
            raise ShapeError(f"mdot: incompatible first dimensions {self._dim1} and {b.dim1}")
        cols = []
        for j in range(b.dim2):
            bj = b.col(j)
            cols.append(RleVector.from_dense([c.dot(bj) for c in self._columns]))
        return RleMatrix(self._dim2, b.dim2, cols)

    # -------------------------------------------------------------------------
    # Diagonals and triangles
    # -------------------------------------------------------------------------

    def _diag_origin(self, k: int) -> Tuple[int, int, int]:
        i, j = (0, k) if k >= 0 else (-k, 0)
        if i >= self._dim1 or j >= self._dim2:
            raise ShapeError(f"diagonal {k} lies outside a {self._dim1}x{self._dim2} matrix")
        return i, j, min(self._dim1 - i, self._dim2 - j)

    def get_diag(self, k: int = 0) -> RleVector:
        """The ``k``-th diagonal: 0 main, > 0 above, < 0 below."""
        i, j, n = self._diag_origin(k)
        return RleVector.from_dense([self._columns[j + d][i + d] for d in range(n)])

    def set_diag(self, u, k: int = 0) -> None:
        i, j, n = self._diag_origin(k)
        vals = as_int_list(u)
        if len(vals) != n:
            raise ShapeError(f"set_diag: vector must contain {n} element(s), got {len(vals)}")
        for d, x in enumerate(vals):
            self._columns[j + d].update(i + d, x)

    def set_diag_value(self, x: int) -> None:
        """Set every element of the main diagonal to ``x``."""
        for d in range(min(self._dim1, self._dim2)):
            self._columns[d].update(d, x)

    def diag_combine(self, b) -> 'RleMatrix':
        """Block diagonal matrix ``[[a, 0], [0, b]]``."""
        cols = [c.concat(RleVector(b.dim1)) for c in self._columns]
        cols += [RleVector(self._dim1).concat(b.col(j)) for j in range(b.dim2)]
        return RleMatrix(self._dim1 + b.dim1, self._dim2 + b.dim2, cols)

    def diag(self, p: int, q: int = 0) -> 'RleMatrix':
        """Place this square matrix between identities ``Ip`` and ``Iq`` on the diagonal."""
        self._require_square('diag')
        return RleMatrix.eye(p).diag_combine(self).diag_combine(RleMatrix.eye(q))

    def lower_t(self) -> 'RleMatrix':
        """Lower triangle (main diagonal included), zeros elsewhere."""
        cols = []
        for j, c in enumerate(self._columns):
            top = min(j, self._dim1)
            cols.append(RleVector(top).concat(c.slice(top, self._dim1)))
        return RleMatrix(self._dim1, self._dim2, cols)

    def upper_t(self) -> 'RleMatrix':
        """Upper triangle (main diagonal included), zeros elsewhere."""
        cols = []
        for j, c in enumerate(self._columns):
            top = min(j + 1, self._dim1)
            cols.append(c.slice(0, top).concat(RleVector(self._dim1 - top)))
        return RleMatrix(self._dim1, self._dim2, cols)

    # -------------------------------------------------------------------------
    # Reductions
    # -------------------------------------------------------------------------

    def sum(self) -> int:
        return sum(c.sum() for c in self._columns)

    def sum_abs(self) -> int:
        return sum(c.norm1() for c in self._columns)

    def sum_lower(self) -> int:
        """Sum of the elements strictly below the main diagonal."""
        return sum(c.slice(j + 1, self._dim1).sum() for j, c in enumerate(self._columns) if j + 1 < self._dim1)

    def max(self, e: Optional[int] = None) -> int:
        """Largest element within the first ``e`` rows (default: all)."""
        return max(c.max(e) for c in self._columns)

    def min(self, e: Optional[int] = None) -> int:
        """Smallest element within the first ``e`` rows (default: all)."""
        return min(c.min(e) for c in self._columns)

    def trace(self) -> int:
        self._require_square('trace')
        return sum(c[i] for i, c in enumerate(self._columns))

    # -------------------------------------------------------------------------
    # Elimination (see gauss.py)
    # -------------------------------------------------------------------------

    def reduce(self) -> 'RleMatrix':
        """Gauss-Jordan reduced copy: ``[a | b]`` becomes ``[I | x]``."""
        return gauss.reduce(self)

    def reduce_ip(self) -> 'RleMatrix':
        """Gauss-Jordan reduction of this matrix, in place."""
        return gauss.reduce_ip(self)

    def inverse(self) -> 'RleMatrix':
        return gauss.inverse(self)

    def inverse_ip(self) -> 'RleMatrix':
        """Inverse of this matrix; this matrix is left equal to the identity."""
        return gauss.inverse_ip(self)

    def lud_npp(self) -> Tuple['RleMatrix', 'RleMatrix']:
        return gauss.lud_npp(self)

    def lud_ip(self) -> Tuple['RleMatrix', 'RleMatrix']:
        """LU factors; this matrix itself becomes (and is returned as) U."""
        return gauss.lud_ip(self)

    def bsolve(self, y) -> RleVector:
        return gauss.bsolve(self, y)

    def solve(self, b, lu: Optional[Tuple['RleMatrix', 'RleMatrix']] = None) -> RleVector:
        """Solve ``a * x = b``, factoring with ``lud_npp`` unless ``lu`` is given."""
        return gauss.solve(self, b, lu)

    @staticmethod
    def lu_solve(l, u, b) -> RleVector:
        """Solve ``l * u * x = b`` for unit lower ``l`` and upper ``u``."""
        return gauss.lu_solve(l, u, b)

    def det(self, method: str = AUTO) -> int:
        return gauss.det(self, method)

    def nullspace(self) -> RleVector:
        return gauss.nullspace(self)

    def nullspace_ip(self) -> RleVector:
        return gauss.nullspace_ip(self)

    # -------------------------------------------------------------------------
    # Conversion and output
    # -------------------------------------------------------------------------

    def to_list(self) -> List[List[int]]:
        return list(self._iter_rows())

    def to_dense(self) -> DenseMatrix:
        if self._dim1 == 0 or self._dim2 == 0:
            return DenseMatrix.zeros(self._dim1, self._dim2)
        return DenseMatrix(self.to_list())

    def to_numpy(self):
        return self.to_dense().to_numpy()

    def to_int(self) -> DenseMatrix:
        """Dense copy narrowed to 32 bit integers."""
        return self.to_dense().to_int()

    def write(self, path) -> None:
        """Write comma separated rows, one line per matrix row, no header."""
        csv_io.write_csv(self._iter_rows(), path, self._dim2)

    def __eq__(self, other):
        kind = operand_kind(other)
        if kind is OperandKind.RLE_MATRIX:
            return self.shape == other.shape and all(
                a == b for a, b in zip(self._columns, other._columns))
        if kind is OperandKind.DENSE_MATRIX:
            return self.to_dense() == other
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        if not self._columns:
            return f"RleMatrix({self._dim1}x{self._dim2})"
        body = ',\n\t'.join(repr(c) for c in self._columns)
        return f"RleMatrix({self._dim1}x{self._dim2},\n\t{body})"
