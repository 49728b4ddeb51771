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
Gaussian elimination on run-length encoded matrices.

All operations work in integer arithmetic with division truncated toward zero.
Reductions are exact only when every intermediate division is exact, e.g. for
unimodular matrices or augmented systems whose solution is integral.

Elimination reads and writes the matrix cell by cell through ``a[i, j]``; every
write goes through the run-splitting update of the column it lands in. The
triangular solvers keep their partial solution in a DenseVector.

Determinants are computed by cofactor expansion along row 0 up to
``MAX_COFACTOR_ORDER`` and by fraction-free Bareiss elimination beyond that.
"""

import logging
from typing import List, Optional, Tuple

from .dense import DenseVector, cofactor_det
from .exceptions import NonSquareError, ShapeConstraintError, ShapeError, SingularMatrixError
from .matrix_operations import as_int_list
from .names import AUTO, BAREISS, COFACTOR, DET_METHODS, MAX_COFACTOR_ORDER
from .rle_vector import RleVector
from .run import trunc_div

LOG = logging.getLogger(__name__)


def _require_square(a, op: str):
    if a.dim1 != a.dim2:
        raise NonSquareError(f"{op} requires a square matrix, got {a.dim1}x{a.dim2}")


# ==============================================================================
# Gauss-Jordan reduction
# ==============================================================================

def partial_pivot(a, i: int) -> int:
    """Row below ``i`` holding the entry of largest magnitude in column ``i``.

    Raises:
        SingularMatrixError: if every candidate entry is zero
    """
    best, best_abs = -1, 0
    for k in range(i + 1, a.dim1):
        v = abs(a[k, i])
        if v > best_abs:
            best, best_abs = k, v
    if best < 0:
        raise SingularMatrixError(f"unable to find a non-zero pivot for row {i}")
    return best


def reduce_ip(a):
    """
    Reduce ``a`` in place to reduced row echelon form.

    Every pivot row is divided by its pivot, then the pivot column is
    eliminated from all other rows, so ``[A | B]`` becomes ``[I | A^-1 B]``.
    A zero pivot is replaced by swapping in the row of largest magnitude below
    it, starting at the pivot column.

    Args:
        a: matrix with at least as many columns as rows

    Returns:
        ``a`` itself

    Raises:
        ShapeConstraintError: if ``a`` has fewer columns than rows
        SingularMatrixError: if no non-zero pivot exists for some row
    """
    if a.dim2 < a.dim1:
        raise ShapeConstraintError(f"reduce requires dim2 >= dim1, got {a.dim1}x{a.dim2}")
    n, m = a.dim1, a.dim2
    for i in range(n):
        if a[i, i] == 0:
            k = partial_pivot(a, i)
            LOG.debug(f"Zero pivot at ({i}, {i}), swapping rows {i} and {k}.")
            a.swap(i, k, i)
        pivot = a[i, i]
        row = [trunc_div(a[i, j], pivot) for j in range(m)]
        for j in range(i, m):
            a[i, j] = row[j]
        for k in range(n):
            if k == i:
                continue
            factor = a[k, i]
            if factor == 0:
                continue
            for j in range(i, m):
                if row[j] != 0:
                    a[k, j] = a[k, j] - factor * row[j]
    return a


def reduce(a):
    """Reduced row echelon form of a copy of ``a``."""
    return reduce_ip(a.copy())


def inverse(a):
    """Inverse by reduction of ``[A | I]``."""
    _require_square(a, 'inverse')
    n = a.dim1
    augmented = reduce_ip(a.concat_cols(a.eye(n)))
    return augmented.slice_cols(n, 2 * n)


def inverse_ip(a):
    """Inverse of ``a``; ``a`` is reduced along the way and ends up as the identity."""
    _require_square(a, 'inverse_ip')
    n = a.dim1
    augmented = reduce_ip(a.concat_cols(a.eye(n)))
    a[:, :] = augmented.slice_cols(0, n)
    return augmented.slice_cols(n, 2 * n)


def nullspace_ip(a) -> RleVector:
    """
    Basis vector of the nullspace of an ``n x (n+1)`` matrix, reducing ``a`` in place.

    After reduction ``a`` is ``[I | c]`` and the nullspace is spanned by
    ``(-c, 1)``.
    """
    if a.dim2 != a.dim1 + 1:
        raise ShapeConstraintError(f"nullspace requires dim2 == dim1 + 1, got {a.dim1}x{a.dim2}")
    reduce_ip(a)
    return (-a.col(a.dim2 - 1)).concat(1)


def nullspace(a) -> RleVector:
    return nullspace_ip(a.copy())


# ==============================================================================
# LU decomposition and triangular solves
# ==============================================================================

def lud_npp(a) -> Tuple:
    """
    Doolittle LU decomposition without pivoting.

    Returns:
        ``(l, u)`` with unit lower triangular ``l`` and upper triangular ``u``

    Raises:
        NonSquareError: if ``a`` is not square
        DomainError: if a zero pivot is met
    """
    _require_square(a, 'lud_npp')
    n = a.dim1
    l = a.eye(n)
    u = a.zero(n, n)
    if n == 0:
        return l, u
    for j in range(n):
        u[0, j] = a[0, j]
    for i in range(1, n):
        l[i, 0] = trunc_div(a[i, 0], u[0, 0])
    for i in range(1, n):
        for j in range(1, n):
            if i > j:
                s = sum(l[i, k] * u[k, j] for k in range(j))
                l[i, j] = trunc_div(a[i, j] - s, u[j, j])
            else:
                s = sum(l[i, k] * u[k, j] for k in range(i))
                u[i, j] = a[i, j] - s
    return l, u


def lud_ip(a) -> Tuple:
    """
    In-place LU decomposition without pivoting.

    The multipliers are stored below the diagonal of ``a`` during elimination
    and moved into a fresh ``l`` at the end; ``a`` is left holding ``u``.

    Returns:
        ``(l, a)``
    """
    _require_square(a, 'lud_ip')
    n = a.dim1
    for k in range(n):
        pivot_row = [a[k, j] for j in range(n)]
        for i in range(k + 1, n):
            factor = trunc_div(a[i, k], pivot_row[k])
            a[i, k] = factor
            if factor == 0:
                continue
            for j in range(k + 1, n):
                a[i, j] = a[i, j] - factor * pivot_row[j]
    l = a.eye(n)
    for j in range(n):
        for i in range(j + 1, n):
            l[i, j] = a[i, j]
            a[i, j] = 0
    return l, a


def bsolve(u, y) -> RleVector:
    """Back substitution for upper triangular ``u``."""
    vals = as_int_list(y)
    if len(vals) < u.dim1:
        raise ShapeError(f"bsolve: vector size {len(vals)} < {u.dim1} rows")
    x = DenseVector.zeros(u.dim2)
    for i in range(u.dim1 - 1, -1, -1):
        s = sum(u[i, j] * x[j] for j in range(i + 1, u.dim2))
        x[i] = trunc_div(vals[i] - s, u[i, i])
    return RleVector.from_dense(x)


def lu_solve(l, u, b) -> RleVector:
    """Solve ``l u x = b`` by forward then back substitution."""
    vals = as_int_list(b)
    if len(vals) < l.dim1:
        raise ShapeError(f"solve: vector size {len(vals)} < {l.dim1} rows")
    y = DenseVector.zeros(l.dim1)
    for i in range(l.dim1):
        y[i] = vals[i] - sum(l[i, j] * y[j] for j in range(i))
    return bsolve(u, y)


def solve(a, b, lu: Optional[Tuple] = None) -> RleVector:
    """Solve ``a x = b``; ``lu`` defaults to ``lud_npp(a)``."""
    l, u = lu if lu is not None else lud_npp(a)
    return lu_solve(l, u, b)


# ==============================================================================
# Determinant
# ==============================================================================

def bareiss_det(rows: List[List[int]]) -> int:
    """Fraction-free elimination determinant (every division is exact)."""
    m = [list(r) for r in rows]
    n = len(m)
    if n == 0:
        return 1
    sign, prev = 1, 1
    for k in range(n - 1):
        if m[k][k] == 0:
            swap = next((i for i in range(k + 1, n) if m[i][k] != 0), None)
            if swap is None:
                return 0
            m[k], m[swap] = m[swap], m[k]
            sign = -sign
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                m[i][j] = (m[i][j] * m[k][k] - m[i][k] * m[k][j]) // prev
        prev = m[k][k]
    return sign * m[n - 1][n - 1]


def det(a, method: str = AUTO) -> int:
    """
    Determinant of a square matrix.

    Args:
        a: square matrix
        method: ``'auto'``, ``'cofactor'`` or ``'bareiss'``. ``'auto'`` uses
            cofactor expansion up to order MAX_COFACTOR_ORDER.

    Raises:
        NonSquareError: if ``a`` is not square
        ValueError: for an unknown method, or cofactor expansion above MAX_COFACTOR_ORDER
    """
    _require_square(a, 'det')
    if method not in DET_METHODS:
        raise ValueError(f"unknown determinant method '{method}', expected one of {DET_METHODS}")
    n = a.dim1
    if method == AUTO:
        method = COFACTOR if n <= MAX_COFACTOR_ORDER else BAREISS
    elif method == COFACTOR and n > MAX_COFACTOR_ORDER:
        raise ValueError(f"cofactor expansion is limited to order {MAX_COFACTOR_ORDER}, got {n}")
    LOG.debug(f"Determinant of a {n}x{n} matrix by {method}.")
    if method == COFACTOR:
        return cofactor_det(a.to_list())
    return bareiss_det(a.to_list())
