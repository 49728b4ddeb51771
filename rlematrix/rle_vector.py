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
Run-length encoded integer vectors.

An RleVector of ``size`` n stores its elements as a sorted list of Runs that
tile [0, n) without gaps or overlaps. Element access is a binary search over
run starts, an update splits at most one run into three, and every elementwise
operation walks the aligned runs of both operands instead of the decoded
elements:

    >>> u = RleVector.from_dense([4, 4, 4, 0, 0, 7])
    >>> u.csize
    3
    >>> (u * 2).to_list()
    [8, 8, 8, 0, 0, 14]
    >>> u.dot([1, 1, 1, 1, 1, 1])
    19

Adjacent runs holding the same value are merged after every operation, but
callers should only rely on the decoded contents.
"""

import math
import operator
from bisect import bisect_right
from itertools import groupby
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .dense import DenseVector
from .exceptions import DomainError, ShapeError
from .matrix_operations import OperandKind, as_int, as_int_list, dispatch, operand_kind
from .run import Run, trunc_div


def compact(runs: Iterable[Run]) -> List[Run]:
    """Merge neighbouring runs of equal value and drop empty ones."""
    out: List[Run] = []
    for r in runs:
        if r.length <= 0:
            continue
        if out and out[-1].value == r.value:
            last = out[-1]
            out[-1] = Run(last.value, last.start, last.length + r.length)
        else:
            out.append(r)
    return out


def encode(values: Sequence[int]) -> List[Run]:
    """One run per maximal span of equal values."""
    runs = []
    start = 0
    for value, group in groupby(values):
        length = sum(1 for _ in group)
        runs.append(Run(value, start, length))
        start += length
    return runs


def aligned_segments(a: Sequence[Run], b: Sequence[Run]) -> Iterator[Tuple[int, int, int, int]]:
    """Walk two run lists over the same range; yields (start, length, a_value, b_value)."""
    i = j = 0
    pos = 0
    while i < len(a) and j < len(b):
        ra, rb = a[i], b[j]
        end = min(ra.end, rb.end)
        yield pos, end - pos, ra.value, rb.value
        pos = end
        if ra.end == end:
            i += 1
        if rb.end == end:
            j += 1


class RleVector:
    """Integer vector stored as runs of repeated values."""

    operand_kind = OperandKind.VECTOR

    _ADD = {OperandKind.SCALAR: '_add_scalar', OperandKind.VECTOR: '_add_vector'}
    _SUB = {OperandKind.SCALAR: '_sub_scalar', OperandKind.VECTOR: '_sub_vector'}
    _MUL = {OperandKind.SCALAR: '_mul_scalar', OperandKind.VECTOR: '_mul_vector'}
    _DIV = {OperandKind.SCALAR: '_div_scalar', OperandKind.VECTOR: '_div_vector'}

    def __init__(self, size: int = 0, runs: Optional[List[Run]] = None):
        if size < 0:
            raise ShapeError(f"negative vector size: {size}")
        self._size = size
        if runs is None:
            runs = [Run(0, 0, size)] if size > 0 else []
        self._runs = runs

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dense(cls, values) -> 'RleVector':
        """Encode a dense integer sequence (list, numpy array, DenseVector)."""
        vals = as_int_list(values)
        return cls(len(vals), encode(vals))

    @classmethod
    def from_runs(cls, runs: Iterable, size: Optional[int] = None) -> 'RleVector':
        """Build from (value, start, length) triples, checking that they tile [0, size)."""
        checked = [Run(as_int(v), int(s), int(n)) for v, s, n in runs]
        pos = 0
        for r in checked:
            if r.length < 1:
                raise ShapeError(f"run {tuple(r)} has length < 1")
            if r.start != pos:
                raise ShapeError(f"run {tuple(r)} does not start at offset {pos}")
            pos = r.end
        if size is None:
            size = pos
        elif pos != size:
            raise ShapeError(f"runs cover [0, {pos}) but the vector size is {size}")
        return cls(size, compact(checked))

    @classmethod
    def constant(cls, value: int, size: int) -> 'RleVector':
        value = as_int(value)
        return cls(size, [Run(value, 0, size)] if size > 0 else [])

    @classmethod
    def coerce(cls, u) -> 'RleVector':
        """Return ``u`` itself if it is an RleVector, else its encoding."""
        return u if isinstance(u, RleVector) else cls.from_dense(u)

    def copy(self) -> 'RleVector':
        return RleVector(self._size, list(self._runs))

    # -------------------------------------------------------------------------
    # Size queries
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    @property
    def csize(self) -> int:
        """Number of runs used to store the vector."""
        return len(self._runs)

    @property
    def runs(self) -> Tuple[Run, ...]:
        return tuple(self._runs)

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def _index(self, i: int) -> int:
        if i < 0:
            i += self._size
        if not 0 <= i < self._size:
            raise IndexError(f"index {i} out of range for vector of size {self._size}")
        return i

    def _find(self, i: int) -> int:
        """Position in the run list of the run covering element ``i``."""
        return bisect_right(self._runs, i, key=operator.attrgetter('start')) - 1

    def __getitem__(self, i):
        if isinstance(i, slice):
            start, stop, step = i.indices(self._size)
            if step == 1:
                return self.slice(start, max(start, stop))
            return RleVector.from_dense(self.to_list()[i])
        i = self._index(i)
        return self._runs[self._find(i)].value

    def __setitem__(self, i: int, x: int):
        self.update(i, x)

    def update(self, i: int, x: int) -> None:
        """Set element ``i`` to ``x``, splitting the run that covers it."""
        i = self._index(i)
        x = as_int(x)
        k = self._find(i)
        run = self._runs[k]
        if run.value == x:
            return
        pieces = [
            Run(run.value, run.start, i - run.start),
            Run(x, i, 1),
            Run(run.value, i + 1, run.end - i - 1),
        ]
        lo = max(k - 1, 0)
        hi = min(k + 2, len(self._runs))
        window = self._runs[lo:k] + pieces + self._runs[k + 1:hi]
        self._runs[lo:hi] = compact(window)

    def __iter__(self) -> Iterator[int]:
        for r in self._runs:
            for _ in range(r.length):
                yield r.value

    def to_list(self) -> List[int]:
        out: List[int] = []
        for r in self._runs:
            out.extend([r.value] * r.length)
        return out

    def to_dense(self) -> DenseVector:
        return DenseVector(self.to_list())

    def slice(self, start: int, end: int) -> 'RleVector':
        """Elements ``start`` (inclusive) to ``end`` (exclusive)."""
        if not 0 <= start <= end <= self._size:
            raise IndexError(f"slice [{start}, {end}) out of range for vector of size {self._size}")
        out = []
        for r in self._runs:
            lo, hi = max(r.start, start), min(r.end, end)
            if lo < hi:
                out.append(Run(r.value, lo - start, hi - lo))
        return RleVector(end - start, out)

    def concat(self, other) -> 'RleVector':
        """Append a scalar or a vector after the last element."""
        if operand_kind(other) is OperandKind.SCALAR:
            tail = [Run(int(other), self._size, 1)]
            size = self._size + 1
        else:
            u = RleVector.coerce(other)
            tail = [Run(r.value, r.start + self._size, r.length) for r in u._runs]
            size = self._size + u.size
        return RleVector(size, compact(self._runs + tail))

    # -------------------------------------------------------------------------
    # Run arithmetic
    # -------------------------------------------------------------------------

    def _map(self, fn: Callable[[int], int]) -> List[Run]:
        return compact(Run(fn(r.value), r.start, r.length) for r in self._runs)

    def _zip(self, u, fn: Callable[[int, int], int], op: str) -> List[Run]:
        u = RleVector.coerce(u)
        if u.size != self._size:
            raise ShapeError(f"{op}: vector sizes differ ({self._size} vs {u.size})")
        return compact(Run(fn(a, b), s, n) for s, n, a, b in aligned_segments(self._runs, u._runs))

    def _add_scalar(self, x) -> List[Run]:
        x = int(x)
        return self._map(lambda a: a + x)

    def _add_vector(self, u) -> List[Run]:
        return self._zip(u, operator.add, '+')

    def _sub_scalar(self, x) -> List[Run]:
        x = int(x)
        return self._map(lambda a: a - x)

    def _sub_vector(self, u) -> List[Run]:
        return self._zip(u, operator.sub, '-')

    def _mul_scalar(self, x) -> List[Run]:
        x = int(x)
        return self._map(lambda a: a * x)

    def _mul_vector(self, u) -> List[Run]:
        return self._zip(u, operator.mul, '*')

    def _div_scalar(self, x) -> List[Run]:
        x = as_int(x)
        if x == 0:
            raise DomainError(f"Division of a vector of size {self._size} by zero.")
        return self._map(lambda a: trunc_div(a, x))

    def _div_vector(self, u) -> List[Run]:
        return self._zip(u, trunc_div, '/')

    def _pure(self, table, other):
        runs = dispatch(self, table, other)
        if runs is NotImplemented:
            return runs
        return RleVector(self._size, runs)

    def _in_place(self, table, other):
        runs = dispatch(self, table, other)
        if runs is NotImplemented:
            return runs
        self._runs = runs
        return self

    def __add__(self, other):
        return self._pure(self._ADD, other)

    def __radd__(self, other):
        return self._pure(self._ADD, other)

    def __sub__(self, other):
        return self._pure(self._SUB, other)

    def __rsub__(self, other):
        if operand_kind(other) is not OperandKind.SCALAR:
            return NotImplemented
        x = int(other)
        return RleVector(self._size, self._map(lambda a: x - a))

    def __mul__(self, other):
        return self._pure(self._MUL, other)

    def __rmul__(self, other):
        if operand_kind(other) is not OperandKind.SCALAR:
            return NotImplemented
        return self._pure(self._MUL, other)

    def __truediv__(self, other):
        """Elementwise integer division truncating toward zero."""
        return self._pure(self._DIV, other)

    # In-place forms mutate and return this same vector; other holders of a
    # reference to it observe the change.

    def __iadd__(self, other):
        return self._in_place(self._ADD, other)

    def __isub__(self, other):
        return self._in_place(self._SUB, other)

    def __imul__(self, other):
        return self._in_place(self._MUL, other)

    def __itruediv__(self, other):
        return self._in_place(self._DIV, other)

    def __neg__(self) -> 'RleVector':
        return RleVector(self._size, self._map(operator.neg))

    def __abs__(self) -> 'RleVector':
        return RleVector(self._size, self._map(abs))

    # -------------------------------------------------------------------------
    # Reductions
    # -------------------------------------------------------------------------

    def _head(self, e: Optional[int]) -> List[Run]:
        """Runs overlapping [0, e)."""
        if e is None:
            e = self._size
        if not 0 < e <= self._size:
            raise IndexError(f"end index {e} out of range for vector of size {self._size}")
        return [r for r in self._runs if r.start < e]

    def sum(self) -> int:
        return sum(r.value * r.length for r in self._runs)

    def max(self, e: Optional[int] = None) -> int:
        """Largest element among the first ``e`` elements (default: all)."""
        return max(r.value for r in self._head(e))

    def min(self, e: Optional[int] = None) -> int:
        """Smallest element among the first ``e`` elements (default: all)."""
        return min(r.value for r in self._head(e))

    def norm1(self) -> int:
        return sum(abs(r.value) * r.length for r in self._runs)

    def normsq(self) -> int:
        return sum(r.value * r.value * r.length for r in self._runs)

    def norm(self) -> float:
        return math.sqrt(self.normsq())

    def dot(self, u) -> int:
        """Exact integer dot product with a vector of the same size."""
        if isinstance(u, RleVector):
            if u.size != self._size:
                raise ShapeError(f"dot: vector sizes differ ({self._size} vs {u.size})")
            return sum(a * b * n for _, n, a, b in aligned_segments(self._runs, u._runs))
        vals = as_int_list(u)
        if len(vals) != self._size:
            raise ShapeError(f"dot: vector sizes differ ({self._size} vs {len(vals)})")
        # each run multiplies the sum of the segment it covers
        return sum(r.value * sum(vals[r.start:r.end]) for r in self._runs if r.value != 0)

    # -------------------------------------------------------------------------
    # Comparison and output
    # -------------------------------------------------------------------------

    def __eq__(self, other):
        if isinstance(other, RleVector):
            if other.size != self._size:
                return False
            return all(a == b for _, _, a, b in aligned_segments(self._runs, other._runs))
        if operand_kind(other) is OperandKind.VECTOR:
            return self.to_list() == as_int_list(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        runs = ', '.join(f"({r.value}, {r.start}, {r.length})" for r in self._runs)
        return f"RleVector(size={self._size}, runs=[{runs}])"

    def __str__(self) -> str:
        return f"RleVector({', '.join(str(x) for x in self)})"
