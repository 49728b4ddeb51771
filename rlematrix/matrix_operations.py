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
Operand kinds and dispatch tables for binary matrix/vector operations.

Every binary operator of the engine classifies its right operand into one of a
small closed set of kinds and looks the handler up in a per-operation table,
instead of testing types at each call site:

    >>> table = {OperandKind.SCALAR: '_add_scalar', OperandKind.RLE_MATRIX: '_add_rle'}
    >>> dispatch(matrix, table, 5)          # calls matrix._add_scalar(5)

Containers advertise their kind through an ``operand_kind`` class attribute.
Plain integers (Python or numpy) are scalars, one-dimensional sequences and
numpy arrays are vectors, two-dimensional numpy arrays are dense matrices.
numpy arrays must hold integers, either in an integer dtype or as Python ints
in an object array (the storage of the dense containers).
"""

import numbers
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np


class OperandKind(Enum):
    """Closed set of operand capabilities understood by the engine."""
    SCALAR = 'scalar'
    VECTOR = 'vector'
    RLE_MATRIX = 'rle_matrix'
    DENSE_MATRIX = 'dense_matrix'


def operand_kind(x: Any) -> Optional[OperandKind]:
    """Classify ``x``; returns None for operands the engine does not support."""
    kind = getattr(x, 'operand_kind', None)
    if isinstance(kind, OperandKind):
        return kind
    if isinstance(x, bool):
        return None
    if isinstance(x, numbers.Integral):
        return OperandKind.SCALAR
    if isinstance(x, np.ndarray):
        if x.dtype.kind == 'O':
            if not all(operand_kind(v) is OperandKind.SCALAR for v in x.flat):
                return None
        elif x.dtype.kind not in 'iu':
            return None
        return {0: OperandKind.SCALAR, 1: OperandKind.VECTOR, 2: OperandKind.DENSE_MATRIX}.get(x.ndim)
    if isinstance(x, (list, tuple, range)):
        return OperandKind.VECTOR
    return None


def dispatch(receiver: Any, table: Dict[OperandKind, str], other: Any):
    """Call the handler registered in ``table`` for the kind of ``other``.

    Returns NotImplemented for unsupported operands so that Python can try the
    reflected operation (and finally raise TypeError).
    """
    kind = operand_kind(other)
    handler = table.get(kind) if kind is not None else None
    if handler is None:
        return NotImplemented
    return getattr(receiver, handler)(other)


def as_int(x: Any) -> int:
    """Return a scalar operand as a Python int, rejecting non-integers."""
    if operand_kind(x) is not OperandKind.SCALAR:
        raise TypeError(f"Expected an integer scalar, got {type(x).__name__}.")
    return int(x)


def as_int_list(u: Any) -> List[int]:
    """Decode any vector operand into a list of Python ints."""
    if operand_kind(u) is not OperandKind.VECTOR:
        raise TypeError(f"Expected a vector operand, got {type(u).__name__}.")
    if hasattr(u, 'to_list'):
        return u.to_list()
    if isinstance(u, np.ndarray):
        return [int(x) for x in u.tolist()]
    return [as_int(x) for x in u]
