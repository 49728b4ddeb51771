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
"""Fault types raised by the run-length encoded matrix engine"""


class RleMatrixError(Exception):
    """Base exception for rlematrix."""


class ShapeError(RleMatrixError, ValueError):
    """Dimension mismatch between operands or with a constructor argument."""


class NonSquareError(ShapeError):
    """Operation requires a square matrix."""


class ShapeConstraintError(ShapeError):
    """Matrix shape violates an operation specific constraint (e.g. n = m + 1)."""


class SingularMatrixError(RleMatrixError, ArithmeticError):
    """No non-zero pivot could be found during elimination."""


class DomainError(RleMatrixError, ZeroDivisionError):
    """Division by zero."""


class CsvIOError(RleMatrixError, OSError):
    """Matrix could not be written to or read from a CSV file."""
