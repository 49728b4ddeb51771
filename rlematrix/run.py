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
"""Runs: maximal spans of one value inside a run-length encoded sequence"""

from typing import NamedTuple

from .exceptions import DomainError


class Run(NamedTuple):
    """A span of ``length`` copies of ``value`` starting at offset ``start``."""
    value: int
    start: int
    length: int

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.start + self.length

    def contains(self, i: int) -> bool:
        return self.start <= i < self.start + self.length


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero, e.g. ``trunc_div(-7, 2) == -3``.

    Raises DomainError when ``b`` is zero.
    """
    if b == 0:
        raise DomainError(f"Division of {a} by zero.")
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q
