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
"""CSV export and import of integer matrices (comma separated rows, no header)"""

import logging
from typing import Iterable, List

import numpy as np

from .exceptions import CsvIOError
from .names import CSV_DELIMITER, CSV_FORMAT

LOG = logging.getLogger(__name__)


def write_csv(rows: Iterable[List[int]], path, ncols: int) -> None:
    """Write the given rows to ``path``, one line per row.

    Rows are stored as Python ints, so values beyond 64 bits are written exactly.
    """
    rows = list(rows)
    data = np.empty((len(rows), ncols), dtype=object)
    if rows and ncols:
        data[:] = rows
    try:
        np.savetxt(path, data, fmt=CSV_FORMAT, delimiter=CSV_DELIMITER)
    except OSError as e:
        raise CsvIOError(f"Could not write matrix to {path}: {e}") from e
    LOG.info(f"Matrix ({data.shape[0]}x{ncols}) written to {path}.")


def read_csv(path) -> List[List[int]]:
    """Read rows of integers written by ``write_csv``.

    Fields are parsed as Python ints, so values beyond 64 bits are read exactly.
    """
    try:
        data = np.loadtxt(path, dtype=str, delimiter=CSV_DELIMITER, ndmin=2)
        rows = [[int(field) for field in row] for row in data.tolist()]
    except (OSError, ValueError) as e:
        raise CsvIOError(f"Could not read matrix from {path}: {e}") from e
    LOG.info(f"Matrix ({len(rows)}x{data.shape[1] if rows else 0}) read from {path}.")
    return rows
