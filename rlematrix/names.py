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
"""Static names and defaults used in the rlematrix package

    Determinant methods

        AUTO = 'auto'

        COFACTOR = 'cofactor'

        BAREISS = 'bareiss'

        MAX_COFACTOR_ORDER = 8

    CSV export

        CSV_DELIMITER = ','

        CSV_FORMAT = '%d'

    Narrowing conversion

        INT32_MIN = -2**31

        INT32_MAX = 2**31 - 1
"""

AUTO = 'auto'
COFACTOR = 'cofactor'
BAREISS = 'bareiss'
DET_METHODS = (AUTO, COFACTOR, BAREISS)
# largest order expanded by cofactors (cost grows with n!)
MAX_COFACTOR_ORDER = 8

CSV_DELIMITER = ','
CSV_FORMAT = '%d'

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1
