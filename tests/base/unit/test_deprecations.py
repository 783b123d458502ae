# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the deprecated legacy methods of RowSet
"""

from __future__ import annotations

import pytest
from deprecation import DeprecatedWarning

from rowset import PageResult, RowSet

from ..conftest import CountingPageSource


class TestRowSetDeprecations:
    @pytest.mark.describe("test of the legacy get_rows method")
    def test_rowset_get_rows(self) -> None:
        source = CountingPageSource({b"T1": PageResult(rows=["B"])})
        row_set: RowSet[str] = RowSet.from_page(
            PageResult(rows=["A"], next_paging_state=b"T1")
        )
        row_set.set_fetch_next_page_handler(source)

        with pytest.warns(DeprecationWarning) as w_checker:
            rows = list(row_set.get_rows())
        assert len(w_checker.list) == 1
        assert isinstance(w_checker.list[0].message, DeprecatedWarning)
        assert rows == ["A", "B"]

    @pytest.mark.describe("test of the legacy dispose method")
    def test_rowset_dispose(self) -> None:
        row_set: RowSet[str] = RowSet.from_page(PageResult(rows=["A"]))
        with pytest.warns(DeprecationWarning) as w_checker:
            row_set.dispose()
        assert len(w_checker.list) == 1
        warning0 = w_checker.list[0].message
        assert isinstance(warning0, DeprecatedWarning)
        assert warning0.removed_in == "1.0.0"
        # disposing has no effect on the rows
        assert list(row_set) == ["A"]
