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
Unit tests for the paging options
"""

from __future__ import annotations

import pytest

from rowset import FullPagingOptions, PagingOptions, RowSet, defaultPagingOptions
from rowset.settings.defaults import (
    DEFAULT_AUTO_PAGE,
    DEFAULT_FETCH_MAX_WORKERS,
    DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS,
)
from rowset.utils.unset import _UNSET, UnsetType


class TestPagingOptions:
    @pytest.mark.describe("test of the unset sentinel")
    def test_unset_sentinel(self) -> None:
        assert UnsetType() is _UNSET
        assert not _UNSET
        assert repr(_UNSET) == "(unset)"

    @pytest.mark.describe("test of default paging options")
    def test_default_paging_options(self) -> None:
        defaults = defaultPagingOptions()
        assert defaults.auto_page == DEFAULT_AUTO_PAGE
        assert defaults.page_sync_abort_timeout_ms == DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS
        assert defaults.fetch_max_workers == DEFAULT_FETCH_MAX_WORKERS

    @pytest.mark.describe("test of paging options override")
    def test_paging_options_override(self) -> None:
        defaults = defaultPagingOptions()
        empty_override = PagingOptions()
        assert isinstance(empty_override.auto_page, UnsetType)
        assert defaults.with_override(empty_override) == defaults
        assert defaults.with_override(_UNSET) == defaults

        overridden = defaults.with_override(
            PagingOptions(auto_page=False, page_sync_abort_timeout_ms=1500)
        )
        assert isinstance(overridden, FullPagingOptions)
        assert overridden.auto_page is False
        assert overridden.page_sync_abort_timeout_ms == 1500
        assert overridden.fetch_max_workers == defaults.fetch_max_workers

        twice = overridden.with_override(PagingOptions(fetch_max_workers=2))
        assert twice == FullPagingOptions(
            auto_page=False,
            page_sync_abort_timeout_ms=1500,
            fetch_max_workers=2,
        )

    @pytest.mark.describe("test of invalid paging options")
    def test_paging_options_invalid(self) -> None:
        with pytest.raises(ValueError):
            defaultPagingOptions().with_override(
                PagingOptions(page_sync_abort_timeout_ms=-1)
            )
        with pytest.raises(ValueError):
            defaultPagingOptions().with_override(PagingOptions(fetch_max_workers=0))

    @pytest.mark.describe("test of paging options applied to a RowSet")
    def test_paging_options_rowset(self) -> None:
        row_set: RowSet[str] = RowSet(
            paging_state=b"T1",
            paging_options=PagingOptions(auto_page=False),
        )
        assert row_set.paging_options.auto_page is False
        assert row_set.auto_page is False
        assert row_set.paging_options.page_sync_abort_timeout_ms == (
            DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS
        )
        assert RowSet().paging_options == defaultPagingOptions()
