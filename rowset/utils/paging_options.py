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

from __future__ import annotations

from dataclasses import dataclass

from rowset.settings.defaults import (
    DEFAULT_AUTO_PAGE,
    DEFAULT_FETCH_MAX_WORKERS,
    DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS,
)
from rowset.utils.unset import _UNSET, UnsetType


@dataclass
class PagingOptions:
    """
    The group of settings controlling how a RowSet retrieves further pages
    of results once the rows already received have been consumed.

    This class is used to override default settings when creating a RowSet.
    Values that are left unspecified keep the values from the defaults (see
    `defaultPagingOptions`). Timeout values are integers expressed in
    milliseconds; a timeout of zero signifies that no timeout is imposed at all.

    Attributes:
        auto_page: whether exhausting the rows currently held by a row set
            automatically triggers the retrieval of the next page (if any).
            Defaults to True.
        page_sync_abort_timeout_ms: the longest time a caller using the blocking
            (synchronous) methods of a row set waits for a page to arrive, before
            receiving a `PageFetchTimeoutException`. The underlying fetch is not
            interrupted by this. Defaults to zero (no timeout).
        fetch_max_workers: the size of the thread pool shared by all row sets
            to run synchronous page sources. This setting is only honoured by the
            first row set that causes the pool to be created. Defaults to 4.
    """

    auto_page: bool | UnsetType = _UNSET
    page_sync_abort_timeout_ms: int | UnsetType = _UNSET
    fetch_max_workers: int | UnsetType = _UNSET


@dataclass
class FullPagingOptions(PagingOptions):
    """
    The group of settings controlling how a RowSet retrieves further pages.

    This is the "full" version of the class, with the guarantee that all of its
    members have defined values. As such, this is what a RowSet holds in its
    `paging_options` attribute -- as opposed to the (non-full) `PagingOptions`
    counterpart class: the latter admits "unset" attributes and is used to
    override specific settings.

    Attributes:
        auto_page: see `PagingOptions`.
        page_sync_abort_timeout_ms: see `PagingOptions`.
        fetch_max_workers: see `PagingOptions`.
    """

    auto_page: bool
    page_sync_abort_timeout_ms: int
    fetch_max_workers: int

    def __init__(
        self,
        *,
        auto_page: bool,
        page_sync_abort_timeout_ms: int,
        fetch_max_workers: int,
    ) -> None:
        if page_sync_abort_timeout_ms < 0:
            raise ValueError("page_sync_abort_timeout_ms cannot be negative.")
        if fetch_max_workers < 1:
            raise ValueError("fetch_max_workers must be a positive integer.")
        PagingOptions.__init__(
            self,
            auto_page=auto_page,
            page_sync_abort_timeout_ms=page_sync_abort_timeout_ms,
            fetch_max_workers=fetch_max_workers,
        )

    def with_override(self, other: PagingOptions | UnsetType) -> FullPagingOptions:
        """
        Given an "overriding" set of options, possibly not defined in all its
        attributes, apply the override logic and return a new full options object.

        Args:
            other: a not-necessarily-fully-specified options object. All its defined
                settings take precedence. If unset altogether, a copy of this
                object is returned.
        """

        if isinstance(other, UnsetType):
            return FullPagingOptions(
                auto_page=self.auto_page,
                page_sync_abort_timeout_ms=self.page_sync_abort_timeout_ms,
                fetch_max_workers=self.fetch_max_workers,
            )
        return FullPagingOptions(
            auto_page=(
                other.auto_page
                if not isinstance(other.auto_page, UnsetType)
                else self.auto_page
            ),
            page_sync_abort_timeout_ms=(
                other.page_sync_abort_timeout_ms
                if not isinstance(other.page_sync_abort_timeout_ms, UnsetType)
                else self.page_sync_abort_timeout_ms
            ),
            fetch_max_workers=(
                other.fetch_max_workers
                if not isinstance(other.fetch_max_workers, UnsetType)
                else self.fetch_max_workers
            ),
        )


def defaultPagingOptions() -> FullPagingOptions:
    """
    Return the default paging options, based on 'grand defaults' hardcoded
    in rowset.
    """

    return FullPagingOptions(
        auto_page=DEFAULT_AUTO_PAGE,
        page_sync_abort_timeout_ms=DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS,
        fetch_max_workers=DEFAULT_FETCH_MAX_WORKERS,
    )
