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

import asyncio
import inspect
import logging
import threading
import time
from collections import deque
from concurrent.futures import CancelledError as FutureCancelledError
from concurrent.futures import Executor, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Deque,
    Generic,
    Iterable,
    Iterator,
    Union,
)

import deprecation
from typing_extensions import TypeAlias

from rowset import __version__
from rowset.data.info import ColumnDescriptor, ExecutionInfo
from rowset.data.page import PageResult, TRow
from rowset.exceptions import (
    DriverInternalError,
    InvalidRowSetOperationException,
    RowSetConfigurationException,
    to_page_fetch_timeout_exception,
)
from rowset.settings.defaults import (
    ASYNC_FETCH_TIMEOUT_LABEL,
    LEGACY_DISPOSE_DEPRECATION_NOTICE,
    LEGACY_GET_ROWS_DEPRECATION_NOTICE,
    PAGE_SYNC_ABORT_TIMEOUT_LABEL,
)
from rowset.utils.fetch_executor import get_shared_fetch_executor
from rowset.utils.paging_options import (
    FullPagingOptions,
    PagingOptions,
    defaultPagingOptions,
)
from rowset.utils.unset import _UNSET, UnsetType

logger = logging.getLogger(__name__)

# A page source receives the paging state and returns the next page,
# either directly or as the result of a coroutine.
PageFetcher: TypeAlias = Callable[[bytes], PageResult[Any]]
AsyncPageFetcher: TypeAlias = Callable[[bytes], Awaitable[PageResult[Any]]]
AnyPageFetcher: TypeAlias = Union[PageFetcher, AsyncPageFetcher]


def _settled_future() -> Future[None]:
    settled: Future[None] = Future()
    settled.set_result(None)
    return settled


def _is_async_callable(handler: Any) -> bool:
    if inspect.iscoroutinefunction(handler):
        return True
    return inspect.iscoroutinefunction(getattr(handler, "__call__", None))


def _failed_with_timeout(handle: Future[None]) -> bool:
    """Whether the fetch itself raised a timeout error (to be passed through)."""
    if not handle.done() or handle.cancelled():
        return False
    return isinstance(handle.exception(), (TimeoutError, FutureTimeoutError))


def _describe_paging_state(paging_state: bytes) -> str:
    hex_state = paging_state.hex()
    if len(hex_state) > 16:
        return f"{hex_state[:16]}..."
    return hex_state or "(empty paging state)"


class RowSet(Generic[TRow]):
    """
    The result of a query: the rows received so far and, if the server has
    more rows for the query, the means of retrieving them page after page.

    The retrieval of the rows is generally paged: a first page of results is
    received with the response to the query, and each subsequent page is only
    fetched once all rows from the previous ones have been consumed. New pages
    are fetched automatically and transparently when iterating over the row set
    (unless `auto_page` is False), but it is possible to force the retrieval of
    the next page early with `fetch_more_results` and its non-blocking
    counterparts.

    Iterating over a RowSet dequeues the rows: each row is delivered once.
    Concurrent iterations, from several threads and/or several asyncio tasks,
    are supported and split the rows among themselves; after a full iteration
    of the row set, any further iteration is empty. At most one page fetch
    is running for a row set at any given time, no matter how many consumers
    are waiting for more rows.

    This class is not meant to be directly instantiated by the user, rather it
    is built by the code decoding the query responses, which then binds it to
    a page source with `set_fetch_next_page_handler`.

    Args:
        columns: the descriptors of the columns in the result.
        info: information about the execution of the query.
        paging_state: the paging state returned with the first page,
            if the query has further pages.
        paging_options: a specification - complete or partial - of the paging
            settings, overriding the defaults.

    Example:
        >>> row_set = RowSet(paging_state=b"\\x01")
        >>> row_set.add_row({"id": 1})
        >>> row_set.set_fetch_next_page_handler(
        ...     lambda ps: PageResult(rows=[{"id": 2}], next_paging_state=None),
        ... )
        >>> [row["id"] for row in row_set]
        [1, 2]
        >>> row_set.is_fully_fetched
        True
    """

    _row_queue: Deque[TRow] | None
    _paging_state: bytes | None
    _fetch_next_page: AnyPageFetcher | None
    _fetch_is_async: bool
    _executor: Executor | None
    _page_sync_abort_timeout_ms: int
    _paging_latch: threading.Lock
    _current_fetch: Future[None] | None
    _fetch_runner: Future[Any] | None
    _binding_lock: threading.Lock
    auto_page: bool
    columns: list[ColumnDescriptor]
    info: ExecutionInfo
    paging_options: FullPagingOptions

    def __init__(
        self,
        *,
        columns: Iterable[ColumnDescriptor] | None = None,
        info: ExecutionInfo | None = None,
        paging_state: bytes | None = None,
        paging_options: PagingOptions | UnsetType = _UNSET,
        _void: bool = False,
    ) -> None:
        if _void and paging_state is not None:
            raise ValueError("A RowSet for a void result cannot have a paging state.")
        self.paging_options = defaultPagingOptions().with_override(paging_options)
        self._row_queue = None if _void else deque()
        self._paging_state = paging_state
        self._fetch_next_page = None
        self._fetch_is_async = False
        self._executor = None
        self._page_sync_abort_timeout_ms = (
            self.paging_options.page_sync_abort_timeout_ms
        )
        self._paging_latch = threading.Lock()
        self._current_fetch = None
        self._fetch_runner = None
        self._binding_lock = threading.Lock()
        self.auto_page = self.paging_options.auto_page
        self.columns = list(columns) if columns is not None else []
        self.info = info if info is not None else ExecutionInfo()

    @classmethod
    def empty(cls) -> RowSet[TRow]:
        """
        Create a row set for a void result, i.e. a response carrying no rows at
        all (such as the acknowledgment of a write or of a schema change).

        Such a row set has no columns, iterating over it yields nothing and no
        row can ever be added to it.
        """

        return cls(_void=True)

    @classmethod
    def from_page(
        cls,
        page: PageResult[TRow],
        *,
        columns: Iterable[ColumnDescriptor] | None = None,
        info: ExecutionInfo | None = None,
        paging_options: PagingOptions | UnsetType = _UNSET,
    ) -> RowSet[TRow]:
        """Create a row set holding the rows and the paging state of a first page."""

        row_set: RowSet[TRow] = cls(
            columns=columns,
            info=info,
            paging_state=page.next_paging_state,
            paging_options=paging_options,
        )
        for row in page.rows:
            row_set.add_row(row)
        return row_set

    def __repr__(self) -> str:
        if self._row_queue is None:
            return f"{self.__class__.__name__}(void)"
        more_pages = "fully fetched" if self.is_fully_fetched else "more pages"
        return (
            f"{self.__class__.__name__}("
            f"buffered: {len(self._row_queue)}, "
            f"{more_pages})"
        )

    @property
    def paging_state(self) -> bytes | None:
        """
        The paging state to retrieve the next page of results, if there is one.
        None means that no further pages exist for this query.
        """

        return self._paging_state

    @property
    def is_void(self) -> bool:
        """Whether this row set was created for a void result."""

        return self._row_queue is None

    @property
    def is_fully_fetched(self) -> bool:
        """
        Whether all the results of the query have been retrieved, i.e. no further
        page will ever be fetched for this row set: either there are no more pages
        or automatic paging is disabled. Reading this property never triggers
        a page fetch.
        """

        return self._paging_state is None or not self.auto_page

    @property
    def inner_queue_count(self) -> int:
        """The number of rows in the local queue, zero for a void row set."""

        return self.get_available_without_fetching()

    def get_available_without_fetching(self) -> int:
        """
        The number of rows in this row set that can be retrieved without waiting
        for a page fetch. Calling this method never triggers a page fetch.

        Returns:
            a non-negative integer.
        """

        return len(self._row_queue) if self._row_queue is not None else 0

    def set_fetch_next_page_handler(
        self,
        handler: AnyPageFetcher,
        page_sync_abort_timeout_ms: int | UnsetType = _UNSET,
        *,
        executor: Executor | None = None,
    ) -> None:
        """
        Bind the page source that this row set calls to get its next pages.
        This can be done only once per row set.

        Args:
            handler: a callable accepting a paging state (bytes) and returning
                a `PageResult`. Coroutine functions are supported as well: their
                coroutines are scheduled on the event loop of the caller that
                triggers the fetch, if any, or run on a worker thread otherwise.
            page_sync_abort_timeout_ms: how long a blocking caller waits for a page
                before getting a `PageFetchTimeoutException`. If not provided, it
                comes from the paging options of the row set. Zero means no timeout.
            executor: the executor running the fetches of a synchronous `handler`.
                If not provided, a thread pool shared by all row sets is used.

        Raises:
            RowSetConfigurationException: if a page source is already bound.
                The existing binding is kept.
        """

        with self._binding_lock:
            if self._fetch_next_page is not None:
                raise RowSetConfigurationException(
                    "Multiple sets of the fetch-next-page handler are not supported."
                )
            if isinstance(page_sync_abort_timeout_ms, UnsetType):
                _page_sync_abort_timeout_ms = (
                    self.paging_options.page_sync_abort_timeout_ms
                )
            else:
                _page_sync_abort_timeout_ms = page_sync_abort_timeout_ms
            if _page_sync_abort_timeout_ms < 0:
                raise ValueError("page_sync_abort_timeout_ms cannot be negative.")
            self._fetch_is_async = _is_async_callable(handler)
            self._executor = executor
            self._page_sync_abort_timeout_ms = _page_sync_abort_timeout_ms
            self._fetch_next_page = handler

    def add_row(self, row: TRow) -> None:
        """
        Append a row at the end of the local queue. Meant for the code decoding
        the query responses, not for regular users of the row set.

        Raises:
            InvalidRowSetOperationException: if this row set is for a void result.
        """

        if self._row_queue is None:
            raise InvalidRowSetOperationException(
                "Cannot append a row to a RowSet created for a void result.",
                is_void=True,
            )
        self._row_queue.append(row)

    def consume_buffer(self, n: int | None = None) -> list[TRow]:
        """
        Consume (return) up to the requested number of rows from the local queue.
        The returned rows are dequeued, thus never delivered to anyone else.

        This method only concerns the local queue: it never triggers a page fetch.

        Args:
            n: amount of rows to return. If omitted, the whole queue is returned.

        Returns:
            list: a list of rows. If fewer rows than requested are available, all
                of them are returned without errors (possibly an empty list).
        """

        if n is not None and n < 0:
            raise ValueError("A negative amount of rows was requested.")
        row_queue = self._row_queue
        consumed: list[TRow] = []
        if row_queue is None:
            return consumed
        while n is None or len(consumed) < n:
            try:
                consumed.append(row_queue.popleft())
            except IndexError:
                break
        return consumed

    def is_exhausted(self) -> bool:
        """
        Whether no rows are available, even after trying to fetch the next page.
        This method has side effects: if the local queue is empty, it fetches
        the next page (if any, and if automatic paging is on), blocking until
        it arrives or until the abort timeout elapses.

        When other consumers are draining the row set concurrently, this can
        return True even if further pages exist (they may have taken all rows
        of the page just fetched). Check `is_fully_fetched` to tell the two
        situations apart.

        Returns:
            a boolean, True if no row is available to consume.
        """

        row_queue = self._row_queue
        if row_queue is None:
            return True
        if row_queue:
            return False
        self.fetch_more_results()
        return not row_queue

    async def async_is_exhausted(self) -> bool:
        """
        Whether no rows are available, even after trying to fetch the next page.
        Async version of `is_exhausted`, waiting for the page without blocking
        the event loop.
        """

        row_queue = self._row_queue
        if row_queue is None:
            return True
        if row_queue:
            return False
        await self.async_fetch_more_results()
        return not row_queue

    def fetch_more_results(self) -> None:
        """
        Fetch the next page of results, if any, and append its rows to the local
        queue, blocking until done. If a fetch is already running, wait for it
        instead of starting another one.

        This is a no-op if there are no more pages or automatic paging is off.
        Not to be called from within a running event loop: coroutines use
        `async_fetch_more_results` instead.

        Raises:
            PageFetchTimeoutException: if the page does not arrive within the
                abort timeout. The fetch itself keeps running.
            DriverInternalError: if a paging state is present but no page
                source was ever bound.
            concurrent.futures.CancelledError: if the fetch was abandoned before
                it could run (e.g. its event loop shut down). The paging state
                is kept, so a further call fetches the same page again.
        """

        handle = self._join_or_start_fetch(loop=None)
        timeout_ms = self._page_sync_abort_timeout_ms
        try:
            handle.result(timeout=timeout_ms / 1000.0 if timeout_ms else None)
        except FutureTimeoutError:
            if _failed_with_timeout(handle):
                raise
            raise to_page_fetch_timeout_exception(
                timeout_ms, PAGE_SYNC_ABORT_TIMEOUT_LABEL
            ) from None

    def fetch_more_results_async(self) -> Future[None]:
        """
        Start fetching the next page of results, if any, without waiting for it.
        If a fetch is already running, no other one is started.

        Returns:
            a `concurrent.futures.Future` settled once the rows of the page are
                in the local queue (or with the error raised by the page source).
                This handle is shared among all callers interested in the same
                page, and cannot be cancelled. If there is nothing to fetch, the returned
                future is already settled.
        """

        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        return self._join_or_start_fetch(loop=loop)

    async def async_fetch_more_results(self, timeout_ms: int | None = None) -> None:
        """
        Fetch the next page of results, if any, and append its rows to the local
        queue. Async version of `fetch_more_results`, for use within an asyncio
        event loop, which is not blocked while waiting.

        Args:
            timeout_ms: an optional timeout on the wait, in milliseconds.
                If omitted (or zero), the wait is not limited in time.

        Raises:
            PageFetchTimeoutException: if the page does not arrive within the
                given timeout. The fetch itself keeps running.
        """

        loop = asyncio.get_running_loop()
        while True:
            handle = self._try_join_or_start_fetch(loop=loop)
            if handle is not None:
                break
            await asyncio.sleep(0)
        # the shared handle must outlive the cancellation of this waiter
        waiter = asyncio.shield(asyncio.wrap_future(handle))
        if not timeout_ms:
            await waiter
            return
        try:
            await asyncio.wait_for(waiter, timeout=timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            if _failed_with_timeout(handle):
                raise
            raise to_page_fetch_timeout_exception(
                timeout_ms, ASYNC_FETCH_TIMEOUT_LABEL
            ) from None

    def _join_or_start_fetch(
        self, loop: asyncio.AbstractEventLoop | None
    ) -> Future[None]:
        while True:
            handle = self._try_join_or_start_fetch(loop=loop)
            if handle is not None:
                return handle
            time.sleep(0)

    def _try_join_or_start_fetch(
        self, loop: asyncio.AbstractEventLoop | None
    ) -> Future[None] | None:
        """
        Start a page fetch, or join the one in flight. Never waits: returns
        None if another caller won the latch but has not published the handle
        of its fetch yet, in which case the caller should retry shortly.
        """

        if self._paging_state is None or not self.auto_page:
            return _settled_future()
        if not self._paging_latch.acquire(blocking=False):
            in_flight = self._current_fetch
            if in_flight is not None:
                logger.debug("row set joining the page fetch in flight")
            return in_flight
        # re-read: the page for the state seen above may have just arrived
        paging_state = self._paging_state
        if paging_state is None or not self.auto_page:
            self._paging_latch.release()
            return _settled_future()
        fetcher = self._fetch_next_page
        if fetcher is None:
            self._paging_latch.release()
            raise DriverInternalError(
                "Paging state set but the handler to retrieve the next page is not."
            )
        handle: Future[None] = Future()
        # a running future cannot be cancelled by any of its waiters
        handle.set_running_or_notify_cancel()
        self._current_fetch = handle
        try:
            self._start_fetch(handle, fetcher, paging_state, loop=loop)
        except BaseException as exc:
            self._settle_fetch(handle, exc)
            raise
        return handle

    def _start_fetch(
        self,
        handle: Future[None],
        fetcher: AnyPageFetcher,
        paging_state: bytes,
        loop: asyncio.AbstractEventLoop | None,
    ) -> None:
        runner: Future[Any]
        if not self._fetch_is_async:
            runner = self._get_executor().submit(
                self._run_fetch, handle, fetcher, paging_state
            )
        else:
            coroutine = self._async_run_fetch(handle, fetcher, paging_state)
            try:
                if loop is not None:
                    runner = asyncio.run_coroutine_threadsafe(coroutine, loop)
                else:
                    runner = self._get_executor().submit(asyncio.run, coroutine)
            except BaseException:
                coroutine.close()
                raise
        # strong reference to the scheduled task until the next fetch starts
        self._fetch_runner = runner
        runner.add_done_callback(
            lambda _runner: self._settle_abandoned_fetch(handle, _runner)
        )

    def _settle_abandoned_fetch(
        self, handle: Future[None], runner: Future[Any]
    ) -> None:
        """
        Settle a fetch whose runner ended without ever running it: this happens
        when the task is cancelled before its first step (e.g. its event loop
        shuts down) or when the executor drops the work item.
        """

        if handle.done():
            return
        error: BaseException | None
        if runner.cancelled():
            error = FutureCancelledError(
                "The page fetch was cancelled before it could run."
            )
        else:
            error = runner.exception()
            if error is None:
                error = DriverInternalError(
                    "The page fetch ended without producing a result."
                )
        logger.warning(f"row set page fetch abandoned: {error!r}")
        self._settle_fetch(handle, error)

    def _get_executor(self) -> Executor:
        if self._executor is not None:
            return self._executor
        return get_shared_fetch_executor(self.paging_options.fetch_max_workers)

    def _settle_fetch(self, handle: Future[None], error: BaseException | None) -> None:
        # the latch is idle again before any waiter wakes up
        self._current_fetch = None
        self._paging_latch.release()
        if error is None:
            handle.set_result(None)
        else:
            logger.debug(f"row set page fetch failed: {error!r}")
            handle.set_exception(error)

    def _run_fetch(
        self,
        handle: Future[None],
        fetcher: AnyPageFetcher,
        paging_state: bytes,
    ) -> None:
        _page_str = _describe_paging_state(paging_state)
        logger.info(f"row set fetching a page: {_page_str}")
        try:
            page = fetcher(paging_state)
            self._enqueue_page(page)  # type: ignore[arg-type]
        except BaseException as exc:
            self._settle_fetch(handle, exc)
            if not isinstance(exc, Exception):
                raise
            return
        logger.info(f"row set finished fetching a page: {_page_str}")
        self._settle_fetch(handle, None)

    async def _async_run_fetch(
        self,
        handle: Future[None],
        fetcher: AnyPageFetcher,
        paging_state: bytes,
    ) -> None:
        _page_str = _describe_paging_state(paging_state)
        logger.info(f"row set fetching a page: {_page_str}, async")
        try:
            page = await fetcher(paging_state)  # type: ignore[misc]
            self._enqueue_page(page)
        except BaseException as exc:
            self._settle_fetch(handle, exc)
            if not isinstance(exc, Exception):
                raise
            return
        logger.info(f"row set finished fetching a page: {_page_str}, async")
        self._settle_fetch(handle, None)

    def _enqueue_page(self, page: PageResult[TRow]) -> None:
        if not isinstance(page, PageResult):
            raise DriverInternalError(
                "The handler to retrieve the next page returned "
                f"'{type(page).__name__}' instead of a PageResult."
            )
        row_queue = self._row_queue
        if row_queue is None:
            raise DriverInternalError("A page was fetched for a void RowSet.")
        row_queue.extend(page.rows)
        self._paging_state = page.next_paging_state

    def __iter__(self) -> Iterator[TRow]:
        row_queue = self._row_queue
        if row_queue is None:
            return
        while True:
            try:
                row = row_queue.popleft()
            except IndexError:
                if self.is_fully_fetched:
                    return
                self.fetch_more_results()
                continue
            yield row

    async def __aiter__(self) -> AsyncIterator[TRow]:
        row_queue = self._row_queue
        if row_queue is None:
            return
        while True:
            try:
                row = row_queue.popleft()
            except IndexError:
                if self.is_fully_fetched:
                    return
                await self.async_fetch_more_results()
                continue
            yield row

    def to_list(self) -> list[TRow]:
        """
        Consume all remaining rows (fetching further pages as needed)
        and return them as a list.
        """

        return list(self)

    async def async_to_list(self) -> list[TRow]:
        """
        Consume all remaining rows (fetching further pages as needed)
        and return them as a list. Async version of `to_list`.
        """

        return [row async for row in self]

    @deprecation.deprecated(  # type: ignore[misc]
        deprecated_in="0.1.0",
        removed_in="1.0.0",
        current_version=__version__,
        details=LEGACY_GET_ROWS_DEPRECATION_NOTICE,
    )
    def get_rows(self) -> Iterator[TRow]:
        """
        Return an iterator over the rows. Kept for backward compatibility.
        """

        return iter(self)

    @deprecation.deprecated(  # type: ignore[misc]
        deprecated_in="0.1.0",
        removed_in="1.0.0",
        current_version=__version__,
        details=LEGACY_DISPOSE_DEPRECATION_NOTICE,
    )
    def dispose(self) -> None:
        """
        Does nothing. Kept for backward compatibility.
        """

        pass
