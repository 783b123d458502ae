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
Page-source test doubles and helpers for the base tests.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from rowset import PageResult


def paginate(
    rows: list[Any],
    page_size: int,
) -> tuple[PageResult[Any], dict[bytes, PageResult[Any]]]:
    """
    Split rows into pages. Return the first page, and a map from paging state
    to page for all the subsequent ones.
    """

    chunks = [rows[i : i + page_size] for i in range(0, len(rows), page_size)] or [[]]
    states = [f"ps{i}".encode() for i in range(1, len(chunks))]
    pages = [
        PageResult(
            rows=chunk,
            next_paging_state=states[i] if i < len(states) else None,
        )
        for i, chunk in enumerate(chunks)
    ]
    return pages[0], {state: page for state, page in zip(states, pages[1:])}


class CountingPageSource:
    """
    A synchronous page source serving fixed pages, keyed by paging state.
    It counts its invocations and, if a gate is set, blocks each fetch
    until the gate is opened.
    """

    def __init__(
        self,
        pages: dict[bytes, PageResult[Any]],
        *,
        gated: bool = False,
        error: Exception | None = None,
    ) -> None:
        self.pages = pages
        self.error = error
        self.calls: list[bytes] = []
        self.entered = threading.Event()
        self.gate = threading.Event()
        if not gated:
            self.gate.set()
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def __call__(self, paging_state: bytes) -> PageResult[Any]:
        with self._lock:
            self.calls.append(paging_state)
        self.entered.set()
        self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.pages[paging_state]


class AsyncCountingPageSource:
    """The coroutine counterpart of CountingPageSource."""

    def __init__(
        self,
        pages: dict[bytes, PageResult[Any]],
        *,
        gated: bool = False,
        error: Exception | None = None,
    ) -> None:
        self.pages = pages
        self.error = error
        self.calls: list[bytes] = []
        self.entered: asyncio.Event | None = None
        self.gate: asyncio.Event | None = None
        self.gated = gated

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def _ensure_events(self) -> None:
        if self.entered is None or self.gate is None:
            self.entered = asyncio.Event()
            self.gate = asyncio.Event()
            if not self.gated:
                self.gate.set()

    async def __call__(self, paging_state: bytes) -> PageResult[Any]:
        self._ensure_events()
        assert self.entered is not None and self.gate is not None
        self.calls.append(paging_state)
        self.entered.set()
        await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.pages[paging_state]

    def open_gate(self) -> None:
        self._ensure_events()
        assert self.gate is not None
        self.gate.set()


__all__ = [
    "AsyncCountingPageSource",
    "CountingPageSource",
    "paginate",
]
