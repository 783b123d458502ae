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

from dataclasses import dataclass, field
from typing import Generic, TypeVar

TRow = TypeVar("TRow")


@dataclass
class PageResult(Generic[TRow]):
    """
    A whole pageful of rows, as returned by a page source to a row set.

    Attributes:
        rows: the list of rows (already decoded) in the page, in the order
            they are to be delivered.
        next_paging_state: an opaque byte string to resume the query from the
            row following the last one in this page. If the query does not admit
            any further page, this is None. Note that an empty byte string is
            a (valid) paging state, not the absence of one.
    """

    rows: list[TRow] = field(default_factory=list)
    next_paging_state: bytes | None = None

    def __post_init__(self) -> None:
        self.rows = list(self.rows)
        if self.next_paging_state is not None and not isinstance(
            self.next_paging_state, bytes
        ):
            raise TypeError(
                "The paging state of a page must be a bytes object or None, "
                f"found '{type(self.next_paging_state).__name__}'."
            )

    @property
    def has_more_pages(self) -> bool:
        return self.next_paging_state is not None

    def __repr__(self) -> str:
        pieces = [
            pc
            for pc in (
                f"rows=<{len(self.rows)} entries>",
                "next_paging_state=..." if self.has_more_pages else None,
            )
            if pc is not None
        ]
        return f"{self.__class__.__name__}({', '.join(pieces)})"
