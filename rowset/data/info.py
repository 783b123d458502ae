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
from typing import Any


@dataclass
class ColumnDescriptor:
    """
    The description of a column in a query result, as received from the server.

    Attributes:
        name: the name of the column.
        keyspace: the keyspace of the table the column belongs to, if known.
        table: the table the column belongs to, if known.
        type_name: a string description of the column data type, e.g. "int"
            or "map<text, int>".
        index: the zero-based position of the column in each row.
    """

    name: str
    keyspace: str | None = None
    table: str | None = None
    type_name: str | None = None
    index: int = 0


@dataclass
class ExecutionInfo:
    """
    Information about the execution of the query that produced a row set.
    A row set stores this and hands it back, but never looks into it.

    Attributes:
        queried_host: an identifier (e.g. "address:port") of the host
            that served the query, if known.
        achieved_consistency: the consistency level achieved by the query,
            if reported by the server.
        warnings: the warnings returned by the server alongside the result.
        incoming_payload: the custom payload returned by the server, if any.
        trace_id: the identifier of the query trace, if tracing was enabled.
        paging_state: the paging state that was sent along with the request
            producing the first page, if any.
    """

    queried_host: str | None = None
    achieved_consistency: str | None = None
    warnings: list[str] = field(default_factory=list)
    incoming_payload: dict[str, Any] | None = None
    trace_id: str | None = None
    paging_state: bytes | None = None

    def __repr__(self) -> str:
        pieces = [
            pc
            for pc in (
                f"queried_host={self.queried_host}" if self.queried_host else None,
                (
                    f"achieved_consistency={self.achieved_consistency}"
                    if self.achieved_consistency
                    else None
                ),
                f"warnings=<{len(self.warnings)} entries>" if self.warnings else None,
                "incoming_payload=..." if self.incoming_payload else None,
                f"trace_id={self.trace_id}" if self.trace_id else None,
                "paging_state=..." if self.paging_state is not None else None,
            )
            if pc is not None
        ]
        return f"{self.__class__.__name__}({', '.join(pieces)})"
