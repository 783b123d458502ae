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

from rowset.exceptions.row_set_exceptions import (
    DriverInternalError,
    InvalidRowSetOperationException,
    PageFetchTimeoutException,
    RowSetConfigurationException,
    RowSetException,
)


def to_page_fetch_timeout_exception(
    timeout_ms: int,
    timeout_label: str | None,
) -> PageFetchTimeoutException:
    text_0 = "Fetching the next page of results timed out"
    if timeout_label:
        text = f"{text_0} (timeout honoured: {timeout_label} = {timeout_ms} ms)."
    else:
        text = f"{text_0} (timeout honoured: {timeout_ms} ms)."
    return PageFetchTimeoutException(
        text=text,
        timeout_ms=timeout_ms,
        timeout_label=timeout_label,
    )


__all__ = [
    "DriverInternalError",
    "InvalidRowSetOperationException",
    "PageFetchTimeoutException",
    "RowSetConfigurationException",
    "RowSetException",
]

__pdoc__ = {
    "to_page_fetch_timeout_exception": False,
}
