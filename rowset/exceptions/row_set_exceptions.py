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


class RowSetException(Exception):
    """
    Any exception raised by a row set while consuming its rows or retrieving
    further pages, such as:
      - an attempt to bind a page source to a row set twice,
      - a page that does not arrive in time for a blocking caller,
    but not, for instance,
      - an error raised by the page source itself while fetching a page
        (which reaches the caller unchanged).
    """

    pass


@dataclass
class RowSetConfigurationException(RowSetException):
    """
    A row set was configured in an unsupported way, for instance by binding
    a page source to it once it already has one. The row set is left unchanged.

    Attributes:
        text: a text message about the exception.
    """

    text: str

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


@dataclass
class InvalidRowSetOperationException(RowSetException):
    """
    The requested operation is not available for this row set, for instance
    appending a row to a row set created for a void result (i.e. a response
    without rows, such as the acknowledgment of a write or of a schema change).

    Attributes:
        text: a text message about the exception.
        is_void: whether the row set the operation was attempted on is a void one.
    """

    text: str
    is_void: bool

    def __init__(
        self,
        text: str,
        *,
        is_void: bool,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.is_void = is_void


@dataclass
class DriverInternalError(RowSetException):
    """
    An internal invariant of the row set does not hold. This signals a defect
    in the code building the row set (for instance, a paging state was provided
    without a page source to use it), not a transient condition: retrying the
    failed operation will not help.

    Attributes:
        text: a text message about the exception.
    """

    text: str

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


@dataclass
class PageFetchTimeoutException(RowSetException):
    """
    Waiting for the next page of a row set took longer than allowed.
    Only the wait is abandoned: the page fetch itself keeps running, and other
    callers waiting for it, as well as later consumers of the row set,
    still get its outcome.

    Attributes:
        text: a textual description of the error.
        timeout_ms: the timeout that was exceeded, in milliseconds.
        timeout_label: the name of the setting the timeout comes from, as known
            to the user, if available.
    """

    text: str
    timeout_ms: int
    timeout_label: str | None

    def __init__(
        self,
        text: str,
        *,
        timeout_ms: int,
        timeout_label: str | None,
    ) -> None:
        super().__init__(text)
        self.text = text
        self.timeout_ms = timeout_ms
        self.timeout_label = timeout_label
