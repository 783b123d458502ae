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

# Defaults/settings for paging
DEFAULT_AUTO_PAGE = True
# zero means no timeout at all on the synchronous wait for a page
DEFAULT_PAGE_SYNC_ABORT_TIMEOUT_MS = 0
DEFAULT_FETCH_MAX_WORKERS = 4
FETCH_THREAD_NAME_PREFIX = "rowset-fetch"

# Timeout labels as known to the user (for error messages)
PAGE_SYNC_ABORT_TIMEOUT_LABEL = "page_sync_abort_timeout_ms"
ASYNC_FETCH_TIMEOUT_LABEL = "timeout_ms"

# The package version, used when the installed distribution metadata is not available
ROWSET_VERSION = "0.1.0"

# Deprecation notices
LEGACY_GET_ROWS_DEPRECATION_NOTICE = (
    "A RowSet is directly iterable: use `iter(row_set)` or `for row in row_set`."
)
LEGACY_DISPOSE_DEPRECATION_NOTICE = (
    "Explicitly releasing the resources of a RowSet is not required."
)
