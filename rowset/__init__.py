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

import importlib.metadata

from rowset.settings.defaults import ROWSET_VERSION


def get_version() -> str:
    try:
        return importlib.metadata.version(__package__)

    # If the package is not installed, fall back to the version hardcoded in rowset
    except importlib.metadata.PackageNotFoundError:
        return ROWSET_VERSION


__version__: str = get_version()


import rowset.exceptions  # noqa: F401, E402
import rowset.info  # noqa: F401, E402
import rowset.paging_options  # noqa: F401, E402
from rowset.data.info import ColumnDescriptor, ExecutionInfo  # noqa: E402
from rowset.data.page import PageResult  # noqa: E402
from rowset.data.row_set import RowSet  # noqa: E402
from rowset.utils.paging_options import (  # noqa: E402
    FullPagingOptions,
    PagingOptions,
    defaultPagingOptions,
)

__all__ = [
    "ColumnDescriptor",
    "ExecutionInfo",
    "FullPagingOptions",
    "PageResult",
    "PagingOptions",
    "RowSet",
    "defaultPagingOptions",
    "__version__",
]


__pdoc__ = {
    "data": False,
    "settings": False,
    "utils": False,
}
