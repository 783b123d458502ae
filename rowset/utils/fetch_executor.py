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

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from rowset.settings.defaults import FETCH_THREAD_NAME_PREFIX

logger = logging.getLogger(__name__)

_shared_executor: ThreadPoolExecutor | None = None
_shared_executor_lock = threading.Lock()


def get_shared_fetch_executor(max_workers: int) -> ThreadPoolExecutor:
    """
    Return the thread pool running the page fetches of all row sets which
    were not given an executor of their own, creating it on first use.

    Args:
        max_workers: the size of the pool. Only used when the pool is created.
    """

    global _shared_executor
    if _shared_executor is None:
        with _shared_executor_lock:
            if _shared_executor is None:
                logger.debug(f"creating shared fetch executor ({max_workers} workers)")
                _shared_executor = ThreadPoolExecutor(
                    max_workers=max_workers,
                    thread_name_prefix=FETCH_THREAD_NAME_PREFIX,
                )
    return _shared_executor
