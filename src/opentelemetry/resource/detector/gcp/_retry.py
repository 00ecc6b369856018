# Copyright The OpenTelemetry Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from logging import getLogger
from time import sleep
from typing import Callable, Sequence

import requests

from ._constants import _DEFAULT_BACKOFFS
from ._metadata import _fetch_once, _FetchOutcome

_logger = getLogger(__name__)


class _Retry:
    """Decides whether a failed metadata request is attempted again."""

    def should_retry(self) -> bool:
        raise NotImplementedError


class _DefaultRetry(_Retry):
    """Sleeps for 1s, then 2s, then 4s, then gives up."""

    def __init__(
        self,
        backoffs: Sequence[float] = _DEFAULT_BACKOFFS,
        sleep_func: Callable[[float], None] = sleep,
    ):
        self._backoffs = list(backoffs)
        self._position = 0
        self._sleep = sleep_func

    def should_retry(self) -> bool:
        if self._position >= len(self._backoffs):
            return False
        self._sleep(self._backoffs[self._position])
        self._position += 1
        return True


def _retry_loop(
    session: requests.Session, retry: _Retry, url: str
) -> _FetchOutcome:
    while True:
        outcome = _fetch_once(session, url)
        if not outcome.retryable:
            return outcome
        _logger.debug("Metadata request failed: %s", outcome.reason)
        if not retry.should_retry():
            return outcome
