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

from logging import Logger, getLogger
from threading import Lock
from typing import Callable, Dict, Optional

import requests

from opentelemetry.sdk.resources import Resource, ResourceDetector

from ._constants import _GCP_METADATA_ENDPOINT
from ._metadata import _metadata_url, _Success
from ._platform import _classify
from ._retry import _DefaultRetry, _Retry, _retry_loop

_logger = getLogger(__name__)


class GoogleCloudResourceDetector(ResourceDetector):
    """Detects attribute values only available when the app is running on
    Google Cloud and returns them in a Resource.

    The metadata server is queried once, with retries, and the platform is
    picked from Kubernetes Engine, Cloud Functions, Cloud Run, App Engine and
    Compute Engine. The first successful result is kept for the lifetime of
    the detector. A failed detection returns an empty Resource and is tried
    again on the next call.
    """

    def __init__(
        self,
        endpoint: str = _GCP_METADATA_ENDPOINT,
        raise_on_error: bool = False,
        retry: Callable[[], _Retry] = _DefaultRetry,
        session: Optional[requests.Session] = None,
        logger: Optional[Logger] = None,
    ):
        super().__init__(raise_on_error=raise_on_error)
        self._url = _metadata_url(endpoint)
        self._retry = retry
        self._session = session if session is not None else requests.Session()
        self._logger = logger if logger is not None else _logger
        self._attributes: Optional[Dict[str, str]] = None
        self._lock = Lock()

    def detect(self) -> "Resource":
        with self._lock:
            try:
                if self._attributes is None:
                    outcome = _retry_loop(
                        self._session, self._retry(), self._url
                    )
                    if not isinstance(outcome, _Success):
                        self._logger.info(
                            "Could not query the metadata server. status=%s",
                            outcome.reason,
                        )
                        return Resource.get_empty()
                    self._attributes = _classify(outcome.document)
                return Resource(self._attributes)
            # pylint: disable=broad-except
            except Exception as exception:
                if self.raise_on_error:
                    raise exception

                self._logger.warning(
                    "%s failed: %s", self.__class__.__name__, exception
                )
                return Resource.get_empty()
