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

"""Access to the GCP metadata server and navigation of its JSON document.

The metadata server answers ``GET /computeMetadata/v1/?recursive=true`` with a
single JSON object describing the project and the instance. See more:
https://cloud.google.com/compute/docs/metadata/overview
"""

from logging import getLogger
from typing import Any, Dict, Optional, Sequence

import requests

from opentelemetry.context import (
    _SUPPRESS_INSTRUMENTATION_KEY,
    attach,
    detach,
    set_value,
)

from ._constants import (
    _GCP_METADATA_PATH,
    _METADATA_FLAVOR_HEADER,
    _METADATA_FLAVOR_VALUE,
    _METADATA_TIMEOUT_SECONDS,
)

_logger = getLogger(__name__)


class _FetchOutcome:
    retryable = False


class _Success(_FetchOutcome):
    def __init__(self, document: Dict[str, Any]):
        self.document = document


class _RetryableFailure(_FetchOutcome):
    retryable = True

    def __init__(self, reason: str):
        self.reason = reason


class _FatalFailure(_FetchOutcome):
    def __init__(self, reason: str):
        self.reason = reason


def _metadata_url(endpoint: str) -> str:
    return endpoint.rstrip("/") + _GCP_METADATA_PATH


def _tail(value: str) -> str:
    # The metadata server returns fully qualified names, e.g. a zone may be
    # "projects/p/zones/us-central1-a". Keep the last segment only.
    return value[value.rfind("/") + 1 :]


def _lookup(document: Any, path: Sequence[str]) -> str:
    """Returns the scalar found at ``path`` in ``document`` as a string.

    Strings are returned verbatim and numbers as base-10 integers. Anything
    else, including a missing key along the way, yields ``""``.
    """
    node = document
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return ""
        node = node[key]
    if isinstance(node, str):
        return node
    # bool is an int subclass but is not a JSON number
    if isinstance(node, bool):
        return ""
    if isinstance(node, (int, float)):
        try:
            return str(int(node))
        except (OverflowError, ValueError):
            return ""
    return ""


def _map_status(status_code: int) -> Optional[_FetchOutcome]:
    if 200 <= status_code < 300:
        return None
    reason = f"HTTP code={status_code}"
    # 429 is "Too Many Requests"
    if status_code < 200 or status_code == 429 or status_code >= 500:
        return _RetryableFailure(reason)
    return _FatalFailure(reason)


def _valid_headers(headers) -> bool:
    valid_content_type = False
    valid_metadata_flavor = False
    for key, value in headers.items():
        key = key.strip().lower()
        value = value.strip().lower()
        if key == "content-type" and value.startswith("application/json"):
            valid_content_type = True
        if key == "metadata-flavor" and value == "google":
            valid_metadata_flavor = True
    return valid_content_type and valid_metadata_flavor


def _fetch_once(session: requests.Session, url: str) -> _FetchOutcome:
    token = attach(set_value(_SUPPRESS_INSTRUMENTATION_KEY, True))
    try:
        response = session.get(
            url,
            headers={_METADATA_FLAVOR_HEADER: _METADATA_FLAVOR_VALUE},
            timeout=_METADATA_TIMEOUT_SECONDS,
        )
    except requests.exceptions.RequestException as exception:
        return _FatalFailure(f"{type(exception).__name__}: {exception}")
    finally:
        detach(token)

    status = _map_status(response.status_code)
    if status is not None:
        return status
    if not _valid_headers(response.headers):
        return _RetryableFailure("response headers do not match expectations")
    try:
        document = response.json()
    except ValueError as exception:
        _logger.debug("Error in decoding metadata response: %s", exception)
        document = None
    if not isinstance(document, dict) or "project" not in document:
        return _RetryableFailure(
            "returned payload does not match expectation."
        )
    return _Success(document)
