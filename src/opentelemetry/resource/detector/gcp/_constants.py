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

# cSpell:disable

# Metadata server

_GCP_METADATA_ENDPOINT = "http://metadata.google.internal"
_GCP_METADATA_PATH = "/computeMetadata/v1/?recursive=true"
_METADATA_FLAVOR_HEADER = "Metadata-Flavor"
_METADATA_FLAVOR_VALUE = "Google"
_METADATA_TIMEOUT_SECONDS = 5

# Default backoff, in seconds, between attempts

_DEFAULT_BACKOFFS = (1, 2, 4)

# Platform markers

_KUBERNETES_SERVICE_HOST = "KUBERNETES_SERVICE_HOST"
_FUNCTION_TARGET = "FUNCTION_TARGET"
_K_CONFIGURATION = "K_CONFIGURATION"
_GAE_SERVICE = "GAE_SERVICE"

# Cloud Run and Cloud Functions

_K_SERVICE = "K_SERVICE"
_K_REVISION = "K_REVISION"

# App Engine

_GAE_VERSION = "GAE_VERSION"
_GAE_INSTANCE = "GAE_INSTANCE"

# Metadata document paths

_PROJECT_ID = ("project", "projectId")
_INSTANCE_ID = ("instance", "id")
_INSTANCE_NAME = ("instance", "name")
_INSTANCE_ZONE = ("instance", "zone")
_MACHINE_TYPE = ("instance", "machineType")
_CLUSTER_NAME = ("instance", "attributes", "cluster-name")
_CLUSTER_LOCATION = ("instance", "attributes", "cluster-location")

# cSpell:enable
