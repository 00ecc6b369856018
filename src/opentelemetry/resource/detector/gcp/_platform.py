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

from os import environ
from typing import Any, Dict, Mapping, Optional, Sequence

from opentelemetry.semconv.resource import (
    CloudPlatformValues,
    CloudProviderValues,
    ResourceAttributes,
)

from ._constants import (
    _CLUSTER_LOCATION,
    _CLUSTER_NAME,
    _FUNCTION_TARGET,
    _GAE_INSTANCE,
    _GAE_SERVICE,
    _GAE_VERSION,
    _INSTANCE_ID,
    _INSTANCE_NAME,
    _INSTANCE_ZONE,
    _K_CONFIGURATION,
    _K_REVISION,
    _K_SERVICE,
    _KUBERNETES_SERVICE_HOST,
    _MACHINE_TYPE,
    _PROJECT_ID,
)
from ._metadata import _lookup, _tail


class _AttributeBuilder:
    """Collects resource attributes, dropping empty values."""

    def __init__(self, metadata: Dict[str, Any], env: Mapping[str, str]):
        self._metadata = metadata
        self._env = env
        self._attributes: Dict[str, str] = {}

    @property
    def attributes(self) -> Dict[str, str]:
        return dict(self._attributes)

    def metadata(self, path: Sequence[str]) -> str:
        return _lookup(self._metadata, path)

    def has_env(self, name: str) -> bool:
        return self._env.get(name) is not None

    def set_attribute(self, key: str, value: str) -> None:
        if value:
            self._attributes[key] = value

    def set_env_attribute(self, key: str, env_var: str) -> None:
        self.set_attribute(key, self._env.get(env_var, ""))


def _region_from_zone(zone: str) -> str:
    position = zone.rfind("-")
    if position < 0:
        return zone
    return zone[:position]


def _set_zone_and_region(builder: _AttributeBuilder) -> None:
    zone = _tail(builder.metadata(_INSTANCE_ZONE))
    builder.set_attribute(ResourceAttributes.CLOUD_AVAILABILITY_ZONE, zone)
    builder.set_attribute(
        ResourceAttributes.CLOUD_REGION, _region_from_zone(zone)
    )


def _gke(builder: _AttributeBuilder) -> None:
    builder.set_attribute(
        ResourceAttributes.CLOUD_PLATFORM,
        CloudPlatformValues.GCP_KUBERNETES_ENGINE.value,
    )
    builder.set_attribute(
        ResourceAttributes.K8S_CLUSTER_NAME, builder.metadata(_CLUSTER_NAME)
    )
    builder.set_attribute(
        ResourceAttributes.HOST_ID, builder.metadata(_INSTANCE_ID)
    )
    # The cluster location is either a region (us-west1) or a zone
    # (us-west1-a)
    cluster_location = _tail(builder.metadata(_CLUSTER_LOCATION))
    hyphen_count = cluster_location.count("-")
    if hyphen_count == 1:
        builder.set_attribute(
            ResourceAttributes.CLOUD_REGION, cluster_location
        )
    elif hyphen_count == 2:
        builder.set_attribute(
            ResourceAttributes.CLOUD_AVAILABILITY_ZONE, cluster_location
        )


def _serverless(builder: _AttributeBuilder, platform: str) -> None:
    builder.set_attribute(ResourceAttributes.CLOUD_PLATFORM, platform)
    builder.set_env_attribute(ResourceAttributes.FAAS_NAME, _K_SERVICE)
    builder.set_env_attribute(ResourceAttributes.FAAS_VERSION, _K_REVISION)
    builder.set_attribute(
        ResourceAttributes.FAAS_INSTANCE, builder.metadata(_INSTANCE_ID)
    )


def _cloud_functions(builder: _AttributeBuilder) -> None:
    _serverless(builder, CloudPlatformValues.GCP_CLOUD_FUNCTIONS.value)


def _cloud_run(builder: _AttributeBuilder) -> None:
    _serverless(builder, CloudPlatformValues.GCP_CLOUD_RUN.value)


def _app_engine(builder: _AttributeBuilder) -> None:
    builder.set_attribute(
        ResourceAttributes.CLOUD_PLATFORM,
        CloudPlatformValues.GCP_APP_ENGINE.value,
    )
    builder.set_env_attribute(ResourceAttributes.FAAS_NAME, _GAE_SERVICE)
    builder.set_env_attribute(ResourceAttributes.FAAS_VERSION, _GAE_VERSION)
    builder.set_env_attribute(ResourceAttributes.FAAS_INSTANCE, _GAE_INSTANCE)
    _set_zone_and_region(builder)


def _compute_engine(builder: _AttributeBuilder) -> None:
    builder.set_attribute(
        ResourceAttributes.CLOUD_PLATFORM,
        CloudPlatformValues.GCP_COMPUTE_ENGINE.value,
    )
    builder.set_attribute(
        ResourceAttributes.HOST_TYPE, _tail(builder.metadata(_MACHINE_TYPE))
    )
    builder.set_attribute(
        ResourceAttributes.HOST_ID, builder.metadata(_INSTANCE_ID)
    )
    builder.set_attribute(
        ResourceAttributes.HOST_NAME, builder.metadata(_INSTANCE_NAME)
    )
    _set_zone_and_region(builder)


# Checked in order, the first platform whose marker is present wins
_ENV_PLATFORMS = (
    (_KUBERNETES_SERVICE_HOST, _gke),
    (_FUNCTION_TARGET, _cloud_functions),
    (_K_CONFIGURATION, _cloud_run),
    (_GAE_SERVICE, _app_engine),
)


def _classify(
    metadata: Dict[str, Any], env: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Turns the metadata document and the process environment into
    resource attributes.

    ``cloud.provider`` and ``cloud.account.id`` are always derived. At most
    one platform branch then contributes its own attributes.
    """
    if env is None:
        env = environ
    builder = _AttributeBuilder(metadata, env)
    builder.set_attribute(
        ResourceAttributes.CLOUD_PROVIDER, CloudProviderValues.GCP.value
    )
    builder.set_attribute(
        ResourceAttributes.CLOUD_ACCOUNT_ID, builder.metadata(_PROJECT_ID)
    )

    for env_var, platform in _ENV_PLATFORMS:
        if builder.has_env(env_var):
            platform(builder)
            return builder.attributes
    if builder.metadata(_MACHINE_TYPE):
        _compute_engine(builder)
    return builder.attributes
