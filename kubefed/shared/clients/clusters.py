"""Membership record (federation ``Cluster``) client."""

from __future__ import annotations

from typing import Any, Optional

from kubernetes import client

from kubefed.shared import debug
from kubefed.shared.errors import api_errors
from kubefed.shared.models import (
    CLUSTER_PLURAL,
    FEDERATION_GROUP,
    FEDERATION_VERSION,
    ClusterMembership,
)


class ClusterClient:
    """Get, create and delete cluster-scoped ``Cluster`` records.

    Every method issues exactly one request. Failures surface as
    :mod:`kubefed.shared.errors` exceptions and are never retried here.
    """

    def __init__(
        self,
        api_client: Optional[client.ApiClient] = None,
        custom_api: Optional[Any] = None,
    ) -> None:
        self._api = custom_api or client.CustomObjectsApi(api_client)

    @property
    def host(self) -> Optional[str]:
        api_client = getattr(self._api, "api_client", None)
        return api_client.configuration.host if api_client else None

    def get(self, name: str) -> ClusterMembership:
        debug.log_request("get", CLUSTER_PLURAL, name)
        with api_errors(CLUSTER_PLURAL, name, "get"):
            obj = self._api.get_cluster_custom_object(
                group=FEDERATION_GROUP,
                version=FEDERATION_VERSION,
                plural=CLUSTER_PLURAL,
                name=name,
            )
        debug.log_response("get", CLUSTER_PLURAL, name)
        return ClusterMembership.from_manifest(obj)

    def create(self, membership: ClusterMembership) -> ClusterMembership:
        body = membership.to_manifest()
        debug.log_request("create", CLUSTER_PLURAL, membership.name, body=body)
        with api_errors(CLUSTER_PLURAL, membership.name, "create"):
            obj = self._api.create_cluster_custom_object(
                group=FEDERATION_GROUP,
                version=FEDERATION_VERSION,
                plural=CLUSTER_PLURAL,
                body=body,
            )
        debug.log_response("create", CLUSTER_PLURAL, membership.name)
        return ClusterMembership.from_manifest(obj)

    def delete(self, name: str) -> None:
        debug.log_request("delete", CLUSTER_PLURAL, name)
        with api_errors(CLUSTER_PLURAL, name, "delete"):
            self._api.delete_cluster_custom_object(
                group=FEDERATION_GROUP,
                version=FEDERATION_VERSION,
                plural=CLUSTER_PLURAL,
                name=name,
            )
        debug.log_response("delete", CLUSTER_PLURAL, name)
