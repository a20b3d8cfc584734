"""Credential Secret client scoped to the federation system namespace."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from kubernetes import client

from kubefed.shared import debug
from kubefed.shared.errors import api_errors
from kubefed.shared.models import FEDERATION_NAMESPACE, SECRET_PLURAL, CredentialSecret


class SecretClient:
    """Get, create and delete Secrets in a single fixed namespace."""

    def __init__(
        self,
        api_client: Optional[client.ApiClient] = None,
        namespace: str = FEDERATION_NAMESPACE,
        core_api: Optional[Any] = None,
    ) -> None:
        self._api = core_api or client.CoreV1Api(api_client)
        self.namespace = namespace

    @property
    def host(self) -> Optional[str]:
        api_client = getattr(self._api, "api_client", None)
        return api_client.configuration.host if api_client else None

    def get(self, name: str) -> CredentialSecret:
        debug.log_request("get", SECRET_PLURAL, name, namespace=self.namespace)
        with api_errors(SECRET_PLURAL, name, "get"):
            secret = self._api.read_namespaced_secret(name=name, namespace=self.namespace)
        debug.log_response("get", SECRET_PLURAL, name)
        return CredentialSecret.from_k8s(secret)

    def create(self, secret: CredentialSecret) -> CredentialSecret:
        # The namespace is fixed by the client, not by the caller
        secret = replace(secret, namespace=self.namespace)
        debug.log_request(
            "create",
            SECRET_PLURAL,
            secret.name,
            namespace=self.namespace,
            body={"type": "Opaque", "data": secret.data},
        )
        with api_errors(SECRET_PLURAL, secret.name, "create"):
            created = self._api.create_namespaced_secret(
                namespace=self.namespace, body=secret.to_k8s()
            )
        debug.log_response("create", SECRET_PLURAL, secret.name)
        return CredentialSecret.from_k8s(created)

    def delete(self, name: str) -> None:
        debug.log_request("delete", SECRET_PLURAL, name, namespace=self.namespace)
        with api_errors(SECRET_PLURAL, name, "delete"):
            self._api.delete_namespaced_secret(name=name, namespace=self.namespace)
        debug.log_response("delete", SECRET_PLURAL, name)
