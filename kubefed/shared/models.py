"""Resource models for federation membership."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from kubernetes import client

FEDERATION_GROUP = "federation"
FEDERATION_VERSION = "v1beta1"
CLUSTER_PLURAL = "clusters"
SECRET_PLURAL = "secrets"

FEDERATION_NAMESPACE = "federation-system"
KUBECONFIG_SECRET_KEY = "kubeconfig"
DEFAULT_CLIENT_CIDR = "0.0.0.0/0"


# --------------------------------------------------------------------------- #
# Federation control plane
# --------------------------------------------------------------------------- #


@dataclass
class ClusterMembership:
    """A federation ``Cluster`` record.

    ``secret_ref`` names the Secret in the system namespace that holds the
    member's credentials. It is not required to match ``name``.
    """

    name: str
    server_address: str
    secret_ref: Optional[str] = None
    client_cidr: str = DEFAULT_CLIENT_CIDR

    def to_manifest(self) -> Dict[str, Any]:
        spec: Dict[str, Any] = {
            "serverAddressByClientCIDRs": [
                {"clientCIDR": self.client_cidr, "serverAddress": self.server_address}
            ]
        }
        if self.secret_ref:
            spec["secretRef"] = {"name": self.secret_ref}
        return {
            "apiVersion": f"{FEDERATION_GROUP}/{FEDERATION_VERSION}",
            "kind": "Cluster",
            "metadata": {"name": self.name},
            "spec": spec,
        }

    @classmethod
    def from_manifest(cls, obj: Dict[str, Any]) -> "ClusterMembership":
        """Build from the JSON object returned by the federation API."""
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}

        addresses: List[Dict[str, str]] = spec.get("serverAddressByClientCIDRs") or []
        chosen = next(
            (a for a in addresses if a.get("clientCIDR") == DEFAULT_CLIENT_CIDR),
            addresses[0] if addresses else {},
        )
        secret_ref = (spec.get("secretRef") or {}).get("name") or None

        return cls(
            name=metadata.get("name", ""),
            server_address=chosen.get("serverAddress", ""),
            secret_ref=secret_ref,
            client_cidr=chosen.get("clientCIDR", DEFAULT_CLIENT_CIDR),
        )


# --------------------------------------------------------------------------- #
# Host cluster
# --------------------------------------------------------------------------- #


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


@dataclass
class CredentialSecret:
    """Opaque credential bundle stored in the host cluster.

    ``data`` holds the raw bytes of each key; values are never assumed to be
    text. Base64 encoding happens on the way out.
    """

    name: str
    data: Dict[str, bytes] = field(default_factory=dict)
    namespace: str = FEDERATION_NAMESPACE

    def to_k8s(self) -> client.V1Secret:
        return client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=client.V1ObjectMeta(name=self.name, namespace=self.namespace),
            type="Opaque",
            data={
                key: base64.b64encode(_as_bytes(value)).decode("ascii")
                for key, value in self.data.items()
            },
        )

    @classmethod
    def from_k8s(cls, secret: Any) -> "CredentialSecret":
        metadata = secret.metadata
        raw = secret.data or {}
        return cls(
            name=metadata.name,
            namespace=metadata.namespace or FEDERATION_NAMESPACE,
            data={
                key: base64.b64decode(value) for key, value in raw.items()
            },
        )


# --------------------------------------------------------------------------- #
# Command outcome
# --------------------------------------------------------------------------- #


@dataclass
class OutcomeReport:
    """What a join or unjoin produced, for the command layer to render.

    A report carries either warnings or a success message, never both.
    """

    operation: str
    cluster_name: str
    success_message: str
    warnings: List[str] = field(default_factory=list)
    manifests: List[Dict[str, Any]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.warnings

    @property
    def message(self) -> Optional[str]:
        return self.success_message if self.succeeded else None

    def warn(self, text: str) -> None:
        self.warnings.append(text)
