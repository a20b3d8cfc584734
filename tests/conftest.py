"""Shared fixtures: kubeconfig files and in-memory membership clients."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest
import yaml

from kubefed.shared.admin import AdminConfig
from kubefed.shared.errors import ConflictError, KubefedError, NotFoundError
from kubefed.shared.models import FEDERATION_NAMESPACE, ClusterMembership, CredentialSecret


def _kubeconfig(entries: List[Dict[str, str]], current: str) -> dict:
    """Build a kubeconfig where each entry is {name, server}."""
    return {
        "apiVersion": "v1",
        "kind": "Config",
        "current-context": current,
        "clusters": [
            {"name": e["name"], "cluster": {"server": e["server"]}} for e in entries
        ],
        "users": [
            {"name": e["name"], "user": {"token": f"{e['name']}-token"}} for e in entries
        ],
        "contexts": [
            {"name": e["name"], "context": {"cluster": e["name"], "user": e["name"]}}
            for e in entries
        ],
    }


@pytest.fixture
def kubeconfig_files(tmp_path: Path) -> List[str]:
    """Three kubeconfig files: a default one, a single-context one, a multi-context one."""
    configs = [
        _kubeconfig(
            [
                {"name": "federation", "server": "https://fed.example.com"},
                {"name": "substrate", "server": "https://10.0.0.1"},
                {"name": "syndicate", "server": "https://10.20.30.40"},
                {"name": "affiliate", "server": "https://10.20.30.40"},
            ],
            current="federation",
        ),
        _kubeconfig(
            [{"name": "ally", "server": "http://ally256.example.com:80"}],
            current="ally",
        ),
        _kubeconfig(
            [
                {"name": "federation", "server": "https://fed.example.org"},
                {"name": "substrate", "server": "https://10.0.0.2"},
                {"name": "confederate", "server": "https://10.8.8.8"},
            ],
            current="federation",
        ),
    ]
    paths = []
    for idx, config in enumerate(configs):
        path = tmp_path / f"kubeconfig-{idx}"
        path.write_text(yaml.safe_dump(config))
        paths.append(str(path))
    return paths


class FakeClusterClient:
    """In-memory stand-in for ClusterClient that records every call."""

    def __init__(self, records: Optional[List[ClusterMembership]] = None):
        self.records = {r.name: r for r in records or []}
        self.calls: List[tuple] = []
        self.errors: Dict[str, KubefedError] = {}

    def _fail(self, verb: str) -> None:
        if verb in self.errors:
            raise self.errors[verb]

    def get(self, name: str) -> ClusterMembership:
        self.calls.append(("get", name))
        self._fail("get")
        if name not in self.records:
            raise NotFoundError("clusters", name)
        return self.records[name]

    def create(self, membership: ClusterMembership) -> ClusterMembership:
        self.calls.append(("create", membership.name))
        self._fail("create")
        if membership.name in self.records:
            raise ConflictError("clusters", membership.name)
        self.records[membership.name] = membership
        return membership

    def delete(self, name: str) -> None:
        self.calls.append(("delete", name))
        self._fail("delete")
        if self.records.pop(name, None) is None:
            raise NotFoundError("clusters", name)


class FakeSecretClient:
    """In-memory stand-in for SecretClient that records every call."""

    def __init__(
        self,
        secrets: Optional[List[CredentialSecret]] = None,
        namespace: str = FEDERATION_NAMESPACE,
    ):
        self.namespace = namespace
        self.secrets = {s.name: s for s in secrets or []}
        self.calls: List[tuple] = []
        self.errors: Dict[str, KubefedError] = {}

    def _fail(self, verb: str) -> None:
        if verb in self.errors:
            raise self.errors[verb]

    def get(self, name: str) -> CredentialSecret:
        self.calls.append(("get", name))
        self._fail("get")
        if name not in self.secrets:
            raise NotFoundError("secrets", name)
        return self.secrets[name]

    def create(self, secret: CredentialSecret) -> CredentialSecret:
        self.calls.append(("create", secret.name))
        self._fail("create")
        if secret.name in self.secrets:
            raise ConflictError("secrets", secret.name)
        secret.namespace = self.namespace
        self.secrets[secret.name] = secret
        return secret

    def delete(self, name: str) -> None:
        self.calls.append(("delete", name))
        self._fail("delete")
        if self.secrets.pop(name, None) is None:
            raise NotFoundError("secrets", name)


class FakeAdminConfig(AdminConfig):
    """AdminConfig that resolves real kubeconfig files but hands out fakes."""

    def __init__(self, global_paths, clusters=None, secrets=None):
        super().__init__(global_paths=global_paths)
        self.clusters = clusters or FakeClusterClient()
        self.secrets = secrets or FakeSecretClient()
        self.requested: Dict[str, tuple] = {}

    def cluster_client(self, context=None, kubeconfig=None):
        self.requested["clusters"] = (context, kubeconfig)
        return self.clusters

    def secret_client(self, host_context, kubeconfig=None, namespace=None):
        self.requested["secrets"] = (host_context, kubeconfig, namespace)
        if namespace:
            self.secrets.namespace = namespace
        return self.secrets


@pytest.fixture
def cluster_client() -> FakeClusterClient:
    return FakeClusterClient()


@pytest.fixture
def secret_client() -> FakeSecretClient:
    return FakeSecretClient()


@pytest.fixture
def make_admin(cluster_client, secret_client):
    """Factory for a FakeAdminConfig over the given default kubeconfig files."""

    def _make(*global_paths: str) -> FakeAdminConfig:
        return FakeAdminConfig(list(global_paths), cluster_client, secret_client)

    return _make
