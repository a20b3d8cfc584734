"""Client construction for the federation control plane and host cluster."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from kubernetes import client
from kubernetes.config import new_client_from_config_dict

from kubefed.shared.clients import ClusterClient, SecretClient
from kubefed.shared.errors import KubeconfigError
from kubefed.shared.kubeconfig import (
    KubeconfigSource,
    ResolvedContext,
    default_kubeconfig_paths,
    load_kubeconfig,
    resolve_context,
    select_source,
)
from kubefed.shared.models import FEDERATION_NAMESPACE

logger = logging.getLogger(__name__)


class AdminConfig:
    """Kubeconfig-backed factory for the clients a command needs.

    The default source is ``$KUBECONFIG`` (or ``~/.kube/config``); a
    per-command ``--kubeconfig`` path replaces it when given.
    """

    def __init__(
        self,
        global_paths: Optional[Sequence[str]] = None,
        namespace: str = FEDERATION_NAMESPACE,
    ) -> None:
        self._global_paths: List[str] = (
            list(global_paths) if global_paths else default_kubeconfig_paths()
        )
        self.namespace = namespace

    def primary_source(self) -> KubeconfigSource:
        return load_kubeconfig(self._global_paths)

    def override_source(self, kubeconfig: Optional[str]) -> Optional[KubeconfigSource]:
        if not kubeconfig:
            return None
        return load_kubeconfig([kubeconfig], must_exist=True)

    def resolve(self, context: Optional[str], kubeconfig: Optional[str] = None) -> ResolvedContext:
        """Resolve ``context``; ``None`` means the selected source's current context."""
        primary = self.primary_source()
        override = self.override_source(kubeconfig)
        if not context:
            selected = select_source([override, primary])
            context = selected.current_context
            if not context:
                where = ", ".join(selected.paths) or "kubeconfig"
                raise KubeconfigError(
                    f"no context given and current-context is not set in {where}"
                )
        return resolve_context(context, primary, override)

    def api_client(self, context: Optional[str], kubeconfig: Optional[str] = None) -> client.ApiClient:
        """Build an isolated ``ApiClient`` bound to a single context."""
        resolved = self.resolve(context, kubeconfig)
        logger.debug("Using context %s at %s", resolved.context, resolved.server)
        return new_client_from_config_dict(
            config_dict=resolved.credentials,
            context=resolved.context,
            persist_config=False,
        )

    def cluster_client(
        self, context: Optional[str] = None, kubeconfig: Optional[str] = None
    ) -> ClusterClient:
        """Client for membership records in the federation control plane."""
        return ClusterClient(self.api_client(context, kubeconfig))

    def secret_client(
        self,
        host_context: str,
        kubeconfig: Optional[str] = None,
        namespace: Optional[str] = None,
    ) -> SecretClient:
        """Client for credential Secrets in the host cluster."""
        return SecretClient(
            self.api_client(host_context, kubeconfig),
            namespace=namespace or self.namespace,
        )
