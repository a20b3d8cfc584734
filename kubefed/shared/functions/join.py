"""Join a cluster to the federation.

Creates the credential Secret in the host cluster first, then the
``Cluster`` membership record that references it. Any failure is fatal and
propagates; a record is never created without its Secret.
"""

import logging
from typing import Callable, Optional

from kubefed.shared.clients import ClusterClient, SecretClient
from kubefed.shared.errors import KubefedError
from kubefed.shared.kubeconfig import ResolvedContext
from kubefed.shared.models import (
    KUBECONFIG_SECRET_KEY,
    ClusterMembership,
    CredentialSecret,
    OutcomeReport,
)

logger = logging.getLogger(__name__)

Resolver = Callable[[str], ResolvedContext]


def build_secret(secret_name: str, resolved: ResolvedContext) -> CredentialSecret:
    """Wrap the resolved credential bundle in a Secret."""
    return CredentialSecret(
        name=secret_name,
        data={KUBECONFIG_SECRET_KEY: resolved.to_yaml().encode("utf-8")},
    )


def build_membership(
    cluster_name: str, secret_name: str, resolved: ResolvedContext
) -> ClusterMembership:
    return ClusterMembership(
        name=cluster_name,
        server_address=resolved.server,
        secret_ref=secret_name,
    )


def join(
    cluster_name: str,
    clusters: ClusterClient,
    secrets: SecretClient,
    resolver: Resolver,
    context_name: Optional[str] = None,
    secret_name: Optional[str] = None,
    dry_run: bool = False,
) -> OutcomeReport:
    """
    Register ``cluster_name`` with the federation.

    Args:
        cluster_name: Name of the membership record to create.
        clusters: Membership record client (federation control plane).
        secrets: Credential Secret client (host cluster).
        resolver: Returns the endpoint and credentials for a context name.
        context_name: Kubeconfig context of the joining cluster.
            Defaults to ``cluster_name``.
        secret_name: Name of the credential Secret. Defaults to ``cluster_name``.
        dry_run: Build both objects but send no write requests.

    Returns:
        OutcomeReport: success report naming ``cluster_name``.

    Raises:
        KubefedError: Resolution, Secret creation or record creation failed.
    """
    context_name = context_name or cluster_name
    secret_name = secret_name or cluster_name

    resolved = resolver(context_name)
    secret = build_secret(secret_name, resolved)
    membership = build_membership(cluster_name, secret_name, resolved)

    if dry_run:
        return OutcomeReport(
            operation="join",
            cluster_name=cluster_name,
            success_message=f'Cluster "{cluster_name}" would be added to federation (dry run)',
            manifests=[membership.to_manifest()],
            dry_run=True,
        )

    secrets.create(secret)
    logger.info("Created secret %s/%s", secrets.namespace, secret_name)

    try:
        clusters.create(membership)
    except KubefedError:
        logger.warning(
            "Cluster %s was not created; secret %s/%s remains in the host cluster",
            cluster_name,
            secrets.namespace,
            secret_name,
        )
        raise
    logger.info("Created cluster %s at %s", cluster_name, resolved.server)

    return OutcomeReport(
        operation="join",
        cluster_name=cluster_name,
        success_message=f'Successfully added cluster "{cluster_name}" to federation',
    )
