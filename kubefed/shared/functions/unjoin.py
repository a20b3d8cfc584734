"""Remove a cluster from the federation.

The membership record is read first to learn which Secret holds the
cluster's credentials, then the record and that Secret are deleted in that
order. Missing resources are reported as warnings so that an interrupted
unjoin can simply be run again.
"""

import logging

from kubefed.shared.clients import ClusterClient, SecretClient
from kubefed.shared.errors import NotFoundError
from kubefed.shared.models import OutcomeReport

logger = logging.getLogger(__name__)

CLUSTER_NOT_FOUND = (
    'WARNING: cluster "{name}" not found in federation, '
    "so its credentials' secret couldn't be deleted"
)
SECRET_NOT_FOUND = (
    'WARNING: secret "{name}" not found in the host cluster, '
    "so it couldn't be deleted"
)


def unjoin(cluster_name: str, clusters: ClusterClient, secrets: SecretClient) -> OutcomeReport:
    """
    Deregister ``cluster_name`` and delete the Secret its record references.

    Args:
        cluster_name: Name of the membership record.
        clusters: Membership record client (federation control plane).
        secrets: Credential Secret client (host cluster).

    Returns:
        OutcomeReport: either a success message or warnings, never both.

    Raises:
        KubefedError: Any failure other than a missing resource.
    """
    report = OutcomeReport(
        operation="unjoin",
        cluster_name=cluster_name,
        success_message=f'Successfully removed cluster "{cluster_name}" from federation',
    )

    try:
        membership = clusters.get(cluster_name)
    except NotFoundError:
        report.warn(CLUSTER_NOT_FOUND.format(name=cluster_name))
        return report

    try:
        clusters.delete(cluster_name)
    except NotFoundError:
        # Deleted concurrently; the record is gone either way
        logger.debug("Cluster %s already deleted", cluster_name)

    secret_name = membership.secret_ref
    if not secret_name:
        logger.info("Cluster %s references no secret; nothing else to delete", cluster_name)
        return report

    try:
        secrets.delete(secret_name)
    except NotFoundError:
        report.warn(SECRET_NOT_FOUND.format(name=secret_name))

    return report
