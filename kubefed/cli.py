"""kubefed CLI implementation."""

from typing import Any, Callable, Optional

import click
import yaml

from kubefed.shared import debug
from kubefed.shared.admin import AdminConfig
from kubefed.shared.errors import KubefedError
from kubefed.shared.functions import join, unjoin
from kubefed.shared.models import FEDERATION_NAMESPACE, OutcomeReport


def _connection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every membership command."""
    options = [
        click.option(
            "--host-cluster-context",
            "--host",
            "host_context",
            required=True,
            help="Context of the host cluster holding the federation system namespace.",
        ),
        click.option(
            "--kubeconfig",
            default=None,
            help="Path to a kubeconfig file used instead of the default one.",
        ),
        click.option(
            "--context",
            "federation_context",
            default=None,
            help="Context of the federation control plane (defaults to current-context).",
        ),
        click.option(
            "--federation-system-namespace",
            "namespace",
            default=FEDERATION_NAMESPACE,
            show_default=True,
            help="Namespace on the host cluster holding credential secrets.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _admin_config(ctx: click.Context) -> AdminConfig:
    admin = ctx.obj.get("admin_config")
    if admin is None:
        admin = AdminConfig()
        ctx.obj["admin_config"] = admin
    return admin


def _render(report: OutcomeReport) -> None:
    """Warnings go to stderr and suppress the success line."""
    for warning in report.warnings:
        click.echo(warning, err=True)
    if report.manifests:
        click.echo(yaml.safe_dump_all(report.manifests, sort_keys=False), nl=False)
    if report.succeeded:
        click.echo(report.message)


@click.group(help="kubefed - manage cluster membership of a federation control plane.")
@click.option("--debug", "verbose", is_flag=True, help="Log API requests and responses.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Root command for the kubefed CLI."""
    ctx.ensure_object(dict)
    debug.configure(verbose)


@cli.command("join", help="Join a cluster to the federation.")
@click.argument("cluster_name")
@_connection_options
@click.option(
    "--cluster-context",
    default=None,
    help="Kubeconfig context of the joining cluster (defaults to CLUSTER_NAME).",
)
@click.option(
    "--secret-name",
    default=None,
    help="Name of the credential secret (defaults to CLUSTER_NAME).",
)
@click.option("--dry-run", is_flag=True, help="Print the cluster record without creating anything.")
@click.pass_context
def join_cmd(
    ctx: click.Context,
    cluster_name: str,
    host_context: str,
    kubeconfig: Optional[str],
    federation_context: Optional[str],
    namespace: str,
    cluster_context: Optional[str],
    secret_name: Optional[str],
    dry_run: bool,
) -> None:
    """Create the credential secret, then the cluster record."""
    admin = _admin_config(ctx)
    try:
        report = join(
            cluster_name,
            clusters=admin.cluster_client(federation_context, kubeconfig),
            secrets=admin.secret_client(host_context, kubeconfig, namespace=namespace),
            resolver=lambda name: admin.resolve(name, kubeconfig),
            context_name=cluster_context,
            secret_name=secret_name,
            dry_run=dry_run,
        )
    except KubefedError as e:
        raise click.ClickException(str(e)) from e
    _render(report)


@cli.command("unjoin", help="Remove a cluster from the federation.")
@click.argument("cluster_name")
@_connection_options
@click.pass_context
def unjoin_cmd(
    ctx: click.Context,
    cluster_name: str,
    host_context: str,
    kubeconfig: Optional[str],
    federation_context: Optional[str],
    namespace: str,
) -> None:
    """Delete the cluster record, then the secret it references."""
    admin = _admin_config(ctx)
    try:
        report = unjoin(
            cluster_name,
            clusters=admin.cluster_client(federation_context, kubeconfig),
            secrets=admin.secret_client(host_context, kubeconfig, namespace=namespace),
        )
    except KubefedError as e:
        raise click.ClickException(str(e)) from e
    _render(report)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
