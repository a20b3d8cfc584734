"""Typed clients for the federation control plane and the host cluster."""

from .clusters import ClusterClient
from .secrets import SecretClient

__all__ = ["ClusterClient", "SecretClient"]
