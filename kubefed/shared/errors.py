"""Error taxonomy for federation membership operations.

Both typed clients wrap their API calls in :func:`api_errors`, so callers
only ever see :class:`KubefedError` subclasses.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from kubefed.shared import debug


class KubefedError(RuntimeError):
    """Base class for every error raised by kubefed."""


class NotFoundError(KubefedError):
    """Raised when the requested remote resource does not exist."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f'{kind} "{name}" not found')


class ConflictError(KubefedError):
    """Raised when creating a remote resource that already exists."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f'{kind} "{name}" already exists')


class ApiError(KubefedError):
    """Raised for any other non-success API status."""

    def __init__(self, status: Optional[int], reason: str, kind: str, name: str):
        self.status = status
        self.reason = reason
        self.kind = kind
        self.name = name
        super().__init__(f'{kind} "{name}": {status} {reason}'.rstrip())


class TransportError(KubefedError):
    """Raised when a request could not be completed at all."""


class KubeconfigError(KubefedError):
    """Raised when a kubeconfig source is unreadable or inconsistent."""


class ContextNotFoundError(KubeconfigError):
    """Raised when a named context is missing from the selected kubeconfig."""

    def __init__(self, context: str, paths: Sequence[str] = ()):
        self.context = context
        self.paths = list(paths)
        where = ", ".join(self.paths) if self.paths else "kubeconfig"
        super().__init__(f'context "{context}" not found in {where}')


def _status_details(exc: ApiException) -> Dict[str, Any]:
    """Return the ``details`` of a structured Status body, if any."""

    body = exc.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body:
        return {}
    try:
        status = json.loads(body)
    except (TypeError, ValueError):
        return {}
    if not isinstance(status, dict):
        return {}
    return status.get("details") or {}


def from_api_exception(exc: ApiException, kind: str, name: str) -> KubefedError:
    """Translate an ``ApiException`` into the kubefed taxonomy."""

    details = _status_details(exc)
    kind = details.get("kind") or kind
    name = details.get("name") or name

    if exc.status == 404:
        return NotFoundError(kind, name)
    if exc.status == 409:
        return ConflictError(kind, name)
    return ApiError(exc.status, exc.reason or "", kind, name)


@contextmanager
def api_errors(kind: str, name: str, verb: str = "request") -> Iterator[None]:
    """Translate API and transport failures raised inside the block."""

    try:
        yield
    except ApiException as exc:
        debug.log_response(verb, kind, name, outcome=f"{exc.status} {exc.reason or ''}".rstrip())
        raise from_api_exception(exc, kind, name) from exc
    except HTTPError as exc:
        debug.log_response(verb, kind, name, outcome=f"transport error: {exc}")
        raise TransportError(f'request for {kind} "{name}" failed: {exc}') from exc
