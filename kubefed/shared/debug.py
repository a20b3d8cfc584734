"""Runtime-configurable debug logging for federation API traffic.

Request and response lines are only emitted while verbose mode is on
(``kubefed --debug``). Payloads are reduced to their top-level keys so that
credential material never reaches the log.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

_logger = logging.getLogger("kubefed")
_state_lock = threading.Lock()
_enabled = False


def configure(verbose: bool = False) -> None:
    """Install a root handler if none exists and apply the verbosity flag."""

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
    if verbose:
        enable()
    else:
        disable()


def is_enabled() -> bool:
    """Return whether verbose debug logging is active."""

    with _state_lock:
        return _enabled


def enable() -> None:
    global _enabled
    with _state_lock:
        _enabled = True
    _logger.setLevel(logging.DEBUG)
    _logger.debug("Verbose API logging enabled")


def disable() -> None:
    global _enabled
    with _state_lock:
        _enabled = False
    # Quiet unless verbose; only warnings reach the diagnostic stream
    _logger.setLevel(logging.WARNING)


@contextmanager
def temporary_enable() -> Iterator[None]:
    """Turn verbose logging on for the duration of a block."""

    was_enabled = is_enabled()
    if not was_enabled:
        enable()
    try:
        yield
    finally:
        if not was_enabled:
            disable()


def _describe_body(body: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not body:
        return None
    described: Dict[str, Any] = {}
    for key, value in body.items():
        if isinstance(value, dict):
            described[key] = sorted(value)
        else:
            described[key] = value if key in ("apiVersion", "kind", "type") else "..."
    return described


def _format(fields: Dict[str, Any]) -> str:
    compact = {k: v for k, v in fields.items() if v is not None}
    try:
        return json.dumps(compact, separators=(",", ":"), sort_keys=True)
    except TypeError:
        return str(compact)


def log_request(
    verb: str,
    resource: str,
    name: Optional[str] = None,
    namespace: Optional[str] = None,
    body: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an outgoing request against ``resource``."""

    if not is_enabled():
        return
    logging.getLogger("kubefed.request").debug(
        "%s %s %s",
        verb.upper(),
        resource,
        _format({"name": name, "namespace": namespace, "body": _describe_body(body)}),
    )


def log_response(
    verb: str,
    resource: str,
    name: Optional[str] = None,
    outcome: str = "ok",
) -> None:
    """Log the outcome of a request against ``resource``."""

    if not is_enabled():
        return
    logging.getLogger("kubefed.response").debug(
        "%s %s %s", verb.upper(), resource, _format({"name": name, "outcome": outcome})
    )
