"""Kubeconfig sources and context resolution.

A *source* is one or more kubeconfig files merged into a single document.
Resolution picks the first supplied, non-empty source from a priority list
(explicit ``--kubeconfig`` before the default one) and looks the context up
in that source only.
"""

import base64
import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from kubefed.shared.errors import ContextNotFoundError, KubeconfigError

NAMED_SECTIONS = ("clusters", "contexts", "users")

# kubeconfig file-reference fields and the embedded fields replacing them
CLUSTER_FILE_FIELDS = {"certificate-authority": "certificate-authority-data"}
USER_FILE_FIELDS = {
    "client-certificate": "client-certificate-data",
    "client-key": "client-key-data",
}


# --------------------------------------------------------------------------- #
# Dataclasses
# --------------------------------------------------------------------------- #


@dataclass
class KubeconfigSource:
    """A merged kubeconfig document and the files it came from."""

    paths: List[str] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any(self.config.get(section) for section in NAMED_SECTIONS)

    @property
    def current_context(self) -> str:
        return self.config.get("current-context") or ""

    def _entry(self, section: str, name: Optional[str]) -> Optional[Dict[str, Any]]:
        if not name:
            return None
        return next(
            (item for item in self.config.get(section, []) if item.get("name") == name),
            None,
        )

    def context(self, name: str) -> Optional[Dict[str, Any]]:
        return self._entry("contexts", name)

    def cluster(self, name: Optional[str]) -> Optional[Dict[str, Any]]:
        return self._entry("clusters", name)

    def user(self, name: Optional[str]) -> Optional[Dict[str, Any]]:
        return self._entry("users", name)


@dataclass
class ResolvedContext:
    """Endpoint and credential bundle for a single context."""

    context: str
    server: str
    credentials: Dict[str, Any]

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.credentials, default_flow_style=False, sort_keys=False)


# --------------------------------------------------------------------------- #
# Loading
# --------------------------------------------------------------------------- #


def default_kubeconfig_paths() -> List[str]:
    """Return ``$KUBECONFIG`` split into paths, or ``~/.kube/config``."""
    env = os.environ.get("KUBECONFIG")
    if env:
        return [p for p in env.split(os.pathsep) if p]
    return [str(Path.home() / ".kube" / "config")]


def _absolutize(entry: Dict[str, Any], fields: Sequence[str], base: Path) -> None:
    for key in fields:
        value = entry.get(key)
        if value and not os.path.isabs(value):
            entry[key] = str(base / value)


def _read_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise KubeconfigError(f"Failed to parse kubeconfig {path}: {e}") from e
    except OSError as e:
        raise KubeconfigError(f"Failed to read kubeconfig {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise KubeconfigError(f"Kubeconfig {path} is not a mapping")

    # Relative file references are relative to the declaring file
    base = Path(path).resolve().parent
    for item in data.get("clusters") or []:
        _absolutize(item.get("cluster") or {}, list(CLUSTER_FILE_FIELDS), base)
    for item in data.get("users") or []:
        _absolutize(item.get("user") or {}, list(USER_FILE_FIELDS), base)
    return data


def load_kubeconfig(paths: Sequence[str], must_exist: bool = False) -> KubeconfigSource:
    """Load and merge kubeconfig files; the first file to name an entry wins.

    Args:
        paths: Files in priority order.
        must_exist: Raise instead of skipping files that do not exist.
    """
    merged: Dict[str, Any] = {section: [] for section in NAMED_SECTIONS}
    merged["current-context"] = ""
    seen: Dict[str, set] = {section: set() for section in NAMED_SECTIONS}
    loaded: List[str] = []

    for path in paths:
        if not os.path.exists(path):
            if must_exist:
                raise KubeconfigError(f"Kubeconfig file not found at: {path}")
            continue

        data = _read_file(path)
        loaded.append(path)
        if not merged["current-context"]:
            merged["current-context"] = data.get("current-context") or ""
        for section in NAMED_SECTIONS:
            for item in data.get(section) or []:
                name = item.get("name")
                if not name or name in seen[section]:
                    continue
                seen[section].add(name)
                merged[section].append(item)

    return KubeconfigSource(paths=loaded, config=merged)


def select_source(candidates: Sequence[Optional[KubeconfigSource]]) -> KubeconfigSource:
    """Return the first candidate that is supplied and non-empty."""
    for source in candidates:
        if source is not None and not source.is_empty:
            return source
    return KubeconfigSource()


# --------------------------------------------------------------------------- #
# Minify / flatten
# --------------------------------------------------------------------------- #


def minify(source: KubeconfigSource, context_name: str) -> Dict[str, Any]:
    """Reduce ``source`` to ``context_name`` with its cluster and user."""
    context = source.context(context_name)
    if context is None:
        raise ContextNotFoundError(context_name, source.paths)

    context_info = context.get("context") or {}
    cluster_name = context_info.get("cluster")
    cluster = source.cluster(cluster_name)
    if cluster is None:
        raise KubeconfigError(
            f'cluster "{cluster_name}" referenced by context "{context_name}" not found'
        )

    user_name = context_info.get("user")
    user = source.user(user_name)
    if user_name and user is None:
        raise KubeconfigError(
            f'user "{user_name}" referenced by context "{context_name}" not found'
        )

    return {
        "apiVersion": "v1",
        "kind": "Config",
        "preferences": {},
        "current-context": context_name,
        "contexts": [copy.deepcopy(context)],
        "clusters": [copy.deepcopy(cluster)],
        "users": [copy.deepcopy(user)] if user else [],
    }


def _embed(entry: Dict[str, Any], fields: Dict[str, str]) -> None:
    for path_key, data_key in fields.items():
        path = entry.pop(path_key, None)
        if not path:
            continue
        try:
            with open(path, "rb") as f:
                entry[data_key] = base64.b64encode(f.read()).decode("ascii")
        except OSError as e:
            raise KubeconfigError(f"Failed to read {path_key} {path}: {e}") from e


def flatten(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``config`` with referenced files embedded as data."""
    flat = copy.deepcopy(config)
    for item in flat.get("clusters") or []:
        item["cluster"] = item.get("cluster") or {}
        _embed(item["cluster"], CLUSTER_FILE_FIELDS)
    for item in flat.get("users") or []:
        item["user"] = item.get("user") or {}
        _embed(item["user"], USER_FILE_FIELDS)
    return flat


# --------------------------------------------------------------------------- #
# Resolution
# --------------------------------------------------------------------------- #


def resolve_context(
    context_name: str,
    primary: Optional[KubeconfigSource],
    override: Optional[KubeconfigSource] = None,
) -> ResolvedContext:
    """Resolve the server address and credential bundle for a context.

    Args:
        context_name: Context to look up.
        primary: The default kubeconfig source.
        override: Explicit kubeconfig; used in place of ``primary`` when
            supplied and non-empty.

    Raises:
        ContextNotFoundError: The context is missing from the selected source.
        KubeconfigError: The context is incomplete or a file cannot be read.
    """
    source = select_source([override, primary])
    credentials = flatten(minify(source, context_name))

    cluster_info = credentials["clusters"][0].get("cluster") or {}
    server = cluster_info.get("server")
    if not server:
        raise KubeconfigError(f'context "{context_name}" has no server address')

    return ResolvedContext(context=context_name, server=server, credentials=credentials)
