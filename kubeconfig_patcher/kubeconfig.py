"""Kubeconfig document model and loader."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

import yaml

from kubeconfig_patcher.errors import ParseError, ReadError

logger = logging.getLogger(__name__)

DEFAULT_KUBECONFIG = "~/.kube/config"

CA_DATA_KEY = "certificate-authority-data"
CLIENT_CERT_KEY = "client-certificate-data"
CLIENT_KEY_KEY = "client-key-data"

# section key -> key of the inner body of each entry
SECTIONS = {
    "clusters": "cluster",
    "contexts": "context",
    "users": "user",
}
BINARY_KEYS = {
    "clusters": (CA_DATA_KEY,),
    "users": (CLIENT_CERT_KEY, CLIENT_KEY_KEY),
}


def decode_data(value: Any) -> bytes:
    """Decode a base64 ``*-data`` field; missing or empty values decode to b""."""
    if value is None or value == "":
        return b""
    if not isinstance(value, str):
        raise ValueError(f"expected base64 string, got {type(value).__name__}")
    return base64.b64decode("".join(value.split()), validate=True)


@dataclass
class Entry:
    """A named kubeconfig entry backed by the live list item of its document."""

    body_key: ClassVar[str] = ""

    name: str
    item: dict[str, Any]

    @property
    def body(self) -> dict[str, Any]:
        body = self.item.get(self.body_key)
        return body if body is not None else {}

    def get(self, key: str) -> Any:
        return self.body.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``; empty values remove the key."""
        if value is None or value == "":
            self.body.pop(key, None)
            return
        if self.item.get(self.body_key) is None:
            self.item[self.body_key] = {}
        self.item[self.body_key][key] = value

    def _get_str(self, key: str) -> str:
        value = self.get(key)
        return "" if value is None else str(value)


@dataclass
class Cluster(Entry):
    body_key: ClassVar[str] = "cluster"

    @property
    def server(self) -> str:
        return self._get_str("server")

    @property
    def ca_data(self) -> bytes:
        return decode_data(self.get(CA_DATA_KEY))


@dataclass
class Context(Entry):
    body_key: ClassVar[str] = "context"

    @property
    def cluster(self) -> str:
        return self._get_str("cluster")

    @property
    def user(self) -> str:
        return self._get_str("user")


@dataclass
class User(Entry):
    body_key: ClassVar[str] = "user"

    @property
    def token(self) -> str:
        return self._get_str("token")

    @property
    def client_certificate_data(self) -> bytes:
        return decode_data(self.get(CLIENT_CERT_KEY))

    @property
    def client_key_data(self) -> bytes:
        return decode_data(self.get(CLIENT_KEY_KEY))


class Kubeconfig:
    """A parsed kubeconfig document.

    The raw mapping is kept as-is so that keys this tool never touches are
    written back unchanged. Name lookups follow map semantics: a later
    duplicate entry wins over an earlier one.
    """

    def __init__(self, data: dict[str, Any] | None = None):
        self.data: dict[str, Any] = data if data is not None else {}

    def _items(self, section: str) -> Iterator[tuple[str, dict[str, Any]]]:
        for item in self.data.get(section) or []:
            name = item.get("name")
            if isinstance(name, str):
                yield name, item

    def _index(self, section: str) -> dict[str, dict[str, Any]]:
        return dict(self._items(section))

    def _put(self, section: str, name: str, body: dict[str, Any]) -> dict[str, Any]:
        body_key = SECTIONS[section]
        items = self.data.get(section)
        if items is None:
            items = self.data[section] = []
        for item in reversed(items):
            if item.get("name") == name:
                item[body_key] = body
                return item
        item = {"name": name, body_key: body}
        items.append(item)
        return item

    @property
    def current_context(self) -> str:
        value = self.data.get("current-context")
        return "" if value is None else str(value)

    def cluster_names(self) -> list[str]:
        return list(self._index("clusters"))

    def context_names(self) -> list[str]:
        return list(self._index("contexts"))

    def user_names(self) -> list[str]:
        return list(self._index("users"))

    def cluster(self, name: str) -> Cluster | None:
        item = self._index("clusters").get(name)
        return None if item is None else Cluster(name, item)

    def context(self, name: str) -> Context | None:
        item = self._index("contexts").get(name)
        return None if item is None else Context(name, item)

    def user(self, name: str) -> User | None:
        item = self._index("users").get(name)
        return None if item is None else User(name, item)

    def contexts(self) -> list[Context]:
        """All contexts in declared order (duplicates collapsed to the last one)."""
        return [Context(name, item) for name, item in self._index("contexts").items()]

    def add_cluster(self, name: str, body: dict[str, Any]) -> Cluster:
        return Cluster(name, self._put("clusters", name, body))

    def add_user(self, name: str, body: dict[str, Any]) -> User:
        return User(name, self._put("users", name, body))

    def set_context(self, name: str, cluster: str, user: str) -> Context:
        """Create the context ``name``, replacing an existing one with that name."""
        return Context(name, self._put("contexts", name, {"cluster": cluster, "user": user}))


def validate(data: Any, source: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"{source}: kubeconfig root must be a mapping (dict)")

    for section, body_key in SECTIONS.items():
        items = data.get(section)
        if items is None:
            continue
        if not isinstance(items, list):
            raise ParseError(f"{source}: '{section}' must be a list")
        for item in items:
            if not isinstance(item, dict):
                raise ParseError(f"{source}: every entry in '{section}' must be a mapping")
            body = item.get(body_key)
            if body is None:
                continue
            if not isinstance(body, dict):
                raise ParseError(
                    f"{source}: '{section}' entry {item.get('name')!r} has a malformed '{body_key}'"
                )
            for key in BINARY_KEYS.get(section, ()):
                try:
                    decode_data(body.get(key))
                except (ValueError, binascii.Error) as exc:
                    raise ParseError(
                        f"{source}: '{section}' entry {item.get('name')!r} has invalid {key}: {exc}"
                    ) from exc
    return data


def parse_kubeconfig(raw: bytes | str, source: str = "kubeconfig") -> Kubeconfig:
    """Parse kubeconfig YAML. ``source`` names the document in error messages."""
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ParseError(f"Error parsing {source}: {exc}") from exc
    return Kubeconfig(validate(data, source))


def resolve_path(path: str | Path) -> Path:
    """Expand a leading ``~`` against the home directory."""
    try:
        return Path(path).expanduser()
    except RuntimeError as exc:
        raise ReadError(f"Error getting home directory: {exc}") from exc


def read_kubeconfig(path: Path) -> tuple[bytes, Kubeconfig]:
    """Read ``path`` and return its raw bytes along with the parsed document."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReadError(f"Error reading kubeconfig file {path}: {exc}") from exc
    logger.info(f"Read {len(raw)} bytes from {path}")
    return raw, parse_kubeconfig(raw, source=str(path))
