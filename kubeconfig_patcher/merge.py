"""Copy cluster and user credentials from the pasted kubeconfig into the local one."""

from __future__ import annotations

import base64
import copy
import logging

from kubeconfig_patcher.kubeconfig import (
    CA_DATA_KEY,
    CLIENT_CERT_KEY,
    CLIENT_KEY_KEY,
    Cluster,
    Kubeconfig,
    User,
)
from kubeconfig_patcher.selector import Sources, Target

logger = logging.getLogger(__name__)

SHORTEN_LIMIT = 15
EMPTY_DATA = "<empty>"


def shorten(value: str) -> str:
    """Truncate a secret for display as ``first5...last5``."""
    if len(value) <= SHORTEN_LIMIT:
        return value
    return f"{value[:5]}...{value[-5:]}"


def shorten_bytes(data: bytes) -> str:
    """Base64 encode ``data`` and truncate it like :func:`shorten`."""
    if not data:
        return EMPTY_DATA
    return shorten(base64.b64encode(data).decode("ascii"))


def merge_cluster(local: Kubeconfig, name: str, pasted: Cluster, update_server: bool) -> list[str]:
    changes: list[str] = []
    existing = local.cluster(name)

    if existing is None:
        local.add_cluster(name, copy.deepcopy(pasted.body))
        changes.append(
            f"Added cluster \"{name}\" with server {pasted.server} "
            f"and CA data {shorten_bytes(pasted.ca_data)}"
        )
        return changes

    if update_server and existing.server != pasted.server:
        changes.append(
            f"Updated cluster \"{name}\" server from {existing.server} to {pasted.server}"
        )
        existing.set("server", pasted.get("server"))
    if existing.ca_data != pasted.ca_data:
        changes.append(
            f"Updated cluster \"{name}\" CA data from {shorten_bytes(existing.ca_data)} "
            f"to {shorten_bytes(pasted.ca_data)}"
        )
        existing.set(CA_DATA_KEY, pasted.get(CA_DATA_KEY))
    return changes


def merge_user(local: Kubeconfig, name: str, pasted: User) -> list[str]:
    changes: list[str] = []
    existing = local.user(name)

    if existing is None:
        local.add_user(name, copy.deepcopy(pasted.body))
        changes.append(
            f"Added user \"{name}\" with token {shorten(pasted.token)}, "
            f"client cert {shorten_bytes(pasted.client_certificate_data)}, "
            f"and client key {shorten_bytes(pasted.client_key_data)}"
        )
        return changes

    if existing.token != pasted.token:
        changes.append(
            f"Updated user \"{name}\" token from {shorten(existing.token)} "
            f"to {shorten(pasted.token)}"
        )
        existing.set("token", pasted.get("token"))
    if existing.client_certificate_data != pasted.client_certificate_data:
        changes.append(
            f"Updated user \"{name}\" client cert from "
            f"{shorten_bytes(existing.client_certificate_data)} "
            f"to {shorten_bytes(pasted.client_certificate_data)}"
        )
        existing.set(CLIENT_CERT_KEY, pasted.get(CLIENT_CERT_KEY))
    if existing.client_key_data != pasted.client_key_data:
        changes.append(
            f"Updated user \"{name}\" client key from "
            f"{shorten_bytes(existing.client_key_data)} "
            f"to {shorten_bytes(pasted.client_key_data)}"
        )
        existing.set(CLIENT_KEY_KEY, pasted.get(CLIENT_KEY_KEY))
    return changes


def merge_credentials(local: Kubeconfig, target: Target, sources: Sources) -> list[str]:
    """Patch the cluster and user of ``target`` and return the changes, cluster first."""
    cluster_name = target.context.cluster
    user_name = target.context.user
    logger.info(
        f"Merging pasted cluster {sources.cluster.name!r} into {cluster_name!r} "
        f"and pasted user {sources.user.name!r} into {user_name!r}"
    )
    changes = merge_cluster(local, cluster_name, sources.cluster, target.should_update_server)
    changes += merge_user(local, user_name, sources.user)
    return changes
