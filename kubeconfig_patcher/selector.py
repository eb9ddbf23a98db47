"""Interactive selection of the target context and the pasted source entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

from kubeconfig_patcher.errors import ResolutionError
from kubeconfig_patcher.kubeconfig import Cluster, Context, Kubeconfig, User, parse_kubeconfig
from kubeconfig_patcher.prompts import Prompter

logger = logging.getLogger(__name__)

NEW_CONTEXT_OPTION = "<new context>"

T = TypeVar("T")


@dataclass
class Target:
    """The on-disk context being patched."""

    context: Context
    is_new: bool
    update_server: bool

    @property
    def should_update_server(self) -> bool:
        return self.update_server or self.is_new


@dataclass
class Sources:
    """Entries resolved inside the pasted kubeconfig."""

    cluster: Cluster
    context: Context
    user: User


@dataclass
class Found(Generic[T]):
    entity: T


@dataclass
class NeedsSelection(Generic[T]):
    """A lookup missed; the operator picks one of ``candidates`` by name."""

    candidates: list[str]
    pick: dict[str, T] = field(default_factory=dict)


Lookup = Union[Found[T], NeedsSelection[T]]


def resolve(lookup: Lookup[T], prompter: Prompter, title: str, missing: str) -> T:
    """Return the found entity, or ask the operator to pick among the candidates."""
    if isinstance(lookup, Found):
        return lookup.entity
    if not lookup.candidates:
        raise ResolutionError(missing)
    choice = prompter.select(title, lookup.candidates)
    return lookup.pick[choice]


def lookup_cluster(pasted: Kubeconfig, name: str) -> Lookup[Cluster]:
    cluster = pasted.cluster(name)
    if cluster is not None:
        return Found(cluster)
    names = pasted.cluster_names()
    return NeedsSelection(names, {n: pasted.cluster(n) for n in names})


def lookup_context(pasted: Kubeconfig, cluster_name: str) -> Lookup[Context]:
    """Find the first pasted context (in document order) referencing ``cluster_name``."""
    matching = [ctx for ctx in pasted.contexts() if ctx.cluster == cluster_name]
    if matching:
        if len(matching) > 1:
            logger.info(
                f"{len(matching)} pasted contexts reference cluster {cluster_name!r}; "
                f"using {matching[0].name!r}"
            )
        return Found(matching[0])
    # no context references the cluster, so there is nothing to choose from
    return NeedsSelection([])


def lookup_user(pasted: Kubeconfig, name: str) -> Lookup[User]:
    user = pasted.user(name)
    if user is not None:
        return Found(user)
    names = pasted.user_names()
    return NeedsSelection(names, {n: pasted.user(n) for n in names})


def choose_target(local: Kubeconfig, prompter: Prompter) -> Target:
    """Ask which context to patch, creating a new one when requested."""
    options = local.context_names() + [NEW_CONTEXT_OPTION]
    selected = prompter.select("Select a context to update", options)

    if selected == NEW_CONTEXT_OPTION:
        context_name = prompter.text("Enter new context name")
        cluster_name = prompter.text("Enter new cluster name")
        user_name = prompter.text("Enter new user name")
        if local.context(context_name) is not None:
            logger.warning(f"Context {context_name!r} already exists and will be replaced")
            prompter.warn(f"Context {context_name} already exists; it will be replaced.")
        context = local.set_context(context_name, cluster_name, user_name)
        logger.info(f"Created context {context_name!r} -> {cluster_name!r}/{user_name!r}")
        return Target(context=context, is_new=True, update_server=True)

    context = local.context(selected)
    if context is None:
        raise ResolutionError(f"Context {selected} not found")
    update_server = prompter.confirm(f"Update server URL for cluster {context.cluster}?")
    return Target(context=context, is_new=False, update_server=update_server)


def read_pasted(prompter: Prompter) -> Kubeconfig:
    text = prompter.paste("Paste kubeconfig")
    return parse_kubeconfig(text, source="pasted kubeconfig")


def resolve_sources(pasted: Kubeconfig, target: Target, prompter: Prompter) -> Sources:
    """Resolve the pasted cluster, context and user to copy from.

    Picking a different cluster by hand also points the target context at
    that cluster name.
    """
    cluster = resolve(
        lookup_cluster(pasted, target.context.cluster),
        prompter,
        "Select cluster from pasted config",
        "No clusters in pasted config",
    )
    if cluster.name != target.context.cluster:
        logger.info(
            f"Context {target.context.name!r} now references cluster {cluster.name!r} "
            f"(was {target.context.cluster!r})"
        )
        target.context.set("cluster", cluster.name)

    context = resolve(
        lookup_context(pasted, cluster.name),
        prompter,
        "Select context from pasted config",
        f"No contexts for cluster {cluster.name} in pasted config",
    )

    user = resolve(
        lookup_user(pasted, context.user),
        prompter,
        "Select user from pasted config",
        "No users in pasted config",
    )
    return Sources(cluster=cluster, context=context, user=user)
