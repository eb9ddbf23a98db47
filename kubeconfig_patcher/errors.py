"""Error types raised by kubeconfig-patcher.

Every error is terminal: the CLI prints a one-line diagnostic and exits non-zero.
"""

from __future__ import annotations


class PatcherError(RuntimeError):
    """Base class for all expected failures."""


class ReadError(PatcherError):
    """The kubeconfig file could not be read."""


class ParseError(PatcherError):
    """A kubeconfig document is not well-formed."""


class PromptError(PatcherError):
    """The interactive session was aborted."""


class ResolutionError(PatcherError):
    """The pasted kubeconfig lacks an entry needed for the merge."""


class WriteError(PatcherError):
    """The backup or the updated kubeconfig could not be written."""
