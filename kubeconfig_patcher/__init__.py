"""Patch one kubeconfig context with credentials from a pasted kubeconfig."""

__version__ = "1.0.0"
