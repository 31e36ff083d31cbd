"""
Exceptions raised by the canceller.
"""
from typing import Optional


class CancellerError(Exception):
    """Base class for canceller errors."""


class ClusterUpdateError(CancellerError):
    """The API server rejected, or never received, a resource update."""

    def __init__(self, kind: str, name: str, namespace: str, reason: Optional[str] = None):
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.reason = reason
        message = f"Failed to update {kind} {namespace}/{name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
