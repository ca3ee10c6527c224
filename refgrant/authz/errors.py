from __future__ import annotations

from typing import Optional


class ReferenceGrantError(Exception):
    """Base class for every error raised by the reference-grant check."""


class PreconditionViolation(ReferenceGrantError):
    """The caller asked an invalid question (e.g. no target namespace). Not retryable."""


class GrantListingFailure(ReferenceGrantError):
    """The grant provider could not produce a snapshot. The whole check may be retried."""


class AccessDenied(ReferenceGrantError):
    """
    No ReferenceGrant authorizes the request.

    This is an expected outcome rather than a fault: retrying cannot help until someone
    creates a matching grant in the target namespace.
    """

    def __init__(
        self,
        *,
        target_namespace: Optional[str],
        target_name: str,
        target_kind: str,
        requesting_namespace: str,
        requesting_name: Optional[str] = None,
    ) -> None:
        self.target_namespace = target_namespace
        self.target_name = target_name
        self.target_kind = target_kind
        self.requesting_namespace = requesting_namespace
        self.requesting_name = requesting_name
        super().__init__(
            f"accessing {target_namespace}/{target_name} of {target_kind} dataSource "
            f"from {requesting_namespace}/{requesting_name or ''} isn't allowed"
        )
