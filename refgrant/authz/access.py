"""Caller side of the reference-grant check: validate, fetch the snapshot, evaluate."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from refgrant.authz.errors import AccessDenied, PreconditionViolation
from refgrant.authz.matcher import evaluate
from refgrant.authz.policy import GrantCheckPolicy, load_grant_check_policy
from refgrant.core.models import AccessRequest
from refgrant.providers.grant_provider import GrantProvider

logger = logging.getLogger(__name__)


def check_access(
    request: AccessRequest,
    provider: GrantProvider,
    *,
    policy: Optional[GrantCheckPolicy] = None,
) -> Tuple[bool, Optional[AccessDenied]]:
    """
    Decide whether `request` is authorized.

    Raises:
        PreconditionViolation: the request has no target namespace, or it crosses namespaces
            while cross-namespace data sources are disabled.
        GrantListingFailure: propagated unchanged from the provider.
    """
    if not request.target_namespace:
        raise PreconditionViolation(
            f"dataSourceRef of {request.requesting_namespace}/{request.requesting_name or ''} has no namespace"
        )

    if not request.is_cross_namespace:
        return True, None

    policy = policy or load_grant_check_policy()
    if not policy.cross_namespace_enabled:
        raise PreconditionViolation(
            f"dataSourceRef namespace {request.target_namespace} specified "
            "but cross-namespace data sources are disabled"
        )

    grants = provider.list_grants(request.target_namespace)
    allowed, err = evaluate(request, grants)
    if not allowed:
        logger.info("%s (checked %d ReferenceGrants)", err, len(grants))
    return allowed, err


def require_access(
    request: AccessRequest,
    provider: GrantProvider,
    *,
    policy: Optional[GrantCheckPolicy] = None,
) -> None:
    """Like `check_access`, but raise AccessDenied instead of returning it."""
    allowed, err = check_access(request, provider, policy=policy)
    if not allowed and err is not None:
        raise err
