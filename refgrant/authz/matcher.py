"""Grant matcher: decide one AccessRequest against a snapshot of ReferenceGrants.

The caller is responsible for passing only the grants of `request.target_namespace`
and for rejecting requests without a target namespace; this module trusts its input.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from refgrant.authz.errors import AccessDenied
from refgrant.core.models import CORE_GROUP, AccessRequest, GrantFrom, GrantTo, ReferenceGrant

logger = logging.getLogger(__name__)


def _from_matches(rule: GrantFrom, request: AccessRequest) -> bool:
    # A from-rule without a namespace covers nobody, not "every namespace".
    if not rule.namespace:
        return False
    return (
        rule.group == CORE_GROUP
        and rule.kind == request.requesting_kind
        and rule.namespace == request.requesting_namespace
    )


def _to_matches(rule: GrantTo, request: AccessRequest) -> bool:
    if request.target_group is not None:
        if rule.group != request.target_group:
            return False
    elif rule.group:
        # Unset group on the request is the core group; only an empty rule group covers it.
        return False
    if rule.kind != request.target_kind:
        return False
    return not rule.name or rule.name == request.target_name


def evaluate(request: AccessRequest, grants: Iterable[ReferenceGrant]) -> Tuple[bool, Optional[AccessDenied]]:
    """
    Return `(True, None)` if any single grant covers both the requester and the target.

    From-rules and to-rules are matched independently within one grant (any x any), but a
    from-match in one grant never combines with a to-match in another.
    """
    for grant in grants:
        valid_from = False
        for rule in grant.from_rules:
            if _from_matches(rule, request):
                valid_from = True
                break
        if not valid_from:
            continue

        for rule in grant.to_rules:
            if _to_matches(rule, request):
                logger.debug(
                    "ReferenceGrant %s/%s allows %s/%s -> %s/%s",
                    grant.namespace,
                    grant.name,
                    request.requesting_namespace,
                    request.requesting_name,
                    request.target_namespace,
                    request.target_name,
                )
                return True, None

    err = AccessDenied(
        target_namespace=request.target_namespace,
        target_name=request.target_name,
        target_kind=request.target_kind,
        requesting_namespace=request.requesting_namespace,
        requesting_name=request.requesting_name,
    )
    logger.debug("No ReferenceGrant matched: %s", err)
    return False, err
