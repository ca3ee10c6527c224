"""Map Kubernetes manifests (plain dicts) into the reference-grant domain model.

Inputs are the JSON/YAML shapes served by the API server:
- ReferenceGrant: metadata.{namespace,name}, spec.from[], spec.to[]
- PersistentVolumeClaim: metadata.{namespace,name}, spec.dataSourceRef
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import yaml

from refgrant.authz.errors import PreconditionViolation
from refgrant.core.models import AccessRequest, GrantFrom, GrantTo, ReferenceGrant

REFERENCE_GRANT_KIND = "ReferenceGrant"


def _str(v: Any) -> str:
    return "" if v is None else str(v)


def _opt_str(v: Any) -> Optional[str]:
    return None if v is None else str(v)


def reference_grant_from_manifest(obj: Dict[str, Any], *, namespace: Optional[str] = None) -> ReferenceGrant:
    """
    Build a ReferenceGrant from its manifest.

    `namespace` is used when the manifest carries none (e.g. a file meant for `kubectl -n`).
    """
    meta = obj.get("metadata") or {}
    spec = obj.get("spec") or {}

    from_rules = [
        GrantFrom(group=_str(f.get("group")), kind=_str(f.get("kind")), namespace=_str(f.get("namespace")))
        for f in (spec.get("from") or [])
        if isinstance(f, dict)
    ]
    to_rules = [
        GrantTo(group=_str(t.get("group")), kind=_str(t.get("kind")), name=_opt_str(t.get("name")))
        for t in (spec.get("to") or [])
        if isinstance(t, dict)
    ]
    return ReferenceGrant(
        namespace=_str(meta.get("namespace") or namespace),
        name=_opt_str(meta.get("name")),
        from_rules=from_rules,
        to_rules=to_rules,
    )


def access_request_from_claim(claim: Dict[str, Any]) -> AccessRequest:
    """
    Build the AccessRequest for a PVC's `spec.dataSourceRef`.

    The target namespace is copied verbatim (possibly None); rejecting a missing one is the
    access check's job, not this mapper's.
    """
    meta = claim.get("metadata") or {}
    spec = claim.get("spec") or {}
    if not meta.get("namespace"):
        raise PreconditionViolation(f"claim {meta.get('name')} has no metadata.namespace")
    ref = spec.get("dataSourceRef")
    if not isinstance(ref, dict):
        raise PreconditionViolation(
            f"claim {meta.get('namespace')}/{meta.get('name')} has no spec.dataSourceRef"
        )
    if not ref.get("kind") or not ref.get("name"):
        raise PreconditionViolation(
            f"claim {meta.get('namespace')}/{meta.get('name')} dataSourceRef requires kind and name"
        )

    return AccessRequest(
        requesting_namespace=_str(meta.get("namespace")),
        requesting_name=_opt_str(meta.get("name")),
        target_namespace=_opt_str(ref.get("namespace")),
        # An empty apiGroup is the core group, same as an absent one.
        target_group=_opt_str(ref.get("apiGroup")) or None,
        target_kind=_str(ref.get("kind")),
        target_name=_str(ref.get("name")),
    )


def load_grants_yaml(text: str, *, namespace: Optional[str] = None) -> List[ReferenceGrant]:
    """
    Parse ReferenceGrants from (multi-document) YAML.

    `kind: List` / `ReferenceGrantList` documents are flattened; documents of any other kind
    are ignored.
    """
    grants: List[ReferenceGrant] = []
    for doc in yaml.safe_load_all(text or ""):
        if not isinstance(doc, dict):
            continue
        if isinstance(doc.get("items"), list):
            docs = [d for d in doc["items"] if isinstance(d, dict)]
        else:
            docs = [doc]
        for d in docs:
            if d.get("kind", REFERENCE_GRANT_KIND) != REFERENCE_GRANT_KIND:
                continue
            grants.append(reference_grant_from_manifest(d, namespace=namespace))
    return grants


def load_claim_yaml(text: str) -> AccessRequest:
    doc = yaml.safe_load(text or "")
    if not isinstance(doc, dict):
        raise PreconditionViolation("claim document must be a mapping")
    return access_request_from_claim(doc)
