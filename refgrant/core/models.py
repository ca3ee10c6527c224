"""Canonical domain models for reference-grant checks.

These are plain, immutable structures. Mapping from Kubernetes manifests lives in
`refgrant.core.claims`; nothing here knows about the API server.
"""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

PVC_KIND = "PersistentVolumeClaim"
CORE_GROUP = ""


class BaseModelFrozen(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class AccessRequest(BaseModelFrozen):
    """A claim in `requesting_namespace` asking to read an object in `target_namespace`."""

    requesting_namespace: str
    requesting_name: Optional[str] = None
    requesting_kind: str = PVC_KIND
    requesting_group: Literal[""] = CORE_GROUP

    # Required by the caller; the matcher never sees a request without it.
    target_namespace: Optional[str] = None
    # None means the core API group.
    target_group: Optional[str] = None
    target_kind: str
    target_name: str

    @property
    def is_cross_namespace(self) -> bool:
        return bool(self.target_namespace) and self.target_namespace != self.requesting_namespace


class GrantFrom(BaseModelFrozen):
    group: str = CORE_GROUP
    kind: str
    namespace: str


class GrantTo(BaseModelFrozen):
    group: str = CORE_GROUP
    kind: str
    # None or "" matches any name of this group/kind.
    name: Optional[str] = None


class ReferenceGrant(BaseModelFrozen):
    namespace: str
    name: Optional[str] = None
    from_rules: Tuple[GrantFrom, ...] = ()
    to_rules: Tuple[GrantTo, ...] = ()
