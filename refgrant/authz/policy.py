from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class GrantCheckPolicy:
    # Mirrors the CrossNamespaceVolumeDataSource feature gate.
    cross_namespace_enabled: bool = True

    # gateway.networking.k8s.io version serving ReferenceGrants
    api_version: str = "v1beta1"

    # 0 disables the grant snapshot cache
    cache_ttl_seconds: int = 30


def load_grant_check_policy() -> GrantCheckPolicy:
    """
    Load reference-grant check settings from env (ConfigMap/Secret friendly).

    Recommended vars:
    - REFGRANT_CROSS_NAMESPACE_ENABLED=1
    - REFGRANT_API_VERSION=v1beta1
    - REFGRANT_CACHE_TTL_SECONDS=30
    """
    return GrantCheckPolicy(
        cross_namespace_enabled=_env_bool("REFGRANT_CROSS_NAMESPACE_ENABLED", True),
        api_version=(os.getenv("REFGRANT_API_VERSION", "") or "").strip() or "v1beta1",
        cache_ttl_seconds=max(0, min(_env_int("REFGRANT_CACHE_TTL_SECONDS", 30), 3600)),
    )
