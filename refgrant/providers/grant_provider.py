"""Grant provider seam: where ReferenceGrant snapshots come from."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from refgrant.authz.policy import GrantCheckPolicy, load_grant_check_policy
from refgrant.core.models import ReferenceGrant

logger = logging.getLogger(__name__)


@runtime_checkable
class GrantProvider(Protocol):
    def list_grants(self, namespace: str) -> List[ReferenceGrant]:
        """Return the grants living in exactly `namespace`; raise GrantListingFailure on error."""
        ...


class StaticGrantProvider:
    """In-memory provider for fixtures, files and tests."""

    def __init__(self, grants: Iterable[ReferenceGrant] = ()) -> None:
        self._grants = list(grants)

    def list_grants(self, namespace: str) -> List[ReferenceGrant]:
        return [g for g in self._grants if g.namespace == namespace]


class CachedGrantProvider:
    """
    Per-namespace TTL cache in front of another provider.

    Snapshots may be up to `ttl_seconds` stale, the same bounded staleness an informer
    cache gives. Failures from the wrapped provider are never cached.
    """

    def __init__(
        self,
        inner: GrantProvider,
        *,
        ttl_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, List[ReferenceGrant]]] = {}

    def list_grants(self, namespace: str) -> List[ReferenceGrant]:
        now = self._clock()
        with self._lock:
            expired = [ns for ns, (fetched_at, _) in self._entries.items() if now - fetched_at >= self._ttl]
            for ns in expired:
                del self._entries[ns]
            hit = self._entries.get(namespace)
            if hit is not None:
                return list(hit[1])

        grants = self._inner.list_grants(namespace)
        with self._lock:
            self._entries[namespace] = (now, list(grants))
        return list(grants)

    def cached_namespaces(self) -> List[str]:
        with self._lock:
            return sorted(self._entries)

    def invalidate(self, namespace: Optional[str] = None) -> None:
        with self._lock:
            if namespace is None:
                self._entries.clear()
            else:
                self._entries.pop(namespace, None)


def get_grant_provider(policy: Optional[GrantCheckPolicy] = None) -> GrantProvider:
    """Seam for swapping provider implementations (cluster-backed by default)."""
    from refgrant.providers.k8s_provider import KubernetesGrantProvider

    policy = policy or load_grant_check_policy()
    provider: GrantProvider = KubernetesGrantProvider(api_version=policy.api_version)
    if policy.cache_ttl_seconds > 0:
        logger.debug("Caching ReferenceGrant snapshots for %ss", policy.cache_ttl_seconds)
        provider = CachedGrantProvider(provider, ttl_seconds=policy.cache_ttl_seconds)
    return provider
