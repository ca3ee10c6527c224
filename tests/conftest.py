"""
Pytest config.

Pin the repo root on sys.path so `import refgrant` and `import main` work when a global
`pytest` entrypoint is used without installing the project.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture(autouse=True)
def _clear_refgrant_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REFGRANT_CROSS_NAMESPACE_ENABLED", "REFGRANT_API_VERSION", "REFGRANT_CACHE_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_grant():
    """Build a single-rule ReferenceGrant in ns2 allowing PVCs from `from_namespace`."""
    from refgrant.core.models import GrantFrom, GrantTo, ReferenceGrant

    def _make(
        *,
        namespace: str = "ns2",
        from_namespace: str = "ns1",
        from_kind: str = "PersistentVolumeClaim",
        from_group: str = "",
        to_group: str = "",
        to_kind: str = "PersistentVolumeClaim",
        to_name: Optional[str] = None,
        name: str = "refgrant1",
    ) -> ReferenceGrant:
        return ReferenceGrant(
            namespace=namespace,
            name=name,
            from_rules=[GrantFrom(group=from_group, kind=from_kind, namespace=from_namespace)],
            to_rules=[GrantTo(group=to_group, kind=to_kind, name=to_name)],
        )

    return _make


@pytest.fixture
def pvc_request():
    """Claim ns1/dst-pvc reading PVC ns2/test-pvc (core group)."""
    from refgrant.core.models import AccessRequest

    return AccessRequest(
        requesting_namespace="ns1",
        requesting_name="dst-pvc",
        target_namespace="ns2",
        target_group=None,
        target_kind="PersistentVolumeClaim",
        target_name="test-pvc",
    )
