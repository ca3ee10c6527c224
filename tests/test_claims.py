from __future__ import annotations

import pytest

from refgrant.authz.errors import PreconditionViolation
from refgrant.core.claims import (
    access_request_from_claim,
    load_claim_yaml,
    load_grants_yaml,
    reference_grant_from_manifest,
)


def _claim(ref=None):
    claim = {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {"name": "dst-pvc", "namespace": "ns1"},
        "spec": {"accessModes": ["ReadWriteOnce"]},
    }
    if ref is not None:
        claim["spec"]["dataSourceRef"] = ref
    return claim


def test_access_request_from_claim_core_group() -> None:
    req = access_request_from_claim(
        _claim({"apiGroup": "", "kind": "PersistentVolumeClaim", "name": "test-pvc", "namespace": "ns2"})
    )
    assert req.requesting_namespace == "ns1"
    assert req.requesting_name == "dst-pvc"
    assert req.requesting_kind == "PersistentVolumeClaim"
    assert req.requesting_group == ""
    assert req.target_namespace == "ns2"
    assert req.target_group is None
    assert req.target_name == "test-pvc"
    assert req.is_cross_namespace is True


def test_access_request_from_claim_keeps_api_group() -> None:
    req = access_request_from_claim(
        _claim({"apiGroup": "snapshot.storage.k8s.io", "kind": "VolumeSnapshot", "name": "s1", "namespace": "ns2"})
    )
    assert req.target_group == "snapshot.storage.k8s.io"
    assert req.target_kind == "VolumeSnapshot"


def test_access_request_from_claim_without_namespace_is_kept_unset() -> None:
    req = access_request_from_claim(_claim({"kind": "PersistentVolumeClaim", "name": "test-pvc"}))
    assert req.target_namespace is None
    assert req.is_cross_namespace is False


def test_access_request_from_claim_requires_data_source_ref() -> None:
    with pytest.raises(PreconditionViolation):
        access_request_from_claim(_claim())
    with pytest.raises(PreconditionViolation):
        access_request_from_claim(_claim({"kind": "PersistentVolumeClaim", "namespace": "ns2"}))


def test_reference_grant_from_manifest() -> None:
    grant = reference_grant_from_manifest(
        {
            "apiVersion": "gateway.networking.k8s.io/v1beta1",
            "kind": "ReferenceGrant",
            "metadata": {"name": "allow-ns1", "namespace": "ns2"},
            "spec": {
                "from": [{"group": "", "kind": "PersistentVolumeClaim", "namespace": "ns1"}],
                "to": [
                    {"group": "", "kind": "PersistentVolumeClaim"},
                    {"group": "snapshot.storage.k8s.io", "kind": "VolumeSnapshot", "name": "s1"},
                ],
            },
        }
    )
    assert grant.namespace == "ns2"
    assert grant.name == "allow-ns1"
    assert grant.from_rules[0].namespace == "ns1"
    assert grant.to_rules[0].name is None
    assert grant.to_rules[1].group == "snapshot.storage.k8s.io"
    assert grant.to_rules[1].name == "s1"


def test_reference_grant_from_manifest_defaults_missing_fields() -> None:
    grant = reference_grant_from_manifest({"spec": {"from": [{"kind": "PersistentVolumeClaim"}]}}, namespace="ns2")
    assert grant.namespace == "ns2"
    assert grant.from_rules[0].group == ""
    assert grant.from_rules[0].namespace == ""
    assert grant.to_rules == ()


def test_load_grants_yaml_multi_document_and_list() -> None:
    text = """
apiVersion: gateway.networking.k8s.io/v1beta1
kind: ReferenceGrant
metadata:
  name: g1
  namespace: ns2
spec:
  from:
    - {group: "", kind: PersistentVolumeClaim, namespace: ns1}
  to:
    - {group: "", kind: PersistentVolumeClaim}
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: unrelated
---
apiVersion: v1
kind: List
items:
  - kind: ReferenceGrant
    metadata: {name: g2, namespace: ns2}
    spec:
      from: [{kind: PersistentVolumeClaim, namespace: ns3}]
      to: [{kind: PersistentVolumeClaim, name: only-this}]
"""
    grants = load_grants_yaml(text)
    assert [g.name for g in grants] == ["g1", "g2"]
    assert grants[1].to_rules[0].name == "only-this"


def test_load_claim_yaml_rejects_non_mapping() -> None:
    with pytest.raises(PreconditionViolation):
        load_claim_yaml("- just\n- a list\n")


def test_access_request_from_claim_requires_claim_namespace() -> None:
    claim = _claim({"kind": "PersistentVolumeClaim", "name": "test-pvc", "namespace": "ns2"})
    del claim["metadata"]["namespace"]
    with pytest.raises(PreconditionViolation):
        access_request_from_claim(claim)

    claim["metadata"]["namespace"] = ""
    with pytest.raises(PreconditionViolation):
        access_request_from_claim(claim)


def test_from_rule_without_namespace_never_authorizes() -> None:
    from refgrant.authz.access import check_access
    from refgrant.providers.grant_provider import StaticGrantProvider

    grants = load_grants_yaml(
        """
kind: ReferenceGrant
metadata: {name: g1, namespace: ns2}
spec:
  from: [{kind: PersistentVolumeClaim}]
  to: [{kind: PersistentVolumeClaim}]
"""
    )
    assert grants[0].from_rules[0].namespace == ""

    req = access_request_from_claim(
        _claim({"kind": "PersistentVolumeClaim", "name": "test-pvc", "namespace": "ns2"})
    )
    allowed, err = check_access(req, StaticGrantProvider(grants))
    assert allowed is False
    assert err is not None
