"""Kubernetes API client for listing ReferenceGrants (read-only)."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List

from refgrant.authz.errors import GrantListingFailure
from refgrant.core.claims import reference_grant_from_manifest
from refgrant.core.models import ReferenceGrant

logger = logging.getLogger(__name__)

REFERENCE_GRANT_GROUP = "gateway.networking.k8s.io"
REFERENCE_GRANT_PLURAL = "referencegrants"

_custom_objects_api = None
_config_loaded = False
_init_lock = threading.Lock()


def _get_custom_objects_api():
    """
    Return a cached CustomObjectsApi client.

    Config loading (in-cluster, then kubeconfig) and the client object are both cached so
    repeated grant checks don't pay the initialization cost.
    """
    global _custom_objects_api, _config_loaded

    if _custom_objects_api is not None:
        return _custom_objects_api

    with _init_lock:
        if _custom_objects_api is not None:
            return _custom_objects_api

        from kubernetes import client, config

        if not _config_loaded:
            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()
            _config_loaded = True

        _custom_objects_api = client.CustomObjectsApi()
        return _custom_objects_api


def list_reference_grants(namespace: str, *, api_version: str = "v1beta1") -> List[Dict[str, Any]]:
    """
    List raw ReferenceGrant manifests in `namespace`.

    Raises GrantListingFailure on any client or API error.
    """
    try:
        api = _get_custom_objects_api()
        resp = api.list_namespaced_custom_object(
            group=REFERENCE_GRANT_GROUP,
            version=api_version,
            namespace=namespace,
            plural=REFERENCE_GRANT_PLURAL,
        )
    except Exception as e:
        detail = str(e)
        try:
            from kubernetes.client.rest import ApiException

            if isinstance(e, ApiException):
                detail = f"Kubernetes API error: {e.reason} - {e.body}"
        except ImportError:
            pass
        logger.warning("Listing ReferenceGrants in %s failed: %s", namespace, detail)
        raise GrantListingFailure(
            f"error getting ReferenceGrants in {namespace} namespace from api server: {detail}"
        ) from e

    items = (resp or {}).get("items") or []
    return [item for item in items if isinstance(item, dict)]


class KubernetesGrantProvider:
    def __init__(self, *, api_version: str = "v1beta1") -> None:
        self.api_version = api_version

    def list_grants(self, namespace: str) -> List[ReferenceGrant]:
        grants: List[ReferenceGrant] = []
        for item in list_reference_grants(namespace, api_version=self.api_version):
            grant = reference_grant_from_manifest(item, namespace=namespace)
            # The namespaced list already scopes this; guard against odd fixtures/proxies.
            if grant.namespace == namespace:
                grants.append(grant)
        return grants
