#!/usr/bin/env python3
"""
refgrant - Cross-namespace data source authorization
Checks whether a PersistentVolumeClaim may use an object in another namespace as its data source.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_FAILED = 2


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def run_check(claim_path: str, *, grants_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Evaluate one claim and return the JSON-ready decision.

    Grants come from `grants_path` when given, otherwise from the cluster.
    """
    from refgrant.authz.access import check_access
    from refgrant.core.claims import load_claim_yaml, load_grants_yaml
    from refgrant.providers.grant_provider import StaticGrantProvider, get_grant_provider

    request = load_claim_yaml(_read(claim_path))
    if grants_path:
        provider = StaticGrantProvider(load_grants_yaml(_read(grants_path), namespace=request.target_namespace))
    else:
        provider = get_grant_provider()

    allowed, err = check_access(request, provider)
    return {
        "allowed": allowed,
        "error": str(err) if err is not None else None,
        "request": request.model_dump(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Check a PVC's cross-namespace dataSourceRef against ReferenceGrants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check against grants from a file
  python main.py --claim claim.yaml --grants grants.yaml

  # Check against the ReferenceGrants in the cluster
  python main.py --claim claim.yaml
        """,
    )
    parser.add_argument("--claim", required=True, help="Path to a PVC manifest (YAML/JSON), or - for stdin")
    parser.add_argument(
        "--grants",
        help="Path to ReferenceGrant manifests (multi-document YAML or a List). If omitted, reads the cluster.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    import yaml

    from refgrant.authz.errors import ReferenceGrantError

    try:
        decision = run_check(args.claim, grants_path=args.grants)
    except (ReferenceGrantError, OSError, yaml.YAMLError) as e:
        print(json.dumps({"allowed": False, "error": str(e), "request": None}, indent=2))
        return EXIT_FAILED

    print(json.dumps(decision, indent=2))
    return EXIT_ALLOWED if decision["allowed"] else EXIT_DENIED


if __name__ == "__main__":
    sys.exit(main())
