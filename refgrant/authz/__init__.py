"""Cross-namespace reference authorization.

A claim may use an object in another namespace as its data source only when a
ReferenceGrant in that other namespace says so:
- `matcher.evaluate` is the pure decision over a grant snapshot
- `access.check_access` is the caller side (preconditions, fetching, feature gate)
- `policy` holds the env/ConfigMap driven settings
"""
