"""Registry — discovery and reconciliation of module configurations.

The registry provides:
- Discovery: scan the organization's mod_* repositories
- Fallback: resolve repositories without module.json via the central registry
- Caching: bound repeated lookups with a TTL cache
- Merging: build the unified, provenance-tagged catalog
"""
