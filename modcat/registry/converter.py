"""Convert module descriptors to the flat legacy catalog-entry shape."""

from __future__ import annotations

import copy

from modcat.spec import PLATFORM_DOMAIN
from modcat.spec.conventions import expected_production_url, expected_repository


def to_catalog_entry(descriptor: dict, domain: str = PLATFORM_DOMAIN) -> dict:
    """Project a ``module.json`` descriptor onto a legacy ``modules.json`` entry.

    No validation happens here: missing or mistyped sections fall back to
    values derived from ``name`` instead of failing. Nested values are
    copied, so the entry never aliases the descriptor.
    """
    name = descriptor.get("name")
    if not isinstance(name, str):
        name = "" if name is None else str(name)

    deployment = _section(descriptor, "deployment")
    metadata = _section(descriptor, "metadata")
    status = _section(descriptor, "status")
    urls = _section(descriptor, "urls")

    tags = metadata.get("tags")

    return {
        "name": name,
        "title": descriptor.get("title"),
        "description": descriptor.get("description"),
        "subdomain": deployment.get("subdomain") or name,
        "repository": deployment.get("repository") or expected_repository(name),
        "url": urls.get("production") or expected_production_url(name, domain),
        # Additional fields for the landing page
        "version": descriptor.get("version"),
        "type": descriptor.get("type"),
        "difficulty": metadata.get("difficulty"),
        "estimated_time": metadata.get("estimated_time"),
        "tags": list(tags) if isinstance(tags, list) else [],
        "lifecycle": status.get("lifecycle"),
        "last_updated": status.get("last_updated"),
        "hugo_config": copy.deepcopy(descriptor.get("hugo_config")),
    }


def _section(descriptor: dict, key: str) -> dict:
    value = descriptor.get(key)
    return value if isinstance(value, dict) else {}
