"""Legacy central registry — the fallback source of module configuration.

Before modules carried their own ``module.json``, every module was listed
in a single ``modules.json`` document. Repositories without a descriptor
are still resolved against it, matched on ``content_repo``.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class CentralRegistryError(Exception):
    """Raised when the central registry document cannot be read or parsed."""


class CentralRegistry:
    """File-based legacy registry, re-read on every lookup."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def entries(self) -> list[dict]:
        """Load all entries; ``modules`` may be a mapping or a list."""
        if not self.path.exists():
            logger.warning("Central registry not found: %s", self.path)
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CentralRegistryError(f"Failed to load central registry {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CentralRegistryError(
                f"Expected a JSON object in {self.path}, got {type(data).__name__}"
            )

        modules = data.get("modules") or []
        if isinstance(modules, dict):
            modules = list(modules.values())
        if not isinstance(modules, list):
            raise CentralRegistryError(f"'modules' in {self.path} must be a mapping or a list")

        return [m for m in modules if isinstance(m, dict)]

    def find_by_repository(self, repository: str) -> dict | None:
        """Return a copy of the entry whose ``content_repo`` is ``repository``."""
        for entry in self.entries():
            if entry.get("content_repo") == repository:
                return copy.deepcopy(entry)
        return None
