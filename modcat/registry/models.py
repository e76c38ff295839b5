"""Registry data models — scan results, provenance and the unified catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

CATALOG_VERSION = "2.0"
BUILD_SYSTEM = "hybrid"  # both hugo-base and hugo-templates modules

NO_CONFIGURATION = "No configuration found"


class ModuleSource(str, Enum):
    """Where a module's configuration came from."""

    MODULE_JSON = "module.json"  # the repository's own descriptor
    CENTRAL = "central"  # legacy central registry entry


@dataclass
class ScanResult:
    """Outcome of resolving one repository.

    Either ``success`` with a ``source`` and its ``data`` (a descriptor for
    ``module.json``, a flat catalog entry for ``central``), or a failure
    carrying an ``error`` reason. Build with ``found`` / ``failed``.
    """

    repository: str
    success: bool
    source: ModuleSource | None = None
    data: dict = field(default_factory=dict)
    error: str = ""

    @classmethod
    def found(cls, repository: str, source: ModuleSource, data: dict) -> "ScanResult":
        return cls(repository=repository, success=True, source=source, data=data)

    @classmethod
    def failed(cls, repository: str, error: str) -> "ScanResult":
        return cls(repository=repository, success=False, error=error)

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "source": self.source.value, "data": self.data}
        return {"success": False, "error": self.error}


@dataclass
class ValidationOutcome:
    """Validation verdict for one repository's own descriptor."""

    repository: str
    valid: bool


@dataclass
class UnifiedCatalog:
    """The merged catalog served to the landing page as ``modules.json``."""

    version: str = CATALOG_VERSION
    generated_at: str = ""  # ISO 8601, UTC
    build_system: str = BUILD_SYSTEM
    modules: list[dict] = field(default_factory=list)
    skipped: list[ScanResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.generated_at:
            self.generated_at = datetime.now(timezone.utc).isoformat()

    @property
    def names(self) -> list[str]:
        return [m.get("name", "") for m in self.modules]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "generated_at": self.generated_at,
            "build_system": self.build_system,
            "modules": self.modules,
        }

    def to_legacy(self) -> dict:
        return {"modules": self.modules}
