"""Module scanner — discover, resolve and merge module configurations.

Each ``mod_*`` repository is resolved to exactly one terminal outcome:

1. cached result (no network)
2. the repository's own ``module.json``
3. the matching entry of the legacy central registry
4. failure: no configuration found

A failing repository is recorded and skipped; it never aborts the scan
of the others.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging

from modcat.config import Settings
from modcat.github.client import RemoteRepositoryClient
from modcat.registry.cache import LookupCache
from modcat.registry.central import CentralRegistry, CentralRegistryError
from modcat.registry.converter import to_catalog_entry
from modcat.registry.models import (
    NO_CONFIGURATION,
    ModuleSource,
    ScanResult,
    UnifiedCatalog,
    ValidationOutcome,
)
from modcat.spec.validator import DescriptorValidator

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "module.json"


class ModuleScanner:
    """Resolves module configurations across an organization's repositories."""

    def __init__(
        self,
        client: RemoteRepositoryClient,
        settings: Settings | None = None,
        cache: LookupCache | None = None,
        central: CentralRegistry | None = None,
        validator: DescriptorValidator | None = None,
    ):
        self.client = client
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else LookupCache(ttl=self.settings.cache_ttl)
        self.central = central or CentralRegistry(self.settings.central_registry)
        self.validator = validator or DescriptorValidator(
            domain=self.settings.platform_domain,
            hugo_version=self.settings.hugo_version,
            timeout=self.settings.request_timeout,
        )

    async def scan_module(self, name: str) -> ScanResult:
        """Resolve one repository's configuration."""
        logger.info("Scanning module: %s", name)

        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("Using cached data for %s", name)
            return cached

        try:
            return await self.cache.single_flight(name, lambda: self._resolve(name))
        except CentralRegistryError:
            raise
        except Exception as e:
            logger.error("Failed to scan %s: %s", name, e)
            return ScanResult.failed(name, str(e) or e.__class__.__name__)

    async def _resolve(self, name: str) -> ScanResult:
        descriptor = await self._fetch_descriptor(name)
        if descriptor is not None:
            logger.info("Found %s for %s", DESCRIPTOR_FILE, name)
            result = ScanResult.found(name, ModuleSource.MODULE_JSON, descriptor)
            self.cache.put(name, result)
            return result

        entry = self.central.find_by_repository(name)
        if entry is not None:
            logger.info("Using central config for %s", name)
            result = ScanResult.found(name, ModuleSource.CENTRAL, entry)
            if self.settings.cache_central:
                self.cache.put(name, result)
            return result

        logger.warning("No configuration found for %s", name)
        return ScanResult.failed(name, NO_CONFIGURATION)

    async def _fetch_descriptor(self, name: str) -> dict | None:
        """Fetch and parse the repository's own descriptor; None triggers fallback."""
        content = await self.client.fetch_file(
            self.settings.organization, name, DESCRIPTOR_FILE, ref=self.settings.branch
        )
        if content is None:
            return None

        try:
            descriptor = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed %s in %s: %s", DESCRIPTOR_FILE, name, e)
            return None

        if not isinstance(descriptor, dict):
            logger.warning("Ignoring %s in %s: expected a JSON object", DESCRIPTOR_FILE, name)
            return None
        return descriptor

    async def scan_all(self) -> list[ScanResult]:
        """Resolve every matching repository, in listing order."""
        org = self.settings.organization
        logger.info("Scanning all modules in %s organization", org)

        repos = await self.client.list_repositories(org, self.settings.repo_prefix)
        names = [repo["name"] for repo in repos]
        logger.info("Found %d %s* repositories", len(names), self.settings.repo_prefix)

        if self.settings.concurrency <= 1:
            results = []
            for name in names:
                results.append(await self.scan_module(name))
            return results

        semaphore = asyncio.Semaphore(self.settings.concurrency)

        async def bounded(name: str) -> ScanResult:
            async with semaphore:
                return await self.scan_module(name)

        return list(await asyncio.gather(*(bounded(name) for name in names)))

    async def build_unified_catalog(self) -> UnifiedCatalog:
        """Scan the organization and merge the results into one catalog."""
        catalog = UnifiedCatalog()
        seen: set[str] = set()

        for result in await self.scan_all():
            if not result.success:
                logger.warning("Skipping %s: %s", result.repository, result.error)
                catalog.skipped.append(result)
                continue

            try:
                entry = self._catalog_entry(result)
            except Exception as e:
                reason = f"Invalid configuration: {e}"
                logger.warning("Skipping %s: %s", result.repository, reason)
                catalog.skipped.append(ScanResult.failed(result.repository, reason))
                continue

            name = entry.get("name")
            if name in seen:
                reason = f"Duplicate module name '{name}'"
                logger.warning("Skipping %s: %s", result.repository, reason)
                catalog.skipped.append(ScanResult.failed(result.repository, reason))
                continue
            seen.add(name)

            catalog.modules.append(entry)

        logger.info(
            "Unified catalog: %d module(s), %d skipped", len(catalog.modules), len(catalog.skipped)
        )
        logger.debug("Lookup cache holds %d result(s)", len(self.cache))
        return catalog

    def _catalog_entry(self, result: ScanResult) -> dict:
        """Build the provenance-tagged catalog entry for a successful result."""
        if result.source is ModuleSource.MODULE_JSON:
            entry = to_catalog_entry(result.data, domain=self.settings.platform_domain)
        else:
            entry = copy.deepcopy(result.data)

        name = entry.get("name")
        if name is not None and not isinstance(name, str):
            raise ValueError(f"module name must be a string, got {type(name).__name__}")

        entry["_source"] = result.source.value
        return entry

    async def validate_all(self) -> list[ValidationOutcome]:
        """Validate every repository's own descriptor."""
        outcomes = []
        for result in await self.scan_all():
            if result.success and result.source is ModuleSource.MODULE_JSON:
                valid = self.validator.validate_module(result.data, result.repository)
                outcomes.append(ValidationOutcome(repository=result.repository, valid=valid))
        return outcomes
