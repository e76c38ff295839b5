"""GitHub REST client for repository listing and file contents.

Authenticates with ``GITHUB_TOKEN`` when one is configured; without it the
API is still usable, only rate-limited harder. Failures never raise:
listing falls back to an empty list and file lookups to ``None`` so a scan
can carry on with the next repository.
"""

from __future__ import annotations

import base64
import binascii
import logging

import httpx

from modcat import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
PAGE_SIZE = 100


class RemoteRepositoryClient:
    """Thin async JSON client over the GitHub repos/contents endpoints."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"InfoTech-Module-Scanner/{__version__}",
            "Accept": "application/vnd.github.v3+json",
        }
        if token:
            headers["Authorization"] = f"token {token}"

        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "RemoteRepositoryClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_repositories(self, organization: str, prefix: str = "mod_") -> list[dict]:
        """List the organization's repositories whose name starts with ``prefix``.

        Only the first page is requested. Any failure is logged and yields
        an empty list.
        """
        try:
            response = await self._http.get(
                f"/orgs/{organization}/repos",
                params={"type": "all", "per_page": PAGE_SIZE},
            )
        except httpx.HTTPError as e:
            logger.error("Failed to fetch repositories: %s", _describe_exception(e))
            return []

        if response.status_code >= 400:
            logger.error("Failed to fetch repositories: %s", _describe_response(response))
            return []

        try:
            repos = response.json()
        except ValueError as e:
            logger.error("Failed to parse repository listing: %s", e)
            return []

        if not isinstance(repos, list):
            logger.error("Unexpected repository listing payload: %s", type(repos).__name__)
            return []

        return [
            repo for repo in repos
            if isinstance(repo, dict) and str(repo.get("name", "")).startswith(prefix)
        ]

    async def fetch_file(
        self,
        organization: str,
        repository: str,
        path: str,
        ref: str = "main",
    ) -> str | None:
        """Return a file's decoded text, or None when it is missing or unreachable."""
        try:
            response = await self._http.get(
                f"/repos/{organization}/{repository}/contents/{path}",
                params={"ref": ref},
            )
        except httpx.HTTPError as e:
            logger.debug("Failed to fetch %s from %s: %s", path, repository, _describe_exception(e))
            return None

        if response.status_code == 404:
            logger.debug("%s not found in %s@%s", path, repository, ref)
            return None

        if response.status_code >= 400:
            logger.debug(
                "Failed to fetch %s from %s: %s", path, repository, _describe_response(response)
            )
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.debug("Failed to fetch %s from %s: unreadable response (%s)", path, repository, e)
            return None

        content = payload.get("content") if isinstance(payload, dict) else None
        if not content:
            logger.debug("%s not found in %s@%s (no content)", path, repository, ref)
            return None

        try:
            return base64.b64decode(content).decode("utf-8")
        except (binascii.Error, ValueError) as e:
            logger.debug("Failed to decode %s from %s: %s", path, repository, e)
            return None


def _describe_response(response: httpx.Response) -> str:
    """Render a GitHub error response as ``GitHub API error <status>: <message>``."""
    message = response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        message = body["message"]
    return f"GitHub API error {response.status_code}: {message}"


def _describe_exception(error: httpx.HTTPError) -> str:
    if isinstance(error, httpx.TimeoutException):
        return f"request timed out ({error.__class__.__name__})"
    return str(error) or error.__class__.__name__
