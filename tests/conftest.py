"""Shared fixtures: descriptor builder and a fake GitHub API."""

import base64
import copy
import json
import re

import httpx
import pytest

from modcat.github.client import RemoteRepositoryClient

_CONTENTS = re.compile(r"^/repos/(?P<org>[^/]+)/(?P<repo>[^/]+)/contents/(?P<path>.+)$")


def make_descriptor(name: str = "linux-base", drop: tuple = (), **overrides) -> dict:
    """Build a valid module.json dict that raises no convention warnings.

    Overrides use ``section__field`` keys (e.g. ``deployment__subdomain``);
    ``drop`` removes dotted paths (e.g. ``"metadata.license"``).
    """
    repo = "mod_" + name.replace("-", "_")
    data = {
        "schema_version": "1.0",
        "name": name,
        "title": "Linux Basics",
        "description": "Introductory course on the Linux command line",
        "version": "1.2.0",
        "type": "educational",
        "deployment": {
            "subdomain": name,
            "repository": repo,
            "build_system": "hugo-base",
        },
        "hugo_config": {
            "template": "default",
            "theme": "compose",
            "components": ["quiz-engine", "code-highlight"],
            "hugo_version": "0.148.0",
        },
        "metadata": {
            "author": "InfoTech.io Team",
            "license": "MIT",
            "difficulty": "beginner",
            "estimated_time": "20 hours",
            "language": "ru",
            "tags": ["linux", "command-line", "basics"],
        },
        "urls": {
            "production": f"https://{name}.infotecha.ru",
            "repository": f"https://github.com/info-tech-io/{repo}",
        },
        "status": {
            "lifecycle": "stable",
            "last_updated": "2025-09-01",
            "content_complete": True,
        },
    }
    for key, value in overrides.items():
        section, _, field = key.partition("__")
        if field:
            data[section][field] = value
        else:
            data[section] = value
    for path in drop:
        *parents, leaf = path.split(".")
        node = data
        for part in parents:
            node = node[part]
        del node[leaf]
    return data


class FakeGitHub:
    """In-memory stand-in for the GitHub repos and contents endpoints."""

    def __init__(self, org: str = "info-tech-io"):
        self.org = org
        self.repos: list[str] = []
        self.files: dict[tuple[str, str], str] = {}
        self.list_status = 200
        self.requests: list[httpx.Request] = []

    def add_repo(self, name: str, descriptor: dict | str | None = None) -> None:
        self.repos.append(name)
        if descriptor is not None:
            content = descriptor if isinstance(descriptor, str) else json.dumps(descriptor)
            self.files[(name, "module.json")] = content

    def fetch_count(self, repo: str) -> int:
        return sum(1 for r in self.requests if f"/repos/{self.org}/{repo}/contents/" in r.url.path)

    def client(self, **kwargs) -> RemoteRepositoryClient:
        return RemoteRepositoryClient(transport=httpx.MockTransport(self), **kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == f"/orgs/{self.org}/repos":
            if self.list_status >= 400:
                return httpx.Response(self.list_status, json={"message": "Server Error"})
            names = ["README-site", *self.repos]
            return httpx.Response(200, json=[{"name": n} for n in names])

        match = _CONTENTS.match(path)
        if match and match["org"] == self.org:
            content = self.files.get((match["repo"], match["path"]))
            if content is not None:
                encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
                return httpx.Response(200, json={"name": match["path"], "content": encoded})

        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def descriptor():
    """Factory for valid descriptors; see ``make_descriptor``."""
    return make_descriptor


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def central_file(tmp_path):
    """Write a central modules.json and return its path."""

    def _write(modules) -> str:
        path = tmp_path / "modules.json"
        path.write_text(json.dumps({"modules": copy.deepcopy(modules)}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def docker_entry():
    """A legacy central-registry entry for mod_docker."""
    return {
        "name": "docker",
        "title": "Docker",
        "description": "Containers from first principles",
        "subdomain": "docker",
        "content_repo": "mod_docker",
        "repository": "mod_docker",
        "url": "https://docker.infotecha.ru",
    }
