"""Tests for the legacy catalog-entry converter."""

from modcat.registry.converter import to_catalog_entry


def test_full_descriptor(descriptor):
    entry = to_catalog_entry(descriptor())

    assert entry["name"] == "linux-base"
    assert entry["title"] == "Linux Basics"
    assert entry["subdomain"] == "linux-base"
    assert entry["repository"] == "mod_linux_base"
    assert entry["url"] == "https://linux-base.infotecha.ru"
    assert entry["version"] == "1.2.0"
    assert entry["type"] == "educational"
    assert entry["difficulty"] == "beginner"
    assert entry["estimated_time"] == "20 hours"
    assert entry["tags"] == ["linux", "command-line", "basics"]
    assert entry["lifecycle"] == "stable"
    assert entry["last_updated"] == "2025-09-01"
    assert entry["hugo_config"] == descriptor()["hugo_config"]
    assert "_source" not in entry


def test_explicit_subdomain_preserved(descriptor):
    entry = to_catalog_entry(descriptor(deployment__subdomain="linux"))
    assert entry["subdomain"] == "linux"


def test_missing_subdomain_derives_name(descriptor):
    entry = to_catalog_entry(descriptor(drop=("deployment.subdomain",)))
    assert entry["subdomain"] == "linux-base"


def test_fallbacks_without_optional_sections():
    entry = to_catalog_entry({"name": "docker-compose", "title": "Compose"})

    assert entry["subdomain"] == "docker-compose"
    assert entry["repository"] == "mod_docker_compose"
    assert entry["url"] == "https://docker-compose.infotecha.ru"
    assert entry["tags"] == []
    assert entry["difficulty"] is None
    assert entry["hugo_config"] is None


def test_custom_domain():
    entry = to_catalog_entry({"name": "git"}, domain="example.org")
    assert entry["url"] == "https://git.example.org"


def test_does_not_mutate_input(descriptor):
    data = descriptor()
    to_catalog_entry(data)
    assert data == descriptor()


def test_mistyped_sections_fall_back():
    entry = to_catalog_entry({"name": "weird", "deployment": "oops", "metadata": ["x"], "urls": 7})

    assert entry["subdomain"] == "weird"
    assert entry["repository"] == "mod_weird"
    assert entry["url"] == "https://weird.infotecha.ru"
    assert entry["tags"] == []


def test_non_string_name_is_stringified():
    entry = to_catalog_entry({"name": 42})

    assert entry["name"] == "42"
    assert entry["repository"] == "mod_42"
    assert entry["url"] == "https://42.infotecha.ru"


def test_non_list_tags_dropped(descriptor):
    entry = to_catalog_entry(descriptor(metadata__tags="linux"))
    assert entry["tags"] == []


def test_entry_does_not_alias_descriptor(descriptor):
    data = descriptor()
    entry = to_catalog_entry(data)

    entry["tags"].append("mutated")
    entry["hugo_config"]["components"].append("search")

    assert data == descriptor()
