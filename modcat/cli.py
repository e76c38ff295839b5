"""modcat CLI — module scanner and descriptor validator entry points."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from modcat import __version__
from modcat.config import ConfigError, Settings, load_settings
from modcat.logging_config import setup_logging
from modcat.registry.central import CentralRegistryError

console = Console()
logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _dump(data: dict) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _run(coro):
    """Run a coroutine at the process boundary; unexpected errors exit 1."""
    try:
        return asyncio.run(coro)
    except (ConfigError, CentralRegistryError) as e:
        logger.error("%s", e)
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        logger.debug("Traceback:", exc_info=True)
    sys.exit(1)


def _load(config_path: str | None, verbose: bool) -> Settings:
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        setup_logging("INFO")
        logger.error("%s", e)
        sys.exit(1)
    log_file = str(settings.log_file) if settings.log_file else None
    setup_logging("DEBUG" if verbose else settings.log_level, log_file=log_file)
    return settings


def _make_client(settings: Settings):
    from modcat.github.client import RemoteRepositoryClient

    return RemoteRepositoryClient(
        token=settings.token,
        base_url=settings.api_url,
        timeout=settings.request_timeout,
    )


# ── Scan ─────────────────────────────────────────────────────────────


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option("--module", "module_name", default=None, help="Scan a specific module repository")
@click.option("--validate", is_flag=True, help="Validate all found module.json files")
@click.option(
    "--output",
    "-o",
    default="pretty",
    type=click.Choice(["pretty", "json", "legacy"]),
    help="Output format for the unified catalog",
)
@click.option("--config", "config_path", default=None, help="YAML settings file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def scan(module_name: str | None, validate: bool, output: str, config_path: str | None, verbose: bool):
    """Scan the organization's mod_* repositories and build the unified modules.json.

    Each repository's own module.json is preferred; repositories without
    one fall back to the central modules.json registry.

    \b
    Environment:
      GITHUB_TOKEN  GitHub API token (optional but recommended)
    """
    settings = _load(config_path, verbose)

    if validate:
        outcomes = _run(_validate_all(settings))
        click.echo("\nValidation Results:")
        for outcome in outcomes:
            status = "✓" if outcome.valid else "✗"
            click.echo(f"  {status} {outcome.repository}")
        sys.exit(0 if all(o.valid for o in outcomes) else 1)

    if module_name:
        result = _run(_scan_module(settings, module_name))
        if not result.success:
            logger.error("Failed to scan module: %s", result.error)
            sys.exit(1)
        _dump(result.data)
        return

    catalog = _run(_build_catalog(settings))

    if output == "json":
        _dump(catalog.to_dict())
    elif output == "legacy":
        _dump(catalog.to_legacy())
    else:
        _print_catalog(catalog)


async def _validate_all(settings: Settings):
    from modcat.registry.scanner import ModuleScanner

    logger.info("Validating all modules...")
    async with _make_client(settings) as client:
        return await ModuleScanner(client, settings).validate_all()


async def _scan_module(settings: Settings, name: str):
    from modcat.registry.scanner import ModuleScanner

    async with _make_client(settings) as client:
        return await ModuleScanner(client, settings).scan_module(name)


async def _build_catalog(settings: Settings):
    from modcat.registry.scanner import ModuleScanner

    async with _make_client(settings) as client:
        return await ModuleScanner(client, settings).build_unified_catalog()


def _print_catalog(catalog) -> None:
    console.print("\n[bold blue]Unified Modules Configuration[/]")
    console.print(f"Generated: {catalog.generated_at}")
    console.print(f"Modules found: {len(catalog.modules)}\n")

    if not catalog.modules:
        console.print("[yellow]No modules found.[/]")
        return

    table = Table()
    table.add_column("Name", style="cyan")
    table.add_column("Source", style="dim")
    table.add_column("Title")
    table.add_column("URL", style="green")

    for module in catalog.modules:
        table.add_row(
            str(module.get("name", "")),
            module.get("_source", "unknown"),
            str(module.get("title") or ""),
            str(module.get("url") or ""),
        )

    console.print(table)

    for skipped in catalog.skipped:
        console.print(f"  [yellow]skipped[/] {skipped.repository}: {skipped.error}")


# ── Validate ─────────────────────────────────────────────────────────


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.argument("file_path", required=False)
@click.option("--url", default=None, help="Validate a remote module.json")
@click.option("--template", is_flag=True, help="Print a module.json template")
@click.option("--schema", "show_schema", is_flag=True, help="Print the module.json JSON Schema")
@click.option("--config", "config_path", default=None, help="YAML settings file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def validate(
    ctx,
    file_path: str | None,
    url: str | None,
    template: bool,
    show_schema: bool,
    config_path: str | None,
    verbose: bool,
):
    """Validate a module.json descriptor against the schema and platform conventions.

    \b
    Examples:
      modcat-validate ./module.json
      modcat-validate --url https://raw.githubusercontent.com/info-tech-io/mod_linux_base/main/module.json
      modcat-validate --template > module.json
    """
    from modcat.spec.validator import DescriptorValidator, generate_template

    if not (file_path or url or template or show_schema):
        click.echo(ctx.get_help())
        return

    settings = _load(config_path, verbose)

    if template:
        _dump(
            generate_template(
                organization=settings.organization,
                github_host=settings.github_host,
                domain=settings.platform_domain,
                hugo_version=settings.hugo_version,
            )
        )
        return

    if show_schema:
        from modcat.spec.schema import get_schema

        _dump(get_schema())
        return

    validator = DescriptorValidator(
        domain=settings.platform_domain,
        hugo_version=settings.hugo_version,
        timeout=settings.request_timeout,
    )
    if url:
        valid = _run(validator.validate_url(url))
    else:
        valid = validator.validate_file(file_path)

    sys.exit(0 if valid else 1)


if __name__ == "__main__":
    scan()
