"""Command line interface for browsing and installing hub skills."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from skillhub import __version__
from skillhub.config import get_settings
from skillhub.core.exceptions import SkillHubError
from skillhub.core.logging.logger import configure_logging
from skillhub.hub.catalog import list_hub_skills
from skillhub.hub.installer import install_hub_skill
from skillhub.hub.models import RepositoryRef
from skillhub.skills.local import list_local_skills

app = typer.Typer(
    help="Browse and install skills from the skill hub.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"skillhub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to skillhub.config.yaml"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    settings = get_settings(config)
    if verbose:
        settings.logger.level = "debug"
    configure_logging(settings.logger)


def _resolve_repo(owner: str | None, repo: str | None, ref: str | None) -> RepositoryRef:
    default = RepositoryRef.from_settings(get_settings().hub)
    return RepositoryRef.resolve(owner=owner, repo=repo, ref=ref, default=default)


def _print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(exc: SkillHubError) -> None:
    error_console.print(f"[red]{exc.kind}[/red]: {exc.message}")
    raise typer.Exit(1)


@app.command("catalog")
def catalog_command(
    owner: str | None = typer.Option(None, help="Hub repository owner"),
    repo: str | None = typer.Option(None, help="Hub repository name"),
    ref: str | None = typer.Option(None, help="Branch, tag or commit"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List skills available in the hub."""
    repository = _resolve_repo(owner, repo, ref)
    try:
        items = asyncio.run(list_hub_skills(repository))
    except SkillHubError as exc:
        _fail(exc)
        return

    if as_json:
        _print_json({"items": [item.to_dict() for item in items]})
        return

    if not items:
        console.print(f"No skills found in {repository.slug}.")
        return

    table = Table(title=f"Skills in {repository.slug}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("When to use", style="dim")
    for item in items:
        table.add_row(item.name, item.description, item.trigger or "")
    console.print(table)


@app.command("install")
def install_command(
    name: str = typer.Argument(..., help="Skill name as listed in the catalog"),
    workspace: Path = typer.Option(
        Path("."), "--workspace", "-w", help="Workspace root to install into"
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace files that already exist"),
    owner: str | None = typer.Option(None, help="Hub repository owner"),
    repo: str | None = typer.Option(None, help="Hub repository name"),
    ref: str | None = typer.Option(None, help="Branch, tag or commit"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Install a hub skill into <workspace>/.opencode/skills/<name>."""
    repository = _resolve_repo(owner, repo, ref)
    try:
        result = asyncio.run(
            install_hub_skill(workspace, name, overwrite=overwrite, repo=repository)
        )
    except SkillHubError as exc:
        _fail(exc)
        return

    if as_json:
        _print_json(result.to_dict())
        return

    console.print(
        f"[green]{result.action.capitalize()}[/green] [cyan]{result.name}[/cyan] "
        f"at {result.path} ({result.written} written, {result.skipped} skipped)"
    )


@app.command("list")
def list_command(
    workspace: Path = typer.Option(Path("."), "--workspace", "-w", help="Workspace root"),
    include_global: bool = typer.Option(False, "--global", help="Include user-level skills"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List skills already present for a workspace."""
    items = list_local_skills(workspace, include_global=include_global)
    if as_json:
        _print_json({"items": [item.to_dict() for item in items]})
        return
    if not items:
        console.print("No skills installed.")
        return

    table = Table()
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Scope")
    table.add_column("Description")
    table.add_column("Path", style="dim")
    for item in items:
        table.add_row(item.name, item.scope, item.description, str(item.path))
    console.print(table)
