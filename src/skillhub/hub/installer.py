"""Install a hub skill bundle into a workspace."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from skillhub.config import get_settings
from skillhub.core.exceptions import BundleNotFoundError, InstallFailedError, InvalidPathError
from skillhub.core.logging.logger import get_logger
from skillhub.hub.client import MANIFEST_FILENAME, SKILLS_ROOT, HubClient
from skillhub.hub.models import InstallResult, RepositoryRef
from skillhub.skills.local import project_skills_dir
from skillhub.skills.validators import validate_skill_name

if TYPE_CHECKING:
    from skillhub.config import HubSettings
    from skillhub.hub.models import RemoteTreeEntry

logger = get_logger(__name__)

EXECUTABLE_PERMISSIONS = 0o755


def safe_join(base_dir: Path, relative: str) -> Path:
    """Resolve ``relative`` under ``base_dir`` and refuse anything that escapes it.

    Both sides are canonicalized first, so symlinks and ``..`` segments are
    judged by where they actually lead.
    """
    base = base_dir.resolve()
    target = (base / relative).resolve()
    if target == base:
        return target
    try:
        target.relative_to(base)
    except ValueError as exc:
        raise InvalidPathError(
            "Invalid file path",
            details={"base": str(base), "path": relative},
        ) from exc
    return target


def is_safe_relative_path(relative: str) -> bool:
    if not relative or relative.startswith(("/", "\\")):
        return False
    # "." and "./" normalise to no parts at all and would name the bundle directory.
    parts = PurePosixPath(relative.replace("\\", "/")).parts
    return bool(parts) and ".." not in parts


def bundle_entries(entries: list[RemoteTreeEntry], name: str) -> list[RemoteTreeEntry]:
    prefix = f"{SKILLS_ROOT}/{name}/"
    return [entry for entry in entries if entry.is_blob and entry.path.startswith(prefix)]


async def install_hub_skill(
    workspace_root: str | Path,
    name: str,
    *,
    overwrite: bool = False,
    repo: RepositoryRef | None = None,
    client: HubClient | None = None,
    settings: HubSettings | None = None,
) -> InstallResult:
    """Copy the files of hub skill ``name`` into ``<workspace>/.opencode/skills/<name>``.

    Existing files are left untouched unless ``overwrite`` is set. The file list
    always comes from the repository tree at ``repo.ref``, never from a cached
    catalog. Files written before a failure stay on disk.

    Raises:
        InvalidNameError: ``name`` is not a valid skill identifier.
        FetchFailedError: the tree listing or a file download failed.
        BundleNotFoundError: the tree has no files under ``skills/<name>/``.
        InvalidPathError: a tree entry resolved outside the install directory.
        InstallFailedError: ``SKILL.md`` is missing after the copy.
    """
    name = validate_skill_name(name.strip() if isinstance(name, str) else name)
    hub_settings = settings or (client.settings if client else get_settings().hub)
    repo = repo or RepositoryRef.from_settings(hub_settings)

    if client is None:
        async with HubClient(hub_settings) as owned_client:
            return await _install(owned_client, Path(workspace_root), name, overwrite, repo)
    return await _install(client, Path(workspace_root), name, overwrite, repo)


async def _install(
    client: HubClient,
    workspace_root: Path,
    name: str,
    overwrite: bool,
    repo: RepositoryRef,
) -> InstallResult:
    base_dir = project_skills_dir(workspace_root) / name
    manifest_path = base_dir / MANIFEST_FILENAME
    existed_before = manifest_path.exists()

    await asyncio.to_thread(base_dir.mkdir, parents=True, exist_ok=True)

    files = bundle_entries(await client.fetch_tree(repo), name)
    if not files:
        raise BundleNotFoundError(
            f"Hub skill not found: {name}",
            details={"name": name, "repo": repo.slug},
        )

    prefix = f"{SKILLS_ROOT}/{name}/"
    written = 0
    skipped = 0
    for entry in files:
        relative = entry.path[len(prefix) :]
        if not is_safe_relative_path(relative):
            logger.warning(
                "Skipping unsafe path in hub tree",
                data={"name": name, "path": entry.path},
            )
            continue

        destination = safe_join(base_dir, relative)
        if not overwrite and destination.exists():
            skipped += 1
            continue

        content = await client.fetch_file(repo, entry.path)
        await asyncio.to_thread(_write_file, destination, content, entry.is_executable)
        written += 1

    if not manifest_path.exists():
        raise InstallFailedError(
            f"Hub skill install failed (missing {MANIFEST_FILENAME}): {name}",
            details={"name": name, "path": str(base_dir), "written": written},
        )

    result = InstallResult(
        name=name,
        path=str(base_dir.resolve()),
        action="updated" if existed_before else "added",
        written=written,
        skipped=skipped,
    )
    logger.info("Installed hub skill", data=result.to_dict())
    return result


def _write_file(destination: Path, content: bytes, executable: bool) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(content)
    if executable:
        try:
            os.chmod(destination, EXECUTABLE_PERMISSIONS)
        except OSError as exc:
            logger.debug(
                "Could not mark hub file executable",
                data={"path": str(destination), "error": str(exc)},
            )
