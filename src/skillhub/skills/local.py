"""Skills already present on disk for a workspace."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml

from skillhub.core.exceptions import SkillHubError
from skillhub.core.logging.logger import get_logger
from skillhub.skills.frontmatter import parse_frontmatter, resolve_trigger
from skillhub.skills.validators import validate_description, validate_skill_name

logger = get_logger(__name__)

SKILL_FILENAME = "SKILL.md"

SkillScope = Literal["project", "global"]


@dataclass(frozen=True)
class LocalSkill:
    name: str
    description: str
    path: Path
    scope: SkillScope
    trigger: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "name": self.name,
            "description": self.description,
            "path": str(self.path),
            "scope": self.scope,
        }
        if self.trigger:
            payload["trigger"] = self.trigger
        return payload


def project_skills_dir(workspace_root: str | Path) -> Path:
    """Directory that hub installs write into for a workspace."""
    return Path(workspace_root) / ".opencode" / "skills"


def global_skill_roots(home: Path | None = None) -> list[Path]:
    base = home or Path.home()
    return [base / ".config" / "opencode" / "skills", base / ".claude" / "skills"]


def find_workspace_roots(workspace_root: str | Path) -> list[Path]:
    """Return the workspace and its parents up to the nearest git checkout."""
    roots: list[Path] = []
    current = Path(workspace_root).resolve()
    while True:
        roots.append(current)
        if (current / ".git").exists():
            break
        parent = current.parent
        if parent == current:
            break
        current = parent
    return roots


def list_local_skills(
    workspace_root: str | Path,
    *,
    include_global: bool = False,
    home: Path | None = None,
) -> list[LocalSkill]:
    items: list[LocalSkill] = []
    for root in find_workspace_roots(workspace_root):
        items.extend(_list_skills_in_dir(root / ".opencode" / "skills", "project"))
        items.extend(_list_skills_in_dir(root / ".claude" / "skills", "project"))

    if include_global:
        for directory in global_skill_roots(home):
            items.extend(_list_skills_in_dir(directory, "global"))

    seen: set[str] = set()
    unique: list[LocalSkill] = []
    for item in items:
        if item.name in seen:
            continue
        seen.add(item.name)
        unique.append(item)
    return unique


def _list_skills_in_dir(directory: Path, scope: SkillScope) -> list[LocalSkill]:
    if not directory.is_dir():
        return []

    items: list[LocalSkill] = []
    for entry in sorted(directory.iterdir()):
        if not entry.is_dir():
            continue
        skill_file = entry / SKILL_FILENAME
        if skill_file.is_file():
            item = _parse_skill_entry(skill_file, entry.name, scope)
            if item:
                items.append(item)
            continue

        # Domain folder: <dir>/<domain>/<name>/SKILL.md
        try:
            sub_entries = sorted(entry.iterdir())
        except OSError:
            continue
        for sub_entry in sub_entries:
            sub_skill_file = sub_entry / SKILL_FILENAME
            if not sub_entry.is_dir() or not sub_skill_file.is_file():
                continue
            item = _parse_skill_entry(sub_skill_file, sub_entry.name, scope)
            if item:
                items.append(item)
    return items


def _parse_skill_entry(skill_file: Path, entry_name: str, scope: SkillScope) -> LocalSkill | None:
    try:
        data, body = parse_frontmatter(skill_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.debug("Unreadable local skill", data={"path": str(skill_file), "error": str(exc)})
        return None

    name = data.get("name") if isinstance(data.get("name"), str) else entry_name
    description = data.get("description") if isinstance(data.get("description"), str) else ""
    try:
        validate_skill_name(name)
        validate_description(description)
    except SkillHubError as exc:
        logger.debug("Invalid local skill", data={"path": str(skill_file), "error": exc.kind})
        return None
    if name != entry_name:
        return None

    return LocalSkill(
        name=name,
        description=description,
        path=skill_file,
        scope=scope,
        trigger=resolve_trigger(data, body) or None,
    )
