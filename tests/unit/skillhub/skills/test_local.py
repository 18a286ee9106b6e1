from __future__ import annotations

from pathlib import Path

from skillhub.skills.local import (
    find_workspace_roots,
    global_skill_roots,
    list_local_skills,
    project_skills_dir,
)


def _write_skill(
    directory: Path,
    name: str,
    description: str = "Does things",
    *,
    declared: str | None = None,
    body: str = "",
) -> Path:
    skill_dir = directory / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    manifest = skill_dir / "SKILL.md"
    manifest.write_text(
        f"---\nname: {declared or name}\ndescription: {description}\n---\n{body}",
        encoding="utf-8",
    )
    return manifest


def test_project_skills_dir_is_under_opencode(tmp_path: Path) -> None:
    assert project_skills_dir(tmp_path) == tmp_path / ".opencode" / "skills"
    assert project_skills_dir(str(tmp_path)) == tmp_path / ".opencode" / "skills"


def test_list_local_skills_reads_opencode_and_claude_directories(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    _write_skill(project_skills_dir(tmp_path), "alpha", body="## When to use\n- for alpha\n")
    _write_skill(tmp_path / ".claude" / "skills", "beta")

    items = list_local_skills(tmp_path)

    assert [(item.name, item.scope) for item in items] == [
        ("alpha", "project"),
        ("beta", "project"),
    ]
    assert items[0].trigger == "for alpha"
    assert items[0].path == (project_skills_dir(tmp_path) / "alpha" / "SKILL.md").resolve()
    assert items[0].to_dict()["trigger"] == "for alpha"
    assert "trigger" not in items[1].to_dict()


def test_list_local_skills_descends_into_domain_folders(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    _write_skill(project_skills_dir(tmp_path) / "documents", "pdf-tools")

    items = list_local_skills(tmp_path)

    assert [item.name for item in items] == ["pdf-tools"]


def test_list_local_skills_skips_invalid_entries(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    skills_dir = project_skills_dir(tmp_path)
    _write_skill(skills_dir, "good")
    _write_skill(skills_dir, "renamed", declared="other-name")
    _write_skill(skills_dir, "Bad_Name")
    _write_skill(skills_dir, "too-long", description="d" * 1025)
    _write_skill(skills_dir, "no-description", description="''")
    broken = skills_dir / "broken"
    broken.mkdir()
    (broken / "SKILL.md").write_text("---\nname: [broken\n---\n", encoding="utf-8")
    (skills_dir / "stray-file.md").write_text("not a skill", encoding="utf-8")

    assert [item.name for item in list_local_skills(tmp_path)] == ["good"]


def test_list_local_skills_walks_up_to_git_root_and_dedupes(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    nested = repo_root / "packages" / "app"
    nested.mkdir(parents=True)
    (repo_root / ".git").mkdir()
    _write_skill(project_skills_dir(nested), "shared", description="nested copy")
    _write_skill(project_skills_dir(repo_root), "shared", description="root copy")
    _write_skill(project_skills_dir(repo_root), "root-only")
    _write_skill(project_skills_dir(tmp_path), "above-git-root")

    items = list_local_skills(nested)

    assert [item.name for item in items] == ["shared", "root-only"]
    assert items[0].description == "nested copy"


def test_find_workspace_roots_stops_at_git_checkout(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    roots = find_workspace_roots(nested)

    assert roots == [nested.resolve(), (tmp_path / "a").resolve(), tmp_path.resolve()]


def test_list_local_skills_includes_global_skills_when_requested(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    (workspace / ".git").mkdir()
    home = tmp_path / "home"
    config_root, claude_root = global_skill_roots(home)
    _write_skill(config_root, "global-one")
    _write_skill(claude_root, "global-two")
    _write_skill(project_skills_dir(workspace), "global-one", description="project wins")

    assert [item.name for item in list_local_skills(workspace, home=home)] == ["global-one"]

    items = list_local_skills(workspace, include_global=True, home=home)

    assert [(item.name, item.scope) for item in items] == [
        ("global-one", "project"),
        ("global-two", "global"),
    ]
    assert items[0].description == "project wins"
