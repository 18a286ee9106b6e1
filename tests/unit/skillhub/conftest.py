from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

import skillhub.config as config_module
from skillhub.config import HubSettings, Settings, update_global_settings
from skillhub.hub.catalog import reset_catalog_cache
from skillhub.hub.client import HubClient
from skillhub.hub.models import RepositoryRef

API_BASE = "https://api.hub.test"
RAW_BASE = "https://raw.hub.test"


def skill_manifest(name: str, description: str = "Does things", **extra: str) -> str:
    lines = ["---", f"name: {name}", f"description: {description}"]
    lines.extend(f"{key}: {value}" for key, value in extra.items())
    lines.extend(["---", "", f"# {name}", ""])
    return "\n".join(lines)


@dataclass
class FakeHub:
    """In-memory GitHub repository served through ``httpx.MockTransport``."""

    owner: str = "acme"
    repo: str = "hub"
    ref: str = "main"
    files: dict[str, bytes] = field(default_factory=dict)
    modes: dict[str, str] = field(default_factory=dict)
    extra_tree_entries: list[dict[str, Any]] = field(default_factory=list)
    extra_listing_entries: list[dict[str, Any]] = field(default_factory=list)
    failures: dict[str, int] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    @property
    def repository(self) -> RepositoryRef:
        return RepositoryRef(owner=self.owner, repo=self.repo, ref=self.ref)

    @property
    def settings(self) -> HubSettings:
        return HubSettings(
            owner=self.owner,
            repo=self.repo,
            ref=self.ref,
            api_base_url=API_BASE,
            raw_base_url=RAW_BASE,
            user_agent="skillhub-tests",
            github_token=None,
        )

    def add_file(self, path: str, content: str | bytes, *, mode: str = "100644") -> None:
        self.files[path] = content.encode("utf-8") if isinstance(content, str) else content
        self.modes[path] = mode

    def add_skill(self, name: str, manifest: str | None = None, **files: str) -> None:
        self.add_file(f"skills/{name}/SKILL.md", manifest or skill_manifest(name))
        for relative, content in files.items():
            self.add_file(f"skills/{name}/{relative}", content)

    def fail(self, path: str, status: int = 500) -> None:
        """Make requests whose URL path ends with ``path`` return ``status``."""
        self.failures[path] = status

    def requested_paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def client(self, settings: HubSettings | None = None) -> HubClient:
        return HubClient(settings or self.settings, transport=httpx.MockTransport(self.handler))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        for suffix, status in self.failures.items():
            if path.endswith(suffix):
                return httpx.Response(status, text=f"upstream error for {suffix}")

        api_prefix = f"/repos/{self.owner}/{self.repo}"
        if request.url.host == httpx.URL(API_BASE).host:
            if path == f"{api_prefix}/contents/skills":
                return httpx.Response(200, json=self._listing())
            if path == f"{api_prefix}/git/trees/{self.ref}":
                return httpx.Response(200, json={"sha": "abc", "tree": self._tree()})
            return httpx.Response(404, json={"message": "Not Found"})

        raw_prefix = f"/{self.owner}/{self.repo}/{self.ref}/"
        if path.startswith(raw_prefix):
            content = self.files.get(path[len(raw_prefix) :])
            if content is not None:
                return httpx.Response(200, content=content)
        return httpx.Response(404, text="404: Not Found")

    def _listing(self) -> list[dict[str, Any]]:
        names = sorted(
            {path.split("/")[1] for path in self.files if path.startswith("skills/")}
        )
        entries = [{"name": name, "type": "dir", "path": f"skills/{name}"} for name in names]
        return entries + list(self.extra_listing_entries)

    def _tree(self) -> list[dict[str, Any]]:
        entries: list[dict[str, Any]] = []
        directories: set[str] = set()
        for path in self.files:
            parts = path.split("/")
            for depth in range(1, len(parts)):
                directories.add("/".join(parts[:depth]))
        for directory in sorted(directories):
            entries.append({"path": directory, "mode": "040000", "type": "tree"})
        for path in self.files:
            entries.append({"path": path, "mode": self.modes.get(path, "100644"), "type": "blob"})
        return entries + list(self.extra_tree_entries)


@pytest.fixture
def fake_hub() -> FakeHub:
    return FakeHub()


@pytest.fixture(autouse=True)
def isolated_settings():
    previous_settings = config_module._settings
    settings = Settings()
    update_global_settings(settings)
    reset_catalog_cache()
    try:
        yield settings
    finally:
        update_global_settings(previous_settings)
        reset_catalog_cache()
