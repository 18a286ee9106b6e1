from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from skillhub.config import HubSettings

InstallAction = Literal["added", "updated"]

EXECUTABLE_MODE = "100755"
REGULAR_FILE_MODE = "100644"


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    repo: str
    ref: str

    @classmethod
    def from_settings(cls, settings: HubSettings) -> RepositoryRef:
        return cls(owner=settings.owner, repo=settings.repo, ref=settings.ref)

    @classmethod
    def resolve(
        cls,
        *,
        owner: str | None = None,
        repo: str | None = None,
        ref: str | None = None,
        default: RepositoryRef,
    ) -> RepositoryRef:
        """Apply partial overrides; blank values fall back to ``default``."""
        return cls(
            owner=(owner or "").strip() or default.owner,
            repo=(repo or "").strip() or default.repo,
            ref=(ref or "").strip() or default.ref,
        )

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}@{self.ref}"


@dataclass(frozen=True)
class CatalogSource:
    owner: str
    repo: str
    ref: str
    path: str


@dataclass(frozen=True)
class CatalogItem:
    name: str
    description: str
    source: CatalogSource
    trigger: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.trigger:
            payload["trigger"] = self.trigger
        payload["source"] = {
            "owner": self.source.owner,
            "repo": self.source.repo,
            "ref": self.source.ref,
            "path": self.source.path,
        }
        return payload


@dataclass(frozen=True)
class InstallResult:
    name: str
    path: str
    action: InstallAction
    written: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "action": self.action,
            "written": self.written,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class CatalogSnapshot:
    fetched_at: float
    items: tuple[CatalogItem, ...] = ()


class ContentsEntryModel(BaseModel):
    """One element of a GitHub ``contents`` directory listing."""

    name: str
    type: str

    model_config = ConfigDict(extra="ignore")


class RemoteTreeEntry(BaseModel):
    """One element of a recursive GitHub ``git/trees`` listing."""

    path: str
    mode: str = REGULAR_FILE_MODE
    type: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("mode", mode="before")
    @classmethod
    def _default_mode(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return REGULAR_FILE_MODE
        return value

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"

    @property
    def is_executable(self) -> bool:
        return self.mode == EXECUTABLE_MODE
