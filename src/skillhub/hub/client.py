"""HTTP access to the remote skill repository (GitHub API and raw mirror)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from skillhub.config import get_settings
from skillhub.core.exceptions import FetchFailedError
from skillhub.core.logging.logger import get_logger
from skillhub.hub.models import ContentsEntryModel, RemoteTreeEntry

if TYPE_CHECKING:
    from types import TracebackType

    from skillhub.config import HubSettings
    from skillhub.hub.models import RepositoryRef

logger = get_logger(__name__)

SKILLS_ROOT = "skills"
MANIFEST_FILENAME = "SKILL.md"

GITHUB_JSON_ACCEPT = "application/vnd.github+json"
TEXT_ACCEPT = "text/plain"


def _segment(value: str) -> str:
    return quote(value, safe="")


class HubClient:
    """Async client for the hub repository endpoints.

    The client owns its ``httpx.AsyncClient`` unless one is passed in; use it as
    an async context manager or call :meth:`aclose` when done.
    """

    def __init__(
        self,
        settings: HubSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings().hub
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self.settings.timeout_seconds,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> HubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def api_url(self, repo: RepositoryRef, *segments: str) -> str:
        base = f"{self.settings.api_base_url}/repos/{_segment(repo.owner)}/{_segment(repo.repo)}"
        if segments:
            return f"{base}/{'/'.join(segments)}"
        return base

    def raw_url(self, repo: RepositoryRef, path: str) -> str:
        return (
            f"{self.settings.raw_base_url}/{_segment(repo.owner)}/{_segment(repo.repo)}"
            f"/{_segment(repo.ref)}/{quote(path, safe='/')}"
        )

    def _headers(self, accept: str | None, *, authorize: bool) -> dict[str, str]:
        headers = {"User-Agent": self.settings.user_agent}
        if accept:
            headers["Accept"] = accept
        token = self.settings.resolved_token() if authorize else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get(
        self,
        url: str,
        *,
        accept: str | None = None,
        params: dict[str, str] | None = None,
        authorize: bool = False,
    ) -> httpx.Response:
        try:
            response = await self._http.get(
                url,
                params=params,
                headers=self._headers(accept, authorize=authorize),
            )
        except httpx.HTTPError as exc:
            raise FetchFailedError(
                f"Failed to fetch hub data: {exc}",
                url=url,
            ) from exc

        if not response.is_success:
            body = response.text
            raise FetchFailedError(
                f"Failed to fetch hub data ({response.status_code}): {body[:200] or url}",
                url=str(response.url),
                status_code=response.status_code,
                body=body,
            )
        return response

    async def get_json(self, url: str, *, params: dict[str, str] | None = None) -> Any:
        response = await self._get(url, accept=GITHUB_JSON_ACCEPT, params=params, authorize=True)
        try:
            return response.json()
        except ValueError as exc:
            raise FetchFailedError(
                "Hub returned a response that is not valid JSON",
                url=str(response.url),
                status_code=response.status_code,
                body=response.text,
            ) from exc

    async def get_text(self, url: str) -> str:
        response = await self._get(url, accept=TEXT_ACCEPT)
        return response.text

    async def get_bytes(self, url: str) -> bytes:
        response = await self._get(url)
        return response.content

    async def list_skill_directories(self, repo: RepositoryRef) -> list[str]:
        """Names of the immediate subdirectories of ``skills/`` at ``repo.ref``."""
        payload = await self.get_json(
            self.api_url(repo, "contents", SKILLS_ROOT),
            params={"ref": repo.ref},
        )
        if not isinstance(payload, list):
            return []

        names: list[str] = []
        for raw_entry in payload:
            try:
                entry = ContentsEntryModel.model_validate(raw_entry)
            except ValidationError:
                continue
            if entry.type == "dir":
                names.append(entry.name)
        return names

    async def fetch_manifest(self, repo: RepositoryRef, name: str) -> str:
        return await self.get_text(self.raw_url(repo, f"{SKILLS_ROOT}/{name}/{MANIFEST_FILENAME}"))

    async def fetch_tree(self, repo: RepositoryRef) -> list[RemoteTreeEntry]:
        """Every object in the repository tree at ``repo.ref``."""
        payload = await self.get_json(
            self.api_url(repo, "git", "trees", _segment(repo.ref)),
            params={"recursive": "1"},
        )
        raw_entries = payload.get("tree") if isinstance(payload, dict) else None
        if not isinstance(raw_entries, list):
            return []
        if payload.get("truncated"):
            logger.warning(
                "Hub tree listing was truncated by the server",
                data={"repo": repo.slug},
            )

        entries: list[RemoteTreeEntry] = []
        for raw_entry in raw_entries:
            try:
                entries.append(RemoteTreeEntry.model_validate(raw_entry))
            except ValidationError:
                continue
        return entries

    async def fetch_file(self, repo: RepositoryRef, path: str) -> bytes:
        return await self.get_bytes(self.raw_url(repo, path))
