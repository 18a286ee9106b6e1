"""Catalog of installable skills published in the hub repository."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from skillhub.config import get_settings
from skillhub.core.logging.logger import get_logger
from skillhub.hub.client import SKILLS_ROOT, HubClient
from skillhub.hub.models import CatalogItem, CatalogSnapshot, CatalogSource, RepositoryRef
from skillhub.skills.frontmatter import parse_frontmatter, resolve_trigger
from skillhub.skills.validators import DESCRIPTION_MAX_LENGTH, is_valid_skill_name
from skillhub.utils.async_utils import run_bounded

if TYPE_CHECKING:
    from collections.abc import Callable

    from skillhub.config import HubSettings

logger = get_logger(__name__)

DEFAULT_CATALOG_TTL_SECONDS = 300.0
CATALOG_CONCURRENCY = 6


class CatalogCache:
    """Catalog snapshots keyed by repository, each valid for ``ttl_seconds``.

    Snapshots are never mutated: a refresh swaps in a new mapping with a single
    assignment, so readers see either the old or the new snapshot.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CATALOG_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshots: dict[RepositoryRef, CatalogSnapshot] = {}

    def now(self) -> float:
        return self._clock()

    def get(self, repo: RepositoryRef, *, now: float | None = None) -> list[CatalogItem] | None:
        snapshot = self._snapshots.get(repo)
        if snapshot is None:
            return None
        current = self.now() if now is None else now
        if current - snapshot.fetched_at < self.ttl_seconds:
            return list(snapshot.items)
        return None

    def store(self, repo: RepositoryRef, items: list[CatalogItem], *, fetched_at: float) -> None:
        snapshots = dict(self._snapshots)
        snapshots[repo] = CatalogSnapshot(fetched_at=fetched_at, items=tuple(items))
        self._snapshots = snapshots

    def clear(self) -> None:
        self._snapshots = {}


_catalog_cache: CatalogCache | None = None


def get_catalog_cache(settings: HubSettings | None = None) -> CatalogCache:
    """Process-wide cache, created on first use.

    The TTL follows the current settings, so reloading configuration with a
    different ``catalog_ttl_seconds`` applies to snapshots already stored.
    """
    global _catalog_cache
    hub_settings = settings or get_settings().hub
    if _catalog_cache is None:
        _catalog_cache = CatalogCache(hub_settings.catalog_ttl_seconds)
    elif _catalog_cache.ttl_seconds != hub_settings.catalog_ttl_seconds:
        _catalog_cache.ttl_seconds = hub_settings.catalog_ttl_seconds
    return _catalog_cache


def reset_catalog_cache() -> None:
    global _catalog_cache
    _catalog_cache = None


async def list_hub_skills(
    repo: RepositoryRef | None = None,
    *,
    client: HubClient | None = None,
    cache: CatalogCache | None = None,
    settings: HubSettings | None = None,
) -> list[CatalogItem]:
    """Return the validated, name-sorted catalog for ``repo``.

    A failure listing ``skills/`` propagates as ``FetchFailedError``. Bundles
    whose manifest cannot be fetched or parsed, whose directory name is not a
    valid identifier, or whose declared name differs from the directory name
    are left out.
    """
    hub_settings = settings or (client.settings if client else get_settings().hub)
    repo = repo or RepositoryRef.from_settings(hub_settings)
    cache = cache or get_catalog_cache(hub_settings)

    started = cache.now()
    cached = cache.get(repo, now=started)
    if cached is not None:
        logger.debug("Hub catalog cache hit", data={"repo": repo.slug, "items": len(cached)})
        return cached

    if client is None:
        async with HubClient(hub_settings) as owned_client:
            items = await _build_catalog(owned_client, repo, hub_settings.catalog_concurrency)
    else:
        items = await _build_catalog(client, repo, hub_settings.catalog_concurrency)

    cache.store(repo, items, fetched_at=started)
    logger.info("Hub catalog refreshed", data={"repo": repo.slug, "items": len(items)})
    return items


async def _build_catalog(
    client: HubClient,
    repo: RepositoryRef,
    concurrency: int = CATALOG_CONCURRENCY,
) -> list[CatalogItem]:
    directories = await client.list_skill_directories(repo)

    async def load(directory: str, _index: int) -> CatalogItem | None:
        try:
            return await _load_catalog_item(client, repo, directory)
        except Exception as exc:  # noqa: BLE001
            logger.debug(
                "Excluding hub skill from catalog",
                data={"repo": repo.slug, "directory": directory, "error": str(exc)},
            )
            return None

    loaded = await run_bounded(directories, concurrency, load)
    items = [item for item in loaded if item is not None]
    items.sort(key=lambda item: item.name)
    return items


async def _load_catalog_item(
    client: HubClient,
    repo: RepositoryRef,
    directory: str,
) -> CatalogItem | None:
    skill_name = directory.strip()
    if not is_valid_skill_name(skill_name):
        logger.debug("Ignoring invalid hub skill directory", data={"directory": directory})
        return None

    manifest = await client.fetch_manifest(repo, skill_name)
    data, body = parse_frontmatter(manifest)

    declared = data.get("name")
    name = declared if isinstance(declared, str) else skill_name
    if name != skill_name:
        logger.debug(
            "Hub skill name does not match its directory",
            data={"directory": skill_name, "declared": name},
        )
        return None

    description_raw = data.get("description")
    description = " ".join(description_raw.split()) if isinstance(description_raw, str) else ""

    return CatalogItem(
        name=name,
        description=description[:DESCRIPTION_MAX_LENGTH],
        trigger=resolve_trigger(data, body) or None,
        source=CatalogSource(
            owner=repo.owner,
            repo=repo.repo,
            ref=repo.ref,
            path=f"{SKILLS_ROOT}/{skill_name}",
        ),
    )
