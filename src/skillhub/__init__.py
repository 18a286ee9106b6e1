"""Skill catalog and installer for hub-hosted skill bundles."""

__version__ = "0.3.0"

from skillhub.core.exceptions import (  # noqa: E402
    BundleNotFoundError,
    FetchFailedError,
    InstallFailedError,
    InvalidNameError,
    InvalidPathError,
    SkillHubError,
)
from skillhub.hub.catalog import CatalogCache, list_hub_skills  # noqa: E402
from skillhub.hub.installer import install_hub_skill  # noqa: E402
from skillhub.hub.models import CatalogItem, InstallResult, RepositoryRef  # noqa: E402

__all__ = [
    "BundleNotFoundError",
    "CatalogCache",
    "CatalogItem",
    "FetchFailedError",
    "InstallFailedError",
    "InstallResult",
    "InvalidNameError",
    "InvalidPathError",
    "RepositoryRef",
    "SkillHubError",
    "__version__",
    "install_hub_skill",
    "list_hub_skills",
]
