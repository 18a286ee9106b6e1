"""Remote skill hub: catalog listing and bundle installation."""

from skillhub.hub.catalog import CatalogCache, list_hub_skills
from skillhub.hub.client import HubClient
from skillhub.hub.installer import install_hub_skill

__all__ = [
    "CatalogCache",
    "HubClient",
    "install_hub_skill",
    "list_hub_skills",
]
