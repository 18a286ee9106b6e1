"""Error taxonomy for the skill hub engine.

Every error carries a ``kind`` (stable machine-readable key) and an HTTP-style
``status`` hint so callers that expose the engine over an API can map errors
without inspecting message text.
"""

from __future__ import annotations

from typing import Any

BODY_SNIPPET_LIMIT = 500


class SkillHubError(Exception):
    """Base class for all skill hub errors."""

    kind = "skillhub_error"
    status = 500

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "details": self.details}


class FetchFailedError(SkillHubError):
    """A remote listing, tree, manifest or file request did not succeed."""

    kind = "fetch_failed"
    status = 502

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        snippet = (body or "")[:BODY_SNIPPET_LIMIT]
        super().__init__(
            message,
            details={"url": url, "status_code": status_code, "body": snippet},
        )
        self.url = url
        self.status_code = status_code
        self.body = snippet


class InvalidNameError(SkillHubError):
    kind = "invalid_name"
    status = 400


class InvalidDescriptionError(SkillHubError):
    kind = "invalid_description"
    status = 422


class InvalidPathError(SkillHubError):
    """A resolved install destination escaped the bundle directory."""

    kind = "invalid_path"
    status = 400


class BundleNotFoundError(SkillHubError):
    kind = "bundle_not_found"
    status = 404


class InstallFailedError(SkillHubError):
    """The copy phase finished without producing the canonical SKILL.md."""

    kind = "install_failed"
    status = 502
