from __future__ import annotations

import re

from skillhub.core.exceptions import InvalidDescriptionError, InvalidNameError

SKILL_NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024

# Lowercase kebab-case: no separators at either end, no doubled separators.
# This also excludes "/", "\\", "." and therefore any traversal token.
_SKILL_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def is_valid_skill_name(name: object) -> bool:
    return (
        isinstance(name, str)
        and 0 < len(name) <= SKILL_NAME_MAX_LENGTH
        and _SKILL_NAME_RE.fullmatch(name) is not None
    )


def validate_skill_name(name: object) -> str:
    """Return ``name`` unchanged if it is a valid bundle identifier."""
    if not is_valid_skill_name(name):
        raise InvalidNameError(
            f"Skill name must be kebab-case (1-{SKILL_NAME_MAX_LENGTH} chars)",
            details={"name": name},
        )
    return name  # type: ignore[return-value]


def validate_description(description: object) -> str:
    if (
        not isinstance(description, str)
        or not description
        or len(description) > DESCRIPTION_MAX_LENGTH
    ):
        raise InvalidDescriptionError(
            f"Description must be 1-{DESCRIPTION_MAX_LENGTH} characters",
        )
    return description
