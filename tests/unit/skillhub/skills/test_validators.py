from __future__ import annotations

import pytest

from skillhub.core.exceptions import InvalidDescriptionError, InvalidNameError
from skillhub.skills.validators import (
    is_valid_skill_name,
    validate_description,
    validate_skill_name,
)


@pytest.mark.parametrize("name", ["pdf", "pdf-tools", "a1-b2-c3", "x" * 64])
def test_validate_skill_name_accepts_kebab_case(name: str) -> None:
    assert validate_skill_name(name) == name
    assert is_valid_skill_name(name)


@pytest.mark.parametrize(
    "name",
    [
        "",
        "x" * 65,
        "PDF",
        "pdf_tools",
        "-pdf",
        "pdf-",
        "pdf--tools",
        "..",
        "../etc",
        "a/b",
        "a\\b",
        "pdf.tools",
        "pdf\n",
        " pdf",
        None,
        42,
    ],
)
def test_validate_skill_name_rejects_malformed_and_traversal_names(name: object) -> None:
    assert not is_valid_skill_name(name)
    with pytest.raises(InvalidNameError) as excinfo:
        validate_skill_name(name)
    assert excinfo.value.kind == "invalid_name"
    assert excinfo.value.status == 400


def test_validate_description_bounds() -> None:
    assert validate_description("ok") == "ok"
    assert validate_description("d" * 1024) == "d" * 1024

    for value in ("", "d" * 1025, None):
        with pytest.raises(InvalidDescriptionError):
            validate_description(value)
