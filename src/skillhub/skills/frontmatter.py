"""YAML frontmatter parsing for SKILL.md manifests."""

from __future__ import annotations

import re
from typing import Any

import yaml

_FRONTMATTER_RE = re.compile(r"^---\r?\n(.*?)\r?\n---(?:\r?\n|$)", re.DOTALL)
_HEADING_RE = re.compile(r"^#{1,6}\s+")
_WHEN_TO_USE_RE = re.compile(r"^when to use$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^[-*+]\s+")
_NUMBERED_RE = re.compile(r"^\d+[.)]\s+")


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split ``content`` into ``(metadata, body)``.

    Documents without a leading ``---`` block return empty metadata and the
    full text as body. Malformed YAML raises ``yaml.YAMLError``; a block that
    parses to something other than a mapping yields empty metadata.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content

    data = yaml.safe_load(match.group(1))
    body = content[match.end() :]
    if not isinstance(data, dict):
        return {}, body
    return data, body


def extract_trigger_from_body(body: str) -> str:
    """Return the first line under a ``When to use`` heading, minus list markers."""
    in_when_section = False
    for line in body.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue

        if _HEADING_RE.match(trimmed):
            heading = _HEADING_RE.sub("", trimmed).strip()
            in_when_section = _WHEN_TO_USE_RE.match(heading) is not None
            continue

        if not in_when_section:
            continue

        cleaned = _NUMBERED_RE.sub("", _BULLET_RE.sub("", trimmed)).strip()
        if cleaned:
            return cleaned
    return ""


def resolve_trigger(data: dict[str, Any], body: str) -> str:
    trigger = data.get("trigger")
    if not isinstance(trigger, str):
        trigger = data.get("when")
    if not isinstance(trigger, str):
        trigger = extract_trigger_from_body(body)
    return trigger.strip()
