"""Structured logger used across skillhub.

Call sites pass structured context through ``data=`` rather than formatting it
into the message, e.g. ``logger.warning("Skipping entry", data={"path": p})``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from skillhub.config import LoggerSettings

ROOT_NAMESPACE = "skillhub"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Logger:
    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self._logger = logging.getLogger(namespace)

    def _emit(
        self,
        level: int,
        message: str,
        data: Mapping[str, Any] | None,
        exc_info: Any = None,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, exc_info=exc_info, extra={"data": dict(data or {})})

    def debug(self, message: str, *, data: Mapping[str, Any] | None = None) -> None:
        self._emit(logging.DEBUG, message, data)

    def info(self, message: str, *, data: Mapping[str, Any] | None = None) -> None:
        self._emit(logging.INFO, message, data)

    def warning(self, message: str, *, data: Mapping[str, Any] | None = None) -> None:
        self._emit(logging.WARNING, message, data)

    def error(
        self,
        message: str,
        *,
        data: Mapping[str, Any] | None = None,
        exc_info: Any = None,
    ) -> None:
        self._emit(logging.ERROR, message, data, exc_info=exc_info)


class DataFormatter(logging.Formatter):
    """Append the ``data`` payload of a record as compact JSON."""

    def __init__(self, *, show_data: bool = True) -> None:
        super().__init__("%(name)s: %(message)s")
        self.show_data = show_data

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        data = getattr(record, "data", None)
        if self.show_data and data:
            text = f"{text} {json.dumps(data, default=str, ensure_ascii=False)}"
        return text


def get_logger(namespace: str) -> Logger:
    if namespace != ROOT_NAMESPACE and not namespace.startswith(f"{ROOT_NAMESPACE}."):
        namespace = f"{ROOT_NAMESPACE}.{namespace}"
    return Logger(namespace)


def configure_logging(settings: LoggerSettings) -> None:
    """Install a rich console handler on the ``skillhub`` logger.

    Only entry points (the CLI) call this; library code leaves handler setup to
    the host application.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    root = logging.getLogger(ROOT_NAMESPACE)
    root.setLevel(_LEVELS.get(settings.level, logging.WARNING))
    for handler in list(root.handlers):
        if getattr(handler, "_skillhub_handler", False):
            root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(DataFormatter(show_data=settings.show_data))
    handler._skillhub_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.propagate = False
