"""Configuración de logging.

Por qué a stderr:
- stdout transporta únicamente el documento redactado; cualquier diagnóstico
  (incluido el logging) va a stderr para no romper pipelines (`| jq`).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str | int = "WARNING") -> None:
    """Inicializa el logging raíz con un `RichHandler` sobre stderr."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, markup=False)],
        force=True,
    )
    # httpx/httpcore son muy verbosos en DEBUG.
    logging.getLogger("httpcore").setLevel(max(level, logging.INFO))
