"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas en `fetch --summary` y `doctor`.

Todo se pinta en stderr: stdout es solo para el documento.
"""

from __future__ import annotations

from rich.table import Table

from meteofetch.core.domain.models import RequestConfig
from meteofetch.core.services.weather_pipeline import PipelineResult


def mask_username(username: str) -> str:
    """Muestra solo el primer carácter del usuario."""

    if not username:
        return "(missing)"
    return username[0] + "*" * (len(username) - 1)


def build_request_table(config: RequestConfig, result: PipelineResult | None = None) -> Table:
    """Tabla con los parámetros de la petición (nunca incluye la contraseña)."""

    table = Table(title="Meteomatics request")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("User", mask_username(config.credentials.username))
    table.add_row("Datetime", config.datetime)
    table.add_row("Parameters", config.parameters)
    table.add_row("Location", config.location)
    table.add_row("Format", config.format)
    if result is not None:
        table.add_row("URL", result.url)
        table.add_row("Bytes received", str(result.bytes_received))
    return table


def build_doctor_table() -> Table:
    table = Table(title="meteofetch doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
