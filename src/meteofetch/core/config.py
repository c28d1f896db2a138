"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP) y servicios lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from meteofetch.core.buffer import DEFAULT_INITIAL_CAPACITY, DEFAULT_MAX_SIZE
from meteofetch.core.domain.models import Credentials, RequestConfig

API_BASE_URL = "https://api.meteomatics.com"
DEFAULT_DATETIME = "2024-10-23T00:00:00Z"
# Ver la documentación de la API: t_2m:C = temperatura a 2 m en Celsius.
DEFAULT_PARAMETERS = "t_2m:C,precip_1h:mm,wind_speed_10m:ms"
# San Francisco (lat,lon).
DEFAULT_LOCATION = "37.7749,-122.4194"
DEFAULT_FORMAT = "json"

ENV_PREFIX = "METEOMATICS_"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "meteofetch"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "meteofetch"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "meteofetch"
    return Path.home() / ".config" / "meteofetch"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    El fichero queda con permisos 0600 porque guarda credenciales.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# meteofetch user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    if not sys.platform.startswith("win"):
        env_path.chmod(0o600)
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.

    Las credenciales no tienen default útil: si faltan, el pipeline falla en
    `validate_config` antes de tocar la red.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    username: str | None = Field(
        default=None,
        description="Usuario de la API (HTTP Basic).",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Contraseña de la API (HTTP Basic).",
    )

    base_url: str = Field(
        default=API_BASE_URL,
        min_length=8,
        description="Host base de la API (esquema incluido, sin '/' final).",
    )
    datetime: str = Field(
        default=DEFAULT_DATETIME,
        min_length=1,
        description="Segmento de fecha/hora por defecto.",
    )
    parameters: str = Field(
        default=DEFAULT_PARAMETERS,
        min_length=1,
        description="Parámetros por defecto (separados por comas).",
    )
    location: str = Field(
        default=DEFAULT_LOCATION,
        min_length=1,
        description="Ubicación por defecto 'lat,lon'.",
    )
    format: str = Field(
        default=DEFAULT_FORMAT,
        min_length=1,
        description="Formato de respuesta por defecto.",
    )

    initial_buffer_bytes: int = Field(
        default=DEFAULT_INITIAL_CAPACITY,
        gt=0,
        description="Capacidad inicial del buffer de respuesta (bytes).",
    )
    max_response_bytes: int = Field(
        default=DEFAULT_MAX_SIZE,
        gt=0,
        description="Techo duro del buffer de respuesta (bytes).",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )

    @model_validator(mode="after")
    def check_buffer_limits(self) -> "AppSettings":
        if self.initial_buffer_bytes > self.max_response_bytes:
            raise ValueError("initial_buffer_bytes cannot exceed max_response_bytes")
        return self

    @property
    def credentials(self) -> Credentials:
        password = self.password.get_secret_value() if self.password is not None else ""
        return Credentials(username=self.username or "", password=SecretStr(password))

    def to_request_config(
        self,
        *,
        datetime: str | None = None,
        parameters: str | None = None,
        location: str | None = None,
        format: str | None = None,
    ) -> RequestConfig:
        """Construye el `RequestConfig` de una ejecución (overrides opcionales de la CLI)."""

        return RequestConfig(
            credentials=self.credentials,
            datetime=datetime if datetime is not None else self.datetime,
            parameters=parameters if parameters is not None else self.parameters,
            location=location if location is not None else self.location,
            format=format if format is not None else self.format,
        )
