"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Valores inmutables (`frozen`) que se construyen una vez por ejecución.
- `SecretStr` evita que la contraseña aparezca en `repr`, logs o tracebacks.

Nota:
- Las credenciales vacías se pueden representar; es `validate_config` quien
  las rechaza, para que el error sea `InvalidConfigError` y no un error de
  validación de Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict


class Credentials(BaseModel):
    """Usuario y contraseña para HTTP Basic."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(
        default="",
        description="Usuario de la API (METEOMATICS_USERNAME).",
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Contraseña de la API (METEOMATICS_PASSWORD).",
    )

    @property
    def complete(self) -> bool:
        """True si usuario y contraseña son no vacíos."""

        return bool(self.username) and bool(self.password.get_secret_value())


class RequestConfig(BaseModel):
    """Parámetros de una petición: los cinco segmentos de la URL + credenciales.

    Por qué un único valor:
    - Se construye una vez por ejecución y se lee sin mutarlo en todo el pipeline.
    """

    model_config = ConfigDict(frozen=True)

    credentials: Credentials = Field(
        default_factory=Credentials,
        description="Credenciales HTTP Basic.",
    )
    datetime: str = Field(
        ...,
        min_length=1,
        description="Instante o rango ISO-8601 (p.ej. '2024-10-23T00:00:00Z').",
    )
    parameters: str = Field(
        ...,
        min_length=1,
        description="Lista de parámetros separada por comas (p.ej. 't_2m:C,precip_1h:mm').",
    )
    location: str = Field(
        ...,
        min_length=1,
        description="Par 'lat,lon' en texto (p.ej. '37.7749,-122.4194').",
    )
    format: str = Field(
        ...,
        min_length=1,
        description="Formato de salida solicitado a la API (p.ej. 'json').",
    )
