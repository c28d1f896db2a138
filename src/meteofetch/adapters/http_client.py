"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeout, headers y verificación TLS en un único sitio.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.

La verificación TLS (certificado + hostname) es obligatoria y no se expone
como opción.
"""

from __future__ import annotations

import httpx

from meteofetch import __version__
from meteofetch.core.config import AppSettings

REQUEST_TIMEOUT_SECONDS = 30.0
USER_AGENT = f"meteofetch/{__version__}"


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono con defaults seguros.

    Por qué un builder:
    - Un único punto para timeout total (30 s) y `verify=True`.
    - Sin redirecciones automáticas: una sola petición por ejecución.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
        # Sin compresión: el techo del buffer se aplica a los bytes del cable.
        "Accept-Encoding": "identity",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=settings.base_url,
        timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS),
        verify=True,
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )
