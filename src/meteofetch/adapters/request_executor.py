"""Ejecutor de la petición HTTP.

Una sola petición GET autenticada por ejecución. Cada trozo recibido se
empuja tal cual al `ByteSink`; si el sink rechaza un trozo, la respuesta se
cierra inmediatamente y la transferencia se da por abortada.

Los trozos son los bytes tal como llegan por el cable (`iter_raw`): no se
descomprime nada antes de que el sink los cuente. Si el servidor ignora
`Accept-Encoding: identity`, el cuerpo comprimido fallará al parsearse.

Clasificación de fallos:
- Cualquier error de transporte de httpx -> `TransportError(detail)`.
- Sink lleno -> `ResponseTooLargeError` (subclase de `TransportError`).
- Estado HTTP >= 400 -> `TransportError`.
"""

from __future__ import annotations

import logging
import time

import httpx

from meteofetch.adapters.http_client import REQUEST_TIMEOUT_SECONDS
from meteofetch.core.domain.models import Credentials
from meteofetch.core.errors import (
    CapacityExceededError,
    InvalidMemoryError,
    ResponseTooLargeError,
    TransportError,
)
from meteofetch.core.interfaces.sink import ByteSink

logger = logging.getLogger(__name__)


def _basic_auth(credentials: Credentials) -> httpx.BasicAuth:
    return httpx.BasicAuth(credentials.username, credentials.password.get_secret_value())


def execute(
    url: str,
    credentials: Credentials,
    sink: ByteSink,
    *,
    client: httpx.Client,
    timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
) -> int:
    """Ejecuta el GET y vuelca el cuerpo en `sink`. Devuelve los bytes recibidos.

    El límite total es aproximado. `timeout_seconds` se comprueba al recibir
    las cabeceras y tras cada trozo. Hasta esos puntos solo rigen los timeouts
    por operación de httpx (connect/read de 30 s cada uno), así que una
    ejecución puede superar `timeout_seconds` en hasta un timeout de operación.
    """

    received = 0
    deadline = time.monotonic() + timeout_seconds

    def check_deadline() -> None:
        if time.monotonic() > deadline:
            raise TransportError(
                f"Operation timed out after {timeout_seconds:g} seconds "
                f"with {received} bytes received"
            )

    logger.debug("GET %s", url)

    try:
        with client.stream("GET", url, auth=_basic_auth(credentials)) as response:
            if response.is_error:
                raise TransportError(
                    f"HTTP {response.status_code} {response.reason_phrase}".rstrip()
                )
            check_deadline()

            for chunk in response.iter_raw():
                if not chunk:
                    continue
                try:
                    sink.append(chunk)
                except CapacityExceededError as exc:
                    raise ResponseTooLargeError(exc.max_size) from exc
                except InvalidMemoryError as exc:
                    raise TransportError(f"Failed writing received data: {exc.message}") from exc
                received += len(chunk)
                check_deadline()
    except httpx.TimeoutException as exc:
        raise TransportError(f"Timeout was reached: {exc}") from exc
    except httpx.ConnectError as exc:
        raise TransportError(f"Couldn't connect to server: {exc}") from exc
    except httpx.HTTPError as exc:
        raise TransportError(str(exc) or exc.__class__.__name__) from exc

    logger.info("received %d bytes from %s", received, url)
    return received
