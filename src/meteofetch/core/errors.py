"""Taxonomía de errores del pipeline.

Por qué una jerarquía propia:
- Cada etapa falla con un tipo concreto; la CLI decide cómo reportarlo sin
  inspeccionar mensajes.
- Todos los errores son terminales para la ejecución actual (no hay reintentos).
"""

from __future__ import annotations


class WeatherError(Exception):
    """Base de todos los errores de meteofetch.

    `stage` lo rellena el orquestador con la etapa en la que se produjo el fallo.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stage: object | None = None


class InvalidConfigError(WeatherError):
    """Credenciales ausentes/vacías u otra configuración inválida."""


class InvalidMemoryError(WeatherError):
    """No se pudo reservar memoria para el buffer de respuesta."""


class CapacityExceededError(WeatherError):
    """El buffer alcanzaría un tamaño mayor que su techo."""

    def __init__(self, max_size: int) -> None:
        super().__init__(f"Response too large (exceeds {max_size} bytes)")
        self.max_size = max_size


class UrlConstructionError(WeatherError):
    """La URL ensamblada no cabe en la longitud máxima."""


class TransportError(WeatherError):
    """Fallo de transporte (DNS, TLS, timeout, escritura abortada, HTTP)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ResponseTooLargeError(TransportError):
    """Transferencia abortada porque la respuesta supera el techo del buffer."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Failure when receiving data: response too large (exceeds {limit} bytes)")
        self.limit = limit


class ParseError(WeatherError):
    """El cuerpo recibido no es un documento JSON válido."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"JSON parsing error on line {line}: {message}")
        self.line = line
        self.parser_message = message
