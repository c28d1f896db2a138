"""Contrato del destino de bytes de una transferencia.

Por qué Protocol:
- El ejecutor HTTP solo necesita "algo con `append`"; el `GrowthBuffer` lo
  cumple sin herencia y los tests pueden pasar sustitutos triviales.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteSink(Protocol):
    """Destino push de los trozos recibidos.

    Reglas de diseño:
    - `append` recibe cada trozo tal cual llega del transporte.
    - Si lanza una excepción, la transferencia se aborta de inmediato.
    """

    def append(self, chunk: bytes) -> None:
        """Absorbe `chunk` completo o lanza sin escribir nada."""

        ...
