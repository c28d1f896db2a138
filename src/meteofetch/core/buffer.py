"""Growth Buffer: acumulador de bytes append-only con techo duro.

Por qué existe:
- La respuesta llega en trozos de longitud desconocida; duplicar la capacidad
  amortiza las realocaciones.
- El techo (`max_size`) acota la memoria expuesta a un servidor que se porte mal.

Invariantes:
- `size < capacity <= max_size` (un byte queda reservado para el terminador).
- `capacity` solo crece y solo se duplica.
- Tras cada `append` exitoso el contenido va seguido de un byte NUL.
"""

from __future__ import annotations

import logging
from types import TracebackType

from meteofetch.core.errors import CapacityExceededError, InvalidMemoryError

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_CAPACITY = 4096
DEFAULT_MAX_SIZE = 10 * 1024 * 1024  # 10 MiB

_TERMINATOR = 0


class GrowthBuffer:
    """Acumulador de bytes con crecimiento por duplicación.

    `append` es atómico por llamada: o el trozo entero queda escrito, o el
    buffer se queda exactamente como estaba y se lanza la excepción.
    """

    def __init__(
        self,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        if initial_capacity <= 0 or max_size <= 0:
            raise ValueError("initial_capacity and max_size must be positive")
        if initial_capacity > max_size:
            raise ValueError("initial_capacity cannot exceed max_size")

        self._max_size = max_size
        self._data = self._allocate(initial_capacity)
        self._data[0] = _TERMINATOR
        self._capacity = initial_capacity
        self._size = 0
        self._released = False

    def _allocate(self, capacity: int) -> bytearray:
        try:
            return bytearray(capacity)
        except MemoryError as exc:
            raise InvalidMemoryError(
                f"Failed to allocate memory ({capacity} bytes, limit {self._max_size} bytes)"
            ) from exc

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return self._size

    def _grown_capacity(self, required: int) -> int:
        capacity = self._capacity
        while required > capacity:
            capacity *= 2
            if capacity > self._max_size:
                raise CapacityExceededError(self._max_size)
        return capacity

    def append(self, chunk: bytes) -> None:
        """Añade `chunk` al final del buffer.

        Raises:
            CapacityExceededError: si la duplicación superaría `max_size`.
            InvalidMemoryError: si falla la reserva de la región ampliada.
        """

        if self._released:
            raise ValueError("append on a released buffer")

        n = len(chunk)
        # +1: el terminador siempre debe caber detrás del contenido.
        required = self._size + n + 1
        if required > self._capacity:
            new_capacity = self._grown_capacity(required)
            new_data = self._allocate(new_capacity)
            new_data[: self._size] = self._data[: self._size]
            self._data = new_data
            logger.debug("buffer grown %d -> %d bytes", self._capacity, new_capacity)
            self._capacity = new_capacity

        self._data[self._size : self._size + n] = chunk
        self._size += n
        self._data[self._size] = _TERMINATOR

    def getvalue(self) -> bytes:
        """Devuelve una copia exacta del contenido acumulado (sin terminador)."""

        return bytes(self._data[: self._size])

    def release(self) -> None:
        """Libera la región. Idempotente."""

        if self._released:
            return
        self._data = bytearray()
        self._size = 0
        self._capacity = 0
        self._released = True

    def __enter__(self) -> "GrowthBuffer":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __repr__(self) -> str:
        return (
            f"GrowthBuffer(size={self._size}, capacity={self._capacity}, "
            f"max_size={self._max_size})"
        )
