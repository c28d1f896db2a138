"""Parseo y redacción del documento de respuesta.

Reglas:
- Se parsea el cuerpo completo de una vez; si falla no hay documento parcial.
- Se eliminan del nivel superior las claves de `REDACTION_SET` antes de que
  el documento llegue a cualquier paso de formateo o salida.

Limitación conocida:
- Solo se redacta el nivel superior. Claves homónimas anidadas (dentro de
  arrays u objetos) se conservan tal cual. Si la API devolviera credenciales
  bajo otra clave o a otra profundidad, se filtrarían.
"""

from __future__ import annotations

import json
from typing import Any

from meteofetch.core.errors import ParseError

REDACTION_SET: frozenset[str] = frozenset({"user", "password", "credentials"})


def parse_document(data: bytes) -> Any:
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise ParseError(exc.lineno, exc.msg) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(1, f"invalid text encoding: {exc.reason}") from exc
    except RecursionError as exc:
        raise ParseError(1, "maximum parsing depth reached") from exc


def redact(document: Any) -> Any:
    """Elimina `REDACTION_SET` del nivel superior. Borrar una clave ausente es no-op."""

    if isinstance(document, dict):
        for key in REDACTION_SET:
            document.pop(key, None)
    return document


def parse_and_redact(data: bytes) -> Any:
    return redact(parse_document(data))
