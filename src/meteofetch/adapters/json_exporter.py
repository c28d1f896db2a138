"""Formateo/exportación JSON del documento redactado.

Por qué JSON con indentación fija:
- Salida estable (2 espacios, orden de inserción) apta para diffs y `jq`.
- Solo recibe documentos ya redactados; no conoce HTTP ni credenciales.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def render_document(document: Any) -> str:
    """Serializa el documento con 2 espacios de indentación (sin newline final)."""

    return json.dumps(document, ensure_ascii=False, indent=2)


def export_document_json(*, output: str, output_path: Path) -> Path:
    """Escribe el documento ya formateado a `output_path` (UTF-8, newline final)."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(output + "\n", encoding="utf-8")
    return output_path
