"""Construcción acotada de la URL de la petición.

Forma fija: `<base>/<datetime>/<parameters>/<location>/<format>`.

La URL debe caber, con su terminador, en una región de `max_length` bytes
(UTF-8). Si no cabe se lanza `UrlConstructionError`; nunca se trunca.
"""

from __future__ import annotations

from meteofetch.core.domain.models import RequestConfig
from meteofetch.core.errors import UrlConstructionError

MAX_URL_LENGTH = 512


def construct_url(
    config: RequestConfig,
    *,
    base_url: str,
    max_length: int = MAX_URL_LENGTH,
) -> str:
    url = "/".join(
        (
            base_url,
            config.datetime,
            config.parameters,
            config.location,
            config.format,
        )
    )
    written = len(url.encode("utf-8"))
    if written >= max_length:
        raise UrlConstructionError(
            f"Failed to construct URL ({written} bytes does not fit in {max_length})"
        )
    return url
