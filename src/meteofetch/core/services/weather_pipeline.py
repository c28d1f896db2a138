"""Weather fetch orchestration.

The pipeline is strictly linear and fails fast:

    START -> VALIDATE_CONFIG -> CONSTRUCT_URL -> EXECUTE
          -> PARSE_AND_REDACT -> FORMAT -> DONE

Any error stops the run, resources acquired so far are released, and the
error propagates with ``error.stage`` set to the stage that failed. Printing
is left to the caller (CLI), which keeps the pipeline reusable from tests and
other entry-points.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import httpx

from meteofetch.adapters import http_client
from meteofetch.adapters.json_exporter import render_document
from meteofetch.adapters.request_executor import execute
from meteofetch.core.buffer import GrowthBuffer
from meteofetch.core.config import AppSettings
from meteofetch.core.domain.models import RequestConfig
from meteofetch.core.errors import InvalidConfigError, WeatherError
from meteofetch.core.services.sanitizer import parse_and_redact
from meteofetch.core.services.url_builder import construct_url

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    START = "start"
    VALIDATE_CONFIG = "validate_config"
    CONSTRUCT_URL = "construct_url"
    EXECUTE = "execute"
    PARSE_AND_REDACT = "parse_and_redact"
    FORMAT = "format"
    DONE = "done"

    def failure_label(self) -> str:
        """Operator-facing summary used when this stage fails."""

        return _FAILURE_LABELS.get(self, "Pipeline failed")


_FAILURE_LABELS: dict[PipelineStage, str] = {
    PipelineStage.VALIDATE_CONFIG: "Invalid Configuration",
    PipelineStage.CONSTRUCT_URL: "Failed to construct URL",
    PipelineStage.EXECUTE: "Failed to perform API request",
    PipelineStage.PARSE_AND_REDACT: "Failed to process JSON response",
    PipelineStage.FORMAT: "Failed to format JSON output",
}


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, verbose output)."""

    stage: Callable[[PipelineStage], None] | None = None


@dataclass
class PipelineResult:
    """Output of a successful pipeline run."""

    document: Any
    output: str
    url: str
    bytes_received: int


ClientFactory = Callable[[AppSettings], httpx.Client]


def validate_config(config: RequestConfig) -> None:
    if not config.credentials.complete:
        raise InvalidConfigError("Missing credentials in environment variables")


def run_pipeline(
    *,
    settings: AppSettings,
    config: RequestConfig | None = None,
    hooks: PipelineHooks | None = None,
    client_factory: ClientFactory | None = None,
) -> PipelineResult:
    """Run one fetch: validate, build URL, request, parse+redact, format.

    ``client_factory`` defaults to :func:`meteofetch.adapters.http_client.build_client`;
    tests inject a factory bound to an ``httpx.MockTransport``.
    """

    hooks = hooks or PipelineHooks()
    config = config or settings.to_request_config()
    factory = client_factory or http_client.build_client
    stage = PipelineStage.START

    def enter(next_stage: PipelineStage) -> None:
        nonlocal stage
        stage = next_stage
        logger.debug("stage: %s", stage.value)
        if hooks.stage:
            hooks.stage(stage)

    try:
        with ExitStack() as cleanup:
            enter(PipelineStage.VALIDATE_CONFIG)
            validate_config(config)

            enter(PipelineStage.CONSTRUCT_URL)
            url = construct_url(config, base_url=settings.base_url)

            enter(PipelineStage.EXECUTE)
            client = cleanup.enter_context(factory(settings))
            buffer = cleanup.enter_context(
                GrowthBuffer(settings.initial_buffer_bytes, settings.max_response_bytes)
            )
            received = execute(url, config.credentials, buffer, client=client)

            enter(PipelineStage.PARSE_AND_REDACT)
            document = parse_and_redact(buffer.getvalue())

            enter(PipelineStage.FORMAT)
            try:
                output = render_document(document)
            except (TypeError, ValueError) as exc:
                raise WeatherError(f"Failed to format JSON output: {exc}") from exc
    except WeatherError as exc:
        exc.stage = stage
        logger.debug("pipeline failed at %s: %s", stage.value, exc.message)
        raise

    enter(PipelineStage.DONE)
    return PipelineResult(
        document=document,
        output=output,
        url=url,
        bytes_received=received,
    )
