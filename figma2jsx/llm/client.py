"""Transport client for chat-completions requests.

Architectural role:
    Executes one HTTP request against the configured OpenAI-compatible
    endpoint and normalizes the outcome into a `CompletionResponse` variant.

Model invocation flow:
    `engine.ConversionOrchestrator.start` -> `CompletionClient.send(request)`
    -> `requests.post` in a worker thread -> success / service error /
    transport failure.

Retry behavior:
    No retry loop is implemented. Each call is attempted once; retrying is a
    user-level re-invocation.

Timeouts:
    `ProviderConfig.request_timeout` is forwarded to `requests`; it is `None`
    unless configured, so call duration is bounded by the environment.

Failure handling model:
    Nothing is raised to the caller. Transport exceptions become
    `CompletionTransportFailure`; unusable responses become
    `CompletionServiceError`.
"""

import asyncio
import logging

import requests

from figma2jsx.core.conversion_types import (
    CompletionRequest,
    CompletionResponse,
    CompletionServiceError,
    CompletionSuccess,
    CompletionTransportFailure,
)
from figma2jsx.llm.provider_config import ProviderConfig


logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Could not generate code. Please check your input."
UNAUTHORIZED_MESSAGE = "Unauthorized: no API key is configured."


def _status_error_message(response: requests.Response) -> str:
    """Prefer the service-supplied `error.message`, else a status-derived text."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error

    return f"API request failed with status {response.status_code}"


def _parse_choices(body) -> tuple[str, ...] | None:
    """Return the message text of each choice, or `None` if the shape is wrong."""
    if not isinstance(body, dict):
        return None

    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    texts = []
    for choice in choices:
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        texts.append(content if isinstance(content, str) else "")

    if not texts[0]:
        return None
    return tuple(texts)


class CompletionClient:
    """Single-attempt chat-completions client bound to one configuration."""

    def __init__(self, config: ProviderConfig, session: requests.Session | None = None):
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "CompletionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json"
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def send_sync(self, request: CompletionRequest) -> CompletionResponse:
        """Blocking variant of `send`; runs on a worker thread."""
        if self.config.requires_key and not self.config.api_key:
            logger.warning("No API key configured for provider %s", self.config.provider)
            return CompletionServiceError(UNAUTHORIZED_MESSAGE, status_code=None)

        payload = request.to_payload()

        if self.config.debug:
            logger.debug(
                "Sending completion request: model=%s messages=%d images=%d",
                request.model,
                len(request.messages),
                len(request.image_parts()),
            )

        try:
            response = self.session.post(
                self.config.completion_url,
                headers=self._headers(),
                json=payload,
                timeout=self.config.request_timeout,
            )
        except requests.exceptions.RequestException as err:
            logger.warning("Completion request failed: %s", err)
            return CompletionTransportFailure(str(err) or err.__class__.__name__)

        if not response.ok:
            message = _status_error_message(response)
            logger.warning(
                "Completion service returned %s: %s", response.status_code, message
            )
            return CompletionServiceError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None

        texts = _parse_choices(body)
        if texts is None:
            logger.warning("Completion response had no usable choices")
            return CompletionServiceError(
                GENERATION_FAILED_MESSAGE, status_code=response.status_code
            )

        return CompletionSuccess(texts=texts)

    async def send(self, request: CompletionRequest) -> CompletionResponse:
        """Send one request without blocking the event loop.

        Args:
            request: Fully built, immutable completion request.

        Returns:
            `CompletionSuccess`, `CompletionServiceError`, or
            `CompletionTransportFailure`. Never raises for network or
            service problems.
        """
        return await asyncio.to_thread(self.send_sync, request)
