"""Conversion orchestration: one design input in, one code result out.

Architectural role:
    The only component outer surfaces (HTTP adapter, CLI) call. It sequences
    encoding, request building, transport, and code extraction, and owns the
    busy/idle flag plus the last result or error.

Control-flow model:
    1. Refuse to start while a run is in progress.
    2. Short-circuit to FAILED when no input is present (no network call).
    3. IN_PROGRESS.
    4. Encode the image when the active input is a screenshot.
    5. Build the modality-specific request.
    6. Send it once.
    7. Extract code from the first choice -> COMPLETED, or FAILED on any error.

Error handling strategy:
    Every failure, expected or not, ends in a FAILED state with a one-line
    message. Nothing propagates to the caller of `start()`.

Concurrency:
    Steps are strictly sequential and suspend only in the encoder and the
    client. There is no cancel primitive; a second `start()` during a run
    returns the current state unchanged.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from figma2jsx.core.code_extractor import extract_code
from figma2jsx.core.conversion_types import (
    CompletionResponse,
    CompletionServiceError,
    CompletionSuccess,
    CompletionTransportFailure,
    ConversionState,
    ConversionStatus,
    ImageBlob,
    ImageInput,
    ModelSettings,
)
from figma2jsx.core.errors import (
    ConversionError,
    EmptyInput,
    NothingToExport,
    ServiceError,
    TransportFailure,
)
from figma2jsx.api.multimodal.image_encoder import encode_image
from figma2jsx.api.multimodal.input_surface import InputSurface
from figma2jsx.llm.client import GENERATION_FAILED_MESSAGE, CompletionClient
from figma2jsx.prompting.prompt_builder import build_request


logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Unknown error"

ImageEncoder = Callable[[ImageBlob], Awaitable[str]]


def _first_text(response: CompletionResponse) -> str:
    """Return the first choice's text or raise the matching pipeline error."""
    if isinstance(response, CompletionSuccess):
        if not response.texts:
            raise ServiceError(GENERATION_FAILED_MESSAGE)
        return response.texts[0]

    if isinstance(response, CompletionTransportFailure):
        raise TransportFailure(response.message)

    if isinstance(response, CompletionServiceError):
        raise ServiceError(response.message, status_code=response.status_code)

    raise TypeError(f"Unexpected completion response: {response!r}")


class ConversionOrchestrator:
    """Runs design-to-code conversions against one input surface."""

    def __init__(
        self,
        surface: InputSurface,
        client: CompletionClient,
        settings: ModelSettings | None = None,
        encoder: ImageEncoder = encode_image,
    ) -> None:
        self.surface = surface
        self.client = client
        self.settings = settings or ModelSettings()
        self.encoder = encoder
        self._state = ConversionState.idle()

    @property
    def state(self) -> ConversionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state.status is ConversionStatus.IN_PROGRESS

    async def start(self) -> ConversionState:
        """Run one conversion for the current input and return the final state."""
        if self.is_busy:
            logger.warning("Conversion already in progress; ignoring start request")
            return self._state

        modality = self.surface.modality

        if not self.surface.has_content:
            self._state = ConversionState.failed(str(EmptyInput()))
            logger.info("Conversion skipped: no input provided")
            return self._state

        self._state = ConversionState.in_progress()
        kind = "image" if isinstance(modality, ImageInput) else "figma-json"
        logger.info("Conversion started (%s input)", kind)

        try:
            encoded_image = None
            if isinstance(modality, ImageInput):
                encoded_image = await self.encoder(modality.handle.blob)

            request = build_request(modality, encoded_image, self.settings)
            response = await self.client.send(request)
            code = extract_code(_first_text(response))

        except asyncio.CancelledError:
            self._state = ConversionState.failed("Conversion cancelled")
            raise

        except ConversionError as err:
            logger.warning("Conversion failed (%s): %s", err.__class__.__name__, err)
            self._state = ConversionState.failed(str(err) or UNEXPECTED_ERROR_MESSAGE)

        except Exception as err:
            logger.exception("Conversion failed unexpectedly")
            self._state = ConversionState.failed(str(err) or UNEXPECTED_ERROR_MESSAGE)

        else:
            logger.info("Conversion completed (%d chars of code)", len(code))
            self._state = ConversionState.completed(code)

        return self._state

    def export_code(self) -> str:
        """Return the last generated code for clipboard copy or download.

        Raises:
            NothingToExport: No completed conversion is available.
        """
        if self._state.status is not ConversionStatus.COMPLETED:
            raise NothingToExport()
        return self._state.code or ""

    def reset(self) -> None:
        """Forget the last result; refused while a run is in progress."""
        if not self.is_busy:
            self._state = ConversionState.idle()
