"""Data contracts shared by the conversion pipeline.

Architectural role:
    Defines the structural types passed between input acquisition, request
    building, transport, and orchestration. No behavior beyond small
    constructors and payload rendering lives here.

Input modality model:
    The active input is a single tagged value: `StructuredText`, `ImageInput`,
    or `NO_INPUT`. The input surface owns the only mutable slot holding it, so
    the two modalities can never be populated at the same time.

Determinism:
    All types are immutable value objects. `CompletionRequest.to_payload` is
    deterministic for identical field values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


# ============================================================
# IMAGE INPUT
# ============================================================

@dataclass(frozen=True)
class ImageBlob:
    """Raw binary image payload.

    Attributes:
        data: In-memory bytes, or `None` when the blob is backed by `path`.
        path: Local file path read lazily by the encoder.
        mime_type: Declared MIME type (may be missing or inaccurate).
        file_name: Original file name, used for MIME guessing and display.
    """

    data: bytes | None = None
    path: str | None = None
    mime_type: str | None = None
    file_name: str | None = None

    def __post_init__(self) -> None:
        if self.data is None and self.path is None:
            raise ValueError("ImageBlob requires either data or path")

    @property
    def size_bytes(self) -> int | None:
        """Payload size when known without touching the filesystem."""
        if self.data is not None:
            return len(self.data)
        return None


@dataclass(frozen=True)
class ImageHandle:
    """Image payload plus the transient preview URL issued for it."""

    blob: ImageBlob
    preview_url: str


@dataclass(frozen=True)
class ClipboardItem:
    """One pasted clipboard entry as delivered by the host surface."""

    mime_type: str
    data: bytes | None = None
    file_name: str | None = None

    @property
    def is_image(self) -> bool:
        return "image" in (self.mime_type or "")


# ============================================================
# INPUT MODALITY (tagged variant)
# ============================================================

@dataclass(frozen=True)
class StructuredText:
    content: str


@dataclass(frozen=True)
class ImageInput:
    handle: ImageHandle


@dataclass(frozen=True)
class NoInput:
    pass


NO_INPUT = NoInput()

InputModality = Union[StructuredText, ImageInput, NoInput]


# ============================================================
# COMPLETION REQUEST
# ============================================================

@dataclass(frozen=True)
class TextPart:
    text: str

    def to_payload(self) -> dict:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ImagePart:
    """Embedded image reference; `url` is normally a data URL."""

    url: str
    detail: str = "high"

    def to_payload(self) -> dict:
        return {
            "type": "image_url",
            "image_url": {"url": self.url, "detail": self.detail},
        }


ContentPart = Union[TextPart, ImagePart]


@dataclass(frozen=True)
class ChatMessage:
    """Role-tagged message; content is plain text or an ordered part tuple."""

    role: str
    content: str | tuple[ContentPart, ...]

    def to_payload(self) -> dict:
        if isinstance(self.content, str):
            return {"role": self.role, "content": self.content}
        return {
            "role": self.role,
            "content": [part.to_payload() for part in self.content],
        }


@dataclass(frozen=True)
class CompletionRequest:
    """Immutable chat-completions request built fresh for each conversion."""

    model: str
    messages: tuple[ChatMessage, ...]
    max_tokens: int
    temperature: float

    def to_payload(self) -> dict:
        """Render the OpenAI-compatible JSON body."""
        return {
            "model": self.model,
            "messages": [message.to_payload() for message in self.messages],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def image_parts(self) -> list[ImagePart]:
        """Return every image part across all messages, in order."""
        parts = []
        for message in self.messages:
            if isinstance(message.content, tuple):
                parts.extend(p for p in message.content if isinstance(p, ImagePart))
        return parts


# ============================================================
# COMPLETION RESPONSE
# ============================================================

@dataclass(frozen=True)
class CompletionSuccess:
    """Generated text of every returned choice, in service order."""

    texts: tuple[str, ...]


@dataclass(frozen=True)
class CompletionServiceError:
    """Non-2xx response or malformed success body."""

    message: str
    status_code: int | None = None


@dataclass(frozen=True)
class CompletionTransportFailure:
    """DNS, connection, or timeout failure before a response was read."""

    message: str


CompletionResponse = Union[
    CompletionSuccess,
    CompletionServiceError,
    CompletionTransportFailure,
]


# ============================================================
# CONVERSION STATE
# ============================================================

class ConversionStatus(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionState:
    """Orchestrator state; `code` is set only when completed, `message` only when failed."""

    status: ConversionStatus
    code: str | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> "ConversionState":
        return cls(ConversionStatus.IDLE)

    @classmethod
    def in_progress(cls) -> "ConversionState":
        return cls(ConversionStatus.IN_PROGRESS)

    @classmethod
    def completed(cls, code: str) -> "ConversionState":
        return cls(ConversionStatus.COMPLETED, code=code)

    @classmethod
    def failed(cls, message: str) -> "ConversionState":
        return cls(ConversionStatus.FAILED, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.status in (ConversionStatus.COMPLETED, ConversionStatus.FAILED)


@dataclass(frozen=True)
class ModelSettings:
    """Per-modality model selection and generation limits."""

    vision_model: str = "gpt-4o"
    text_model: str = "gpt-4"
    vision_max_tokens: int = 4000
    text_max_tokens: int = 4096
    text_temperature: float = 0.1
    image_detail: str = "high"
