"""Completion-request assembly for the two input modalities.

This module is intentionally narrow: it only turns an already-acquired input
into a `CompletionRequest`. Input acquisition, image encoding, transport, and
code extraction happen outside this module.

Design constraints:
    - Pure and synchronous: no I/O, no global state mutation.
    - Deterministic construction for identical inputs and settings.
    - Fixed ordering of message parts per modality.

Why two builders:
    Screenshots need a vision-capable model, a system role, and a multi-part
    user turn carrying the image; Figma JSON needs a text model and a single
    plain-text user turn. They share no template.

Prompt safety model:
    Figma JSON is interpolated verbatim. The instruction text precedes it and
    asks for code only; nothing is escaped.
"""

from figma2jsx.core.conversion_types import (
    ChatMessage,
    CompletionRequest,
    ImageInput,
    ImagePart,
    InputModality,
    ModelSettings,
    NoInput,
    StructuredText,
    TextPart,
)
from figma2jsx.core.errors import EmptyInput


# =========================================================
# IMAGE PROMPT
# =========================================================
# Component order:
#   1) system message (converter role)
#   2) user text part (conversion instructions)
#   3) user image part (data URL, high detail)

IMAGE_SYSTEM_PROMPT = (
    "You are an expert UI developer who converts UI designs into React "
    "components with Tailwind CSS. You analyze UI screenshots and generate "
    "pixel-perfect code."
)

IMAGE_INSTRUCTION = (
    "Convert this UI design into React JSX code with Tailwind CSS. Include all "
    "text content, styling, and layout exactly as shown. Make it responsive "
    "and use semantic HTML."
)

IMAGE_TEMPERATURE = 0


def build_image_request(
    encoded_image: str,
    settings: ModelSettings | None = None,
) -> CompletionRequest:
    """Build a vision request for one encoded screenshot.

    Args:
        encoded_image: `data:<mime>;base64,...` URL of the screenshot.
        settings: Model ids and limits; defaults apply when omitted.

    Returns:
        Request with exactly one image part, `temperature=0`.
    """
    settings = settings or ModelSettings()

    return CompletionRequest(
        model=settings.vision_model,
        messages=(
            ChatMessage(role="system", content=IMAGE_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=(
                    TextPart(IMAGE_INSTRUCTION),
                    ImagePart(url=encoded_image, detail=settings.image_detail),
                ),
            ),
        ),
        max_tokens=settings.vision_max_tokens,
        temperature=IMAGE_TEMPERATURE,
    )


# =========================================================
# FIGMA JSON PROMPT
# =========================================================
# Single user message: instruction first, then the literal JSON.

TEXT_INSTRUCTION = (
    "Create a React component with Tailwind CSS based on this Figma JSON. "
    "Return ONLY the JSX code without any explanation."
)


def build_text_prompt(figma_json: str) -> str:
    """Embed the design description after the instruction, unmodified."""
    return f"{TEXT_INSTRUCTION}\n\nFigma JSON:\n{figma_json}"


def build_text_request(
    figma_json: str,
    settings: ModelSettings | None = None,
) -> CompletionRequest:
    settings = settings or ModelSettings()

    return CompletionRequest(
        model=settings.text_model,
        messages=(
            ChatMessage(role="user", content=build_text_prompt(figma_json)),
        ),
        max_tokens=settings.text_max_tokens,
        temperature=settings.text_temperature,
    )


# =========================================================
# DISPATCH
# =========================================================

def build_request(
    modality: InputModality,
    encoded_image: str | None = None,
    settings: ModelSettings | None = None,
) -> CompletionRequest:
    """Build the request matching the active input modality.

    Args:
        modality: Active input variant.
        encoded_image: Data URL of the image; required for `ImageInput`.
        settings: Model ids and limits.

    Raises:
        EmptyInput: For `NoInput` or empty structured text.
        ValueError: Image modality without its encoded form.
    """
    if isinstance(modality, ImageInput):
        if not encoded_image:
            raise ValueError("An encoded image is required for image input")
        return build_image_request(encoded_image, settings)

    if isinstance(modality, StructuredText) and modality.content:
        return build_text_request(modality.content, settings)

    if isinstance(modality, (NoInput, StructuredText)):
        raise EmptyInput()

    raise TypeError(f"Unsupported input modality: {modality!r}")
