"""
Unit tests for modality-specific request construction.
"""

import pytest

from figma2jsx.core.conversion_types import (
    NO_INPUT,
    ImageBlob,
    ImageHandle,
    ImageInput,
    ImagePart,
    ModelSettings,
    StructuredText,
    TextPart,
)
from figma2jsx.core.errors import EmptyInput
from figma2jsx.prompting.prompt_builder import (
    IMAGE_SYSTEM_PROMPT,
    build_image_request,
    build_request,
    build_text_request,
)

DATA_URL = "data:image/png;base64,iVBORw0KGgo="
FIGMA_JSON = '{"document": {"children": [{"type": "FRAME", "name": "Card"}]}}'


def _image_modality() -> ImageInput:
    blob = ImageBlob(data=b"\x89PNG", mime_type="image/png")
    return ImageInput(ImageHandle(blob=blob, preview_url="blob:figma2jsx/abc"))


class TestImageRequest:
    def test_uses_vision_model_and_deterministic_sampling(self) -> None:
        request = build_image_request(DATA_URL)

        assert request.model == "gpt-4o"
        assert request.temperature == 0
        assert request.max_tokens == 4000

    def test_system_message_precedes_user_turn(self) -> None:
        request = build_image_request(DATA_URL)

        assert [m.role for m in request.messages] == ["system", "user"]
        assert request.messages[0].content == IMAGE_SYSTEM_PROMPT

    def test_user_turn_has_instruction_then_single_image_part(self) -> None:
        request = build_image_request(DATA_URL)
        parts = request.messages[1].content

        assert isinstance(parts[0], TextPart)
        assert "React JSX" in parts[0].text
        assert request.image_parts() == [ImagePart(url=DATA_URL, detail="high")]

    def test_payload_shape(self) -> None:
        payload = build_image_request(DATA_URL).to_payload()

        assert payload["messages"][1]["content"][1] == {
            "type": "image_url",
            "image_url": {"url": DATA_URL, "detail": "high"},
        }
        assert payload["temperature"] == 0
        assert payload["max_tokens"] == 4000

    def test_settings_override_model(self) -> None:
        settings = ModelSettings(vision_model="gpt-4.1", vision_max_tokens=8000)
        request = build_image_request(DATA_URL, settings)

        assert request.model == "gpt-4.1"
        assert request.max_tokens == 8000
        assert request.temperature == 0


class TestTextRequest:
    def test_single_user_message_contains_json_verbatim(self) -> None:
        request = build_text_request(FIGMA_JSON)

        assert len(request.messages) == 1
        message = request.messages[0]
        assert message.role == "user"
        assert isinstance(message.content, str)
        assert FIGMA_JSON in message.content
        assert "ONLY the JSX code" in message.content
        assert request.image_parts() == []

    def test_uses_text_model_with_low_temperature(self) -> None:
        request = build_text_request(FIGMA_JSON)

        assert request.model == "gpt-4"
        assert request.temperature == 0.1
        assert request.max_tokens == 4096

    def test_payload_content_is_plain_string(self) -> None:
        payload = build_text_request(FIGMA_JSON).to_payload()

        assert isinstance(payload["messages"][0]["content"], str)


class TestBuildRequestDispatch:
    def test_structured_text_dispatches_to_text_request(self) -> None:
        request = build_request(StructuredText(FIGMA_JSON))

        assert request.model == "gpt-4"
        assert FIGMA_JSON in request.messages[0].content

    def test_image_dispatches_to_vision_request(self) -> None:
        request = build_request(_image_modality(), DATA_URL)

        assert request.model == "gpt-4o"
        assert len(request.image_parts()) == 1

    def test_image_without_encoding_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_request(_image_modality())

    def test_no_input_raises_empty_input(self) -> None:
        with pytest.raises(EmptyInput):
            build_request(NO_INPUT)

    def test_empty_text_raises_empty_input(self) -> None:
        with pytest.raises(EmptyInput):
            build_request(StructuredText(""))
