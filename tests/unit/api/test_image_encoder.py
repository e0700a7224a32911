"""
Unit tests for image-to-data-URL encoding.
"""

import asyncio
import base64

import pytest

from figma2jsx.api.multimodal.image_encoder import encode_image, resolve_mime_type
from figma2jsx.core.conversion_types import ImageBlob
from figma2jsx.core.errors import EncodingFailure


class TestEncodeImage:
    def test_in_memory_blob(self, png_bytes: bytes) -> None:
        data_url = asyncio.run(encode_image(ImageBlob(data=png_bytes, mime_type="image/png")))

        assert data_url == "data:image/png;base64," + base64.b64encode(png_bytes).decode()

    def test_path_backed_blob(self, png_bytes: bytes, tmp_path) -> None:
        path = tmp_path / "shot.png"
        path.write_bytes(png_bytes)

        data_url = asyncio.run(encode_image(ImageBlob(path=str(path))))

        assert data_url.startswith("data:image/png;base64,")
        assert base64.b64decode(data_url.split(",", 1)[1]) == png_bytes

    def test_mime_type_is_sniffed_when_not_declared(self, png_bytes: bytes) -> None:
        data_url = asyncio.run(
            encode_image(ImageBlob(data=png_bytes, mime_type="application/octet-stream"))
        )

        assert data_url.startswith("data:image/png;base64,")

    def test_missing_file_raises_encoding_failure(self, tmp_path) -> None:
        with pytest.raises(EncodingFailure):
            asyncio.run(encode_image(ImageBlob(path=str(tmp_path / "gone.png"))))

    def test_empty_payload_raises_encoding_failure(self) -> None:
        with pytest.raises(EncodingFailure):
            asyncio.run(encode_image(ImageBlob(data=b"", mime_type="image/png")))

    def test_unknown_type_raises_encoding_failure(self) -> None:
        with pytest.raises(EncodingFailure):
            asyncio.run(encode_image(ImageBlob(data=b"not an image")))


class TestResolveMimeType:
    def test_declared_image_type_wins(self) -> None:
        blob = ImageBlob(data=b"x", mime_type="image/webp")

        assert resolve_mime_type(blob, b"x") == "image/webp"

    def test_file_name_guess(self) -> None:
        blob = ImageBlob(data=b"x", file_name="design.jpg")

        assert resolve_mime_type(blob, b"x") == "image/jpeg"
