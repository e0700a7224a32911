"""
Binary-to-data-URL encoding for screenshot input.

Processing lifecycle:
1. Read the blob payload (in-memory bytes or a local file) on a worker thread.
2. Resolve an `image/*` MIME type: declared type, then Pillow sniffing,
   then file-name guessing.
3. Base64-encode and return `data:<mime>;base64,<payload>`.

Error handling strategy:
- Every failure raises `EncodingFailure` with a one-line message; the
  orchestrator treats it as fatal for the current conversion only.

Side effects:
- Reads the local file for path-backed blobs. Nothing is written.
"""

import asyncio
import base64
import io
import logging
import mimetypes

from PIL import Image, UnidentifiedImageError

from figma2jsx.core.conversion_types import ImageBlob
from figma2jsx.core.errors import EncodingFailure


logger = logging.getLogger(__name__)


def _read_payload(blob: ImageBlob) -> bytes:
    if blob.data is not None:
        return blob.data
    try:
        with open(blob.path, "rb") as f:
            return f.read()
    except OSError as err:
        raise EncodingFailure(f"Failed to read image file: {err.strerror or err}") from err


def _sniff_mime_type(payload: bytes) -> str | None:
    """Identify the image format from its bytes using Pillow."""
    try:
        with Image.open(io.BytesIO(payload)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def resolve_mime_type(blob: ImageBlob, payload: bytes) -> str | None:
    """Return an `image/*` MIME type for the payload, or `None`."""
    declared = (blob.mime_type or "").split(";", 1)[0].strip().lower()
    if declared.startswith("image/"):
        return declared

    sniffed = _sniff_mime_type(payload)
    if sniffed:
        return sniffed

    name = blob.file_name or blob.path
    if name:
        guessed, _ = mimetypes.guess_type(name)
        if guessed and guessed.startswith("image/"):
            return guessed

    return None


def encode_data_url(blob: ImageBlob) -> str:
    """Blocking encoder; see `encode_image`."""
    payload = _read_payload(blob)
    if not payload:
        raise EncodingFailure("Failed to convert file to base64")

    mime_type = resolve_mime_type(blob, payload)
    if not mime_type:
        raise EncodingFailure("Failed to convert file to base64: unsupported image type")

    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


async def encode_image(blob: ImageBlob) -> str:
    """Encode an image blob as a data URL without blocking the event loop.

    Raises:
        EncodingFailure: Read error, empty payload, or unknown image type.
    """
    data_url = await asyncio.to_thread(encode_data_url, blob)
    logger.debug("Encoded image %s (%d chars)", blob.file_name or "<pasted>", len(data_url))
    return data_url
