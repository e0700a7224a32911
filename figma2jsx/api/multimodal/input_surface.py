"""
Input acquisition for the conversion pipeline.

Architectural role:
- Normalizes three capture paths (file selection, clipboard paste, raw Figma
  JSON text) into one `InputModality` value.
- Owns the preview lifetime of the active image.

Mutual exclusivity:
- The active input lives in a single attribute. Every setter replaces it, so
  the most recent call wins and the other modality is cleared.
- An image's preview URL is revoked before the image is replaced or cleared.

Validation behavior:
- Selected files must not declare a non-image MIME type.
- Payloads larger than `max_image_bytes` are rejected.
- Rejected input leaves the current modality untouched.

Paste handling:
- Only the first clipboard item whose MIME type mentions `image` is used.
- The return value tells the host whether to suppress its default
  paste-as-text behavior.
- A chosen image that fails validation raises `InputRejected`; an image
  entry without a payload is suppressed silently.
"""

import logging
import os
from typing import Iterable

from figma2jsx.api.multimodal.preview_store import PreviewStore
from figma2jsx.core.conversion_types import (
    NO_INPUT,
    ClipboardItem,
    ImageBlob,
    ImageHandle,
    ImageInput,
    InputModality,
    StructuredText,
)
from figma2jsx.core.errors import InputRejected


logger = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 20 * 1024 * 1024


class InputSurface:
    """Holds the single active input and enforces modality exclusivity."""

    def __init__(
        self,
        preview_store: PreviewStore | None = None,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ) -> None:
        self.preview_store = preview_store if preview_store is not None else PreviewStore()
        self.max_image_bytes = max_image_bytes
        self._modality: InputModality = NO_INPUT

    @property
    def modality(self) -> InputModality:
        return self._modality

    @property
    def has_content(self) -> bool:
        if isinstance(self._modality, ImageInput):
            return True
        return isinstance(self._modality, StructuredText) and bool(self._modality.content)

    # ============================================================
    # CAPTURE PATHS
    # ============================================================

    def select_file(self, blob: ImageBlob) -> ImageHandle:
        """Make `blob` the active image and clear any structured text.

        Raises:
            InputRejected: Non-image MIME type, missing file, or oversized payload.
        """
        self._validate_image(blob)
        return self._set_image(blob)

    def paste_clipboard_items(self, items: Iterable[ClipboardItem]) -> bool:
        """Take the first image entry from a paste event.

        Returns:
            `True` when an image entry was found and the host must suppress
            its default paste; `False` when the paste is plain text.

        Raises:
            InputRejected: The first image entry fails validation.
        """
        for item in items:
            if not item.is_image:
                continue

            if item.data:
                blob = ImageBlob(
                    data=item.data,
                    mime_type=item.mime_type,
                    file_name=item.file_name,
                )
                self.select_file(blob)
            else:
                logger.warning("Pasted image entry %s had no payload", item.mime_type)
            return True

        return False

    def set_structured_text(self, text: str) -> None:
        """Replace the active input with Figma JSON text; clears any image."""
        self._release_image()
        self._modality = StructuredText(text) if text else NO_INPUT

    def clear(self) -> None:
        self._release_image()
        self._modality = NO_INPUT

    # ============================================================
    # INTERNALS
    # ============================================================

    def _set_image(self, blob: ImageBlob) -> ImageHandle:
        self._release_image()
        handle = ImageHandle(blob=blob, preview_url=self.preview_store.create_url(blob))
        self._modality = ImageInput(handle)
        logger.info(
            "Image input set (%s, %s bytes)",
            blob.file_name or blob.mime_type or "unnamed",
            blob.size_bytes if blob.size_bytes is not None else "?",
        )
        return handle

    def _release_image(self) -> None:
        if isinstance(self._modality, ImageInput):
            self.preview_store.revoke_url(self._modality.handle.preview_url)

    def _validate_image(self, blob: ImageBlob) -> None:
        declared = (blob.mime_type or "").lower()
        if declared and not declared.startswith("image/"):
            raise InputRejected(f"Unsupported file type: {blob.mime_type}")

        if blob.data is not None:
            size = len(blob.data)
        else:
            if not os.path.isfile(blob.path):
                raise InputRejected("File does not exist")
            size = os.path.getsize(blob.path)

        if size == 0:
            raise InputRejected("File is empty")

        if size > self.max_image_bytes:
            raise InputRejected("File exceeds max size limit")
