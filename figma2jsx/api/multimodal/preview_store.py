"""In-memory registry of transient image preview URLs.

Each accepted image gets a `blob:figma2jsx/<hex>` URL that outer surfaces can
resolve back to the payload for display. URLs stay valid until revoked; the
input surface revokes the previous URL before issuing a new one.
"""

import uuid

from figma2jsx.core.conversion_types import ImageBlob

URL_PREFIX = "blob:figma2jsx/"


class PreviewStore:
    """Issue, resolve, and revoke preview URLs."""

    def __init__(self) -> None:
        self._blobs: dict[str, ImageBlob] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    @staticmethod
    def preview_id(url: str) -> str:
        """Strip the URL prefix; plain ids pass through unchanged."""
        return url[len(URL_PREFIX):] if url.startswith(URL_PREFIX) else url

    def create_url(self, blob: ImageBlob) -> str:
        preview_id = uuid.uuid4().hex
        self._blobs[preview_id] = blob
        return f"{URL_PREFIX}{preview_id}"

    def resolve(self, url_or_id: str) -> ImageBlob | None:
        return self._blobs.get(self.preview_id(url_or_id))

    def revoke_url(self, url: str) -> None:
        # Revoking an unknown or already revoked URL is a no-op.
        self._blobs.pop(self.preview_id(url), None)
