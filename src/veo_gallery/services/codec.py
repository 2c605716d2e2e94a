"""Encoding of downloaded artifacts into embeddable data URIs."""

import base64
import binascii
from dataclasses import dataclass

from veo_gallery.domain.errors import IncompleteReadError
from veo_gallery.domain.records import ArtifactRef

_DATA_PREFIX = "data:"
_BASE64_MARKER = ";base64,"


@dataclass(frozen=True)
class ArtifactCodec:
    """Convert raw bytes to base64 data URIs and back."""

    def encode(
        self, data: bytes, media_type: str, expected_length: int | None = None
    ) -> ArtifactRef:
        """Encode bytes as a data URI, checking the declared length if known."""
        if expected_length is not None and len(data) < expected_length:
            raise IncompleteReadError(expected=expected_length, received=len(data))
        encoded = base64.b64encode(data).decode("ascii")
        return ArtifactRef(
            data_uri=f"{_DATA_PREFIX}{media_type}{_BASE64_MARKER}{encoded}",
            media_type=media_type,
        )

    def decode(self, artifact: ArtifactRef) -> bytes:
        """Return the original bytes of an encoded artifact."""
        header, marker, payload = artifact.data_uri.rpartition(_BASE64_MARKER)
        if not marker or not header.startswith(_DATA_PREFIX):
            raise ValueError("Artifact is not a base64 data URI")
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("Artifact payload is not valid base64") from exc
