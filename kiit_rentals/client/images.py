"""
Image normalization for listing submissions.

A listing's image is either a remote http(s) URL or an inline data URL. The
normalizer turns whatever the user supplied (URL, data URL, local file path)
into one of those two forms, enforcing the upload size limits.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MAX_INLINE_LENGTH = 1024 * 1024


class ImageError(ValueError):
    pass


class ImageNormalizer(ABC):
    @abstractmethod
    def normalize(self, source: str) -> str:
        """Return an http(s) URL or data:image payload for the given source."""


class DataUrlImageNormalizer(ImageNormalizer):
    def __init__(self, max_upload_bytes: int = MAX_UPLOAD_BYTES, max_inline_length: int = MAX_INLINE_LENGTH) -> None:
        self.max_upload_bytes = max_upload_bytes
        self.max_inline_length = max_inline_length

    def normalize(self, source: str) -> str:
        source = (source or "").strip()
        if not source:
            raise ImageError("Image is required")
        if source.startswith(("http://", "https://")):
            return source
        if source.startswith("data:"):
            return self._check_inline(self._normalize_data_url(source))
        return self._check_inline(self._encode_file(Path(source).expanduser()))

    def _normalize_data_url(self, value: str) -> str:
        header, sep, payload = value.partition(",")
        mime = header[len("data:"):].split(";")[0]
        if not sep or not mime.startswith("image/") or ";base64" not in header:
            raise ImageError("Please provide a valid image URL or upload a file")
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ImageError("Image data is not valid base64")
        return _data_url(mime, raw)

    def _encode_file(self, path: Path) -> str:
        if not path.is_file():
            raise ImageError(f"Image file not found: {path}")
        mime, _ = mimetypes.guess_type(path.name)
        if not mime or not mime.startswith("image/"):
            raise ImageError("Please upload an image file")
        if path.stat().st_size > self.max_upload_bytes:
            raise ImageError("Image size must be less than 5MB. Please choose a smaller image.")
        return _data_url(mime, path.read_bytes())

    def _check_inline(self, data_url: str) -> str:
        if len(data_url) > self.max_inline_length:
            raise ImageError("The converted image is too large. Please use a smaller or more compressed image.")
        return data_url


def _data_url(mime: str, raw: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"
