"""Content validation for downloaded logo bytes.

Classifies a buffer by content alone: rejects empty payloads, tracking-pixel
sized placeholders and HTML error pages served with a 200 status, then
identifies SVG markup or a binary format from its magic bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.keys import K_EXTENSION, K_FORMAT, K_MIME_TYPE, K_SIZE_BYTES

MIN_IMAGE_BYTES = 100
HTML_SNIFF_BYTES = 512
SVG_SNIFF_BYTES = 1024
SVG_NAMESPACE_ATTR = 'xmlns="http://www.w3.org/2000/svg"'


@dataclass(frozen=True, slots=True)
class ImageSignature:
    magic: bytes
    offset: int
    format: str
    extension: str
    mime_type: str

    def matches(self, buffer: bytes) -> bool:
        end = self.offset + len(self.magic)
        return len(buffer) >= end and buffer[self.offset:end] == self.magic


# Order matters: RIFF is a loose container prefix and AVIF sits at offset 4.
IMAGE_SIGNATURES: Tuple[ImageSignature, ...] = (
    ImageSignature(b"\x89PNG", 0, "PNG", "png", "image/png"),
    ImageSignature(b"\xff\xd8\xff", 0, "JPEG", "jpg", "image/jpeg"),
    ImageSignature(b"GIF87a", 0, "GIF", "gif", "image/gif"),
    ImageSignature(b"GIF89a", 0, "GIF", "gif", "image/gif"),
    ImageSignature(b"RIFF", 0, "WEBP", "webp", "image/webp"),
    ImageSignature(b"\x00\x00\x01\x00", 0, "ICO", "ico", "image/x-icon"),
    ImageSignature(b"BM", 0, "BMP", "bmp", "image/bmp"),
    ImageSignature(b"II*\x00", 0, "TIFF", "tiff", "image/tiff"),
    ImageSignature(b"MM\x00*", 0, "TIFF", "tiff", "image/tiff"),
    ImageSignature(b"ftypavif", 4, "AVIF", "avif", "image/avif"),
)


@dataclass(frozen=True, slots=True)
class ImageInfo:
    format: str
    extension: str
    mime_type: str
    size_bytes: int
    is_valid: bool
    is_svg: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            K_FORMAT: self.format,
            K_EXTENSION: self.extension,
            K_MIME_TYPE: self.mime_type,
            K_SIZE_BYTES: self.size_bytes,
            "is_valid": self.is_valid,
            "is_svg": self.is_svg,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    info: Optional[ImageInfo] = None
    reason: Optional[str] = None


def _head_text(buffer: bytes, limit: int) -> str:
    return buffer[:limit].decode("utf-8", "replace").strip()


def detect_format(buffer: bytes) -> Optional[ImageSignature]:
    """Return the first signature whose magic bytes match ``buffer``."""

    for signature in IMAGE_SIGNATURES:
        if signature.matches(buffer):
            return signature
    return None


def is_html_content(buffer: bytes) -> bool:
    text = _head_text(buffer, HTML_SNIFF_BYTES).lower()
    return (
        text.startswith("<!doctype html")
        or text.startswith("<html")
        or text.startswith("<!doctype")
        or ("<head>" in text and "<body" in text)
    )


def is_svg_content(buffer: bytes) -> bool:
    text = _head_text(buffer, SVG_SNIFF_BYTES)
    return (
        (text.startswith("<?xml") and "<svg" in text)
        or text.startswith("<svg")
        or SVG_NAMESPACE_ATTR in text
    )


def validate_image(buffer: Optional[bytes]) -> ValidationResult:
    """Validate a downloaded buffer as a logo image.

    Rules apply in order and the first match decides: empty, below
    ``MIN_IMAGE_BYTES``, HTML document, SVG markup, magic-byte table, unknown.
    """

    if not buffer:
        return ValidationResult(False, reason="Empty buffer: no data received")

    size = len(buffer)
    if size < MIN_IMAGE_BYTES:
        return ValidationResult(False, reason=f"Buffer too small ({size} bytes): likely a placeholder")

    if is_html_content(buffer):
        return ValidationResult(False, reason="Content is HTML, not an image: likely an error page")

    if is_svg_content(buffer):
        info = ImageInfo("SVG", "svg", "image/svg+xml", size, True, True)
        return ValidationResult(True, info=info)

    signature = detect_format(buffer)
    if signature is not None:
        info = ImageInfo(signature.format, signature.extension, signature.mime_type, size, True, False)
        return ValidationResult(True, info=info)

    return ValidationResult(False, reason="Unknown format: could not identify image type from file header")


__all__ = [
    "IMAGE_SIGNATURES",
    "ImageInfo",
    "ImageSignature",
    "MIN_IMAGE_BYTES",
    "ValidationResult",
    "detect_format",
    "is_html_content",
    "is_svg_content",
    "validate_image",
]
