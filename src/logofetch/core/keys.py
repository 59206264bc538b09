"""Shared schema keys to avoid magic strings across logofetch modules."""

from __future__ import annotations

# Resolution keys
K_INPUT = "input"
K_COMPANY = "company"
K_DOMAIN = "domain"
K_CATEGORY = "category"
K_CONFIDENCE = "confidence"
K_MATCHED_NAME = "matched_name"

# Fetch keys
K_SUCCESS = "success"
K_SOURCE = "source"
K_SOURCE_URL = "source_url"
K_URL = "url"
K_ERROR = "error"
K_ATTEMPTS = "attempts"
K_DURATION_MS = "duration_ms"

# Image keys
K_FORMAT = "format"
K_EXTENSION = "extension"
K_MIME_TYPE = "mime_type"
K_SIZE_BYTES = "size_bytes"
K_PATH = "path"
