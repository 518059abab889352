"""Address-bar URL helpers."""
from __future__ import annotations

DEFAULT_SCHEME = "https://"


def normalize_url(text: str) -> str:
    """Prefix ``https://`` unless the entry already carries an http(s) scheme."""
    url = (text or "").strip()
    if not url:
        raise ValueError("URL must not be empty")
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return DEFAULT_SCHEME + url
