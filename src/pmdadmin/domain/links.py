"""Google Drive link rewriting."""

from __future__ import annotations

import re
from typing import Final

_FILE_PATH: Final = re.compile(r"/file/d/([-\w]{25,})")
_ID_PARAM: Final = re.compile(r"[?&]id=([-\w]{25,})")
_CDN_PATH: Final = re.compile(r"lh3\.googleusercontent\.com/d/([-\w]{25,})")


def drive_file_id(url: str | None) -> str | None:
    if not url:
        return None
    for pattern in (_FILE_PATH, _ID_PARAM, _CDN_PATH):
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def preview_url(url: str) -> str:
    """Embeddable preview link; non-Drive URLs are returned unchanged."""
    file_id = drive_file_id(url)
    return f"https://drive.google.com/file/d/{file_id}/preview" if file_id else url


def download_url(url: str) -> str:
    file_id = drive_file_id(url)
    return f"https://drive.google.com/uc?export=download&id={file_id}" if file_id else url


def image_cdn_url(url: str) -> str:
    file_id = drive_file_id(url)
    return f"https://lh3.googleusercontent.com/d/{file_id}" if file_id else url
