"""
=============================================================================
CONTENT TYPES FOR SERVED FILES
=============================================================================

The file server names the type of every file it sends. The lookup runs in
two steps:

    1. Our own table, for the web formats whose registered types browsers
       care about (.js as text/javascript, .wasm, .mjs, fonts).
    2. The platform's ``mimetypes`` registry for everything else.
    3. application/octet-stream when neither knows the extension.

Text types get "; charset=utf-8" appended.

=============================================================================
"""

import mimetypes
import posixpath
from typing import Optional


WEB_TYPES = {
    # Documents
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".xml": "application/xml",

    # Scripts and data
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".map": "application/json",
    ".wasm": "application/wasm",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".avif": "image/avif",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Media and archives
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# application/* types that are still text
_TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(name: str, default: Optional[str] = None) -> str:
    """
    MIME type for a file name, judged by its extension.

    >>> get_mime_type("style.CSS")
    'text/css'
    >>> get_mime_type("archive.unknownext")
    'application/octet-stream'
    """
    extension = posixpath.splitext(name)[1].lower()
    if extension in WEB_TYPES:
        return WEB_TYPES[extension]

    guessed, _ = mimetypes.guess_type(f"file{extension}") if extension else (None, None)
    return guessed or default or DEFAULT_MIME_TYPE


def is_text_type(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES


def get_content_type(name: str, charset: str = "utf-8") -> str:
    """
    Full Content-Type header value for a file name.

    >>> get_content_type("index.html")
    'text/html; charset=utf-8'
    >>> get_content_type("logo.png")
    'image/png'
    """
    mime_type = get_mime_type(name)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
