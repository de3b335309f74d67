"""Read raw API descriptors from a URL, a local file, or an inline payload.

This module handles all I/O of the import pipeline. It never parses: the text
it returns is handed to :func:`~gwimport.parser.detector.parse_document`,
which probes the format and the spec version.

The single public function is :func:`load_source`. It dispatches on the
descriptor's :class:`~gwimport.models.SourceKind`:

* ``INLINE`` -- the payload already is the document content.
* ``URL`` -- the payload is a location: an ``http(s)://`` URL (fetched with
  httpx), a ``file://`` URL or a plain filesystem path.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx

from gwimport.exceptions import EmptyPayloadError, UnreachableSourceError
from gwimport.models import ImportDescriptor, SourceKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def load_source(descriptor: ImportDescriptor, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Return the raw content designated by *descriptor*.

    Args:
        descriptor: The import descriptor.
        timeout: Upper bound, in seconds, for fetching a remote URL.

    Returns:
        The document text.

    Raises:
        UnreachableSourceError: If the location cannot be read.
        EmptyPayloadError: If the content is blank.
    """
    if descriptor.kind == SourceKind.INLINE:
        content = descriptor.payload
        location = "inline payload"
    else:
        location = descriptor.payload.strip()
        if location.startswith(("http://", "https://")):
            content = _load_from_url(location, timeout)
        elif location.startswith("file://"):
            content = _load_from_file(unquote(urlsplit(location).path))
        else:
            content = _load_from_file(location)

    if not content or not content.strip():
        raise EmptyPayloadError("API descriptor is empty", location=location)

    logger.debug("Loaded %d characters from %s", len(content), location)
    return content


def _load_from_url(url: str, timeout: float) -> str:
    """Fetch a descriptor over HTTP(S).

    Args:
        url: The HTTP(S) URL to fetch.
        timeout: Request timeout in seconds.

    Returns:
        The response body as text.

    Raises:
        UnreachableSourceError: On HTTP error status or transport failure.
    """
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise UnreachableSourceError(
            f"HTTP {exc.response.status_code} fetching descriptor", location=url
        ) from exc
    except httpx.RequestError as exc:
        raise UnreachableSourceError(
            f"Failed to fetch descriptor: {exc}", location=url
        ) from exc

    return response.text


def _load_from_file(path: str) -> str:
    """Read a descriptor from the local filesystem.

    Raises:
        UnreachableSourceError: If the file does not exist or cannot be read.
    """
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise UnreachableSourceError("Descriptor file not found", location=path)

    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise UnreachableSourceError(
            f"Failed to read descriptor file: {exc}", location=path
        ) from exc
