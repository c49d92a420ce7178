"""URL parameter extraction and strict value decoding."""

import re
from typing import List, Tuple
from urllib.parse import unquote_plus, urlsplit

from reflectscan.core.errors import DecodeError, NoParametersError, ParseError
from reflectscan.core.models import ParsedTarget

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def split_query(query: str) -> List[Tuple[str, str]]:
    """Split a raw query string into (decoded key, raw value) pairs.

    Blank values are kept (``?a=`` gives ``("a", "")``), empty segments
    (``a=1&&b=2``) are dropped.
    """
    pairs = []
    for segment in query.split("&"):
        if not segment:
            continue
        raw_key, _, raw_value = segment.partition("=")
        key = unquote_plus(raw_key)
        if not key:
            continue
        pairs.append((key, raw_value))
    return pairs


def extract(url: str) -> ParsedTarget:
    """Parse *url* into a ParsedTarget; raise ParseError if unusable."""
    try:
        parts = urlsplit(url.strip())
        parts.port  # validates the port
    except ValueError as exc:
        raise ParseError(f"Error parsing URL {url}: {exc}") from exc

    if parts.scheme.lower() not in ("http", "https"):
        raise ParseError(f"Error parsing URL {url}: unsupported scheme {parts.scheme!r}")
    if not parts.netloc:
        raise ParseError(f"Error parsing URL {url}: missing host")

    return ParsedTarget(
        url=url.strip(),
        scheme=parts.scheme,
        netloc=parts.netloc,
        path=parts.path,
        query=parts.query,
        fragment=parts.fragment,
        pairs=split_query(parts.query),
    )


def require_parameters(target: ParsedTarget) -> ParsedTarget:
    if not target.pairs:
        raise NoParametersError(f"No query parameters found in URL {target.url}")
    return target


def decode_value(raw: str) -> str:
    """Percent-decode a raw query value, ``+`` meaning space.

    Unlike ``unquote_plus`` this refuses malformed escapes and byte
    sequences that are not UTF-8.
    """
    bad = _BAD_ESCAPE.search(raw)
    if bad:
        raise DecodeError(
            f"Error decoding URL-encoded value '{raw}': invalid escape "
            f"{raw[bad.start():bad.start() + 3]!r}")
    try:
        return unquote_plus(raw, errors="strict")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Error decoding URL-encoded value '{raw}': {exc}") from exc
