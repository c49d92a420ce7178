from urllib.parse import quote_plus, unquote_plus, urlunsplit

from reflectscan.core.models import ParsedTarget


def mutated_query(query: str, key: str, value: str) -> str:
    """Set *key* to *value* in a raw query string.

    The first occurrence of *key* is replaced in place, later duplicates
    are dropped and every other segment keeps its original encoding.
    A key absent from *query* is appended.
    """
    encoded = f"{quote_plus(key)}={quote_plus(value)}"
    segments = []
    replaced = False
    for segment in query.split("&"):
        if not segment:
            continue
        if unquote_plus(segment.partition("=")[0]) == key:
            if not replaced:
                segments.append(encoded)
                replaced = True
            continue
        segments.append(segment)
    if not replaced:
        segments.append(encoded)
    return "&".join(segments)


def inject(target: ParsedTarget, key: str, decoded_value: str, payload: str) -> str:
    """Return *target*'s URL with *key* set to ``decoded_value + payload``."""
    query = mutated_query(target.query, key, decoded_value + payload)
    return urlunsplit((target.scheme, target.netloc, target.path, query, target.fragment))
