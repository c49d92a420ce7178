from typing import Tuple


def parse_custom_headers(raw: str) -> Tuple[Tuple[str, str], ...]:
    """
    "X-A: 1, Cookie: sid=abc"  ->  (("X-A", "1"), ("Cookie", "sid=abc"))

    Entries without a colon, or with an empty name, are dropped.
    """
    headers = []
    for entry in (raw or "").split(","):
        if ":" not in entry:
            continue
        k, v = entry.split(":", 1)
        k = k.strip()
        if k:
            headers.append((k, v.strip()))
    return tuple(headers)
