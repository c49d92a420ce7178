from typing import Tuple
from urllib.parse import unquote_plus, urlencode
import json

from reflectscan.core.errors import BuildError, UnsupportedEncoding
from reflectscan.core.models import OutboundRequest, ParsedTarget, ScanConfig

CONTENT_TYPES = {
    "form": "application/x-www-form-urlencoded",
    "json": "application/json",
}


def body_params(target: ParsedTarget) -> dict:
    """First value per key, decoded, in query order."""
    return {key: unquote_plus(values[0]) for key, values in target.query_params.items()}


def encode_body(encoding: str, params: dict) -> Tuple[bytes, str]:
    if encoding == "json":
        return json.dumps(params, separators=(",", ":")).encode("utf-8"), CONTENT_TYPES["json"]
    if encoding == "xml":
        raise UnsupportedEncoding("XML conversion is not implemented.")
    if encoding == "form":
        return urlencode(list(params.items())).encode("ascii"), CONTENT_TYPES["form"]
    raise BuildError(f"Unknown body encoding {encoding!r}")


def build(config: ScanConfig, target: ParsedTarget) -> OutboundRequest:
    """Turn a parsed target into the request the scan sends for it."""
    headers = list(config.custom_headers)

    if not config.sends_body:
        return OutboundRequest(method=config.method, url=target.url, headers=headers)

    url = target.url if config.keep_query_on_body else target.base_url
    try:
        body, content_type = encode_body(config.body_encoding, body_params(target))
    except UnsupportedEncoding as exc:
        raise UnsupportedEncoding(
            f"{exc} Request to URL {target.url} not sent.") from exc

    # content type from the body encoding wins over a custom one
    headers = [(k, v) for k, v in headers if k.lower() != "content-type"]
    headers.append(("Content-Type", content_type))
    return OutboundRequest(method=config.method, url=url, body=body,
                           content_type=content_type, headers=headers)
