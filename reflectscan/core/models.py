"""Shared data models for the reflection scanner."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from reflectscan.core.errors import ConfigError
from reflectscan.parsers.headers import parse_custom_headers

METHODS = ("GET", "POST", "PATCH")
BODY_METHODS = ("POST", "PATCH")
ENCODINGS = ("form", "json", "xml")
DEFAULT_PAYLOAD = "'\"%00><h1>akira</h1>"
DEFAULT_WORKERS = 10


@dataclass(frozen=True)
class ScanConfig:
    """Read-only scan settings, shared by every worker."""
    method: str = "GET"
    keep_query_on_body: bool = False
    custom_headers: Tuple[Tuple[str, str], ...] = ()
    payload: str = DEFAULT_PAYLOAD
    body_encoding: str = "form"
    workers: int = DEFAULT_WORKERS
    timeout: float = 10.0
    proxy: Optional[str] = None

    @classmethod
    def from_options(cls, method: str = "GET", keep: bool = False, headers: str = "",
                     payload: str = DEFAULT_PAYLOAD, body_type: str = "form",
                     workers: int = DEFAULT_WORKERS, timeout: float = 10.0,
                     proxy: Optional[str] = None) -> "ScanConfig":
        if method not in METHODS:
            raise ConfigError(
                f"Invalid HTTP method {method!r}. Supported methods: {', '.join(METHODS)}.")
        if body_type not in ENCODINGS:
            raise ConfigError(
                f"Invalid content type {body_type!r}. Supported types: {', '.join(ENCODINGS)}.")
        if workers < 1:
            raise ConfigError(f"Worker count must be at least 1, got {workers}.")
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}.")
        return cls(
            method=method,
            keep_query_on_body=keep,
            custom_headers=parse_custom_headers(headers),
            payload=payload,
            body_encoding=body_type,
            workers=workers,
            timeout=timeout,
            proxy=proxy or None,
        )

    @property
    def sends_body(self) -> bool:
        return self.method in BODY_METHODS


@dataclass
class ParsedTarget:
    """A scanned URL split into its base and raw query pairs."""
    url: str
    scheme: str
    netloc: str
    path: str
    query: str = ""
    fragment: str = ""
    pairs: List[Tuple[str, str]] = field(default_factory=list)  # (key, raw value)
    query_params: Dict[str, List[str]] = field(init=False, repr=False)

    def __post_init__(self):
        self.query_params = {}
        for key, raw in self.pairs:
            self.query_params.setdefault(key, []).append(raw)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.netloc}{self.path}"

    @property
    def query_keys(self) -> List[str]:
        return list(self.query_params)

    def first_raw(self, key: str) -> str:
        return self.query_params[key][0]


@dataclass
class OutboundRequest:
    """A fully formed request, ready for the shared client."""
    method: str
    url: str
    body: Optional[bytes] = None
    content_type: Optional[str] = None
    headers: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class ScanFinding:
    """Result of the reflection check for one (URL, parameter) pair."""
    url: str
    key: str
    decoded_value: str
    reflected: bool
    injected_url: Optional[str] = None
    status_code: int = 0

    def __str__(self):
        if self.reflected:
            return (f"Query parameter '{self.key}' with value '{self.decoded_value}' "
                    f"reflected in response body of {self.url}")
        return (f"Query parameter '{self.key}' with value '{self.decoded_value}' "
                f"not found in response body of {self.url}")


@dataclass
class ScanSummary:
    """Totals gathered once every worker has drained. Findings themselves are not kept."""
    processed: int = 0
    reflected: int = 0
    input_error: Optional[str] = None
