"""Exception taxonomy for the scan pipeline.

Only ConfigError is fatal; everything else is scoped to a single URL
(or a single parameter, for DecodeError) and is reported, not raised
past the worker.
"""


class ScanError(Exception):
    """Base class for every scanner error."""


class ConfigError(ScanError):
    """Invalid settings; aborts before any request is sent."""


class ParseError(ScanError):
    """The input line is not a usable URL."""


class NoParametersError(ScanError):
    """The URL carries no query parameters. Informational."""


class BuildError(ScanError):
    """The outbound request could not be built."""


class UnsupportedEncoding(BuildError):
    """Requested body encoding has no implementation (xml)."""


class NetworkError(ScanError):
    """Transport failure, timeout or unreadable response."""


class DecodeError(ScanError):
    """A query value has malformed percent-encoding."""


class SinkWriteError(ScanError):
    """Writing an injected URL to the output file failed."""
