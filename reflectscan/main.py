import argparse
import io
import sys
from typing import Iterable, Iterator, Optional, TextIO

from reflectscan.core.engine import Engine
from reflectscan.core.errors import ConfigError
from reflectscan.core.models import DEFAULT_PAYLOAD, DEFAULT_WORKERS, ScanConfig
from reflectscan.core.pool import ScanWorkerPool
from reflectscan.reporters.console import Log
from reflectscan.reporters.output import open_sink


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Reflected query parameter scanner (reads URLs from stdin)")
    p.add_argument("-method", "--method", default="GET",
                   help="HTTP method to use (GET, POST, PATCH)")
    p.add_argument("-keep", "--keep", action="store_true",
                   help="Keep query parameters in the URL when sending POST/PATCH requests")
    p.add_argument("-H", "--headers", default="",
                   help="Custom headers, comma-separated (ej: 'X-A: 1, Cookie: a=b')")
    p.add_argument("-o", "--output", help="File to write injected URLs to")
    p.add_argument("-py", "--payload", default=DEFAULT_PAYLOAD,
                   help="Payload appended to reflected values")
    p.add_argument("-type", "--type", dest="body_type", default="form",
                   help="Body encoding for POST/PATCH requests (form, json, xml)")
    p.add_argument("-t", "--threads", type=int, default=DEFAULT_WORKERS,
                   help="Number of concurrent workers")
    p.add_argument("-i", "--input", help="Read URLs from a file instead of stdin")
    p.add_argument("--proxy", help="Proxy (ej: http://127.0.0.1:8080)")
    p.add_argument("--timeout", type=float, default=10.0,
                   help="Request timeout in seconds")
    p.add_argument("-v", "--verbose", action="count", default=1,
                   help="-v, -vv")
    return p


def iter_targets(lines: Iterable[str]) -> Iterator[str]:
    """Yield stripped, non-blank lines."""
    for line in lines:
        line = line.strip()
        if line:
            yield line


def open_input(path: Optional[str]) -> TextIO:
    """The URL list as text; undecodable bytes become U+FFFD so one bad line cannot end the scan."""
    if path:
        return open(path, "r", encoding="utf-8", errors="replace")
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="replace")
    return sys.stdin


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    log = Log(verbose=args.verbose)

    try:
        config = ScanConfig.from_options(
            method=args.method, keep=args.keep, headers=args.headers,
            payload=args.payload, body_type=args.body_type, workers=args.threads,
            timeout=args.timeout, proxy=args.proxy)
        stream = open_input(args.input)
    except ConfigError as exc:
        log.error(str(exc))
        return 1
    except OSError as exc:
        log.error(f"Error opening input file {args.input}: {exc}")
        return 1

    try:
        sink = open_sink(args.output)
    except ConfigError as exc:
        log.error(str(exc))
        if stream is not sys.stdin:
            stream.close()
        return 1

    engine = Engine(config, logger=log, sink=sink)
    log.debug(f"{engine.name} {engine.version}: {config.method} "
              f"({config.body_encoding}), {config.workers} workers")
    try:
        summary = ScanWorkerPool(engine, workers=config.workers, logger=log).run(
            iter_targets(stream))
    finally:
        engine.close()
        if sink is not None:
            sink.close()
        if stream is not sys.stdin:
            stream.close()

    log.ok(f"Scan complete: {summary.processed} URLs processed, "
           f"{summary.reflected} reflected parameters")
    return 0


if __name__ == "__main__":
    sys.exit(main())
