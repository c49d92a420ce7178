from typing import List, Optional

import httpx

from reflectscan.checkers.reflection import Reflection
from reflectscan.core.errors import (
    BuildError, DecodeError, NetworkError, NoParametersError, ParseError, SinkWriteError,
)
from reflectscan.core.injector import inject
from reflectscan.core.models import OutboundRequest, ParsedTarget, ScanConfig, ScanFinding
from reflectscan.parsers import request as request_builder
from reflectscan.parsers.url import decode_value, extract, require_parameters
from reflectscan.reporters.output import OutputSink


class Engine:
    """
    Runs one URL at a time through the scan pipeline:
    extract -> build -> send -> detect -> inject -> report.

    The client, config and sink are shared by every worker; nothing
    here holds per-URL state between calls to process().
    """

    def __init__(self, config: ScanConfig, logger=None, sink: Optional[OutputSink] = None,
                 client: Optional[httpx.Client] = None):
        self.name = "ReflectScan"
        self.version = "1.0.0"
        self.config = config
        self.logger = logger
        self.sink = sink
        self.checker = Reflection()
        self.client = client or httpx.Client(
            verify=False, proxy=config.proxy, follow_redirects=True, timeout=config.timeout)

    def close(self):
        self.client.close()

    def send(self, outbound: OutboundRequest) -> httpx.Response:
        try:
            return self.client.request(method=outbound.method, url=outbound.url,
                                       headers=outbound.headers, content=outbound.body)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(
                f"Error sending {outbound.method} request to URL {outbound.url}: {exc}") from exc

    def process(self, url: str) -> List[ScanFinding]:
        """Scan one URL. Per-URL errors are reported here and never raised."""
        try:
            target = require_parameters(extract(url))
            outbound = request_builder.build(self.config, target)
            if self.logger:
                self.logger.debug(f"→ {outbound.method} {outbound.url}")
            resp = self.send(outbound)
        except NoParametersError as exc:
            if self.logger:
                self.logger.info(str(exc))
            return []
        except (ParseError, BuildError, NetworkError) as exc:
            if self.logger:
                self.logger.error(str(exc))
            return []

        body = resp.text or ""
        return [f for f in (self._check_key(target, key, body, resp.status_code)
                            for key in target.query_keys) if f is not None]

    def _check_key(self, target: ParsedTarget, key: str, body: str,
                   status_code: int) -> Optional[ScanFinding]:
        raw = target.first_raw(key)
        try:
            value = decode_value(raw)
        except DecodeError as exc:
            if self.logger:
                self.logger.warn(f"{exc} (parameter '{key}' of {target.url})")
            return None

        if not value:
            if self.logger:
                self.logger.info(
                    f"Query parameter '{key}' has an empty value in {target.url}, skipped")
            return ScanFinding(url=target.url, key=key, decoded_value=value,
                               reflected=False, status_code=status_code)

        if not self.checker.detect(body, value):
            finding = ScanFinding(url=target.url, key=key, decoded_value=value,
                                  reflected=False, status_code=status_code)
            if self.logger:
                self.logger.fail(str(finding))
            return finding

        payload = self.config.payload
        finding = ScanFinding(url=target.url, key=key, decoded_value=value, reflected=True,
                              injected_url=inject(target, key, value, payload),
                              status_code=status_code)
        if self.logger:
            self.logger.reflected(str(finding), payload, status_code)
            self.logger.debug(f"  injected: {finding.injected_url}")
        if self.sink is not None:
            try:
                self.sink.write_line(finding.injected_url)
            except SinkWriteError as exc:
                if self.logger:
                    self.logger.error(str(exc))
        return finding
