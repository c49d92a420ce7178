import httpx
import pytest

from reflectscan.core.engine import Engine
from reflectscan.core.models import ScanConfig
from reflectscan.reporters.console import Log
from vuln_lab.app import app as lab_app


@pytest.fixture
def log():
    return Log(verbose=2)


@pytest.fixture
def lab_client():
    client = httpx.Client(transport=httpx.WSGITransport(app=lab_app))
    yield client
    client.close()


@pytest.fixture
def make_engine(log):
    """Engine factory over an in-process transport; records sent requests."""
    engines = []

    def _make(handler_or_client, sink=None, **options):
        config = ScanConfig.from_options(**options)
        if isinstance(handler_or_client, httpx.Client):
            client = handler_or_client
        else:
            client = httpx.Client(transport=httpx.MockTransport(handler_or_client))
        engine = Engine(config, logger=log, sink=sink, client=client)
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.close()


def make_body_handler(text, sent=None, status=200):
    """MockTransport handler answering every request with *text*."""
    def handler(request: httpx.Request) -> httpx.Response:
        if sent is not None:
            sent.append(request)
        return httpx.Response(status, text=text)
    return handler


@pytest.fixture
def body_handler():
    return make_body_handler
