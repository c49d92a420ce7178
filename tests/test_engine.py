import io
import json

import httpx

from reflectscan.reporters.output import OutputSink


def test_reflected_and_missing_values(make_engine, body_handler, capsys):
    engine = make_engine(body_handler("hello world"), payload="<x>")
    findings = engine.process("http://x/?q=world&r=xyz")

    by_key = {f.key: f for f in findings}
    assert by_key["q"].reflected
    assert by_key["q"].injected_url == "http://x/?q=world%3Cx%3E&r=xyz"
    assert by_key["q"].status_code == 200
    assert not by_key["r"].reflected
    assert by_key["r"].injected_url is None

    out = capsys.readouterr().out
    assert "Query parameter 'q' with value 'world' reflected in response body of http://x/?q=world&r=xyz, replaced with payload" in out
    assert "Query parameter 'r' with value 'xyz' not found in response body of http://x/?q=world&r=xyz" in out


def test_decoded_value_is_compared(make_engine, body_handler):
    engine = make_engine(body_handler("<p>hello world</p>"))
    [finding] = engine.process("http://x/?q=hello%20world")
    assert finding.decoded_value == "hello world"
    assert finding.reflected


def test_no_parameters_is_reported_not_sent(make_engine, body_handler, capsys):
    sent = []
    engine = make_engine(body_handler("anything", sent))
    assert engine.process("http://x/about") == []
    assert sent == []
    assert "No query parameters found in URL http://x/about" in capsys.readouterr().out


def test_parse_error_is_reported(make_engine, body_handler, capsys):
    sent = []
    engine = make_engine(body_handler("anything", sent))
    assert engine.process("http://[::1/?a=1") == []
    assert sent == []
    out = capsys.readouterr().out
    assert "[ERROR]" in out
    assert "http://[::1/?a=1" in out


def test_post_json_request_shape(make_engine, body_handler):
    sent = []
    engine = make_engine(body_handler("nothing", sent), method="POST", body_type="json")
    engine.process("http://x/?a=1&b=2")

    [request] = sent
    assert request.method == "POST"
    assert str(request.url) == "http://x/"
    assert request.content == b'{"a":"1","b":"2"}'
    assert request.headers["Content-Type"] == "application/json"


def test_patch_form_with_keep(make_engine, body_handler):
    sent = []
    engine = make_engine(body_handler("nothing", sent), method="PATCH", keep=True)
    engine.process("http://x/p?a=1&b=two")

    [request] = sent
    assert request.method == "PATCH"
    assert str(request.url) == "http://x/p?a=1&b=two"
    assert request.content == b"a=1&b=two"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_custom_headers_are_sent(make_engine, body_handler):
    sent = []
    engine = make_engine(body_handler("nothing", sent), headers="X-Api-Key: k1, Cookie: sid=abc, junk")
    engine.process("http://x/?a=1")
    [request] = sent
    assert request.headers["X-Api-Key"] == "k1"
    assert request.headers["Cookie"] == "sid=abc"


def test_xml_sends_nothing(make_engine, body_handler, capsys):
    sent = []
    engine = make_engine(body_handler("1", sent), method="POST", body_type="xml")
    assert engine.process("http://x/?a=1") == []
    assert sent == []
    assert "XML conversion is not implemented." in capsys.readouterr().out


def test_network_error_is_isolated(make_engine, capsys):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    engine = make_engine(handler)
    assert engine.process("http://down.example/?a=1") == []
    out = capsys.readouterr().out
    assert "Error sending GET request to URL http://down.example/?a=1" in out
    assert "connection refused" in out


def test_timeout_is_a_network_error(make_engine, capsys):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    engine = make_engine(handler)
    assert engine.process("http://slow.example/?a=1") == []
    assert "timed out" in capsys.readouterr().out


def test_bad_encoding_skips_only_that_key(make_engine, body_handler, capsys):
    engine = make_engine(body_handler("hello world"))
    findings = engine.process("http://x/?a=%zz&b=world")
    assert [(f.key, f.reflected) for f in findings] == [("b", True)]
    assert "Error decoding URL-encoded value '%zz'" in capsys.readouterr().out


def test_empty_value_never_reflects(make_engine, body_handler, capsys):
    engine = make_engine(body_handler("hello world"))
    findings = engine.process("http://x/?q=&r=world")
    by_key = {f.key: f for f in findings}
    assert not by_key["q"].reflected
    assert by_key["r"].reflected
    assert "Query parameter 'q' has an empty value in http://x/?q=&r=world, skipped" in capsys.readouterr().out


def test_every_reflected_key_gets_an_independent_url(make_engine, body_handler):
    engine = make_engine(body_handler("alpha beta"), payload="!")
    findings = engine.process("http://x/?a=alpha&b=beta")
    assert sorted(f.injected_url for f in findings) == [
        "http://x/?a=alpha%21&b=beta",
        "http://x/?a=alpha&b=beta%21",
    ]


def test_reflected_urls_go_to_the_sink(make_engine, body_handler):
    stream = io.StringIO()
    engine = make_engine(body_handler("hello world"), sink=OutputSink(stream), payload="P")
    engine.process("http://x/?q=world&r=nope")
    assert stream.getvalue() == "http://x/?q=worldP&r=nope\n"


def test_sink_failure_does_not_stop_the_scan(make_engine, body_handler, capsys):
    stream = io.StringIO()
    stream.close()
    engine = make_engine(body_handler("hello world"), sink=OutputSink(stream, "closed.txt"))
    [finding] = engine.process("http://x/?q=world")
    assert finding.reflected
    assert "Error writing to file closed.txt" in capsys.readouterr().out


def test_status_code_is_recorded(make_engine, body_handler):
    engine = make_engine(body_handler("<h1>404 not found: ghost</h1>", status=404))
    [finding] = engine.process("http://x/?page=ghost")
    assert finding.reflected
    assert finding.status_code == 404


def test_json_response_bodies_are_searched(make_engine, body_handler):
    engine = make_engine(body_handler(json.dumps({"echo": "needle"})))
    [finding] = engine.process("http://x/?q=needle")
    assert finding.reflected
