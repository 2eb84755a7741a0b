from hbaserpc.messages import RequestHeader, RPCTInfo
from hbaserpc.observability import RequestTracePropagator


def test_get_without_header_is_empty():
    assert RequestTracePropagator().get("traceparent") == ""


def test_set_without_header_is_ignored():
    propagator = RequestTracePropagator()
    propagator.set("traceparent", "abc")
    assert propagator.request_header is None
    assert propagator.keys() == []


def test_set_creates_trace_info():
    header = RequestHeader()
    propagator = RequestTracePropagator(header)
    propagator.set("traceparent", "abc")
    assert header.trace_info is not None
    assert header.trace_info.headers == {"traceparent": "abc"}
    assert propagator.get("traceparent") == "abc"


def test_get_missing_key_is_empty():
    header = RequestHeader(trace_info=RPCTInfo(headers={"a": "1"}))
    assert RequestTracePropagator(header).get("b") == ""


def test_keys_lists_all_headers():
    header = RequestHeader()
    propagator = RequestTracePropagator(header)
    propagator.set("a", "1")
    propagator.set("b", "2")
    assert sorted(propagator.keys()) == ["a", "b"]


def test_none_headers_map():
    header = RequestHeader(trace_info=RPCTInfo(headers=None))
    propagator = RequestTracePropagator(header)
    assert propagator.keys() == []
    assert propagator.get("a") == ""
    propagator.set("a", "1")
    assert propagator.get("a") == "1"


def test_overwrite_value():
    header = RequestHeader()
    propagator = RequestTracePropagator(header)
    propagator.set("k", "old")
    propagator.set("k", "new")
    assert propagator.get("k") == "new"
    assert propagator.keys() == ["k"]