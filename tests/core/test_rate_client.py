from __future__ import annotations

import io
import json
from decimal import Decimal
import http.client
import socket
from urllib import error

import pytest

from recruitfees import rates as rates_module
from recruitfees.rates import HTTPRateClient


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


def fake_urlopen(payload):
    def _urlopen(req, timeout):
        _urlopen.requests.append((req.full_url, timeout))
        if isinstance(payload, bytes):
            return FakeResponse(payload)
        body = payload if isinstance(payload, str) else json.dumps(payload)
        return FakeResponse(body.encode("utf-8"))

    _urlopen.requests = []
    return _urlopen


def test_fetch_rebases_usd_quotes(monkeypatch: pytest.MonkeyPatch):
    opener = fake_urlopen({"result": "success", "rates": {"USD": 1, "UGX": 3750, "EUR": 0.9375}})
    monkeypatch.setattr(rates_module.request, "urlopen", opener)

    table = HTTPRateClient("http://rates.test/latest/USD", timeout=2.0).fetch()

    assert opener.requests == [("http://rates.test/latest/USD", 2.0)]
    assert table is not None
    assert table.base_currency == "UGX"
    assert table["USD"] == Decimal("3750")
    assert table["EUR"] == Decimal("4000")


@pytest.mark.parametrize(
    "payload",
    [
        {"result": "error", "error-type": "quota-reached"},
        {"result": "success", "rates": {"EUR": 0.9}},
        {"result": "success", "rates": {"UGX": 0}},
        "not json",
        b"\xff\xfe\xfa",
    ],
)
def test_fetch_returns_none_on_unusable_payload(monkeypatch: pytest.MonkeyPatch, payload):
    monkeypatch.setattr(rates_module.request, "urlopen", fake_urlopen(payload))

    assert HTTPRateClient().fetch() is None


def test_fetch_returns_none_on_network_error(monkeypatch: pytest.MonkeyPatch):
    def failing(req, timeout):
        raise error.URLError("offline")

    monkeypatch.setattr(rates_module.request, "urlopen", failing)

    assert HTTPRateClient().fetch() is None


@pytest.mark.parametrize(
    "exc",
    [
        http.client.RemoteDisconnected("Remote end closed connection without response"),
        http.client.IncompleteRead(b"{\"result\""),
        ConnectionResetError(104, "Connection reset by peer"),
        socket.timeout("timed out"),
    ],
)
def test_fetch_returns_none_on_broken_connection(monkeypatch: pytest.MonkeyPatch, exc):
    def failing(req, timeout):
        raise exc

    monkeypatch.setattr(rates_module.request, "urlopen", failing)

    assert HTTPRateClient().fetch() is None
