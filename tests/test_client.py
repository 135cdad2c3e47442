"""Tests for the HTTP client using canned ``requests`` responses."""
import json

import pytest
import requests

from sales_console.api.client import SalesApiClient, SalesApiError

from conftest import SAMPLE_SALES, SAMPLE_STATS, run


def _response(status: int = 200, body: bytes = b"", reason: str = "OK") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body
    return response


class StubSession:
    """Records GET calls and answers with a prepared response or raises."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

    def close(self):
        pass


def test_list_sales_parses_sales_and_stats():
    body = json.dumps({"sales": SAMPLE_SALES, "stats": SAMPLE_STATS}).encode()
    session = StubSession(_response(body=body))
    client = SalesApiClient("http://sales.test/", timeout=5, session=session)

    page = run(client.list_sales({"status": "pending"}))

    assert len(page.sales) == len(SAMPLE_SALES)
    assert page.stats.total_orders == 4
    assert session.calls == [
        {"url": "http://sales.test/api/sales", "params": {"status": "pending"}, "timeout": 5}
    ]


def test_list_sales_raises_on_http_error():
    session = StubSession(_response(status=503, reason="Service Unavailable"))
    client = SalesApiClient("http://sales.test", session=session)

    with pytest.raises(SalesApiError) as excinfo:
        run(client.list_sales())

    assert str(excinfo.value) == "Failed to fetch sales data: Service Unavailable"
    assert excinfo.value.status_code == 503


def test_list_sales_rejects_malformed_json():
    session = StubSession(_response(body=b"<html>oops</html>"))
    client = SalesApiClient("http://sales.test", session=session)

    with pytest.raises(SalesApiError, match="malformed JSON"):
        run(client.list_sales())


def test_transport_errors_are_wrapped():
    session = StubSession(error=requests.ConnectionError("connection refused"))
    client = SalesApiClient("http://sales.test", session=session)

    with pytest.raises(SalesApiError) as excinfo:
        run(client.list_sales())

    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
    assert "connection refused" in str(excinfo.value)


def test_export_returns_binary_payload():
    session = StubSession(_response(body=b"id,total\nORD-001,156.50\n"))
    client = SalesApiClient("http://sales.test", session=session)

    payload = run(client.export_sales({"search": "john"}))

    assert payload.startswith(b"id,total")
    assert session.calls[0]["url"] == "http://sales.test/api/sales/export"
    assert session.calls[0]["params"] == {"search": "john"}


def test_export_raises_on_server_error():
    session = StubSession(_response(status=500, reason="Internal Server Error"))
    client = SalesApiClient("http://sales.test", session=session)

    with pytest.raises(SalesApiError, match="Export failed"):
        run(client.export_sales())
