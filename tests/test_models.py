"""Tests for formpost.models module."""

from formpost.models import Response


class TestResponse:
    """Tests for the Response class."""

    def test_response_basic_attributes(self, sample_response):
        """Test basic response attributes."""
        assert sample_response.status_code == 200
        assert sample_response.reason == "OK"
        assert sample_response.http_version == "1.1"
        assert sample_response.content == b'{"key":"val"}'
        assert sample_response.ok is True

    def test_header_lookup_case_insensitive(self, sample_response):
        """Test header() ignores name case."""
        assert sample_response.header("content-type") == "application/json"
        assert sample_response.header("CONTENT-LENGTH") == "13"

    def test_header_missing_returns_default(self, sample_response):
        """Test absent headers fall back to the default."""
        assert sample_response.header("x-missing") is None
        assert sample_response.header("x-missing", "") == ""

    def test_repeated_header_last_value_wins(self):
        """Test a repeated header returns its last value and keeps wire order."""
        resp = Response(200, "OK", [("X-Header", "first"), ("x-header", "second")], b"")
        assert resp.header("X-Header") == "second"
        assert resp.headers == [("X-Header", "first"), ("x-header", "second")]

    def test_error_status_not_ok(self):
        """Test 4xx and 5xx are not ok."""
        assert Response(404, "Not Found", [], b"").ok is False
        assert Response(503, "Unavailable", [], b"").ok is False
        assert Response(302, "Found", [], b"").ok is True

    def test_repr(self, sample_response):
        """Test repr shows status and size."""
        assert repr(sample_response) == "<Response [200] 13 bytes>"
