"""Tests for yt_search.core.errors."""

import httpx
import pytest

from yt_search.core.errors import (
    ErrorCode,
    PageAdvanceError,
    YtSearchError,
    classify_transport_error,
    unexpected_errors,
)


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://www.youtube.com/results")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"status {status}", request=request, response=response)


class TestYtSearchError:
    def test_fields(self):
        err = YtSearchError(ErrorCode.NO_RESULTS, "nothing", {"query": "x"})
        assert err.code == ErrorCode.NO_RESULTS
        assert err.message == "nothing"
        assert err.metadata == {"query": "x"}

    def test_str(self):
        assert str(YtSearchError(ErrorCode.RATE_LIMIT, "slow down")) == "RATE_LIMIT: slow down"

    def test_code_from_string(self):
        assert YtSearchError("PARSE_ERROR", "bad").code is ErrorCode.PARSE_ERROR

    def test_metadata_defaults_to_empty(self):
        assert YtSearchError(ErrorCode.UNKNOWN, "x").metadata == {}

    def test_page_advance_is_runtime_error(self):
        assert issubclass(PageAdvanceError, RuntimeError)


class TestClassifyTransportError:
    def test_connect_error(self):
        exc = httpx.ConnectError("refused")
        err = classify_transport_error(exc, {"url": "u"})
        assert err.code == ErrorCode.NETWORK_UNAVAILABLE
        assert err.metadata["original_error"] is exc
        assert err.metadata["url"] == "u"

    def test_timeout(self):
        err = classify_transport_error(httpx.ReadTimeout("slow"), {})
        assert err.code == ErrorCode.NETWORK_UNAVAILABLE

    def test_rate_limit(self):
        err = classify_transport_error(_status_error(429), {})
        assert err.code == ErrorCode.RATE_LIMIT
        assert err.metadata["status"] == 429

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_server_error(self, status):
        assert classify_transport_error(_status_error(status), {}).code == ErrorCode.YOUTUBE_UNAVAILABLE

    def test_other_status(self):
        assert classify_transport_error(_status_error(404), {}).code == ErrorCode.UNKNOWN

    def test_unrelated_exception(self):
        assert classify_transport_error(ValueError("x"), {}).code == ErrorCode.UNKNOWN


class TestUnexpectedErrors:
    def test_wraps_plain_exception(self):
        with pytest.raises(YtSearchError) as exc_info:
            with unexpected_errors("search", {"query": "q"}):
                raise KeyError("boom")
        err = exc_info.value
        assert err.code == ErrorCode.UNKNOWN
        assert err.metadata["query"] == "q"
        assert isinstance(err.metadata["original_error"], KeyError)
        assert isinstance(err.__cause__, KeyError)

    def test_passes_through_yt_search_error(self):
        original = YtSearchError(ErrorCode.NO_RESULTS, "none")
        with pytest.raises(YtSearchError) as exc_info:
            with unexpected_errors("search", {}):
                raise original
        assert exc_info.value is original

    def test_no_error(self):
        with unexpected_errors("search", {}):
            value = 1
        assert value == 1
