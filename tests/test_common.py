import httpx
import pytest

from src.core.exceptions import MalformedResponse, UpstreamError
from src.utils import common
from src.utils.common import http_get_json, http_post_json, mask_sensitive_data


@pytest.fixture
def mock_transport(monkeypatch):
    """httpx.AsyncClient가 MockTransport를 사용하도록 교체"""
    real_client = httpx.AsyncClient

    def install(handler):
        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(handler)
            return real_client(*args, **kwargs)

        monkeypatch.setattr(common.httpx, "AsyncClient", factory)

    return install


async def test_get_json_returns_payload(mock_transport):
    mock_transport(lambda request: httpx.Response(200, json=[{"lat": "1", "lon": "2"}]))
    assert await http_get_json("https://nominatim.test/search") == [{"lat": "1", "lon": "2"}]


async def test_post_json_http_error_becomes_upstream_error(mock_transport):
    mock_transport(lambda request: httpx.Response(503, text="overloaded"))

    with pytest.raises(UpstreamError) as excinfo:
        await http_post_json("https://gemini.test", json_body={})

    assert excinfo.value.status_code == 503
    assert excinfo.value.message == "503 - overloaded"


async def test_connection_error_becomes_upstream_error(mock_transport):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    mock_transport(handler)

    with pytest.raises(UpstreamError):
        await http_get_json("https://nominatim.test/search")


async def test_non_json_body_is_malformed(mock_transport):
    mock_transport(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(MalformedResponse):
        await http_get_json("https://nominatim.test/search")


def test_mask_sensitive_data():
    assert mask_sensitive_data("my_secret_key_12345") == "my" + "*" * 15 + "45"
    assert mask_sensitive_data("abc") == "****"
