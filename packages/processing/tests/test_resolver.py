"""ResultResolver 单元测试

验证 IMMEDIATE 不发起请求、RESOLVED 的 303 / 非 303 / 传输失败三种终态，
以及诊断日志。
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from derivo.processing.exceptions import (
    InternalFaultError,
    RemoteRejectedError,
    TransportError,
)
from derivo.processing.models import ResolutionMode
from derivo.processing.resolver import ResultResolver, check_url_syntax
from derivo.processing.transport import HttpxTransport, TransportResponse
from structlog.testing import capture_logs

REQUEST_URL = (
    "http://processing.test/process/generic/thumbnail"
    "?item=http%3A%2F%2Fx%2Fdoc%2F1&async=false&size=128"
)


def _transport(status_code: int = 303, location: str | None = "http://real/x.jpg"):
    transport = AsyncMock()
    transport.get = AsyncMock(
        return_value=TransportResponse(status_code=status_code, location=location)
    )
    return transport


class TestCheckUrlSyntax:
    """URL 语法检查"""

    def test_valid_url_returned_unchanged(self):
        assert check_url_syntax(REQUEST_URL) == REQUEST_URL

    @pytest.mark.parametrize("url", ["not a url", "/process/generic/thumbnail", ""])
    def test_invalid_url(self, url):
        with pytest.raises(InternalFaultError):
            check_url_syntax(url)


class TestImmediateMode:
    """IMMEDIATE 模式"""

    async def test_returns_request_url(self):
        transport = _transport()
        resolver = ResultResolver(transport)

        result = await resolver.resolve(REQUEST_URL, ResolutionMode.IMMEDIATE)

        assert result == REQUEST_URL
        assert transport.get.call_count == 0

    async def test_works_without_transport(self):
        resolver = ResultResolver()
        assert await resolver.resolve(REQUEST_URL, ResolutionMode.IMMEDIATE) == REQUEST_URL

    async def test_idempotent(self):
        resolver = ResultResolver(_transport())
        first = await resolver.resolve(REQUEST_URL, ResolutionMode.IMMEDIATE)
        second = await resolver.resolve(REQUEST_URL, ResolutionMode.IMMEDIATE)
        assert first == second


class TestResolvedMode:
    """RESOLVED 模式"""

    async def test_see_other_returns_location(self):
        transport = _transport(303, "http://real/x.jpg")
        resolver = ResultResolver(transport)

        result = await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert result == "http://real/x.jpg"
        transport.get.assert_awaited_once_with(REQUEST_URL)

    @pytest.mark.parametrize("status_code", [200, 302, 400, 404, 500])
    async def test_other_status_returns_none(self, status_code):
        resolver = ResultResolver(_transport(status_code, None))

        with capture_logs() as logs:
            result = await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert result is None
        rejected = [e for e in logs if e["event"] == "processing_remote_rejected"]
        assert len(rejected) == 1
        assert rejected[0]["status_code"] == status_code
        assert rejected[0]["log_level"] == "warning"

    async def test_see_other_without_location_returns_none(self):
        resolver = ResultResolver(_transport(303, None))
        assert await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED) is None

    async def test_transport_error_returns_none(self):
        transport = AsyncMock()
        transport.get = AsyncMock(
            side_effect=TransportError(REQUEST_URL, httpx.ConnectError("refused"))
        )
        resolver = ResultResolver(transport)

        with capture_logs() as logs:
            result = await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert result is None
        failed = [e for e in logs if e["event"] == "processing_transport_failed"]
        assert failed[0]["error_type"] == "ConnectError"

    async def test_undecodable_body_returns_none(self):
        """303 响应体解码失败时返回 None 而不是抛出"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                303,
                headers={"Location": "http://real/x.jpg", "Content-Encoding": "gzip"},
                content=b"not-gzip",
            )

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        resolver = ResultResolver(HttpxTransport(client=client))

        with capture_logs() as logs:
            result = await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert result is None
        failed = [e for e in logs if e["event"] == "processing_transport_failed"]
        assert failed[0]["error_type"] == "DecodingError"
        await client.aclose()

    async def test_malformed_location_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(303, headers={"Location": "http://[bad"})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        resolver = ResultResolver(HttpxTransport(client=client))

        with capture_logs() as logs:
            result = await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert result is None
        assert any(
            e["event"] == "processing_remote_rejected" and e["status_code"] == 303
            for e in logs
        )
        await client.aclose()

    async def test_no_retry(self):
        """失败后不重试"""
        transport = _transport(404, None)
        resolver = ResultResolver(transport)

        await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)

        assert transport.get.call_count == 1

    async def test_resolved_without_transport_is_internal_fault(self):
        resolver = ResultResolver()
        with pytest.raises(InternalFaultError):
            await resolver.resolve(REQUEST_URL, ResolutionMode.RESOLVED)


class TestFetchLocation:
    """fetch_location() 类型化失败"""

    async def test_raises_remote_rejected(self):
        resolver = ResultResolver(_transport(400, None))

        with pytest.raises(RemoteRejectedError) as exc_info:
            await resolver.fetch_location(REQUEST_URL)
        assert exc_info.value.status_code == 400
        assert exc_info.value.url == REQUEST_URL

    async def test_propagates_transport_error(self):
        transport = AsyncMock()
        transport.get = AsyncMock(
            side_effect=TransportError(REQUEST_URL, httpx.ConnectTimeout("timeout"))
        )
        resolver = ResultResolver(transport)

        with pytest.raises(TransportError):
            await resolver.fetch_location(REQUEST_URL)
