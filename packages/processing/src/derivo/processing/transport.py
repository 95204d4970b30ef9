"""HTTP 传输层 -- RESOLVED 模式下向处理服务发起 GET

HttpxTransport 持有一个共享的 httpx.AsyncClient（每个服务实例一个，不按请求创建），
可被多个调用方并发使用。不跟随重定向：303 的 Location 由 ResultResolver 读取。
"""

from typing import Protocol
from urllib.parse import urlsplit

import httpx
import structlog
from pydantic import BaseModel, Field

from .config import ProcessingConfig
from .exceptions import InternalFaultError, TransportError

log = structlog.get_logger()


class TransportResponse(BaseModel):
    """GET 响应摘要"""

    status_code: int = Field(description="HTTP 状态码")
    location: str | None = Field(default=None, description="Location 响应头（绝对 URL）")


def _absolute_location(request_url: httpx.URL, location: str | None) -> str | None:
    """把 Location 解析为绝对 URL；无法解析时返回 None

    相对地址按请求 URL 解析。httpx 会对非法 host（如 "http://[bad"）做百分号转义而非报错，
    因此先用 urlsplit 做严格检查。
    """
    if not location:
        return None
    try:
        urlsplit(location)
        absolute = request_url.join(location)
    except (ValueError, httpx.InvalidURL):
        log.warning("processing_invalid_location", location=location)
        return None
    if not absolute.scheme or not absolute.host:
        log.warning("processing_invalid_location", location=location)
        return None
    return str(absolute)


class Transport(Protocol):
    """传输接口"""

    async def get(self, url: str) -> TransportResponse:
        """发起 GET；连接失败时抛出 TransportError"""
        ...


class HttpxTransport:
    """基于 httpx.AsyncClient 的传输实现"""

    def __init__(
        self,
        timeout_s: float = 30.0,
        max_connections: int = 20,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            timeout_s: 请求超时（秒）
            max_connections: 连接池上限
            client: 外部提供的 AsyncClient；为 None 时内部创建并负责关闭
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_connections),
            follow_redirects=False,
        )

    @classmethod
    def from_config(cls, config: ProcessingConfig) -> "HttpxTransport":
        return cls(timeout_s=config.timeout_s, max_connections=config.max_connections)

    async def get(self, url: str) -> TransportResponse:
        try:
            resp = await self._client.get(url, follow_redirects=False)
        except httpx.InvalidURL as e:
            raise InternalFaultError(f"非法请求 URL: {url}") from e
        except httpx.RequestError as e:
            # 连接失败、超时，以及响应体解码失败（DecodingError）等
            raise TransportError(url=url, original_error=e) from e

        location = _absolute_location(resp.request.url, resp.headers.get("location"))

        log.debug("processing_http_get", url=url, status_code=resp.status_code)
        return TransportResponse(status_code=resp.status_code, location=location)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
