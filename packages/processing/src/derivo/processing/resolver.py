"""ResultResolver -- 将请求 URL 转为最终结果

两种模式，调用之间不保留状态：

    IMMEDIATE: Start -> Returned(请求 URL)，不发起网络请求
    RESOLVED:  Start -> Dispatched -> Returned(Location)  收到 303
                                   -> Failed(None)        其他状态码或传输失败

RESOLVED 模式下远端拒绝不抛异常，返回 None 并记录诊断日志；不做自动重试。
"""

import httpx
import structlog

from .exceptions import InternalFaultError, RemoteRejectedError, TransportError
from .models import ResolutionMode
from .transport import Transport

log = structlog.get_logger()

HTTP_SEE_OTHER = 303


def check_url_syntax(url: str) -> str:
    """确认 URL 语法合法（含 scheme 与 host），返回原字符串

    Raises:
        InternalFaultError: URL 无法解析
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InternalFaultError(f"非法请求 URL: {url!r}") from e
    if not parsed.scheme or not parsed.host:
        raise InternalFaultError(f"非法请求 URL: {url!r}")
    return url


class ResultResolver:
    """结果解析器

    transport 仅在 RESOLVED 模式下使用，可为 None（仅支持 IMMEDIATE）。
    """

    def __init__(self, transport: Transport | None = None) -> None:
        self._transport = transport

    async def fetch_location(self, request_url: str) -> str:
        """请求处理服务并返回 303 Location

        Raises:
            RemoteRejectedError: 非 303 响应，或 303 缺少 Location
            TransportError: 处理服务不可达
            InternalFaultError: 未配置 transport
        """
        if self._transport is None:
            raise InternalFaultError("RESOLVED 模式需要配置 transport")

        response = await self._transport.get(request_url)
        if response.status_code != HTTP_SEE_OTHER or not response.location:
            raise RemoteRejectedError(request_url, response.status_code)
        return response.location

    async def resolve(self, request_url: str, mode: ResolutionMode) -> str | None:
        """按模式返回结果 URL

        Returns:
            IMMEDIATE: 请求 URL 本身
            RESOLVED: 真实资源 URL；失败时为 None（见诊断日志）
        """
        request_url = check_url_syntax(request_url)

        if mode == ResolutionMode.IMMEDIATE:
            return request_url

        try:
            location = await self.fetch_location(request_url)
        except RemoteRejectedError as e:
            log.warning(
                "processing_remote_rejected",
                url=request_url,
                status_code=e.status_code,
            )
            return None
        except TransportError as e:
            log.warning(
                "processing_transport_failed",
                url=request_url,
                error=str(e.original_error),
                error_type=type(e.original_error).__name__,
            )
            return None

        log.info("processing_url_resolved", url=request_url, location=location)
        return location
