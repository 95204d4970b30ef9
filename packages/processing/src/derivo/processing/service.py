"""ProcessingService -- 派生资源（缩略图、缩放图、视频截帧）URL 访问入口

流程: 校验（元数据） -> resolution token -> 请求 URL -> ResultResolver。
校验失败在任何网络请求之前同步抛出。
"""

import httpx
import structlog

from .config import ProcessingConfig, load_processing_config
from .lookup import MetadataLookup
from .models import (
    DEFAULT_TIME_FRACTION,
    AttachmentID,
    DocumentID,
    FixedAxis,
    OperationKind,
    ResolutionMode,
)
from .params import build_resolution_token, compose_request_url
from .resolver import ResultResolver
from .transport import HttpxTransport, Transport
from .validation import validate

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5


class ProcessingService:
    """处理服务客户端

    不执行任何图像/视频处理，只生成指向处理服务的地址或解析其重定向。
    """

    def __init__(
        self,
        config: ProcessingConfig,
        metadata: MetadataLookup,
        transport: Transport | None = None,
    ) -> None:
        """
        Args:
            config: 处理服务配置
            metadata: 元数据查询接口
            transport: RESOLVED 模式使用的传输层；None 时在首次 RESOLVED 调用时按 config
                创建 HttpxTransport
        """
        self._config = config
        self._metadata = metadata
        self._owns_transport = transport is None
        self._transport = transport
        self._resolver = ResultResolver(transport)

    @classmethod
    def from_env(cls, metadata: MetadataLookup) -> "ProcessingService":
        """从环境变量加载配置并创建实例"""
        return cls(load_processing_config(), metadata)

    @property
    def service_url(self) -> str:
        return self._config.service_base_url

    @property
    def config(self) -> ProcessingConfig:
        return self._config

    def _resolver_for(self, mode: ResolutionMode) -> ResultResolver:
        # 仅使用 IMMEDIATE 时不创建 HTTP 客户端
        if mode == ResolutionMode.RESOLVED and self._transport is None:
            self._transport = HttpxTransport.from_config(self._config)
            self._resolver = ResultResolver(self._transport)
        return self._resolver

    async def get_thumbnail_url(
        self,
        identifier: DocumentID | AttachmentID,
        size: int,
        mode: ResolutionMode = ResolutionMode.IMMEDIATE,
    ) -> str | None:
        """返回缩略图 URL（缩略图总是正方形）

        Args:
            identifier: 文档或附件标识（任意媒体类型）
            size: 边长像素，16 <= size <= 256
            mode: IMMEDIATE 直接返回请求 URL；RESOLVED 立即解析 303 重定向

        Returns:
            URL 字符串；RESOLVED 模式失败时为 None

        Raises:
            InvalidReferenceError / ResourceNotFoundError / InvalidArgumentError
        """
        await validate(self._metadata, OperationKind.THUMBNAIL, identifier, size)
        url = compose_request_url(
            self.service_url,
            OperationKind.THUMBNAIL,
            identifier.unique_resource_url,
            size,
        )
        return await self._resolver_for(mode).resolve(url, mode)

    async def get_image_url(
        self,
        identifier: DocumentID | AttachmentID,
        size: int,
        fixed: FixedAxis,
        mode: ResolutionMode = ResolutionMode.IMMEDIATE,
    ) -> str | None:
        """返回按比例缩放的图片 URL

        Args:
            identifier: 图片文档或附件标识
            size: 固定边的像素长度，> 0
            fixed: WIDTH 固定宽度 / HEIGHT 固定高度，另一边按原始比例计算
            mode: 解析模式

        Returns:
            URL 字符串；RESOLVED 模式失败时为 None
        """
        await validate(self._metadata, OperationKind.IMAGE, identifier, size, fixed=fixed)
        url = compose_request_url(
            self.service_url,
            OperationKind.IMAGE,
            identifier.unique_resource_url,
            build_resolution_token(size, fixed),
        )
        return await self._resolver_for(mode).resolve(url, mode)

    async def get_video_snapshot_url(
        self,
        identifier: DocumentID | AttachmentID,
        size: int,
        fixed: FixedAxis,
        time: float = DEFAULT_TIME_FRACTION,
        mode: ResolutionMode = ResolutionMode.IMMEDIATE,
    ) -> str | None:
        """返回视频截帧 URL

        Args:
            identifier: 视频文档或附件标识
            size: 固定边的像素长度，> 0
            fixed: 固定边
            time: 截帧时间点，占视频总时长的比例，0.0 <= time <= 1.0（默认 0.5）
            mode: 解析模式

        Returns:
            URL 字符串；RESOLVED 模式失败时为 None
        """
        await validate(
            self._metadata,
            OperationKind.VIDEO_SNAPSHOT,
            identifier,
            size,
            fixed=fixed,
            time_fraction=time,
        )
        url = compose_request_url(
            self.service_url,
            OperationKind.VIDEO_SNAPSHOT,
            identifier.unique_resource_url,
            build_resolution_token(size, fixed),
            time,
        )
        return await self._resolver_for(mode).resolve(url, mode)

    async def health_check(self) -> bool:
        """检查处理服务可达性

        GET 服务基础 URL，非 5xx 视为可达。此方法不抛出异常。
        """
        try:
            async with httpx.AsyncClient() as http_client:
                resp = await http_client.get(self.service_url, timeout=HEALTH_CHECK_TIMEOUT_S)
                return resp.status_code < 500
        except Exception as e:
            log.debug("health_check_failed", url=self.service_url, error=str(e))
            return False

    async def aclose(self) -> None:
        """关闭自建的传输层；外部传入的 transport 由调用方负责"""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()
            # 关闭后再次 RESOLVED 调用会重新创建
            self._transport = None
            self._resolver = ResultResolver()

    async def __aenter__(self) -> "ProcessingService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
