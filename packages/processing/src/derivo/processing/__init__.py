"""Derivo Processing -- 媒体派生服务客户端

为已存储的文档/附件生成缩略图、缩放图、视频截帧的访问 URL。
"""

# 配置
from .config import ProcessingConfig, load_processing_config

# 异常
from .exceptions import (
    InternalFaultError,
    InvalidArgumentError,
    InvalidReferenceError,
    ProcessingError,
    RemoteRejectedError,
    ResourceNotFoundError,
    TransportError,
)
from .logging_config import bind_service_context, setup_logging
from .lookup import InMemoryMetadataLookup, MetadataLookup

# 数据模型
from .models import (
    Attachment,
    AttachmentID,
    Document,
    DocumentID,
    FixedAxis,
    MediaKind,
    OperationKind,
    ResolutionMode,
    ResourceIdentifier,
)
from .params import build_resolution_token, compose_request_url
from .resolver import ResultResolver

# 核心组件
from .service import ProcessingService
from .transport import HttpxTransport, Transport, TransportResponse
from .validation import validate

__all__ = [
    "ProcessingService",
    "ResultResolver",
    "build_resolution_token",
    "compose_request_url",
    "validate",
    "Attachment",
    "AttachmentID",
    "Document",
    "DocumentID",
    "ResourceIdentifier",
    "FixedAxis",
    "MediaKind",
    "OperationKind",
    "ResolutionMode",
    "MetadataLookup",
    "InMemoryMetadataLookup",
    "Transport",
    "TransportResponse",
    "HttpxTransport",
    "ProcessingConfig",
    "load_processing_config",
    "setup_logging",
    "bind_service_context",
    "ProcessingError",
    "InvalidReferenceError",
    "InvalidArgumentError",
    "ResourceNotFoundError",
    "RemoteRejectedError",
    "TransportError",
    "InternalFaultError",
]
