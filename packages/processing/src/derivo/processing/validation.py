"""请求校验 -- 在任何网络请求之前检查标识符、尺寸、时间点与媒体类型

校验只读取调用时刻的元数据快照，不提供事务保证：
并发修改元数据时，两次校验可能观察到不同状态。
"""

import structlog

from .exceptions import InvalidArgumentError, InvalidReferenceError, ResourceNotFoundError
from .lookup import MetadataLookup
from .models import (
    THUMBNAIL_MAX_SIZE,
    THUMBNAIL_MIN_SIZE,
    AttachmentID,
    DocumentID,
    FixedAxis,
    MediaKind,
    OperationKind,
)

log = structlog.get_logger()

# 操作 -> 要求的媒体类型；缩略图接受任意类型
REQUIRED_MEDIA_KIND: dict[OperationKind, MediaKind] = {
    OperationKind.IMAGE: MediaKind.IMAGE,
    OperationKind.VIDEO_SNAPSHOT: MediaKind.VIDEO,
}


def check_size(operation: OperationKind, size: int) -> None:
    """尺寸范围检查

    缩略图: 16 <= size <= 256；image / video: size > 0
    """
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgumentError(f"size 必须为整数: {size!r}")

    if operation == OperationKind.THUMBNAIL:
        if not THUMBNAIL_MIN_SIZE <= size <= THUMBNAIL_MAX_SIZE:
            raise InvalidArgumentError(
                f"缩略图尺寸须在 [{THUMBNAIL_MIN_SIZE}, {THUMBNAIL_MAX_SIZE}] 内: {size}"
            )
    elif size <= 0:
        raise InvalidArgumentError(f"尺寸必须为正数: {size}")


def check_time_fraction(time_fraction: float) -> None:
    """视频时间点检查: 0.0 <= t <= 1.0（NaN 视为越界）"""
    if isinstance(time_fraction, bool) or not isinstance(time_fraction, int | float):
        raise InvalidArgumentError(f"time 必须为数值: {time_fraction!r}")
    if not 0.0 <= time_fraction <= 1.0:
        raise InvalidArgumentError(f"time 须在 [0.0, 1.0] 内: {time_fraction}")


async def lookup_media_kind(
    metadata: MetadataLookup,
    identifier: DocumentID | AttachmentID,
) -> MediaKind:
    """查询资源当前的媒体类型

    文档直接查询最新数据；附件分两步：先取父文档（接受缓存快照），再在其中查附件。

    Raises:
        ResourceNotFoundError: 文档、父文档或附件不存在
    """
    if isinstance(identifier, AttachmentID):
        document = await metadata.lookup_document(identifier.document_id, snapshot=True)
        if document is None:
            raise ResourceNotFoundError(identifier.document_id, "document")
        attachment = await metadata.lookup_attachment(document, identifier.attachment_id)
        if attachment is None:
            raise ResourceNotFoundError(identifier.attachment_id, "attachment")
        return attachment.media_kind

    document = await metadata.lookup_document(identifier.document_id)
    if document is None:
        raise ResourceNotFoundError(identifier.document_id, "document")
    return document.media_kind


async def validate(
    metadata: MetadataLookup,
    operation: OperationKind,
    identifier: DocumentID | AttachmentID | None,
    size: int,
    fixed: FixedAxis | None = None,
    time_fraction: float | None = None,
) -> MediaKind:
    """校验一次派生请求

    Args:
        metadata: 元数据查询接口
        operation: 操作类型
        identifier: 文档或附件标识
        size: 缩略图边长，或 image / video 的固定边长度
        fixed: 固定边，image / video 必填
        time_fraction: 视频截帧时间点，仅 VIDEO_SNAPSHOT 检查

    Returns:
        资源的 MediaKind

    Raises:
        InvalidReferenceError: identifier 或必填的 fixed 为 None
        ResourceNotFoundError: 资源不存在
        InvalidArgumentError: 尺寸/时间越界，或媒体类型不匹配
    """
    if identifier is None:
        raise InvalidReferenceError("identifier")
    if operation != OperationKind.THUMBNAIL and fixed is None:
        raise InvalidReferenceError("fixed")

    # 纯参数检查先于元数据查询
    check_size(operation, size)
    if operation == OperationKind.VIDEO_SNAPSHOT:
        check_time_fraction(time_fraction)

    media_kind = await lookup_media_kind(metadata, identifier)

    required = REQUIRED_MEDIA_KIND.get(operation)
    if required is not None and media_kind != required:
        log.debug(
            "processing_media_kind_mismatch",
            operation=operation.value,
            expected=required.value,
            actual=media_kind.value,
        )
        raise InvalidArgumentError(
            f"{operation.value} 操作要求 {required.value} 资源，实际为 {media_kind.value}"
        )

    return media_kind
