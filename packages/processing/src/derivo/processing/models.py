"""数据模型 -- 资源标识、媒体分类、尺寸/模式枚举

DocumentID / AttachmentID 构成按 kind 区分的封闭联合（ResourceIdentifier），
均为不可变值对象，由元数据存储创建，本包只读取。
"""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class MediaKind(StrEnum):
    """资源内容分类 -- 由存储的 MIME 主类型推导，不来自请求"""

    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_media_type(cls, media_type: str) -> "MediaKind":
        """按 MIME 主类型分类，如 "image/png" -> IMAGE"""
        main_type = media_type.split("/", 1)[0].strip().lower()
        if main_type == "image":
            return cls.IMAGE
        if main_type == "video":
            return cls.VIDEO
        return cls.OTHER


class FixedAxis(StrEnum):
    """固定边：另一条边由处理服务按原始比例计算"""

    WIDTH = "width"
    HEIGHT = "height"


class ResolutionMode(StrEnum):
    """URL 生成模式

    - IMMEDIATE: 直接返回处理服务的请求 URL（访问时由服务 303 重定向）
    - RESOLVED: 立即请求处理服务，返回 303 Location 指向的真实资源 URL
    """

    IMMEDIATE = "immediate"
    RESOLVED = "resolved"


class OperationKind(StrEnum):
    """派生操作类型"""

    THUMBNAIL = "thumbnail"
    IMAGE = "image"
    VIDEO_SNAPSHOT = "video_snapshot"


# 尺寸约束
THUMBNAIL_MIN_SIZE = 16
THUMBNAIL_MAX_SIZE = 256

# 视频截帧默认时间点（时长的一半）
DEFAULT_TIME_FRACTION = 0.5


class DocumentID(BaseModel):
    """文档标识"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["document"] = "document"
    document_id: str = Field(description="文档 ID")
    unique_resource_url: str = Field(description="底层存储字节的稳定绝对 URL")


class AttachmentID(BaseModel):
    """附件标识 -- 归属于一个父文档"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["attachment"] = "attachment"
    attachment_id: str = Field(description="附件 ID")
    document_id: str = Field(description="父文档 ID")
    unique_resource_url: str = Field(description="底层存储字节的稳定绝对 URL")


ResourceIdentifier = Annotated[
    DocumentID | AttachmentID,
    Field(discriminator="kind"),
]


class Attachment(BaseModel):
    """附件元数据"""

    attachment_id: str = Field(description="附件 ID")
    document_id: str = Field(description="父文档 ID")
    media_type: str = Field(description="MIME 类型，如 video/mp4")

    @property
    def media_kind(self) -> MediaKind:
        return MediaKind.from_media_type(self.media_type)


class Document(BaseModel):
    """文档元数据 -- 包含其附件"""

    document_id: str = Field(description="文档 ID")
    media_type: str = Field(description="MIME 类型，如 image/jpeg")
    attachments: list[Attachment] = Field(default_factory=list, description="附件列表")

    @property
    def media_kind(self) -> MediaKind:
        return MediaKind.from_media_type(self.media_type)

    def get_attachment(self, attachment_id: str) -> Attachment | None:
        """按 ID 查找附件，不存在返回 None"""
        for attachment in self.attachments:
            if attachment.attachment_id == attachment_id:
                return attachment
        return None
