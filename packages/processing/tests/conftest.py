"""Processing 包测试 fixtures"""

from unittest.mock import AsyncMock

import pytest
from derivo.processing.config import ProcessingConfig
from derivo.processing.lookup import InMemoryMetadataLookup
from derivo.processing.models import Attachment, AttachmentID, Document, DocumentID
from derivo.processing.service import ProcessingService
from derivo.processing.transport import TransportResponse

SERVICE_URL = "http://processing.test"


def _make_documents() -> list[Document]:
    """图片 / 视频 / 其他类型文档各一份，图片文档带两个附件"""
    return [
        Document(
            document_id="doc-image",
            media_type="image/jpeg",
            attachments=[
                Attachment(
                    attachment_id="att-video",
                    document_id="doc-image",
                    media_type="video/mp4",
                ),
                Attachment(
                    attachment_id="att-image",
                    document_id="doc-image",
                    media_type="image/png",
                ),
            ],
        ),
        Document(document_id="doc-video", media_type="video/mp4"),
        Document(document_id="doc-pdf", media_type="application/pdf"),
    ]


@pytest.fixture
def metadata() -> InMemoryMetadataLookup:
    """内存元数据存储"""
    return InMemoryMetadataLookup(_make_documents())


@pytest.fixture
def image_doc() -> DocumentID:
    return DocumentID(
        document_id="doc-image",
        unique_resource_url="http://store.test/documents/doc-image",
    )


@pytest.fixture
def video_doc() -> DocumentID:
    return DocumentID(
        document_id="doc-video",
        unique_resource_url="http://store.test/documents/doc-video",
    )


@pytest.fixture
def pdf_doc() -> DocumentID:
    return DocumentID(
        document_id="doc-pdf",
        unique_resource_url="http://store.test/documents/doc-pdf",
    )


@pytest.fixture
def video_attachment() -> AttachmentID:
    return AttachmentID(
        attachment_id="att-video",
        document_id="doc-image",
        unique_resource_url="http://store.test/documents/doc-image/attachments/att-video",
    )


@pytest.fixture
def image_attachment() -> AttachmentID:
    return AttachmentID(
        attachment_id="att-image",
        document_id="doc-image",
        unique_resource_url="http://store.test/documents/doc-image/attachments/att-image",
    )


@pytest.fixture
def mock_transport():
    """Mock 传输层，默认返回 303"""
    transport = AsyncMock()
    transport.get = AsyncMock(
        return_value=TransportResponse(status_code=303, location="http://cdn.test/derived.jpg")
    )
    return transport


@pytest.fixture
def service(metadata, mock_transport) -> ProcessingService:
    return ProcessingService(
        ProcessingConfig(service_base_url=SERVICE_URL),
        metadata,
        transport=mock_transport,
    )
