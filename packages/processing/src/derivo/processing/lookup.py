"""元数据查询接口

MetadataLookup 使用 Protocol 定义（结构化子类型），
InMemoryMetadataLookup 为内存实现，供嵌入方和测试使用。
"""

from typing import Protocol

import structlog

from .models import Attachment, Document

log = structlog.get_logger()


class MetadataLookup(Protocol):
    """元数据查询接口 -- 只读"""

    async def lookup_document(
        self,
        document_id: str,
        *,
        snapshot: bool = False,
    ) -> Document | None:
        """查询文档；snapshot=True 时允许返回可能过期的缓存快照"""
        ...

    async def lookup_attachment(
        self,
        document: Document,
        attachment_id: str,
    ) -> Attachment | None:
        """在给定文档内查询附件"""
        ...


class InMemoryMetadataLookup:
    """内存元数据存储

    快照在 add_document() 时记录，之后对文档的修改不影响快照，
    直到再次调用 refresh_snapshot()。
    """

    def __init__(self, documents: list[Document] | None = None) -> None:
        self._documents: dict[str, Document] = {}
        self._snapshots: dict[str, Document] = {}
        for document in documents or []:
            self.add_document(document)

    def add_document(self, document: Document) -> None:
        """注册（或覆盖）文档，并记录快照"""
        self._documents[document.document_id] = document
        self._snapshots[document.document_id] = document.model_copy(deep=True)

    def remove_document(self, document_id: str) -> None:
        """删除文档（快照保留，模拟过期缓存）"""
        self._documents.pop(document_id, None)

    def refresh_snapshot(self, document_id: str) -> None:
        document = self._documents.get(document_id)
        if document is None:
            self._snapshots.pop(document_id, None)
        else:
            self._snapshots[document_id] = document.model_copy(deep=True)

    async def lookup_document(
        self,
        document_id: str,
        *,
        snapshot: bool = False,
    ) -> Document | None:
        if snapshot and document_id in self._snapshots:
            return self._snapshots[document_id]
        document = self._documents.get(document_id)
        if document is None:
            log.debug("metadata_document_missing", document_id=document_id)
        return document

    async def lookup_attachment(
        self,
        document: Document,
        attachment_id: str,
    ) -> Attachment | None:
        return document.get_attachment(attachment_id)
