"""
Bulk 响应数据类型定义.

包含 bulk 响应中单个失败条目的数据类.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BulkErrorItem:
    """
    bulk 响应中失败的单个条目.

    Attributes:
        index_name: 索引名称
        doc_id: 文档ID
        error_type: 错误类型
        error_reason: 错误原因
        status: HTTP状态码
        caused_by: 根本原因
        operation: 操作类型（index、create 等）
    """

    index_name: str
    doc_id: str | None
    error_type: str
    error_reason: str
    status: int
    caused_by: str | None = None
    operation: str | None = None

    def summary(self) -> str:
        """单行错误摘要."""
        text = (
            f"[{self.operation or 'unknown'}] Index: {self.index_name}, "
            f"DocID: {self.doc_id}, Status: {self.status}, "
            f"Type: {self.error_type}, Reason: {self.error_reason}"
        )
        if self.caused_by:
            text += f", CausedBy: {self.caused_by}"
        return text
