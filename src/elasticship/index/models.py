"""索引决策数据模型定义模块."""

from dataclasses import dataclass
from typing import Any

from elasticship.core.constants import BulkConstants


@dataclass(frozen=True)
class IndexDecision:
    """单条记录的索引决策.

    每条记录都重新计算，不跨记录缓存。

    Attributes:
        index: 目标索引名称
        doc_type: 文档类型，None 表示省略 _type
        doc_id: 文档 ID，None 表示由 ES 自动分配
    """

    index: str
    doc_type: str | None = None
    doc_id: str | None = None

    def to_action(self) -> dict[str, Any]:
        """转换为 bulk 动作描述.

        共四种形式（是否包含 _type × 是否包含 _id），字段顺序固定为
        _index、_type、_id。

        Returns:
            动作描述字典，例如 {"index": {"_index": "logs", "_id": "1"}}
        """
        meta: dict[str, Any] = {"_index": self.index}
        if self.doc_type is not None:
            meta["_type"] = self.doc_type
        if self.doc_id is not None:
            meta["_id"] = self.doc_id
        return {BulkConstants.ACTION: meta}
