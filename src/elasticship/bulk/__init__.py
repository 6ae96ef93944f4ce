"""Bulk 请求体组装模块.

该模块将日志记录批次转换为 Elasticsearch bulk API 所需的 NDJSON 请求体，包括：
- 字段名清洗（可选将 "." 替换为 "_"）
- 按记录解析目标索引
- 文档 ID 生成（内容哈希或字段模板）
- 动作行与文档行组装

示例用法:
    >>> from elasticship.bulk import BulkComposer
    >>> from elasticship.config import FormatterConfig
    >>> composer = BulkComposer(FormatterConfig(logstash_format=True))
    >>> payload = composer.format_batch(data, tag="app.log")
"""

from .encoder import DocumentEncoder, JsonPairs
from .models import BulkBuffer
from .tool import BulkComposer

__all__ = [
    "BulkBuffer",
    "BulkComposer",
    "DocumentEncoder",
    "JsonPairs",
]
