"""索引名称解析模块.

按静态名称、logstash 日期滚动或当前时间解析每条记录的目标索引。

示例用法:
    >>> from elasticship.index import IndexNameResolver
    >>> resolver = IndexNameResolver(config)
    >>> resolver.begin_flush()
    >>> index, doc_type = resolver.resolve(record.fields, tag, record.timestamp)
"""

from .models import IndexDecision
from .tool import IndexNameResolver

__all__ = [
    "IndexDecision",
    "IndexNameResolver",
]
