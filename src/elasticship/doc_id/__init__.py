"""文档 ID 生成模块.

支持内容哈希和字段模板两种 ID 生成方式。

示例用法:
    >>> from elasticship.doc_id import DocumentIdGenerator, IdTemplate
    >>> template = IdTemplate.compile("$[host]-$[seq]")
    >>> template.render({"host": "web-1", "seq": "7"})
    'web-1-7'
"""

from .models import IdTemplate, LiteralToken, PlaceholderToken
from .tool import DocumentIdGenerator, hash_document_id

__all__ = [
    "IdTemplate",
    "LiteralToken",
    "PlaceholderToken",
    "DocumentIdGenerator",
    "hash_document_id",
]
