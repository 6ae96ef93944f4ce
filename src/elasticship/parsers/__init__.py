"""结果解析器模块.

提供 ES bulk 响应的校验功能.
"""

from elasticship.parsers.response import BulkResponseValidator
from elasticship.parsers.types import BulkErrorItem

__all__ = [
    "BulkResponseValidator",
    "BulkErrorItem",
]
