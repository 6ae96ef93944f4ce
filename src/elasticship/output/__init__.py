"""Elasticsearch 输出模块.

将格式化、发送与响应校验组合为一次完整的 flush。

示例用法:
    >>> from elasticship.output import ElasticsearchOutput, FlushResult
    >>> with ElasticsearchOutput(config) as output:
    ...     result = output.flush(data, "app.log", sender)
    >>> result is FlushResult.OK
    True
"""

from .models import FlushResult
from .tool import ElasticsearchOutput

__all__ = [
    "FlushResult",
    "ElasticsearchOutput",
]
