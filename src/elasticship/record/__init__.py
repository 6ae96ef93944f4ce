"""日志记录模块.

提供 msgpack 批次与记录数据模型之间的转换功能。

示例用法:
    >>> from elasticship.record import BatchDecoder
    >>> batch = BatchDecoder().decode(data)
    >>> print(f"记录: {len(batch)}, 跳过: {batch.skipped}")
"""

from .models import Batch, EventTime, Record
from .tool import BatchDecoder, encode_records

__all__ = [
    "Batch",
    "EventTime",
    "Record",
    "BatchDecoder",
    "encode_records",
]
