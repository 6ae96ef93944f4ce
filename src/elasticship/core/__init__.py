"""核心模块导出."""

from elasticship.core.accessor import RecordAccessor
from elasticship.core.constants import BulkConstants, FormatterDefaults
from elasticship.core.utils import format_time, format_timestamp, truncate_utf8

__all__ = [
    "BulkConstants",
    "FormatterDefaults",
    "RecordAccessor",
    "format_time",
    "format_timestamp",
    "truncate_utf8",
]
