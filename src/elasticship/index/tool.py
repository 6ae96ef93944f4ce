"""索引名称解析工具核心实现模块."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime, UTC
from typing import Any

from elasticship.config import FormatterConfig
from elasticship.core.accessor import RecordAccessor
from elasticship.core.constants import BulkConstants
from elasticship.core.utils import format_time, truncate_utf8
from elasticship.record.models import EventTime

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class IndexNameResolver:
    """索引名称解析器.

    支持三种模式：
    - 静态模式：index 按 flush 开始时的当前时间格式化一次，整个批次复用
    - logstash 模式：<前缀>-<日期>，前缀可通过 logstash_prefix_key 从记录中查找
    - 当前时间模式：index 按每条记录的当前时间格式化

    当前时间模式用于防止客户端时钟漂移（例如回退到 1970 年）时
    按记录时间生成大量不同的索引。

    Args:
        config: 格式化配置
        now_func: 自定义获取当前时间的函数，返回 datetime，主要用于测试。
                  naive datetime 视为 UTC。默认为 None（使用系统时钟）

    Raises:
        ConfigError: logstash_prefix_key 表达式不合法

    示例:
        >>> resolver = IndexNameResolver(
        ...     FormatterConfig(logstash_format=True, logstash_prefix="app")
        ... )
        >>> resolver.resolve({}, "tag", EventTime(seconds=1704153600))
        ('app-2024.01.02', '_doc')
    """

    def __init__(
        self,
        config: FormatterConfig,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self._now_func = now_func
        self._prefix_accessor: RecordAccessor | None = None
        if config.logstash_prefix_key:
            self._prefix_accessor = RecordAccessor(config.logstash_prefix_key)

    @property
    def is_static(self) -> bool:
        """是否为静态模式（索引名称与记录无关）."""
        return not self.config.logstash_format and not self.config.current_time_index

    @property
    def doc_type(self) -> str | None:
        """文档类型，启用 suppress_type_name 时为 None."""
        if self.config.suppress_type_name:
            return None
        return self.config.type

    def now(self) -> EventTime:
        """获取当前时间."""
        if self._now_func is None:
            now_ns = time.time_ns()
            return EventTime(
                seconds=now_ns // 1_000_000_000,
                nanoseconds=now_ns % 1_000_000_000,
            )

        dt = self._now_func()
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        delta = dt - _EPOCH
        return EventTime(
            seconds=delta.days * 86400 + delta.seconds,
            nanoseconds=delta.microseconds * 1000,
        )

    def begin_flush(self) -> str | None:
        """开始新的 flush.

        静态模式下按当前时间解析一次索引名称，供本批次所有记录复用。
        解析结果由调用方持有，解析器本身不保存批次状态。

        Returns:
            静态模式下的索引名称，其它模式返回 None
        """
        if not self.is_static:
            return None
        return format_time(self.config.index, self.now().seconds)

    def resolve(
        self,
        record: Mapping[Any, Any],
        tag: str,
        timestamp: EventTime,
        static_index: str | None = None,
    ) -> tuple[str, str | None]:
        """解析单条记录的索引名称和文档类型.

        Args:
            record: 记录字段映射
            tag: 批次标签
            timestamp: 记录时间戳（当前时间模式下为当前时间）
            static_index: begin_flush 返回的静态索引名称，为 None 时现场解析

        Returns:
            元组：(索引名称, 文档类型或 None)

        Raises:
            MalformedInputError: 时间戳无法格式化
        """
        if self.config.logstash_format:
            prefix = self._resolve_prefix(record, tag)
            date = format_time(self.config.logstash_dateformat, timestamp.seconds)
            return f"{prefix}-{date}", self.doc_type

        if self.config.current_time_index:
            return format_time(self.config.index, timestamp.seconds), self.doc_type

        if static_index is None:
            static_index = self.begin_flush()
        return static_index, self.doc_type

    def _resolve_prefix(self, record: Mapping[Any, Any], tag: str) -> str:
        """解析 logstash 索引前缀，查找失败时回退到 logstash_prefix."""
        if self._prefix_accessor is None:
            return self.config.logstash_prefix

        try:
            value = self._prefix_accessor.translate(tag, record)
        except (TypeError, ValueError, KeyError, IndexError) as e:
            logger.debug(
                f"logstash_prefix_key 查找失败，使用默认前缀 "
                f"'{self.config.logstash_prefix}': {e}"
            )
            return self.config.logstash_prefix

        if not value:
            return self.config.logstash_prefix

        prefix, truncated = truncate_utf8(value, BulkConstants.MAX_PREFIX_BYTES)
        if truncated:
            logger.warning(
                f"logstash_prefix_key 的值超过 {BulkConstants.MAX_PREFIX_BYTES} "
                f"字节，已截断为: {prefix}"
            )
        return prefix
