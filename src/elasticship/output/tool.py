"""Elasticsearch 输出核心工具类."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from elastic_transport import TransportError
from elasticsearch import ApiError

from elasticship.bulk import BulkComposer
from elasticship.config import FormatterConfig
from elasticship.doc_id import DocumentIdGenerator
from elasticship.exceptions import ElasticShipError
from elasticship.index import IndexNameResolver
from elasticship.parsers import BulkResponseValidator
from elasticship.sanitizer import KeySanitizer
from elasticship.typing import Sender

from .models import FlushResult

logger = logging.getLogger(__name__)


class ElasticsearchOutput:
    """Elasticsearch 输出上下文.

    进程启动时按配置创建一次，持有索引名称解析器、文档 ID 生成器、
    字段名清洗器、bulk 组装器和响应校验器，之后处理任意多次 flush。
    所有组件都只读共享，多个 flush 可以并发调用同一实例。

    HTTP 传输由调用方提供的 sender 完成：

        sender(uri, payload) -> (status, response_bytes)

    Args:
        config: 格式化配置
        now_func: 自定义获取当前时间的函数，主要用于测试

    示例:
        >>> config = FormatterConfig(logstash_format=True)
        >>> with ElasticsearchOutput(config) as output:
        ...     result = output.flush(data, "app.log", sender)
        >>> result
        <FlushResult.OK: 'ok'>
    """

    def __init__(
        self,
        config: FormatterConfig,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.resolver = IndexNameResolver(config, now_func=now_func)
        self.id_generator = DocumentIdGenerator(config)
        self.sanitizer = KeySanitizer(
            replace_dots=config.replace_dots,
            max_depth=config.max_depth,
        )
        self.composer = BulkComposer(
            config,
            resolver=self.resolver,
            id_generator=self.id_generator,
            sanitizer=self.sanitizer,
        )
        self.validator = BulkResponseValidator()
        self._closed = False

        logger.info(
            f"Elasticsearch 输出初始化完成: uri={self.uri}, "
            f"id_mode={config.id_mode.value}"
        )

    @property
    def uri(self) -> str:
        """bulk 请求的 URI 路径."""
        return self.config.bulk_path

    @property
    def closed(self) -> bool:
        """输出上下文是否已关闭."""
        return self._closed

    def __enter__(self) -> ElasticsearchOutput:
        """上下文管理器入口.

        Returns:
            输出上下文自身
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，自动关闭."""
        self.close()

    def close(self) -> None:
        """关闭输出上下文，重复调用无副作用."""
        if self._closed:
            return
        self._closed = True
        logger.info(f"Elasticsearch 输出已关闭: uri={self.uri}")

    def format(self, data: bytes, tag: str) -> bytes:
        """仅格式化批次，不发送.

        Args:
            data: msgpack 编码的批次字节流
            tag: 批次标签

        Returns:
            NDJSON 格式的 bulk 请求体

        Raises:
            ElasticShipError: 批次无法格式化
        """
        return self.composer.format_batch(data, tag)

    def flush(self, data: bytes, tag: str, sender: Sender) -> FlushResult:
        """格式化并发送一个批次.

        Args:
            data: msgpack 编码的批次字节流
            tag: 批次标签
            sender: 发送函数，参数为 (uri, payload)，返回 (status, response_bytes)

        Returns:
            FlushResult:
            - ERROR: 批次无法格式化或上下文已关闭
            - RETRY: 发送失败、HTTP 状态异常或响应中存在错误
            - OK: 批次全部写入成功
        """
        if self._closed:
            logger.error(f"Elasticsearch 输出已关闭，拒绝 flush: tag={tag}")
            return FlushResult.ERROR

        try:
            payload = self.format(data, tag)
        except ElasticShipError as e:
            logger.error(f"批次格式化失败: tag={tag}, {type(e).__name__}: {e}")
            return FlushResult.ERROR

        try:
            status, response = sender(self.uri, payload)
        except (ApiError, TransportError, OSError) as e:
            logger.warning(f"bulk 请求发送失败，稍后重试: uri={self.uri}, {e}")
            return FlushResult.RETRY

        logger.debug(
            f"bulk 请求完成: uri={self.uri}, status={status}, "
            f"请求大小 {len(payload)} 字节, 响应大小 {len(response or b'')} 字节"
        )

        if self.validator.validate(status, response):
            if self.config.trace_error:
                self._trace_error(payload, response)
            return FlushResult.RETRY

        return FlushResult.OK

    def _trace_error(self, payload: bytes, response: bytes | None) -> None:
        """记录失败请求的诊断信息."""
        logger.debug(f"bulk 请求体:\n{payload.decode('utf-8', errors='replace')}")

        body = (response or b"").decode("utf-8", errors="replace")
        logger.error(f"bulk 响应:\n{body}")

        for item in self.validator.extract_errors(response):
            logger.error(f"bulk 条目失败: {item.summary()}")
