"""Bulk 请求体组装核心工具类."""

import logging
from collections.abc import Callable
from datetime import datetime

from elasticship.config import FormatterConfig
from elasticship.core.utils import format_timestamp
from elasticship.doc_id import DocumentIdGenerator
from elasticship.exceptions import ElasticShipError
from elasticship.index import IndexDecision, IndexNameResolver
from elasticship.record import Batch, BatchDecoder, Record
from elasticship.sanitizer import KeySanitizer, new_packer

from .encoder import DocumentEncoder
from .models import BulkBuffer

logger = logging.getLogger(__name__)


class BulkComposer:
    """Bulk 请求体组装器.

    将批次中的每条记录转换为一行动作描述和一行文档，生成 NDJSON 格式的
    bulk 请求体：

        {"index":{"_index":"<name>"[,"_type":"<type>"][,"_id":"<id>"]}}
        {"<time_key>":"<时间>"[,"<tag_key>":"<标签>"],<原始字段...>}

    文档中时间字段总是第一个键，启用 include_tag_key 时标签字段紧随其后。
    任意一条记录失败都会丢弃已缓冲的数据并抛出异常，不会返回部分请求体。

    组装器本身不保存批次状态，同一实例可以被多个并发 flush 共享。

    Args:
        config: 格式化配置
        resolver: 索引名称解析器，默认按 config 创建
        id_generator: 文档 ID 生成器，默认按 config 创建
        sanitizer: 字段名清洗器，默认按 config 创建
        encoder: 文档 JSON 编码器
        now_func: 自定义获取当前时间的函数，仅在未传入 resolver 时使用

    示例:
        >>> composer = BulkComposer(FormatterConfig(replace_dots=True))
        >>> payload = composer.format_batch(data, tag="app.log")
        >>> print(payload.decode())
    """

    def __init__(
        self,
        config: FormatterConfig,
        resolver: IndexNameResolver | None = None,
        id_generator: DocumentIdGenerator | None = None,
        sanitizer: KeySanitizer | None = None,
        encoder: DocumentEncoder | None = None,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver or IndexNameResolver(config, now_func=now_func)
        self.id_generator = id_generator or DocumentIdGenerator(config)
        self.sanitizer = sanitizer or KeySanitizer(
            replace_dots=config.replace_dots,
            max_depth=config.max_depth,
        )
        self.encoder = encoder or DocumentEncoder()
        self.decoder = BatchDecoder()

    def format_batch(self, data: bytes, tag: str) -> bytes:
        """解码 msgpack 批次并组装 bulk 请求体.

        Args:
            data: msgpack 编码的批次字节流
            tag: 批次标签

        Returns:
            NDJSON 格式的 bulk 请求体

        Raises:
            MalformedInputError: 批次结构不合法
            ResourceExhaustedError: 内存不足
            DocumentSerializationError: 记录无法转换为 JSON
        """
        return self.format(self.decoder.decode(data), tag)

    def format(self, batch: Batch, tag: str) -> bytes:
        """组装 bulk 请求体.

        Args:
            batch: 已解码的记录批次
            tag: 批次标签

        Returns:
            NDJSON 格式的 bulk 请求体，每条记录两行

        Raises:
            MalformedInputError: 记录结构不合法或嵌套过深
            ResourceExhaustedError: 内存不足
            DocumentSerializationError: 记录无法转换为 JSON
        """
        static_index = self.resolver.begin_flush()
        buffer = BulkBuffer()
        position = 0

        try:
            for position, record in enumerate(batch):
                decision, document = self.format_record(record, tag, static_index)
                buffer.append(self.encoder.encode_action(decision), document)
        except ElasticShipError as e:
            logger.error(
                f"组装 bulk 请求体失败，丢弃已缓冲的 {buffer.records} 条记录: "
                f"第 {position + 1} 条记录, {e}"
            )
            buffer.release()
            raise

        record_count = buffer.records
        payload = buffer.detach()
        logger.debug(
            f"bulk 请求体组装完成: 记录 {record_count} 条, 大小 {len(payload)} 字节"
        )

        if self.config.trace_output:
            logger.info(f"bulk 请求体:\n{payload.decode('utf-8', errors='replace')}")

        return payload

    def format_record(
        self,
        record: Record,
        tag: str,
        static_index: str | None = None,
    ) -> tuple[IndexDecision, bytes]:
        """将单条记录转换为索引决策和 JSON 文档.

        Args:
            record: 日志记录
            tag: 批次标签
            static_index: 静态模式下本批次复用的索引名称

        Returns:
            元组：(索引决策, 单行 JSON 文档)
        """
        config = self.config
        fields = record.fields
        if config.current_time_index:
            timestamp = self.resolver.now()
        else:
            timestamp = record.timestamp

        map_size = len(fields) + 1
        if config.include_tag_key:
            map_size += 1

        packer = new_packer()
        packer.pack_map_header(map_size)

        # 时间字段必须是文档的第一个键
        packer.pack(config.time_key)
        packer.pack(
            format_timestamp(
                config.time_key_format,
                timestamp.seconds,
                timestamp.nanoseconds,
                nanos=config.time_key_nanos,
            )
        )

        index, doc_type = self.resolver.resolve(fields, tag, timestamp, static_index)

        if config.include_tag_key:
            packer.pack(config.tag_key)
            packer.pack(tag)

        self.sanitizer.pack_map_content(packer, fields)
        packed = packer.bytes()

        doc_id = self.id_generator.generate(fields, packed)
        document = self.encoder.encode(packed)
        return IndexDecision(index=index, doc_type=doc_type, doc_id=doc_id), document

