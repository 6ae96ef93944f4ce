"""文档 ID 生成工具模块."""

import logging
import struct
from collections.abc import Mapping
from typing import Any

import mmh3

from elasticship.config import FormatterConfig, IdMode
from elasticship.core.constants import BulkConstants

from .models import IdTemplate

logger = logging.getLogger(__name__)


def hash_document_id(document: bytes, seed: int = BulkConstants.HASH_SEED) -> str:
    """对文档字节做 MurmurHash3 x64 128 位哈希，格式化为 UUID 形式.

    哈希结果按 8 个小端序 16 位字依次输出，相同的字节总是得到相同的 ID。

    Args:
        document: 清洗并序列化后的文档字节
        seed: 哈希种子，默认 42

    Returns:
        36 个字符的 ID，例如 "1a2b3c4d-5e6f-7a8b-9c0d-1e2f3a4b5c6d"
    """
    words = struct.unpack("<8H", mmh3.hash_bytes(document, seed=seed, x64arch=True))
    return "%04x%04x-%04x-%04x-%04x-%04x%04x%04x" % words


class DocumentIdGenerator:
    """文档 ID 生成器.

    根据配置选择生成模式：
    - NONE: 不生成 ID，由 ES 分配（重试时可能产生重复文档）
    - HASH: 对序列化后的文档哈希，重试幂等
    - TEMPLATE: 按 id_format 模板替换顶层字段，仅当引用的字段唯一时才幂等

    Args:
        config: 格式化配置

    示例:
        >>> generator = DocumentIdGenerator(FormatterConfig(id_format="$[host]-$[seq]"))
        >>> generator.generate({"host": "web-1", "seq": "7"}, b"")
        'web-1-7'
    """

    def __init__(self, config: FormatterConfig) -> None:
        self.mode = config.id_mode
        self.template: IdTemplate | None = None
        if self.mode == IdMode.TEMPLATE:
            self.template = IdTemplate.compile(config.id_format)
            logger.debug(
                f"使用 id_format 生成文档 ID: {config.id_format}, "
                f"引用字段: {self.template.placeholders}"
            )

    def generate(self, record: Mapping[Any, Any], document: bytes) -> str | None:
        """生成单条记录的文档 ID.

        Args:
            record: 原始记录字段映射（TEMPLATE 模式使用）
            document: 清洗并序列化后的文档字节（HASH 模式使用）

        Returns:
            文档 ID，NONE 模式返回 None
        """
        if self.mode == IdMode.HASH:
            return hash_document_id(document)
        if self.mode == IdMode.TEMPLATE:
            return self.template.render(record)
        return None
