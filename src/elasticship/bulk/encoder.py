"""文档 JSON 编码模块.

将清洗后的 msgpack 文档转换为紧凑 JSON。映射以键值对列表的形式解码，
保持键的顺序和数量（包括重复键）不变。
"""

from __future__ import annotations

import json
import math
from typing import Any

import msgpack
from elasticsearch.exceptions import SerializationError
from elasticsearch.serializer import JsonSerializer

from elasticship.exceptions import DocumentSerializationError, ResourceExhaustedError
from elasticship.index.models import IndexDecision


class JsonPairs(list):
    """保留重复键的有序映射，元素为 (键, 值) 元组."""

    pass


class DocumentEncoder:
    """文档 JSON 编码器.

    标量值通过 Elasticsearch 客户端的 JsonSerializer 处理非 JSON 原生类型
    （例如 msgpack 时间戳解码出的 datetime），无法处理的类型抛出
    DocumentSerializationError。

    Args:
        serializer: JSON 序列化器，默认使用 elasticsearch.serializer.JsonSerializer
    """

    def __init__(self, serializer: JsonSerializer | None = None) -> None:
        self.serializer = serializer or JsonSerializer()

    def encode(self, packed: bytes) -> bytes:
        """将 msgpack 文档编码为紧凑 JSON.

        Args:
            packed: 清洗后的 msgpack 文档字节

        Returns:
            单行 JSON 字节

        Raises:
            DocumentSerializationError: 文档无法解码或包含无法序列化的值
            ResourceExhaustedError: 内存不足
        """
        try:
            tree = msgpack.unpackb(
                packed,
                raw=False,
                strict_map_key=False,
                object_pairs_hook=JsonPairs,
                unicode_errors="replace",
                timestamp=3,
            )
            parts: list[str] = []
            self._write(tree, parts)
            return "".join(parts).encode("utf-8")
        except MemoryError as e:
            raise ResourceExhaustedError("编码文档时内存不足") from e
        except (ValueError, TypeError, msgpack.UnpackException) as e:
            raise DocumentSerializationError(f"文档无法编码为 JSON: {e}") from e

    def encode_action(self, decision: IndexDecision) -> bytes:
        """将索引决策编码为 bulk 动作行."""
        return self._dumps(decision.to_action()).encode("utf-8")

    def _write(self, value: Any, parts: list[str]) -> None:
        if isinstance(value, JsonPairs):
            parts.append("{")
            for i, (key, item) in enumerate(value):
                if i:
                    parts.append(",")
                parts.append(self._dumps(_key_to_str(key)))
                parts.append(":")
                self._write(item, parts)
            parts.append("}")
        elif isinstance(value, list):
            parts.append("[")
            for i, item in enumerate(value):
                if i:
                    parts.append(",")
                self._write(item, parts)
            parts.append("]")
        elif isinstance(value, bytes):
            parts.append(self._dumps(value.decode("utf-8", errors="replace")))
        elif isinstance(value, msgpack.ExtType):
            # 扩展类型按原始数据输出为字符串
            parts.append(self._dumps(value.data.decode("utf-8", errors="replace")))
        else:
            parts.append(self._dumps(value))

    def _dumps(self, value: Any) -> str:
        if isinstance(value, float) and not math.isfinite(value):
            raise DocumentSerializationError(f"非法的浮点数值: {value}")
        try:
            return json.dumps(
                value,
                default=self.serializer.default,
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (SerializationError, TypeError, ValueError) as e:
            raise DocumentSerializationError(str(e)) from e


def _key_to_str(key: Any) -> str:
    """将非字符串键转换为 JSON 键名."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return str(key)
