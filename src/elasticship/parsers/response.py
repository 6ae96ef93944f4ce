"""
ES bulk 响应校验器.

判断 bulk API 的响应中是否存在条目级别的错误.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from elasticsearch.exceptions import SerializationError
from elasticsearch.serializer import JsonSerializer

from elasticship.bulk.encoder import JsonPairs
from elasticship.core.constants import BulkConstants
from elasticship.parsers.types import BulkErrorItem

# 模块级别日志记录器
logger = logging.getLogger(__name__)

# 响应中标识条目错误的顶层字段
_ERRORS_KEY = "errors"


class BulkResponseValidator:
    """
    ES bulk 响应校验器.

    bulk API 在一个响应中逐条报告成功或失败，HTTP 200 并不代表所有文档
    都写入成功，只能通过响应顶层的 errors 字段判断是否存在部分失败。

    校验规则:
    - 响应可以被解析为 JSON 时：根节点必须是映射，顶层 errors 字段的布尔值
      即为结果；字段缺失、不是布尔值或根节点不是映射时视为存在错误
    - 响应无法解析时（例如被 HTTP 客户端缓冲区截断）：
      空响应视为存在错误；包含 '"errors":false,"items":[' 的响应视为成功；
      其它情况记录原始响应并视为存在错误

    使用示例:
        validator = BulkResponseValidator()

        if validator.validate(status, payload):
            # 存在错误，整个批次需要重试
            ...
    """

    def __init__(self, serializer: JsonSerializer | None = None) -> None:
        """
        初始化校验器.

        Args:
            serializer: JSON 序列化器，默认使用 elasticsearch.serializer.JsonSerializer
        """
        self._serializer = serializer or JsonSerializer()

    def validate(self, status: int, payload: bytes | str | None) -> bool:
        """
        校验 bulk 请求的结果.

        Args:
            status: HTTP 状态码
            payload: 响应体原始数据

        Returns:
            True 表示需要重试（HTTP 状态异常、响应为空或存在条目错误）
        """
        body = _to_bytes(payload)

        if status not in BulkConstants.SUCCESS_STATUS:
            if body:
                logger.error(f"HTTP status={status}, response:\n{_preview(body)}")
            else:
                logger.error(f"HTTP status={status}")
            return True

        if not body:
            logger.warning(f"HTTP status={status}，响应为空，无法确认写入结果")
            return True

        return self.has_errors(body)

    def has_errors(self, payload: bytes | str | None) -> bool:
        """
        判断响应中是否存在条目级别的错误.

        Args:
            payload: 响应体原始数据，可能被截断

        Returns:
            True 表示存在错误（或无法确认成功）
        """
        body = _to_bytes(payload)
        if not body:
            return True

        # 按键值对解析，重复的 errors 字段以第一次出现的为准
        try:
            root = json.loads(body, object_pairs_hook=JsonPairs)
        except ValueError:
            if BulkConstants.SUCCESS_MARKER in body:
                return False
            logger.error(f"无法解析 bulk 响应 JSON:\n{_preview(body)}")
            return True

        if not isinstance(root, JsonPairs):
            logger.error(f"bulk 响应根节点类型异常: {type(root).__name__}")
            return True

        for key, value in root:
            if key != _ERRORS_KEY:
                continue
            if not isinstance(value, bool):
                logger.error(f"bulk 响应 'errors' 字段类型异常: {type(value).__name__}")
                return True
            return value

        logger.error("bulk 响应中缺少 'errors' 字段")
        return True

    def extract_errors(self, payload: bytes | str | None) -> list[BulkErrorItem]:
        """
        提取响应中失败的条目.

        用于诊断日志，无法解析的响应返回空列表.

        Args:
            payload: 响应体原始数据

        Returns:
            失败条目列表
        """
        body = _to_bytes(payload)
        if not body:
            return []

        try:
            root = self._serializer.loads(body)
        except SerializationError:
            return []

        if not isinstance(root, Mapping):
            return []

        items = root.get("items")
        if not isinstance(items, list):
            return []

        error_items: list[BulkErrorItem] = []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            for operation, info in item.items():
                if isinstance(info, Mapping) and "error" in info:
                    error_items.append(self._to_error_item(operation, info))
        return error_items

    @staticmethod
    def _to_error_item(operation: str, info: Mapping[str, Any]) -> BulkErrorItem:
        """将单个失败条目转换为 BulkErrorItem."""
        error_info = info.get("error")
        if isinstance(error_info, Mapping):
            error_type = error_info.get("type", "unknown")
            error_reason = error_info.get("reason", "unknown error")
            caused_by = None
            caused_by_info = error_info.get("caused_by")
            if isinstance(caused_by_info, Mapping):
                caused_by = (
                    f"{caused_by_info.get('type', '')}: "
                    f"{caused_by_info.get('reason', '')}"
                )
        else:
            error_type = "unknown"
            error_reason = str(error_info)
            caused_by = None

        return BulkErrorItem(
            index_name=info.get("_index", ""),
            doc_id=info.get("_id"),
            error_type=error_type,
            error_reason=error_reason,
            status=info.get("status", 0),
            caused_by=caused_by,
            operation=operation,
        )


def _to_bytes(payload: bytes | str | None) -> bytes:
    """统一响应体为字节."""
    if payload is None:
        return b""
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _preview(body: bytes) -> str:
    """将响应体转换为可记录的文本."""
    return body.decode("utf-8", errors="replace")
