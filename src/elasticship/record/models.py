"""日志记录数据模型定义模块."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Any

import msgpack

from elasticship.core.constants import BulkConstants
from elasticship.exceptions import MalformedInputError
from elasticship.typing import RecordMap

_NANOS_PER_SECOND = 1_000_000_000

# 0001-01-01T00:00:00Z ~ 9999-12-31T23:59:59Z
_MIN_SECONDS = -62135596800
_MAX_SECONDS = 253402300799


@dataclass(frozen=True)
class EventTime:
    """记录时间戳数据类.

    秒数必须落在 UTC 日历可表示的范围内（公元 1 年至 9999 年），
    超出范围的时间戳无法格式化为索引名称或时间字段。

    Attributes:
        seconds: 自 epoch 起的秒数
        nanoseconds: 秒内的纳秒数（0 ~ 999999999）
    """

    seconds: int
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanoseconds < _NANOS_PER_SECOND:
            raise MalformedInputError(f"纳秒数超出范围: {self.nanoseconds}")
        if not _MIN_SECONDS <= self.seconds <= _MAX_SECONDS:
            raise MalformedInputError(f"秒数超出可表示的范围: {self.seconds}")

    @classmethod
    def from_float(cls, value: float) -> EventTime:
        """从浮点秒数构建时间戳."""
        if not math.isfinite(value):
            raise MalformedInputError(f"非法的浮点时间戳: {value}")
        seconds = math.floor(value)
        nanoseconds = int(round((value - seconds) * _NANOS_PER_SECOND))
        if nanoseconds >= _NANOS_PER_SECOND:
            seconds += 1
            nanoseconds -= _NANOS_PER_SECOND
        return cls(seconds=int(seconds), nanoseconds=nanoseconds)

    @classmethod
    def from_msgpack(cls, obj: Any) -> EventTime:
        """从 msgpack 解码出的时间对象构建时间戳.

        支持的格式:
            - 整数秒
            - 浮点秒
            - Fluent EventTime 扩展类型（ext 0，8 字节大端序秒 + 纳秒）
            - msgpack 标准时间戳扩展类型（ext -1）

        Raises:
            MalformedInputError: 无法识别的时间格式
        """
        if isinstance(obj, bool):
            raise MalformedInputError(f"无法识别的记录时间: {obj!r}")
        if isinstance(obj, int):
            return cls(seconds=obj)
        if isinstance(obj, float):
            return cls.from_float(obj)
        if isinstance(obj, msgpack.Timestamp):
            return cls(seconds=obj.seconds, nanoseconds=obj.nanoseconds)
        if (
            isinstance(obj, msgpack.ExtType)
            and obj.code == BulkConstants.EVENT_TIME_EXT_TYPE
            and len(obj.data) == 8
        ):
            seconds, nanoseconds = struct.unpack(">II", obj.data)
            return cls(seconds=seconds, nanoseconds=nanoseconds)
        raise MalformedInputError(f"无法识别的记录时间: {obj!r}")

    def to_msgpack(self) -> msgpack.ExtType | msgpack.Timestamp:
        """编码为 Fluent EventTime 扩展类型.

        EventTime 的秒数只有 32 位无符号整数，负数或超过 32 位的秒数
        改用 msgpack 标准时间戳扩展类型。
        """
        if not 0 <= self.seconds < 2**32:
            return msgpack.Timestamp(self.seconds, self.nanoseconds)
        return msgpack.ExtType(
            BulkConstants.EVENT_TIME_EXT_TYPE,
            struct.pack(">II", self.seconds, self.nanoseconds),
        )


@dataclass
class Record:
    """日志记录数据类.

    Attributes:
        timestamp: 记录时间戳
        fields: 有序的字段映射，值可以是标量、嵌套映射或嵌套序列
    """

    timestamp: EventTime
    fields: RecordMap = field(default_factory=dict)


@dataclass
class Batch:
    """记录批次数据类.

    Attributes:
        records: 按原始顺序排列的记录列表
        skipped: 解码时因结构不合法被跳过的记录数
    """

    records: list[Record] = field(default_factory=list)
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
