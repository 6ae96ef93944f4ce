"""
elasticship 工具函数模块

提供时间格式化和字节截断相关的工具函数
"""

from datetime import datetime, UTC

from elasticship.exceptions import MalformedInputError


def format_time(pattern: str, seconds: int) -> str:
    """
    按 strftime 格式将秒级时间戳格式化为 UTC 时间字符串。

    示例:
        >>> format_time("%Y.%m.%d", 1704153600)
        '2024.01.02'
        >>> format_time("logs-%Y", 0)
        'logs-1970'

    Args:
        pattern: strftime 格式字符串，不含格式符时原样返回
        seconds: 自 epoch 起的秒数

    Returns:
        格式化后的字符串

    Raises:
        MalformedInputError: 时间戳超出可表示的范围
    """
    if "%" not in pattern:
        return pattern
    try:
        return datetime.fromtimestamp(seconds, tz=UTC).strftime(pattern)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedInputError(f"时间戳无法格式化: {seconds}") from e


def truncate_utf8(value: str, max_bytes: int) -> tuple[str, bool]:
    """
    将字符串按 UTF-8 编码截断到最多 max_bytes 字节。

    截断点落在多字节字符中间时，丢弃该不完整字符。

    示例:
        >>> truncate_utf8("abcdef", 3)
        ('abc', True)
        >>> truncate_utf8("abc", 3)
        ('abc', False)

    Returns:
        元组：(截断后的字符串, 是否发生了截断)
    """
    encoded = value.encode("utf-8")
    if len(encoded) <= max_bytes:
        return value, False
    return encoded[:max_bytes].decode("utf-8", errors="ignore"), True


def format_timestamp(
    pattern: str,
    seconds: int,
    nanoseconds: int,
    nanos: bool = False,
) -> str:
    """
    格式化记录时间字段。

    在 strftime 结果后追加小数秒和 "Z" 后缀：纳秒精度为 9 位，毫秒精度为 3 位。

    示例:
        >>> format_timestamp("%Y-%m-%dT%H:%M:%S", 1704153600, 123456789)
        '2024-01-02T00:00:00.123Z'
        >>> format_timestamp("%Y-%m-%dT%H:%M:%S", 1704153600, 123456789, nanos=True)
        '2024-01-02T00:00:00.123456789Z'
    """
    formatted = format_time(pattern, seconds)
    if nanos:
        return f"{formatted}.{nanoseconds:09d}Z"
    return f"{formatted}.{nanoseconds // 1_000_000:03d}Z"
