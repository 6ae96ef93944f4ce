"""格式化配置工具函数模块.

提供配置属性值的解析功能。
"""

from typing import Any

from .exceptions import ConfigError


# 可识别的布尔字符串（不区分大小写）
_TRUE_VALUES = frozenset({"on", "true", "yes", "1"})
_FALSE_VALUES = frozenset({"off", "false", "no", "0"})


def parse_bool(name: str, value: Any) -> bool:
    """解析布尔类型配置值.

    Args:
        name: 配置项名称，用于错误提示
        value: 配置值，可以是 bool、int 或字符串

    Returns:
        解析后的布尔值

    Raises:
        ConfigError: 无法识别的布尔值

    Examples:
        >>> parse_bool("replace_dots", "On")
        True
        >>> parse_bool("replace_dots", "false")
        False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ConfigError(f"配置项 {name} 的布尔值无法识别: {value!r}")


def parse_int(name: str, value: Any) -> int:
    """解析整数类型配置值.

    Raises:
        ConfigError: 值不是合法整数
    """
    if isinstance(value, bool):
        raise ConfigError(f"配置项 {name} 需要整数，当前值: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"配置项 {name} 需要整数，当前值: {value!r}") from e


def parse_optional_str(value: Any) -> str | None:
    """解析可选字符串配置值，空字符串视为未设置."""
    if value is None:
        return None
    value = str(value)
    return value or None
