"""记录字段访问器模块.

提供基于记录访问表达式的字段查找功能，表达式格式:
    - $key: 顶层字段
    - $key['sub']['name']: 嵌套映射字段
    - $key[0]: 序列元素
    - $TAG: 当前批次的标签

未以 $ 开头的表达式会自动补全前缀，例如 "kubernetes" 等价于 "$kubernetes"。
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from elasticship.config.exceptions import ConfigError

# 匹配表达式的键名部分和后续下标部分
_PATTERN = re.compile(r"^\$([^\[\]'\"]+)((?:\[(?:'[^']*'|\"[^\"]*\"|\d+)\])*)$")

# 匹配单个下标：'name'、"name" 或数字
_SUBKEY = re.compile(r"\[(?:'([^']*)'|\"([^\"]*)\"|(\d+))\]")

# 特殊变量：标签
_TAG_VARIABLE = "TAG"


class RecordAccessor:
    """记录字段访问器.

    表达式在初始化时解析一次，之后对每条记录线性查找。

    Args:
        pattern: 记录访问表达式

    Raises:
        ConfigError: 表达式不合法

    Examples:
        >>> accessor = RecordAccessor("$kubernetes['namespace']")
        >>> accessor.translate("app.log", {"kubernetes": {"namespace": "prod"}})
        'prod'
    """

    def __init__(self, pattern: str) -> None:
        if not pattern:
            raise ConfigError("记录访问表达式不能为空")
        self.pattern = pattern if pattern.startswith("$") else f"${pattern}"

        match = _PATTERN.match(self.pattern)
        if match is None:
            raise ConfigError(f"非法的记录访问表达式: '{pattern}'")

        self._key = match.group(1)
        self._path: list[str | int] = []
        for quoted, double_quoted, index in _SUBKEY.findall(match.group(2)):
            if index:
                self._path.append(int(index))
            else:
                self._path.append(quoted or double_quoted)

    @property
    def is_tag(self) -> bool:
        """表达式是否引用标签."""
        return self._key == _TAG_VARIABLE and not self._path

    def lookup(self, record: Mapping[Any, Any]) -> Any:
        """查找表达式指向的原始值，找不到时返回 None."""
        value = _get_key(record, self._key)
        for part in self._path:
            if isinstance(part, int):
                if isinstance(value, Sequence) and not isinstance(
                    value, (str, bytes)
                ):
                    value = value[part] if part < len(value) else None
                else:
                    return None
            elif isinstance(value, Mapping):
                value = _get_key(value, part)
            else:
                return None
            if value is None:
                return None
        return value

    def translate(self, tag: str, record: Mapping[Any, Any]) -> str | None:
        """将表达式解析为字符串值.

        Args:
            tag: 当前批次的标签
            record: 记录字段映射

        Returns:
            字符串形式的字段值；字段不存在、为空值、映射或序列时返回 None
        """
        if self.is_tag:
            return tag

        value = self.lookup(record)
        if isinstance(value, str):
            return value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return None


def _get_key(mapping: Mapping[Any, Any], key: str) -> Any:
    """按字符串或字节键名查找映射中的值."""
    if key in mapping:
        return mapping[key]
    return mapping.get(key.encode("utf-8"))
