"""文档 ID 模板数据模型定义模块."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from elasticship.exceptions import ResourceExhaustedError

# 占位符格式：$[字段名]
_PLACEHOLDER_PATTERN = re.compile(r"\$\[([^\]]*)\]")


@dataclass(frozen=True)
class LiteralToken:
    """模板中的字面文本."""

    text: str


@dataclass(frozen=True)
class PlaceholderToken:
    """模板中的字段占位符.

    Attributes:
        name: 占位符引用的字段名
        folded: 小写折叠后的字段名，用于不区分大小写的匹配
    """

    name: str
    folded: str


@dataclass(frozen=True)
class IdTemplate:
    """文档 ID 模板.

    模板在配置时解析为字面文本和占位符词法单元序列，之后对每条记录线性替换。
    只解析记录的顶层字段，嵌套字段不会被替换；未匹配的占位符替换为空字符串。
    未闭合的 "$[" 作为普通文本保留。

    Attributes:
        source: 原始模板字符串
        tokens: 词法单元序列

    Examples:
        >>> template = IdTemplate.compile("$[host]-$[Seq]")
        >>> template.render({"HOST": "web-1", "seq": "42"})
        'web-1-42'
    """

    source: str
    tokens: tuple[LiteralToken | PlaceholderToken, ...]

    @classmethod
    def compile(cls, source: str) -> IdTemplate:
        """解析模板字符串."""
        tokens: list[LiteralToken | PlaceholderToken] = []
        position = 0
        for match in _PLACEHOLDER_PATTERN.finditer(source):
            if match.start() > position:
                tokens.append(LiteralToken(source[position : match.start()]))
            name = match.group(1)
            tokens.append(PlaceholderToken(name=name, folded=name.casefold()))
            position = match.end()
        if position < len(source):
            tokens.append(LiteralToken(source[position:]))
        return cls(source=source, tokens=tuple(tokens))

    @property
    def placeholders(self) -> list[str]:
        """模板中引用的字段名列表."""
        return [t.name for t in self.tokens if isinstance(t, PlaceholderToken)]

    def render(self, record: Mapping[Any, Any]) -> str:
        """按记录的顶层字段替换占位符.

        Args:
            record: 记录字段映射

        Returns:
            替换后的 ID 字符串

        Raises:
            ResourceExhaustedError: 构建 ID 时内存不足
        """
        try:
            parts: list[str] = []
            for token in self.tokens:
                if isinstance(token, LiteralToken):
                    parts.append(token.text)
                else:
                    parts.append(_lookup_top_level(record, token.folded))
            return "".join(parts)
        except MemoryError as e:
            raise ResourceExhaustedError("构建文档 ID 时内存不足") from e


def _lookup_top_level(record: Mapping[Any, Any], folded_name: str) -> str:
    """查找第一个名称匹配（不区分大小写）且值为字符串的顶层字段."""
    for key, value in record.items():
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="replace")
        if not isinstance(key, str) or key.casefold() != folded_name:
            continue
        if isinstance(value, str):
            return value
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
    return ""
