"""格式化配置数据模型定义模块.

提供格式化相关的配置模型，包括：
- IdMode: 文档 ID 生成模式枚举
- FormatterConfig: 不可变的格式化配置
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from elasticship.core.constants import FormatterDefaults

from .exceptions import ConfigError
from .utils import parse_bool, parse_int, parse_optional_str

logger = logging.getLogger(__name__)


class IdMode(Enum):
    """文档 ID 生成模式枚举.

    Attributes:
        NONE: 不生成 ID，由 ES 自动分配（重试可能产生重复文档）
        HASH: 对序列化后的文档内容做哈希，重试幂等
        TEMPLATE: 按 id_format 模板替换顶层字段
    """

    NONE = "none"
    HASH = "hash"
    TEMPLATE = "template"


# 布尔类型配置项
_BOOL_OPTIONS = frozenset(
    {
        "suppress_type_name",
        "logstash_format",
        "time_key_nanos",
        "include_tag_key",
        "generate_id",
        "replace_dots",
        "current_time_index",
        "trace_output",
        "trace_error",
    }
)

# 可选字符串配置项（空字符串视为未设置）
_OPTIONAL_STR_OPTIONS = frozenset({"logstash_prefix_key", "id_format", "pipeline"})

# 整数类型配置项
_INT_OPTIONS = frozenset({"max_depth"})


@dataclass(frozen=True)
class FormatterConfig:
    """格式化配置模型.

    进程启动时构建一次，之后在多个并发 flush 之间只读共享。

    Attributes:
        index: 索引名称，支持 strftime 格式符，默认 "fluent-bit"
        type: 文档类型名称，默认 "_doc"
        suppress_type_name: 是否省略 _type（ES 7.0.0 及以上），默认 False
        logstash_format: 是否启用 logstash 风格的按日期滚动索引
        logstash_prefix: logstash 索引前缀，默认 "logstash"
        logstash_prefix_key: 从记录中查找前缀的访问表达式，找不到时回退到 logstash_prefix
        logstash_dateformat: logstash 索引日期后缀格式，默认 "%Y.%m.%d"
        time_key: 时间字段名，默认 "@timestamp"
        time_key_format: 时间字段格式，默认 "%Y-%m-%dT%H:%M:%S"
        time_key_nanos: 是否输出纳秒精度（否则为毫秒）
        include_tag_key: 是否在文档中附加标签字段
        tag_key: 标签字段名，默认 "flb-key"
        generate_id: 是否按文档内容哈希生成 _id
        replace_dots: 是否将字段名中的 "." 替换为 "_"
        id_format: _id 模板，例如 "$[host]-$[seq]"，只支持顶层字段
        current_time_index: 是否使用当前时间而非记录时间生成索引
        trace_output: 是否记录每次生成的 bulk 请求体（仅用于诊断）
        trace_error: 是否在 ES 返回错误时记录请求和响应（仅用于诊断）
        path: bulk 请求的路径前缀（反向代理子路径）
        pipeline: ES ingest pipeline 名称
        max_depth: 记录最大嵌套深度，默认 64

    Raises:
        ConfigError: 当参数不合法时抛出

    Examples:
        >>> config = FormatterConfig(logstash_format=True, logstash_prefix="app")
        >>> config.id_mode
        <IdMode.NONE: 'none'>
    """

    index: str = FormatterDefaults.INDEX
    type: str = FormatterDefaults.TYPE
    suppress_type_name: bool = False
    logstash_format: bool = False
    logstash_prefix: str = FormatterDefaults.LOGSTASH_PREFIX
    logstash_prefix_key: str | None = None
    logstash_dateformat: str = FormatterDefaults.LOGSTASH_DATEFORMAT
    time_key: str = FormatterDefaults.TIME_KEY
    time_key_format: str = FormatterDefaults.TIME_KEY_FORMAT
    time_key_nanos: bool = False
    include_tag_key: bool = False
    tag_key: str = FormatterDefaults.TAG_KEY
    generate_id: bool = False
    replace_dots: bool = False
    id_format: str | None = None
    current_time_index: bool = False
    trace_output: bool = False
    trace_error: bool = False
    path: str = ""
    pipeline: str | None = None
    max_depth: int = FormatterDefaults.MAX_DEPTH

    def __post_init__(self) -> None:
        """校验格式化配置参数合法性."""
        if not self.index:
            raise ConfigError("index 不能为空")
        if not self.time_key:
            raise ConfigError("time_key 不能为空")
        if self.include_tag_key and not self.tag_key:
            raise ConfigError("启用 include_tag_key 时 tag_key 不能为空")
        if self.logstash_format and not self.logstash_prefix:
            raise ConfigError("启用 logstash_format 时 logstash_prefix 不能为空")
        if not self.suppress_type_name and not self.type:
            raise ConfigError("未启用 suppress_type_name 时 type 不能为空")
        if self.max_depth < 1:
            raise ConfigError(f"max_depth 必须 >= 1，当前值: {self.max_depth}")
        if self.generate_id and self.id_format:
            logger.warning(
                f"同时设置了 generate_id 和 id_format，将使用内容哈希生成 _id，"
                f"忽略 id_format: {self.id_format}"
            )

    @property
    def id_mode(self) -> IdMode:
        """文档 ID 生成模式，generate_id 优先于 id_format."""
        if self.generate_id:
            return IdMode.HASH
        if self.id_format:
            return IdMode.TEMPLATE
        return IdMode.NONE

    @property
    def bulk_path(self) -> str:
        """bulk 请求的 URI 路径."""
        if self.pipeline:
            return f"{self.path}/_bulk/?pipeline={self.pipeline}"
        return f"{self.path}/_bulk"

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> FormatterConfig:
        """从配置属性字典构建配置.

        属性名不区分大小写，布尔值支持 on/off、true/false、yes/no、1/0。

        Args:
            properties: 配置属性字典，例如 {"Logstash_Format": "On"}

        Returns:
            FormatterConfig 实例

        Raises:
            ConfigError: 存在未知配置项或配置值无法解析

        Examples:
            >>> config = FormatterConfig.from_properties(
            ...     {"Logstash_Format": "On", "Logstash_Prefix": "app"}
            ... )
            >>> config.logstash_format
            True
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}

        for raw_name, value in properties.items():
            name = raw_name.strip().lower()
            if name not in known:
                raise ConfigError(f"未知的配置项: {raw_name}")
            if name in _BOOL_OPTIONS:
                kwargs[name] = parse_bool(name, value)
            elif name in _INT_OPTIONS:
                kwargs[name] = parse_int(name, value)
            elif name in _OPTIONAL_STR_OPTIONS:
                kwargs[name] = parse_optional_str(value)
            else:
                kwargs[name] = "" if value is None else str(value)

        return cls(**kwargs)
