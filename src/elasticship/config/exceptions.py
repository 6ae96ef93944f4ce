"""格式化配置异常定义模块."""

from ..exceptions import ElasticShipError


class ConfigError(ElasticShipError):
    """格式化配置校验异常.

    当配置项不合法时抛出，例如 index 为空、未知的配置项、
    无法解析的布尔值或非法的 logstash_prefix_key 表达式。
    """

    pass
