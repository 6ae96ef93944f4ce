"""elasticship 常量定义模块."""


class FormatterDefaults:
    """格式化配置默认值."""

    INDEX = "fluent-bit"
    TYPE = "_doc"
    LOGSTASH_PREFIX = "logstash"
    LOGSTASH_DATEFORMAT = "%Y.%m.%d"
    TIME_KEY = "@timestamp"
    TIME_KEY_FORMAT = "%Y-%m-%dT%H:%M:%S"
    TAG_KEY = "flb-key"
    # 记录嵌套深度上限
    MAX_DEPTH = 64


class BulkConstants:
    """Bulk 协议相关常量."""

    # 动作行中的操作类型
    ACTION = "index"
    # logstash_prefix_key 查找结果的最大字节数
    MAX_PREFIX_BYTES = 128
    # 文档 ID 哈希种子
    HASH_SEED = 42
    # 成功响应的开头片段，用于截断响应的兜底判断
    SUCCESS_MARKER = b'"errors":false,"items":['
    # 视为请求成功的 HTTP 状态码
    SUCCESS_STATUS = (200, 201)
    # Fluent EventTime 的 msgpack 扩展类型编号
    EVENT_TIME_EXT_TYPE = 0
