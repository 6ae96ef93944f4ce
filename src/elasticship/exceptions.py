"""elasticship 异常定义模块.

所有格式化与校验相关的异常都继承自 ElasticShipError，
异常只作用于单次 flush，不会影响宿主进程。
"""


class ElasticShipError(Exception):
    """elasticship 基础异常类."""

    pass


class MalformedInputError(ElasticShipError):
    """输入批次结构异常.

    批次不是 [time, map] 数组序列、批次为空，或记录嵌套深度超过上限时抛出。
    """

    pass


class ResourceExhaustedError(ElasticShipError):
    """资源耗尽异常.

    字段名拷贝、缓冲区扩容或 ID 模板构建时内存分配失败抛出，整个批次作废。
    """

    pass


class DocumentSerializationError(ElasticShipError):
    """文档序列化异常.

    记录从内部结构转换为 JSON 失败时抛出，整个批次作废。
    """

    pass
