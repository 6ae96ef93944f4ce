"""ElasticShip - Elasticsearch Bulk Output Formatting Toolkit.

这是一个将日志记录批次转换为 Elasticsearch bulk 请求的 Python 库。

主要功能:
    - BulkComposer: 组装 NDJSON 格式的 bulk 请求体
    - IndexNameResolver: 解析静态、logstash 或当前时间索引名称
    - DocumentIdGenerator: 按内容哈希或字段模板生成文档 ID
    - BulkResponseValidator: 校验 bulk 响应中的条目错误
    - ElasticsearchOutput: 组合以上组件完成一次 flush

使用示例:
    from elasticship import ElasticsearchOutput, FormatterConfig

    config = FormatterConfig.from_properties({"Logstash_Format": "On"})
    with ElasticsearchOutput(config) as output:
        result = output.flush(data, "app.log", sender)
"""

__version__ = "0.1.0"

# 导出组装器
from elasticship.bulk import BulkComposer, DocumentEncoder

# 导出配置
from elasticship.config import ConfigError, FormatterConfig, IdMode

# 导出文档 ID 生成器
from elasticship.doc_id import DocumentIdGenerator, IdTemplate, hash_document_id

# 导出异常
from elasticship.exceptions import (
    DocumentSerializationError,
    ElasticShipError,
    MalformedInputError,
    ResourceExhaustedError,
)

# 导出索引名称解析器
from elasticship.index import IndexDecision, IndexNameResolver

# 导出输出上下文
from elasticship.output import ElasticsearchOutput, FlushResult

# 导出响应校验器
from elasticship.parsers import BulkErrorItem, BulkResponseValidator

# 导出记录模型
from elasticship.record import Batch, BatchDecoder, EventTime, Record, encode_records

# 导出字段名清洗器
from elasticship.sanitizer import KeySanitizer

__all__ = [
    # 版本
    "__version__",
    # 配置
    "FormatterConfig",
    "IdMode",
    # 记录
    "Batch",
    "BatchDecoder",
    "EventTime",
    "Record",
    "encode_records",
    # 核心组件
    "KeySanitizer",
    "IndexDecision",
    "IndexNameResolver",
    "DocumentIdGenerator",
    "IdTemplate",
    "hash_document_id",
    "BulkComposer",
    "DocumentEncoder",
    "BulkResponseValidator",
    "BulkErrorItem",
    "ElasticsearchOutput",
    "FlushResult",
    # 异常
    "ElasticShipError",
    "ConfigError",
    "MalformedInputError",
    "ResourceExhaustedError",
    "DocumentSerializationError",
]
