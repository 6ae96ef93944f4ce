"""Elasticsearch 输出使用示例.

本文件展示了如何使用 ElasticsearchOutput 将日志记录批次格式化为 bulk 请求，
并通过 Elasticsearch 客户端发送。
"""

import json
import logging
from datetime import datetime, UTC

from elasticsearch import Elasticsearch

from elasticship import (
    BulkComposer,
    BulkResponseValidator,
    ElasticsearchOutput,
    EventTime,
    FlushResult,
    FormatterConfig,
    Record,
    encode_records,
)

logging.basicConfig(level=logging.INFO)

# 创建 Elasticsearch 客户端连接
es_client = Elasticsearch(["http://localhost:9200"])


def es_sender(uri: str, payload: bytes) -> tuple[int, bytes]:
    """使用 Elasticsearch 客户端发送 bulk 请求."""
    response = es_client.perform_request(
        "POST",
        uri,
        headers={
            "accept": "application/vnd.elasticsearch+json; compatible-with=8",
            "content-type": "application/vnd.elasticsearch+x-ndjson; compatible-with=8",
        },
        body=payload,
    )
    return response.meta.status, json.dumps(response.body).encode("utf-8")


def make_batch() -> bytes:
    """生成一个 msgpack 批次."""
    now = datetime.now(tz=UTC).timestamp()
    records = [
        Record(
            EventTime.from_float(now),
            {
                "log": "GET /health 200",
                "kubernetes": {"namespace_name": "prod", "pod.name": "web-1"},
            },
        ),
        Record(
            EventTime.from_float(now),
            {
                "log": "GET /login 500",
                "kubernetes": {"namespace_name": "auth", "pod.name": "auth-1"},
            },
        ),
    ]
    return encode_records(records)


# ==================== 示例1：按命名空间滚动索引 ====================
def example_logstash_output():
    """按 kubernetes 命名空间生成 logstash 风格索引."""
    config = FormatterConfig.from_properties(
        {
            "Logstash_Format": "On",
            "Logstash_Prefix": "k8s",
            "Logstash_Prefix_Key": "$kubernetes['namespace_name']",
            "Replace_Dots": "On",
            "Suppress_Type_Name": "On",
            "Generate_ID": "On",
            "Trace_Error": "On",
        }
    )

    with ElasticsearchOutput(config) as output:
        result = output.flush(make_batch(), "kube.var.log", es_sender)

    print(f"flush 结果: {result.value}")
    if result is FlushResult.RETRY:
        print("  写入未完成，宿主应重新投递该批次")
    return result


# ==================== 示例2：只组装请求体 ====================
def example_compose_only():
    """只组装 bulk 请求体，不发送."""
    config = FormatterConfig(
        index="app-%Y.%m",
        suppress_type_name=True,
        include_tag_key=True,
        id_format="$[log]",
    )
    composer = BulkComposer(config)
    payload = composer.format_batch(make_batch(), "app.access")

    print("bulk 请求体:")
    print(payload.decode("utf-8"))
    return payload


# ==================== 示例3：校验 bulk 响应 ====================
def example_validate_response():
    """校验 bulk 响应中的条目错误."""
    validator = BulkResponseValidator()
    response = (
        b'{"took":3,"errors":true,"items":[{"index":{"_index":"app","_id":"1",'
        b'"status":400,"error":{"type":"mapper_parsing_exception",'
        b'"reason":"failed to parse field [log]"}}}]}'
    )

    print(f"需要重试: {validator.validate(200, response)}")
    for item in validator.extract_errors(response):
        print(f"  {item.summary()}")


def main():
    """运行所有示例."""
    print("=" * 50)
    print("Elasticsearch 输出示例")
    print("=" * 50)

    example_compose_only()
    example_validate_response()

    try:
        example_logstash_output()
    except Exception as e:
        print(f"发送失败（请确认 Elasticsearch 已启动）: {e}")


if __name__ == "__main__":
    main()
