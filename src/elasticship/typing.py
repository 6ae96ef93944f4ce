"""elasticship 类型定义模块."""

from collections.abc import Callable
from typing import Any, Dict, Tuple

# 记录字段字典类型
RecordMap = Dict[Any, Any]

# 发送方返回值类型
# 格式: (HTTP状态码, 响应体)
SenderResult = Tuple[int, bytes]

# 发送方函数类型
# 参数: (bulk URI, 请求体)
Sender = Callable[[str, bytes], SenderResult]
