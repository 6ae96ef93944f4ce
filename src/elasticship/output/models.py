"""输出结果模型定义模块."""

from enum import Enum


class FlushResult(Enum):
    """单次 flush 的结果.

    Attributes:
        OK: 批次已全部写入
        RETRY: 暂时性失败，宿主应重新投递整个批次
        ERROR: 批次无法格式化，重试也不会成功
    """

    OK = "ok"
    RETRY = "retry"
    ERROR = "error"
