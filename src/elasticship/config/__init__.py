"""格式化配置模块 - 定义格式化核心使用的不可变配置.

主要组件:
    - FormatterConfig: 格式化配置模型
    - IdMode: 文档 ID 生成模式枚举
    - ConfigError: 配置校验异常

使用示例:
    from elasticship.config import FormatterConfig

    config = FormatterConfig.from_properties({"Logstash_Format": "On"})
"""

from .exceptions import ConfigError
from .models import FormatterConfig, IdMode

__all__ = [
    # 模型
    "FormatterConfig",
    "IdMode",
    # 异常
    "ConfigError",
]
