"""字段名清洗模块.

递归清洗记录的字段名，并按遍历顺序写入 msgpack 打包器。

示例用法:
    >>> from elasticship.sanitizer import KeySanitizer
    >>> packed = KeySanitizer(replace_dots=True).sanitize({"a.b": 1})
"""

from .tool import KeySanitizer, new_packer

__all__ = [
    "KeySanitizer",
    "new_packer",
]
