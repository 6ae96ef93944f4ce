"""字段名清洗工具模块."""

from collections.abc import Mapping
from typing import Any

import msgpack

from elasticship.core.constants import FormatterDefaults
from elasticship.exceptions import (
    DocumentSerializationError,
    MalformedInputError,
    ResourceExhaustedError,
)


def new_packer() -> msgpack.Packer:
    """创建累积式 msgpack 打包器.

    字节类型字段名以 surrogateescape 解码后按 str 打包，
    打包时原样还原为原始字节。带时区的 datetime 按 msgpack 时间戳打包。
    """
    return msgpack.Packer(
        autoreset=False,
        use_bin_type=True,
        unicode_errors="surrogateescape",
        datetime=True,
    )


class KeySanitizer:
    """字段名清洗器.

    递归遍历记录的映射和序列，按遍历顺序写入 msgpack 打包器：
    - 字符串/字节类型的键名被拷贝，启用 replace_dots 时 "." 替换为 "_"
    - 其它类型的键和所有标量值原样写入
    - 映射和序列的元素数量与顺序保持不变

    Elasticsearch 2.x 不允许字段名包含 "."，因此需要替换。

    Args:
        replace_dots: 是否将字段名中的 "." 替换为 "_"
        max_depth: 最大嵌套深度，超过时抛出 MalformedInputError

    示例:
        >>> sanitizer = KeySanitizer(replace_dots=True)
        >>> packed = sanitizer.sanitize({"a.b": {"c.d": [1, {"e.f": 2}]}})
        >>> msgpack.unpackb(packed)
        {'a_b': {'c_d': [1, {'e_f': 2}]}}
    """

    def __init__(
        self,
        replace_dots: bool = False,
        max_depth: int = FormatterDefaults.MAX_DEPTH,
    ) -> None:
        self.replace_dots = replace_dots
        self.max_depth = max_depth

    def sanitize_key(self, key: Any) -> Any:
        """清洗单个键名.

        Args:
            key: 原始键名

        Returns:
            清洗后的键名，字节类型键名转为等长的 str

        Raises:
            ResourceExhaustedError: 拷贝键名时内存不足
        """
        try:
            if isinstance(key, bytes):
                key = key.decode("utf-8", errors="surrogateescape")
            if isinstance(key, str) and self.replace_dots:
                return key.replace(".", "_")
        except MemoryError as e:
            raise ResourceExhaustedError("拷贝字段名时内存不足") from e
        return key

    def sanitize(self, mapping: Mapping[Any, Any]) -> bytes:
        """清洗映射并返回打包后的 msgpack 字节."""
        packer = new_packer()
        packer.pack_map_header(len(mapping))
        self.pack_map_content(packer, mapping)
        return packer.bytes()

    def pack_map_content(
        self,
        packer: msgpack.Packer,
        mapping: Mapping[Any, Any],
        depth: int = 1,
    ) -> None:
        """写入映射的全部键值对（不含映射头）.

        Args:
            packer: 目标打包器，调用方已写入映射头
            mapping: 待清洗的映射
            depth: 当前嵌套深度

        Raises:
            MalformedInputError: 嵌套深度超过上限
            ResourceExhaustedError: 内存不足
            DocumentSerializationError: 值无法打包
        """
        self._check_depth(depth)
        for key, value in mapping.items():
            self._pack_scalar(packer, self.sanitize_key(key))
            self._pack_value(packer, value, depth)

    def pack_array_content(
        self,
        packer: msgpack.Packer,
        sequence: list[Any] | tuple[Any, ...],
        depth: int = 1,
    ) -> None:
        """写入序列的全部元素（不含序列头）."""
        self._check_depth(depth)
        for element in sequence:
            self._pack_value(packer, element, depth)

    def _pack_value(self, packer: msgpack.Packer, value: Any, depth: int) -> None:
        # ExtType 是 namedtuple，必须先于序列判断，按标量原样写入
        if isinstance(value, msgpack.ExtType):
            self._pack_scalar(packer, value)
        elif isinstance(value, Mapping):
            packer.pack_map_header(len(value))
            self.pack_map_content(packer, value, depth + 1)
        elif isinstance(value, list) or type(value) is tuple:
            packer.pack_array_header(len(value))
            self.pack_array_content(packer, value, depth + 1)
        else:
            self._pack_scalar(packer, value)

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise MalformedInputError(f"记录嵌套深度超过上限 {self.max_depth}")

    @staticmethod
    def _pack_scalar(packer: msgpack.Packer, value: Any) -> None:
        try:
            packer.pack(value)
        except MemoryError as e:
            raise ResourceExhaustedError("写入文档时内存不足") from e
        except (TypeError, ValueError, OverflowError) as e:
            raise DocumentSerializationError(
                f"字段值无法序列化: {type(value).__name__}: {e}"
            ) from e
