"""Bulk 请求体数据模型定义模块."""

from elasticship.exceptions import ResourceExhaustedError


class BulkBuffer:
    """Bulk 请求体缓冲区.

    只追加的字节缓冲区，每条记录追加一行动作描述和一行文档，
    生成 NDJSON 格式的请求体。格式化期间由 BulkComposer 独占，
    完成后通过 detach() 将数据交给调用方。

    Attributes:
        records: 已追加的记录数
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self.records = 0

    def __len__(self) -> int:
        return len(self._data)

    def append(self, action: bytes, document: bytes) -> None:
        """追加一条记录的动作行和文档行.

        Raises:
            ResourceExhaustedError: 缓冲区扩容时内存不足
        """
        try:
            self._data += action
            self._data += b"\n"
            self._data += document
            self._data += b"\n"
        except MemoryError as e:
            raise ResourceExhaustedError(
                f"bulk 缓冲区扩容失败，当前大小: {len(self._data)}"
            ) from e
        self.records += 1

    def detach(self) -> bytes:
        """取出缓冲区数据并清空缓冲区."""
        payload = bytes(self._data)
        self.release()
        return payload

    def release(self) -> None:
        """释放已缓冲的数据."""
        self._data = bytearray()
        self.records = 0
