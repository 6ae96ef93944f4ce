"""批次解码工具模块."""

import logging
from collections.abc import Iterable, Mapping

import msgpack

from elasticship.exceptions import MalformedInputError, ResourceExhaustedError

from .models import Batch, EventTime, Record

logger = logging.getLogger(__name__)


class BatchDecoder:
    """msgpack 批次解码器.

    将调用方传入的 msgpack 字节流解码为 Batch。字节流由连续的
    [time, map] 数组组成。

    结构规则:
        - 第一个对象必须是非空数组，否则整个批次作废
        - 后续对象不是二元数组、第二个元素不是映射或时间无法识别时跳过该记录

    示例:
        >>> decoder = BatchDecoder()
        >>> batch = decoder.decode(data)
        >>> for record in batch:
        ...     print(record.timestamp, record.fields)
    """

    def _unpacker(self, data: bytes) -> msgpack.Unpacker:
        unpacker = msgpack.Unpacker(
            raw=False,
            strict_map_key=False,
            unicode_errors="replace",
        )
        unpacker.feed(data)
        return unpacker

    def decode(self, data: bytes) -> Batch:
        """解码批次.

        Args:
            data: msgpack 编码的批次字节流

        Returns:
            解码后的批次

        Raises:
            MalformedInputError: 字节流为空、无法解码或第一个对象不是非空数组
            ResourceExhaustedError: 解码时内存不足
        """
        if not data:
            raise MalformedInputError("批次数据为空")

        batch = Batch()
        unpacker = self._unpacker(data)
        first = True

        try:
            while True:
                try:
                    obj = unpacker.unpack()
                except msgpack.OutOfData:
                    if unpacker.tell() < len(data):
                        if first:
                            raise MalformedInputError("批次数据不完整，无法解码")
                        logger.warning("批次末尾存在不完整的数据，已忽略")
                    break
                except (ValueError, TypeError, msgpack.UnpackException) as e:
                    if first:
                        raise MalformedInputError(f"批次数据无法解码: {e}") from e
                    logger.warning(f"批次解码中断，忽略剩余数据: {e}")
                    break

                if first:
                    if not isinstance(obj, (list, tuple)) or len(obj) == 0:
                        raise MalformedInputError(
                            "批次格式不合法: 第一个对象必须是非空数组"
                        )
                    first = False

                record = self._to_record(obj)
                if record is None:
                    batch.skipped += 1
                    continue
                batch.records.append(record)
        except MemoryError as e:
            raise ResourceExhaustedError("解码批次时内存不足") from e

        if batch.skipped:
            logger.debug(f"批次解码完成: 记录 {len(batch)} 条, 跳过 {batch.skipped} 条")
        return batch

    def _to_record(self, obj) -> Record | None:
        """将单个解码对象转换为记录，结构不合法时返回 None."""
        if not isinstance(obj, (list, tuple)) or len(obj) != 2:
            logger.debug(f"跳过结构不合法的记录: {obj!r}")
            return None

        raw_time, fields = obj
        if not isinstance(fields, Mapping):
            logger.debug(f"跳过字段不是映射的记录: {fields!r}")
            return None

        try:
            timestamp = EventTime.from_msgpack(raw_time)
        except MalformedInputError as e:
            logger.debug(f"跳过时间不合法的记录: {e}")
            return None

        return Record(timestamp=timestamp, fields=fields)


def encode_records(records: Iterable[Record]) -> bytes:
    """将记录编码为 msgpack 批次字节流.

    时间戳编码为 Fluent EventTime 扩展类型，与 BatchDecoder 的输入格式一致。

    Args:
        records: 记录迭代器

    Returns:
        msgpack 编码的批次字节流
    """
    packer = msgpack.Packer(use_bin_type=True)
    chunks = [
        packer.pack([record.timestamp.to_msgpack(), record.fields])
        for record in records
    ]
    return b"".join(chunks)
