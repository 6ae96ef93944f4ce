"""批次解码工具单元测试."""

import logging

import msgpack
import pytest

from elasticship.exceptions import MalformedInputError
from elasticship.record import Batch, BatchDecoder, EventTime, Record, encode_records


@pytest.fixture
def decoder() -> BatchDecoder:
    """创建 BatchDecoder 实例."""
    return BatchDecoder()


def _entry(timestamp, fields) -> bytes:
    return msgpack.packb([timestamp, fields], use_bin_type=True)


class TestBatchDecoder:
    """BatchDecoder 类测试."""

    def test_decode_encoded_records(self, decoder: BatchDecoder) -> None:
        """测试解码 encode_records 生成的批次."""
        records = [
            Record(EventTime(1704153600, 123456789), {"msg": "hello"}),
            Record(EventTime(1704153601), {"msg": "world", "n": 2}),
        ]

        batch = decoder.decode(encode_records(records))

        assert len(batch) == 2
        assert batch.skipped == 0
        assert [r.timestamp for r in batch] == [r.timestamp for r in records]
        assert [r.fields for r in batch] == [r.fields for r in records]

    def test_integer_and_float_time(self, decoder: BatchDecoder) -> None:
        """测试整数和浮点时间."""
        data = _entry(10, {"a": 1}) + _entry(1.5, {"b": 2})

        batch = decoder.decode(data)

        assert batch.records[0].timestamp == EventTime(10, 0)
        assert batch.records[1].timestamp == EventTime(1, 500_000_000)

    def test_msgpack_timestamp(self, decoder: BatchDecoder) -> None:
        """测试 msgpack 标准时间戳扩展类型."""
        batch = decoder.decode(_entry(msgpack.Timestamp(10, 5), {"a": 1}))
        assert batch.records[0].timestamp == EventTime(10, 5)

    def test_empty_data(self, decoder: BatchDecoder) -> None:
        with pytest.raises(MalformedInputError):
            decoder.decode(b"")

    @pytest.mark.parametrize(
        "first",
        [{"a": 1}, [], "text", 42],
    )
    def test_first_object_not_array(self, decoder: BatchDecoder, first) -> None:
        """测试第一个对象不是非空数组时整个批次作废."""
        with pytest.raises(MalformedInputError):
            decoder.decode(msgpack.packb(first))

    def test_undecodable_data(self, decoder: BatchDecoder) -> None:
        """测试首个对象不完整."""
        with pytest.raises(MalformedInputError):
            decoder.decode(_entry(1, {"a": 1})[:-1])

    def test_skip_invalid_records(self, decoder: BatchDecoder) -> None:
        """测试跳过结构不合法的记录."""
        data = (
            _entry(1, {"a": 1})
            + msgpack.packb("junk")
            + _entry(2, "not-a-map")
            + msgpack.packb([3, {"b": 2}, "extra"])
            + _entry(True, {"c": 3})
            + _entry(4, {"d": 4})
        )

        batch = decoder.decode(data)

        assert [r.fields for r in batch] == [{"a": 1}, {"d": 4}]
        assert batch.skipped == 4

    def test_skip_out_of_range_time(
        self, decoder: BatchDecoder, caplog: pytest.LogCaptureFixture
    ) -> None:
        """测试超出日历范围的时间戳只跳过该记录."""
        data = (
            _entry(1704153600, {"n": 1})
            + _entry(300000000000, {"n": 2})
            + _entry(1704153600, {"n": 3})
        )

        with caplog.at_level(logging.DEBUG, logger="elasticship.record.tool"):
            batch = decoder.decode(data)

        assert [r.fields for r in batch] == [{"n": 1}, {"n": 3}]
        assert batch.skipped == 1
        assert "300000000000" in caplog.text

    def test_truncated_tail(
        self, decoder: BatchDecoder, caplog: pytest.LogCaptureFixture
    ) -> None:
        """测试末尾不完整的数据被忽略."""
        data = _entry(1, {"a": 1}) + _entry(2, {"b": "long value"})[:-3]

        with caplog.at_level(logging.WARNING, logger="elasticship.record.tool"):
            batch = decoder.decode(data)

        assert len(batch) == 1
        assert "不完整" in caplog.text


class TestEventTime:
    """EventTime 数据类测试."""

    def test_invalid_nanoseconds(self) -> None:
        with pytest.raises(MalformedInputError):
            EventTime(1, 1_000_000_000)

    def test_from_float_non_finite(self) -> None:
        with pytest.raises(MalformedInputError):
            EventTime.from_float(float("nan"))

    def test_msgpack_ext_round_trip(self) -> None:
        """测试 Fluent EventTime 扩展类型."""
        event_time = EventTime(1704153600, 42)
        ext = event_time.to_msgpack()

        assert ext.code == 0
        assert len(ext.data) == 8
        assert EventTime.from_msgpack(ext) == event_time

    @pytest.mark.parametrize("seconds", [300000000000, -62135596801])
    def test_seconds_out_of_range(self, seconds: int) -> None:
        with pytest.raises(MalformedInputError):
            EventTime(seconds)

    def test_from_float_out_of_range(self) -> None:
        with pytest.raises(MalformedInputError):
            EventTime.from_float(1e20)

    @pytest.mark.parametrize("seconds", [-5, 2**32])
    def test_wide_seconds_use_msgpack_timestamp(
        self, decoder: BatchDecoder, seconds: int
    ) -> None:
        """测试 32 位以外的秒数编码为标准时间戳."""
        event_time = EventTime(seconds, 7)

        assert isinstance(event_time.to_msgpack(), msgpack.Timestamp)
        batch = decoder.decode(encode_records([Record(event_time, {"a": 1})]))
        assert batch.records[0].timestamp == event_time

    def test_unknown_format(self) -> None:
        with pytest.raises(MalformedInputError):
            EventTime.from_msgpack("2024-01-02")


class TestBatch:
    """Batch 数据类测试."""

    def test_len_and_iter(self) -> None:
        records = [Record(EventTime(1), {"a": 1})]
        batch = Batch(records=records, skipped=1)

        assert len(batch) == 1
        assert list(batch) == records
