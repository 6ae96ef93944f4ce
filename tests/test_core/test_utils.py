"""核心工具函数单元测试."""

import pytest

from elasticship.core import format_time, format_timestamp, truncate_utf8
from elasticship.exceptions import MalformedInputError

# 2024-01-02T00:00:00Z
JAN_2_2024 = 1704153600


class TestFormatTime:
    """format_time 函数测试."""

    def test_date_pattern(self) -> None:
        assert format_time("%Y.%m.%d", JAN_2_2024) == "2024.01.02"

    def test_pattern_without_format_codes(self) -> None:
        """测试不含格式符时原样返回."""
        assert format_time("fluent-bit", JAN_2_2024) == "fluent-bit"

    def test_mixed_pattern(self) -> None:
        assert format_time("logs-%Y", 0) == "logs-1970"

    def test_utc(self) -> None:
        assert format_time("%H:%M:%S", JAN_2_2024 + 3723) == "01:02:03"

    def test_out_of_range(self) -> None:
        with pytest.raises(MalformedInputError):
            format_time("%Y", 10**20)


class TestFormatTimestamp:
    """format_timestamp 函数测试."""

    def test_millis(self) -> None:
        result = format_timestamp("%Y-%m-%dT%H:%M:%S", JAN_2_2024, 123456789)
        assert result == "2024-01-02T00:00:00.123Z"

    def test_nanos(self) -> None:
        result = format_timestamp(
            "%Y-%m-%dT%H:%M:%S", JAN_2_2024, 123456789, nanos=True
        )
        assert result == "2024-01-02T00:00:00.123456789Z"

    def test_zero_padding(self) -> None:
        assert format_timestamp("%S", 5, 7_000_000) == "05.007Z"
        assert format_timestamp("%S", 5, 7, nanos=True) == "05.000000007Z"


class TestTruncateUtf8:
    """truncate_utf8 函数测试."""

    def test_short_value(self) -> None:
        assert truncate_utf8("abc", 3) == ("abc", False)

    def test_truncated(self) -> None:
        assert truncate_utf8("abcdef", 3) == ("abc", True)

    def test_multibyte_boundary(self) -> None:
        """测试截断点落在多字节字符中间."""
        assert truncate_utf8("你好", 4) == ("你", True)
