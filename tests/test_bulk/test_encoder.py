"""文档 JSON 编码器单元测试."""

import msgpack
import pytest

from elasticship.bulk import BulkBuffer, DocumentEncoder, JsonPairs
from elasticship.exceptions import DocumentSerializationError
from elasticship.index import IndexDecision
from elasticship.sanitizer import new_packer


@pytest.fixture
def encoder() -> DocumentEncoder:
    """创建 DocumentEncoder 实例."""
    return DocumentEncoder()


class TestDocumentEncoder:
    """DocumentEncoder 类测试."""

    def test_compact_json(self, encoder: DocumentEncoder) -> None:
        packed = msgpack.packb({"a": 1, "b": [1.5, "x"], "c": {"d": None}})
        assert encoder.encode(packed) == b'{"a":1,"b":[1.5,"x"],"c":{"d":null}}'

    def test_duplicate_keys(self, encoder: DocumentEncoder) -> None:
        """测试重复键全部保留."""
        packer = new_packer()
        packer.pack_map_header(2)
        for key, value in (("k", 1), ("k", 2)):
            packer.pack(key)
            packer.pack(value)

        assert encoder.encode(packer.bytes()) == b'{"k":1,"k":2}'

    def test_non_string_keys(self, encoder: DocumentEncoder) -> None:
        packer = new_packer()
        packer.pack_map_header(3)
        for key in (1, True, None):
            packer.pack(key)
            packer.pack("v")

        assert encoder.encode(packer.bytes()) == b'{"1":"v","true":"v","null":"v"}'

    def test_escaping(self, encoder: DocumentEncoder) -> None:
        packed = msgpack.packb({"q": 'say "hi"\n'})
        assert encoder.encode(packed) == b'{"q":"say \\"hi\\"\\n"}'

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float(self, encoder: DocumentEncoder, value: float) -> None:
        with pytest.raises(DocumentSerializationError):
            encoder.encode(msgpack.packb({"v": value}))

    def test_ext_type_as_string(self, encoder: DocumentEncoder) -> None:
        """测试扩展类型按原始数据输出为字符串."""
        packed = msgpack.packb({"v": msgpack.ExtType(5, b"ext-data")})
        assert encoder.encode(packed) == b'{"v":"ext-data"}'

    def test_invalid_msgpack(self, encoder: DocumentEncoder) -> None:
        with pytest.raises(DocumentSerializationError):
            encoder.encode(b"\xc1")

    def test_encode_action(self, encoder: DocumentEncoder) -> None:
        decision = IndexDecision("logs", doc_type="_doc", doc_id="abc")
        assert encoder.encode_action(decision) == (
            b'{"index":{"_index":"logs","_type":"_doc","_id":"abc"}}'
        )

    def test_json_pairs_is_list(self) -> None:
        pairs = JsonPairs([("a", 1)])
        assert list(pairs) == [("a", 1)]


class TestBulkBuffer:
    """BulkBuffer 类测试."""

    def test_append_and_detach(self) -> None:
        buffer = BulkBuffer()
        buffer.append(b'{"index":{}}', b'{"a":1}')
        buffer.append(b'{"index":{}}', b'{"b":2}')

        assert buffer.records == 2
        payload = buffer.detach()

        assert payload == b'{"index":{}}\n{"a":1}\n{"index":{}}\n{"b":2}\n'
        assert len(buffer) == 0
        assert buffer.records == 0

    def test_release(self) -> None:
        buffer = BulkBuffer()
        buffer.append(b"a", b"b")
        buffer.release()
        assert buffer.detach() == b""
