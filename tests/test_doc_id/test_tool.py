"""文档 ID 生成工具单元测试."""

import re
import unittest

from elasticship.config import FormatterConfig, IdMode
from elasticship.doc_id import (
    DocumentIdGenerator,
    IdTemplate,
    LiteralToken,
    PlaceholderToken,
    hash_document_id,
)

_UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class TestHashDocumentId(unittest.TestCase):
    """hash_document_id 函数测试."""

    def test_format(self):
        """测试 ID 格式."""
        doc_id = hash_document_id(b'\x81\xa3msg\xa5hello')
        self.assertEqual(len(doc_id), 36)
        self.assertRegex(doc_id, _UUID_PATTERN)

    def test_deterministic(self):
        """测试相同字节得到相同 ID."""
        self.assertEqual(hash_document_id(b"abc"), hash_document_id(b"abc"))

    def test_different_input(self):
        self.assertNotEqual(hash_document_id(b"abc"), hash_document_id(b"abd"))

    def test_seed(self):
        self.assertNotEqual(
            hash_document_id(b"abc"), hash_document_id(b"abc", seed=7)
        )


class TestIdTemplate(unittest.TestCase):
    """IdTemplate 类测试."""

    def test_compile(self):
        """测试模板解析为词法单元."""
        template = IdTemplate.compile("id-$[Host]:$[seq]")
        self.assertEqual(
            template.tokens,
            (
                LiteralToken("id-"),
                PlaceholderToken(name="Host", folded="host"),
                LiteralToken(":"),
                PlaceholderToken(name="seq", folded="seq"),
            ),
        )
        self.assertEqual(template.placeholders, ["Host", "seq"])

    def test_render_case_insensitive(self):
        """测试字段名不区分大小写匹配."""
        template = IdTemplate.compile("$[host]-$[Seq]")
        self.assertEqual(template.render({"HOST": "web-1", "seq": "42"}), "web-1-42")

    def test_missing_field(self):
        """测试未匹配的占位符替换为空字符串."""
        template = IdTemplate.compile("$[a]-$[b]")
        self.assertEqual(template.render({"a": "x"}), "x-")

    def test_non_string_value_ignored(self):
        """测试只使用字符串类型的字段值."""
        template = IdTemplate.compile("id-$[a]")
        self.assertEqual(template.render({"a": 5}), "id-")
        self.assertEqual(template.render({"a": {"b": "c"}}), "id-")
        self.assertEqual(template.render({"A": 5, "a": "five"}), "id-five")

    def test_nested_key_not_searched(self):
        """测试占位符只匹配顶层字段，不查找嵌套映射."""
        template = IdTemplate.compile("id-$[b]")
        self.assertEqual(template.render({"a": {"b": "c"}}), "id-")
        self.assertEqual(IdTemplate.compile("$[b]").render({"a": {"b": "c"}}), "")

    def test_bytes_value(self):
        template = IdTemplate.compile("$[a]")
        self.assertEqual(template.render({b"a": b"raw"}), "raw")

    def test_unterminated_placeholder(self):
        """测试未闭合的占位符作为普通文本保留."""
        template = IdTemplate.compile("$[host]-$[seq")
        self.assertEqual(template.render({"host": "h", "seq": "1"}), "h-$[seq")

    def test_literal_only(self):
        template = IdTemplate.compile("fixed")
        self.assertEqual(template.render({}), "fixed")
        self.assertEqual(template.placeholders, [])


class TestDocumentIdGenerator(unittest.TestCase):
    """DocumentIdGenerator 类测试."""

    def test_none_mode(self):
        generator = DocumentIdGenerator(FormatterConfig())
        self.assertEqual(generator.mode, IdMode.NONE)
        self.assertIsNone(generator.generate({"a": "b"}, b"doc"))

    def test_hash_mode(self):
        generator = DocumentIdGenerator(FormatterConfig(generate_id=True))
        self.assertEqual(generator.generate({}, b"doc"), hash_document_id(b"doc"))

    def test_template_mode(self):
        generator = DocumentIdGenerator(FormatterConfig(id_format="$[host]-$[seq]"))
        self.assertEqual(generator.mode, IdMode.TEMPLATE)
        self.assertEqual(generator.generate({"host": "web-1", "seq": "7"}, b""), "web-1-7")

    def test_hash_takes_priority(self):
        generator = DocumentIdGenerator(
            FormatterConfig(generate_id=True, id_format="$[host]")
        )
        self.assertEqual(generator.mode, IdMode.HASH)
        self.assertIsNone(generator.template)


if __name__ == "__main__":
    unittest.main()
