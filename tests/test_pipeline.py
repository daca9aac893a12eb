"""
Pipeline Tests

parse_file / parse_dir / parse_path with in-memory and file savers.
"""
import io
import logging
import os
import tempfile
import unittest

import pytest

from setstr.errors import GoSyntaxError, SaveError, SetstrError
from setstr.imports import REQUIRED_IMPORTS
from setstr.model import FieldMeta, ImportEntry, suffix_filter
from setstr.pipeline import go_files, parse_dir, parse_file, parse_path
from setstr.savers import FileSaver, MemorySaver, StreamSaver, output_path
from tests.go_sources import UNTAGGED_SOURCE, WIDGET_SOURCE


def test_widget_file_end_to_end(go_file, widget_source):
    path = go_file(widget_source, "widget.go")
    saver = MemorySaver(command="setstr widget.go")

    metadata = parse_file(path, saver=saver)

    assert metadata == {
        "Widget": [
            FieldMeta("Count", "int", "count"),
            FieldMeta("Label", "string", "label"),
        ],
        "Holder": [FieldMeta("Inner", "*op.Inner", "inner")],
    }
    assert len(saver.calls) == 1
    file_name, package_name, imports, _ = saver.calls[0]
    assert file_name == path
    assert package_name == "shapes"
    assert imports == [
        ImportEntry("", '"encoding/json"'),
        ImportEntry("", '"errors"'),
        ImportEntry("op", '"example.com/other/otherpkg"'),
        ImportEntry("", '"strconv"'),
    ]

    text = saver.outputs[path]
    assert "func (s *Widget) SetCount(v int) {" in text
    assert "func (s *Widget) SetLabel(v string) {" in text
    assert text.count("Ptr() interface{}") == 2
    assert 'case "count": // (int)' in text
    assert 'case "label": // (string)' in text
    assert "err = json.Unmarshal([]byte(value), s.Inner)" in text
    assert '"example.com/unused"' not in text
    assert '"fmt"' not in text


def test_no_tagged_fields_means_no_save(go_file, untagged_source):
    saver = MemorySaver()
    assert parse_file(go_file(untagged_source), saver=saver) == {}
    assert saver.calls == []


def test_filter_rejecting_everything_means_no_save(go_file, widget_source):
    saver = MemorySaver()
    parse_file(go_file(widget_source), filter=lambda *args: False, saver=saver)
    assert saver.calls == []


def test_syntax_error_is_fatal(go_file):
    saver = MemorySaver()
    path = go_file("package broken\n\ntype T struct {\n\tA int `protobuf:\"varint,1,name=a\"`\n")
    with pytest.raises(GoSyntaxError):
        parse_file(path, saver=saver)
    assert saver.calls == []


def test_type_check_problems_are_logged_not_fatal(go_file, caplog):
    path = go_file(
        "package demo\n\ntype T struct {\n"
        "\tA *missing.A `protobuf:\"bytes,1,opt,name=a\"`\n"
        "}\n"
    )
    saver = MemorySaver()
    with caplog.at_level(logging.WARNING, logger="setstr.pipeline"):
        metadata = parse_file(path, saver=saver)
    assert metadata == {"T": [FieldMeta("A", "*missing.A", "a")]}
    assert "undeclared name: missing" in caplog.text
    # no import to keep for an unknown alias
    assert saver.calls[0][2] == list(REQUIRED_IMPORTS)


def test_invalid_utf8_is_a_setstr_error(tmp_path):
    path = tmp_path / "bad.go"
    path.write_bytes(b"package bad\n\n\xff\xfe\n")
    saver = MemorySaver()
    with pytest.raises(SetstrError) as exc_info:
        parse_file(str(path), saver=saver)
    assert "invalid UTF-8 at byte 13" in str(exc_info.value)
    assert saver.calls == []


def test_valid_go_edge_forms_still_generate(go_file):
    path = go_file(
        "\ufeffpackage demo\n\n"
        "type Alias[T any] = []T\n\n"
        "type T struct {\n"
        "\tList[int]\n"
        "\tCount (int) `protobuf:\"varint,1,opt,name=count\"`\n"
        "\tLabel string `protobuf:\"bytes,2,opt,name=label\"`\n"
        "}\n"
    )
    saver = MemorySaver()
    metadata = parse_file(path, saver=saver)
    assert metadata == {"T": [
        FieldMeta("Count", "int", "count"),
        FieldMeta("Label", "string", "label"),
    ]}
    assert len(saver.calls) == 1


class TestFileSaver(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, source):
        path = os.path.join(self.dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path

    def test_writes_sibling_file(self):
        path = self._write("widget.go", WIDGET_SOURCE)
        parse_file(path, saver=FileSaver(command="setstr widget.go"))

        target = os.path.join(self.dir, "widget_setters.go")
        self.assertTrue(os.path.exists(target))
        with open(target, encoding="utf-8") as f:
            text = f.read()
        self.assertTrue(text.startswith("//\n// GENERATED FILE -- DO NOT EDIT\n//\n// command: setstr widget.go\n"))
        self.assertIn("package shapes\n", text)
        self.assertEqual(sorted(os.listdir(self.dir)), ["widget.go", "widget_setters.go"])

    def test_no_file_without_tagged_fields(self):
        path = self._write("plain.go", UNTAGGED_SOURCE)
        parse_file(path, saver=FileSaver())
        self.assertEqual(os.listdir(self.dir), ["plain.go"])

    def test_custom_suffix(self):
        self.assertEqual(output_path("a/b/widget.go", "_gen"), "a/b/widget_gen.go")
        self.assertEqual(output_path("widget.go", "_setters"), "widget_setters.go")
        # no character-set trimming of the extension
        self.assertEqual(output_path("go.go", "_setters"), "go_setters.go")

    def test_unwritable_target_raises_save_error(self):
        saver = FileSaver()
        missing = os.path.join(self.dir, "missing", "widget.go")
        with self.assertRaises(SaveError):
            saver(missing, "shapes", list(REQUIRED_IMPORTS), {"W": [FieldMeta("A", "int", "a")]})
        self.assertEqual(os.listdir(self.dir), [])


def test_stream_saver(go_file, widget_source):
    buf = io.StringIO()
    path = go_file(widget_source, "widget.go")
    parse_file(path, saver=StreamSaver(buf, command="setstr"))
    text = buf.getvalue()
    assert text.startswith(
        "//\n// GENERATED FILE -- DO NOT EDIT\n//\n// command: setstr\n//\n"
        "// source: %s\n//\n\npackage shapes\n" % path
    )


class TestDirectory(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name, source):
        with open(os.path.join(self.dir, name), "w", encoding="utf-8") as f:
            f.write(source)

    def test_each_file_saved_separately(self):
        self._write("a.go", "package demo\n\ntype A struct {\n\tN int `protobuf:\"varint,1,opt,name=n\"`\n}\n")
        self._write("b.go", "package demo\n\ntype B struct {\n\tA A `protobuf:\"bytes,1,opt,name=a\"`\n}\n")
        self._write("c.go", "package demo\n\nfunc helper() {}\n")
        self._write("notes.txt", "not go")

        saver = MemorySaver()
        results = parse_dir(self.dir, saver=saver)

        a = os.path.join(self.dir, "a.go")
        b = os.path.join(self.dir, "b.go")
        self.assertEqual(sorted(results), [a, b])
        self.assertEqual([call[0] for call in saver.calls], [a, b])
        self.assertIn("err = json.Unmarshal([]byte(value), &s.A)", saver.outputs[b])

    def test_generated_files_are_ignored(self):
        self._write("a.go", "package demo\n")
        self._write("a_setters.go", "package demo\n")
        self.assertEqual(go_files(self.dir, "_setters"), [os.path.join(self.dir, "a.go")])

    def test_one_bad_file_means_no_output(self):
        self._write("a.go", "package demo\n\ntype A struct {\n\tN int `protobuf:\"varint,1,opt,name=n\"`\n}\n")
        self._write("b.go", "package demo\n\ntype B struct {\n")
        saver = MemorySaver()
        with self.assertRaises(GoSyntaxError):
            parse_dir(self.dir, saver=saver)
        self.assertEqual(saver.calls, [])

    def test_parse_path_dispatches(self):
        self._write("a.go", "package demo\n\ntype A struct {\n\tBase pb.Base `protobuf:\"bytes,1,opt,name=base\"`\n\tN int `protobuf:\"varint,2,opt,name=n\"`\n}\n")
        saver = MemorySaver()
        file_result = parse_path(os.path.join(self.dir, "a.go"), suffix_filter(".Base"), saver)
        dir_result = parse_path(self.dir, suffix_filter(".Base"), saver)
        self.assertEqual(file_result, dir_result)
        self.assertEqual(list(file_result.values()), [{"A": [FieldMeta("Base", "pb.Base", "base")]}])

    def test_missing_path(self):
        with self.assertRaises(SetstrError):
            parse_path(os.path.join(self.dir, "nope.go"), saver=MemorySaver())
