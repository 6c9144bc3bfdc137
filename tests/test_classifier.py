import json
import tempfile
import unittest
from pathlib import Path

from igpackage.core.classifier import classify
from igpackage.core.scanner import scan_output_folder
from igpackage.models import Category


class TestClassifier(unittest.TestCase):
    def _classify_all(self, root: Path):
        return {f.name: classify(f) for f in scan_output_folder(str(root))}

    def test_categories(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            (out / "Patient-123.json").write_text(json.dumps({"resourceType": "Patient", "id": "123"}), encoding="utf-8")
            (out / "openapi-notes.openapi.json").write_text('{"openapi": "3.0.0", "resourceType": "x"}', encoding="utf-8")
            (out / "rules.sch").write_text("<schema/>", encoding="utf-8")
            (out / "spec.internals").write_text("{}", encoding="utf-8")
            (out / "index.html").write_text("<html/>", encoding="utf-8")

            got = self._classify_all(out)

            self.assertEqual(got["Patient-123.json"].category, Category.RESOURCE)
            self.assertEqual(got["Patient-123.json"].name, "Patient-123.json")
            self.assertEqual(got["openapi-notes.openapi.json"].category, Category.OPENAPI)
            self.assertEqual(got["openapi-notes.openapi.json"].name, "openapi-notes.openapi.json")
            self.assertEqual(got["rules.sch"].category, Category.SCHEMATRON)
            self.assertEqual(got["spec.internals"].category, Category.OTHER)
            self.assertIsNone(got["index.html"])

    def test_resource_named_from_content(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            raw = b'{"resourceType": "ValueSet", "id": "colors"}'
            (out / "whatever.json").write_bytes(raw)

            item = self._classify_all(out)["whatever.json"]
            self.assertEqual(item.name, "ValueSet-colors.json")
            self.assertEqual(item.content, raw)

    def test_json_skipped_without_resource_shape(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            (out / "no-id.json").write_text('{"resourceType": "Patient"}', encoding="utf-8")
            (out / "object-id.json").write_text('{"resourceType": "Patient", "id": {"x": 1}}', encoding="utf-8")
            (out / "null-id.json").write_text('{"resourceType": "Patient", "id": null}', encoding="utf-8")
            (out / "plain.json").write_text('{"a": 1}', encoding="utf-8")
            (out / "list.json").write_text('["resourceType"]', encoding="utf-8")
            (out / "object-type.json").write_text('{"resourceType": {"a": 1}, "id": "1"}', encoding="utf-8")
            (out / "null-type.json").write_text('{"resourceType": null, "id": "1"}', encoding="utf-8")
            (out / "broken.json").write_text('{"resourceType": ', encoding="utf-8")

            got = self._classify_all(out)
            for name in ("no-id.json", "object-id.json", "null-id.json", "plain.json", "list.json", "broken.json",
                         "object-type.json", "null-type.json"):
                self.assertIsNone(got[name], name)

    def test_numeric_id_is_primitive(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            (out / "obs.json").write_text('{"resourceType": "Observation", "id": 7}', encoding="utf-8")
            self.assertEqual(self._classify_all(out)["obs.json"].name, "Observation-7.json")


class TestScanner(unittest.TestCase):
    def test_flat_sorted_scan(self):
        with tempfile.TemporaryDirectory() as td:
            out = Path(td)
            (out / "b.json").write_text("{}", encoding="utf-8")
            (out / "a.sch").write_text("x", encoding="utf-8")
            (out / "sub").mkdir()
            (out / "sub" / "nested.sch").write_text("x", encoding="utf-8")

            names = [f.name for f in scan_output_folder(str(out))]
            self.assertEqual(names, ["a.sch", "b.json"])

    def test_missing_folder(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ValueError):
                scan_output_folder(str(Path(td) / "nope"))


if __name__ == "__main__":
    unittest.main()
