import json
import unittest
from datetime import datetime, timezone

from igpackage.core.manifest import (
    build_guide_resource,
    build_index_dict,
    build_manifest_dict,
    titleize,
)
from igpackage.models import ExpectedMetadata, PackageContext


def _ctx():
    return PackageContext(
        folder="/out",
        canonical="http://hl7.org/fhir/us/demo",
        vpath="http://hl7.org/fhir/us/demo/2020May",
        package_id="hl7.fhir.us.demo",
    )


def _expected(fhir_version="4.0.1"):
    return ExpectedMetadata(
        version="1.2.0",
        package_id="hl7.fhir.us.demo",
        fhir_version=fhir_version,
        name="demo guide",
        date=datetime(2020, 5, 1, 12, 30, 45, tzinfo=timezone.utc),
        url="http://hl7.org/fhir/us/demo/2020May",
        canonical="http://hl7.org/fhir/us/demo",
    )


class TestManifest(unittest.TestCase):
    def test_titleize(self):
        self.assertEqual(titleize("demo guide"), "Demo Guide")
        self.assertEqual(titleize("usCore"), "UsCore")
        self.assertEqual(titleize(""), "")

    def test_guide_resource(self):
        guide = build_guide_resource(_ctx(), _expected())
        self.assertEqual(guide["url"], "http://hl7.org/fhir/us/demo/ImplementationGuide/ig")
        self.assertEqual(guide["name"], "demo guide")
        self.assertEqual(guide["title"], "Demo Guide")
        self.assertEqual(guide["packageId"], "hl7.fhir.us.demo")
        self.assertEqual(guide["license"], "CC0-1.0")
        self.assertEqual(guide["manifest"]["rendering"], "http://hl7.org/fhir/us/demo/2020May")
        self.assertEqual(guide["fhirVersion"], ["4.0.1"])
        self.assertEqual(guide["date"], "2020-05-01T12:30:45+00:00")

    def test_guide_skips_unrecognized_primary_version(self):
        self.assertNotIn("fhirVersion", build_guide_resource(_ctx(), _expected("4.0.1|4.3.0")))
        self.assertNotIn("fhirVersion", build_guide_resource(_ctx(), _expected("9.9.9")))

    def test_manifest_dict(self):
        m = build_manifest_dict(_ctx(), _expected(), ["4.0.1"])
        self.assertEqual(m["name"], "hl7.fhir.us.demo")
        self.assertEqual(m["version"], "1.2.0")
        self.assertEqual(m["url"], "http://hl7.org/fhir/us/demo/2020May")
        self.assertEqual(m["canonical"], "http://hl7.org/fhir/us/demo")
        self.assertEqual(m["date"], "20200501123045")
        self.assertEqual(m["type"], "fhir.ig")
        self.assertEqual(m["fhirVersions"], ["4.0.1"])
        self.assertEqual(m["dependencies"], {"hl7.fhir.r4.core": "4.0.1"})
        # serializable as-is
        json.dumps(m)

    def test_dependencies_only_for_known_families(self):
        m = build_manifest_dict(_ctx(), _expected("3.0.2|4.0.1|5.0.0"), ["3.0.2", "4.0.1", "5.0.0"])
        self.assertEqual(m["dependencies"], {"hl7.fhir.r3.core": "3.0.2", "hl7.fhir.r4.core": "4.0.1"})
        self.assertNotIn("hl7.fhir.core", m["dependencies"])

    def test_index(self):
        index = build_index_dict({
            "Patient-1.json": b'{"resourceType": "Patient", "id": "1"}',
            "ValueSet-vs.json": b'{"resourceType": "ValueSet", "id": "vs", "url": "http://x/vs", "version": "1"}',
            "junk.json": b"not json",
        })
        self.assertEqual(index["index-version"], 1)
        self.assertEqual([f["filename"] for f in index["files"]], ["Patient-1.json", "ValueSet-vs.json"])
        self.assertEqual(index["files"][1]["url"], "http://x/vs")
        self.assertNotIn("url", index["files"][0])


if __name__ == "__main__":
    unittest.main()
