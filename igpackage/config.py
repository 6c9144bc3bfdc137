from __future__ import annotations

PACKAGE_FILENAME = "package.tgz"
MANIFEST_NAME = "package.json"
INDEX_NAME = ".index.json"
INDEX_VERSION = 1

# npm package.json values written on build
TOOLS_VERSION = 3
PACKAGE_TYPE = "fhir.ig"
DEFAULT_LICENSE = "CC0-1.0"
DATE_FORMAT = "%Y%m%d%H%M%S"

SPEC_INTERNALS_NAME = "spec.internals"

# category -> folder inside the archive
CATEGORY_FOLDERS = {
    "resource": "package",
    "openapi": "package/openapi",
    "schematron": "package/xml",
    "other": "package/other",
}
