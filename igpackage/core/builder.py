from __future__ import annotations

import logging
from pathlib import Path

from igpackage.core.archive import PackageWriter
from igpackage.core.classifier import classify
from igpackage.core.manifest import build_guide_resource, build_manifest_dict
from igpackage.core.scanner import scan_output_folder
from igpackage.core.versions import split_fhir_versions
from igpackage.models import ExpectedMetadata, PackageContext

logger = logging.getLogger(__name__)


def build_package(ctx: PackageContext, expected: ExpectedMetadata) -> Path:
    """
    Build package.tgz from the files in the output folder.

    Raises InvalidFhirVersionError for a malformed FHIR version string and
    OSError for any scan/read/write failure.
    """
    fhir_versions = split_fhir_versions(expected.fhir_version)
    guide = build_guide_resource(ctx, expected)
    manifest = build_manifest_dict(ctx, expected, fhir_versions, guide=guide)

    npm = PackageWriter(str(ctx.package_path), manifest, guide=guide)

    added = 0
    for f in scan_output_folder(ctx.folder):
        item = classify(f)
        if item is None:
            continue
        npm.add_file(item.category, item.name, item.content)
        added += 1

    logger.info("Building %s from %d file(s) in %s", ctx.package_path, added, ctx.folder)
    return npm.finish()
