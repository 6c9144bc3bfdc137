from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from igpackage.config import (
    DATE_FORMAT,
    DEFAULT_LICENSE,
    INDEX_VERSION,
    PACKAGE_TYPE,
    TOOLS_VERSION,
)
from igpackage.core.versions import family_for_version, is_valid_code
from igpackage.models import ExpectedMetadata, PackageContext

# resource properties copied into .index.json when present
_INDEX_FIELDS = ("url", "version", "kind", "type")


def titleize(s: str) -> str:
    """Upper-case the first letter of each space separated word, keep the rest."""
    out = []
    up = True
    for c in s:
        out.append(c.upper() if up else c)
        up = c == " "
    return "".join(out)


def url_path(base: str, *parts: str) -> str:
    segments = [base.rstrip("/")] + [p.strip("/") for p in parts]
    return "/".join(segments)


def build_guide_resource(ctx: PackageContext, expected: ExpectedMetadata) -> Dict[str, Any]:
    """
    Minimal ImplementationGuide resource describing the package.
    """
    guide: Dict[str, Any] = {
        "resourceType": "ImplementationGuide",
        "id": "ig",
        "url": url_path(ctx.canonical, "ImplementationGuide", "ig"),
        "version": expected.version,
        "name": expected.name,
        "title": titleize(expected.name),
        "status": "draft",
        "date": expected.date.isoformat(timespec="seconds"),
        "packageId": ctx.package_id,
        "license": DEFAULT_LICENSE,
    }
    # Only a single recognized code is registered as the primary version
    if is_valid_code(expected.fhir_version):
        guide["fhirVersion"] = [expected.fhir_version]
    guide["manifest"] = {"rendering": ctx.vpath}
    return guide


def dependencies_for_versions(fhir_versions: List[str]) -> Dict[str, str]:
    deps: Dict[str, str] = {}
    for v in fhir_versions:
        fam = family_for_version(v)
        if fam is not None and fam.package_id not in deps:
            deps[fam.package_id] = v
    return deps


def build_manifest_dict(
    ctx: PackageContext,
    expected: ExpectedMetadata,
    fhir_versions: List[str],
    guide: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    title = titleize(expected.name)
    if guide is not None:
        title = str(guide.get("title") or title)

    manifest: Dict[str, Any] = {
        "name": ctx.package_id,
        "version": expected.version,
        "tools-version": TOOLS_VERSION,
        "type": PACKAGE_TYPE,
        "date": expected.date.strftime(DATE_FORMAT),
        "license": DEFAULT_LICENSE,
        "canonical": ctx.canonical,
        "url": ctx.vpath,
        "title": title,
        "description": f"{title} (built from {ctx.package_id}#{expected.version})",
        "fhirVersions": list(fhir_versions),
        "dependencies": dependencies_for_versions(fhir_versions),
    }
    return manifest


def index_entry(filename: str, content: bytes) -> Optional[Dict[str, Any]]:
    try:
        doc = json.loads(content.decode("utf-8"))
    except ValueError:
        return None
    if not isinstance(doc, dict) or "resourceType" not in doc:
        return None

    entry: Dict[str, Any] = {
        "filename": filename,
        "resourceType": doc["resourceType"],
        "id": doc.get("id"),
    }
    for key in _INDEX_FIELDS:
        value = doc.get(key)
        if isinstance(value, (str, int, float, bool)):
            entry[key] = value
    return entry


def build_index_dict(resources: Mapping[str, bytes]) -> Dict[str, Any]:
    """
    .index.json for the resources directly in package/, keyed by file name.
    """
    files: List[Dict[str, Any]] = []
    for filename in sorted(resources):
        entry = index_entry(filename, resources[filename])
        if entry is not None:
            files.append(entry)
    return {"index-version": INDEX_VERSION, "files": files}
