from __future__ import annotations

import json
from typing import Any, List, Mapping

from igpackage.core.versions import GENERIC_CORE_PACKAGE, family_for_version
from igpackage.models import ExpectedMetadata, ValidationResult


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _check_prop(
    results: List[ValidationResult],
    pf: str,
    manifest: Mapping[str, Any],
    prop: str,
    expected: str,
) -> None:
    if prop not in manifest:
        results.append(
            ValidationResult("WARNING", "MANIFEST_FIELD_MISSING", f"missing {prop}", pf)
        )
        return

    found = _as_text(manifest[prop])
    if found != expected:
        results.append(
            ValidationResult(
                "WARNING",
                "MANIFEST_FIELD_MISMATCH",
                f"expected {prop} {expected} but found {found}",
                pf,
            )
        )


def validate_manifest(
    pf: str,
    manifest: Mapping[str, Any],
    expected: ExpectedMetadata,
) -> List[ValidationResult]:
    """
    Compare a package manifest against the values the build expects.

    Every discrepancy becomes a WARNING result for `pf`; nothing here raises
    on bad manifest content, and later checks always run.
    """
    results: List[ValidationResult] = []
    fhir_version = expected.fhir_version

    # -------------------------
    # Rule: identity fields
    # -------------------------
    _check_prop(results, pf, manifest, "version", expected.version)
    _check_prop(results, pf, manifest, "name", expected.package_id)
    _check_prop(results, pf, manifest, "url", expected.url)
    _check_prop(results, pf, manifest, "canonical", expected.canonical)

    # -------------------------
    # Rule: fhirVersions (only the first entry is compared)
    # -------------------------
    if "fhirVersions" not in manifest:
        results.append(
            ValidationResult("WARNING", "FHIR_VERSIONS_MISSING", "missing fhirVersions", pf)
        )
    else:
        versions = manifest["fhirVersions"]
        if not isinstance(versions, list):
            versions = [versions]
        if len(versions) == 0:
            results.append(
                ValidationResult("WARNING", "FHIR_VERSIONS_EMPTY", "fhirVersions size = 0", pf)
            )
        else:
            first = _as_text(versions[0])
            if first != fhir_version:
                results.append(
                    ValidationResult(
                        "WARNING",
                        "FHIR_VERSION_MISMATCH",
                        f"fhirVersions value mismatch (expected {fhir_version}, found {first})",
                        pf,
                    )
                )

    # -------------------------
    # Rule: dependencies follow the FHIR version family
    # -------------------------
    deps = manifest.get("dependencies")
    if isinstance(deps, Mapping):
        if GENERIC_CORE_PACKAGE in deps:
            results.append(
                ValidationResult(
                    "WARNING",
                    "CORE_DEPENDENCY_PRESENT",
                    f"found {GENERIC_CORE_PACKAGE} in dependencies",
                    pf,
                )
            )

        fam = family_for_version(fhir_version)
        if fam is not None:
            if fam.package_id not in deps:
                results.append(
                    ValidationResult(
                        "WARNING",
                        "FAMILY_DEPENDENCY_MISSING",
                        f"{fam.label} guide doesn't list {fam.label} in its dependencies",
                        pf,
                    )
                )
            else:
                found = _as_text(deps[fam.package_id])
                if found != fhir_version:
                    results.append(
                        ValidationResult(
                            "WARNING",
                            "FAMILY_DEPENDENCY_MISMATCH",
                            f"fhirVersions value mismatch on {fam.package_id} "
                            f"(expected {fhir_version}, found {found})",
                            pf,
                        )
                    )

    return results
