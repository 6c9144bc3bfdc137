from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple


class InvalidFhirVersionError(ValueError):
    pass


@dataclass(frozen=True)
class VersionFamily:
    prefix: str      # matched against the start of a version string
    label: str       # R2, R2B, ...
    package_id: str  # core package a guide of this family must depend on


# Closed table: versions outside these families are not dependency-checked.
VERSION_FAMILIES: Tuple[VersionFamily, ...] = (
    VersionFamily("1.0", "R2", "hl7.fhir.r2.core"),
    VersionFamily("1.4", "R2B", "hl7.fhir.r2b.core"),
    VersionFamily("3.0", "R3", "hl7.fhir.r3.core"),
    VersionFamily("4.0", "R4", "hl7.fhir.r4.core"),
)

GENERIC_CORE_PACKAGE = "hl7.fhir.core"

# Published FHIR version codes accepted as a guide's primary fhirVersion.
FHIR_VERSION_CODES = frozenset({
    "0.01", "0.05", "0.06", "0.11",
    "0.0.80", "0.0.81", "0.0.82",
    "0.4.0", "0.5.0",
    "1.0.0", "1.0.1", "1.0.2",
    "1.1.0", "1.4.0", "1.6.0", "1.8.0",
    "3.0.0", "3.0.1", "3.0.2",
    "3.3.0", "3.5.0",
    "4.0.0", "4.0.1",
    "4.1.0", "4.2.0", "4.3.0",
    "4.4.0", "4.5.0", "4.6.0",
    "5.0.0",
})

_VERSION_RE = re.compile(r"^\d+\.\d+(\.\d+)?(-[A-Za-z0-9.\-]+)?$")


def is_valid_code(code: str) -> bool:
    return code in FHIR_VERSION_CODES


def family_for_version(version: str) -> Optional[VersionFamily]:
    for fam in VERSION_FAMILIES:
        if version.startswith(fam.prefix):
            return fam
    return None


def split_fhir_versions(fhir_version: str) -> List[str]:
    """
    Split an expected FHIR version string on '|' into an ordered list.

    "4.0.1" -> ["4.0.1"], "4.0.1|4.3.0" -> ["4.0.1", "4.3.0"].
    Raises InvalidFhirVersionError when any element is not a version.
    """
    versions = fhir_version.split("|")
    for v in versions:
        if not _VERSION_RE.match(v):
            raise InvalidFhirVersionError(f"Invalid FHIR version '{v}' in '{fhir_version}'")
    return versions
