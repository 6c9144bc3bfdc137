from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from igpackage.config import CATEGORY_FOLDERS, PACKAGE_FILENAME


@dataclass(frozen=True)
class ValidationResult:
    level: str  # INFO | WARNING | ERROR
    code: str   # stable short identifier (e.g. MANIFEST_FIELD_MISSING)
    message: str
    relpath: Optional[str] = None  # package file the result refers to

    def problem_line(self) -> str:
        if self.relpath is None:
            return self.message
        return f"Problem with {self.relpath}: {self.message}"


class Category(str, Enum):
    RESOURCE = "resource"
    OPENAPI = "openapi"
    SCHEMATRON = "schematron"
    OTHER = "other"

    @property
    def folder(self) -> str:
        return CATEGORY_FOLDERS[self.value]


@dataclass(frozen=True)
class CategorizedFile:
    category: Category
    name: str      # logical name inside the category folder
    content: bytes


@dataclass(frozen=True)
class PackageContext:
    folder: str      # build output folder
    canonical: str   # canonical base url of the guide
    vpath: str       # publication path for this version
    package_id: str

    @property
    def package_path(self) -> Path:
        return Path(self.folder) / PACKAGE_FILENAME


@dataclass(frozen=True)
class ExpectedMetadata:
    version: str
    package_id: str
    fhir_version: str  # may be a |-delimited list, e.g. "4.0.1|4.3.0"
    name: str
    date: datetime
    url: str
    canonical: str


@dataclass
class CheckSummary:
    action: str  # validated | built
    package_path: str
    diagnostics: List[ValidationResult] = field(default_factory=list)
    resaved: bool = False
