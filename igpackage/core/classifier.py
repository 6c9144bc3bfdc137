from __future__ import annotations

import json
from typing import Any, Optional

from igpackage.config import SPEC_INTERNALS_NAME
from igpackage.core.scanner import ScanFile
from igpackage.models import CategorizedFile, Category


def _is_primitive(value: Any) -> bool:
    return value is not None and not isinstance(value, (dict, list))


def _primitive_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _classify_resource(f: ScanFile) -> Optional[CategorizedFile]:
    src = f.read_bytes()
    text = src.decode("utf-8", errors="replace")
    if '"resourceType"' not in text:
        return None

    try:
        doc = json.loads(text)
    except ValueError:
        return None
    if not isinstance(doc, dict):
        return None
    if not _is_primitive(doc.get("resourceType")) or not _is_primitive(doc.get("id")):
        return None

    rt = _primitive_text(doc["resourceType"])
    rid = _primitive_text(doc["id"])
    return CategorizedFile(Category.RESOURCE, f"{rt}-{rid}.json", src)


def classify(f: ScanFile) -> Optional[CategorizedFile]:
    """
    Decide which package category a build output file belongs to.

    First match wins:
      *.openapi.json   -> OPENAPI (file name)
      *.json           -> RESOURCE as <resourceType>-<id>.json, if it is one
      *.sch            -> SCHEMATRON (file name)
      spec.internals   -> OTHER
    Anything else is left out of the package.
    """
    name = f.name

    if name.endswith(".openapi.json"):
        return CategorizedFile(Category.OPENAPI, name, f.read_bytes())
    if name.endswith(".json"):
        return _classify_resource(f)
    if name.endswith(".sch"):
        return CategorizedFile(Category.SCHEMATRON, name, f.read_bytes())
    if name == SPEC_INTERNALS_NAME:
        return CategorizedFile(Category.OTHER, name, f.read_bytes())

    return None
