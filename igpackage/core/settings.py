from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from igpackage.models import ExpectedMetadata, PackageContext


def _require(d: Dict[str, Any], key: str) -> str:
    value = d.get(key)
    if value is None or not str(value).strip():
        raise ValueError(f"Settings missing required value '{key}'")
    return str(value).strip()


def context_to_json_dict(ctx: PackageContext) -> Dict[str, Any]:
    return {
        "folder": ctx.folder,
        "canonical": ctx.canonical,
        "vpath": ctx.vpath,
        "packageId": ctx.package_id,
    }


def context_from_json_dict(d: Dict[str, Any]) -> PackageContext:
    return PackageContext(
        folder=_require(d, "folder"),
        canonical=_require(d, "canonical").rstrip("/"),
        vpath=str(d.get("vpath") or "").strip(),
        package_id=_require(d, "packageId"),
    )


def expected_to_json_dict(expected: ExpectedMetadata) -> Dict[str, Any]:
    return {
        "version": expected.version,
        "packageId": expected.package_id,
        "fhirVersion": expected.fhir_version,
        "name": expected.name,
        "date": expected.date.isoformat(timespec="seconds"),
        "url": expected.url,
        "canonical": expected.canonical,
    }


def expected_from_json_dict(d: Dict[str, Any]) -> ExpectedMetadata:
    raw_date = _require(d, "date")
    try:
        date = datetime.fromisoformat(raw_date)
    except ValueError as e:
        raise ValueError(f"Settings value 'date' is not ISO-8601: {raw_date}") from e

    return ExpectedMetadata(
        version=_require(d, "version"),
        package_id=_require(d, "packageId"),
        fhir_version=_require(d, "fhirVersion"),
        name=_require(d, "name"),
        date=date,
        url=_require(d, "url"),
        canonical=_require(d, "canonical"),
    )


def load_context(path: str) -> PackageContext:
    d = json.loads(Path(path).read_text(encoding="utf-8"))
    return context_from_json_dict(d)


def save_context(path: str, ctx: PackageContext) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(context_to_json_dict(ctx), indent=2), encoding="utf-8")
    return p


def load_expected(path: str) -> ExpectedMetadata:
    d = json.loads(Path(path).read_text(encoding="utf-8"))
    return expected_from_json_dict(d)


def save_expected(path: str, expected: ExpectedMetadata) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(expected_to_json_dict(expected), indent=2), encoding="utf-8")
    return p
