from __future__ import annotations

import calendar
import gzip
import io
import json
import logging
import os
import tarfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from igpackage.config import DATE_FORMAT, INDEX_NAME, MANIFEST_NAME
from igpackage.core.manifest import build_index_dict
from igpackage.models import Category

logger = logging.getLogger(__name__)

MANIFEST_PATH = f"package/{MANIFEST_NAME}"
INDEX_PATH = f"package/{INDEX_NAME}"


class PackageArchiveError(OSError):
    pass


@dataclass
class LoadedPackage:
    manifest: Dict[str, Any]
    files: Dict[str, bytes] = field(default_factory=dict)  # archive path -> content
    changed_by_loader: bool = False


def _to_json_bytes(doc: Mapping[str, Any]) -> bytes:
    return json.dumps(doc, indent=2, ensure_ascii=False).encode("utf-8")


def _archive_mtime(manifest: Mapping[str, Any]) -> int:
    try:
        stamp = calendar.timegm(datetime.strptime(str(manifest.get("date")), DATE_FORMAT).timetuple())
        # gzip and tar headers cannot hold dates before the epoch
        return max(0, stamp)
    except ValueError:
        return 0


def _root_resources(files: Mapping[str, bytes]) -> Dict[str, bytes]:
    # .json files sitting directly in package/, excluding package metadata
    out: Dict[str, bytes] = {}
    for path, content in files.items():
        folder, _, name = path.rpartition("/")
        if folder != "package" or not name.endswith(".json"):
            continue
        if name in (MANIFEST_NAME, INDEX_NAME):
            continue
        out[name] = content
    return out


def _write_archive(path: Path, manifest: Mapping[str, Any], files: Mapping[str, bytes]) -> Path:
    """
    Write package.json followed by every other entry (sorted) into a tar.gz.

    Entry metadata is fixed so the same inputs produce the same archive.
    """
    mtime = _archive_mtime(manifest)
    entries = [(MANIFEST_PATH, _to_json_bytes(manifest))]
    entries.extend((p, files[p]) for p in sorted(files) if p != MANIFEST_PATH)

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with tmp.open("wb") as raw:
            with gzip.GzipFile(filename="", mode="wb", fileobj=raw, mtime=mtime) as gz:
                with tarfile.open(fileobj=gz, mode="w", format=tarfile.PAX_FORMAT) as tar:
                    for name, content in entries:
                        info = tarfile.TarInfo(name)
                        info.size = len(content)
                        info.mtime = mtime
                        info.mode = 0o644
                        tar.addfile(info, io.BytesIO(content))
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return path


class PackageWriter:
    """
    Accumulates categorized files and writes them, with the manifest and an
    .index.json, as a package tarball.
    """

    def __init__(self, path: str, manifest: Dict[str, Any], guide: Optional[Mapping[str, Any]] = None):
        self.path = Path(path)
        self.manifest = manifest
        self.files: Dict[str, bytes] = {}
        if guide is not None:
            name = f"{guide['resourceType']}-{guide['id']}.json"
            self.add_file(Category.RESOURCE, name, _to_json_bytes(guide))

    def add_file(self, category: Category, name: str, content: bytes) -> None:
        arcname = f"{category.folder}/{name}"
        if arcname in self.files:
            logger.warning("Replacing duplicate package entry %s", arcname)
        self.files[arcname] = content

    def finish(self) -> Path:
        files = dict(self.files)
        files[INDEX_PATH] = _to_json_bytes(build_index_dict(_root_resources(files)))
        _write_archive(self.path, self.manifest, files)
        logger.info("Wrote %s (%d entries)", self.path, len(files) + 1)
        return self.path


def _normalize_member_name(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name


def _read_members(path: Path) -> Dict[str, bytes]:
    files: Dict[str, bytes] = {}
    try:
        with tarfile.open(path, mode="r:gz") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                fh = tar.extractfile(member)
                if fh is None:
                    continue
                files[_normalize_member_name(member.name)] = fh.read()
    except (tarfile.TarError, EOFError, gzip.BadGzipFile) as e:
        raise PackageArchiveError(f"Unreadable package archive {path}: {e}") from e
    return files


def load_package(path: str) -> LoadedPackage:
    """
    Load a package tarball and its package.json manifest.

    A missing or unreadable package/.index.json is rebuilt; the returned package
    then has changed_by_loader=True and should be saved back.
    """
    p = Path(path)
    files = _read_members(p)

    raw = files.pop(MANIFEST_PATH, None)
    if raw is None:
        raise PackageArchiveError(f"{path} has no {MANIFEST_PATH}")
    try:
        manifest = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        raise PackageArchiveError(f"{path}: {MANIFEST_PATH} is not valid JSON ({e})") from e
    if not isinstance(manifest, dict):
        raise PackageArchiveError(f"{path}: {MANIFEST_PATH} is not a JSON object")

    pkg = LoadedPackage(manifest=manifest, files=files)

    current: Any = None
    if INDEX_PATH in files:
        try:
            current = json.loads(files[INDEX_PATH].decode("utf-8"))
        except ValueError:
            current = None
    # an existing index is kept as-is, even if it differs from ours
    if not isinstance(current, dict):
        logger.debug("Rebuilding %s in %s", INDEX_PATH, path)
        files[INDEX_PATH] = _to_json_bytes(build_index_dict(_root_resources(files)))
        pkg.changed_by_loader = True

    return pkg


def save_package(pkg: LoadedPackage, path: str) -> Path:
    out = _write_archive(Path(path), pkg.manifest, pkg.files)
    logger.info("Saved %s", out)
    return out
