from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class ScanFile:
    path: str           # full path
    name: str
    size_bytes: int

    def read_bytes(self) -> bytes:
        return Path(self.path).read_bytes()


def scan_output_folder(root: str) -> List[ScanFile]:
    """
    Flat (non-recursive) scan of a build output folder.

    Entries are returned sorted by name so the package built from them is
    deterministic. Sub-folders are skipped. Stat failures propagate.
    """
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise ValueError(f"Output folder is not a directory: {root}")

    files: List[ScanFile] = []
    for entry in sorted(root_path.iterdir(), key=lambda p: p.name):
        if not entry.is_file():
            continue
        files.append(
            ScanFile(
                path=str(entry),
                name=entry.name,
                size_bytes=int(entry.stat().st_size),
            )
        )
    return files
