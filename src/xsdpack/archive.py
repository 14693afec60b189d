# src/xsdpack/archive.py
"""
Zip assembly with an explicit policy for entries that land on the same path.
Entries are collected first and written in insertion order by write().
"""

from __future__ import annotations

import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path

from .enums import DuplicatesStrategy
from .errors import DuplicateDestinationError


@dataclass(slots=True)
class _Entry:
    origin: str
    path: Path | None = None
    data: bytes | None = None


def _normalize_arcname(arcname: str) -> str:
    name = arcname.replace("\\", "/").lstrip("/")
    while "//" in name:
        name = name.replace("//", "/")
    if not name or name.endswith("/"):
        raise ValueError(f"Invalid archive entry name: {arcname!r}")
    if ".." in name.split("/"):
        raise ValueError(f"Archive entry name escapes the archive root: {arcname!r}")
    return name


def _join(prefix: str, name: str) -> str:
    prefix = prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


class ArchiveAssembler:
    def __init__(self, duplicates: DuplicatesStrategy = DuplicatesStrategy.exclude, verbose: int = 0):
        self.duplicates = duplicates
        self.verbose = verbose
        self._entries: dict[str, _Entry] = {}
        self.excluded: list[tuple[str, str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, arcname: str) -> bool:
        return _normalize_arcname(arcname) in self._entries

    @property
    def names(self) -> list[str]:
        return list(self._entries)

    def _put(self, arcname: str, entry: _Entry) -> bool:
        name = _normalize_arcname(arcname)
        existing = self._entries.get(name)
        if existing is not None:
            if self.duplicates == DuplicatesStrategy.error:
                raise DuplicateDestinationError(name, existing.origin, entry.origin)
            if self.duplicates == DuplicatesStrategy.exclude:
                self.excluded.append((name, entry.origin))
                if self.verbose >= 1:
                    print(f"[archive] duplicate {name} from {entry.origin} excluded (kept {existing.origin})")
                return False
            if self.verbose >= 1:
                print(f"[archive] duplicate {name}: {entry.origin} replaces {existing.origin}")
        self._entries[name] = entry
        return True

    def add_file(self, arcname: str, source: Path) -> bool:
        """Queue a file; returns False when the duplicate policy dropped it."""
        if not source.is_file():
            raise FileNotFoundError(f"Archive source is not a file: {source}")
        return self._put(arcname, _Entry(origin=str(source), path=source))

    def add_bytes(self, arcname: str, data: bytes, origin: str = "<generated>") -> bool:
        return self._put(arcname, _Entry(origin=origin, data=data))

    def add_tree(self, source_dir: Path, prefix: str = "") -> int:
        if not source_dir.is_dir():
            raise FileNotFoundError(f"Archive source is not a directory: {source_dir}")
        added = 0
        for path in sorted(p for p in source_dir.rglob("*") if p.is_file()):
            rel = path.relative_to(source_dir).as_posix()
            if self.add_file(_join(prefix, rel), path):
                added += 1
        return added

    def add_archive(self, zip_path: Path, prefix: str = "") -> int:
        """Re-root the file entries of an existing zip under ``prefix``."""
        added = 0
        with zipfile.ZipFile(zip_path) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                origin = f"{zip_path}!{info.filename}"
                if self._put(_join(prefix, info.filename), _Entry(origin=origin, data=zf.read(info))):
                    added += 1
        return added

    def write(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False) as f:
            tmp = Path(f.name)
        try:
            with zipfile.ZipFile(tmp, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for name, entry in self._entries.items():
                    if entry.path is not None:
                        zf.write(entry.path, name)
                    else:
                        zf.writestr(name, entry.data or b"")
            tmp.replace(path)
        finally:
            tmp.unlink(missing_ok=True)

        if self.verbose >= 1:
            print(f"[archive] wrote {len(self._entries)} entries to {path}")
        return path
