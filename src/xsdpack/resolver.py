# src/xsdpack/resolver.py
"""Schema namespace resolution.

Maps each module's schema manifest (namespace URI -> resource path) to the
physical XSD files that go into the schema archive, grouped by short name.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .errors import ManifestPatternError, MissingResourceError
from .manifest import is_manifest_path, load_manifest

# http://www.springframework.org/schema/<short>/spring-<anything>
_SHORT_NAME_RE = re.compile(r"http.*schema/(.*)/spring-.*")


@dataclass(slots=True, frozen=True)
class ModuleSource:
    name: str
    resource_dirs: tuple[Path, ...] = ()
    jar: Path | None = None
    sources_jar: Path | None = None
    javadoc_jar: Path | None = None

    def iter_resources(self) -> Iterator[Path]:
        """Yield every regular file under the resource dirs, sorted per dir."""
        for root in self.resource_dirs:
            if not root.is_dir():
                continue
            yield from sorted(p for p in root.rglob("*") if p.is_file())


@dataclass(slots=True, frozen=True)
class ResolvedEntry:
    short_name: str
    source_file: Path
    module: str = field(default="", compare=False)
    key: str = field(default="", compare=False)

    @property
    def arcname(self) -> str:
        return f"{self.short_name}/{self.source_file.name}"


class ManifestLoader(Protocol):
    """Return the module's schema manifest, or None if it ships no schemas."""

    def __call__(self, module: ModuleSource) -> Mapping[str, str] | None: ...


class ResourceLocator(Protocol):
    """Return the module resource whose path ends with ``suffix``, or None."""

    def __call__(self, module: ModuleSource, suffix: str) -> Path | None: ...


def load_module_manifest(module: ModuleSource) -> Mapping[str, str] | None:
    for path in module.iter_resources():
        if is_manifest_path(path):
            return load_manifest(path)
    return None


def locate_resource(module: ModuleSource, suffix: str) -> Path | None:
    candidates = (suffix, suffix.replace("/", "\\"))
    for path in module.iter_resources():
        s = str(path)
        if any(s.endswith(c) for c in candidates):
            return path
    return None


def extract_short_name(key: str, module: str = "<unknown>") -> str:
    """Strip the namespace URL scaffolding from a manifest key.

    Raises:
        ManifestPatternError: if the key does not have the expected shape
    """
    short_name = _SHORT_NAME_RE.sub(r"\1", key, count=1)
    if short_name == key:
        raise ManifestPatternError(module, key)
    if not short_name:
        raise ManifestPatternError(module, key, reason="has an empty schema name segment")
    return short_name


def resolve(
    module: ModuleSource,
    manifest_loader: ManifestLoader = load_module_manifest,
    resource_locator: ResourceLocator = locate_resource,
) -> list[ResolvedEntry]:
    """Resolve one module's manifest into (short name, XSD file) entries.

    A module without a manifest contributes nothing.

    Raises:
        ManifestPatternError: a key is not a schema namespace URI
        MissingResourceError: a value names a file the module does not contain
    """
    manifest = manifest_loader(module)
    if manifest is None:
        return []

    entries: list[ResolvedEntry] = []
    for key, value in manifest.items():
        short_name = extract_short_name(key, module.name)

        source = resource_locator(module, value)
        if source is None:
            raise MissingResourceError(module.name, key, value)

        entries.append(ResolvedEntry(short_name=short_name, source_file=source, module=module.name, key=key))
    return entries


def resolve_all(
    modules: Iterable[ModuleSource],
    manifest_loader: ManifestLoader = load_module_manifest,
    resource_locator: ResourceLocator = locate_resource,
    verbose: int = 0,
) -> list[ResolvedEntry]:
    resolved: list[ResolvedEntry] = []
    for module in modules:
        entries = resolve(module, manifest_loader, resource_locator)
        if verbose >= 2:
            for e in entries:
                print(f"[schema] {module.name}: {e.key} -> {e.arcname}")
        elif verbose >= 1 and entries:
            print(f"[schema] {module.name}: {len(entries)} schema(s)")
        resolved.extend(entries)
    return resolved
