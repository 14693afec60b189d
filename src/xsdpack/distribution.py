# src/xsdpack/distribution.py
"""
Assembles the schema, docs and dist archives from resolved schemas and
pre-built artifacts. Layout:

  schema: <short-name>/<file>.xsd
  docs:   changelog.txt, <section.into>/...
  dist:   <name>-<version>/{readme,license,notice}.txt, docs/, schema/, libs/
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date
from pathlib import Path

from .archive import ArchiveAssembler
from .config import XsdPackConfig
from .enums import DuplicatesStrategy
from .resolver import ModuleSource, ResolvedEntry

_PLACEHOLDER_RE = re.compile(r"\$\{(\w+)\}")


def expand_placeholders(text: str, values: Mapping[str, str]) -> str:
    """Replace ${name} for known names, leaving anything else untouched."""

    def _sub(m: re.Match[str]) -> str:
        return values.get(m.group(1), m.group(0))

    return _PLACEHOLDER_RE.sub(_sub, text)


def build_schema_archive(
    entries: Iterable[ResolvedEntry],
    duplicates: DuplicatesStrategy = DuplicatesStrategy.exclude,
    verbose: int = 0,
) -> ArchiveAssembler:
    archive = ArchiveAssembler(duplicates=duplicates, verbose=verbose)
    for entry in entries:
        archive.add_file(entry.arcname, entry.source_file)
    return archive


def build_docs_archive(cfg: XsdPackConfig, verbose: int = 0) -> ArchiveAssembler:
    archive = ArchiveAssembler(duplicates=DuplicatesStrategy.exclude, verbose=verbose)

    if cfg.docs.changelog is not None:
        changelog = cfg.path(cfg.docs.changelog)
        if changelog.is_file():
            archive.add_file(changelog.name, changelog)
        elif verbose >= 1:
            print(f"[docs] no changelog at {changelog}")

    for section in cfg.docs_sections():
        source = cfg.path(section.source)
        if not source.is_dir():
            if section.required:
                raise FileNotFoundError(f"Docs section '{section.into}' missing: {source}")
            if verbose >= 1:
                print(f"[docs] skipping optional section '{section.into}' ({source} not found)")
            continue
        count = archive.add_tree(source, section.into)
        if verbose >= 1:
            print(f"[docs] {section.into}: {count} file(s)")
    return archive


def module_artifacts(module: ModuleSource) -> list[Path]:
    return [p for p in (module.jar, module.sources_jar, module.javadoc_jar) if p is not None]


def build_dist_archive(
    cfg: XsdPackConfig,
    docs_zip: Path,
    schema_zip: Path,
    duplicates: DuplicatesStrategy | None = None,
    verbose: int = 0,
    today: date | None = None,
) -> ArchiveAssembler:
    archive = ArchiveAssembler(duplicates=duplicates or cfg.dist.duplicates, verbose=verbose)
    base = cfg.name_version
    values = {
        "copyright": str((today or date.today()).year),
        "version": cfg.project.version,
    }

    templates_dir = cfg.path(cfg.dist.templates_dir)
    for name in cfg.dist.templates:
        template = templates_dir / name
        if not template.is_file():
            raise FileNotFoundError(f"Dist template not found: {template}")
        text = template.read_text(encoding="utf-8")
        archive.add_bytes(f"{base}/{name}", expand_placeholders(text, values).encode("utf-8"), origin=str(template))

    archive.add_archive(docs_zip, f"{base}/docs")
    archive.add_archive(schema_zip, f"{base}/schema")

    for module in cfg.module_sources():
        for artifact in module_artifacts(module):
            if not artifact.is_file():
                raise FileNotFoundError(f"{module.name}: artifact not found: {artifact}")
            archive.add_file(f"{base}/libs/{artifact.name}", artifact)
    return archive
