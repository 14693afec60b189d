# src/xsdpack/orchestrator.py
"""Archive orchestrator - runs the schema, docs and dist archive tasks."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import XsdPackConfig
from .distribution import build_dist_archive, build_docs_archive, build_schema_archive, module_artifacts
from .enums import Classifier, DuplicatesStrategy
from .resolver import resolve_all


@dataclass(slots=True)
class ArchiveTaskConfig:
    project: XsdPackConfig
    out_dir: Path | None = None
    duplicates: DuplicatesStrategy | None = None
    dry_run: bool = False
    verbose: int = 0

    def archive_path(self, classifier: Classifier) -> Path:
        return self.project.archive_path(classifier.value, self.out_dir)


class Reporter(Protocol):
    def task(self, label: str): ...
    def info(self, msg: str): ...


class SimpleReporter:
    def task(self, label: str):
        print(label)
        return self

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def info(self, msg: str):
        print(msg)


@dataclass(slots=True)
class ArchiveResult:
    classifier: Classifier
    path: Path
    entries: int
    written: bool = True

    def human_summary(self) -> str:
        if not self.written:
            return f"[plan] {self.classifier.value} archive -> {self.path}"
        return f"[OK] Wrote {self.classifier.value} archive with {self.entries} entries: {self.path}"


def run_schema_zip(cfg: ArchiveTaskConfig, r: Reporter) -> ArchiveResult:
    project = cfg.project
    target = cfg.archive_path(Classifier.schema)
    duplicates = cfg.duplicates or project.schemas.duplicates

    with r.task("Resolving schema manifests..."):
        entries = resolve_all(project.module_sources(), verbose=cfg.verbose)
        r.info(f"Resolved {len(entries)} schema(s) from {len(project.modules)} module(s)")

    if cfg.dry_run:
        r.info(f"[plan] duplicates={duplicates.value}")
        for e in entries:
            r.info(f"[plan] {e.arcname} <- {e.source_file}")
        return ArchiveResult(Classifier.schema, target, len(entries), written=False)

    with r.task("Writing schema archive..."):
        archive = build_schema_archive(entries, duplicates=duplicates, verbose=cfg.verbose)
        if archive.excluded:
            r.info(f"Excluded {len(archive.excluded)} duplicate entries")
        archive.write(target)

    return ArchiveResult(Classifier.schema, target, len(archive))


def run_docs_zip(cfg: ArchiveTaskConfig, r: Reporter) -> ArchiveResult:
    project = cfg.project
    target = cfg.archive_path(Classifier.docs)

    if cfg.dry_run:
        if project.docs.changelog is not None:
            r.info(f"[plan] changelog.txt <- {project.path(project.docs.changelog)}")
        for section in project.docs_sections():
            r.info(f"[plan] {section.into}/ <- {project.path(section.source)}")
        return ArchiveResult(Classifier.docs, target, 0, written=False)

    with r.task("Writing docs archive..."):
        archive = build_docs_archive(project, verbose=cfg.verbose)
        archive.write(target)

    return ArchiveResult(Classifier.docs, target, len(archive))


def run_dist_zip(cfg: ArchiveTaskConfig, r: Reporter) -> ArchiveResult:
    project = cfg.project
    target = cfg.archive_path(Classifier.dist)

    if cfg.dry_run:
        base = project.name_version
        for name in project.dist.templates:
            r.info(f"[plan] {base}/{name} <- {project.path(project.dist.templates_dir) / name}")
        r.info(f"[plan] {base}/docs/ <- {cfg.archive_path(Classifier.docs)}")
        r.info(f"[plan] {base}/schema/ <- {cfg.archive_path(Classifier.schema)}")
        for module in project.module_sources():
            for artifact in module_artifacts(module):
                r.info(f"[plan] {base}/libs/{artifact.name} <- {artifact}")
        return ArchiveResult(Classifier.dist, target, 0, written=False)

    docs_zip = run_docs_zip(cfg, r).path
    schema_zip = run_schema_zip(cfg, r).path

    with r.task("Writing dist archive..."):
        archive = build_dist_archive(project, docs_zip, schema_zip, duplicates=cfg.duplicates, verbose=cfg.verbose)
        archive.write(target)

    return ArchiveResult(Classifier.dist, target, len(archive))
