#!/usr/bin/env python3
# src/xsdpack/cli.py


from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import typer

from .config import DEFAULT_CONFIG_NAME, XsdPackConfig, load_config
from .enums import DuplicatesStrategy
from .orchestrator import (
    ArchiveResult,
    ArchiveTaskConfig,
    Reporter,
    SimpleReporter,
    run_dist_zip,
    run_docs_zip,
    run_schema_zip,
)
from .resolver import resolve_all

app = typer.Typer(
    name="xsdpack",
    help="Package module XSD schemas, docs and jars into distribution archives.",
    add_completion=False,
)


def _verbosity_callback(value: int):
    return max(0, min(value, 3))


def _load(config: Path) -> XsdPackConfig:
    try:
        return load_config(config)
    except ValueError as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e


def _run(task: Callable[[ArchiveTaskConfig, Reporter], ArchiveResult], cfg: ArchiveTaskConfig) -> None:
    reporter = SimpleReporter()
    try:
        result = task(cfg, reporter)
    except (ValueError, FileNotFoundError) as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e

    print(f"\n{result.human_summary()}")


@app.command()
def info() -> None:
    print("xsdpack archives")
    print("-" * 80)
    print(f"{'Archive':<10} {'Contents'}")
    print("-" * 80)
    print(f"{'schema':<10} {'<short-name>/<file>.xsd for every META-INF/spring.schemas entry'}")
    print(f"{'docs':<10} {'changelog.txt plus pre-rendered API and reference docs'}")
    print(f"{'dist':<10} {'<name>-<version>/ with readme/license/notice, docs/, schema/, libs/'}")
    print("-" * 80)
    print("\nDuplicate entry strategies: " + ", ".join(s.value for s in DuplicatesStrategy))
    print("\nExamples:")
    print("  xsdpack schemas --config xsdpack.yaml")
    print("  xsdpack schema --config xsdpack.yaml --duplicates error")
    print("  xsdpack dist --config xsdpack.yaml --out build/distributions")


@app.command()
def diagnose() -> None:
    print("xsdpack Environment Check\n")

    deps = {
        "yaml": "PyYAML",
        "pydantic": "Pydantic",
        "typer": "Typer",
    }

    print("Dependencies")
    print("-" * 50)
    print(f"{'Package':<30} {'Status':<10} {'Version'}")
    print("-" * 50)

    for module, name in deps.items():
        try:
            m = __import__(module)
            version = getattr(m, "__version__", "unknown")
            print(f"{name:<30} {'[OK]':<10} {version}")
        except ImportError:
            print(f"{name:<30} {'[MISSING]':<10} {'not installed'}")
    print(f"\nPython: {sys.version}")


@app.command()
def schemas(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project config file"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback),
) -> None:
    """List resolved schemas without writing an archive."""
    project = _load(config)
    try:
        entries = resolve_all(project.module_sources(), verbose=verbose)
    except (ValueError, FileNotFoundError) as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e

    for entry in entries:
        print(f"{entry.module:<30} {entry.arcname:<45} {entry.source_file}")
    print(f"\n{len(entries)} schema(s)")


@app.command()
def schema(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project config file"),
    out: Path | None = typer.Option(None, "--out", help="Output directory (overrides output_dir)"),
    duplicates: DuplicatesStrategy | None = typer.Option(
        None, "--duplicates", help="Same destination twice: overwrite|exclude|error", case_sensitive=False
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show plan without writing anything"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback),
) -> None:
    """Build the schema archive."""
    cfg = ArchiveTaskConfig(project=_load(config), out_dir=out, duplicates=duplicates, dry_run=dry_run, verbose=verbose)
    _run(run_schema_zip, cfg)


@app.command()
def docs(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project config file"),
    out: Path | None = typer.Option(None, "--out", help="Output directory (overrides output_dir)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show plan without writing anything"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback),
) -> None:
    """Build the docs archive from pre-rendered documentation."""
    cfg = ArchiveTaskConfig(project=_load(config), out_dir=out, dry_run=dry_run, verbose=verbose)
    _run(run_docs_zip, cfg)


@app.command()
def dist(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Project config file"),
    out: Path | None = typer.Option(None, "--out", help="Output directory (overrides output_dir)"),
    duplicates: DuplicatesStrategy | None = typer.Option(
        None, "--duplicates", help="Same destination twice: overwrite|exclude|error", case_sensitive=False
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show plan without writing anything"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, callback=_verbosity_callback),
) -> None:
    """Build the full distribution archive (docs, schemas, jars)."""
    cfg = ArchiveTaskConfig(project=_load(config), out_dir=out, duplicates=duplicates, dry_run=dry_run, verbose=verbose)
    _run(run_dist_zip, cfg)


if __name__ == "__main__":
    app()
