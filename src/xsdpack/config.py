# src/xsdpack/config.py
"""Project configuration: a YAML file validated with pydantic.

Relative paths are resolved against the directory holding the config file
(then ``root`` inside it).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .enums import DuplicatesStrategy
from .errors import ConfigError
from .resolver import ModuleSource

DEFAULT_CONFIG_NAME = "xsdpack.yaml"
DEFAULT_RESOURCES = Path("src/main/resources")


class _Model(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ProjectInfo(_Model):
    name: str = Field(..., min_length=1, description="Archive base name, e.g. spring-framework")
    version: str = Field(..., min_length=1)


class ModuleConfig(_Model):
    name: str = Field(..., min_length=1)
    resources: list[Path] | None = Field(default=None, description="Defaults to <name>/src/main/resources")
    jar: Path | None = None
    sources_jar: Path | None = None
    javadoc_jar: Path | None = None


class SchemaOptions(_Model):
    duplicates: DuplicatesStrategy = DuplicatesStrategy.exclude


class DocsSection(_Model):
    source: Path
    into: str
    required: bool = True

    @field_validator("into")
    @classmethod
    def _strip_slashes(cls, v: str) -> str:
        return v.strip("/")


class DocsOptions(_Model):
    changelog: Path | None = Path("src/dist/changelog.txt")
    sections: list[DocsSection] | None = None


class DistOptions(_Model):
    templates_dir: Path = Path("src/docs/dist")
    templates: list[str] = Field(default_factory=lambda: ["readme.txt", "license.txt", "notice.txt"])
    duplicates: DuplicatesStrategy = DuplicatesStrategy.exclude


class XsdPackConfig(_Model):
    project: ProjectInfo
    root: Path = Path(".")
    output_dir: Path = Path("build/distributions")
    modules: list[ModuleConfig] = Field(default_factory=list)
    schemas: SchemaOptions = Field(default_factory=SchemaOptions)
    docs: DocsOptions = Field(default_factory=DocsOptions)
    dist: DistOptions = Field(default_factory=DistOptions)

    _base_dir: Path = PrivateAttr(default_factory=Path.cwd)

    @field_validator("modules")
    @classmethod
    def _unique_module_names(cls, v: list[ModuleConfig]) -> list[ModuleConfig]:
        seen: set[str] = set()
        for m in v:
            if m.name in seen:
                raise ValueError(f"duplicate module name '{m.name}'")
            seen.add(m.name)
        return v

    @property
    def name_version(self) -> str:
        return f"{self.project.name}-{self.project.version}"

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path(self, p: Path) -> Path:
        if p.is_absolute():
            return p
        return self._base_dir / self.root / p

    def archive_path(self, classifier: str, out_dir: Path | None = None) -> Path:
        directory = out_dir if out_dir is not None else self.path(self.output_dir)
        return directory / f"{self.name_version}-{classifier}.zip"

    def module_sources(self) -> list[ModuleSource]:
        sources = []
        for m in self.modules:
            resources = m.resources if m.resources is not None else [Path(m.name) / DEFAULT_RESOURCES]
            sources.append(
                ModuleSource(
                    name=m.name,
                    resource_dirs=tuple(self.path(r) for r in resources),
                    jar=self.path(m.jar) if m.jar else None,
                    sources_jar=self.path(m.sources_jar) if m.sources_jar else None,
                    javadoc_jar=self.path(m.javadoc_jar) if m.javadoc_jar else None,
                )
            )
        return sources

    def docs_sections(self) -> list[DocsSection]:
        if self.docs.sections is not None:
            return self.docs.sections
        name = self.project.name
        return [
            DocsSection(source=Path("build/docs/javadoc"), into="javadoc-api"),
            DocsSection(source=Path("build/docs/ref-docs/html5"), into=f"{name}-reference"),
            DocsSection(source=Path("build/docs/ref-docs/pdf"), into=f"{name}-reference/pdf", required=False),
            DocsSection(source=Path("build/docs/kdoc"), into="kdoc-api", required=False),
        ]


def config_from_dict(data: Any, base_dir: Path) -> XsdPackConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")
    try:
        cfg = XsdPackConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config:\n{e}") from e
    cfg._base_dir = base_dir
    return cfg


def load_config(path: Path) -> XsdPackConfig:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e
    return config_from_dict(data, path.resolve().parent)
