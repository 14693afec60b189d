# src/xsdpack/errors.py
"""Fatal configuration errors raised while assembling archives."""

from __future__ import annotations

from pathlib import Path


class ManifestPatternError(ValueError):
    def __init__(self, module: str, key: str, reason: str = "does not match 'http...schema/<name>/spring-...'"):
        self.module = module
        self.key = key
        super().__init__(f"{module}: schema key '{key}' {reason}")


class MissingResourceError(FileNotFoundError):
    def __init__(self, module: str, key: str, value: str):
        self.module = module
        self.key = key
        self.value = value
        super().__init__(f"{module}: no resource ending with '{value}' (mapped from '{key}')")


class DuplicateDestinationError(ValueError):
    def __init__(self, arcname: str, existing: Path | str, incoming: Path | str):
        self.arcname = arcname
        self.existing = existing
        self.incoming = incoming
        super().__init__(f"Duplicate archive entry '{arcname}': {existing} and {incoming}")


class ConfigError(ValueError):
    pass
