# src/xsdpack/enums.py
from enum import Enum


class DuplicatesStrategy(str, Enum):
    overwrite = "overwrite"
    exclude = "exclude"
    error = "error"


class Classifier(str, Enum):
    schema = "schema"
    docs = "docs"
    dist = "dist"
