"""Output format detection and rendering of generated documents."""

import json
from pathlib import Path

import yaml

from api_docgen.generator.base import Document

FORMATS = ("json", "yaml")


def detect_format(file_path: Path | None) -> str:
    """Pick an output format from a file name.

    Returns: 'yaml' for .yaml/.yml files, otherwise 'json' (also for stdout).
    """
    if file_path is not None and file_path.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def render(document: Document, fmt: str = "json") -> str:
    data = document.to_dict()
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
