"""YAML result file validation."""

from pathlib import PurePosixPath
from typing import Any

import yaml

from src.vitelis.core.exceptions import ValidationError

YAML_EXTENSIONS = frozenset({".yaml", ".yml"})
YAML_CONTENT_TYPES = frozenset(
    {
        "application/x-yaml",
        "application/yaml",
        "text/yaml",
        "text/x-yaml",
        "text/plain",
    }
)


def yaml_extension(filename: str | None) -> str | None:
    """Lower-cased ``.yaml``/``.yml`` suffix of ``filename``, else None."""
    if not filename:
        return None
    suffix = PurePosixPath(filename).suffix.lower()
    return suffix if suffix in YAML_EXTENSIONS else None


def is_valid_yaml_file(filename: str | None, content_type: str | None) -> bool:
    """Accept by extension or by declared content type."""
    if yaml_extension(filename):
        return True
    if content_type:
        return content_type.split(";")[0].strip().lower() in YAML_CONTENT_TYPES
    return False


def parse_yaml(content: bytes) -> Any:
    """Parse YAML with the safe loader; raises ValidationError on malformed input."""
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError("YAML file must be UTF-8 encoded") from e
    if not text.strip():
        raise ValidationError("YAML file is empty")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML content: {e}") from e
