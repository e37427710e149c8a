"""
Content loader - Build catalog modules from a YAML definition.

The file holds a top-level `modules` list. Each entry is validated against
the Module schema, so malformed content (bad enum values, out-of-range
correct answers) fails here rather than at runtime.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from linguasync.schemas import Module


logger = logging.getLogger(__name__)

BUNDLED_CONTENT = Path(__file__).parent.parent / "content" / "modules.yaml"


def parse_modules(data: dict[str, Any]) -> list[Module]:
    """
    Validate a parsed content document.

    Raises:
        ValueError: If the document has no `modules` list
        pydantic.ValidationError: If a module is malformed
    """
    if not isinstance(data, dict) or not isinstance(data.get("modules"), list):
        raise ValueError("Content document must contain a 'modules' list")
    return [Module.model_validate(entry) for entry in data["modules"]]


def load_modules(path: Optional[Path] = None) -> list[Module]:
    """
    Load modules from a YAML file.

    Args:
        path: Content file (default: the bundled sample catalog)

    Raises:
        FileNotFoundError: If the content file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    file_path = Path(path) if path else BUNDLED_CONTENT
    if not file_path.exists():
        raise FileNotFoundError(f"Content file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        modules = parse_modules(yaml.safe_load(f))

    logger.debug(f"Loaded {len(modules)} modules from {file_path}")
    return modules
