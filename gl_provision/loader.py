"""Read group and permission definition files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from gl_provision.errors import DefinitionError
from gl_provision.models import GroupDefinition, PermissionEntry


def _read_json(path: str | Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise DefinitionError(f"Cannot read definition file '{path}': {e.strerror}") from e
    except UnicodeDecodeError as e:
        raise DefinitionError(f"Definition file '{path}' is not UTF-8 text: {e.reason}") from e
    except json.JSONDecodeError as e:
        raise DefinitionError(f"Definition file '{path}' is not valid JSON: {e}") from e


def load_group_definition(path: str | Path) -> GroupDefinition:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise DefinitionError(f"Group definition '{path}' must be a JSON object")
    missing = [key for key in ("name", "path") if not data.get(key)]
    if missing:
        raise DefinitionError(f"Group definition '{path}' is missing: {', '.join(missing)}")
    return GroupDefinition.from_dict(data)


def load_permissions(path: str | Path) -> list[PermissionEntry]:
    """Load an ordered list of permission entries."""
    data = _read_json(path)
    if not isinstance(data, list):
        raise DefinitionError(f"Permission definition '{path}' must be a JSON array")
    entries = []
    for index, item in enumerate(data):
        try:
            entries.append(PermissionEntry.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise DefinitionError(f"Permission entry {index} in '{path}' is invalid: {e!r}") from e
    return entries


def list_group_files(groups_dir: str | Path) -> list[str]:
    """Names of the group definition files in a directory, sorted."""
    try:
        entries = list(Path(groups_dir).iterdir())
    except OSError as e:
        raise DefinitionError(f"Cannot list group definitions in '{groups_dir}': {e.strerror}") from e
    return sorted(p.name for p in entries if p.is_file() and not p.name.startswith("."))
