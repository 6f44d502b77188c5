"""Read workflow descriptors from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .models import WorkflowDescriptor


def load_workflow_file(path: str | Path) -> WorkflowDescriptor:
    """Load a workflow from ``path``.

    The file holds either a bare list of step descriptors, in which case the
    file name becomes the workflow id and name, or a descriptor mapping with
    ``id``, ``name``, ``description`` and ``steps``.
    """
    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() == ".json":
        data: Any = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if isinstance(data, list):
        return WorkflowDescriptor(id=path.stem, name=path.stem, steps=data)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a workflow descriptor")

    data.setdefault("id", path.stem)
    data.setdefault("name", data["id"])
    return WorkflowDescriptor.model_validate(data)
