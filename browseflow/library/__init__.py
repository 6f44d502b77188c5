"""Storage for workflow descriptors."""

from __future__ import annotations

import os
from typing import Optional

from ..config import BrowseflowConfig, load_config
from .files import load_workflow_file
from .inmemory import InMemoryWorkflowLibrary
from .models import WorkflowDescriptor, WorkflowSummary
from .repository import WorkflowLibrary
from .sqlite import SQLiteWorkflowLibrary

_library_instance: WorkflowLibrary | None = None


def get_library(
    library_url: Optional[str] = None, config: Optional[BrowseflowConfig] = None
) -> WorkflowLibrary:
    """Factory function to obtain the workflow library.

    The backend is selected from ``library_url``, which can be given
    explicitly, via ``BROWSEFLOW_LIBRARY_URL`` or from loaded configuration.
    Without one, an in-memory library is returned.
    """

    global _library_instance
    if _library_instance is not None and library_url is None and config is None:
        return _library_instance

    config = config or load_config()
    library_url = (
        library_url
        or os.getenv("BROWSEFLOW_LIBRARY_URL")
        or getattr(config, "library_url", None)
    )

    if not library_url:
        _library_instance = InMemoryWorkflowLibrary()
        return _library_instance

    if library_url.startswith("sqlite://"):
        path = library_url.replace("sqlite://", "", 1)
        _library_instance = SQLiteWorkflowLibrary(path)
    else:
        raise ValueError(f"Unsupported library backend: {library_url}")

    return _library_instance


__all__ = [
    "WorkflowDescriptor",
    "WorkflowSummary",
    "WorkflowLibrary",
    "InMemoryWorkflowLibrary",
    "SQLiteWorkflowLibrary",
    "get_library",
    "load_workflow_file",
]
