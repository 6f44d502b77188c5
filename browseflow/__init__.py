"""Browseflow: sequential workflow execution for browser-hosted AI steps."""

from .contracts import BaseStep, StepResult, WorkflowResult, dump_steps, parse_steps
from .executors import ExecutorRegistry, create_default_registry
from .host import get_host
from .library import get_library
from .propagation import propagate_schemas
from .runner import WorkflowRunner, execute_workflow

__version__ = "0.1.0"
__all__ = [
    "BaseStep",
    "StepResult",
    "WorkflowResult",
    "parse_steps",
    "dump_steps",
    "ExecutorRegistry",
    "create_default_registry",
    "get_host",
    "get_library",
    "propagate_schemas",
    "WorkflowRunner",
    "execute_workflow",
]
