"""Task lifecycle and query engine."""
from .lifecycle import TaskService
from .macro_parser import MacroResult, parse_task_macros
from .query import query_tasks, total_pages
from .status import resolve_status
from .sweep import run_overdue_sweeper, sweep_overdue
from .validation import validate_task

__all__ = [
    "TaskService",
    "MacroResult",
    "parse_task_macros",
    "query_tasks",
    "total_pages",
    "resolve_status",
    "run_overdue_sweeper",
    "sweep_overdue",
    "validate_task",
]
