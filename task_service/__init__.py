"""Task Service - task management with title macros and overdue tracking."""

__version__ = "1.0.0"
