"""
Title macros.

A task title may carry a priority macro (``!1`` .. ``!4``) and a deadline macro
(``!before DD.MM.YYYY`` or ``!before DD-MM-YYYY``). Parsing strips the honored
macros from the title and returns the extracted values.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ..models.domain import TaskPriority

# Scan order is fixed: when several priority macros are present the first
# entry here that occurs in the title wins.
PRIORITY_MACROS = (
    ("!1", TaskPriority.CRITICAL),
    ("!2", TaskPriority.HIGH),
    ("!3", TaskPriority.MEDIUM),
    ("!4", TaskPriority.LOW),
)

_PRIORITY_PATTERNS = [
    (re.compile(re.escape(token) + r"(?!\d)"), priority)
    for token, priority in PRIORITY_MACROS
]

DEADLINE_MACRO = re.compile(r"!before\s+(\d{2})([.-])(\d{2})\2(\d{4})")


@dataclass(frozen=True)
class MacroResult:
    title: str
    priority: Optional[TaskPriority] = None
    deadline: Optional[datetime] = None


def _cut(text: str, match: "re.Match") -> str:
    return text[:match.start()] + text[match.end():]


def parse_task_macros(title: str) -> MacroResult:
    """
    Extract priority and deadline macros from a raw title.

    Only one priority macro and the leftmost deadline macro are honored; any
    other macro-looking text stays in the title. A deadline macro with an
    impossible calendar date is left untouched and yields no deadline.
    """
    text = title or ""
    priority = None
    deadline = None

    for pattern, candidate in _PRIORITY_PATTERNS:
        match = pattern.search(text)
        if match:
            priority = candidate
            text = _cut(text, match)
            break

    match = DEADLINE_MACRO.search(text)
    if match:
        day, _, month, year = match.groups()
        try:
            deadline = datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
        except ValueError:
            deadline = None
        else:
            text = _cut(text, match)

    return MacroResult(title=text.strip(), priority=priority, deadline=deadline)
