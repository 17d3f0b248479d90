# src/planit/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Completion status as reported by the task database.

    Notion only gives us a checkbox, so there are exactly two values.
    """

    OPEN = "open"
    DONE = "done"

    @classmethod
    def from_checkbox(cls, checked: bool | None) -> TaskStatus:
        return cls.DONE if checked else cls.OPEN


@dataclass(frozen=True, slots=True)
class Task:
    """A task row fetched from Notion. Read-only to the widget; `id` is the identity key."""

    id: str
    title: str
    status: TaskStatus = TaskStatus.OPEN
    do_date: str | None = None

    # Linked parent ("objective") fields, independent of do_date.
    objective_name: str | None = None
    objective_deadline: str | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


@dataclass(frozen=True, slots=True)
class DataSource:
    """A Notion database the integration token can see."""

    id: str
    title: str
