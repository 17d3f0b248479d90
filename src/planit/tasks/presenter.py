# src/planit/tasks/presenter.py

"""
Task list presentation.

Turns the fetched task list into display rows and owns the local completion
state. Completion is optimistic and modelled as an explicit two-phase
transition:

    begin()    -> PENDING(new value)     local state flipped, request in flight
    commit()   -> COMMITTED(new value)   backend accepted
    rollback() -> ROLLED_BACK(old value) backend failed, local state restored

Only one request per task may be in flight; there is no retry and no queue.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.ports import TaskBridge
from ..notion.client import NotionError
from .task_models import Task
from .urgency import NO_DEADLINE, Tier, Urgency, derive_urgency, format_short_date

logger = logging.getLogger(__name__)

Translate = Callable[[str], str]


@dataclass(frozen=True, slots=True)
class TaskRow:
    index: int
    task: Task
    complete: bool
    urgency: Urgency
    date_label: str
    objective_name: str | None
    objective_urgency: Urgency
    objective_date_label: str

    @property
    def task_id(self) -> str:
        return self.task.id

    @property
    def highlighted(self) -> bool:
        return not self.complete and self.urgency.tier == Tier.URGENT

    @property
    def has_objective(self) -> bool:
        return bool(self.objective_name or self.task.objective_deadline)


def build_rows(
    tasks: Sequence[Task],
    tracker: CompletionTracker,
    now: datetime,
    translate: Translate | None = None,
) -> list[TaskRow]:
    """Derive display rows in the order received. Completed rows stop counting down."""
    overdue_label = translate("task.overdue") if translate else "Overdue"

    rows: list[TaskRow] = []
    for i, task in enumerate(tasks, start=1):
        complete = tracker.is_complete(task.id)
        if complete:
            own = NO_DEADLINE
            objective = NO_DEADLINE
        else:
            own = derive_urgency(task.do_date, now, overdue_label=overdue_label)
            objective = derive_urgency(task.objective_deadline, now, overdue_label=overdue_label)

        rows.append(
            TaskRow(
                index=i,
                task=task,
                complete=complete,
                urgency=own,
                date_label=format_short_date(task.do_date),
                objective_name=task.objective_name,
                objective_urgency=objective,
                objective_date_label=format_short_date(task.objective_deadline),
            )
        )
    return rows


def refresh_interval(
    rows: Iterable[TaskRow],
    *,
    urgent_seconds: float = 1.0,
    idle_seconds: float = 60.0,
) -> float:
    """Tick every second while any open task is urgent, else once a minute."""
    if any(r.highlighted for r in rows):
        return urgent_seconds
    return idle_seconds


# ---- optimistic completion ----


class CompletionPhase(StrEnum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True, slots=True)
class CompletionResult:
    task_id: str
    phase: CompletionPhase
    value: bool
    error: str | None = None


class CompletionTracker:
    """Local completion state keyed by task id."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._complete: dict[str, bool] = {}
        self._pending: dict[str, bool] = {}  # task_id -> value before the flip
        self.reset(tasks)

    def reset(self, tasks: Iterable[Task]) -> None:
        """Re-seed from a fresh fetch. In-flight markers are dropped."""
        self._complete = {t.id: t.is_done for t in tasks}
        self._pending = {}

    def is_complete(self, task_id: str) -> bool:
        return self._complete.get(task_id, False)

    def is_pending(self, task_id: str) -> bool:
        return task_id in self._pending

    def begin(self, task_id: str) -> CompletionResult | None:
        if task_id in self._pending:
            logger.debug("Completion already in flight for task %s; ignoring", task_id)
            return None

        old = self.is_complete(task_id)
        self._pending[task_id] = old
        self._complete[task_id] = not old
        return CompletionResult(task_id=task_id, phase=CompletionPhase.PENDING, value=not old)

    def commit(self, task_id: str) -> CompletionResult:
        self._pending.pop(task_id, None)
        return CompletionResult(
            task_id=task_id, phase=CompletionPhase.COMMITTED, value=self.is_complete(task_id)
        )

    def rollback(self, task_id: str, error: str | None = None) -> CompletionResult:
        if task_id in self._pending:
            self._complete[task_id] = self._pending.pop(task_id)
        return CompletionResult(
            task_id=task_id,
            phase=CompletionPhase.ROLLED_BACK,
            value=self.is_complete(task_id),
            error=error,
        )


async def toggle_completion(
    tracker: CompletionTracker,
    bridge: TaskBridge,
    token: str,
    task_id: str,
) -> CompletionResult | None:
    """
    Flip a task locally, sync it to the backend, revert on failure.

    Returns None when a request for this task is already in flight.
    """
    pending = tracker.begin(task_id)
    if pending is None:
        return None

    try:
        await bridge.mark_task_complete(token, task_id, pending.value)
    except NotionError as e:
        logger.warning("Failed to sync completion task_id=%s: %s", task_id, e)
        return tracker.rollback(task_id, error=str(e))

    return tracker.commit(task_id)
