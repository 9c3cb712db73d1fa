"""Tick-driven deferred task queue."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduledTask:
    """A callback waiting for simulated time to reach ``due``."""

    task_id: str
    owner: str
    due: float
    sequence: int
    callback: Callable[[], None] = field(repr=False)


class TaskScheduler:
    """Runs callbacks once the accumulated simulation clock passes their due time.

    Tasks carry an owner key so a whole group (for example every task created by
    one battle) can be cancelled at once.
    """

    def __init__(self) -> None:
        self._clock = 0.0
        self._next_task_counter = 0
        self._tasks: dict[str, ScheduledTask] = {}

    @property
    def clock(self) -> float:
        return self._clock

    def schedule(self, delay: float, callback: Callable[[], None], *, owner: str) -> str:
        """Queue ``callback`` to run ``delay`` seconds from now and return its id."""
        task_id = f"task-{self._next_task_counter:08d}"
        task = ScheduledTask(
            task_id=task_id,
            owner=owner,
            due=self._clock + max(0.0, delay),
            sequence=self._next_task_counter,
            callback=callback,
        )
        self._next_task_counter += 1
        self._tasks[task_id] = task
        logger.debug("Scheduled %s for %s at t=%.3f", task_id, owner, task.due)
        return task_id

    def cancel(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    def cancel_owner(self, owner: str) -> int:
        """Drop every pending task belonging to ``owner``; returns how many were removed."""
        doomed = [task_id for task_id, task in self._tasks.items() if task.owner == owner]
        for task_id in doomed:
            del self._tasks[task_id]
        if doomed:
            logger.debug("Cancelled %d task(s) owned by %s", len(doomed), owner)
        return len(doomed)

    def pending(self) -> list[ScheduledTask]:
        return sorted(self._tasks.values(), key=lambda task: (task.due, task.sequence))

    def advance(self, dt: float) -> int:
        """Move the clock forward and fire due tasks in (due, scheduling) order."""
        self._clock += max(0.0, dt)
        fired = 0
        while True:
            due = [task for task in self.pending() if task.due <= self._clock]
            if not due:
                return fired
            task = due[0]
            # Callbacks may schedule or cancel, so re-check membership each pass.
            if self._tasks.pop(task.task_id, None) is None:
                continue
            logger.debug("Firing %s for %s", task.task_id, task.owner)
            task.callback()
            fired += 1

    def clear(self) -> None:
        self._tasks.clear()
