"""Caller driven loop around :class:`~cadence.scheduling.IntervalScheduler`."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from cadence.log import get_logger
from cadence.scheduling import IntervalScheduler, WaitCancelled

logger = get_logger(__name__)

Task = Callable[[datetime], None]


@dataclass(slots=True)
class ScheduledTask:
    """A unit of work bound to the scheduler that paces it.

    ``task`` receives the wake time returned by the scheduler.
    """

    name: str
    scheduler: IntervalScheduler
    task: Task


class IntervalRunner:
    """Repeatedly wait for the next interval and run a task.

    Work happens between waits: with ``run_immediately`` the task runs once
    before the first wait, otherwise the first execution happens after it.
    An exception raised by the task is logged and the loop carries on; the
    loop ends after ``max_runs`` executions or when :meth:`stop` is called.
    """

    def __init__(
        self,
        scheduled_task: ScheduledTask,
        run_immediately: bool = False,
        max_runs: Optional[int] = None,
    ) -> None:
        if max_runs is not None and max_runs < 1:
            raise ValueError("max_runs must be a positive integer")
        self._scheduled = scheduled_task
        self._run_immediately = run_immediately
        self._max_runs = max_runs
        self._stop_event = threading.Event()
        self._runs = 0

    @property
    def runs(self) -> int:
        return self._runs

    def stop(self) -> None:
        """Ask the loop to exit; an ongoing wait is interrupted."""

        self._stop_event.set()

    def run(self, stop_event: Optional[threading.Event] = None) -> int:
        """Run until ``max_runs`` is reached or the loop is stopped.

        ``stop_event`` replaces the runner's own event, which lets a host
        share one shutdown signal between several runners.  Returns the
        number of task executions.
        """

        if stop_event is not None:
            self._stop_event = stop_event
        scheduler = self._scheduled.scheduler
        logger.info(
            "runner_started",
            task=self._scheduled.name,
            frequency=scheduler.frequency(),
            max_runs=self._max_runs,
        )

        if self._run_immediately and not self._stop_event.is_set():
            self._execute(scheduler.now())

        while not self._finished():
            try:
                wake = scheduler.wait_until_next(self._stop_event)
            except WaitCancelled:
                logger.info("runner_cancelled", task=self._scheduled.name, runs=self._runs)
                break
            self._execute(wake)

        logger.info("runner_stopped", task=self._scheduled.name, runs=self._runs)
        return self._runs

    # ------------------------------------------------------------------
    def _finished(self) -> bool:
        if self._stop_event.is_set():
            return True
        return self._max_runs is not None and self._runs >= self._max_runs

    def _execute(self, wake: datetime) -> None:
        self._runs += 1
        try:
            self._scheduled.task(wake)
        except Exception:  # noqa: BLE001
            logger.exception("task_failed", task=self._scheduled.name, wake=wake.isoformat())
        else:
            logger.debug("task_completed", task=self._scheduled.name, wake=wake.isoformat())
