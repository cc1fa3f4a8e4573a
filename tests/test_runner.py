import threading
import unittest
from datetime import datetime, timedelta, timezone

from cadence.scheduling import IntervalScheduler, ManualClock, Unit
from cadence.services import IntervalRunner, ScheduledTask

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class IntervalRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = ManualClock(START)
        self.scheduler = IntervalScheduler(1, Unit.SECOND, timezone="UTC", clock=self.clock)
        self.wakes = []

    def _runner(self, task=None, **kwargs):
        scheduled = ScheduledTask(name="probe", scheduler=self.scheduler, task=task or self.wakes.append)
        return IntervalRunner(scheduled, **kwargs)

    def test_runs_after_each_wait_until_max_runs(self):
        runs = self._runner(max_runs=3).run()
        self.assertEqual(runs, 3)
        self.assertEqual(self.wakes, [START + timedelta(seconds=n) for n in (1, 2, 3)])
        self.assertEqual(self.clock.sleeps, [1.0, 1.0, 1.0])

    def test_run_immediately_executes_before_first_wait(self):
        runner = self._runner(run_immediately=True, max_runs=2)
        self.assertEqual(runner.run(), 2)
        self.assertEqual(self.wakes, [START, START + timedelta(seconds=1)])

    def test_slow_task_collapses_missed_intervals(self):
        def slow(wake):
            self.wakes.append(wake)
            self.clock.advance(timedelta(seconds=10))

        self._runner(task=slow, max_runs=2).run()
        self.assertEqual(self.wakes, [START + timedelta(seconds=1), START + timedelta(seconds=12)])

    def test_failing_task_does_not_stop_the_loop(self):
        calls = []

        def flaky(wake):
            calls.append(wake)
            if len(calls) == 1:
                raise RuntimeError("boom")

        runner = self._runner(task=flaky, max_runs=3)
        self.assertEqual(runner.run(), 3)
        self.assertEqual(len(calls), 3)

    def test_stop_from_task_ends_the_loop(self):
        runner = None

        def stopper(wake):
            self.wakes.append(wake)
            if len(self.wakes) == 2:
                runner.stop()

        runner = self._runner(task=stopper)
        self.assertEqual(runner.run(), 2)
        self.assertEqual(runner.runs, 2)

    def test_shared_stop_event_cancels_before_running(self):
        stop = threading.Event()
        stop.set()
        runner = self._runner(run_immediately=True)
        self.assertEqual(runner.run(stop_event=stop), 0)
        self.assertEqual(self.wakes, [])

    def test_rejects_non_positive_max_runs(self):
        with self.assertRaises(ValueError):
            self._runner(max_runs=0)


if __name__ == "__main__":
    unittest.main()
