"""
Poll Scheduler Service

Drives the detection/reconciliation loop for one project in a background
thread.

Each wake-up:
1. Tick the heartbeat (writes health_check every N wake-ups)
2. If the table file changed AND the registry diverges from it:
   reconcile, notify the user, write the `updated` marker
3. Wait `poll_interval_seconds` on the run's cancel event

The wait is the only suspension point and the only place a cancel is
observed; a cycle that is already reconciling always runs to completion.
Starting a scheduler that is already running cancels the old run and
starts a new one with fresh detector and heartbeat state.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from ..logging_config import configure_logger_for_sync_trace
from ..models import ChangeStatus, CycleReport, SchedulerState
from ..sync_exceptions import JdkTableParseError, SchedulerError
from .artifacts import UPDATED_SUFFIX, utc_timestamp, write_artifact
from .change_detector import ChangeDetector, DetectorState
from .config_loader import SyncConfig
from .content_hasher import ContentHasher
from .heartbeat import HeartbeatEmitter, HeartbeatState
from .host import JdkRegistry, Notifier, Project
from .reconciler import Reconciler
from .settings_comparator import SettingsComparator
from .table_reader import JdkTableReader

logger = configure_logger_for_sync_trace(__name__)

NOTIFICATION_TITLE = "Update JDKs"
NOTIFICATION_MESSAGE = "Updated your JDK settings. You should be able to see your JDK settings change soon."


@dataclass
class SchedulerStatus:
    """
    Counters and timestamps of one scheduler, cumulative across restarts.

    ::: This is-in-layer Utility-Layer.
    ::: This is a value-object.

    Written by the loop thread, read by the CLI; individual assignments are
    atomic under the GIL.
    """
    state: SchedulerState = SchedulerState.IDLE
    cycles: int = 0
    reconciliations: int = 0
    errors: int = 0
    last_error: Optional[str] = None
    last_heartbeat_at: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    def update(self, **kwargs) -> None:
        """Update status fields."""
        for key, value in kwargs.items():
            if hasattr(self, key) and not key.startswith('_'):
                setattr(self, key, value)


class LoopRun:
    """
    One started run of a scheduler: its cancel token, thread and state.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    ::: This is stateful.
    """

    def __init__(self, run_id: int, detector: ChangeDetector, heartbeat: HeartbeatEmitter):
        self.run_id = run_id
        self.detector = detector
        self.heartbeat = heartbeat
        self.cancel_event = threading.Event()
        self.thread: Optional[threading.Thread] = None
        self.cycles = 0
        # Set when applying a detected change to the registry failed; the next
        # cycle retries without waiting for another digest change
        self.retry_pending = False

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        self.cancel_event.set()

    def is_alive(self) -> bool:
        return self.thread is not None and self.thread.is_alive()


class PollScheduler:
    """
    Fixed-interval, cancellable, restartable sync loop for one project.

    ::: This is-in-layer Service-Layer.
    ::: This is a manager.
    ::: This is-in-process Main-Process.
    ::: This is stateful.

    State machine: IDLE -> RUNNING -> (CANCELLED | RUNNING)
    """

    def __init__(
        self,
        project: Project,
        registry: JdkRegistry,
        notifier: Optional[Notifier] = None,
        config: Optional[SyncConfig] = None,
        hasher: Optional[ContentHasher] = None,
        cycle_lock: Optional[threading.Lock] = None,
    ):
        self._project = project
        self._registry = registry
        self._notifier = notifier
        self._config = config or SyncConfig()
        if self._config.poll_interval_seconds <= 0:
            raise SchedulerError(f"poll interval must be positive, got {self._config.poll_interval_seconds}")

        self._hasher = hasher or ContentHasher()
        self._reader = JdkTableReader(self._config)
        self._comparator = SettingsComparator(registry, self._reader)
        self._reconciler = Reconciler(registry, self._reader)

        self._lock = threading.Lock()        # guards _run / _standalone / status.state
        self._cycle_lock = cycle_lock or threading.Lock()  # one cycle at a time, across runs
        self._run: Optional[LoopRun] = None
        self._standalone: Optional[LoopRun] = None
        self._run_count = 0
        self.status = SchedulerStatus()

    @property
    def project(self) -> Project:
        return self._project

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def reader(self) -> JdkTableReader:
        return self._reader

    @property
    def current_run(self) -> Optional[LoopRun]:
        """The most recently started run, cancelled or not."""
        return self._run

    @property
    def state(self) -> SchedulerState:
        return self.status.state

    def is_running(self) -> bool:
        run = self._run
        return run is not None and not run.cancelled

    def _new_run(self) -> LoopRun:
        self._run_count += 1
        return LoopRun(
            run_id=self._run_count,
            detector=ChangeDetector(self._hasher, DetectorState()),
            heartbeat=HeartbeatEmitter(self._config.heartbeat_interval, self._reader, HeartbeatState()),
        )

    def start(self) -> LoopRun:
        """
        Start the loop in a background thread (non-blocking).

        An active run is cancelled and replaced, never joined: its thread
        exits at its next wait, after finishing any cycle in progress.

        Returns:
            The new run
        """
        with self._lock:
            previous = self._run
            if previous is not None and not previous.cancelled:
                logger.info(f"[Scheduler] Replacing active run #{previous.run_id} for {self._project.name}")
                previous.cancel()

            run = self._new_run()
            self._run = run
            self.status.update(state=SchedulerState.RUNNING, started_at=datetime.now(), cancelled_at=None)

            run.thread = threading.Thread(
                target=self._run_loop,
                args=(run,),
                name=f"JdkTableSync-{self._project.name}-{run.run_id}",
                daemon=True,
            )
            run.thread.start()
        logger.debug(f"[Scheduler] Started run #{run.run_id} for {self._project.base_path}")
        return run

    def cancel(self) -> None:
        """Stop the loop at its next wait. A cycle in progress is not interrupted."""
        with self._lock:
            run = self._run
            if run is None or run.cancelled:
                return
            run.cancel()
            self.status.update(state=SchedulerState.CANCELLED, cancelled_at=datetime.now())
        logger.info(f"[Scheduler] Cancelled run #{run.run_id} for {self._project.name}")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the current run's thread to exit.

        Returns:
            True if no thread is alive afterwards
        """
        run = self._run
        if run is None or run.thread is None:
            return True
        run.thread.join(timeout)
        return not run.thread.is_alive()

    def run_cycle(self) -> CycleReport:
        """
        Execute one cycle synchronously.

        Uses the active run's state when the loop is running, otherwise a
        standalone state that persists across run_cycle() calls.
        """
        with self._lock:
            run = self._run
            if run is None or run.cancelled:
                if self._standalone is None:
                    self._standalone = self._new_run()
                run = self._standalone
        return self._execute_cycle(run)

    def _run_loop(self, run: LoopRun) -> None:
        """Main loop (runs in background thread)."""
        logger.info(f"[Scheduler] Starting background thread for {self._project.name}.")
        while not run.cancelled:
            self._execute_cycle(run)
            if run.cancel_event.wait(self._config.poll_interval_seconds):
                break
        logger.info(f"[Scheduler] Run #{run.run_id} for {self._project.name} stopped after {run.cycles} cycles.")

    def _execute_cycle(self, run: LoopRun) -> CycleReport:
        with self._cycle_lock:
            run.cycles += 1
            report = CycleReport(cycle=run.cycles)

            try:
                report.heartbeat_fired = run.heartbeat.tick(self._project)
            except Exception as e:
                logger.error(f"[Scheduler] Heartbeat failed: {e}")
                report.errors.append(f"heartbeat: {e}")

            try:
                self._check_and_reconcile(run, report)
            except JdkTableParseError as e:
                # retried only once the file's digest changes again
                logger.error(f"[Scheduler] Sync cycle {report.cycle} skipped: {e}")
                report.errors.append(f"sync: {e}")
            except Exception as e:
                if not report.reconciled and (report.change_status.is_change or report.retried):
                    run.retry_pending = True
                logger.error(f"[Scheduler] Sync cycle {report.cycle} failed: {e}", exc_info=True)
                report.errors.append(f"sync: {e}")

            self._record(report)
            return report

    def _check_and_reconcile(self, run: LoopRun, report: CycleReport) -> None:
        table_file = self._reader.table_file(self._project)

        status = run.detector.classify(table_file)
        report.change_status = status
        if not status.is_change:
            if not run.retry_pending or status == ChangeStatus.ABSENT:
                run.retry_pending = False
                return
            logger.info("[Scheduler] Retrying reconciliation after a failed cycle")
            report.retried = True
        run.retry_pending = False

        if not self._comparator.has_divergence(self._project):
            return
        report.diverged = True

        self._reconciler.apply(self._project)
        report.reconciled = True
        report.applied = list(self._reconciler.last_applied)

        self._notify()
        write_artifact(table_file, UPDATED_SUFFIX, utc_timestamp())

    def _notify(self) -> None:
        """Fire-and-forget user notification."""
        if self._notifier is None or not self._config.notifications_enabled:
            return
        try:
            self._notifier.notify(self._project, NOTIFICATION_TITLE, NOTIFICATION_MESSAGE)
        except Exception as e:
            logger.warning(f"[Scheduler] Notification failed: {e}")

    def _record(self, report: CycleReport) -> None:
        now = datetime.now()
        self.status.update(cycles=self.status.cycles + 1)
        if report.heartbeat_fired:
            self.status.update(last_heartbeat_at=now)
        if report.reconciled:
            self.status.update(
                reconciliations=self.status.reconciliations + 1,
                last_updated_at=now,
            )
        if report.errors:
            self.status.update(errors=self.status.errors + 1, last_error=report.errors[-1])


class SchedulerManager:
    """
    Keeps at most one active scheduler per project.

    ::: This is-in-layer Service-Layer.
    ::: This is a manager.
    ::: This is-in-process Main-Process.
    ::: This is stateful.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._schedulers: Dict[str, PollScheduler] = {}
        self._cycle_locks: Dict[str, threading.Lock] = {}

    def start(
        self,
        project: Project,
        registry: JdkRegistry,
        notifier: Optional[Notifier] = None,
        config: Optional[SyncConfig] = None,
    ) -> PollScheduler:
        """
        Start a loop for the project, cancelling any loop already running for it.

        Returns:
            The scheduler now running for the project
        """
        with self._lock:
            # One cycle lock per project, shared by every scheduler started for it
            cycle_lock = self._cycle_locks.setdefault(project.key, threading.Lock())
            scheduler = PollScheduler(project, registry, notifier=notifier, config=config,
                                      cycle_lock=cycle_lock)
            previous = self._schedulers.get(project.key)
            if previous is not None:
                previous.cancel()
            self._schedulers[project.key] = scheduler
            scheduler.start()
        return scheduler

    def get(self, project: Project) -> Optional[PollScheduler]:
        with self._lock:
            return self._schedulers.get(project.key)

    def cancel(self, project: Project) -> None:
        with self._lock:
            scheduler = self._schedulers.pop(project.key, None)
        if scheduler is None:
            raise SchedulerError(f"No scheduler for project {project.base_path}")
        scheduler.cancel()

    def cancel_all(self) -> None:
        with self._lock:
            schedulers = list(self._schedulers.values())
            self._schedulers.clear()
        for scheduler in schedulers:
            scheduler.cancel()

    def active_projects(self) -> List[str]:
        with self._lock:
            return [key for key, scheduler in self._schedulers.items() if scheduler.is_running()]


# Global singleton instance
_scheduler_manager: Optional[SchedulerManager] = None


def get_scheduler_manager() -> SchedulerManager:
    """Get the global scheduler manager instance."""
    global _scheduler_manager
    if _scheduler_manager is None:
        _scheduler_manager = SchedulerManager()
    return _scheduler_manager


def start_background_checker(
    project: Project,
    registry: JdkRegistry,
    notifier: Optional[Notifier] = None,
    config: Optional[SyncConfig] = None,
    manager: Optional[SchedulerManager] = None,
) -> PollScheduler:
    """
    Project-open hook: start (or restart) the JDK table checker for a project.
    """
    logger.info(f"[Scheduler] Starting background JDK settings checker for {project.base_path}.")
    return (manager or get_scheduler_manager()).start(project, registry, notifier=notifier, config=config)
