"""
Live coaster monitor driven by the store's change counter.

The monitor polls the counter at a fixed rate. Whenever the value differs
from the last one it rendered, it pulls the full registry and every fleet,
diagnoses each coaster and prints a new report. Because the counter is a
version stamp and not an event log, every pass is rebuilt from full state.

Lifecycle: IDLE -> RUNNING -> STOPPED. A one-shot deadline stops the monitor
after its total duration; stop() may also be called earlier. Once stopped,
no tick body runs and nothing more is rendered.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..cache.store import RECORD_ERRORS, STORE_ERRORS, ChangeDetectionStore, CoasterSnapshot
from ..errors import RangeError
from ..models.report import DiagnosticReport
from .capacity import CapacityModel
from .report import TERMINATION_LINE, render_pass

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_TOTAL_DURATION = 600.0


class MonitorState(str, Enum):
    """Monitor lifecycle states."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class CoasterMonitor:
    """
    Fixed-rate polling monitor over a ChangeDetectionStore.

    Ticks never overlap: the next tick is admitted only after the previous
    one finished, and admissions missed by a slow tick are skipped rather
    than replayed.
    """

    def __init__(
        self,
        store: ChangeDetectionStore,
        capacity_model: Optional[CapacityModel] = None,
        emit: Callable[[str], None] = print,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the monitor.

        Args:
            store: Store to poll and read coasters from
            capacity_model: Planner used for every coaster, defaults to standard constants
            emit: Sink receiving every rendered line
            clock: Source of the pass header timestamp
        """
        self.store = store
        self.capacity_model = capacity_model or CapacityModel()
        self.emit = emit
        self.clock = clock

        self.state = MonitorState.IDLE
        self.last_observed = 0
        self.render_count = 0
        self.failed_ticks = 0

        self._poll_task: Optional[asyncio.Task] = None
        self._deadline: Optional[asyncio.TimerHandle] = None
        self._stopped: Optional[asyncio.Event] = None

    def start(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        total_duration: float = DEFAULT_TOTAL_DURATION,
    ) -> None:
        """
        Schedule the polling task and the shutdown deadline.

        Must be called from within a running event loop.

        Raises:
            RuntimeError: If the monitor was already started
            RangeError: If the interval or the duration is not positive
        """
        if self.state is not MonitorState.IDLE:
            raise RuntimeError(f"Monitor cannot start from state {self.state.value}")
        if poll_interval <= 0 or total_duration <= 0:
            raise RangeError("Poll interval and total duration must be positive")

        loop = asyncio.get_running_loop()
        self.state = MonitorState.RUNNING
        self._stopped = asyncio.Event()
        self._poll_task = loop.create_task(self._poll(poll_interval))
        self._poll_task.add_done_callback(self._on_poll_done)
        self._deadline = loop.call_later(total_duration, self._on_deadline)

        logger.info(
            f"Monitor started: polling every {poll_interval}s for {total_duration}s"
        )

    def stop(self) -> None:
        """Cancel the polling task and the deadline; emits the termination line once."""
        if self.state is MonitorState.STOPPED:
            return

        was_running = self.state is MonitorState.RUNNING
        self.state = MonitorState.STOPPED

        if self._poll_task is not None and not self._poll_task.done():
            self._poll_task.cancel()
        if self._deadline is not None:
            self._deadline.cancel()

        if was_running:
            self.emit(TERMINATION_LINE)
            logger.info(f"Monitor stopped after {self.render_count} render passes")
        if self._stopped is not None:
            self._stopped.set()

    async def wait(self) -> None:
        """Wait until the monitor has stopped and its polling task has settled."""
        if self._stopped is not None:
            await self._stopped.wait()
        if self._poll_task is not None:
            await asyncio.wait([self._poll_task])
            if not self._poll_task.cancelled() and self._poll_task.exception() is not None:
                raise self._poll_task.exception()

    async def run(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        total_duration: float = DEFAULT_TOTAL_DURATION,
    ) -> None:
        """Start the monitor and block until it stops."""
        self.start(poll_interval, total_duration)
        try:
            await self.wait()
        finally:
            self.stop()

    def _on_poll_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Monitor polling failed: {task.exception()!r}")
            self.stop()

    def _on_deadline(self) -> None:
        logger.info("Monitor deadline reached")
        self._deadline = None
        self.stop()

    async def _poll(self, poll_interval: float) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while self.state is MonitorState.RUNNING:
            await self.tick()

            next_tick += poll_interval
            now = loop.time()
            while next_tick < now:
                next_tick += poll_interval
            await asyncio.sleep(next_tick - now)

    async def tick(self) -> bool:
        """
        Check the change counter once and render if it moved.

        Store failures and undecodable records abandon the tick and leave
        the last observed value untouched, so the next tick retries the
        same change.

        Returns:
            bool: True if a render pass was emitted
        """
        if self.state is MonitorState.STOPPED:
            return False

        try:
            value = await self.store.get()
            if value == self.last_observed:
                return False
            snapshot = await self.store.snapshot()
        except STORE_ERRORS as e:
            self.failed_ticks += 1
            logger.error(f"Monitor tick abandoned, store unavailable: {e}")
            return False
        except RECORD_ERRORS as e:
            self.failed_ticks += 1
            logger.error(f"Monitor tick abandoned, unreadable record: {e}")
            return False

        if self.state is MonitorState.STOPPED:
            return False

        self.last_observed = value
        self.render(snapshot)
        return True

    def diagnose_all(self, snapshot: CoasterSnapshot) -> List[Tuple[int, DiagnosticReport]]:
        """Diagnose every coaster of a snapshot, keeping registry order."""
        reports = []
        for coaster_id, coaster, fleet in snapshot:
            report = self.capacity_model.diagnose(coaster, fleet)
            reports.append((coaster_id, report))
        return reports

    def render(self, snapshot: CoasterSnapshot) -> None:
        """Emit one full render pass for a snapshot."""
        for line in render_pass(self.diagnose_all(snapshot), self.clock()):
            self.emit(line)
        self.render_count += 1
        logger.debug(f"Rendered pass {self.render_count} for counter {self.last_observed}")
