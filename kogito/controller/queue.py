import asyncio
import time
from logging import Logger
from typing import Awaitable, Callable, Dict, List, Optional, Set
from kogito.controller.reconciler import ReconcileResult
from kogito.sensors import OperatorSensor
from kogito.types.models import NamespacedName
from kogito.types.settings import Settings

ReconcileFunc = Callable[[NamespacedName], Awaitable[Optional[ReconcileResult]]]


class ReconcileQueue:
    """Work queue feeding KogitoApp keys to a pool of reconciliation workers.

    A key is queued at most once. A key is never reconciled by two workers at
    the same time: adding it while it is being processed marks it dirty and it
    is queued again as soon as the running pass finishes.
    """

    reconcile: ReconcileFunc
    workers: int
    backoff_base: float
    backoff_max: float
    logger: Logger
    sensor: OperatorSensor

    def __init__(
        self,
        reconcile: ReconcileFunc,
        workers: int = None,
        backoff_base: float = None,
        backoff_max: float = None,
        *,
        logger: Logger,
        sensor: OperatorSensor = None,
    ):
        conf = Settings()
        self.reconcile = reconcile
        self.workers = workers or conf.reconcile_workers
        self.backoff_base = (
            backoff_base if backoff_base is not None else conf.error_backoff_base_seconds
        )
        self.backoff_max = (
            backoff_max if backoff_max is not None else conf.error_backoff_max_seconds
        )
        self.logger = logger
        self.sensor = sensor or OperatorSensor()

        self._queue: asyncio.Queue = asyncio.Queue()
        # Keys waiting to be processed (in the queue or parked while processing)
        self._queued: Set[NamespacedName] = set()
        self._processing: Set[NamespacedName] = set()
        self._queued_at: Dict[NamespacedName, float] = {}
        self._failures: Dict[NamespacedName, int] = {}
        self._timers: Dict[NamespacedName, asyncio.TimerHandle] = {}
        self._tasks: List[asyncio.Task] = []

    def __len__(self) -> int:
        return self._queue.qsize()

    def __contains__(self, key: NamespacedName) -> bool:
        return key in self._queued

    def add(self, key: NamespacedName) -> None:
        """Queue `key` unless it is already waiting."""
        if key in self._queued:
            return
        self._queued.add(key)
        self._queued_at[key] = time.monotonic()
        if key in self._processing:
            return
        self._queue.put_nowait(key)
        self.sensor.on_reconcile_queued(key.name, key.namespace, len(self))

    def add_after(self, key: NamespacedName, delay: float) -> None:
        """Queue `key` once `delay` seconds have passed."""
        if delay <= 0:
            self.add(key)
            return
        loop = asyncio.get_running_loop()
        when = loop.time() + delay
        timer = self._timers.get(key)
        if timer is not None:
            if timer.when() <= when:
                return
            timer.cancel()
        self._timers[key] = loop.call_at(when, self._fire, key)

    def _fire(self, key: NamespacedName) -> None:
        self._timers.pop(key, None)
        self.add(key)

    def add_rate_limited(self, key: NamespacedName) -> None:
        """Queue `key` after a delay that doubles with each consecutive failure."""
        failures = self._failures.get(key, 0)
        self._failures[key] = failures + 1
        delay = min(self.backoff_base * (2 ** failures), self.backoff_max)
        self.logger.info(f"Retrying {key} in {delay:g} seconds (attempt {failures + 1})")
        self.add_after(key, delay)

    def forget(self, key: NamespacedName) -> None:
        """Reset the failure count of `key`."""
        self._failures.pop(key, None)

    def num_requeues(self, key: NamespacedName) -> int:
        return self._failures.get(key, 0)

    async def process_next(self) -> NamespacedName:
        """Take the next key off the queue and reconcile it."""
        key = await self._queue.get()
        self._queued.discard(key)
        self._processing.add(key)
        queued_at = self._queued_at.pop(key, None)
        wait_time = time.monotonic() - queued_at if queued_at is not None else 0.0
        self.sensor.on_reconcile_dequeued(key.name, key.namespace, wait_time, len(self))
        try:
            start_time = time.time()
            result = await self.reconcile(key)
            execution_time = time.time() - start_time
            self.logger.debug(
                f"Reconciliation for {key} completed in {execution_time:.2f} seconds"
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Error reconciling {key}: {e}")
            self.logger.exception(e)
            self.add_rate_limited(key)
        else:
            self.forget(key)
            if result is not None and result.requeue_after is not None:
                self.add_after(key, result.requeue_after)
            elif result is not None and result.requeue:
                self.add(key)
        finally:
            self._processing.discard(key)
            if key in self._queued:
                self._queue.put_nowait(key)
            self._queue.task_done()
        return key

    async def _worker(self) -> None:
        while True:
            await self.process_next()

    def start(self) -> None:
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._worker(), name=f"kogito-reconcile-worker-{i}")
            for i in range(self.workers)
        ]
        self.logger.info(f"Started {self.workers} reconciliation workers")

    async def join(self) -> None:
        """Wait until every queued key has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self.logger.info("Reconciliation workers stopped")
