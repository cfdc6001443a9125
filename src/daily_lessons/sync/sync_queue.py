import logging
import queue
import threading
import typing

from daily_lessons.utils.env_vars import get_sync_queue_size

_LOGGER = logging.getLogger(__name__)

SyncJob = typing.Callable[[], None]

_STOP = object()


class ProgressSyncQueue:
    """
    Bounded FIFO of fire-and-forget progress writes, drained by one background worker.

    `submit` never blocks the caller: when the queue is full the job is dropped,
    which is safe because every write carries the latest cumulative progress and
    the next one supersedes it. With `start_worker=False` nothing runs until
    `run_pending()` is called, which makes ordering testable without threads.
    """

    def __init__(self, maxsize: typing.Optional[int] = None, start_worker: bool = True) -> None:
        self.maxsize = maxsize or get_sync_queue_size()
        self._queue: "queue.Queue[typing.Any]" = queue.Queue(maxsize=self.maxsize)
        self._worker: typing.Optional[threading.Thread] = None
        self._stopped = False
        if start_worker:
            self._worker = threading.Thread(target=self._run, name="progress-sync", daemon=True)
            self._worker.start()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, job: SyncJob, description: str = "progress sync") -> bool:
        if self._stopped:
            _LOGGER.warning(f"Sync queue is shut down; dropping '{description}'")
            return False
        try:
            self._queue.put_nowait((job, description))
        except queue.Full:
            _LOGGER.warning(f"Sync queue full ({self.maxsize} pending); dropping '{description}'")
            return False
        _LOGGER.debug(f"Queued '{description}'")
        return True

    def _execute(self, job: SyncJob, description: str) -> None:
        try:
            job()
        except Exception as e:
            _LOGGER.error(f"Background job '{description}' failed: {str(e)}", exc_info=True)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                job, description = item
                self._execute(job, description)
            finally:
                self._queue.task_done()

    def run_pending(self) -> int:
        """Runs every queued job on the calling thread. Only for queues without a worker."""
        if self._worker is not None:
            raise RuntimeError("run_pending() cannot be used while a background worker is running")
        executed = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return executed
            try:
                if item is _STOP:
                    continue
                job, description = item
                self._execute(job, description)
                executed += 1
            finally:
                self._queue.task_done()

    def join(self) -> None:
        """Blocks until every job submitted so far has finished."""
        self._queue.join()

    def shutdown(self, wait: bool = True) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._worker is None:
            return
        # Blocking put: the sentinel must land even when the queue is full.
        self._queue.put(_STOP)
        if wait:
            self._worker.join()
