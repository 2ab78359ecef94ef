"""Bounded in-process job queue feeding a fixed pool of worker threads."""

import logging
import queue
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from cadence_cli.errors import WebhookError

logger = logging.getLogger(__name__)

JobProcessor = Callable[[dict], List[dict]]

QUEUED = "queued"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"

_STOP = object()


@dataclass
class Job:
    id: str
    payload: dict
    status: str = QUEUED
    results: List[dict] = field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "results": self.results,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class JobQueue:
    """Worker pool over a bounded queue.

    At most ``keep_finished`` completed or failed jobs are kept for ``get()``;
    the oldest finished jobs are evicted first. Queued and running jobs are
    never evicted.
    """

    def __init__(
        self,
        max_workers: int,
        processor: JobProcessor,
        max_size: int = 100,
        keep_finished: Optional[int] = None,
    ):
        self.max_workers = max_workers if max_workers >= 1 else 4
        self.processor = processor
        self._queue: "queue.Queue" = queue.Queue(maxsize=max_size)
        self._jobs: Dict[str, Job] = {}
        self.keep_finished = keep_finished if keep_finished and keep_finished > 0 else max_size * 10
        self._finished: deque = deque()
        self._lock = threading.Lock()
        self._workers: List[threading.Thread] = []
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        if self._running:
            raise WebhookError("job queue already running")
        self._running = True
        for i in range(self.max_workers):
            worker = threading.Thread(target=self._work, name=f"cadence-worker-{i}", daemon=True)
            worker.start()
            self._workers.append(worker)
        logger.info("Job queue started with %d workers", self.max_workers)

    def stop(self, timeout: float = 10.0):
        if not self._running:
            raise WebhookError("job queue is not running")
        self._running = False
        for _ in self._workers:
            # blocks until a slot frees; workers keep draining
            self._queue.put(_STOP)
        for worker in self._workers:
            worker.join(timeout)
        alive = [w.name for w in self._workers if w.is_alive()]
        self._workers = []
        if alive:
            raise WebhookError(f"workers did not stop in time: {', '.join(alive)}")
        logger.info("Job queue stopped")

    def submit(self, payload: dict) -> str:
        if not self._running:
            raise WebhookError("job queue is not running")
        job = Job(id=uuid.uuid4().hex, payload=payload)
        with self._lock:
            self._jobs[job.id] = job
        try:
            self._queue.put_nowait(job)
        except queue.Full as exc:
            with self._lock:
                del self._jobs[job.id]
            raise WebhookError("job queue is full") from exc
        logger.info("Queued job %s", job.id)
        return job.id

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def _work(self):
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                self._run(job)
            finally:
                self._queue.task_done()

    def _run(self, job: Job):
        with self._lock:
            job.status = RUNNING
        try:
            results = self.processor(job.payload)
        except Exception as exc:  # a failing job must not kill the worker
            logger.exception("Job %s failed", job.id)
            with self._lock:
                job.error = str(exc)
                self._finish(job, FAILED)
            return
        with self._lock:
            job.results = results
            self._finish(job, COMPLETED)
        logger.info("Job %s completed (%d results)", job.id, len(results))

    def _finish(self, job: Job, status: str):
        # caller holds the lock
        job.status = status
        job.finished_at = datetime.now(timezone.utc)
        self._finished.append(job.id)
        while len(self._finished) > self.keep_finished:
            self._jobs.pop(self._finished.popleft(), None)

    def join(self):
        """Block until every queued job has been processed."""
        self._queue.join()
