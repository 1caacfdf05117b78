"""
=============================================================================
FIXED WORKER POOL
=============================================================================

A fixed set of worker threads processing tasks from a shared queue. The
listener submits one task per accepted connection; a worker runs it to
completion, then pulls the next.

=============================================================================
THREAD POOL ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     Connection dispatch                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   submit(func, args)                                                 │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌──────────────────────────────────────────┐                      │
    │   │  Task Queue  [task][task][task]...       │  queue.Queue          │
    │   └──────────────────────────────────────────┘                      │
    │        │            │            │                                   │
    │        ▼            ▼            ▼                                   │
    │   ┌─────────┐  ┌─────────┐  ┌─────────┐                             │
    │   │Worker-0 │  │Worker-1 │  │Worker-N │   N fixed at startup        │
    │   │ get()   │  │ get()   │  │ get()   │   (default 9)               │
    │   │ run()   │  │ run()   │  │ run()   │                             │
    │   └─────────┘  └─────────┘  └─────────┘                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUEUE BOUND
=============================================================================

queue_size = 0 (default) makes the queue unbounded: submit() never blocks
and the accept loop keeps accepting however busy the workers are. Under
sustained overload the queue simply grows.

queue_size > 0 bounds the queue: submit() blocks while it is full (or
returns False immediately with block=False).

=============================================================================
FAILURE ISOLATION
=============================================================================

Q: What happens if a task raises?
A: The worker logs it with the traceback, counts it as failed and goes
   straight back to the queue. One bad connection never takes a worker
   (or the pool) down with it.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Any, Callable, List, Optional
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """
    Worker thread states.

    Reported in stats; nothing branches on them.
    """

    IDLE = "idle"        # Waiting for task
    BUSY = "busy"        # Executing task
    STOPPED = "stopped"  # Got the poison pill


@dataclass
class Task:
    """
    A deferred function call: "call this function with these arguments later".

    Attributes:
        func: Callable run by the worker.
        args: Positional arguments, usually (conn,).
        kwargs: Keyword arguments.
        submitted_at: Time the task was submitted (for queue wait logging).
    """

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    A worker thread that pulls tasks from the shared queue.

    Each worker:
        1. Blocks on queue.get() while idle
        2. Runs the task, catching any exception
        3. Marks the task done and loops
        4. Exits on the poison pill (None)
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int):
        """
        Initialize the worker.

        Args:
            task_queue: Queue shared by every worker of the pool.
            worker_id: Index used in the thread name and logs.
        """
        # daemon=True: a stop command ends the process without waiting
        # for in-flight connections.
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.state = WorkerState.IDLE

        # Read by ThreadPool.stats
        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        """
        Main worker loop.

        Runs until a poison pill is received.
        """
        logger.debug(f"{self.name} waiting for connections")

        while True:
            task = self.task_queue.get()

            try:
                # None: the pool is shutting down.
                if task is None:
                    break
                self._execute_task(task)
            finally:
                # Keeps queue.join() accurate, poison pills included.
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"{self.name} exiting")

    def _execute_task(self, task: Task):
        """
        Execute a single task.

        Exceptions are logged and counted, never re-raised: the worker must
        survive whatever one connection does.
        """
        self.state = WorkerState.BUSY
        start_time = time.time()
        waited = start_time - task.submitted_at

        try:
            task.func(*task.args, **task.kwargs)

            elapsed = time.time() - start_time
            logger.debug(
                f"Worker {self.worker_id} completed task in {elapsed:.3f}s "
                f"(queued {waited:.3f}s)"
            )
            self.tasks_completed += 1

        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(
                f"{self.name}: task raised after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1

        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size thread pool for concurrent task execution.

    Usage:
        pool = ThreadPool(workers=9)
        pool.start()

        pool.submit(handler.handle, args=(conn,))

        pool.shutdown(wait=False)
    """

    def __init__(self, workers: int = 9, queue_size: int = 0):
        """
        Create the pool; no thread exists until start().

        Args:
            workers: Number of worker threads, all created by start().
            queue_size: Maximum number of queued tasks. 0 = unbounded.
        """
        if workers < 1:
            raise ValueError("workers must be >= 1")

        self.workers = workers
        self.max_queue_size = queue_size

        # queue.Queue is thread-safe by design: many threads can put/get
        # at once without extra locking.
        self._task_queue: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)

        self._workers: List[Worker] = []
        self._lock = threading.Lock()  # Protects _workers and lifecycle flags
        self._started = False
        self._shutdown = False

    @property
    def is_running(self) -> bool:
        return self._started and not self._shutdown

    def start(self):
        """
        Start all worker threads.

        Idempotent. Every worker blocks on the queue right away.
        """
        with self._lock:
            if self._started:
                return  # Already started

            logger.info(f"Starting thread pool with {self.workers} workers")

            for worker_id in range(self.workers):
                worker = Worker(task_queue=self._task_queue, worker_id=worker_id)
                self._workers.append(worker)
                worker.start()

            self._started = True
            self._shutdown = False

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        block: bool = True,
        queue_timeout: Optional[float] = None,
    ) -> bool:
        """
        Queue func(*args, **kwargs) for the next free worker.

        Args:
            func: Callable to run.
            args: Positional arguments.
            kwargs: Keyword arguments.
            block: Whether to block if a bounded queue is full.
            queue_timeout: How long to wait if the queue is full.

        Returns:
            True if the task was queued, False if the queue was full.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("submit() before start()")

        if self._shutdown:
            raise RuntimeError("submit() after shutdown()")

        task = Task(func=func, args=args, kwargs=kwargs or {})

        try:
            self._task_queue.put(task, block=block, timeout=queue_timeout)
            return True
        except queue.Full:
            return False

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Shutdown the thread pool.

        Args:
            wait: Wait for queued and running tasks to finish before the
                  workers exit. With wait=False, queued tasks are dropped
                  and the call returns without joining the workers.
            timeout: Maximum time to wait for each worker to exit.
        """
        with self._lock:
            if not self._started or self._shutdown:
                return
            self._shutdown = True

        logger.info(f"Stopping {len(self._workers)} workers (wait={wait})")

        if not wait:
            # Drop anything still queued; running tasks finish on their own
            # (or die with the process, workers are daemons).
            dropped = 0
            while True:
                try:
                    self._task_queue.get_nowait()
                except queue.Empty:
                    break
                self._task_queue.task_done()
                dropped += 1
            if dropped:
                logger.warning(f"Dropped {dropped} queued connections")

        # One poison pill per worker. They queue behind pending tasks, so
        # with wait=True every queued task still runs first.
        for _ in self._workers:
            self._task_queue.put(None)

        if wait:
            for worker in self._workers:
                worker.join(timeout=timeout)

        logger.debug("Poison pills queued")

    # =========================================================================
    # STATS
    # =========================================================================

    def _count(self, state: WorkerState) -> int:
        return sum(w.state is state for w in self._workers)

    @property
    def active_workers(self) -> int:
        """Workers that have not exited."""
        return len(self._workers) - self._count(WorkerState.STOPPED)

    @property
    def busy_workers(self) -> int:
        """Workers running a task right now."""
        return self._count(WorkerState.BUSY)

    @property
    def idle_workers(self) -> int:
        """Workers blocked on the queue."""
        return self._count(WorkerState.IDLE)

    @property
    def pending(self) -> int:
        """Approximate number of tasks waiting."""
        return self._task_queue.qsize()

    def join(self):
        """Block until every submitted task has been processed."""
        self._task_queue.join()

    @property
    def stats(self) -> dict:
        """
        Snapshot of worker states and task counters.

        Returns a dict with worker and task counts.
        """
        return {
            "workers": {
                "total": len(self._workers),
                "active": self.active_workers,
                "busy": self.busy_workers,
                "idle": self.idle_workers,
            },
            "tasks": {
                "queued": self.pending,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
