"""A single owner thread that serves requests and does background work in between.

All state a worker owns is touched only from its thread. Other threads talk to
it by submitting request messages, or by flagging work under
``_control.work_available`` and notifying the condition.
"""

import asyncio
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Generic, TypeVar

from vault_index.logger import logging

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class WorkerStoppedError(RuntimeError):
    pass


class WorkerControl:
    work_available: threading.Condition
    requests: deque[tuple[Any, Future]]
    stop_requested: bool

    def __init__(self):
        self.work_available = threading.Condition()
        self.requests = deque()
        self.stop_requested = False


class BaseWorker(Generic[RequestT, ResponseT]):
    _control: WorkerControl

    def __init__(self):
        self._control = WorkerControl()

    def initialize(self):
        """Called on the worker thread before anything else."""

    def finalize(self):
        """Called on the worker thread when it exits."""

    def process_message(self, message: RequestT) -> ResponseT:
        raise NotImplementedError

    def default_work_available(self) -> bool:
        """Whether background work is pending. Called with the control lock held."""
        return False

    def default_work_delay(self) -> float:
        """Seconds to hold pending background work back. Called with the control lock held."""
        return 0.0

    def default_work(self):
        pass

    def submit(self, message: RequestT) -> "Future[ResponseT]":
        future: Future[ResponseT] = Future()
        with self._control.work_available:
            if self._control.stop_requested:
                raise WorkerStoppedError("Worker is stopped")
            self._control.requests.append((message, future))
            self._control.work_available.notify_all()
        return future

    def request_stop(self):
        with self._control.work_available:
            self._control.stop_requested = True
            self._control.work_available.notify_all()

    def run(self):
        try:
            self.initialize()
            self._loop()
        except Exception as e:
            logger.exception("Worker failed")
            self._fail_pending(e)
            raise
        finally:
            self.request_stop()
            self._fail_pending(WorkerStoppedError("Worker is stopped"))
            self.finalize()

    def _next_request(self) -> tuple[Any, Future] | None:
        """Block until a request arrives or background work is due; None means stop."""
        control = self._control
        with control.work_available:
            while not control.stop_requested:
                if control.requests:
                    return control.requests.popleft()
                if self.default_work_available():
                    delay = self.default_work_delay()
                    if delay <= 0:
                        return (None, None)
                    control.work_available.wait(delay)
                else:
                    control.work_available.wait()
        return None

    def _loop(self):
        while (request := self._next_request()) is not None:
            message, future = request
            if future is None:
                try:
                    self.default_work()
                except Exception:
                    logger.exception("Background work failed")
                continue

            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(self.process_message(message))
            except Exception as e:
                future.set_exception(e)

    def _fail_pending(self, error: Exception):
        with self._control.work_available:
            pending = list(self._control.requests)
            self._control.requests.clear()
        for _, future in pending:
            if future.set_running_or_notify_cancel():
                future.set_exception(error)


class BaseController(Generic[RequestT, ResponseT]):
    """Runs a worker on its own thread and forwards requests to it."""

    worker: BaseWorker[RequestT, ResponseT]

    def __init__(self, worker: BaseWorker[RequestT, ResponseT]):
        self.worker = worker
        self._thread: threading.Thread | None = None

    def start(self):
        self._thread = threading.Thread(target=self.worker.run, name="vault-index-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0):
        self.worker.request_stop()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    async def request(self, message: RequestT) -> ResponseT:
        return await asyncio.wrap_future(self.worker.submit(message))

    def request_sync(self, message: RequestT, timeout: float | None = None) -> ResponseT:
        return self.worker.submit(message).result(timeout)
