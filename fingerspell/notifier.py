"""
Thread handoff for the classifier.

NotificationDispatcher delivers listener callbacks on its own worker thread
so that a slow listener never blocks the thread producing frames.
FrameWorker funnels frames from a sensor callback into the classifier on a
single consumer thread, in arrival order.
"""
import logging
import queue
import threading
import time
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_STOP = object()


class NotificationDispatcher:
    """
    Bounded FIFO of pending callbacks drained by one daemon thread.

    There is no backpressure: when the queue is full the oldest pending
    notification is dropped and a warning is logged.
    """

    def __init__(self, max_pending: int = 64, name: str = "fingerspell-notify"):
        if max_pending < 1:
            raise ValueError(f"max_pending must be at least 1, got {max_pending}")
        self._queue: "queue.Queue" = queue.Queue(maxsize=max_pending)
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closing = False
        self.dropped = 0

    def submit(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue callback(*args) for delivery. Never blocks."""
        with self._lock:
            if self._closing:
                logger.warning("⚠️ Dispatcher is closing, notification to %r discarded", callback)
                return
            self._ensure_started()
            self._put_dropping_oldest((callback, args))

    def flush(self) -> None:
        """Block until every queued notification has been delivered."""
        if self._thread is not None:
            self._queue.join()

    def close(self, timeout: Optional[float] = None) -> None:
        """
        Deliver what is pending, then stop the worker thread.

        Never blocks longer than timeout; a listener still stalled by then
        is left to its daemon thread and a warning is logged.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._closing = True
            self._put_dropping_oldest(_STOP)

        thread.join(timeout)
        if thread.is_alive():
            logger.warning("⚠️ Listener thread did not stop within %ss", timeout)
            return

        with self._lock:
            self._thread = None
            self._closing = False

    def _put_dropping_oldest(self, item) -> None:
        # Caller holds self._lock, so the stop marker is never evicted
        while True:
            try:
                self._queue.put_nowait(item)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self._queue.task_done()
                except queue.Empty:
                    continue
                self.dropped += 1
                logger.warning("⚠️ Listener queue full, dropped oldest notification (%d dropped)", self.dropped)

    def _ensure_started(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                callback, args = item
                try:
                    callback(*args)
                except Exception:
                    logger.exception("Listener %r raised", callback)
            finally:
                self._queue.task_done()


class FrameWorker:
    """
    Single-consumer handoff from a sensor callback to the classifier.

    The producer calls submit() from any thread; frames are stamped on
    arrival and processed one at a time, in arrival order, by the worker.
    """

    def __init__(self, process: Callable[[Any, float], Any], max_pending: int = 0,
                 name: str = "fingerspell-frames"):
        """
        Args:
            process: Called as process(frame, t_now) for every frame; usually
                FingerspellClassifier.process_frame
            max_pending: Queue bound, 0 for unbounded
        """
        self._process = process
        self._queue: "queue.Queue" = queue.Queue(maxsize=max_pending)
        self._name = name
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "FrameWorker":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._thread.start()
        return self

    def submit(self, frame: Any, t_now: Optional[float] = None) -> None:
        """Hand over a frame (or None for "no hand"). Blocks only if a bound is set and reached."""
        if t_now is None:
            t_now = time.monotonic()
        self._queue.put((frame, t_now))

    def join(self) -> None:
        """Wait until every submitted frame has been processed."""
        self._queue.join()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Process what is pending, then stop the worker. Waits at most timeout seconds."""
        if self._thread is None:
            return
        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            logger.warning("⚠️ Frame queue still full after %ss, worker not stopped", timeout)
            return
        self._thread.join(None if deadline is None else max(0.0, deadline - time.monotonic()))
        if self._thread.is_alive():
            logger.warning("⚠️ Frame worker did not stop within %ss", timeout)
            return
        self._thread = None

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                frame, t_now = item
                try:
                    self._process(frame, t_now)
                except Exception:
                    logger.exception("Frame processing failed")
            finally:
                self._queue.task_done()
