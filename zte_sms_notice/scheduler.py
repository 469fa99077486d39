"""Periodic, non-overlapping execution with cooperative cancellation."""

import logging
import signal
import threading
from typing import Callable

logger = logging.getLogger(__name__)


def run_periodically(
    task: Callable[[], None],
    interval_seconds: float,
    stop_event: threading.Event,
) -> int:
    """
    Run `task` now and then every `interval_seconds` until `stop_event` is set.

    Cycles never overlap. The stop event is checked between cycles only: a
    running task is not interrupted, but no new one starts once it is set.
    An exception escaping the task is logged and the loop continues.

    Returns:
        Number of cycles that were started.
    """
    cycles = 0
    while not stop_event.is_set():
        cycles += 1
        try:
            task()
        except Exception as e:
            logger.error(f"Cycle {cycles} raised: {e}", exc_info=True)
        if stop_event.wait(interval_seconds):
            break
    return cycles


def install_signal_handlers(stop_event: threading.Event) -> None:
    """Set `stop_event` on SIGINT or SIGTERM."""

    def _handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, stopping after the current cycle")
        # Event.set takes the lock Event.wait may hold in this same thread
        threading.Thread(target=stop_event.set, name="stop-signal", daemon=True).start()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
