import logging
import threading
from typing import Callable, Optional

from grohuh_core.application.ingest_loop import IngestLoop

log = logging.getLogger(__name__)

DEFAULT_RESTART_DELAY_SEC = 5.0


def run_forever(
    make_loop: Callable[[], IngestLoop],
    restart_delay: float = DEFAULT_RESTART_DELAY_SEC,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """
    Build and run a fresh ingest loop until ``stop_event`` is set.

    Every exit of the inner loop, whether a setup failure, a TransportError or
    the source simply ending, is followed by a fixed ``restart_delay`` wait and
    a rebuild with fresh connections and a reloaded trigger state.
    """
    stop_event = stop_event or threading.Event()
    attempt = 0

    while not stop_event.is_set():
        attempt += 1
        loop: Optional[IngestLoop] = None
        try:
            loop = make_loop()
            loop.run()
        except Exception:
            log.exception("Ingest loop failed (attempt %d)", attempt)
        finally:
            if loop is not None:
                _close_quietly(loop)

        if stop_event.is_set():
            break
        log.warning("Restarting ingest loop in %.1f seconds", restart_delay)
        stop_event.wait(restart_delay)

    log.info("Supervisor stopped")


def _close_quietly(loop: IngestLoop) -> None:
    try:
        loop.source.close()
    except Exception as exc:
        log.warning("Error closing message source: %s", exc)
