import logging
from dataclasses import dataclass
from typing import Callable, Optional

from grohuh_core.application.decode_reading import decode_reading
from grohuh_core.application.persist import (
    append_reading,
    load_trigger_state,
    save_trigger_state,
)
from grohuh_core.domain.errors import DecodeError, SinkError
from grohuh_core.domain.models import TriggerState
from grohuh_core.domain.ports import MessageSource, UnitOfWork
from grohuh_core.domain.trigger import SocTrigger, Transition

log = logging.getLogger(__name__)


@dataclass
class IngestOutcome:
    decoded: bool
    record_id: Optional[str] = None
    transition: Transition = Transition.NONE
    state_saved: bool = False


class IngestLoop:
    """
    Sequential per-message pipeline: decode -> append record -> trigger -> save state.

    Decode and sink failures are per-message and only logged. A TransportError from
    the source ends ``run()``; restarting is the supervisor's job.
    """

    def __init__(
        self,
        source: MessageSource,
        uow_factory: Callable[[], UnitOfWork],
        trigger: SocTrigger,
    ):
        self.source = source
        self._uow_factory = uow_factory
        self.trigger = trigger
        self.state: Optional[TriggerState] = None

    def start(self) -> TriggerState:
        """Load the persisted trigger state; SinkError here aborts the loop start."""
        self.state = load_trigger_state(self._uow_factory())
        log.info("Loaded trigger state triggered=%s", self.state.triggered)
        return self.state

    def handle(self, payload: bytes) -> IngestOutcome:
        if self.state is None:
            raise RuntimeError("IngestLoop.start() must be called before handle()")

        try:
            reading = decode_reading(payload)
        except DecodeError as exc:
            log.warning("Skipping message: %s", exc)
            return IngestOutcome(decoded=False)

        outcome = IngestOutcome(decoded=True)

        # The record and the trigger are independent: a failed write still lets SOC through.
        try:
            outcome.record_id = append_reading(reading, self._uow_factory())
            log.debug(
                "Stored record id=%s device=%s time=%s",
                outcome.record_id,
                reading.device,
                reading.time,
            )
        except SinkError as exc:
            log.error(
                "Failed to store record device=%s time=%s, continuing with trigger: %s",
                reading.device,
                reading.time,
                exc,
            )

        outcome.transition = self.trigger.update(self.state, reading.soc)

        try:
            save_trigger_state(self.state, self._uow_factory())
            outcome.state_saved = True
        except SinkError as exc:
            log.error("Failed to save trigger state triggered=%s: %s", self.state.triggered, exc)

        return outcome

    def run(self) -> None:
        self.start()
        log.info("Ingest loop running")
        for payload in self.source:
            self.handle(payload)
        log.info("Message source exhausted, ingest loop stopping")
