import logging
from enum import Enum
from typing import Optional

from grohuh_core.domain.errors import ActionError
from grohuh_core.domain.models import TriggerState
from grohuh_core.domain.ports import TriggerAction

log = logging.getLogger(__name__)

DEFAULT_HIGH_THRESHOLD = 90
DEFAULT_LOW_THRESHOLD = 80


class Transition(str, Enum):
    NONE = "none"
    FIRED = "fired"
    RELEASED = "released"
    FIRE_FAILED = "fire_failed"


class SocTrigger:
    """
    Two-state hysteresis trigger on state-of-charge.

    Idle -> Triggered when SOC rises to ``high`` or above; the action runs first and
    the flag is only set if it succeeds, so a failed action is retried on the next
    qualifying reading. Triggered -> Idle when SOC drops below ``low``, silently.

    The state is owned by the caller and passed in on every update.
    """

    def __init__(
        self,
        action: TriggerAction,
        *,
        high: int = DEFAULT_HIGH_THRESHOLD,
        low: int = DEFAULT_LOW_THRESHOLD,
    ):
        if high <= low:
            raise ValueError(f"high threshold must exceed low threshold (got {high} <= {low})")
        self.action = action
        self.high = high
        self.low = low

    def update(self, state: TriggerState, soc: Optional[int]) -> Transition:
        if soc is None:
            return Transition.NONE

        if not state.is_triggered:
            if soc < self.high:
                return Transition.NONE
            try:
                self.action(soc)
            except ActionError as exc:
                log.error("Trigger action failed soc=%s, staying idle: %s", soc, exc)
                return Transition.FIRE_FAILED
            except Exception:
                log.exception("Trigger action raised unexpectedly soc=%s, staying idle", soc)
                return Transition.FIRE_FAILED
            state.triggered = True
            log.info("Trigger fired soc=%s high=%s", soc, self.high)
            return Transition.FIRED

        if soc < self.low:
            state.triggered = False
            log.info("Trigger released soc=%s low=%s", soc, self.low)
            return Transition.RELEASED

        return Transition.NONE
