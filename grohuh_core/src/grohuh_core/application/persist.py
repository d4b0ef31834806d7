# grohuh_core/application/persist.py

from typing import Callable

from grohuh_core.domain.ids import new_record_id
from grohuh_core.domain.models import Reading, TriggerState
from grohuh_core.domain.ports import UnitOfWork


def append_reading(
    reading: Reading,
    uow: UnitOfWork,
    new_id: Callable[[], str] = new_record_id,
) -> str:
    record_id = new_id()
    with uow:
        uow.reading_repo().insert(record_id, reading.to_document())
    return record_id


def load_trigger_state(uow: UnitOfWork) -> TriggerState:
    with uow:
        state = uow.trigger_state_repo().get()
    return state if state is not None else TriggerState()


def save_trigger_state(state: TriggerState, uow: UnitOfWork) -> None:
    with uow:
        uow.trigger_state_repo().put(state)
