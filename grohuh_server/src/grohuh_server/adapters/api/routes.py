# grohuh_server/adapters/api/routes.py

from grohuh_core.application.persist import load_trigger_state
from grohuh_core.config.environments import get_settings
from fastapi import APIRouter, Depends, Query

from grohuh_server.adapters.api.schemas import RecordOut, TriggerStateOut
from grohuh_server.adapters.db.uow import SqlAlchemyUoW

router = APIRouter()


def get_uow():
    yield SqlAlchemyUoW(state_key=get_settings().TRIGGER_STATE_KEY)


@router.get("/ping")
def ping():
    return {"status": "ok"}


@router.get("/readings/latest", response_model=list[RecordOut])
def latest_readings(
    limit: int = Query(10, ge=1, le=500),
    uow: SqlAlchemyUoW = Depends(get_uow),
):
    with uow:
        return uow.reading_repo().latest(limit=limit)


@router.get("/trigger-state", response_model=TriggerStateOut)
def trigger_state(uow: SqlAlchemyUoW = Depends(get_uow)):
    return TriggerStateOut.from_domain(load_trigger_state(uow))
