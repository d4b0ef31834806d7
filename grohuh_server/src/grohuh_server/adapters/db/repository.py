from typing import Any, List, Mapping, Optional

from grohuh_core.domain.models import TriggerState
from grohuh_core.domain.ports import ReadingRepository, TriggerStateRepository
from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from grohuh_server.adapters.db.sqlalchemy_models import ReadingRecordORM, TriggerStateORM

DEFAULT_TRIGGER_STATE_KEY = "soc"


class SqlReadingRepository(ReadingRepository):
    def __init__(self, session: Session):
        self.session = session

    # WRITE side: plain INSERT, a duplicate id is an error rather than an overwrite
    def insert(self, record_id: str, document: Mapping[str, Any]) -> None:
        self.session.execute(
            insert(ReadingRecordORM).values(
                id=record_id,
                device=document["device"],
                time=document["time"],
                buffered=document["buffered"],
                document=dict(document),
            )
        )

    # READ side
    def latest(self, limit: int = 10) -> List[dict]:
        stmt = select(ReadingRecordORM).order_by(ReadingRecordORM.id.desc()).limit(limit)
        return [self._to_document(r) for r in self.session.scalars(stmt).all()]

    # helper
    @staticmethod
    def _to_document(row: ReadingRecordORM) -> dict:
        return {"id": row.id, **row.document}


class SqlTriggerStateRepository(TriggerStateRepository):
    def __init__(self, session: Session, key: str = DEFAULT_TRIGGER_STATE_KEY):
        self.session = session
        self.key = key

    def get(self) -> Optional[TriggerState]:
        row = self.session.get(TriggerStateORM, self.key)
        if row is None:
            return None
        return TriggerState(triggered=row.triggered)

    def put(self, state: TriggerState) -> None:
        row = TriggerStateORM()
        row.key = self.key
        row.triggered = state.triggered
        self.session.merge(row)
