__all__ = ["ReadingRecordORM", "TriggerStateORM"]

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from grohuh_server.adapters.db.session import Base


class ReadingRecordORM(Base):
    __tablename__ = "data"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    device: Mapped[str] = mapped_column(String, index=True, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)
    buffered: Mapped[str] = mapped_column(String, nullable=False)
    document: Mapped[dict] = mapped_column(JSON, nullable=False)


class TriggerStateORM(Base):
    __tablename__ = "trigger_state"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    triggered: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
