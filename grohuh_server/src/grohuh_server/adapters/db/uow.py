from contextlib import AbstractContextManager

from grohuh_core.domain.errors import SinkError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from grohuh_server.adapters.db.session import get_session_factory


class SqlAlchemyUoW(AbstractContextManager):
    """
    One store transaction. Commits on clean exit, rolls back otherwise.

    SQLAlchemy failures, raised inside the block or by the commit, surface as SinkError.
    """

    def __init__(self, session: Session | None = None, state_key: str | None = None):
        self._external = session is not None
        self.session: Session = session or get_session_factory()()
        self.state_key = state_key

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, _tb):
        try:
            if exc_type:
                self.session.rollback()
            elif not self._external:
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise SinkError(f"store commit failed: {exc}") from exc
        finally:
            if not self._external:
                self.session.close()

        if exc_type and issubclass(exc_type, SQLAlchemyError):
            raise SinkError(f"store operation failed: {exc_val}") from exc_val

    def reading_repo(self):
        from grohuh_server.adapters.db.repository import SqlReadingRepository

        return SqlReadingRepository(self.session)

    def trigger_state_repo(self):
        from grohuh_server.adapters.db.repository import (
            DEFAULT_TRIGGER_STATE_KEY,
            SqlTriggerStateRepository,
        )

        return SqlTriggerStateRepository(self.session, self.state_key or DEFAULT_TRIGGER_STATE_KEY)
