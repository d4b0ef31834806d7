"""
Repository and unit-of-work tests against in-memory SQLite.
"""

import pytest
from grohuh_core.application.persist import (
    append_reading,
    load_trigger_state,
    save_trigger_state,
)
from grohuh_core.domain.errors import SinkError
from grohuh_core.domain.models import TriggerState
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from grohuh_server.adapters.db.repository import SqlReadingRepository, SqlTriggerStateRepository
from grohuh_server.adapters.db.sqlalchemy_models import Base, ReadingRecordORM, TriggerStateORM
from grohuh_server.adapters.db.uow import SqlAlchemyUoW
from grohuh_server.utils.factories import ReadingFactory


# ───────── session fixture ─────────
@pytest.fixture()
def session():
    eng = create_engine("sqlite:///:memory:", future=True)
    Base.metadata.create_all(eng)
    sess = sessionmaker(bind=eng, expire_on_commit=False)()
    yield sess
    sess.close()


@pytest.fixture()
def reading_repo(session):
    return SqlReadingRepository(session)


@pytest.fixture()
def state_repo(session):
    return SqlTriggerStateRepository(session)


# ───────── Reading repo tests ─────────
def test_insert_stores_flattened_document(reading_repo, session):
    reading = ReadingFactory(values={"SOC": 91, "pvpowerin": 1200, "new_field": 3})
    reading_repo.insert("01hxabc", reading.to_document())
    session.commit()

    row = session.scalars(select(ReadingRecordORM)).one()
    assert row.id == "01hxabc"
    assert row.device == reading.device
    assert row.document == {
        "buffered": reading.buffered,
        "device": reading.device,
        "time": reading.time,
        "SOC": 91,
        "pvpowerin": 1200,
        "new_field": 3,
    }


def test_insert_never_overwrites(reading_repo, session):
    reading_repo.insert("01hxabc", ReadingFactory().to_document())
    session.commit()
    with pytest.raises(SinkError):
        with SqlAlchemyUoW(session) as uow:
            uow.reading_repo().insert("01hxabc", ReadingFactory().to_document())


def test_latest_orders_by_record_id(reading_repo, session):
    for record_id in ["01a", "01c", "01b"]:
        reading_repo.insert(record_id, ReadingFactory().to_document())
    session.commit()

    latest = reading_repo.latest(limit=2)
    assert [doc["id"] for doc in latest] == ["01c", "01b"]


# ───────── Trigger state repo tests ─────────
def test_state_absent_by_default(state_repo):
    assert state_repo.get() is None


def test_state_put_overwrites_single_row(state_repo, session):
    state_repo.put(TriggerState(triggered=True))
    session.commit()
    state_repo.put(TriggerState(triggered=False))
    session.commit()

    rows = session.scalars(select(TriggerStateORM)).all()
    assert len(rows) == 1
    assert rows[0].key == "soc"
    assert state_repo.get() == TriggerState(triggered=False)


def test_state_key_is_configurable(session):
    SqlTriggerStateRepository(session, key="other").put(TriggerState(triggered=True))
    session.commit()
    assert SqlTriggerStateRepository(session).get() is None
    assert SqlTriggerStateRepository(session, key="other").get().triggered is True


# ───────── application functions through the UoW ─────────
def test_application_round_trip_through_uow(session):
    record_id = append_reading(ReadingFactory(values={"SOC": 92}), SqlAlchemyUoW(session))
    save_trigger_state(TriggerState(triggered=True), SqlAlchemyUoW(session))
    session.commit()

    assert session.get(ReadingRecordORM, record_id).document["SOC"] == 92
    assert load_trigger_state(SqlAlchemyUoW(session)).triggered is True


def test_load_defaults_when_table_empty(session):
    assert load_trigger_state(SqlAlchemyUoW(session)) == TriggerState(triggered=None)


def test_unreachable_store_raises_sink_error(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path}/missing/dir/grohuh.db", future=True)
    sess = sessionmaker(bind=eng)()
    with pytest.raises(SinkError):
        append_reading(ReadingFactory(), SqlAlchemyUoW(sess))


def test_owned_session_commits_and_closes(monkeypatch, tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path}/grohuh.db", future=True)
    Base.metadata.create_all(eng)
    factory = sessionmaker(bind=eng, expire_on_commit=False)
    monkeypatch.setattr(
        "grohuh_server.adapters.db.uow.get_session_factory", lambda: factory
    )

    record_id = append_reading(ReadingFactory(), SqlAlchemyUoW())

    with factory() as check:
        assert check.get(ReadingRecordORM, record_id) is not None
