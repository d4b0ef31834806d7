from grohuh_core.application.persist import (
    append_reading,
    load_trigger_state,
    save_trigger_state,
)
from grohuh_core.domain.models import Reading, TriggerState


class FakeReadingRepo:
    def __init__(self):
        self.inserts = []

    def insert(self, record_id, document):
        self.inserts.append((record_id, document))


class FakeStateRepo:
    def __init__(self, state=None):
        self.state = state
        self.puts = []

    def get(self):
        return self.state

    def put(self, state):
        self.puts.append(state.triggered)
        self.state = TriggerState(triggered=state.triggered)


class StubUoW:
    def __init__(self, state=None):
        self.read_repo = FakeReadingRepo()
        self.state_repo = FakeStateRepo(state)
        self.entered = 0

    def reading_repo(self):
        return self.read_repo

    def trigger_state_repo(self):
        return self.state_repo

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, *exc):
        pass


def test_append_reading_inserts_flattened_document_under_fresh_id():
    uow = StubUoW()
    reading = Reading(device="dev", time="t0", buffered="no", values={"SOC": 88})

    record_id = append_reading(reading, uow, new_id=lambda: "01hx0000000000000000000000")

    assert record_id == "01hx0000000000000000000000"
    assert uow.read_repo.inserts == [
        (record_id, {"buffered": "no", "device": "dev", "time": "t0", "SOC": 88})
    ]
    assert uow.entered == 1


def test_append_reading_generates_distinct_ids():
    uow = StubUoW()
    reading = Reading(device="dev", time="t0", buffered="no")
    ids = {append_reading(reading, uow) for _ in range(100)}
    assert len(ids) == 100
    assert len(uow.read_repo.inserts) == 100


def test_load_defaults_to_unset_when_absent():
    state = load_trigger_state(StubUoW())
    assert state == TriggerState(triggered=None)


def test_load_returns_persisted_state():
    state = load_trigger_state(StubUoW(TriggerState(triggered=True)))
    assert state.triggered is True


def test_save_overwrites_state():
    uow = StubUoW(TriggerState(triggered=True))
    save_trigger_state(TriggerState(triggered=False), uow)
    assert uow.state_repo.state.triggered is False
    assert uow.state_repo.puts == [False]
