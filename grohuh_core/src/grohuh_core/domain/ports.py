from typing import Any, Iterator, List, Mapping, Optional, Protocol

from grohuh_core.domain.models import TriggerState


class ReadingRepository(Protocol):
    def insert(self, record_id: str, document: Mapping[str, Any]) -> None: ...

    def latest(self, limit: int = 10) -> List[dict]: ...


class TriggerStateRepository(Protocol):
    def get(self) -> Optional[TriggerState]: ...

    def put(self, state: TriggerState) -> None: ...


class UnitOfWork(Protocol):
    def reading_repo(self) -> ReadingRepository: ...

    def trigger_state_repo(self) -> TriggerStateRepository: ...

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None: ...


class MessageSource(Protocol):
    """Yields raw payloads in arrival order; raises TransportError on connection loss."""

    def __iter__(self) -> Iterator[bytes]: ...

    def close(self) -> None: ...


class TriggerAction(Protocol):
    """Runs the side effect for a SOC crossing; raises ActionError on failure."""

    def __call__(self, soc: int) -> None: ...
