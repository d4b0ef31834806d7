from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

SOC_FIELD = "SOC"


@dataclass(frozen=True)
class Reading:
    device: str
    time: str
    buffered: str
    values: Mapping[str, Any] = field(default_factory=dict)

    @property
    def soc(self) -> Optional[int]:
        value = self.values.get(SOC_FIELD)
        if value is None:
            return None
        return int(value)

    def to_document(self) -> Dict[str, Any]:
        """Flatten into the persisted record shape; envelope fields win on clashes."""
        doc = dict(self.values)
        doc.update(buffered=self.buffered, device=self.device, time=self.time)
        return doc


@dataclass
class TriggerState:
    triggered: Optional[bool] = None  # None means never fired

    @property
    def is_triggered(self) -> bool:
        return bool(self.triggered)

    def to_document(self) -> Dict[str, Optional[bool]]:
        return {"triggered": self.triggered}
