from typing import Any, Dict

from pydantic import BaseModel, ValidationError, field_validator

from grohuh_core.domain.errors import DecodeError
from grohuh_core.domain.models import SOC_FIELD, Reading


class GrowattMessage(BaseModel):
    """Envelope published by the inverter bridge; ``values`` is left open."""

    device: str
    time: str
    buffered: str
    values: Dict[str, Any]

    @field_validator("values")
    @classmethod
    def _soc_is_integral(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        soc = values.get(SOC_FIELD)
        if soc is None:
            return values
        if isinstance(soc, bool) or not isinstance(soc, (int, float)):
            raise ValueError(f"{SOC_FIELD} must be an integer, got {soc!r}")
        if isinstance(soc, float) and not soc.is_integer():
            raise ValueError(f"{SOC_FIELD} must be an integer, got {soc!r}")
        return values


def decode_reading(payload: bytes) -> Reading:
    try:
        msg = GrowattMessage.model_validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(f"malformed reading payload: {exc}") from exc
    return Reading(device=msg.device, time=msg.time, buffered=msg.buffered, values=msg.values)
