from .decode_reading import decode_reading
from .ingest_loop import IngestLoop, IngestOutcome
from .persist import append_reading, load_trigger_state, save_trigger_state
from .supervisor import run_forever

__all__ = [
    "append_reading",
    "decode_reading",
    "IngestLoop",
    "IngestOutcome",
    "load_trigger_state",
    "run_forever",
    "save_trigger_state",
]
