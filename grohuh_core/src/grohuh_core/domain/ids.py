from ulid import ULID


def new_record_id() -> str:
    """Return a fresh time-sortable record id, lower-cased for use as a store key."""
    return str(ULID()).lower()
