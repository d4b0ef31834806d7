class GrohuhError(Exception):
    """Base class for all errors raised by the ingest pipeline."""


class DecodeError(GrohuhError):
    """Inbound payload is not a well-formed Growatt message."""


class SinkError(GrohuhError):
    """A record or trigger-state write (or the state load) failed."""


class ActionError(GrohuhError):
    """The external trigger action could not run or reported failure."""


class TransportError(GrohuhError):
    """The message transport connection is lost or could not be set up."""
