import logging
import shlex
import subprocess
from typing import Optional, Sequence

from grohuh_core.domain.errors import ActionError
from grohuh_core.domain.ports import TriggerAction

log = logging.getLogger(__name__)


class CommandAction(TriggerAction):
    """Run an external command with the crossing SOC appended as its only extra argument."""

    def __init__(self, command: Sequence[str], timeout: Optional[float] = None):
        if not command:
            raise ValueError("trigger command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    @classmethod
    def from_string(cls, command: str, timeout: Optional[float] = None) -> "CommandAction":
        return cls(shlex.split(command), timeout=timeout)

    def __call__(self, soc: int) -> None:
        argv = [*self.command, str(soc)]
        log.info("Running trigger command: %s", shlex.join(argv))
        try:
            result = subprocess.run(
                argv, capture_output=True, text=True, errors="replace", timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ActionError(f"trigger command timed out after {self.timeout}s") from e
        except OSError as e:
            raise ActionError(f"trigger command could not be started: {e}") from e
        except Exception as e:
            raise ActionError(f"trigger command failed: {e!r}") from e

        if result.returncode != 0:
            raise ActionError(
                f"trigger command exited with status {result.returncode}: {result.stderr.strip()}"
            )
        log.debug("Trigger command output: %s", result.stdout.strip())
