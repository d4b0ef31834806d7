import subprocess
import sys
from unittest.mock import patch

import pytest
from grohuh_core.domain.errors import ActionError

from grohuh_server.adapters.action.command import CommandAction


def completed(returncode: int, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


def test_passes_soc_as_sole_extra_argument():
    with patch("subprocess.run", return_value=completed(0)) as run:
        CommandAction.from_string("/usr/bin/notify --loud", timeout=30)(92)

    run.assert_called_once()
    assert run.call_args[0][0] == ["/usr/bin/notify", "--loud", "92"]
    assert run.call_args[1]["timeout"] == 30


def test_non_zero_exit_is_action_error():
    with patch("subprocess.run", return_value=completed(3, "boom")):
        with pytest.raises(ActionError, match="status 3"):
            CommandAction(["notify"])(90)


def test_spawn_failure_is_action_error():
    with patch("subprocess.run", side_effect=FileNotFoundError("no such file")):
        with pytest.raises(ActionError):
            CommandAction(["missing-binary"])(90)


def test_timeout_is_action_error():
    with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(["notify"], 1)):
        with pytest.raises(ActionError, match="timed out"):
            CommandAction(["notify"], timeout=1)(90)


def test_empty_command_rejected():
    with pytest.raises(ValueError):
        CommandAction.from_string("   ")


def test_runs_a_real_process():
    CommandAction([sys.executable, "-c", "import sys; sys.exit(0 if sys.argv[1] == '95' else 1)"])(95)
    with pytest.raises(ActionError):
        CommandAction([sys.executable, "-c", "import sys; sys.exit(1)"])(95)


def test_undecodable_output_from_successful_command_is_success():
    script = "import sys; sys.stdout.buffer.write(b'\\xff\\xfe'); sys.stderr.buffer.write(b'\\xc3'); sys.exit(0)"
    CommandAction([sys.executable, "-c", script])(92)


def test_output_is_decoded_leniently():
    with patch("subprocess.run", return_value=completed(0)) as run:
        CommandAction(["notify"])(90)
    assert run.call_args[1]["errors"] == "replace"


def test_any_spawn_exception_is_action_error():
    with patch("subprocess.run", side_effect=ValueError("embedded null byte")):
        with pytest.raises(ActionError, match="embedded null byte"):
            CommandAction(["notify"])(90)
