"""Tests for running mtx and the command line (subprocess mocked)."""
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from tape_library_changer.__main__ import main
from tape_library_changer.changer import ExternalCommandFailed, run_mtx

from test_status import STATUS


def test_run_mtx_builds_command_line():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        return_value=MagicMock(returncode=0, stdout="done", stderr=""),
    ) as run_mock:
        out = run_mtx("mtx", "/dev/sg3", ["load", "3", "1"], timeout=30)
    assert out == "done"
    args, kwargs = run_mock.call_args
    assert args[0] == ["mtx", "-f", "/dev/sg3", "load", "3", "1"]
    assert kwargs["capture_output"] is True
    assert kwargs["text"] is True
    assert kwargs["timeout"] == 30


def test_run_mtx_failure_carries_stderr():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        return_value=MagicMock(returncode=1, stdout="", stderr="Drive 1 Full\n\n"),
    ):
        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_mtx("mtx", "/dev/sg3", ["load", "3", "1"])
    # only one trailing newline is dropped
    assert exc_info.value.diagnostic == "Drive 1 Full\n"
    assert exc_info.value.returncode == 1
    assert exc_info.value.operation is None


def test_run_mtx_failure_without_stderr():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        return_value=MagicMock(returncode=2, stdout="", stderr=""),
    ):
        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_mtx("mtx", "/dev/sg3", ["status"])
    assert "exit 2" in str(exc_info.value)


def test_run_mtx_missing_command():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        side_effect=FileNotFoundError("No such file or directory: 'mtx'"),
    ):
        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_mtx("mtx", "/dev/sg3", ["status"])
    assert "Required command not found" in str(exc_info.value)
    assert exc_info.value.returncode is None


def test_run_mtx_command_not_executable():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        side_effect=PermissionError(13, "Permission denied"),
    ):
        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_mtx("/opt/mtx", "/dev/sg3", ["status"])
    assert "Cannot run /opt/mtx" in str(exc_info.value)
    assert exc_info.value.returncode is None


def test_run_mtx_timeout():
    with patch(
        "tape_library_changer.changer.mtx.subprocess.run",
        side_effect=subprocess.TimeoutExpired(["mtx"], 5),
    ):
        with pytest.raises(ExternalCommandFailed) as exc_info:
            run_mtx("mtx", "/dev/sg3", ["inventory"], timeout=5)
    assert "timed out" in str(exc_info.value)


def test_command_failure_with_operation_context():
    err = ExternalCommandFailed("Drive 1 Full", returncode=1)
    wrapped = err.with_operation("load")
    assert str(wrapped) == "load: Drive 1 Full"
    assert wrapped.diagnostic == "Drive 1 Full"
    assert wrapped.returncode == 1


def _run_main(argv, executor):
    with patch.object(sys, "argv", ["tape_library_changer"] + argv):
        with patch("tape_library_changer.changer.library.run_mtx", side_effect=executor):
            with pytest.raises(SystemExit) as exc_info:
                main()
    return exc_info.value.code


def test_main_status(capsys):
    calls = []

    def executor(command, device, args):
        calls.append((device, args))
        return STATUS

    assert _run_main(["--device", "/dev/sga", "status"], executor) == 0
    out = capsys.readouterr().out
    assert calls == [("/dev/sga", ["status"])]
    assert "/dev/sga: 2 drives, 4 slots, 2 import/export" in out
    assert "Drive 0: M00001L6 (home 1)" in out
    assert "Drive 1: empty" in out
    assert "Import/Export 5: M00002L6" in out


def test_main_empty_drives_and_cleaning(capsys):
    assert _run_main(["--device", "/dev/sga", "empty-drives"], lambda c, d, a: STATUS) == 0
    assert capsys.readouterr().out.splitlines() == ["1"]
    assert _run_main(["--device", "/dev/sga", "cleaning"], lambda c, d, a: STATUS) == 0
    assert capsys.readouterr().out.splitlines() == ["CLN004L6 (slot 4)"]


def test_main_reports_errors(capsys):
    def executor(command, device, args):
        raise ExternalCommandFailed("cannot open SCSI device", returncode=1)

    assert _run_main(["--device", "/dev/sga", "inventory"], executor) == 1
    assert "inventory: cannot open SCSI device" in capsys.readouterr().err


def test_main_usage():
    assert _run_main([], lambda c, d, a: "") == 2
    assert _run_main(["--device"], lambda c, d, a: "") == 2
    assert _run_main(["eject"], lambda c, d, a: "") == 2


def test_main_reports_unrunnable_command(capsys):
    with patch.object(sys, "argv", ["tape_library_changer", "--device", "/dev/sga", "status"]):
        with patch(
            "tape_library_changer.changer.mtx.subprocess.run",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()
    assert exc_info.value.code == 1
    assert "status: Cannot run" in capsys.readouterr().err
