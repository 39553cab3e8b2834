"""
Run the changer-control program: <command> -f <device> <args...>.
"""
import subprocess
from typing import Callable, Optional

from ..config import MTX_COMMAND, MTX_TIMEOUT_SEC
from .errors import ExternalCommandFailed

# (command, device, args) -> stdout
CommandExecutor = Callable[[str, str, list[str]], str]


def run_mtx(
    command: str,
    device: str,
    args: list[str],
    *,
    timeout: Optional[int] = None,
) -> str:
    """
    Run `command -f device args...` and return stdout.
    Raises ExternalCommandFailed on non-zero exit (message is stderr without its
    trailing newline), missing executable, or timeout.
    """
    cmd = [command or MTX_COMMAND, "-f", device] + list(args)
    try:
        r = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout if timeout is not None else MTX_TIMEOUT_SEC,
        )
    except FileNotFoundError as e:
        raise ExternalCommandFailed(f"Required command not found ({cmd[0]}): {e}") from e
    except OSError as e:
        raise ExternalCommandFailed(f"Cannot run {cmd[0]}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalCommandFailed(
            f"{' '.join(cmd)} timed out after {e.timeout} s (the changer may still be moving)"
        ) from e
    if r.returncode != 0:
        err = r.stderr or ""
        if err.endswith("\n"):
            err = err[:-1]
        raise ExternalCommandFailed(err or f"exit {r.returncode}", returncode=r.returncode)
    return r.stdout or ""
