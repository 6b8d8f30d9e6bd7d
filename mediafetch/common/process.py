# mediafetch/common/process.py
from __future__ import annotations

import subprocess

from mediafetch.common.logging import get_logger

logger = get_logger()


def terminate_process(proc: subprocess.Popen, grace_sec: float = 5.0) -> int | None:
    """
    Stop a child process and reap it: SIGTERM, then SIGKILL if it is still
    alive after `grace_sec`. Pipes are drained so the child cannot block on a
    full buffer. Returns the exit status.
    """
    if proc.poll() is None:
        logger.debug("terminating pid=%s", proc.pid)
        proc.terminate()
        try:
            proc.communicate(timeout=grace_sec)
        except subprocess.TimeoutExpired:
            logger.warning("pid=%s ignored SIGTERM for %.1fs; killing", proc.pid, grace_sec)
            proc.kill()
            proc.communicate()
    return proc.returncode
