# mediafetch/services/ytdlp/ytdlp_adapter.py
from __future__ import annotations

import shlex
import subprocess
import tempfile
import threading
import time
from typing import Iterator, List, Optional

from mediafetch.common.logging import get_logger
from mediafetch.common.process import terminate_process
from mediafetch.common.settings import get_settings
from mediafetch.common.ytdlp.ytdlp_helpers import build_info_cmd, build_stream_cmd, loads_ytdlp
from mediafetch.domain.entities.extraction import ExtractionResult
from mediafetch.domain.errors import (
    ExtractionCancelled,
    SpawnError,
    StreamError,
    ToolError,
)

logger = get_logger()


class YtDlpStream:
    """
    Byte stream of one format, read straight from yt-dlp's stdout.
    Nothing is read ahead of the consumer. Closing the stream (or exhausting
    it) reaps the process; an unfinished process is terminated.
    """

    def __init__(self, cmd: List[str], *, chunk_size: int = 64 * 1024, terminate_grace_sec: float = 5.0) -> None:
        self.cmd = cmd
        self.chunk_size = chunk_size
        self.terminate_grace_sec = terminate_grace_sec
        self._closed = False
        self._lock = threading.Lock()
        # stderr goes to a temp file so a chatty child can never fill a pipe and stall
        self._errfile = tempfile.TemporaryFile()
        logger.debug("yt-dlp stream cmd: %s", shlex.join(cmd))
        try:
            self._proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=self._errfile,
            )
        except OSError as e:
            self._errfile.close()
            self._closed = True
            raise StreamError("Failed to execute yt-dlp (OS error).", stderr=str(e)) from e

    @property
    def pid(self) -> int:
        return self._proc.pid

    def _read_stderr(self) -> str:
        try:
            self._errfile.seek(0)
            return self._errfile.read().decode("utf-8", errors="replace")
        except (OSError, ValueError):
            return ""

    def __iter__(self) -> Iterator[bytes]:
        try:
            out = self._proc.stdout
            while True:
                chunk = out.read1(self.chunk_size)
                if not chunk:
                    break
                yield chunk
            rc = self._proc.wait()
            # a consumer-initiated close() kills the child; that is not a failure
            if rc != 0 and not self._closed:
                raise StreamError("yt-dlp stream exited with non-zero status", stderr=self._read_stderr(), rc=rc)
        finally:
            self.close()

    def close(self) -> None:
        """Safe to call multiple times and from another thread."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._proc.poll() is None:
            terminate_process(self._proc, self.terminate_grace_sec)
        else:
            self._proc.wait()
        if self._proc.stdout is not None:
            self._proc.stdout.close()
        self._errfile.close()

    def __enter__(self) -> "YtDlpStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class YtDlpAdapter:
    """
    Infrastructure adapter around the `yt-dlp` executable.
    Safe to call from worker threads (I/O-bound).
    """

    def __init__(
        self,
        bin: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        *,
        poll_interval_sec: Optional[float] = None,
        terminate_grace_sec: Optional[float] = None,
        check_all_formats: Optional[bool] = None,
        extra_args: Optional[List[str]] = None,
        stream_chunk_size: Optional[int] = None,
    ) -> None:
        cfg = get_settings().ytdlp
        self.bin = bin or cfg.bin
        self.timeout_sec = float(timeout_sec or cfg.timeout_sec)
        self.poll_interval_sec = float(poll_interval_sec or cfg.poll_interval_sec)
        self.terminate_grace_sec = float(cfg.terminate_grace_sec if terminate_grace_sec is None else terminate_grace_sec)
        self.check_all_formats = cfg.check_all_formats if check_all_formats is None else check_all_formats
        self.extra_args = list(cfg.extra_args if extra_args is None else extra_args)
        self.stream_chunk_size = int(stream_chunk_size or cfg.stream_chunk_size)

    # ---- Metadata ---------------------------------------------------------------
    def extract(self, url: str, cancel: Optional[threading.Event] = None) -> ExtractionResult:
        if cancel is not None and cancel.is_set():
            raise ExtractionCancelled("extraction cancelled before start")

        cmd = build_info_cmd(
            url,
            bin=self.bin,
            check_all_formats=self.check_all_formats,
            extra_args=self.extra_args,
        )
        logger.debug("yt-dlp cmd: %s", shlex.join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise SpawnError("Failed to execute yt-dlp (OS error).", stderr=str(e)) from e

        stdout, stderr = self._communicate(proc, cancel)

        # any stderr output is a failure, whatever the exit status says
        if stderr:
            raise ToolError("yt-dlp wrote to stderr", stderr=stderr, rc=proc.returncode)
        if proc.returncode != 0:
            raise ToolError("yt-dlp returned non-zero exit code", stderr=stderr, rc=proc.returncode)

        return loads_ytdlp(stdout or "", url)

    def _communicate(self, proc: subprocess.Popen, cancel: Optional[threading.Event]) -> tuple[str, str]:
        """
        Collect stdout/stderr to completion, waking every poll interval to
        honour cancellation and the overall timeout.
        """
        deadline = time.monotonic() + self.timeout_sec
        while True:
            try:
                return proc.communicate(timeout=self.poll_interval_sec)
            except subprocess.TimeoutExpired:
                pass
            if cancel is not None and cancel.is_set():
                rc = terminate_process(proc, self.terminate_grace_sec)
                logger.info("yt-dlp extraction cancelled (pid=%s)", proc.pid)
                raise ExtractionCancelled("extraction cancelled", rc=rc)
            if time.monotonic() >= deadline:
                rc = terminate_process(proc, self.terminate_grace_sec)
                raise ToolError(f"yt-dlp timed out after {self.timeout_sec:g}s", rc=rc)

    # ---- Streaming --------------------------------------------------------------
    def open_stream(self, url: str, format_id: str) -> YtDlpStream:
        cmd = build_stream_cmd(url, format_id, bin=self.bin, extra_args=self.extra_args)
        return YtDlpStream(
            cmd,
            chunk_size=self.stream_chunk_size,
            terminate_grace_sec=self.terminate_grace_sec,
        )
