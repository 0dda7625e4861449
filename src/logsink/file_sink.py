from __future__ import annotations

import io
import logging
import os
import threading
from pathlib import Path
from typing import Optional, Union

from logsink.file_errors import (
    DeleteFailedError,
    DirectoryCreationError,
    FileCreationError,
    NotAFileError,
    OpenFailedError,
)
from logsink.flush_mode import FlushMode
from logsink.log_level import LogLevel

logger = logging.getLogger(__name__)

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

LINE_TERMINATOR = "\r\n"


class FileSink:
    """
    Log sink that appends formatted lines to a single file.

    Each line is written as UTF-8 followed by CRLF. The sink holds one
    open handle for its lifetime and seeks to end-of-file before every
    append, so content written or truncated by someone else between two
    writes is never overwritten.

    Construction and delete failures are raised to the caller. Per-line
    failures are not: the line is dropped and a diagnostic is emitted on
    this module's logger.
    """

    def __init__(
        self,
        path: PathLike,
        flush_mode: Union[FlushMode, str] = FlushMode.ALWAYS,
        *,
        label: str = "file",
    ):
        # Set before validation so teardown of a half-built sink is a no-op
        self._lock = threading.RLock()
        self._handle: Optional[io.FileIO] = None
        self._dropped_writes = 0

        self.label = label
        self.flush_mode = flush_mode
        self._path = self._validate_path(path)
        logger.debug("[%s] file path is %s", self.label, self._path)

        self.reopen()

    # ------------------------------------------------------------------
    # properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def flush_mode(self) -> FlushMode:
        return self._flush_mode

    @flush_mode.setter
    def flush_mode(self, value: Union[FlushMode, str]) -> None:
        self._flush_mode = FlushMode.parse(value)

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def dropped_writes(self) -> int:
        """
        Number of lines dropped since construction.
        """
        return self._dropped_writes

    # ------------------------------------------------------------------
    # LogSink
    # ------------------------------------------------------------------

    def write(self, line: str) -> None:
        """
        Append one line to the file.

        This method must not raise exceptions outward.
        """
        try:
            data = (line + LINE_TERMINATOR).encode("utf-8")
        except UnicodeEncodeError:
            with self._lock:
                self._dropped_writes += 1
            return

        with self._lock:
            handle = self._handle
            if handle is None:
                self._dropped_writes += 1
                logger.debug("[%s] could not write: no file handle", self.label)
                return

            try:
                handle.seek(0, os.SEEK_END)
            except (OSError, ValueError) as e:
                self._dropped_writes += 1
                logger.warning("[%s] seek to end failed on %s: %s", self.label, self._path, e)
                return

            try:
                self._write_all(handle, data)
            except (OSError, ValueError) as e:
                self._dropped_writes += 1
                logger.warning("[%s] write failed on %s: %s", self.label, self._path, e)
                return

            if self._flush_mode is FlushMode.ALWAYS:
                try:
                    self._sync(handle)
                except (OSError, ValueError) as e:
                    logger.warning("[%s] sync failed on %s: %s", self.label, self._path, e)

    def log(self, level: LogLevel, line: str) -> None:
        # Filtering by level is the façade's job
        self.write(line)

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def flush(self) -> None:
        """
        Force written lines to stable storage. No-op when closed.
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                return
            try:
                self._sync(handle)
            except (OSError, ValueError) as e:
                logger.warning("[%s] flush failed on %s: %s", self.label, self._path, e)

    def delete(self, path: PathLike) -> None:
        """
        Remove the file at `path`.

        The target need not be the file this sink has open.
        """
        target = Path(os.fsdecode(path))
        with self._lock:
            try:
                os.remove(target)
            except OSError as e:
                raise DeleteFailedError(target) from e
        logger.debug("[%s] deleted %s", self.label, target)

    def reopen(self) -> None:
        """
        Release any held handle, then open the target file again,
        creating it and its parent directories when missing.
        """
        with self._lock:
            self._close_file()
            self._open_file()

    def close(self) -> None:
        """
        Sync and release the file handle. Safe to call repeatedly.
        """
        with self._lock:
            self._close_file()

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return (
            f"FileSink(label={self.label!r}, path='{self._path}', "
            f"flush_mode={self._flush_mode.value}, {state})"
        )

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_path(path: PathLike) -> Path:
        raw = os.fsdecode(path)
        separators = tuple(s for s in (os.sep, os.altsep) if s)
        if raw.endswith(separators) or Path(raw).is_dir():
            raise NotAFileError(raw)
        return Path(raw).absolute()

    def _open_file(self) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(directory) from e
        logger.debug("[%s] directory ready: %s", self.label, directory)

        if not self._path.exists():
            try:
                self._path.touch(exist_ok=True)
            except OSError as e:
                raise FileCreationError(self._path) from e
            logger.debug("[%s] created %s", self.label, self._path)
        else:
            logger.debug("[%s] %s already exists", self.label, self._path)

        try:
            # Unbuffered append: a failed write leaves nothing behind to resend
            self._handle = open(self._path, "ab", buffering=0)
        except OSError as e:
            raise OpenFailedError(self._path) from e

    def _close_file(self) -> None:
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        try:
            self._sync(handle)
        except (OSError, ValueError) as e:
            logger.warning("[%s] sync on close failed for %s: %s", self.label, self._path, e)
        try:
            handle.close()
        except OSError as e:
            logger.warning("[%s] close failed for %s: %s", self.label, self._path, e)
            return
        logger.debug("[%s] closed %s", self.label, self._path)

    @staticmethod
    def _write_all(handle: io.FileIO, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = handle.write(view)
            if not written:
                raise OSError(f"short write: {len(view)} bytes left")
            view = view[written:]

    @staticmethod
    def _sync(handle: io.FileIO) -> None:
        os.fsync(handle.fileno())
