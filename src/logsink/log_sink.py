from typing import Protocol

from logsink.log_level import LogLevel


class LogSink(Protocol):
    """
    Destination for already-formatted log lines.

    A LogSink may persist lines, stream them, or forward them
    to another subsystem. The façade in front of it has already
    decided whether and what to log.
    """

    def write(self, line: str) -> None:
        """
        Record one formatted line.

        Must not raise exceptions outward.
        """

    def log(self, level: LogLevel, line: str) -> None:
        """
        Façade entry point. Level filtering happened upstream.
        """
