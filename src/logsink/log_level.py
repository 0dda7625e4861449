from enum import IntEnum


class LogLevel(IntEnum):
    """Level the façade attaches to a line; values follow the stdlib `logging` numbers."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
