from __future__ import annotations

from enum import Enum
from typing import Union


class FlushMode(str, Enum):
    """
    Policy controlling when written lines are forced to stable storage.
    """

    ALWAYS = "always"   # fsync after every write
    MANUAL = "manual"   # fsync only on flush() or close()

    @classmethod
    def parse(cls, value: Union["FlushMode", str]) -> "FlushMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown flush mode {value!r}; expected one of "
            f"{[m.value for m in cls]}"
        )
