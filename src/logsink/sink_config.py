from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from logsink.file_sink import FileSink
from logsink.flush_mode import FlushMode


class SinkConfigError(ValueError):
    pass


@dataclass(frozen=True)
class FileSinkConfig:
    """Settings needed to build a FileSink."""

    path: str                                  # e.g. "logs/app.log"
    flush_mode: FlushMode = FlushMode.ALWAYS   # fsync policy
    label: str = "file"                        # name used in diagnostics

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileSinkConfig":
        """
        Build a config from a plain mapping (typically parsed JSON),
        enforcing types and enum validity.
        """
        if "path" not in data:
            raise SinkConfigError("Missing required field: 'path'")

        path = data["path"]
        if not isinstance(path, str) or not path.strip():
            raise SinkConfigError("path must be a non-empty string.")

        label = data.get("label", "file")
        if not isinstance(label, str):
            raise SinkConfigError("label must be a string.")

        try:
            flush_mode = FlushMode.parse(data.get("flush_mode", FlushMode.ALWAYS))
        except ValueError as e:
            raise SinkConfigError(str(e)) from e

        unknown = sorted(set(data) - {"path", "flush_mode", "label"})
        if unknown:
            raise SinkConfigError(f"Unknown fields: {unknown}")

        return cls(path=path, flush_mode=flush_mode, label=label)

    def build(self) -> FileSink:
        return FileSink(self.path, self.flush_mode, label=self.label)
