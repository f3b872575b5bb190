"""Ordered output channels for a single compile task."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from compilerguard.filter.types import OutputStream

LineSink = Callable[[str], None]


@dataclass(frozen=True)
class OutputLine:
    stream: OutputStream
    text: str


class TaskOutput:
    """Write-through transcript of everything a task emits, in emission order."""

    def __init__(self, info_sink: LineSink | None = None, error_sink: LineSink | None = None):
        self._sinks: dict[OutputStream, LineSink | None] = {
            OutputStream.INFORMATIONAL: info_sink,
            OutputStream.ERROR: error_sink,
        }
        self.transcript: list[OutputLine] = []

    def write(self, stream: OutputStream, text: str) -> None:
        self.transcript.append(OutputLine(stream=stream, text=text))
        sink = self._sinks[stream]
        if sink is not None:
            sink(text)

    def info(self, text: str) -> None:
        self.write(OutputStream.INFORMATIONAL, text)

    def lines(self, stream: OutputStream | None = None) -> list[str]:
        return [line.text for line in self.transcript if stream is None or line.stream == stream]

    def text(self, stream: OutputStream | None = None) -> str:
        return "\n".join(self.lines(stream))
