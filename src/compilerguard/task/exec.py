"""Streaming runner for the black-box compiler process."""

from __future__ import annotations

import queue
import subprocess
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from compilerguard.filter.types import OutputStream

LineCallback = Callable[[OutputStream, str], None]


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    cwd: Path
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def _decode(raw: bytes) -> str:
    """Compiler output is not guaranteed to be UTF-8."""
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


def _pump(pipe: IO[bytes], stream: OutputStream, lines: queue.Queue[tuple[OutputStream, bytes | None]]) -> None:
    with pipe:
        for raw in iter(pipe.readline, b""):
            lines.put((stream, raw))
    lines.put((stream, None))


def run_compiler(
    command: tuple[str, ...],
    arguments: tuple[str, ...],
    sources: tuple[str, ...],
    *,
    cwd: Path,
    on_line: LineCallback | None = None,
) -> ExecResult:
    """Invoke the compiler, forwarding each output line as it arrives.

    stdout lines are reported on the informational stream and stderr lines
    on the error stream, in arrival order across both pipes. A non-zero exit
    is reported on the result, not raised.
    """
    argv = [*command, *arguments, *sources]
    process = subprocess.Popen(argv, cwd=cwd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    lines: queue.Queue[tuple[OutputStream, bytes | None]] = queue.Queue()
    readers = [
        threading.Thread(target=_pump, args=(process.stdout, OutputStream.INFORMATIONAL, lines), daemon=True),
        threading.Thread(target=_pump, args=(process.stderr, OutputStream.ERROR, lines), daemon=True),
    ]
    for reader in readers:
        reader.start()

    collected: dict[OutputStream, list[str]] = {OutputStream.INFORMATIONAL: [], OutputStream.ERROR: []}
    open_pipes = len(readers)
    while open_pipes:
        stream, raw = lines.get()
        if raw is None:
            open_pipes -= 1
            continue
        text = _decode(raw)
        collected[stream].append(text)
        if on_line is not None:
            on_line(stream, text)

    for reader in readers:
        reader.join()
    returncode = process.wait()

    return ExecResult(
        argv=tuple(argv),
        cwd=cwd.resolve(),
        returncode=returncode,
        stdout="\n".join(collected[OutputStream.INFORMATIONAL]),
        stderr="\n".join(collected[OutputStream.ERROR]),
    )
