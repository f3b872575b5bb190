"""Compile task wrapper around the black-box compiler."""

from compilerguard.task.compile import CompileTask, TaskOutcome
from compilerguard.task.exec import ExecResult, run_compiler
from compilerguard.task.output import OutputLine, TaskOutput

__all__ = [
    "CompileTask",
    "ExecResult",
    "OutputLine",
    "TaskOutcome",
    "TaskOutput",
    "run_compiler",
]
