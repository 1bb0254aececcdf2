"""Lifecycle of a single Amazon Q worker invocation.

A ``WorkerSession`` is created per command invocation and discarded afterwards.
Its states::

    idle --start()--> starting --stop()--> executing --> completed | failed
                          |                    |
                          +---terminate()------+--> terminated

``send_message()`` only stores the prompt; the worker is spawned by ``stop()``,
which blocks until ``q chat`` exits. The worker inherits the terminal, so its
output and any questions it asks go straight to the user.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from transitions import Machine

from qmims.core.constants import Q_CHAT_ARGS, Q_EXECUTABLE

logger = logging.getLogger(__name__)


class WorkerError(Exception):
    """Base exception for worker session errors."""


class NoPromptError(WorkerError):
    """Raised when ``stop()`` is called before any prompt was provided."""

    def __init__(self) -> None:
        super().__init__("No prompt provided for Amazon Q")


class WorkerFailedError(WorkerError):
    """Raised when the worker exits non-zero or cannot be spawned."""

    def __init__(self, exit_code: int) -> None:
        self.exit_code = exit_code
        super().__init__(f"Amazon Q process exited with code {exit_code}")


class WorkerTerminatedError(WorkerError):
    """Raised by ``stop()`` when ``terminate()`` ended the worker."""

    def __init__(self) -> None:
        super().__init__("Amazon Q process was terminated")


class SessionStateError(WorkerError):
    """Raised when an operation is not valid in the session's current state."""


class SessionState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    TERMINATED = "terminated"


TERMINAL_STATES = frozenset({SessionState.COMPLETED, SessionState.FAILED, SessionState.TERMINATED})

_TRANSITIONS = [
    {"trigger": "begin", "source": SessionState.IDLE, "dest": SessionState.STARTING},
    {
        "trigger": "execute",
        "source": [SessionState.IDLE, SessionState.STARTING],
        "dest": SessionState.EXECUTING,
    },
    {"trigger": "complete", "source": SessionState.EXECUTING, "dest": SessionState.COMPLETED},
    {"trigger": "fail", "source": SessionState.EXECUTING, "dest": SessionState.FAILED},
    {
        "trigger": "cancel",
        "source": [SessionState.STARTING, SessionState.EXECUTING],
        "dest": SessionState.TERMINATED,
    },
]


class _SessionModel:
    """Model object the state machine attaches ``state`` and triggers to."""

    def __init__(self) -> None:
        self.state: SessionState = SessionState.IDLE


@dataclass(frozen=True)
class WorkerOptions:
    """Settings fixed for the lifetime of a session.

    Attributes:
        cwd: Project directory the worker runs in.
        verbose: Emit debug details about the invocation.
        auto_approve: Whether the user pre-approved edits for this run.
        executable: Amazon Q CLI executable name or path.
    """

    cwd: Path
    verbose: bool = False
    auto_approve: bool = False
    executable: str = Q_EXECUTABLE


@dataclass
class WorkerEvents:
    """Optional callbacks fired by a session."""

    on_output: Callable[[str], None] | None = None
    on_error: Callable[[Exception], None] | None = None
    on_exit: Callable[[int], None] | None = None


class WorkerSession:
    """Drive one ``q chat`` invocation from start signal to exit."""

    def __init__(
        self,
        options: WorkerOptions,
        events: WorkerEvents | None = None,
        console: Console | None = None,
    ) -> None:
        self.options = options
        self.events = events or WorkerEvents()
        self.console = console or Console()
        self._prompt: str | None = None
        self._process: subprocess.Popen | None = None
        self._spinner: Progress | None = None
        self._model = _SessionModel()
        self._machine = Machine(
            model=self._model,
            states=SessionState,
            transitions=_TRANSITIONS,
            initial=SessionState.IDLE,
            auto_transitions=False,
        )

    @property
    def state(self) -> SessionState:
        return self._model.state

    @property
    def prompt(self) -> str | None:
        return self._prompt

    def build_command(self) -> list[str]:
        """Return the argv used to run the worker with the pending prompt."""
        if self._prompt is None:
            raise NoPromptError()
        return [self.options.executable, *Q_CHAT_ARGS, self._prompt]

    def start(self) -> None:
        """Signal that work is beginning. Does not spawn the worker."""
        if self.state != SessionState.IDLE:
            raise SessionStateError(f"Cannot start a session in state '{self.state.value}'")
        self._model.begin()
        self._spinner = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        )
        self._spinner.add_task("Amazon Q is ready...", total=None)
        self._spinner.start()
        self._emit_output("Amazon Q is ready")

    def send_message(self, message: str) -> None:
        """Store the prompt for the next ``stop()``. The last call wins."""
        self._prompt = message

    def stop(self) -> None:
        """Run the worker with the stored prompt and block until it exits.

        Raises:
            NoPromptError: No prompt was stored; nothing is spawned.
            SessionStateError: The session already finished.
            WorkerFailedError: The worker could not be spawned or exited
                non-zero.
            WorkerTerminatedError: ``terminate()`` ended the worker.
        """
        if self._prompt is None:
            raise NoPromptError()
        if self.state in TERMINAL_STATES:
            raise SessionStateError(f"Cannot run a session in state '{self.state.value}'")

        self._stop_spinner()
        self._model.execute()

        command = self.build_command()
        logger.debug("Executing: %s", shlex.join(command[:-1] + ["<prompt>"]))
        logger.debug("Working directory: %s (auto-approve: %s)", self.options.cwd, self.options.auto_approve)

        self.console.print("\nAmazon Q is processing your request. Output:")
        self.console.rule()

        try:
            self._process = subprocess.Popen(command, cwd=str(self.options.cwd))
            exit_code = self._process.wait()
        except (OSError, subprocess.SubprocessError) as e:
            self._fail(e, 1)

        if self.state == SessionState.TERMINATED:
            raise WorkerTerminatedError()

        if exit_code != 0:
            self._fail(
                RuntimeError(f"Command failed with exit code {exit_code}: {self.options.executable} chat"),
                exit_code,
            )

        self.console.rule()
        self._model.complete()
        self.console.print("[green]Amazon Q command completed successfully.[/green]")
        if self.events.on_exit:
            self.events.on_exit(0)

    def terminate(self) -> None:
        """Kill the worker if running and stop the spinner.

        Safe to call at any time; does nothing on a fresh or finished session.
        """
        if self._process is not None and self._process.poll() is None:
            try:
                self._process.kill()
            except OSError as e:
                logger.debug("Could not kill Amazon Q process: %s", e)

        self._stop_spinner()

        if self._model.may_cancel():
            self._model.cancel()

    def _fail(self, error: Exception, exit_code: int) -> None:
        self._model.fail()
        message = str(error) or "Unknown error executing Amazon Q command"
        if self.events.on_error:
            self.events.on_error(RuntimeError(message))
        if self.events.on_exit:
            self.events.on_exit(exit_code)

        self.console.rule()
        self.console.print(f"[red]Error executing Amazon Q command:[/red] {escape(message)}", highlight=False)
        raise WorkerFailedError(exit_code) from error

    def _stop_spinner(self) -> None:
        if self._spinner is not None:
            self._spinner.stop()
            self._spinner = None

    def _emit_output(self, text: str) -> None:
        if self.events.on_output:
            self.events.on_output(text)


__all__ = [
    "WorkerError",
    "NoPromptError",
    "WorkerFailedError",
    "WorkerTerminatedError",
    "SessionStateError",
    "SessionState",
    "WorkerOptions",
    "WorkerEvents",
    "WorkerSession",
]
