"""Amazon Q worker orchestration.

Usage:
    from qmims.worker import WorkerOptions, WorkerSession

    session = WorkerSession(WorkerOptions(cwd=project_dir))
    session.start()
    session.send_message(prompt)
    session.stop()  # blocks until `q chat` exits
"""

from qmims.worker.availability import check_q_cli, get_install_instructions
from qmims.worker.session import (
    NoPromptError,
    SessionState,
    SessionStateError,
    WorkerError,
    WorkerEvents,
    WorkerFailedError,
    WorkerOptions,
    WorkerSession,
    WorkerTerminatedError,
)

__all__ = [
    "check_q_cli",
    "get_install_instructions",
    "NoPromptError",
    "SessionState",
    "SessionStateError",
    "WorkerError",
    "WorkerEvents",
    "WorkerFailedError",
    "WorkerOptions",
    "WorkerSession",
    "WorkerTerminatedError",
]
