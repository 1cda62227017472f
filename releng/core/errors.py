"""Error codes for CLI exit status.

Every command is single-shot and exit-code driven: CI scripts only look at
the process status, so the numeric values below must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success, including benign early exits (HEAD already tagged)
    - 1: User error (bad arguments, unknown language)
    - 2: Configuration error (bad base version, missing credentials or tools)
    - 3: Git error (revision not found, failed tag/push, broken history walk)
    - 4: External command error (gh, go)
    - 5: I/O error (changelog or go.mod unreadable)
    """

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    GIT_ERROR = 3
    EXTERNAL_ERROR = 4
    IO_ERROR = 5
