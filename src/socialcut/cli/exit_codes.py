"""Exit codes for socialcut CLI commands."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit status of a CLI command."""

    SUCCESS = 0

    # Any SocialcutError
    GENERAL_ERROR = 1

    # Ctrl+C / SIGINT
    INTERRUPTED = 2
