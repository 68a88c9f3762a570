"""Documented exit codes for the snrwatch CLI.

Exit codes follow UNIX conventions:
- 0: Success
- 1: General/unspecified error
- 2: Invalid command-line arguments or usage
- 3-4: Application-specific errors

Usage:
    from snrwatch.util.exit_codes import ExitCode
    sys.exit(ExitCode.RECORD_ERROR)
"""

from __future__ import annotations


class ExitCode:
    """Exit code constants for snrwatch runs.

    Attributes:
        SUCCESS: Normal termination, report printed.
        GENERAL_ERROR: Unspecified runtime error.
        INVALID_ARGS: Command-line argument validation failed.
        RECORD_ERROR: An input record or its timestamp could not be parsed.
        INPUT_ERROR: An input file could not be opened or decompressed.
    """

    SUCCESS: int = 0
    GENERAL_ERROR: int = 1
    INVALID_ARGS: int = 2
    RECORD_ERROR: int = 3
    INPUT_ERROR: int = 4

    @classmethod
    def message(cls, code: int) -> str:
        """Return a human-readable message for an exit code."""
        messages = {
            cls.SUCCESS: "Success",
            cls.GENERAL_ERROR: "General error",
            cls.INVALID_ARGS: "Invalid arguments",
            cls.RECORD_ERROR: "Malformed input record",
            cls.INPUT_ERROR: "Input unavailable",
        }
        return messages.get(code, f"Unknown exit code {code}")
