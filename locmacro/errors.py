"""
Pipeline exceptions.

Every stage raises one of these; only the command line entry point catches
them and turns them into a message and an exit status.
"""

from typing import List, Optional, Sequence


class LocMacroError(Exception):
    """Base exception for the pipeline."""

    exit_code = 1


class ConfigError(LocMacroError):
    """Raised when project metadata or a required input is missing."""


class StagingError(LocMacroError, OSError):
    """Raised when the scratch directory cannot be created or filled."""


class SubprocessError(LocMacroError):
    """Raised when an external tool fails."""

    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        """
        Initialize subprocess error.

        Args:
            message: Error message naming the failing step or file
            argv: Command that was run
            returncode: Exit status of the command, None if it never started
            output: Diagnostic output of the command, kept verbatim
        """
        super().__init__(message)
        self.argv: List[str] = list(argv or [])
        self.returncode = returncode
        self.output = output


class PreprocessError(SubprocessError):
    """Raised when the C preprocessor fails on a staged file."""

    exit_code = 2


class ExtractionError(SubprocessError):
    """Raised when genstrings fails."""

    exit_code = 3
