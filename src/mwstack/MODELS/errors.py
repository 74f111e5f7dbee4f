"""
Error taxonomy for stack lifecycle operations.

Every error carries the process exit code the CLI should use when it
reaches the top level.
"""
from typing import List, Optional, Sequence


class StackError(Exception):
    """
    Base class for all fatal lifecycle errors.
    """
    exit_code = 1


class MissingConfiguration(StackError):
    """
    The environment file is absent, or a required key is unset or invalid.
    """
    def __init__(self, message: str, missing_keys: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_keys = missing_keys or []


class AbortedByUser(StackError):
    """
    The operator declined a destructive confirmation.
    """


class ReadinessTimeout(StackError):
    """
    A dependency did not become ready within its retry budget.
    """
    def __init__(self, service: str, attempts: int, hint: str = ""):
        message = f"{service} did not become ready after {attempts} attempts."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.service = service
        self.attempts = attempts


class PlatformRequestFailure(StackError):
    """
    The container platform rejected a build/start/stop request.
    """
    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        message = f"Command failed with exit code {returncode}: {' '.join(command)}"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.output = output


class LayoutError(StackError):
    """
    The on-disk project layout is missing or only partially present.
    """


class ManifestError(StackError):
    """
    The stack manifest is unreadable or violates its invariants.
    """
