from __future__ import annotations


class StructAgentError(Exception):
    """Base class for every error raised by structagent."""


class ConfigurationError(StructAgentError):
    """Raised before any I/O when an agent or the environment is misconfigured."""


class ParseError(StructAgentError):
    """The model answered with something that is not the JSON we asked for."""

    def __init__(self, message: str, content: str | None = None):
        super().__init__(message)
        self.content = content


class ExecutionError(StructAgentError):
    """A local command terminated with a nonzero exit status."""

    def __init__(self, command: str, returncode: int, stdout: str = "", stderr: str = ""):
        detail = stderr.strip() or stdout.strip()
        message = f"command failed with exit status {returncode}: {command}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
