from typing import Any, List, Optional


class ExecutionError(Exception):
    """Base class for everything that can go wrong while running a statement."""

    kind = "execution"


class ConfigError(ExecutionError):
    """Missing/placeholder credentials or a missing confirmation. Raised before any I/O."""

    kind = "config"


class TransportError(ExecutionError):
    kind = "transport"

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class RemoteError(ExecutionError):
    """The endpoint answered 2xx but reported success == false."""

    kind = "remote"

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class SubprocessError(ExecutionError):
    kind = "subprocess"

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class DatabaseError(ExecutionError):
    kind = "database"


class MigrationError(ExecutionError):
    """First migration statement that failed for a reason other than 'already exists'."""

    kind = "migration"

    def __init__(self, message: str, index: int, statement: str, cause: ExecutionError):
        super().__init__(message)
        self.index = index
        self.statement = statement
        self.cause = cause
