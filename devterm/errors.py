"""Exceptions raised inside command handlers.

None of these escape a command: the command table turns them into error
lines at the dispatch boundary.

Exception Hierarchy:
    ShellError (base)
    ├── NotFoundError - path, file or command absent
    ├── InvalidArgumentError - missing or malformed arguments
    ├── TypeMismatchError - folder where a file is expected, or vice versa
    └── SecurityRejectionError - input refused before evaluation
"""


class ShellError(Exception):
    """Base class; ``str(exc)`` is the line shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ShellError):
    pass


class InvalidArgumentError(ShellError):
    pass


class TypeMismatchError(ShellError):
    pass


class SecurityRejectionError(ShellError):
    pass
