# blame_errors.py
from enum import Enum

class ErrorLevel(Enum):
    RECOVERABLE = 1
    FATAL = 2

# For methods that return (success, error_message, severity)
OperationResult = tuple[bool, str | None, ErrorLevel | None]


class CallSiteError(RuntimeError):
    """Raised when the caller frame of an intercepted call cannot be resolved."""

    def __init__(self, method_name: str, frame_count: int):
        self.method_name = method_name
        self.frame_count = frame_count
        super().__init__(
            f"Cannot resolve caller of '{method_name}': "
            f"trace service returned {frame_count} frame(s), expected at least 2"
        )
