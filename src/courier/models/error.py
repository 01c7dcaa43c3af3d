"""Error models for handler failures raised during message dispatch."""

import traceback
from dataclasses import dataclass
from typing import Any, Optional

from courier.models.base import CamelCaseModel


class ErrorDetails(CamelCaseModel):
    """Additional structured error details."""

    exception_type: Optional[str] = None
    stack_trace: Optional[str] = None


class ErrorInfo(CamelCaseModel):
    """Structured error information."""

    type: str  # handler_error, payload_error, ...
    message: str
    details: Optional[ErrorDetails] = None

    @classmethod
    def from_exception(cls, exc: BaseException, error_type: str = "handler_error") -> "ErrorInfo":
        """Build an ErrorInfo from a caught exception, keeping its traceback."""
        return cls(
            type=error_type,
            message=str(exc),
            details=ErrorDetails(
                exception_type=type(exc).__name__,
                stack_trace="".join(
                    traceback.format_exception(type(exc), exc, exc.__traceback__)
                ),
            ),
        )


@dataclass
class HandlerResult:
    """Outcome of one handler invocation: either a response or an error."""

    response: Any = None
    error: Optional[ErrorInfo] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def succeeded(self) -> bool:
        """True when the handler returned a truthy response without raising."""
        return not self.failed and bool(self.response)
