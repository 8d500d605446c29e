"""Custom exception types for better error handling and categorization.

The topology builder never raises; these cover the adapters around it
(loading thread files, looking up a single thread).
"""

from typing import Optional


class ThreadStackError(Exception):
    """Base exception for all thread-stack errors."""

    def __init__(  # noqa: B042
        self,
        message: str,
        *,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize error with message and optional correlation id."""
        super().__init__(message)
        self.correlation_id = correlation_id


class ThreadDataError(ThreadStackError):
    """Thread input could not be loaded.

    Raised when:
    - File is missing or unreadable
    - File is not valid JSON
    - Pydantic validation of a thread/metadata record failed
    """

    def __init__(  # noqa: B042
        self,
        message: str,
        path: Optional[str] = None,
        validation_errors: Optional[list] = None,
        *,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize thread data error.

        Args:
            message: Error message
            path: File that failed to load
            validation_errors: List of validation errors from Pydantic
            correlation_id: Optional correlation ID for tracing
        """
        super().__init__(message, correlation_id=correlation_id)
        self.path = path
        self.validation_errors = validation_errors or []


class ThreadNotFoundError(ThreadStackError):
    """Requested thread ID is not part of the current thread list."""

    def __init__(  # noqa: B042
        self,
        message: str,
        thread_id: str,
        *,
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, correlation_id=correlation_id)
        self.thread_id = thread_id
