"""Error handling utilities."""

import asyncio
import functools
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error("%s: %s", context, str(error))
    else:
        logger.error(str(error))


class PlaylistCleanerError(Exception):
    """Base class for playlist cleaner errors."""

    pass


class InvalidArgumentError(PlaylistCleanerError, ValueError):
    """Error raised when a playlist or track argument is missing or empty."""

    pass


class AuthenticationRequiredError(PlaylistCleanerError):
    """Error raised when the Spotify session is not authenticated."""

    pass


class OperationCancelledError(PlaylistCleanerError):
    """Error raised when cancellation is observed at a checkpoint."""

    pass


class ExternalServiceError(PlaylistCleanerError):
    """Error returned by the Spotify Web API or its transport."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        retryable: bool = False,
    ):
        """Initialize error.

        Args:
            message: Human readable description
            status: HTTP status code, if the service answered
            reason: Service specific error reason, if any
            retryable: Whether the same request may succeed later
        """
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.retryable = retryable


class PlaylistNotFoundError(ExternalServiceError):
    """Error raised when a playlist is not found."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, status=404, reason=reason)


class RateLimitError(ExternalServiceError):
    """Error raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = None):
        """Initialize error.

        Args:
            retry_after: Number of seconds to wait before retrying
        """
        self.retry_after = retry_after
        if retry_after:
            message = f"Rate limit exceeded. Retry after {retry_after} seconds"
        else:
            message = "Rate limit exceeded"
        super().__init__(message, status=429, retryable=True)


def check_cancelled(cancel: Optional[asyncio.Event]) -> None:
    """Raise if cancellation has been requested.

    Args:
        cancel: Optional event set by the caller to request cancellation

    Raises:
        OperationCancelledError: If the event is set
    """
    if cancel is not None and cancel.is_set():
        raise OperationCancelledError("Operation was cancelled")


def with_retry(
    max_retries: int = 3,
    initial_delay: float = 2.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    retryable_exceptions: Optional[tuple] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator to retry a coroutine function on failure.

    Args:
        max_retries: Maximum number of retries
        initial_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        backoff_factor: Factor to multiply delay by after each retry
        retryable_exceptions: Tuple of exceptions to retry on

    Returns:
        Decorated coroutine function
    """
    if retryable_exceptions is None:
        retryable_exceptions = (RateLimitError,)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            delay = initial_delay

            for attempt in range(max_retries + 1):  # +1 for initial attempt
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.error(
                            "Error in %s: %s. Max retries (%d) exceeded.",
                            func.__name__,
                            str(e),
                            max_retries,
                        )
                        raise
                    wait = getattr(e, "retry_after", None) or delay
                    wait = min(wait, max_delay)
                    logger.warning(
                        "Error in %s: %s. Retrying in %s seconds... (attempt %d/%d)",
                        func.__name__,
                        str(e),
                        wait,
                        attempt + 1,
                        max_retries,
                    )
                    await asyncio.sleep(wait)
                    delay = min(delay * backoff_factor, max_delay)

        return wrapper

    return decorator
