"""
Exceptions raised by datasetlog.
"""

from typing import Any, Dict, Optional


class DataSetError(Exception):
    """Base class for all datasetlog errors."""


class ConfigurationError(DataSetError, ValueError):
    """Invalid constructor arguments (missing API key, bad server URL...)."""


class LoggerClosedError(DataSetError, RuntimeError):
    """Raised when closing a logger that is already closed."""


class RequestError(DataSetError):
    """
    Terminal failure of an API request.

    Passed to the error handler once a batch can no longer be delivered,
    either because the server rejected its parameters or because the
    retry limit was exhausted.
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        status: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.attempts = attempts
        self.status = status
        self.status_code = status_code
        self.body = body
