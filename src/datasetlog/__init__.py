"""
Python client that batches log events and ships them to DataSet over HTTP.
"""

from .constants import DEFAULT_DATASET_URL
from .errors import (
    ConfigurationError,
    DataSetError,
    LoggerClosedError,
    RequestError,
)
from .events import Event, Severity
from .handler import DataSetHandler
from .logger import DataSetLogger, FlushResult
from .upload import UploadResult, upload_logs

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_DATASET_URL",
    "ConfigurationError",
    "DataSetError",
    "DataSetHandler",
    "DataSetLogger",
    "Event",
    "FlushResult",
    "LoggerClosedError",
    "RequestError",
    "Severity",
    "UploadResult",
    "upload_logs",
]
