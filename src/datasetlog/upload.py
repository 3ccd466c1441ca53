"""
Plain-text log upload through the uploadLogs API.
"""

import os
from pathlib import Path
from typing import Any, Mapping, NamedTuple, Optional, Union

import requests

from .constants import DEFAULT_DATASET_URL, ENDPOINT_UPLOAD_LOGS
from .errors import ConfigurationError
from .sender import LogSender
from .utils import convert_session_info_to_headers, create_url


class UploadResult(NamedTuple):
    status: Optional[str]
    message: Optional[str]
    status_code: Optional[int]
    reason: Optional[str]


def upload_logs(
    api_key: str,
    body: Optional[str] = None,
    file_path: Optional[Union[str, "os.PathLike[str]"]] = None,
    logfile: Optional[str] = None,
    parser: Optional[str] = None,
    server_url: Optional[str] = None,
    session_info: Optional[Mapping[str, Any]] = None,
    session: Optional[requests.Session] = None,
) -> Optional[UploadResult]:
    """
    Upload unstructured, plain-text logs in a single request.

    Meant for lightweight integrations and stateless environments; there
    is no batching. ``body`` takes precedence over ``file_path``. File
    contents are streamed from disk.

    Args:
        api_key: DataSet API key with log write access
        body: Log text to upload
        file_path: File whose contents are uploaded when no body is given
        logfile: Value of the ``logfile`` header
        parser: Parser DataSet should apply to the logs
        server_url: DataSet server, defaults to https://api.scalyr.com
        session_info: Converted to ``server-*`` headers
        session: Custom requests.Session to use

    Returns:
        UploadResult, or None when there was nothing to upload

    Raises:
        ConfigurationError: Missing API key or unusable server URL
        FileNotFoundError: ``file_path`` does not exist
    """
    if not api_key:
        raise ConfigurationError("api_key is required")

    url = create_url(server_url or DEFAULT_DATASET_URL, ENDPOINT_UPLOAD_LOGS)
    if not url.ok:
        raise ConfigurationError(f"Could not build the URL. {url.error}")

    if body:
        data: Union[str, Path] = body
    elif file_path is not None:
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File {file_path} does not exist")
        data = path
    else:
        return None

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "text/plain",
        **convert_session_info_to_headers(session_info),
    }
    if logfile:
        headers["logfile"] = logfile
    if parser:
        headers["parser"] = parser

    sender = LogSender(url=url.url, headers=headers, session=session)
    try:
        result = sender.send(data)
    finally:
        sender.close()

    return UploadResult(
        status=result.status,
        message=result.message,
        status_code=result.status_code,
        reason=result.reason,
    )
