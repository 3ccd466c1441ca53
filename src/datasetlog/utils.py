"""
Stateless helpers: URL building, attribute flattening and header conversion.
"""

import json
import re
from datetime import date, datetime
from typing import Any, Dict, Mapping, NamedTuple, Optional
from urllib.parse import urljoin, urlsplit

_UPPERCASE_RE = re.compile(r"[A-Z]")


class UrlResult(NamedTuple):
    """Outcome of :func:`create_url`: either ``url`` or ``error`` is set."""

    url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def create_url(server_url: str, endpoint: str = "") -> UrlResult:
    """
    Resolve ``endpoint`` against ``server_url``.

    An absolute endpoint path replaces any path already on the server URL.
    Bad input is reported through the result instead of an exception.

    Args:
        server_url: Base URL, e.g. ``https://api.scalyr.com``
        endpoint: Path to resolve, e.g. ``/api/addEvents``

    Returns:
        UrlResult with either the resolved URL or a description of the error
    """
    if not isinstance(server_url, str) or not server_url.strip():
        return UrlResult(error="Invalid URL: empty server URL")

    try:
        base = urlsplit(server_url.strip())
        # Accessing port validates it
        base.port
    except ValueError as exc:
        return UrlResult(error=f"Invalid URL: {exc}")

    if base.scheme not in ("http", "https"):
        return UrlResult(error=f"Invalid URL: unsupported scheme in {server_url!r}")
    if not base.hostname:
        return UrlResult(error=f"Invalid URL: missing host in {server_url!r}")

    return UrlResult(url=urljoin(server_url.strip(), endpoint))


def flatten_nested_object(obj: Optional[Mapping[str, Any]], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten nested mappings and sequences into a single-level dict.

    Nested keys are joined with ``.`` and list indices are used as keys:
    ``{"a": {"b": 1, "c": [2, 3]}}`` becomes
    ``{"a.b": 1, "a.c.0": 2, "a.c.1": 3}``.
    """
    flat: Dict[str, Any] = {}
    if not obj:
        return flat

    for key, value in obj.items():
        if isinstance(value, Mapping):
            flat.update(flatten_nested_object(value, f"{prefix}{key}."))
        elif isinstance(value, (list, tuple)):
            flat.update(
                flatten_nested_object(
                    {str(i): item for i, item in enumerate(value)},
                    f"{prefix}{key}.",
                )
            )
        else:
            flat[f"{prefix}{key}"] = value
    return flat


def camel_to_kebab_case(value: str) -> str:
    """Convert ``serverHost`` to ``server-host``."""
    return _UPPERCASE_RE.sub(lambda m: f"-{m.group(0).lower()}", value)


def convert_session_info_to_headers(
    session_info: Optional[Mapping[str, Any]],
) -> Dict[str, str]:
    """
    Turn session info into ``server-*`` HTTP headers for uploadLogs.

    Keys are converted to kebab-case and prefixed with ``server-`` unless
    they already carry it. Datetimes become millisecond epoch values.
    """
    if not session_info:
        return {}

    headers = {}
    for key, value in session_info.items():
        header = camel_to_kebab_case(key)
        if isinstance(value, datetime):
            value = round(value.timestamp() * 1000)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        if not header.startswith("server-"):
            header = f"server-{header}"
        headers[header] = str(value)
    return headers


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def dumps(payload: Any) -> str:
    """Serialize a request payload, stringifying values JSON can't encode."""
    return json.dumps(payload, ensure_ascii=False, default=_json_default)
