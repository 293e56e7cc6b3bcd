"""Exception hierarchy for the bot-platform SDK.

Transport-level failures are not wrapped: they surface as
:class:`requests.RequestException` straight from the HTTP layer.
"""

from typing import Any, Dict, Optional


class APIException(Exception):
    """Structured error returned by the Telegram Bot API.

    Raised for non-2xx responses and for 2xx bodies carrying ``"ok": false``.

    Attributes:
        status_code: HTTP status code returned by the API.
        response_body: Raw response body as a dict, when available.
        error_code: Numeric API error code (falls back to *status_code*).
        description: Human-readable error text from the API.
        retry_after: Seconds to wait before retrying, when the API says so.
    """

    def __init__(self, status_code: int, response_body: Optional[Dict[str, Any]] = None) -> None:
        """Initialise with the HTTP status code and optional body."""
        self.status_code = status_code
        self.response_body = response_body or {}
        self.error_code: int = self.response_body.get("error_code", status_code)
        self.description: str = self.response_body.get("description", "Unknown error")
        parameters = self.response_body.get("parameters") or {}
        self.retry_after: Optional[int] = parameters.get("retry_after")
        super().__init__(f"API error {self.error_code}: {self.description}")
