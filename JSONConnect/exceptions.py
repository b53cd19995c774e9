from typing import Dict, Optional

# Exceptions
class APIError(Exception):
    """Base exception for API-related errors."""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 headers: Optional[Dict[str, str]] = None, body: Optional[str] = None,
                 request_id: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        self.request_id = request_id or self._header('x-request-id')
        self.retry_after = self._parse_retry_after()

    def _header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None

    def _parse_retry_after(self) -> Optional[float]:
        """Parse Retry-After header."""
        retry_after = self._header('retry-after')
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return None
        return None

class HTTPStatusError(APIError):
    """Raised when the server answers with a non-success status."""
    pass

class TimeoutError(APIError):
    """Raised when request times out."""
    pass

class ConnectionError(APIError):
    """Raised when connection fails."""
    pass

class ResponseDecodeError(APIError):
    """Raised when a successful response does not carry valid JSON."""
    pass

class PayloadError(ValueError):
    """Raised when a request payload cannot be serialized as JSON."""
    pass
