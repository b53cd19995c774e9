import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from requests.structures import CaseInsensitiveDict

from .exceptions import ResponseDecodeError


class _NoBody:
    """Marker for a request without a body, so that a JSON `null` payload stays sendable."""
    def __repr__(self):
        return "NO_BODY"

NO_BODY = _NoBody()

# Request/Response Models
@dataclass
class HTTPRequest:
    """Represents an HTTP request with an optional JSON body."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = NO_BODY
    params: Dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0

    def __post_init__(self):
        self.method = self.method.upper()
        # header names are case-insensitive; later spellings win
        self.headers = CaseInsensitiveDict(self.headers)

    @property
    def parsed_url(self):
        return urlparse(self.url)

    @property
    def has_body(self) -> bool:
        return self.json is not NO_BODY

    def encode_body(self) -> Optional[bytes]:
        """The JSON body as UTF-8 bytes, or None when there is no body."""
        if not self.has_body:
            return None
        return json.dumps(self.json).encode('utf-8')

@dataclass
class HTTPResponse:
    """Represents an HTTP response."""
    status_code: int
    headers: Dict[str, str]
    body: bytes
    request: HTTPRequest
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        """Parse the body as JSON. An empty body parses to None."""
        if not self.body.strip():
            return None
        try:
            return json.loads(self.body.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ResponseDecodeError(
                f"Invalid JSON in response body: {e}",
                status_code=self.status_code,
                headers=self.headers,
                body=self.text
            )
