import logging
# Configure logging
logger = logging.getLogger(__name__)

from typing import Dict, Optional

from .models import HTTPRequest, HTTPResponse

# Middleware System
class BaseMiddleware:
    """Base class for HTTP middleware.

    Hooks are plain methods so the same middleware serves both the sync and the async client.
    """

    def process_request(self, request: HTTPRequest) -> HTTPRequest:
        """Process the request before it's sent."""
        return request

    def process_response(self, response: HTTPResponse) -> HTTPResponse:
        """Process the response after it's received."""
        return response

    def process_error(self, error: Exception, request: HTTPRequest) -> Exception:
        """Process an error that occurred during the request."""
        return error

class LoggingMiddleware(BaseMiddleware):
    """Middleware for logging requests and responses."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def process_request(self, request: HTTPRequest) -> HTTPRequest:
        self.logger.debug(f"Request: {request.method} {request.url}")
        return request

    def process_response(self, response: HTTPResponse) -> HTTPResponse:
        self.logger.debug(f"Response: {response.status_code} ({response.elapsed:.3f}s)")
        return response

    def process_error(self, error: Exception, request: HTTPRequest) -> Exception:
        self.logger.error(f"Request failed: {request.method} {request.url} - {error}")
        return error

class AuthenticationMiddleware(BaseMiddleware):
    """Middleware for adding authentication headers."""

    def __init__(self, token: str, auth_type: str = "Bearer"):
        self.token = token
        self.auth_type = auth_type

    def process_request(self, request: HTTPRequest) -> HTTPRequest:
        if 'Authorization' not in request.headers:
            request.headers['Authorization'] = f"{self.auth_type} {self.token}"
        return request

class UserAgentMiddleware(BaseMiddleware):
    """Middleware for adding User-Agent header."""

    def __init__(self, user_agent: str):
        self.user_agent = user_agent

    def process_request(self, request: HTTPRequest) -> HTTPRequest:
        if 'User-Agent' not in request.headers:
            request.headers['User-Agent'] = self.user_agent
        return request

class DefaultHeadersMiddleware(BaseMiddleware):
    """Middleware for adding headers the caller did not set explicitly."""

    def __init__(self, headers: Dict[str, str]):
        self.headers = dict(headers)

    def process_request(self, request: HTTPRequest) -> HTTPRequest:
        for name, value in self.headers.items():
            request.headers.setdefault(name, value)
        return request
