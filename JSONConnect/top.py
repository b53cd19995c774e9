"""
JSON-over-HTTP API clients.
SyncAPIClient sits on requests, AsyncAPIClient on aiohttp; both speak the same two calls, `get` and
`post`, and both hand back the parsed JSON body or raise HTTPStatusError.
"""

from typing import Any, Dict, List, Optional

import aiohttp
import requests
from requests.structures import CaseInsensitiveDict

from .base import SyncHTTPClient, AsyncHTTPClient
from .middlewares import (AuthenticationMiddleware, UserAgentMiddleware, LoggingMiddleware,
                          DefaultHeadersMiddleware, BaseMiddleware)
from .models import HTTPResponse, NO_BODY
from .utils import validate_payload, join_url

user_agent: str = "JSONConnect/0.1.0"
DEFAULT_HEADERS = {'Accept': 'application/json'}


# Core API Logic
class APIExecutor:
    """
    Client settings and JSON handling shared between sync and async clients.
    Knows how to turn a path into a URL and a response into data; never touches the network.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0,
                 headers: Optional[Dict[str, str]] = None):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.base_url = base_url.rstrip('/') if base_url else None
        self.timeout = timeout
        self.headers = CaseInsensitiveDict(headers or {})

    def build_url(self, url: str) -> str:
        return join_url(self.base_url, url)

    def build_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        request_headers = CaseInsensitiveDict(self.headers)
        if headers:
            request_headers.update(headers)
        return request_headers

    def resolve_timeout(self, timeout: Optional[float]) -> float:
        return self.timeout if timeout is None else timeout


def default_middleware(api_key: Optional[str] = None, agent: Optional[str] = None) -> List[BaseMiddleware]:
    middleware = [DefaultHeadersMiddleware(DEFAULT_HEADERS), UserAgentMiddleware(agent or user_agent)]
    if api_key:
        middleware.append(AuthenticationMiddleware(api_key))
    middleware.append(LoggingMiddleware())
    return middleware

def _reject_transport_options(api_key, agent, middleware, session):
    given = [name for name, value in (('api_key', api_key), ('user_agent', agent),
                                      ('middleware', middleware), ('session', session))
             if value is not None]
    if given:
        raise ValueError(f"{', '.join(given)} cannot be combined with http_client; "
                         "configure the injected client instead")


# Synchronous API Client
class SyncAPIClient:
    """Synchronous JSON API client."""

    def __init__(self, base_url: Optional[str] = None,
                 timeout: float = 30.0,
                 headers: Optional[Dict[str, str]] = None,
                 api_key: Optional[str] = None,
                 user_agent: Optional[str] = None,
                 http_client: Optional[SyncHTTPClient] = None,
                 middleware: Optional[List[BaseMiddleware]] = None,
                 session: Optional[requests.Session] = None):

        self._executor = APIExecutor(base_url, timeout, headers)

        # Use provided client or create a new one; it already carries its own session and middleware
        if http_client:
            _reject_transport_options(api_key, user_agent, middleware, session)
            self._http_client = http_client
            self._owns_client = False
        else:
            if middleware is None:
                middleware = default_middleware(api_key, user_agent)
            self._http_client = SyncHTTPClient(session, middleware)
            self._owns_client = True

    @property
    def base_url(self) -> Optional[str]:
        return self._executor.base_url

    @property
    def timeout(self) -> float:
        return self._executor.timeout

    def request(self, method: str, url: str, json: Any = NO_BODY,
                params: Optional[Dict[str, str]] = None,
                headers: Optional[Dict[str, str]] = None,
                timeout: Optional[float] = None) -> HTTPResponse:
        """Send a request and return the raw HTTPResponse."""
        return self._http_client.request(
            method, self._executor.build_url(url),
            headers=self._executor.build_headers(headers),
            json=json, params=params,
            timeout=self._executor.resolve_timeout(timeout)
        )

    def get(self, url: str, params: Optional[Dict[str, str]] = None,
            headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """GET `url` and return the parsed JSON body."""
        response = self.request('GET', url, params=params, headers=headers, timeout=timeout)
        return self._http_client.decode_json(response)

    def post(self, url: str, payload: Any = None, params: Optional[Dict[str, str]] = None,
             headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """POST `payload` as JSON to `url` and return the parsed JSON body."""
        validate_payload(payload)
        response = self.request('POST', url, json=payload, params=params, headers=headers,
                                timeout=timeout)
        return self._http_client.decode_json(response)

    def close(self):
        """Close the client and cleanup resources."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

# Asynchronous API Client
class AsyncAPIClient:
    """Asynchronous JSON API client."""

    def __init__(self, base_url: Optional[str] = None,
                 timeout: float = 30.0,
                 headers: Optional[Dict[str, str]] = None,
                 api_key: Optional[str] = None,
                 user_agent: Optional[str] = None,
                 http_client: Optional[AsyncHTTPClient] = None,
                 middleware: Optional[List[BaseMiddleware]] = None,
                 session: Optional[aiohttp.ClientSession] = None):

        self._executor = APIExecutor(base_url, timeout, headers)

        # Use provided client or create a new one; it already carries its own session and middleware
        if http_client:
            _reject_transport_options(api_key, user_agent, middleware, session)
            self._http_client = http_client
            self._owns_client = False
        else:
            if middleware is None:
                middleware = default_middleware(api_key, user_agent)
            self._http_client = AsyncHTTPClient(session, middleware)
            self._owns_client = True

    @property
    def base_url(self) -> Optional[str]:
        return self._executor.base_url

    @property
    def timeout(self) -> float:
        return self._executor.timeout

    async def request(self, method: str, url: str, json: Any = NO_BODY,
                      params: Optional[Dict[str, str]] = None,
                      headers: Optional[Dict[str, str]] = None,
                      timeout: Optional[float] = None) -> HTTPResponse:
        """Send a request and return the raw HTTPResponse."""
        return await self._http_client.request(
            method, self._executor.build_url(url),
            headers=self._executor.build_headers(headers),
            json=json, params=params,
            timeout=self._executor.resolve_timeout(timeout)
        )

    async def get(self, url: str, params: Optional[Dict[str, str]] = None,
                  headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """GET `url` and return the parsed JSON body."""
        response = await self.request('GET', url, params=params, headers=headers, timeout=timeout)
        return self._http_client.decode_json(response)

    async def post(self, url: str, payload: Any = None, params: Optional[Dict[str, str]] = None,
                   headers: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Any:
        """POST `payload` as JSON to `url` and return the parsed JSON body."""
        validate_payload(payload)
        response = await self.request('POST', url, json=payload, params=params, headers=headers,
                                      timeout=timeout)
        return self._http_client.decode_json(response)

    async def close(self):
        """Close the client and cleanup resources."""
        if self._owns_client:
            await self._http_client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


# One-shot helpers, in the spirit of requests.get(url).json()
def get_json(url: str, params: Optional[Dict[str, str]] = None, **kwargs) -> Any:
    """GET `url` with a throwaway client and return the parsed JSON body."""
    with SyncAPIClient(**kwargs) as client:
        return client.get(url, params=params)

def post_json(url: str, payload: Any = None, **kwargs) -> Any:
    """POST `payload` to `url` with a throwaway client and return the parsed JSON body."""
    with SyncAPIClient(**kwargs) as client:
        return client.post(url, payload)

async def async_get_json(url: str, params: Optional[Dict[str, str]] = None, **kwargs) -> Any:
    async with AsyncAPIClient(**kwargs) as client:
        return await client.get(url, params=params)

async def async_post_json(url: str, payload: Any = None, **kwargs) -> Any:
    async with AsyncAPIClient(**kwargs) as client:
        return await client.post(url, payload)
