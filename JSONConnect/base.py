import asyncio, time, logging
from typing import Any, Dict, List, Optional

import aiohttp
import requests

from .exceptions import APIError, HTTPStatusError, TimeoutError, ConnectionError, ResponseDecodeError
from .middlewares import BaseMiddleware
from .models import HTTPRequest, HTTPResponse, NO_BODY

logger = logging.getLogger(__name__)


# Core Request Execution Logic
class RequestExecutor:
    """
    Transport-independent request logic SHARED BETWEEN Sync and Async clients.
    The clients own the actual round trip (requests for sync, aiohttp for async) and hand the raw
    status, headers and body back here. Middleware, status checking and error translation live in
    one place, so a request fails the same way whichever client sent it.
    One request gives exactly one response: nothing here retries.
    """

    def __init__(self, middleware: Optional[List[BaseMiddleware]] = None):
        self.middleware = middleware or []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def prepare_request(self, request: HTTPRequest) -> HTTPRequest:
        """Run the request through middleware before it goes out."""
        if self._closed:
            raise RuntimeError("Client is closed")
        if request.has_body:
            request.headers.setdefault('Content-Type', 'application/json')
        for middleware in self.middleware:
            request = middleware.process_request(request)
        return request

    def build_response(self, request: HTTPRequest, status_code: int, headers: Dict[str, str],
                       body: bytes, elapsed: float) -> HTTPResponse:
        """Wrap raw response data, raising HTTPStatusError for anything outside 2xx."""
        response = HTTPResponse(
            status_code=status_code,
            headers=headers,
            body=body,
            request=request,
            elapsed=elapsed
        )

        if not response.ok:
            raise HTTPStatusError(
                f"HTTP error: {status_code} for {request.method} {request.url}",
                status_code=status_code,
                headers=headers,
                body=response.text
            )

        # Process response through middleware
        for middleware in reversed(self.middleware):
            response = middleware.process_response(response)
        return response

    def process_error(self, error: Exception, request: HTTPRequest) -> Exception:
        """Give every middleware a look at the error; the last one returned is raised."""
        for middleware in self.middleware:
            error = middleware.process_error(error, request)
        return error

    def decode_json(self, response: HTTPResponse) -> Any:
        """Parse the response body; a decode failure goes through middleware like any other error."""
        try:
            return response.json()
        except ResponseDecodeError as error:
            raise self.process_error(error, response.request)

    def close(self):
        self._closed = True

# Synchronous Client
class SyncHTTPClient:
    """Synchronous HTTP client backed by a requests.Session."""

    def __init__(self, session: Optional[requests.Session] = None,
                 middleware: Optional[List[BaseMiddleware]] = None):
        self._executor = RequestExecutor(middleware)
        self._owns_session = session is None
        self._session = session or requests.Session()

    def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                json: Any = NO_BODY, params: Optional[Dict[str, str]] = None,
                timeout: float = 30.0) -> HTTPResponse:
        """Make a synchronous HTTP request; blocks until the response arrives."""
        request = HTTPRequest(
            method=method,
            url=url,
            headers=dict(headers or {}),
            json=json,
            params=dict(params or {}),
            timeout=timeout
        )
        request = self._executor.prepare_request(request)

        try:
            return self._send(request)
        except Exception as error:
            raise self._executor.process_error(error, request)

    def _send(self, request: HTTPRequest) -> HTTPResponse:
        start_time = time.time()
        try:
            resp = self._session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                data=request.encode_body(),
                params=request.params or None,
                timeout=request.timeout
            )
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"Request timed out after {request.timeout} seconds: {e}") from e
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Connection failed: {e}") from e
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {e}") from e

        elapsed = time.time() - start_time
        return self._executor.build_response(
            request, resp.status_code, dict(resp.headers), resp.content, elapsed
        )

    def decode_json(self, response: HTTPResponse) -> Any:
        return self._executor.decode_json(response)

    def close(self):
        """Close the client and, if we created it, the session."""
        if self._executor.closed:
            return
        self._executor.close()
        if self._owns_session:
            logger.debug("Closing requests session")
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

# Asynchronous Client
class AsyncHTTPClient:
    """Asynchronous HTTP client backed by an aiohttp.ClientSession.

    The session is created lazily on first use, since aiohttp wants a running event loop.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None,
                 middleware: Optional[List[BaseMiddleware]] = None):
        self._executor = RequestExecutor(middleware)
        self._owns_session = session is None
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            logger.debug("Opening aiohttp session")
            self._session = aiohttp.ClientSession()
        return self._session

    async def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                      json: Any = NO_BODY, params: Optional[Dict[str, str]] = None,
                      timeout: float = 30.0) -> HTTPResponse:
        """Make an asynchronous HTTP request; the caller suspends until the response arrives."""
        request = HTTPRequest(
            method=method,
            url=url,
            headers=dict(headers or {}),
            json=json,
            params=dict(params or {}),
            timeout=timeout
        )
        request = self._executor.prepare_request(request)

        try:
            return await self._send(request)
        except Exception as error:
            raise self._executor.process_error(error, request)

    async def _send(self, request: HTTPRequest) -> HTTPResponse:
        session = self._get_session()
        start_time = time.time()
        try:
            async with session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                data=request.encode_body(),
                params=request.params or None,
                timeout=aiohttp.ClientTimeout(total=request.timeout)
            ) as resp:
                body = await resp.read()
                status_code = resp.status
                headers = dict(resp.headers)
        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Request timed out after {request.timeout} seconds") from e
        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(f"Connection failed: {e}") from e
        except aiohttp.ClientError as e:
            raise APIError(f"Request failed: {e}") from e

        elapsed = time.time() - start_time
        return self._executor.build_response(request, status_code, headers, body, elapsed)

    def decode_json(self, response: HTTPResponse) -> Any:
        return self._executor.decode_json(response)

    async def close(self):
        """Close the client and, if we created it, the session."""
        if self._executor.closed:
            return
        self._executor.close()
        if self._owns_session and self._session is not None:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
