"""JSONConnect - JSON-over-HTTP clients, blocking (requests) and async (aiohttp)."""

# Import key classes for easier access
from .top import (
    SyncAPIClient,
    AsyncAPIClient,
    get_json,
    post_json,
    async_get_json,
    async_post_json
)
from .base import SyncHTTPClient, AsyncHTTPClient
from .models import HTTPRequest, HTTPResponse
from .exceptions import (
    APIError,
    HTTPStatusError,
    TimeoutError,
    ConnectionError,
    ResponseDecodeError,
    PayloadError
)
from .api_client_factory import (
    create_example_sync_client,
    create_example_async_client,
    create_httpbin_sync_client,
    create_httpbin_async_client,
    APIClientFactory,
    Endpoint
)

__version__ = "0.1.0"
