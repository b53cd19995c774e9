""" API Client Factory System with Endpoint Configuration """

import os, json, logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Any, Callable

from .top import SyncAPIClient, AsyncAPIClient
from .utils import is_absolute_url

logger = logging.getLogger(__name__)


class Endpoint(Enum):
    """Enum for the configured API endpoints."""
    EXAMPLE = "example"
    HTTPBIN = "httpbin"

@dataclass
class EndpointConfig:
    """Configuration for a JSON API endpoint."""
    name: str
    base_url: str
    path: str = ""
    api_key_env_var: Optional[str] = None
    require_api_key: bool = False
    default_timeout: float = 30.0
    default_headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate base url and timeout."""
        if not is_absolute_url(self.base_url):
            raise ValueError(f"base_url for {self.name} must be an absolute http(s) URL, got '{self.base_url}'")
        if self.default_timeout <= 0:
            raise ValueError(f"default_timeout for {self.name} must be positive, got {self.default_timeout}")

    @property
    def url(self) -> str:
        """Full URL of the endpoint's default resource."""
        if not self.path:
            return self.base_url.rstrip('/')
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"

    def get_api_key(self, provided_key: Optional[str] = None) -> Optional[str]:
        """Get API key from provided key or environment variable."""
        if provided_key:
            return provided_key

        api_key = os.getenv(self.api_key_env_var) if self.api_key_env_var else None
        if not api_key and self.require_api_key:
            raise ValueError(f"API key not found. Please provide it or set {self.api_key_env_var} environment variable.")
        return api_key


def load_endpoint_configs(config_file_path: Optional[str] = None) -> Dict[Endpoint, EndpointConfig]:
    """Load endpoint configurations from JSON file."""
    if config_file_path is None:
        config_file_path = os.path.join(os.path.dirname(__file__), 'endpoint_configs.json')

    try:
        with open(config_file_path, 'r') as f: raw_configs = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Endpoint configuration file not found at {config_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in endpoint configuration file: {e}")

    endpoint_configs = {}
    for endpoint_key, config_data in raw_configs.items():
        try:
            endpoint_type = Endpoint(endpoint_key)
        except ValueError:
            logger.debug(f"Skipping unknown endpoint '{endpoint_key}' in {config_file_path}")
            continue
        endpoint_configs[endpoint_type] = EndpointConfig(**config_data)

    return endpoint_configs



class APIClientFactory:
    """Factory class for creating API clients with endpoint-specific configurations."""

    @staticmethod
    def _client_kwargs(endpoint: Endpoint, api_key: Optional[str], timeout: Optional[float],
                       kwargs: Dict[str, Any]) -> Dict[str, Any]:
        config = ENDPOINT_CONFIGS[endpoint]
        headers = dict(config.default_headers)
        headers.update(kwargs.pop('headers', None) or {})
        return dict(
            base_url=kwargs.pop('base_url', None) or config.base_url,
            api_key=config.get_api_key(api_key),
            timeout=config.default_timeout if timeout is None else timeout,
            headers=headers,
            **kwargs
        )

    @staticmethod
    def create_sync_client(
        endpoint: Endpoint,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> SyncAPIClient:
        """Create a synchronous API client for the specified endpoint."""
        return SyncAPIClient(**APIClientFactory._client_kwargs(endpoint, api_key, timeout, kwargs))

    @staticmethod
    def create_async_client(
        endpoint: Endpoint,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> AsyncAPIClient:
        """Create an asynchronous API client for the specified endpoint."""
        return AsyncAPIClient(**APIClientFactory._client_kwargs(endpoint, api_key, timeout, kwargs))

    @staticmethod
    def get_endpoint_info(endpoint: Endpoint) -> Dict[str, Any]:
        """Get comprehensive information about an endpoint."""
        config = ENDPOINT_CONFIGS[endpoint]
        return {
            "name": config.name,
            "base_url": config.base_url,
            "path": config.path,
            "url": config.url,
            "api_key_env_var": config.api_key_env_var,
            "require_api_key": config.require_api_key,
            "default_timeout": config.default_timeout,
            "default_headers": dict(config.default_headers)
        }


def _make_sync_client_func(endpoint: Endpoint) -> Callable:
    """Create a sync client factory function for a specific endpoint."""
    def create_sync_client(
        api_key: Optional[str] = None,
        **kwargs
    ) -> SyncAPIClient:
        return APIClientFactory.create_sync_client(endpoint=endpoint, api_key=api_key, **kwargs)

    endpoint_name = endpoint.value
    create_sync_client.__name__ = f"create_{endpoint_name}_sync_client"
    create_sync_client.__doc__ = f"Create a synchronous {endpoint_name} API client."
    return create_sync_client


def _make_async_client_func(endpoint: Endpoint) -> Callable:
    """Create an async client factory function for a specific endpoint."""
    def create_async_client(
        api_key: Optional[str] = None,
        **kwargs
    ) -> AsyncAPIClient:
        return APIClientFactory.create_async_client(endpoint=endpoint, api_key=api_key, **kwargs)

    endpoint_name = endpoint.value
    create_async_client.__name__ = f"create_{endpoint_name}_async_client"
    create_async_client.__doc__ = f"Create an asynchronous {endpoint_name} API client."
    return create_async_client



# Endpoint configurations
ENDPOINT_CONFIGS = load_endpoint_configs()

# Generate create_<endpoint>_{sync,async}_client for every configured endpoint
for endpoint in ENDPOINT_CONFIGS.keys():
    sync_func = _make_sync_client_func(endpoint)
    async_func = _make_async_client_func(endpoint)

    globals()[sync_func.__name__] = sync_func
    globals()[async_func.__name__] = async_func
