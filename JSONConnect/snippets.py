"""
Small runnable examples of the two calls, async first and then the blocking contrast.

    python -m JSONConnect.snippets
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from .api_client_factory import ENDPOINT_CONFIGS, Endpoint
from .exceptions import APIError
from .top import SyncAPIClient, AsyncAPIClient

logger = logging.getLogger(__name__)

DEFAULT_URL = ENDPOINT_CONFIGS[Endpoint.EXAMPLE].url


async def suspend_and_resume(delay: float = 1.0, value: Any = "done") -> Any:
    """Suspend for `delay` seconds, then resume and return `value`."""
    logger.info(f"Suspending for {delay}s")
    await asyncio.sleep(delay)
    logger.info("Resumed")
    return value

async def fetch_data(url: str = DEFAULT_URL, **kwargs) -> Any:
    """Async GET; the calling task waits on the network and resumes with the JSON body."""
    async with AsyncAPIClient(**kwargs) as client:
        return await client.get(url)

async def post_data(url: str = DEFAULT_URL, payload: Any = None, **kwargs) -> Any:
    """Async POST of a JSON payload."""
    async with AsyncAPIClient(**kwargs) as client:
        return await client.post(url, payload)

def fetch_data_sync(url: str = DEFAULT_URL, **kwargs) -> Any:
    """Blocking GET, no event loop involved."""
    with SyncAPIClient(**kwargs) as client:
        return client.get(url)

def post_data_sync(url: str = DEFAULT_URL, payload: Any = None, **kwargs) -> Any:
    with SyncAPIClient(**kwargs) as client:
        return client.post(url, payload)

def print_or_raise(func: Callable, *args, raise_errors: bool = False, **kwargs) -> Optional[Any]:
    """Call `func`; on a failed request print the error and return None instead of raising."""
    try:
        return func(*args, **kwargs)
    except APIError as e:
        if raise_errors:
            raise
        if e.status_code is not None:
            print(f"Request failed with status {e.status_code}: {e}")
        else:
            print(f"Request failed: {e}")
        return None


def main():
  """ demo """
  logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

  print(asyncio.run(suspend_and_resume(0.5, "resumed after sleeping")))

  print(print_or_raise(lambda: asyncio.run(fetch_data(DEFAULT_URL))))
  print(print_or_raise(lambda: asyncio.run(post_data(DEFAULT_URL, {"key": "value"}))))

  print(print_or_raise(fetch_data_sync, DEFAULT_URL))
  print(print_or_raise(post_data_sync, DEFAULT_URL, {"key": "value"}))

if __name__ == '__main__':
  main()
