import json
from urllib.parse import urlparse

from .exceptions import PayloadError


def validate_payload(payload):
  # Make sure the payload survives json.dumps before anything goes on the wire
  try:
    json.dumps(payload, allow_nan=False)
  except (TypeError, ValueError) as e:
    raise PayloadError(f"Payload is not JSON-serializable: {e}") from e


def is_absolute_url(url):
  parsed = urlparse(url)
  return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def join_url(base_url, path):
  """Join `path` onto `base_url`, leaving absolute URLs untouched."""
  if is_absolute_url(path):
    return path
  if not base_url:
    raise ValueError(f"Relative URL '{path}' given but no base_url is configured")
  if not path:
    return base_url.rstrip('/')
  return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
