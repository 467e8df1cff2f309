"""HTTP helpers shared by the client-side commands."""

import os
import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def get_server_url() -> str:
    """Server URL from AID_SERVER (default http://localhost:8000)."""
    return os.environ.get("AID_SERVER", "http://localhost:8000").rstrip("/")


def auth_headers() -> dict[str, str]:
    """Bearer header from AID_TOKEN, if set."""
    token = os.environ.get("AID_TOKEN")
    return {"Authorization": f"Bearer {token}"} if token else {}


def with_retry(
    fn: Callable[[], T],
    retries: int = 3,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Retry a function on transient errors with linear backoff.

    Raises:
        The last exception if all retries fail.
    """
    last_error: Exception | None = None
    for attempt in range(retries + 1):
        try:
            return fn()
        except exceptions as e:
            last_error = e
            if attempt < retries:
                time.sleep(0.2 * (attempt + 1))
    assert last_error is not None
    raise last_error
