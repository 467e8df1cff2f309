from .client import auth_headers, get_server_url, with_retry

__all__ = ["auth_headers", "get_server_url", "with_retry"]
