from .provider import AidProvider

__all__ = ["AidProvider"]
