from typing import Protocol


class Port(Protocol):
    """Marker base for domain-side interfaces implemented by infrastructure adapters."""
