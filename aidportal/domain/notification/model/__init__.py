from .template import RenderedMessage, render
from .value import Recipient

__all__ = ["Recipient", "RenderedMessage", "render"]
