from .repository import AidRequestRepository
from .storage import AttachmentStorage

__all__ = ["AidRequestRepository", "AttachmentStorage"]
