# re-export common schemas for simpler imports
from .LinkRecord import LinkRecord
from .LinkCreateRequest import LinkCreateRequest
from .LinkInfoResponse import LinkInfoResponse
from .PaginatedLinkList import PaginatedLinkList

__all__ = [
    "LinkRecord",
    "LinkCreateRequest",
    "LinkInfoResponse",
    "PaginatedLinkList",
]
