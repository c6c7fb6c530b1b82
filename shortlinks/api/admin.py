from fastapi import APIRouter, Depends, HTTPException, status, Query
import logging

from shortlinks.core.config import settings
from shortlinks.core.errors import NotFoundError, StorageFailureError
from shortlinks.db.Connection import database
from shortlinks.db.repository import LinkStore
from shortlinks.schemas.LinkInfoResponse import LinkInfoResponse
from shortlinks.schemas.PaginatedLinkList import PaginatedLinkList
from shortlinks.services.Analytics import LinkAnalytics

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/list", response_model=PaginatedLinkList)
def list_links_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    store: LinkStore = Depends(database.get_link_store)
):
    """Paginated listing of all short links, newest first."""
    try:
        total, links = LinkAnalytics.get_all(store, skip, limit)
    except StorageFailureError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error")
    return PaginatedLinkList(total=total, skip=skip, limit=limit, links=links)

@router.get("/analytics/total_clicks", response_model=dict)
def get_total_clicks(store: LinkStore = Depends(database.get_link_store)):
    try:
        total_clicks = LinkAnalytics.total_clicks(store)
    except StorageFailureError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error")
    return {"total_clicks": total_clicks}

@router.get("/stats/{link_id}", response_model=LinkInfoResponse)
def get_link_statistics_endpoint(link_id: str, store: LinkStore = Depends(database.get_link_store)):
    """Metadata for a short link. Does not count as a click."""
    try:
        record = store.get(link_id)
    except NotFoundError:
        logger.warning(f"Stats 404: Short code not found: {link_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="URL not found")
    except StorageFailureError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error")
    return LinkInfoResponse.from_record(record, settings.BASE_URL)
