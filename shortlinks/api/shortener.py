from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
import logging

from shortlinks.core.config import settings
from shortlinks.core.errors import InvalidInputError, NotFoundError, StorageFailureError
from shortlinks.db.Connection import database
from shortlinks.db.repository import LinkStore
from shortlinks.schemas.LinkCreateRequest import LinkCreateRequest
from shortlinks.schemas.LinkInfoResponse import LinkInfoResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/shorten", response_model=LinkInfoResponse, status_code=status.HTTP_201_CREATED)
def shorten_url_endpoint(link_request: LinkCreateRequest, store: LinkStore = Depends(database.get_link_store)):
    try:
        record = store.create_link(link_request.target)
    except InvalidInputError as e:
        logger.warning(f"Rejected shorten request for {link_request.target[:50]!r}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageFailureError as e:
        logger.error(f"Failed to create short URL for {link_request.target[:50]}.. due to: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error")

    logger.info(f"API success: Shortened {record.target[:50]}... to {record.id}")
    return LinkInfoResponse.from_record(record, settings.BASE_URL)

@router.get("/{link_id}", tags=["redirect"])
def redirect_to_url_endpoint(link_id: str, store: LinkStore = Depends(database.get_link_store)):
    try:
        target = store.resolve_and_track(link_id)
    except NotFoundError:
        logger.warning(f"Redirect 404: Short code not found: {link_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="link is dead")
    except StorageFailureError as e:
        logger.error(f"Redirect failed for {link_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
