from fastapi import APIRouter, Depends

from shortlinks.db.Connection import database
from shortlinks.db.repository import LinkStore

router = APIRouter(tags=["health"])

# simple liveness
@router.get("/health")
def health():
    return {"status": "ok"}

# readiness: check DB + Redis connectivity
@router.get("/ready")
def readiness(store: LinkStore = Depends(database.get_link_store)):
    details = {"db": "ok" if store.ping() else "error"}
    if store.cache is None:
        details["redis"] = "disabled"
    else:
        details["redis"] = "ok" if store.cache.ping() else "error"

    # A Redis outage only degrades performance
    ready = details["db"] == "ok"
    return {"ready": ready, "details": details}
