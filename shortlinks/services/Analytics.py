from typing import Tuple, List

from shortlinks.core.config import settings
from shortlinks.db.repository import LinkStore
from shortlinks.schemas.LinkInfoResponse import LinkInfoResponse


class LinkAnalytics:
    @staticmethod
    def get_all(store: LinkStore, skip: int, limit: int) -> Tuple[int, List[LinkInfoResponse]]:
        total = store.count()
        links = [
            LinkInfoResponse.from_record(record, settings.BASE_URL)
            for record in store.list_links(skip=skip, limit=limit)
        ]
        return total, links

    @staticmethod
    def total_clicks(store: LinkStore) -> int:
        return store.total_clicks()
