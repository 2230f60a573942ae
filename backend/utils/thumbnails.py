import logging

from rq import Retry

from database.models import ContentItem

logger = logging.getLogger(__name__)


class ThumbnailGenerator:
    """Hands content items to the background thumbnail job; never raises."""

    def __init__(self, queue, job_path: str):
        self._queue = queue
        self._job_path = job_path

    def create_thumbnails(self, content_item: ContentItem) -> None:
        if not content_item.uri:
            return
        try:
            self._queue.enqueue(
                self._job_path,
                str(content_item.content_item_id),
                content_item.uri,
                content_item.media_type,
                job_timeout=300,
                retry=Retry(max=3, interval=[10, 30, 60]),
            )
        except Exception:
            logger.exception(
                "thumbnail_enqueue_failed content_item_id=%s uri=%s",
                content_item.content_item_id,
                content_item.uri,
            )


class NullThumbnailGenerator:
    def create_thumbnails(self, content_item: ContentItem) -> None:
        logger.debug(
            "thumbnail_generation_disabled content_item_id=%s",
            content_item.content_item_id,
        )
